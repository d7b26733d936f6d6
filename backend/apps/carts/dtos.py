from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Optional

from apps.catalog.dtos import ProductDTO


@dataclass
class LineItem:
    product: ProductDTO
    quantity: int

    @property
    def product_id(self) -> int:
        return self.product.id

    @property
    def line_total(self) -> Decimal:
        return self.product.price * self.quantity


@dataclass
class CartSummary:
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    item_count: int


@dataclass
class StoreEvent:
    kind: str
    payload: Dict[str, Any] = field(default_factory=dict)


@dataclass
class RemoteCartRow:
    product_id: int
    quantity: int


@dataclass
class StoreSession:
    """The identity the store is bound to; ``None`` stands for a guest."""

    user_id: int
    email: str = ""
    display_name: Optional[str] = None
