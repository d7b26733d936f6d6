from __future__ import annotations

from typing import List, Optional, Protocol, Sequence

from apps.catalog.dtos import ProductDTO
from .dtos import RemoteCartRow


class KeyValueStorage(Protocol):
    """String-valued persistence with the semantics of browser local storage."""

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class CartBackendProtocol(Protocol):
    def list_rows(self, user_id: int) -> List[RemoteCartRow]: ...

    def upsert_quantity(self, user_id: int, product_id: int, quantity: int) -> None: ...

    def remove(self, user_id: int, product_id: int) -> None: ...


class WishlistBackendProtocol(Protocol):
    def list_product_ids(self, user_id: int) -> List[int]: ...

    def add(self, user_id: int, product_id: int) -> None: ...

    def remove(self, user_id: int, product_id: int) -> None: ...


class ProductLookupProtocol(Protocol):
    def get_products_by_ids(self, ids: Sequence[int]) -> List[ProductDTO]: ...

