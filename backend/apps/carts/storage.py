"""Guest persistence for the cart and wishlist.

Snapshots are JSON strings shaped ``{"state": {"items": [...]}}`` so a
guest's basket survives between visits without an account.
"""
import json
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from apps.catalog.dtos import ProductDTO
from apps.common import get_logger
from .dtos import LineItem
from .protocols import KeyValueStorage

GUEST_CART_KEY = "aries-mall-cart"
GUEST_WISHLIST_KEY = "aries-mall-wishlist"
# Set once the visitor has been told their saved cart is unreachable.
OFFLINE_NOTICE_KEY = "aries-mall-offline-notice"

logger = get_logger(__name__).bind(component="carts", layer="storage")


class SessionStorage:
    """Backs guest snapshots with the Django session of the current visitor."""

    def __init__(self, session):
        self.session = session

    def get_item(self, key: str) -> Optional[str]:
        return self.session.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.session[key] = value

    def remove_item(self, key: str) -> None:
        self.session.pop(key, None)


class MemoryStorage:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


def read_snapshot(storage: KeyValueStorage, key: str) -> List[Any]:
    raw = storage.get_item(key)
    if not raw:
        return []
    try:
        items = json.loads(raw)["state"]["items"]
    except (ValueError, KeyError, TypeError):
        logger.warning("Discarding unreadable guest snapshot", key=key)
        return []
    return items if isinstance(items, list) else []


def write_snapshot(storage: KeyValueStorage, key: str, items: List[Any]) -> None:
    storage.set_item(key, json.dumps({"state": {"items": items}}))


def clear_guest_data(storage: KeyValueStorage) -> None:
    storage.remove_item(GUEST_CART_KEY)
    storage.remove_item(GUEST_WISHLIST_KEY)


def line_to_snapshot(line: LineItem) -> Dict[str, Any]:
    p = line.product
    return {
        "id": p.id,
        "name": p.name,
        "brand": p.brand,
        "category": p.category,
        "price": str(p.price),
        "rating": p.rating,
        "description": p.description,
        "images": list(p.images),
        "features": list(p.features),
        "warranty": p.warranty,
        "quantity": line.quantity,
    }


def line_from_snapshot(raw: Dict[str, Any]) -> Optional[LineItem]:
    try:
        product = ProductDTO(
            id=int(raw["id"]),
            name=str(raw.get("name") or ""),
            brand=str(raw.get("brand") or ""),
            category=str(raw.get("category") or ""),
            price=Decimal(str(raw.get("price") or "0")),
            rating=float(raw.get("rating") or 0),
            description=str(raw.get("description") or ""),
            images=[str(u or "") for u in raw.get("images") or []],
            features=[str(f) for f in raw.get("features") or []],
            warranty=str(raw.get("warranty") or ""),
        )
        quantity = int(raw.get("quantity") or 0)
    except (KeyError, TypeError, ValueError, InvalidOperation):
        return None
    if quantity <= 0:
        return None
    return LineItem(product=product, quantity=quantity)


def wishlist_from_snapshot(items: List[Any]) -> List[int]:
    ids: List[int] = []
    for raw in items:
        try:
            pid = int(raw)
        except (TypeError, ValueError):
            continue
        if pid not in ids:
            ids.append(pid)
    return ids
