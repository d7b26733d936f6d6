from __future__ import annotations

from decimal import Decimal
from typing import Optional

from django.conf import settings

from apps.catalog.container import build_catalog_service
from .dtos import StoreSession
from .protocols import KeyValueStorage
from .repositories import CartItemRepository, WishlistItemRepository
from .storage import SessionStorage
from .store import ShopStore


def session_from_user(user) -> Optional[StoreSession]:
    if user is None or not getattr(user, "is_authenticated", False):
        return None
    return StoreSession(
        user_id=user.id,
        email=getattr(user, "email", "") or "",
        display_name=getattr(user, "display_name", None),
    )


def build_shop_store(request, storage: Optional[KeyValueStorage] = None) -> ShopStore:
    return ShopStore(
        storage=storage or SessionStorage(request.session),
        carts=CartItemRepository(),
        wishlists=WishlistItemRepository(),
        products=build_catalog_service(),
        session_provider=lambda: session_from_user(getattr(request, "user", None)),
        tax_rate=Decimal(str(settings.STORE_TAX_RATE)),
    )
