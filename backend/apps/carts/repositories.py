from typing import List

from apps.common.repository import GenericRepository
from .dtos import RemoteCartRow
from .models import CartItem, WishlistItem


class CartItemRepository(GenericRepository[CartItem]):
    def __init__(self):
        super().__init__(CartItem)

    def list_rows(self, user_id: int) -> List[RemoteCartRow]:
        rows = self.model.objects.filter(user_id=user_id).order_by("id").values_list("product_id", "quantity")
        return [RemoteCartRow(product_id=pid, quantity=qty) for pid, qty in rows]

    def upsert_quantity(self, user_id: int, product_id: int, quantity: int) -> None:
        self.upsert({"user_id": user_id, "product_id": product_id}, quantity=quantity)

    def remove(self, user_id: int, product_id: int) -> None:
        self.delete_where(user_id=user_id, product_id=product_id)


class WishlistItemRepository(GenericRepository[WishlistItem]):
    def __init__(self):
        super().__init__(WishlistItem)

    def list_product_ids(self, user_id: int) -> List[int]:
        return list(
            self.model.objects.filter(user_id=user_id).order_by("id").values_list("product_id", flat=True)
        )

    def add(self, user_id: int, product_id: int) -> None:
        self.model.objects.get_or_create(user_id=user_id, product_id=product_id)

    def remove(self, user_id: int, product_id: int) -> None:
        self.delete_where(user_id=user_id, product_id=product_id)
