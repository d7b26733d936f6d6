from django.db import models
from django.utils import timezone

from apps.catalog.models import Product
from apps.users.models import User


class CartItem(models.Model):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="cart_items")
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="+")
    quantity = models.PositiveIntegerField(default=1)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "cart_items"
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(fields=["user", "product"], name="cart_items_user_product_unique")
        ]

    def __str__(self):
        return f"{self.quantity} x {self.product_id} for {self.user_id}"


class WishlistItem(models.Model):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="wishlist_items")
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="+")
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "wishlist_items"
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(fields=["user", "product"], name="wishlist_items_user_product_unique")
        ]
