from django.urls import path

from .views import CartItemView, CartView, WishlistView

urlpatterns = [
    path("cart/", CartView.as_view(), name="api-cart"),
    path("cart/<int:product_id>/", CartItemView.as_view(), name="api-cart-item"),
    path("wishlist/", WishlistView.as_view(), name="api-wishlist"),
]
