from django.urls import path
from .views import (
    AdminProductDetailView,
    AdminProductListView,
    AdminSlideDetailView,
    AdminSlideListView,
    CategoryListView,
    DashboardView,
    HeroSlideListView,
    ProductDetailView,
    ProductListView,
)

urlpatterns = [
    path("products/", ProductListView.as_view(), name="api-products-list"),
    path("products/<int:product_id>/", ProductDetailView.as_view(), name="api-products-detail"),
    path("categories/", CategoryListView.as_view(), name="api-categories-list"),
    path("slides/", HeroSlideListView.as_view(), name="api-slides-list"),
]

admin_urlpatterns = [
    path("products/", AdminProductListView.as_view(), name="api-admin-products"),
    path("products/<int:product_id>/", AdminProductDetailView.as_view(), name="api-admin-products-detail"),
    path("slides/", AdminSlideListView.as_view(), name="api-admin-slides"),
    path("slides/<int:slide_id>/", AdminSlideDetailView.as_view(), name="api-admin-slides-detail"),
    path("dashboard/", DashboardView.as_view(), name="api-admin-dashboard"),
]
