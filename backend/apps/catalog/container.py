from __future__ import annotations

from django.core.cache import cache

from .repositories import ProductRepository, SlideRepository
from .services import CatalogService, DashboardService, ProductAdminService, SlideService


def build_catalog_service(*, disable_cache: bool = False) -> CatalogService:
    return CatalogService(
        products=ProductRepository(),
        slides=SlideRepository(),
        cache_backend=cache,
        disable_cache=disable_cache,
    )


def build_product_admin_service() -> ProductAdminService:
    return ProductAdminService(products=ProductRepository(), cache_backend=cache)


def build_slide_service() -> SlideService:
    return SlideService(slides=SlideRepository())


def build_dashboard_service() -> DashboardService:
    return DashboardService(products=ProductRepository())
