from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import Mock

from apps.catalog.dtos import CategoryCountDTO, DashboardStatsDTO, ProductDTO, SlideDTO
from apps.storefront.tests.fakes import make_ctx

ADMIN = SimpleNamespace(user_id=1, email="admin@ariesmall.com", display_name="Admin", is_admin=True)
SHOPPER = SimpleNamespace(user_id=2, email="asha@example.com", display_name="Asha", is_admin=False)


def product(pk, name, category="Furniture", brand="Comfy", price="1200.00", images=None, created_at=None):
    return ProductDTO(
        id=pk,
        name=name,
        brand=brand,
        category=category,
        price=Decimal(price),
        rating=4.5,
        description="",
        images=list(images if images is not None else [f"https://img/{pk}.jpg"]),
        features=["Solid wood", "Easy assembly"],
        warranty="1 year",
        created_at=created_at,
    )


def slide(pk, title="Summer Sale", active=True):
    return SlideDTO(
        id=pk,
        title=title,
        description="Up to 50% off",
        button_text="Shop",
        button_link="#/category/furniture",
        image_url_desktop="https://img/desk.jpg",
        image_url_mobile="https://img/mob.jpg",
        thumbnail_url="",
        show_overlay=True,
        fit_desktop="cover",
        fit_mobile="contain",
        is_active=active,
        created_at="2025-10-20T09:30:00+00:00",
    )


PRODUCTS = [
    product(3, "Luxury Leather Sofa", images=["https://img/sofa.jpg", "https://img/sofa-2.jpg", "https://img/sofa-3.jpg"]),
    product(4, "Oak Dining Table", brand="", price="850.00", images=[]),
    product(1, "Headphones", category="Electronics", brand="Sonic", price="2999.00"),
]

STATS = DashboardStatsDTO(
    total_products=3,
    unique_categories=2,
    category_counts=[CategoryCountDTO("Furniture", 2), CategoryCountDTO("Electronics", 1)],
    latest_products=PRODUCTS,
)


def admin_services(session=ADMIN):
    sessions = Mock()
    sessions.current.return_value = session
    products = Mock()
    products.list_products.return_value = list(PRODUCTS)
    slides = Mock()
    slides.list_slides.return_value = [slide(1), slide(2, "Clearance", active=False)]
    dashboard = Mock()
    dashboard.stats.return_value = STATS
    history = Mock()
    history.recent.return_value = []
    config = Mock()
    config.public_view.return_value = {"CLOUDINARY_CLOUD_NAME": "demo", "TINYPNG_API_KEY": "***abcd"}
    return {
        "sessions": sessions,
        "products": products,
        "slides": slides,
        "dashboard": dashboard,
        "uploader": Mock(),
        "upscaler": Mock(),
        "history": history,
        "config": config,
    }


def make_admin_ctx(path="/dashboard", query=None, services=None):
    return make_ctx(path=path, query=query, services=services or admin_services())
