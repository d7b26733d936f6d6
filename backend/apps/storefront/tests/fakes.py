from decimal import Decimal

from apps.carts.storage import MemoryStorage
from apps.carts.store import ShopStore
from apps.carts.tests.fakes import FakeCartBackend, FakeProductLookup, FakeWishlistBackend
from apps.catalog.dtos import ProductDTO
from apps.storefront.document import NavigationToken, PageContext, PageDocument
from apps.storefront.events import EventRegistry
from apps.storefront.ui import Toaster


def product(pk, name=None, category="Electronics", brand="Aries", price="100.00", rating=4.0, images=None):
    return ProductDTO(
        id=pk,
        name=name or f"Product {pk}",
        brand=brand,
        category=category,
        price=Decimal(price),
        rating=rating,
        description=f"About product {pk}",
        images=images if images is not None else [f"https://img.example/{pk}.jpg"],
    )


CATALOG = [
    product(1, "Noise Cancelling Headphones", "Electronics", "Sonic", "2999.00", 4.5),
    product(2, "Smart Watch", "Electronics", "Pulse", "4999.00", 4.1),
    product(3, "Luxury Leather Sofa", "Furniture", "Comfy", "1200.00", 4.8),
    product(4, "Oak Dining Table", "Furniture", "", "850.00", 3.9),
    product(5, "Bluetooth Speaker", "Electronics", "Sonic", "1499.00", 4.3),
]


class FakeCatalog:
    """Async catalog over an in-memory product list."""

    def __init__(self, products=None, slides=None):
        self.products = list(CATALOG if products is None else products)
        self.slides = list(slides or [])
        self.calls = []

    async def list_products(self):
        self.calls.append(("list_products",))
        return list(self.products)

    async def get_product(self, product_id):
        self.calls.append(("get_product", product_id))
        try:
            pk = int(product_id)
        except (TypeError, ValueError):
            return None
        return next((p for p in self.products if p.id == pk), None)

    async def get_products_by_ids(self, ids):
        found = {p.id: p for p in self.products}
        return [found[i] for i in ids if i in found]

    async def list_categories(self):
        return sorted({p.category for p in self.products})

    async def list_by_category(self, slug, brand=None):
        self.calls.append(("list_by_category", slug, brand))
        rows = [p for p in self.products if p.category.lower() == slug.replace("-", " ")]
        if brand:
            rows = [p for p in rows if p.brand.lower() == brand.lower()]
        return rows

    async def search(self, query):
        needle = query.lower()
        return [p for p in self.products if needle in p.name.lower() or needle in p.category.lower()]

    async def related_products(self, item, limit=4):
        return [p for p in self.products if p.category == item.category and p.id != item.id][:limit]

    async def list_hero_slides(self):
        return list(self.slides)


def make_store(session=None, storage=None, products=None):
    store = ShopStore(
        storage=storage or MemoryStorage(),
        carts=FakeCartBackend(),
        wishlists=FakeWishlistBackend(),
        products=FakeProductLookup(products or CATALOG),
        session_provider=lambda: session,
    )
    store.initialize()
    return store


class FakeRouter:
    next_location = None


def make_ctx(path="/", params=None, query=None, catalog=None, store=None, services=None, theme=None):
    return PageContext(
        document=PageDocument("Aries Mall"),
        token=NavigationToken(id=1, path=path),
        path=path,
        params=dict(params or {}),
        query=dict(query or {}),
        catalog=catalog or FakeCatalog(),
        store=store or make_store(),
        toasts=Toaster(),
        events=EventRegistry(),
        router=FakeRouter(),
        theme=theme,
        services=dict(services or {}),
    )


class FakeTemplate:
    def __init__(self, name):
        self.name = name

    def render(self, context=None, request=None):
        regions = (context or {}).get("regions", {})
        return f"[{self.name}]" + "".join(regions.values())


def fake_loader(name):
    return FakeTemplate(name)
