import types
import unittest
from decimal import Decimal

from apps.catalog.services import (
    CatalogService,
    DashboardService,
    ProductAdminService,
    ProductListCache,
    SlideService,
)


class FakeCache:
    def __init__(self):
        self.store = {}

    def get(self, key, default=None):
        return self.store.get(key, default)

    def set(self, key, value, timeout=None):
        self.store[key] = value


def make_product(pk, name, category, price, brand="", rating=4.0, created_at=None, images=None):
    return types.SimpleNamespace(
        id=pk,
        name=name,
        brand=brand,
        category=category,
        price=Decimal(str(price)),
        rating=Decimal(str(rating)),
        description="",
        images=images if images is not None else [f"https://img/{pk}.jpg"],
        features=[],
        warranty="",
        created_at=created_at,
    )


class FakeProductRepository:
    def __init__(self, products=None):
        self._products = {p.id: p for p in (products or [])}
        self._pk = max(self._products, default=0) + 1
        self.list_calls = 0

    def list(self, **filters):
        self.list_calls += 1
        rows = list(self._products.values())
        if "category" in filters:
            rows = [p for p in rows if p.category == filters["category"]]
        return rows

    def get(self, **filters):
        return self._products.get(filters.get("id"))

    def list_by_ids(self, ids):
        return [self._products[i] for i in ids if i in self._products]

    def list_by_category(self, category, brand=None):
        rows = [p for p in self._products.values() if p.category.lower() == category.lower()]
        if brand:
            rows = [p for p in rows if p.brand.lower() == brand.lower()]
        return rows

    def search(self, query):
        q = query.lower()
        return [
            p for p in self._products.values()
            if q in p.name.lower() or q in p.brand.lower() or q in p.category.lower()
        ]

    def latest(self, limit):
        return list(self._products.values())[::-1][:limit]

    def category_counts(self):
        counts = {}
        for p in self._products.values():
            counts[p.category] = counts.get(p.category, 0) + 1
        return list(counts.items())

    def count(self, **filters):
        return len(self._products)

    def create(self, **data):
        data.setdefault("images", [])
        data.setdefault("features", [])
        data.setdefault("rating", Decimal("0"))
        product = types.SimpleNamespace(id=self._pk, created_at=None, **{
            "brand": "", "description": "", "warranty": "", **data
        })
        self._products[self._pk] = product
        self._pk += 1
        return product

    def update(self, obj, **data):
        for key, value in data.items():
            setattr(obj, key, value)
        return obj

    def delete(self, obj):
        self._products.pop(obj.id, None)


class BrokenProductRepository(FakeProductRepository):
    def list(self, **filters):
        raise RuntimeError("database unavailable")

    def get(self, **filters):
        raise RuntimeError("database unavailable")

    def search(self, query):
        raise RuntimeError("database unavailable")


def make_slide(pk, active=True, title="Slide"):
    return types.SimpleNamespace(
        id=pk,
        title=title,
        description="desc",
        button_text="Shop",
        button_link="/category/audio",
        image_url_desktop="https://img/d.jpg",
        image_url_mobile="https://img/m.jpg",
        thumbnail_url="https://img/t.jpg",
        show_overlay=True,
        fit_desktop="cover",
        fit_mobile="contain",
        is_active=active,
        created_at=None,
    )


class FakeSlideRepository:
    def __init__(self, slides=None):
        self._slides = {s.id: s for s in (slides or [])}
        self._pk = max(self._slides, default=0) + 1

    def list(self, **filters):
        rows = list(self._slides.values())
        if "is_active" in filters:
            rows = [s for s in rows if s.is_active == filters["is_active"]]
        return rows

    def list_active(self):
        return self.list(is_active=True)

    def get(self, **filters):
        return self._slides.get(filters.get("id"))

    def create(self, **data):
        slide = make_slide(self._pk)
        for key, value in data.items():
            setattr(slide, key, value)
        self._slides[self._pk] = slide
        self._pk += 1
        return slide

    def update(self, obj, **data):
        for key, value in data.items():
            setattr(obj, key, value)
        return obj

    def delete(self, obj):
        self._slides.pop(obj.id, None)


CATALOG = [
    make_product(1, "Galaxy Buds", "Audio", 4999, brand="Samsung", rating=4.2),
    make_product(2, "WH-1000XM5", "Audio", 29990, brand="Sony", rating=4.8),
    make_product(3, "Inverter AC", "Home Appliances", 38990, brand="LG", rating=4.1),
    make_product(4, "Bravia 55", "Televisions", 64990, brand="Sony", rating=4.6),
]


class CatalogServiceTests(unittest.TestCase):
    def setUp(self):
        self.repo = FakeProductRepository(list(CATALOG))
        self.service = CatalogService(self.repo, FakeSlideRepository([make_slide(1), make_slide(2, active=False)]), FakeCache())

    def test_list_products_is_cached_until_version_bump(self):
        self.service.list_products()
        self.service.list_products()
        self.assertEqual(self.repo.list_calls, 1)
        self.service.cache.bump()
        self.service.list_products()
        self.assertEqual(self.repo.list_calls, 2)

    def test_get_product_rejects_non_numeric_and_missing(self):
        self.assertIsNone(self.service.get_product("abc"))
        self.assertIsNone(self.service.get_product(999))
        self.assertEqual(self.service.get_product("2").name, "WH-1000XM5")

    def test_get_products_by_ids_preserves_requested_order_and_skips_unknown(self):
        rows = self.service.get_products_by_ids([3, "x", 99, 1])
        self.assertEqual([p.id for p in rows], [3, 1])
        self.assertEqual(self.service.get_products_by_ids([]), [])

    def test_list_categories_distinct_and_sorted(self):
        self.assertEqual(self.service.list_categories(), ["Audio", "Home Appliances", "Televisions"])

    def test_list_by_category_resolves_slug_and_brand(self):
        rows = self.service.list_by_category("home-appliances")
        self.assertEqual([p.id for p in rows], [3])
        rows = self.service.list_by_category("audio", "sony")
        self.assertEqual([p.id for p in rows], [2])

    def test_unknown_category_yields_empty(self):
        self.assertEqual(self.service.list_by_category("garden"), [])

    def test_search_blank_query_is_empty(self):
        self.assertEqual(self.service.search("   "), [])
        self.assertEqual({p.id for p in self.service.search("sony")}, {2, 4})

    def test_related_products_excludes_self(self):
        product = self.service.get_product(1)
        related = self.service.related_products(product)
        self.assertEqual([p.id for p in related], [2])

    def test_hero_slides_only_active_with_client_keys(self):
        slides = self.service.list_hero_slides()
        self.assertEqual(len(slides), 1)
        self.assertEqual(slides[0]["backgroundImageDesktop"], "https://img/d.jpg")
        self.assertTrue(slides[0]["overlay"])
        self.assertEqual(slides[0]["fitMobile"], "contain")

    def test_failures_degrade_to_empty_results(self):
        service = CatalogService(BrokenProductRepository(), FakeSlideRepository(), FakeCache())
        self.assertEqual(service.list_products(), [])
        self.assertIsNone(service.get_product(1))
        self.assertEqual(service.search("tv"), [])
        self.assertEqual(service.list_categories(), [])


class ProductListCacheTests(unittest.TestCase):
    def test_disabled_cache_always_loads(self):
        calls = []
        cache = ProductListCache(FakeCache(), disabled=True)
        cache.get_or_load(lambda: calls.append(1) or [])
        cache.get_or_load(lambda: calls.append(1) or [])
        self.assertEqual(len(calls), 2)

    def test_key_tracks_version(self):
        cache = ProductListCache(FakeCache())
        self.assertEqual(cache.key(), "products:list:v1:all")
        cache.bump()
        self.assertEqual(cache.key(), "products:list:v2:all")


class ProductAdminServiceTests(unittest.TestCase):
    def setUp(self):
        self.cache = FakeCache()
        self.repo = FakeProductRepository([
            make_product(1, "Old", "Audio", 100, created_at="2024-01-01T00:00:00"),
            make_product(2, "New", "Audio", 200, created_at="2024-06-01T00:00:00"),
        ])
        self.service = ProductAdminService(self.repo, self.cache)

    def test_list_newest_first_with_query(self):
        self.assertEqual([p.name for p in self.service.list_products()], ["New", "Old"])
        self.assertEqual([p.name for p in self.service.list_products("old")], ["Old"])

    def test_create_requires_name_category_price(self):
        dto, error = self.service.create_product({"name": "Thing", "category": ""})
        self.assertIsNone(dto)
        code, message, details = error
        self.assertEqual(code, "VALIDATION_ERROR")
        self.assertEqual(message, "Could not save product: missing required fields")
        self.assertEqual(details["missing"], ["category", "price"])

    def test_create_composes_images_and_bumps_cache(self):
        dto, error = self.service.create_product({
            "name": "Soundbar",
            "category": "Audio",
            "price": "9999",
            "image_main": "",
            "images_gallery": "https://a.jpg, https://b.jpg",
            "features": "Dolby, Bluetooth",
        })
        self.assertIsNone(error)
        self.assertEqual(dto.images, ["", "https://a.jpg", "https://b.jpg"])
        self.assertEqual(dto.image, "")
        self.assertEqual(dto.features, ["Dolby", "Bluetooth"])
        self.assertEqual(self.cache.get("products:list:version"), 2)

    def test_partial_update_keeps_untouched_fields(self):
        dto, error = self.service.update_product(1, {"price": "150"})
        self.assertIsNone(error)
        self.assertEqual(dto.price, Decimal("150"))
        self.assertEqual(dto.name, "Old")

    def test_update_and_delete_missing_product(self):
        _, error = self.service.update_product(42, {"name": "x"})
        self.assertEqual(error[0], "NOT_FOUND")
        ok, error = self.service.delete_product(42)
        self.assertFalse(ok)
        self.assertEqual(error[0], "NOT_FOUND")

    def test_delete_removes_product(self):
        ok, error = self.service.delete_product(1)
        self.assertTrue(ok)
        self.assertIsNone(error)
        self.assertIsNone(self.repo.get(id=1))


class SlideServiceTests(unittest.TestCase):
    def setUp(self):
        self.service = SlideService(FakeSlideRepository([make_slide(1)]))

    def test_create_parses_string_flags(self):
        dto = self.service.create_slide({"title": "Sale", "is_active": "false", "show_overlay": "true"})
        self.assertFalse(dto.is_active)
        self.assertTrue(dto.show_overlay)

    def test_update_missing_slide(self):
        dto, error = self.service.update_slide(9, {"title": "x"})
        self.assertIsNone(dto)
        self.assertEqual(error[0], "NOT_FOUND")

    def test_delete_slide(self):
        ok, _ = self.service.delete_slide(1)
        self.assertTrue(ok)
        self.assertEqual(self.service.list_slides(), [])


class DashboardServiceTests(unittest.TestCase):
    def test_stats(self):
        stats = DashboardService(FakeProductRepository(list(CATALOG))).stats()
        self.assertEqual(stats.total_products, 4)
        self.assertEqual(stats.unique_categories, 3)
        self.assertEqual(stats.category_counts[0].category, "Audio")
        self.assertEqual(stats.category_counts[0].count, 2)
        self.assertEqual(len(stats.latest_products), 4)


if __name__ == "__main__":
    unittest.main()
