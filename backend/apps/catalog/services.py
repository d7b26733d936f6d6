from __future__ import annotations

import functools
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from apps.common import get_logger
from .commands import ProductWriteCommand, SlideWriteCommand
from .dtos import CategoryCountDTO, DashboardStatsDTO, ProductDTO, SlideDTO
from .filters import normalize_slug, search_products
from .mappers import ProductMapper, SlideMapper
from .protocols import (
    CacheBackendProtocol,
    ProductRepositoryProtocol,
    SlideRepositoryProtocol,
)

logger = get_logger(__name__).bind(component="catalog", layer="service")

ServiceError = Tuple[str, str, Optional[Dict[str, Any]]]


class ProductListCache:
    """Versioned read-through cache for the full product listing.

    Writers bump the version instead of deleting keys, so stale entries simply
    age out of the backend.
    """

    prefix = "products:list"

    def __init__(self, backend: CacheBackendProtocol, *, disabled: bool = False):
        self.backend = backend
        self.disabled = disabled
        self.version_key = f"{self.prefix}:version"
        self.logger = logger.bind(helper="ProductListCache")

    def version(self) -> int:
        return self.backend.get(self.version_key) or 1

    def bump(self) -> None:
        new_version = self.version() + 1
        self.backend.set(self.version_key, new_version, timeout=None)
        self.logger.debug("Bumped product cache version", new_version=new_version)

    def key(self, scope: str = "all") -> str:
        return f"{self.prefix}:v{self.version()}:{scope}"

    def get_or_load(self, loader: Callable[[], List[ProductDTO]], scope: str = "all"):
        if self.disabled:
            return loader()
        key = self.key(scope)
        cached = self.backend.get(key)
        if cached is not None:
            self.logger.debug("Product list cache hit", cache_key=key)
            return cached
        self.logger.debug("Product list cache miss", cache_key=key)
        data = loader()
        self.backend.set(key, data)
        return data


def _degrade(fallback: Callable[[], Any]):
    """Turn any backend failure into ``fallback()`` after logging it."""

    def decorator(method):
        @functools.wraps(method)
        def wrapper(self, *args, **kwargs):
            try:
                return method(self, *args, **kwargs)
            except Exception:
                self.logger.exception(
                    "Catalog query failed; serving fallback", operation=method.__name__
                )
                return fallback()

        return wrapper

    return decorator


def _coerce_id(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class CatalogService:
    """Read-side facade used by page controllers and the public API.

    Every call degrades to ``[]`` / ``None`` instead of raising.
    """

    def __init__(
        self,
        products: ProductRepositoryProtocol,
        slides: SlideRepositoryProtocol,
        cache_backend: CacheBackendProtocol,
        disable_cache: bool = False,
    ):
        self.products = products
        self.slides = slides
        self.cache = ProductListCache(cache_backend, disabled=disable_cache)
        self.logger = logger.bind(service="CatalogService")

    @_degrade(list)
    def list_products(self) -> List[ProductDTO]:
        return list(
            self.cache.get_or_load(lambda: ProductMapper.many_to_dto(self.products.list()))
        )

    @_degrade(lambda: None)
    def get_product(self, product_id: Any) -> Optional[ProductDTO]:
        pk = _coerce_id(product_id)
        if pk is None:
            self.logger.info("Rejected non-numeric product id", product_id=product_id)
            return None
        product = self.products.get(id=pk)
        if not product:
            self.logger.info("Product not found", product_id=pk)
            return None
        return ProductMapper.to_dto(product)

    @_degrade(list)
    def get_products_by_ids(self, ids: Sequence[Any]) -> List[ProductDTO]:
        wanted = [pk for pk in (_coerce_id(i) for i in ids) if pk is not None]
        if not wanted:
            return []
        found = {p.id: p for p in ProductMapper.many_to_dto(self.products.list_by_ids(wanted))}
        return [found[pk] for pk in wanted if pk in found]

    @_degrade(list)
    def list_categories(self) -> List[str]:
        """Distinct categories derived from the full product listing."""
        return sorted({p.category for p in self.list_products() if p.category})

    @_degrade(list)
    def list_by_category(self, slug: str, brand: Optional[str] = None) -> List[ProductDTO]:
        category = self._resolve(slug, self.list_categories())
        brand_name = None
        if brand:
            brand_name = self._resolve(brand, {p.brand for p in self.list_products() if p.brand})
        self.logger.debug("Listing category", slug=slug, category=category, brand=brand_name)
        return ProductMapper.many_to_dto(self.products.list_by_category(category, brand_name))

    @_degrade(list)
    def search(self, query: str) -> List[ProductDTO]:
        query = (query or "").strip()
        if not query:
            return []
        return ProductMapper.many_to_dto(self.products.search(query))

    @_degrade(list)
    def related_products(self, product: ProductDTO, limit: int = 4) -> List[ProductDTO]:
        siblings = ProductMapper.many_to_dto(self.products.list(category=product.category))
        return [p for p in siblings if p.id != product.id][:limit]

    @_degrade(list)
    def list_hero_slides(self) -> List[Dict[str, Any]]:
        """Active slides in creation order, keyed the way the hero slider expects."""
        return [SlideMapper.to_client(s) for s in SlideMapper.many_to_dto(self.slides.list_active())]

    @staticmethod
    def _resolve(slug: str, names) -> str:
        # Slugs come from URLs; map them back onto a stored name when possible.
        target = normalize_slug(slug)
        for name in names:
            if normalize_slug(name) == target:
                return name
        return slug


class ProductAdminService:
    """Write-side operations behind the admin product manager."""

    REQUIRED_ON_CREATE = ("name", "category", "price")

    def __init__(
        self,
        products: ProductRepositoryProtocol,
        cache_backend: CacheBackendProtocol,
    ):
        self.products = products
        self.cache = ProductListCache(cache_backend)
        self.logger = logger.bind(service="ProductAdminService")

    def list_products(self, query: Optional[str] = None) -> List[ProductDTO]:
        rows = sorted(
            ProductMapper.many_to_dto(self.products.list()),
            key=lambda p: (p.created_at or "", p.id),
            reverse=True,
        )
        if query and query.strip():
            rows = search_products(rows, query)
        self.logger.debug("Listing products for admin", query=query, count=len(rows))
        return rows

    def create_product(
        self, data: Union[Dict[str, Any], ProductWriteCommand]
    ) -> Tuple[Optional[ProductDTO], Optional[ServiceError]]:
        cmd = data if isinstance(data, ProductWriteCommand) else ProductWriteCommand.from_raw(data)
        fields = cmd.as_fields()
        missing = [name for name in self.REQUIRED_ON_CREATE if not fields.get(name)]
        if missing:
            self.logger.info("Product create rejected", missing=missing)
            return None, (
                "VALIDATION_ERROR",
                "Could not save product: missing required fields",
                {"missing": missing},
            )
        product = self.products.create(**fields)
        self.cache.bump()
        self.logger.info("Product created", product_id=product.id)
        return ProductMapper.to_dto(product), None

    def update_product(
        self,
        product_id: int,
        data: Union[Dict[str, Any], ProductWriteCommand],
        partial: bool = True,
    ) -> Tuple[Optional[ProductDTO], Optional[ServiceError]]:
        cmd = (
            data
            if isinstance(data, ProductWriteCommand)
            else ProductWriteCommand.from_raw(data, partial=partial)
        )
        product = self.products.get(id=product_id)
        if not product:
            self.logger.warning("Product update failed: not found", product_id=product_id)
            return None, ("NOT_FOUND", "Product not found", {"id": str(product_id)})
        product = self.products.update(product, **cmd.as_fields())
        self.cache.bump()
        self.logger.info("Product updated", product_id=product_id, partial=partial)
        return ProductMapper.to_dto(product), None

    def delete_product(self, product_id: int) -> Tuple[bool, Optional[ServiceError]]:
        product = self.products.get(id=product_id)
        if not product:
            self.logger.warning("Product delete failed: not found", product_id=product_id)
            return False, ("NOT_FOUND", "Product not found", {"id": str(product_id)})
        self.products.delete(product)
        self.cache.bump()
        self.logger.info("Product deleted", product_id=product_id)
        return True, None


class SlideService:
    def __init__(self, slides: SlideRepositoryProtocol):
        self.slides = slides
        self.logger = logger.bind(service="SlideService")

    def list_slides(self) -> List[SlideDTO]:
        return SlideMapper.many_to_dto(self.slides.list())

    def create_slide(self, data: Dict[str, Any]) -> SlideDTO:
        cmd = SlideWriteCommand.from_raw(data)
        slide = self.slides.create(**cmd.fields)
        self.logger.info("Slide created", slide_id=slide.id, active=slide.is_active)
        return SlideMapper.to_dto(slide)

    def update_slide(
        self, slide_id: int, data: Dict[str, Any]
    ) -> Tuple[Optional[SlideDTO], Optional[ServiceError]]:
        slide = self.slides.get(id=slide_id)
        if not slide:
            self.logger.warning("Slide update failed: not found", slide_id=slide_id)
            return None, ("NOT_FOUND", "Slide not found", {"id": str(slide_id)})
        slide = self.slides.update(slide, **SlideWriteCommand.from_raw(data).fields)
        self.logger.info("Slide updated", slide_id=slide_id)
        return SlideMapper.to_dto(slide), None

    def delete_slide(self, slide_id: int) -> Tuple[bool, Optional[ServiceError]]:
        slide = self.slides.get(id=slide_id)
        if not slide:
            return False, ("NOT_FOUND", "Slide not found", {"id": str(slide_id)})
        self.slides.delete(slide)
        self.logger.info("Slide deleted", slide_id=slide_id)
        return True, None


class DashboardService:
    LATEST_LIMIT = 5

    def __init__(self, products: ProductRepositoryProtocol):
        self.products = products
        self.logger = logger.bind(service="DashboardService")

    def stats(self) -> DashboardStatsDTO:
        counts = [CategoryCountDTO(category=c, count=n) for c, n in self.products.category_counts()]
        counts.sort(key=lambda row: row.count, reverse=True)
        stats = DashboardStatsDTO(
            total_products=self.products.count(),
            unique_categories=len(counts),
            category_counts=counts,
            latest_products=ProductMapper.many_to_dto(self.products.latest(self.LATEST_LIMIT)),
        )
        self.logger.debug(
            "Dashboard stats computed",
            total=stats.total_products,
            categories=stats.unique_categories,
        )
        return stats
