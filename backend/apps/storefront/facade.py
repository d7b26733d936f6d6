from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from asgiref.sync import sync_to_async

from apps.catalog.dtos import ProductDTO
from apps.catalog.services import CatalogService


class AsyncCatalog:
    """Awaitable view over ``CatalogService`` for page initializers.

    Calls run on Django's sync thread, so the ORM stays out of the event loop.
    Errors are already absorbed by the service; these never raise.
    """

    def __init__(self, service: CatalogService):
        self.service = service

    async def list_products(self) -> List[ProductDTO]:
        return await sync_to_async(self.service.list_products)()

    async def get_product(self, product_id: Any) -> Optional[ProductDTO]:
        return await sync_to_async(self.service.get_product)(product_id)

    async def get_products_by_ids(self, ids: Sequence[Any]) -> List[ProductDTO]:
        return await sync_to_async(self.service.get_products_by_ids)(ids)

    async def list_categories(self) -> List[str]:
        return await sync_to_async(self.service.list_categories)()

    async def list_by_category(self, slug: str, brand: Optional[str] = None) -> List[ProductDTO]:
        return await sync_to_async(self.service.list_by_category)(slug, brand)

    async def search(self, query: str) -> List[ProductDTO]:
        return await sync_to_async(self.service.search)(query)

    async def related_products(self, product: ProductDTO, limit: int = 4) -> List[ProductDTO]:
        return await sync_to_async(self.service.related_products)(product, limit)

    async def list_hero_slides(self) -> List[Dict[str, Any]]:
        return await sync_to_async(self.service.list_hero_slides)()
