from __future__ import annotations

from decimal import Decimal
from typing import List, Optional
from urllib.parse import urlencode

from django.conf import settings

from apps.catalog.dtos import ProductDTO
from apps.catalog.filters import (
    CATEGORY_SORTS,
    apply_price_and_sort,
    available_brands,
    parse_price,
    product_count_text,
    title_from_slug,
)
from ..components import escape, link, product_card_skeletons, product_grid
from ..document import PageContext
from ..events import attach_product_card_actions
from ..timers import Debouncer


class CategoryFilters:
    """Price window and sort applied locally over the fetched category list."""

    def __init__(self, ctx: PageContext, products: List[ProductDTO]):
        self.ctx = ctx
        self.products = products
        self.min_price: Optional[Decimal] = parse_price(ctx.query.get("min_price"))
        self.max_price: Optional[Decimal] = parse_price(ctx.query.get("max_price"))
        sort = ctx.query.get("sort", "default")
        self.sort = sort if sort in CATEGORY_SORTS else "default"
        self.renders = 0

    def update(self, payload) -> None:
        if "min_price" in payload:
            self.min_price = parse_price(payload.get("min_price"))
            self._remember("min_price", payload.get("min_price"))
        if "max_price" in payload:
            self.max_price = parse_price(payload.get("max_price"))
            self._remember("max_price", payload.get("max_price"))
        if "sort" in payload:
            sort = payload.get("sort")
            self.sort = sort if sort in CATEGORY_SORTS else "default"
            self._remember("sort", self.sort if self.sort != "default" else "")
        self.render()

    def _remember(self, key: str, value) -> None:
        value = (value or "").strip() if isinstance(value, str) else value
        if value:
            self.ctx.query[key] = str(value)
        else:
            self.ctx.query.pop(key, None)

    def visible(self) -> List[ProductDTO]:
        return apply_price_and_sort(self.products, self.min_price, self.max_price, self.sort)

    def render(self) -> None:
        rows = self.visible()
        self.renders += 1
        self.ctx.render("product_count", escape(product_count_text(len(rows))))
        self.ctx.render(
            "product_grid",
            product_grid(rows, self.ctx.store.wishlist_ids) if rows else "<p>No products match your filters.</p>",
        )
        self.ctx.set_data("min_price", "" if self.min_price is None else str(self.min_price))
        self.ctx.set_data("max_price", "" if self.max_price is None else str(self.max_price))
        self.ctx.set_data("sort", self.sort)


def render_brands(ctx: PageContext, slug: str, brand: Optional[str], products: List[ProductDTO]) -> None:
    base = link(f"/category/{slug}")
    if brand:
        ctx.render(
            "brand_list",
            f'<p class="active-brand">Brand: <strong>{escape(brand)}</strong></p>'
            f'<a class="clear-brand" href="{escape(base)}">All brands</a>',
        )
        return
    brands = available_brands(products)
    if not brands:
        ctx.render("brand_list", '<p class="text-muted-foreground text-sm">No brands available.</p>')
        return
    ctx.render(
        "brand_list",
        "".join(
            f'<a class="brand-filter" href="{escape(base + "?" + urlencode({"brand": name}))}">{escape(name)}</a>'
            for name in brands
        ),
    )


async def initialize(ctx: PageContext) -> None:
    slug = ctx.params.get("slug", "")
    if not slug:
        ctx.render("category_title", "Category Not Found")
        ctx.render("product_count", "")
        return

    brand = (ctx.query.get("brand") or "").strip() or None
    title = title_from_slug(slug)
    ctx.render("category_title", escape(title))
    ctx.set_title(f"{title} | Aries Mall")
    ctx.render("product_grid", product_card_skeletons(8))

    products = await ctx.catalog.list_by_category(slug, brand)
    render_brands(ctx, slug, brand, products)

    filters = CategoryFilters(ctx, products)
    filters.render()

    debouncer = Debouncer(settings.CATEGORY_FILTER_DEBOUNCE, filters.update)
    # A price typed just before the page goes away still applies.
    ctx.on_cleanup(debouncer.flush)
    ctx.events.on("price-input", debouncer.call)
    ctx.events.on("apply-filters", filters.update)
    ctx.events.on("sort", filters.update)
    attach_product_card_actions(ctx, ctx.events, on_change=filters.render)
