from __future__ import annotations

import asyncio
from typing import Any, Dict, List

from django.conf import settings

from apps.catalog.filters import HOME_SORTS, carousel_rows, sort_home_grid
from ..components import escape, product_card_skeletons, product_grid
from ..document import PageContext
from ..events import attach_product_card_actions
from ..timers import Interval

DESKTOP_FALLBACK = "https://placehold.co/1920x800/f5f3ed/1a1a1a?text=NO+Image"
MOBILE_FALLBACK = "https://placehold.co/800x800/f5f3ed/1a1a1a?text=NO+Image"
THUMBNAIL_FALLBACK = "https://placehold.co/150/f5f3ed/1a1a1a?text=Thumb"

CAROUSELS = (("electronics_carousel", "Electronics"), ("furniture_carousel", "Furniture"))


class HeroSlider:
    def __init__(self, ctx: PageContext, slides: List[Dict[str, Any]]):
        self.ctx = ctx
        self.slides = slides
        self.index = 0

    def go(self, index: int) -> None:
        if not self.slides:
            return
        self.index = index % len(self.slides)
        self.render()

    def advance(self) -> None:
        self.go(self.index + 1)

    def render(self) -> None:
        ctx, slides = self.ctx, self.slides
        ctx.render("hero_backgrounds", "".join(self._background(i, s) for i, s in enumerate(slides)))
        ctx.render("hero_thumbnails", "".join(self._thumbnail(i, s) for i, s in enumerate(slides)))
        slide = slides[self.index]
        button = ""
        if slide.get("buttonText"):
            button = (
                f'<a id="hero-cta-button" class="text-active" href="{escape(slide.get("buttonLink") or "#")}">'
                f'{escape(slide["buttonText"])}</a>'
            )
        ctx.render(
            "hero_text",
            f'<h1 id="hero-title" class="text-active">{escape(slide.get("title"))}</h1>'
            f'<p id="hero-description" class="text-active">{escape(slide.get("description"))}</p>{button}',
        )
        ctx.set_data("hero_index", self.index)
        ctx.set_data("hero_overlay", slide.get("overlay") is not False)

    def _background(self, index: int, slide: Dict[str, Any]) -> str:
        active = " active" if index == self.index else ""
        alt = escape(slide.get("title") or "")
        return (
            f'<img src="{escape(slide.get("backgroundImageDesktop") or DESKTOP_FALLBACK)}" alt="{alt}" '
            f'class="hero-background-image hero-bg-desktop{active}" data-index="{index}" '
            f'style="object-fit: {escape(slide.get("fitDesktop") or "cover")};" />'
            f'<img src="{escape(slide.get("backgroundImageMobile") or MOBILE_FALLBACK)}" alt="{alt}" '
            f'class="hero-background-image hero-bg-mobile{active}" data-index="{index}" '
            f'style="object-fit: {escape(slide.get("fitMobile") or "cover")};" />'
        )

    def _thumbnail(self, index: int, slide: Dict[str, Any]) -> str:
        active = " active" if index == self.index else ""
        return (
            f'<div class="hero-thumbnail-item{active}" data-index="{index}">'
            f'<img src="{escape(slide.get("thumbnailImage") or THUMBNAIL_FALLBACK)}" '
            f'alt="Thumbnail {index + 1}" loading="lazy" /></div>'
        )


class HomeGrid:
    def __init__(self, ctx: PageContext, products, categories: List[str], selected: str, sort: str):
        self.ctx = ctx
        self.products = products
        self.categories = ["All", *categories]
        self.selected = selected if selected in self.categories else "All"
        self.sort = sort if sort in HOME_SORTS else "featured"

    def render(self) -> None:
        ctx = self.ctx
        wishlist = ctx.store.wishlist_ids
        ctx.render("category_list", "".join(self._category_button(name) for name in self.categories))
        rows = sort_home_grid(self.products, self.selected, self.sort)
        ctx.render("product_grid", product_grid(rows, wishlist) if rows else "<p>No products found.</p>")
        for region, category in CAROUSELS:
            ctx.render(
                region,
                "".join(
                    f'<div class="carousel-row">{product_grid(row, wishlist)}</div>'
                    for row in carousel_rows(self.products, category)
                ),
            )
        ctx.set_data("selected_category", self.selected)
        ctx.set_data("sort", self.sort)

    def _category_button(self, name: str) -> str:
        active = " active" if name == self.selected else ""
        return (
            f'<a class="category-btn{active}" href="?category={escape(name)}&amp;sort={escape(self.sort)}">'
            f"{escape(name)}</a>"
        )


async def initialize(ctx: PageContext) -> None:
    ctx.render("product_grid", product_card_skeletons(8))
    skeleton_row = f'<div class="carousel-row">{product_card_skeletons(6)}</div>'
    for region, _ in CAROUSELS:
        ctx.render(region, skeleton_row * 2)

    slides, products, categories = await asyncio.gather(
        ctx.catalog.list_hero_slides(),
        ctx.catalog.list_products(),
        ctx.catalog.list_categories(),
    )

    if slides:
        ctx.show("hero")
        slider = HeroSlider(ctx, slides)
        slider.render()
        timer = Interval(settings.HERO_SLIDE_INTERVAL, slider.advance)
        timer.start()
        ctx.on_cleanup(timer.stop)
        ctx.set_data("hero_interval_ms", int(settings.HERO_SLIDE_INTERVAL * 1000))

        def select_slide(payload):
            try:
                slider.go(int(payload.get("index", 0)))
            except (TypeError, ValueError):
                return
            timer.restart()

        ctx.events.on("select-slide", select_slide)
    else:
        ctx.hide("hero")

    grid = HomeGrid(ctx, products, categories, ctx.query.get("category", "All"), ctx.query.get("sort", "featured"))
    grid.render()

    def select_category(payload):
        grid.selected = payload.get("category") if payload.get("category") in grid.categories else "All"
        ctx.query["category"] = grid.selected
        grid.render()

    def sort_grid(payload):
        grid.sort = payload.get("sort") if payload.get("sort") in HOME_SORTS else "featured"
        ctx.query["sort"] = grid.sort
        grid.render()

    ctx.events.on("select-category", select_category)
    ctx.events.on("sort", sort_grid)
    attach_product_card_actions(ctx, ctx.events, on_change=grid.render)
