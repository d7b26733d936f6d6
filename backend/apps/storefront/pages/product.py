from __future__ import annotations

from apps.catalog.dtos import ProductDTO
from ..components import (
    empty_state,
    escape,
    format_currency,
    link,
    optimize_image_url,
    placeholder_image,
    product_grid,
)
from ..document import PageContext
from ..events import attach_product_card_actions

DEFAULT_BRAND = "Generic"
DEFAULT_WARRANTY = "Standard manufacturer warranty applies."
DETAIL_IMAGE_WIDTH = 1080


def gallery(product: ProductDTO):
    fallback = placeholder_image(DETAIL_IMAGE_WIDTH)
    images = [optimize_image_url(img, DETAIL_IMAGE_WIDTH) if img else fallback for img in product.images or []]
    return images or [fallback]


def selected_quantity(raw) -> int:
    try:
        return max(1, int(raw))
    except (TypeError, ValueError):
        return 1


def render_detail(ctx: PageContext, product: ProductDTO, quantity: int) -> None:
    images = gallery(product)
    in_wishlist = ctx.store.is_in_wishlist(product.id)
    features = "".join(f"<li>{escape(f)}</li>" for f in product.features or [])
    thumbnails = "".join(
        f'<img class="thumbnail{" active" if i == 0 else ""}" src="{escape(src)}" alt="{escape(product.name)}" loading="lazy" />'
        for i, src in enumerate(images)
    )
    ctx.render("product_brand", escape(product.brand or DEFAULT_BRAND))
    ctx.render("product_category", escape(product.category))
    ctx.render("product_rating", escape(product.rating))
    ctx.render("product_name", escape(product.name))
    ctx.render("product_price", format_currency(product.price))
    ctx.render("product_description", escape(product.description))
    ctx.render("product_main_image", f'<img id="product-main-image" src="{escape(images[0])}" alt="{escape(product.name)}" />')
    ctx.render("product_thumbnails", thumbnails)
    ctx.render("product_features", f"<ul>{features}</ul>" if features else "")
    ctx.render("product_warranty", escape(product.warranty or DEFAULT_WARRANTY))
    ctx.render("quantity", str(quantity))
    ctx.set_data("product_id", product.id)
    ctx.set_data("quantity", quantity)
    ctx.set_data("in_wishlist", in_wishlist)


async def initialize(ctx: PageContext) -> None:
    product = await ctx.catalog.get_product(ctx.params.get("id"))
    if product is None:
        ctx.set_title("Product Not Found | Aries Mall")
        ctx.hide("product_detail")
        ctx.render(
            "not_found",
            empty_state(
                "package-x",
                "Product Not Found",
                "The product you are looking for does not exist or has been removed.",
                link("/"),
                "Continue Shopping",
            ),
        )
        return

    state = {"quantity": selected_quantity(ctx.query.get("qty"))}
    ctx.set_title(f"{product.name} | Aries Mall")
    render_detail(ctx, product, state["quantity"])

    related = await ctx.catalog.related_products(product, 4)
    if related:
        ctx.render("related_products", product_grid(related, ctx.store.wishlist_ids))
    else:
        ctx.hide("related")

    def change_quantity(delta: int):
        def handler(payload):
            state["quantity"] = max(1, state["quantity"] + delta)
            ctx.render("quantity", str(state["quantity"]))
            ctx.set_data("quantity", state["quantity"])
            ctx.query["qty"] = str(state["quantity"])
            return state["quantity"]

        return handler

    def refresh():
        render_detail(ctx, product, state["quantity"])
        if related:
            ctx.render("related_products", product_grid(related, ctx.store.wishlist_ids))

    ctx.events.on("increase-qty", change_quantity(1))
    ctx.events.on("decrease-qty", change_quantity(-1))
    attach_product_card_actions(ctx, ctx.events, on_change=refresh)
