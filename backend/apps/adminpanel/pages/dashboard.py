from apps.storefront.components import escape, format_currency
from apps.storefront.document import PageContext

THUMB_PLACEHOLDER = "https://placehold.co/60x60/eee/aaa?text=N/A"


def category_distribution(counts) -> str:
    return "".join(
        f'<div class="category-item"><span class="category-item__name">{escape(row.category)}</span>'
        f'<span class="category-item__count">{row.count} Products</span></div>'
        for row in counts
    )


def latest_products(products) -> str:
    if not products:
        return '<p class="empty-state">No products found in the database.</p>'
    return "".join(
        f'<div class="product-item">'
        f'<img src="{escape(p.image or THUMB_PLACEHOLDER)}" alt="{escape(p.name)}" class="product-item__image">'
        f'<div class="product-item__details"><p class="product-item__name">{escape(p.name)}</p>'
        f'<p class="product-item__category">{escape(p.category)}</p></div>'
        f'<p class="product-item__price">{format_currency(p.price)}</p></div>'
        for p in products
    )


async def initialize(ctx: PageContext) -> None:
    stats = await ctx.run_sync(ctx.services["dashboard"].stats)
    ctx.render("stat_total_products", str(stats.total_products))
    ctx.render("stat_total_categories", str(stats.unique_categories))
    ctx.render("category_distribution", category_distribution(stats.category_counts))
    ctx.render("latest_products", latest_products(stats.latest_products))
