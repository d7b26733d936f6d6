from apps.catalog.filters import result_count_text
from ..components import empty_state, escape, link, product_card_skeletons, product_grid
from ..document import PageContext
from ..events import attach_product_card_actions


def no_results(query: str) -> str:
    return empty_state(
        "search-x",
        "No Results Found",
        f'Sorry, we couldn\'t find any products matching "{query}". Try searching for something else.',
        link("/"),
        "Continue Shopping",
    )


async def initialize(ctx: PageContext) -> None:
    query = (ctx.query.get("q") or "").strip()
    if not query:
        ctx.render("search_title", "Search")
        ctx.render("result_count", "Please enter a search term in the header.")
        ctx.hide("no_results")
        return

    ctx.render("search_title", f'Results for "{escape(query)}"')
    ctx.set_title(f"Search: {query} | Aries Mall")
    ctx.render("product_grid", product_card_skeletons(8))
    products = await ctx.catalog.search(query)

    def render():
        ctx.render("result_count", escape(result_count_text(len(products))))
        if products:
            ctx.render("product_grid", product_grid(products, ctx.store.wishlist_ids))
            ctx.hide("no_results")
        else:
            ctx.render("product_grid", "")
            ctx.render("no_results", no_results(query))
            ctx.show("no_results")

    render()
    attach_product_card_actions(ctx, ctx.events, on_change=render)
