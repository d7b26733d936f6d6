from ..components import cart_item, empty_state, format_currency, link
from ..document import PageContext


def render_cart(ctx: PageContext) -> None:
    store = ctx.store
    lines = store.line_items
    if not lines:
        ctx.hide("cart_content")
        ctx.show("empty_cart")
        ctx.render(
            "empty_cart",
            empty_state(
                "shopping-cart",
                "Your Cart is Empty",
                "Looks like you haven't added anything to your cart yet.",
                link("/"),
                "Start Shopping",
            ),
        )
        return
    summary = store.summary()
    ctx.show("cart_content")
    ctx.hide("empty_cart")
    ctx.render("cart_items", "".join(cart_item(line) for line in lines))
    ctx.render("summary_subtotal", format_currency(summary.subtotal))
    ctx.render("summary_taxes", format_currency(summary.tax))
    ctx.render("summary_total", format_currency(summary.total))
    ctx.render("summary_count", str(summary.item_count))


async def initialize(ctx: PageContext) -> None:
    store = ctx.store

    def find(payload):
        pid = payload.get("product_id")
        return next((line for line in store.line_items if str(line.product_id) == str(pid)), None)

    async def increase(payload):
        line = find(payload)
        if line is not None:
            await ctx.run_sync(store.set_quantity, line.product_id, line.quantity + 1)
            render_cart(ctx)

    async def decrease(payload):
        line = find(payload)
        if line is not None and line.quantity > 1:
            await ctx.run_sync(store.set_quantity, line.product_id, line.quantity - 1)
            render_cart(ctx)

    async def remove(payload):
        line = find(payload)
        if line is None:
            return
        await ctx.run_sync(store.remove_from_cart, line.product_id)
        ctx.toasts.show("info", "Item Removed", f"{line.product.name} was removed from your cart.")
        render_cart(ctx)

    render_cart(ctx)
    ctx.events.on("increase", increase)
    ctx.events.on("decrease", decrease)
    ctx.events.on("remove", remove)
