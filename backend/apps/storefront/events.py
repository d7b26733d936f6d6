from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Union

from apps.common import get_logger

logger = get_logger(__name__).bind(component="storefront", layer="events")

Handler = Callable[[Mapping[str, Any]], Union[Any, Awaitable[Any]]]


class UnknownAction(LookupError):
    pass


class EventRegistry:
    """Action handlers owned by the active page.

    Each page context owns one registry and the router only dispatches to the
    active page's. With a ``token``, registrations made after that navigation
    was cancelled are dropped.
    """

    def __init__(self, token: Any = None):
        self.token = token
        self._handlers: Dict[str, Handler] = {}

    def on(self, action: str, handler: Handler) -> None:
        if self.token is not None and self.token.cancelled:
            logger.info("Dropped handler from stale navigation", action=action, navigation_id=self.token.id)
            return
        if action in self._handlers:
            logger.debug("Replacing handler", action=action)
        self._handlers[action] = handler

    def handles(self, action: str) -> bool:
        return action in self._handlers

    async def dispatch(self, action: str, payload: Optional[Mapping[str, Any]] = None) -> Any:
        handler = self._handlers.get(action)
        if handler is None:
            raise UnknownAction(action)
        result = handler(dict(payload or {}))
        if inspect.isawaitable(result):
            result = await result
        return result

    def clear(self) -> None:
        self._handlers.clear()

    def __len__(self) -> int:
        return len(self._handlers)

    def __contains__(self, action: str) -> bool:
        return action in self._handlers


def attach_product_card_actions(ctx, registry: EventRegistry, on_change: Optional[Callable[[], Any]] = None) -> None:
    """Register the add-to-cart and toggle-wishlist actions every product grid shares."""

    async def add_to_cart(payload):
        product = await ctx.catalog.get_product(payload.get("product_id"))
        if product is None:
            ctx.toasts.show("error", "Product Unavailable", "This product could not be found.")
            return None
        quantity = _quantity(payload.get("quantity"))
        await ctx.run_sync(ctx.store.add_to_cart, product, quantity)
        if quantity == 1:
            ctx.toasts.show("success", "Added to Cart", f"{product.name} is now in your cart.")
        else:
            ctx.toasts.show("success", "Added to Cart", f"{quantity} x {product.name}")
        if on_change is not None:
            await _maybe_await(on_change())
        return product

    async def toggle_wishlist(payload):
        member = await ctx.run_sync(ctx.store.toggle_wishlist, payload.get("product_id"))
        ctx.toasts.show(
            "info",
            "Wishlist Updated",
            "Item added to your favorites." if member else "Item removed from your favorites.",
        )
        if on_change is not None:
            await _maybe_await(on_change())
        return member

    registry.on("add-to-cart", add_to_cart)
    registry.on("toggle-wishlist", toggle_wishlist)


def _quantity(raw: Any) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return 1
    return value if value > 0 else 1


async def _maybe_await(result: Any) -> Any:
    if inspect.isawaitable(result):
        return await result
    return result
