from __future__ import annotations

from datetime import datetime
from typing import Optional

from apps.users.validators import validate_full_name
from rest_framework import serializers
from ..components import empty_state, escape, format_currency, link, product_grid
from ..document import CSRF_MARKER, PageContext
from ..events import attach_product_card_actions

SUBVIEWS = ("profile", "orders", "wishlist", "settings")
NAV_LABELS = {"profile": "Profile", "orders": "My Orders", "wishlist": "Wishlist", "settings": "Settings"}

# Order history is not backed by a table yet; the page shows this sample.
SAMPLE_ORDERS = [
    {
        "id": "ORD1001",
        "date": "2025-10-20",
        "total": 1299.0,
        "status": "Delivered",
        "items": [
            {"name": "Luxury Leather Sofa", "quantity": 1, "price": 1200.0},
            {"name": "Delivery Fee", "quantity": 1, "price": 99.0},
        ],
    },
]


def member_since(iso: Optional[str]) -> str:
    if not iso:
        return ""
    joined = datetime.fromisoformat(iso)
    return f"{joined:%B} {joined.day}, {joined.year}"


def resolve_subview(raw: str) -> str:
    return raw if raw in SUBVIEWS else "profile"


def render_nav(ctx: PageContext, view: str, wishlist_count: int) -> None:
    links = []
    for name in SUBVIEWS:
        badge = f' <span class="badge">{wishlist_count}</span>' if name == "wishlist" and wishlist_count else ""
        active = " active" if name == view else ""
        links.append(
            f'<a class="profile-nav-link{active}" data-view="{name}" href="{link("/profile/" + name)}">'
            f"{NAV_LABELS[name]}{badge}</a>"
        )
    ctx.render("profile_nav", "".join(links))


def _sign_out_form() -> str:
    return (
        f'<form method="post">{CSRF_MARKER}<input type="hidden" name="action" value="logout" />'
        f'<button class="logout-button-profile"><span>Sign Out</span></button></form>'
    )


def render_profile_info(profile) -> str:
    return (
        '<div class="profile-card"><h2>Profile Information</h2>'
        f'<div class="profile-detail"><span class="detail-label">Full Name</span>'
        f'<span class="detail-value">{escape(profile.full_name or profile.email)}</span></div>'
        f'<div class="profile-detail"><span class="detail-label">Email Address</span>'
        f'<span class="detail-value">{escape(profile.email)}</span></div>'
        f'<div class="profile-detail"><span class="detail-label">Member Since</span>'
        f'<span class="detail-value">{escape(member_since(profile.member_since))}</span></div>'
        f"{_sign_out_form()}</div>"
    )


def render_orders(orders) -> str:
    if not orders:
        return '<div class="profile-card"><h2>Order History</h2><p>You haven\'t placed any orders yet.</p></div>'
    cards = []
    for order in orders:
        placed = datetime.fromisoformat(order["date"])
        items = "".join(
            f'<div class="order-item"><p class="order-item-name">{escape(item["name"])}</p>'
            f'<p class="order-item-meta">Qty: {item["quantity"]} &middot; {format_currency(item["price"])}</p></div>'
            for item in order["items"]
        )
        cards.append(
            f'<div class="order-card"><div class="order-card-header">'
            f'<span class="order-id">Order #{escape(order["id"])}</span>'
            f'<span class="order-date">Placed on {placed:%d/%m/%Y}</span>'
            f'<span class="order-status status-{order["status"].lower()}">{escape(order["status"])}</span></div>'
            f'<div class="order-card-body">{items}</div>'
            f'<div class="order-card-footer"><strong>Order Total: {format_currency(order["total"])}</strong></div></div>'
        )
    return f'<div class="profile-card"><h2>Order History</h2><div class="order-history-list">{"".join(cards)}</div></div>'


def render_wishlist(products, wishlist_ids) -> str:
    if not products:
        return empty_state(
            "heart",
            "Your Wishlist is Empty",
            "Explore our products and save your favorites!",
            link("/"),
            "Explore Products",
        )
    return f'<div class="profile-card"><h2>My Wishlist</h2><div class="product-grid">{product_grid(products, wishlist_ids)}</div></div>'


def render_settings(profile, is_dark: bool) -> str:
    return (
        '<div class="profile-card"><h2>Settings</h2>'
        f'<form method="post" class="settings-form">{CSRF_MARKER}'
        '<input type="hidden" name="action" value="update-name" />'
        '<label for="full_name">Full Name</label>'
        f'<input id="full_name" name="full_name" class="form-input" value="{escape(profile.full_name)}" />'
        '<button type="submit">Save</button></form>'
        f'<form method="post">{CSRF_MARKER}<input type="hidden" name="action" value="toggle-theme" />'
        f'<button type="submit">{"Light Mode" if is_dark else "Dark Mode"}</button></form></div>'
    )


async def initialize(ctx: PageContext) -> None:
    session = ctx.store.session
    if session is None:
        return
    view = resolve_subview(ctx.params.get("subview", ""))
    profiles = ctx.services["profiles"]
    ctx.render("profile_user_name", escape(session.display_name or "there"))
    ctx.set_data("view", view)
    render_nav(ctx, view, ctx.store.wishlist_count)
    ctx.render("profile_content", '<div class="profile-card"><div class="skeleton-loader"></div></div>')

    async def render_view():
        if view == "orders":
            ctx.render("profile_content", render_orders(SAMPLE_ORDERS))
        elif view == "wishlist":
            products = await ctx.catalog.get_products_by_ids(ctx.store.wishlist_ids)
            ctx.render("profile_content", render_wishlist(products, ctx.store.wishlist_ids))
        else:
            profile = await ctx.run_sync(profiles.get_profile, session.user_id)
            if profile is None:
                ctx.render("profile_content", empty_state("user-x", "Profile Unavailable", "Please sign in again."))
            elif view == "settings":
                ctx.render("profile_content", render_settings(profile, ctx.theme.is_dark if ctx.theme is not None else True))
            else:
                ctx.render("profile_content", render_profile_info(profile))
        render_nav(ctx, view, ctx.store.wishlist_count)

    await render_view()

    async def update_name(payload):
        try:
            full_name = validate_full_name(payload.get("full_name", ""))
        except serializers.ValidationError as exc:
            ctx.toasts.show("error", "Could Not Save", str(exc.detail[0]))
            return
        _, error = await ctx.run_sync(profiles.update_full_name, session.user_id, full_name)
        if error:
            ctx.toasts.show("error", "Could Not Save", error[1])
            return
        ctx.toasts.show("success", "Profile Updated", "Your name has been saved.")
        await render_view()

    ctx.events.on("update-name", update_name)
    attach_product_card_actions(ctx, ctx.events, on_change=render_view)
