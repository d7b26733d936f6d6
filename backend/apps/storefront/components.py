"""HTML fragments shared by the storefront pages."""
from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Optional

from django.utils.html import escape as _escape

from apps.carts.dtos import LineItem
from apps.catalog.dtos import ProductDTO
from .document import CSRF_MARKER

CARD_IMAGE_WIDTH = 500
CART_IMAGE_WIDTH = 150

_UPLOAD_SEGMENT = re.compile(r"/upload/(?:[^/]+/)?")

SHOP_ROOT = "/shop"


def link(path: str, root: str = SHOP_ROOT) -> str:
    """Fragment path to the URL that serves it, ``/cart`` -> ``/shop/cart``."""
    return f"{root}{path}" if path != "/" else f"{root}/"


def escape(value: Any) -> str:
    """HTML-escape ``value``; ``None`` renders as an empty string."""
    if value is None:
        return ""
    return str(_escape(str(value)))


def _group_indian(digits: str) -> str:
    # 1234567 -> 12,34,567
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_currency(amount: Any) -> str:
    """Rupee amount with Indian digit grouping, e.g. ``₹1,23,456.50``."""
    if isinstance(amount, bool) or not isinstance(amount, (int, float, Decimal)):
        return "₹0.00"
    if isinstance(amount, float) and not math.isfinite(amount):
        return "₹0.00"
    if isinstance(amount, Decimal) and not amount.is_finite():
        return "₹0.00"
    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    whole, _, fraction = f"{abs(value):.2f}".partition(".")
    return f"{sign}₹{_group_indian(whole)}.{fraction}"


def placeholder_image(width: int = CARD_IMAGE_WIDTH) -> str:
    return f"https://placehold.co/{width}x{width}/f5f3ed/1a1a1a?text=No+Image"


def optimize_image_url(url: Optional[str], width: int = CARD_IMAGE_WIDTH) -> str:
    """Square, auto-format Cloudinary rendition at ``width``; other hosts pass through."""
    if not url:
        return placeholder_image(width)
    if "cloudinary.com" in url and "/upload/" in url:
        return _UPLOAD_SEGMENT.sub(f"/upload/w_{width},ar_1:1,c_fill,f_auto,q_auto/", url, count=1)
    return url


def _main_image(product: ProductDTO) -> Optional[str]:
    images = product.images or []
    return images[0] if images and images[0] else None


def product_card(product: Optional[ProductDTO], in_wishlist: bool = False) -> str:
    if product is None:
        return ""
    name = escape(product.name)
    image = escape(optimize_image_url(_main_image(product), CARD_IMAGE_WIDTH))
    url = link(f"/product/{product.id}")
    brand = f'<span class="product-card-brand">{escape(product.brand)}</span>' if product.brand else ""
    favorite = "true" if in_wishlist else "false"
    return (
        f'<div class="product-card" data-product-id="{product.id}">'
        f'<div class="product-card-inner">'
        f'<div class="product-card-image-container">'
        f'<a href="{url}"><img src="{image}" alt="{name}" class="product-card-image" loading="lazy" /></a>'
        f'<form method="post" class="product-card-action">{CSRF_MARKER}'
        f'<input type="hidden" name="action" value="toggle-wishlist" />'
        f'<input type="hidden" name="product_id" value="{product.id}" />'
        f'<button class="product-card-fav-btn" aria-label="Toggle Wishlist" data-is-favorite="{favorite}">&#9829;</button>'
        f"</form>"
        f'<div class="product-card-badge">{escape(product.category)}</div>'
        f"</div>"
        f'<div class="product-card-info">'
        f'<div class="product-card-rating"><span class="product-rating-score">&#9733; {escape(product.rating)}</span>{brand}</div>'
        f'<a href="{url}"><h3>{name}</h3></a>'
        f'<div class="product-card-buy-actions">'
        f'<p class="product-card-price">{format_currency(product.price)}</p>'
        f'<form method="post" class="product-card-action">{CSRF_MARKER}'
        f'<input type="hidden" name="action" value="add-to-cart" />'
        f'<input type="hidden" name="product_id" value="{product.id}" />'
        f'<button class="product-card-add-btn"><span>Add</span></button>'
        f"</form>"
        f"</div></div></div></div>"
    )


def product_grid(products: Iterable[ProductDTO], wishlist: Iterable[int] = ()) -> str:
    members = set(wishlist)
    return "".join(product_card(p, p.id in members) for p in products)


def product_card_skeletons(count: int = 1) -> str:
    skeleton = (
        '<div class="product-card-skeleton"><div class="image animate-shimmer"></div>'
        '<div class="info"><div class="line1 animate-shimmer"></div>'
        '<div class="line2 animate-shimmer"></div></div></div>'
    )
    return skeleton * max(count, 0)


def cart_item(line: LineItem) -> str:
    product = line.product
    name = escape(product.name)
    image = escape(optimize_image_url(_main_image(product), CART_IMAGE_WIDTH))
    decrease = (
        _action_button("decrease", product.id, "&minus;", "Decrease quantity")
        if line.quantity > 1
        else '<button class="quantity-btn" disabled aria-label="Decrease quantity">&minus;</button>'
    )
    return (
        f'<div class="cart-item-card" data-item-id="{product.id}">'
        f'<img src="{image}" alt="{name}" class="cart-item-image" loading="lazy">'
        f'<div class="cart-item-details">'
        f'<p class="cart-item-name">{name}</p>'
        f'<p class="cart-item-category">{escape(product.category)}</p>'
        f'<p class="cart-item-price">{format_currency(product.price)}</p>'
        f"</div>"
        f'<div class="cart-item-actions"><div class="quantity-control">'
        f"{decrease}"
        f'<span class="quantity-value">{line.quantity}</span>'
        f'{_action_button("increase", product.id, "+", "Increase quantity")}'
        f"</div>"
        f'{_action_button("remove", product.id, "Remove", "Remove item", css="remove-item-btn")}'
        f"</div></div>"
    )


def _action_button(action: str, product_id: int, label: str, aria: str, css: str = "quantity-btn") -> str:
    return (
        f'<form method="post" class="inline-action">{CSRF_MARKER}'
        f'<input type="hidden" name="action" value="{action}" />'
        f'<input type="hidden" name="product_id" value="{product_id}" />'
        f'<button class="{css}" aria-label="{aria}">{label}</button>'
        f"</form>"
    )


def empty_state(icon: str, title: str, text: str, button_link: str = "", button_text: str = "") -> str:
    button = (
        f'<a href="{escape(button_link)}" class="empty-cart-button">{escape(button_text)}</a>'
        if button_link and button_text
        else ""
    )
    return (
        f'<div class="empty-cart-content" data-icon="{escape(icon)}">'
        f'<h2 class="empty-cart-title">{escape(title)}</h2>'
        f'<p class="empty-cart-text">{escape(text)}</p>'
        f"{button}</div>"
    )


def message(text: str) -> str:
    return f"<p>{escape(text)}</p>"
