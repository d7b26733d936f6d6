"""Pure list transforms shared by the category, search, home and admin views."""
from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Optional, Sequence

from .dtos import ProductDTO

CATEGORY_SORTS = ("default", "price-asc", "price-desc", "rating-desc", "name-asc")
HOME_SORTS = ("featured", "price-low", "price-high", "rating")

_WHITESPACE = re.compile(r"\s+")
_NON_SLUG = re.compile(r"[^a-z0-9-]")


def normalize_slug(text: str) -> str:
    """``"Home Appliances"`` -> ``"home-appliances"``."""
    lowered = _WHITESPACE.sub("-", (text or "").lower())
    return _NON_SLUG.sub("", lowered)


def title_from_slug(slug: str) -> str:
    """``"home-appliances"`` -> ``"Home appliances"``."""
    text = (slug or "").replace("-", " ")
    return text[:1].upper() + text[1:]


def parse_price(raw: Any) -> Optional[Decimal]:
    """Form input to a price bound; blanks and garbage mean "no bound"."""
    if raw is None:
        return None
    text = str(raw).strip()
    if not text:
        return None
    try:
        value = Decimal(text)
    except (InvalidOperation, ValueError):
        return None
    return value if value.is_finite() else None


def apply_price_and_sort(
    products: Iterable[ProductDTO],
    min_price: Optional[Decimal] = None,
    max_price: Optional[Decimal] = None,
    sort: str = "default",
) -> List[ProductDTO]:
    """Price window and ordering applied over an already-fetched category list.

    Negative bounds are ignored. Unknown sort keys keep the fetched order.
    """
    result = list(products)
    if min_price is not None and min_price >= 0:
        result = [p for p in result if p.price >= min_price]
    if max_price is not None and max_price >= 0:
        result = [p for p in result if p.price <= max_price]

    if sort == "price-asc":
        result.sort(key=lambda p: p.price)
    elif sort == "price-desc":
        result.sort(key=lambda p: p.price, reverse=True)
    elif sort == "rating-desc":
        result.sort(key=lambda p: p.rating, reverse=True)
    elif sort == "name-asc":
        result.sort(key=lambda p: p.name.casefold())
    return result


def sort_home_grid(
    products: Iterable[ProductDTO], category: str = "All", sort: str = "featured"
) -> List[ProductDTO]:
    result = list(products)
    if category and category != "All":
        result = [p for p in result if p.category == category]
    if sort == "price-low":
        result.sort(key=lambda p: p.price)
    elif sort == "price-high":
        result.sort(key=lambda p: p.price, reverse=True)
    elif sort == "rating":
        result.sort(key=lambda p: p.rating, reverse=True)
    return result


def available_brands(products: Iterable[ProductDTO]) -> List[str]:
    return sorted({p.brand for p in products if p.brand})


def matches_query(product: ProductDTO, query: str) -> bool:
    needle = (query or "").strip().casefold()
    if not needle:
        return False
    return any(
        needle in (value or "").casefold()
        for value in (product.name, product.brand, product.category)
    )


def search_products(products: Iterable[ProductDTO], query: str) -> List[ProductDTO]:
    """Case-insensitive substring match over name, brand or category."""
    return [p for p in products if matches_query(p, query)]


def carousel_rows(
    products: Sequence[ProductDTO], category: str, row_size: int = 6, rows: int = 2
) -> List[List[ProductDTO]]:
    in_category = [p for p in products if p.category == category]
    return [in_category[i * row_size:(i + 1) * row_size] for i in range(rows)]


def pluralize(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def product_count_text(count: int) -> str:
    return f"Showing {pluralize(count, 'product')}."


def result_count_text(count: int) -> str:
    return f"{pluralize(count, 'result')} found."
