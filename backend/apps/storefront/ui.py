from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from apps.carts.protocols import KeyValueStorage
from apps.catalog.filters import normalize_slug
from apps.common import get_logger
from .components import link

logger = get_logger(__name__).bind(component="storefront", layer="ui")

TOAST_KINDS = ("success", "error", "info")
THEME_KEY = "theme"


class Toaster:
    """Queue of ``{type, title, message}`` notices flushed into the next rendered page.

    With a ``storage`` the queue survives a redirect (post/redirect/get).
    """

    def __init__(self, storage: Optional[KeyValueStorage] = None, key: str = "toasts"):
        self.storage = storage
        self.key = key
        self._queue: List[Dict[str, str]] = self._load()

    def _load(self) -> List[Dict[str, str]]:
        if self.storage is None:
            return []
        raw = self.storage.get_item(self.key)
        if not raw:
            return []
        try:
            items = json.loads(raw)
        except ValueError:
            logger.warning("Dropping unreadable toast queue")
            return []
        return items if isinstance(items, list) else []

    def _save(self) -> None:
        if self.storage is None:
            return
        if self._queue:
            self.storage.set_item(self.key, json.dumps(self._queue))
        else:
            self.storage.remove_item(self.key)

    def show(self, kind: str, title: str, message: str = "") -> None:
        if kind not in TOAST_KINDS:
            kind = "info"
        self._queue.append({"type": kind, "title": title, "message": message or ""})
        self._save()

    @property
    def pending(self) -> List[Dict[str, str]]:
        return list(self._queue)

    def drain(self) -> List[Dict[str, str]]:
        queued, self._queue = self._queue, []
        self._save()
        return queued

    def __len__(self) -> int:
        return len(self._queue)


class ThemePreference:
    """Light/dark choice persisted under ``theme``; anything but ``"light"`` is dark."""

    def __init__(self, storage: KeyValueStorage, default: str = "dark"):
        self.storage = storage
        self.default = default

    @property
    def mode(self) -> str:
        return self.storage.get_item(THEME_KEY) or self.default

    @property
    def is_dark(self) -> bool:
        return self.mode != "light"

    def toggle(self) -> bool:
        dark = not self.is_dark
        self.storage.set_item(THEME_KEY, "dark" if dark else "light")
        return dark


def category_links(categories: Iterable[str], root: str = "/shop") -> List[Tuple[str, str]]:
    return [(name, link(f"/category/{normalize_slug(name)}", root)) for name in categories]


@dataclass
class HeaderState:
    cart_count: int = 0
    wishlist_count: int = 0
    is_authenticated: bool = False
    display_name: str = ""
    email: str = ""
    is_dark: bool = True
    categories: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def show_cart_badge(self) -> bool:
        return self.cart_count > 0

    @property
    def show_wishlist_badge(self) -> bool:
        return self.wishlist_count > 0

    @property
    def mobile_cart_label(self) -> str:
        return f"Cart ({self.cart_count})" if self.cart_count > 0 else "Cart"

    @property
    def auth_link(self) -> Tuple[str, str]:
        if self.is_authenticated:
            return link("/profile"), "My Profile"
        return link("/login"), "Sign In"

    @classmethod
    def from_store(cls, store, categories: Iterable[str] = (), is_dark: bool = True) -> "HeaderState":
        session = store.session
        return cls(
            cart_count=store.cart_count,
            wishlist_count=store.wishlist_count,
            is_authenticated=session is not None,
            display_name=(session.display_name or session.email) if session else "",
            email=session.email if session else "",
            is_dark=is_dark,
            categories=category_links(categories),
        )
