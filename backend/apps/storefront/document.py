from __future__ import annotations

import asyncio
import inspect
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Set

from asgiref.sync import sync_to_async
from django.template.backends.django import Template
from django.template.backends.utils import csrf_input

from apps.common import get_logger

logger = get_logger(__name__).bind(component="storefront", layer="document")

# Swapped for the request's CSRF input when the document is rendered.
CSRF_MARKER = "<!--csrf-->"


class PageDocument:
    """Server-side stand-in for the page DOM.

    A page template is mounted once per navigation; controllers then fill its
    named regions with HTML fragments. ``render`` produces the final markup.
    """

    def __init__(self, title: str = ""):
        self.title = title
        self.template: Optional[Template] = None
        self.template_name: str = ""
        self.regions: Dict[str, str] = {}
        self.hidden: Set[str] = set()
        self.data: Dict[str, Any] = {}

    def mount(self, template: Template, template_name: str = "") -> None:
        self.template = template
        self.template_name = template_name
        self.regions.clear()
        self.hidden.clear()
        self.data.clear()

    def set_html(self, region: str, html: str) -> None:
        self.regions[region] = html

    def append_html(self, region: str, html: str) -> None:
        self.regions[region] = self.regions.get(region, "") + html

    def html(self, region: str) -> str:
        return self.regions.get(region, "")

    def hide(self, region: str) -> None:
        self.hidden.add(region)

    def show(self, region: str) -> None:
        self.hidden.discard(region)

    def is_hidden(self, region: str) -> bool:
        return region in self.hidden

    def render(self, context: Optional[Mapping[str, Any]] = None, request=None) -> str:
        token = str(csrf_input(request)) if request is not None else ""
        regions = {name: html.replace(CSRF_MARKER, token) for name, html in self.regions.items()}
        if self.template is None:
            return regions.get("app", "")
        values = {"regions": regions, "hidden": self.hidden, "data": self.data, "title": self.title}
        values.update(context or {})
        return self.template.render(values, request)


@dataclass
class NavigationToken:
    id: int
    path: str
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class PageContext:
    """Everything a page initializer may touch, scoped to one navigation.

    Document writes go through the context and are dropped once ``token`` is
    cancelled, so an initializer still awaiting data cannot draw over the page
    that replaced it.
    """

    document: PageDocument
    token: NavigationToken
    path: str
    params: Dict[str, str] = field(default_factory=dict)
    query: Dict[str, str] = field(default_factory=dict)
    catalog: Any = None
    store: Any = None
    toasts: Any = None
    events: Any = None
    router: Any = None
    request: Any = None
    theme: Any = None
    services: Dict[str, Any] = field(default_factory=dict)
    cleanups: List[Callable[[], Any]] = field(default_factory=list)

    @property
    def active(self) -> bool:
        return not self.token.cancelled

    def _guard(self, operation: str, region: str = "") -> bool:
        if self.token.cancelled:
            logger.info(
                "Dropped write from stale navigation",
                navigation_id=self.token.id,
                path=self.token.path,
                operation=operation,
                region=region,
            )
            return False
        return True

    def render(self, region: str, html: str) -> bool:
        if not self._guard("render", region):
            return False
        self.document.set_html(region, html)
        return True

    def append(self, region: str, html: str) -> bool:
        if not self._guard("append", region):
            return False
        self.document.append_html(region, html)
        return True

    def hide(self, region: str) -> bool:
        if not self._guard("hide", region):
            return False
        self.document.hide(region)
        return True

    def show(self, region: str) -> bool:
        if not self._guard("show", region):
            return False
        self.document.show(region)
        return True

    def set_title(self, title: str) -> bool:
        if not self._guard("set_title"):
            return False
        self.document.title = title
        return True

    def set_data(self, key: str, value: Any) -> bool:
        if not self._guard("set_data", key):
            return False
        self.document.data[key] = value
        return True

    def redirect(self, location: str) -> bool:
        """Ask the view to send the browser to ``location`` after this request."""
        if not self._guard("redirect", location) or self.router is None:
            return False
        self.router.next_location = location
        return True

    def on_cleanup(self, callback: Callable[[], Any]) -> None:
        """Run ``callback`` when the page is torn down.

        A page that was already replaced never gets torn down again, so the
        callback runs right away instead of being kept.
        """
        if self.token.cancelled:
            logger.info(
                "Running cleanup registered by stale navigation",
                navigation_id=self.token.id,
                path=self.token.path,
            )
            result = callback()
            if inspect.isawaitable(result):
                asyncio.ensure_future(result)
            return
        self.cleanups.append(callback)

    async def run_sync(self, func: Callable[..., Any], *args, **kwargs) -> Any:
        """Call blocking code (ORM, HTTP) from an initializer or handler."""
        return await sync_to_async(func)(*args, **kwargs)
