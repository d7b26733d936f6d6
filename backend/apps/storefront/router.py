"""Fragment router shared by the storefront and the admin panel.

One page is active at a time. ``navigate`` tears the current page down,
applies the guards, mounts the matched template and awaits the page
initializer with a ``PageContext`` carrying a fresh ``NavigationToken``.
"""
from __future__ import annotations

import enum
import inspect
import itertools
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Sequence, Tuple
from urllib.parse import parse_qsl, urlencode

from django.template import TemplateDoesNotExist
from django.template.loader import get_template

from apps.common import get_logger
from .document import NavigationToken, PageContext, PageDocument
from .events import EventRegistry

logger = get_logger(__name__).bind(component="storefront", layer="router")

NOT_FOUND_HTML = "<h1>404 - Page Not Found</h1>"
LOAD_ERROR_HTML = "<h1>Error - Could not load page</h1>"
PAGE_ERROR_HTML = '<div class="page-error"><p>Something went wrong while loading this page. Please try again later.</p></div>'

Initializer = Callable[[PageContext], Awaitable[None]]
Toast = Tuple[str, str, str]


class RouterState(enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    ACTIVE = "active"


@dataclass(frozen=True)
class Route:
    name: str
    template: str
    initializer: Initializer
    title: str = ""


@dataclass(frozen=True)
class DynamicRoute:
    """``/product/:id`` style matcher; ``optional`` also accepts the bare prefix."""

    prefix: str
    param: str
    route: Route
    optional: bool = False

    def match(self, path: str) -> Optional[Dict[str, str]]:
        if self.optional and path == self.prefix.rstrip("/"):
            return {self.param: ""}
        if not path.startswith(self.prefix):
            return None
        return {self.param: path[len(self.prefix):].split("/")[0]}


@dataclass
class Redirect:
    to: str
    toast: Optional[Toast] = None


Guard = Callable[[str, Any], Optional[Redirect]]


def parse_fragment(fragment: str) -> Tuple[str, Dict[str, str]]:
    """``"#/search?q=sofa"`` -> ``("/search", {"q": "sofa"})``."""
    raw = (fragment or "").lstrip("#")
    path, _, query = raw.partition("?")
    path = path or "/"
    if not path.startswith("/"):
        path = "/" + path
    if len(path) > 1:
        path = path.rstrip("/") or "/"
    params: Dict[str, str] = {}
    for key, value in parse_qsl(query, keep_blank_values=True):
        params.setdefault(key, value)
    return path, params


def _under(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix.rstrip("/") + "/")


def protected_prefixes(prefixes: Sequence[str], login_path: str, toast: Optional[Toast] = None) -> Guard:
    def guard(path: str, session: Any) -> Optional[Redirect]:
        if session is None and path != login_path and any(_under(path, p) for p in prefixes):
            return Redirect(login_path, toast)
        return None

    return guard


def guest_only(paths: Sequence[str], target: str) -> Guard:
    def guard(path: str, session: Any) -> Optional[Redirect]:
        if session is not None and path in paths:
            return Redirect(target)
        return None

    return guard


def legacy_redirects(mapping: Mapping[str, str]) -> Guard:
    def guard(path: str, session: Any) -> Optional[Redirect]:
        target = mapping.get(path)
        return Redirect(target) if target else None

    return guard


async def _call(callback: Callable[..., Any], *args: Any) -> Any:
    result = callback(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


class Router:
    def __init__(
        self,
        routes: Mapping[str, Route],
        dynamic: Sequence[DynamicRoute] = (),
        guards: Sequence[Guard] = (),
        *,
        session_provider: Callable[[], Any],
        toasts: Any,
        context: Optional[Dict[str, Any]] = None,
        loader: Callable[[str], Any] = get_template,
        default_title: str = "",
        max_redirects: int = 5,
        name: str = "router",
    ):
        self.routes = dict(routes)
        self.dynamic = list(dynamic)
        self.guards = list(guards)
        self.session_provider = session_provider
        self.toasts = toasts
        self.context = dict(context or {})
        self.loader = loader
        self.default_title = default_title
        self.max_redirects = max_redirects
        self.state = RouterState.IDLE
        self.document = PageDocument(default_title)
        self.path = "/"
        self.query: Dict[str, str] = {}
        self.route: Optional[Route] = None
        self.redirects: List[str] = []
        self.next_location: Optional[str] = None
        self._token: Optional[NavigationToken] = None
        self._page: Optional[PageContext] = None
        self._ids = itertools.count(1)
        self.logger = logger.bind(router=name)

    @property
    def token(self) -> Optional[NavigationToken]:
        return self._token

    @property
    def page(self) -> Optional[PageContext]:
        return self._page

    @property
    def events(self) -> EventRegistry:
        """Handlers of the active page; empty when no page is mounted."""
        if self._page is None or self._page.events is None:
            return EventRegistry()
        return self._page.events

    @property
    def not_found(self) -> bool:
        return self.state is RouterState.ACTIVE and self.route is None

    @property
    def location(self) -> str:
        return f"{self.path}?{urlencode(self.query)}" if self.query else self.path

    async def teardown(self) -> None:
        """Run the active page's cleanup callbacks and drop its handlers."""
        page, self._page = self._page, None
        if page is not None:
            for callback in reversed(page.cleanups):
                try:
                    await _call(callback)
                except Exception:
                    self.logger.exception("Page cleanup failed", path=page.path)
            page.cleanups.clear()
            if page.events is not None:
                page.events.clear()
        self.state = RouterState.IDLE

    async def navigate(self, fragment: str) -> PageDocument:
        if self._token is not None:
            self._token.cancel()
        await self.teardown()

        path, query = parse_fragment(fragment)
        self.redirects = []
        self.next_location = None
        session = self.session_provider()
        for _ in range(self.max_redirects + 1):
            redirect = self._apply_guards(path, session)
            if redirect is None:
                break
            self.logger.debug("Guard redirect", source=path, target=redirect.to)
            if redirect.toast:
                self.toasts.show(*redirect.toast)
            path, query = parse_fragment(redirect.to)
            self.redirects.append(path)
        else:
            self.logger.error("Redirect loop", path=path, hops=len(self.redirects))
            return self._terminal(path, query, LOAD_ERROR_HTML)

        token = NavigationToken(id=next(self._ids), path=path)
        self._token = token
        self.path, self.query = path, query

        route, params = self.resolve(path)
        if route is None:
            self.logger.info("No route matched", path=path)
            return self._terminal(path, query, NOT_FOUND_HTML)

        self.state = RouterState.LOADING
        self.route = route
        document = PageDocument(route.title or self.default_title)
        try:
            document.mount(self.loader(route.template), route.template)
        except TemplateDoesNotExist:
            self.logger.error("Page template missing", template=route.template)
            return self._terminal(path, query, LOAD_ERROR_HTML)
        self.document = document

        ctx = PageContext(
            document=document,
            token=token,
            path=path,
            params=params,
            query=query,
            toasts=self.toasts,
            events=EventRegistry(token),
            router=self,
            **self.context,
        )
        self._page = ctx
        try:
            await route.initializer(ctx)
        except Exception:
            self.logger.exception("Page initializer failed", path=path, route=route.name)
            ctx.render("page_error", PAGE_ERROR_HTML)

        if token is self._token:
            self.state = RouterState.ACTIVE
            self.logger.debug("Navigation complete", path=path, route=route.name, navigation_id=token.id)
        return document

    def resolve(self, path: str) -> Tuple[Optional[Route], Dict[str, str]]:
        route = self.routes.get(path)
        if route is not None:
            return route, {}
        for matcher in self.dynamic:
            params = matcher.match(path)
            if params is not None:
                return matcher.route, params
        return None, {}

    async def dispatch(self, action: str, payload: Optional[Mapping[str, Any]] = None) -> Any:
        """Deliver a user action to the active page's handlers."""
        if self.state is not RouterState.ACTIVE or action not in self.events:
            self.logger.info("Ignored action", action=action, path=self.path, state=self.state.value)
            return None
        try:
            return await self.events.dispatch(action, payload)
        except Exception:
            self.logger.exception("Action handler failed", action=action, path=self.path)
            self.toasts.show("error", "Something went wrong", "Please try again.")
            return None

    def _apply_guards(self, path: str, session: Any) -> Optional[Redirect]:
        for guard in self.guards:
            redirect = guard(path, session)
            if redirect is not None and redirect.to != path:
                return redirect
        return None

    def _terminal(self, path: str, query: Dict[str, str], html: str) -> PageDocument:
        self.path, self.query = path, query
        self.route = None
        self.document = PageDocument("Page Not Found" if html == NOT_FOUND_HTML else self.default_title)
        self.document.set_html("app", html)
        self.state = RouterState.ACTIVE
        return self.document
