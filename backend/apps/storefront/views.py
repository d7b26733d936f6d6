from __future__ import annotations

from typing import Any, Dict, Optional

from asgiref.sync import async_to_sync
from django.http import HttpResponseRedirect
from django.shortcuts import render
from django.utils.safestring import mark_safe
from django.views import View

from apps.auth.container import build_session_service
from apps.carts.middleware import get_shop_store
from apps.carts.storage import SessionStorage
from apps.common import get_logger
from .components import SHOP_ROOT, link
from .container import build_storefront_router
from .ui import HeaderState, ThemePreference, Toaster

logger = get_logger(__name__).bind(component="storefront", layer="view")

# Form fields that belong to the transport, not to the page action.
RESERVED_FIELDS = ("csrfmiddlewaretoken", "action")


def fragment_for(request, path: str) -> str:
    query = request.META.get("QUERY_STRING", "")
    fragment = "/" + (path or "").strip("/")
    return f"{fragment}?{query}" if query else fragment


def action_payload(request) -> Dict[str, Any]:
    payload = {key: value for key, value in request.POST.dict().items() if key not in RESERVED_FIELDS}
    payload.update(request.FILES.dict())
    return payload


class RoutedPageView(View):
    """Serves one fragment route per request.

    GET navigates and renders the shell. POST navigates, delivers the posted
    ``action`` to the page (or to the shell), then redirects back so a reload
    never replays the action. Forms with field errors are re-rendered in place.
    """

    shell_template = ""
    root = SHOP_ROOT
    theme_default = "dark"
    shell_actions = ("toggle-theme",)
    log = logger

    def get(self, request, path: str = ""):
        return self.respond(request, path)

    def post(self, request, path: str = ""):
        return self.respond(request, path, request.POST.get("action", ""), action_payload(request))

    def respond(self, request, path: str, action: str = "", payload: Optional[Dict[str, Any]] = None):
        storage = SessionStorage(request.session)
        toasts = Toaster(storage)
        theme = ThemePreference(storage, default=self.theme_default)
        self.prepare(request, toasts)
        fragment = fragment_for(request, path)

        if action in self.shell_actions:
            location = self.shell_action(request, action, toasts, theme) or fragment
            return HttpResponseRedirect(link(location, self.root))

        router = self.build_router(request, toasts, theme)

        async def drive():
            await router.navigate(fragment)
            if action:
                await router.dispatch(action, payload or {})
            extras = await self.collect(router)
            await router.teardown()
            return extras

        extras = async_to_sync(drive)()
        self.log.debug("Served page", path=router.path, action=action or None, state=router.state.value)

        if request.method == "POST":
            if router.document.data.get("errors"):
                return self.render_shell(request, router, toasts, theme, extras, status=400)
            return HttpResponseRedirect(link(router.next_location or router.location, self.root))
        if router.redirects:
            return HttpResponseRedirect(link(router.location, self.root))
        return self.render_shell(request, router, toasts, theme, extras, status=404 if router.not_found else 200)

    def render_shell(self, request, router, toasts, theme, extras, status=200):
        context = {
            "title": router.document.title,
            "page": mark_safe(router.document.render(request=request)),
            "toasts": toasts.drain(),
            "is_dark": theme.is_dark,
            "root": self.root,
            "location": link(router.location, self.root),
            **extras,
        }
        return render(request, self.shell_template, context, status=status)

    def prepare(self, request, toasts) -> None:
        pass

    def build_router(self, request, toasts, theme):
        raise NotImplementedError

    def shell_action(self, request, action, toasts, theme) -> Optional[str]:
        if action == "toggle-theme":
            theme.toggle()
        return None

    async def collect(self, router) -> Dict[str, Any]:
        return {}


class StorefrontView(RoutedPageView):
    shell_template = "storefront/shell.html"
    shell_actions = ("toggle-theme", "logout")
    sessions = build_session_service()
    log = logger.bind(view="StorefrontView")

    def prepare(self, request, toasts) -> None:
        def on_store_event(event):
            if event.kind == "sync_failed":
                toasts.show("error", "Sync Failed", "Your latest change could not be saved. Please try again.")
            elif event.kind == "backend_unavailable":
                toasts.show("error", "Connection Issue", "Your saved cart is unavailable. Using guest mode.")

        # The auth signals look the store up here to switch it on sign-in and sign-out.
        request.shop_store = get_shop_store(request, listeners=[on_store_event])

    def build_router(self, request, toasts, theme):
        return build_storefront_router(request, request.shop_store, toasts, theme)

    def shell_action(self, request, action, toasts, theme) -> Optional[str]:
        if action == "logout":
            self.sessions.logout(request)
            toasts.show("success", "Signed Out", "You have been successfully signed out.")
            return "/login"
        return super().shell_action(request, action, toasts, theme)

    async def collect(self, router) -> Dict[str, Any]:
        categories = await router.context["catalog"].list_categories()
        theme = router.context["theme"]
        return {"header": HeaderState.from_store(router.context["store"], categories, theme.is_dark)}
