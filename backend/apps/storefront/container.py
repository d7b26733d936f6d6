from __future__ import annotations

from apps.auth.container import build_registration_service, build_session_service
from apps.catalog.container import build_catalog_service
from apps.users.container import build_profile_service
from .facade import AsyncCatalog
from .router import Router
from .routes import DYNAMIC_ROUTES, GUARDS, ROUTES


def build_storefront_router(request, store, toasts, theme=None) -> Router:
    return Router(
        ROUTES,
        DYNAMIC_ROUTES,
        GUARDS,
        session_provider=lambda: store.session,
        toasts=toasts,
        context={
            "catalog": AsyncCatalog(build_catalog_service()),
            "store": store,
            "request": request,
            "theme": theme,
            "services": {
                "sessions": build_session_service(),
                "registration": build_registration_service(),
                "profiles": build_profile_service(),
            },
        },
        default_title="Aries Mall",
        name="storefront",
    )
