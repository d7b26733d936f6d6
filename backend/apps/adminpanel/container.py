from __future__ import annotations

from django.conf import settings

from apps.auth.container import build_session_service
from apps.catalog.container import (
    build_dashboard_service,
    build_product_admin_service,
    build_slide_service,
)
from apps.media.container import (
    build_media_history_service,
    build_media_uploader,
    build_system_config_service,
    build_upscale_service,
)
from apps.storefront.router import Router
from .routes import GUARDS, ROUTES


def build_admin_router(request, toasts, theme=None, session=None) -> Router:
    """``session`` must be resolved by the caller, outside the event loop."""
    sessions = build_session_service()
    return Router(
        ROUTES,
        (),
        GUARDS,
        session_provider=lambda: session,
        toasts=toasts,
        context={
            "request": request,
            "theme": theme,
            "services": {
                "sessions": sessions,
                "dashboard": build_dashboard_service(),
                "products": build_product_admin_service(),
                "slides": build_slide_service(),
                "uploader": build_media_uploader(),
                "upscaler": build_upscale_service(max_wait=settings.UPSCALE_REQUEST_MAX_WAIT),
                "history": build_media_history_service(),
                "config": build_system_config_service(),
            },
        },
        default_title="Aries Mall Admin",
        name="adminpanel",
    )
