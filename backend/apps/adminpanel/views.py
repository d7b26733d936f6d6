from typing import Any, Dict, Optional

from apps.auth.container import build_session_service
from apps.common import get_logger
from apps.storefront.views import RoutedPageView
from .container import build_admin_router
from .routes import LOGIN_PATH

logger = get_logger(__name__).bind(component="adminpanel", layer="view")

ADMIN_ROOT = "/admin-panel"


class AdminPanelView(RoutedPageView):
    shell_template = "adminpanel/shell.html"
    root = ADMIN_ROOT
    shell_actions = ("toggle-theme", "logout")
    sessions = build_session_service()
    log = logger.bind(view="AdminPanelView")

    def prepare(self, request, toasts) -> None:
        # Resolving request.user queries the database, which is not allowed
        # once the router runs inside the event loop.
        request.admin_session = self.sessions.current(request)

    def build_router(self, request, toasts, theme):
        return build_admin_router(request, toasts, theme, session=request.admin_session)

    def shell_action(self, request, action, toasts, theme) -> Optional[str]:
        if action == "logout":
            self.sessions.logout(request)
            toasts.show("success", "Signed Out", "You have been successfully signed out.")
            return LOGIN_PATH
        return super().shell_action(request, action, toasts, theme)

    async def collect(self, router) -> Dict[str, Any]:
        session = router.session_provider()
        return {
            "admin_email": session.email if session is not None and session.is_admin else "",
            "nav": [
                ("/dashboard", "Dashboard"),
                ("/product-manager", "Product Manager"),
                ("/media-hub", "Media Hub"),
                ("/profile", "Profile"),
            ],
            "active_path": router.path,
        }
