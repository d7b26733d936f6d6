from typing import Any, Optional

from apps.storefront.router import Guard, Redirect, Route, legacy_redirects
from .pages import dashboard, login, media_hub, products, profile

LOGIN_PATH = "/admin-login"
DASHBOARD_PATH = "/dashboard"


def _is_admin(session: Any) -> bool:
    return session is not None and bool(getattr(session, "is_admin", False))


def require_admin(login_path: str) -> Guard:
    def guard(path: str, session: Any) -> Optional[Redirect]:
        if path != login_path and not _is_admin(session):
            return Redirect(login_path)
        return None

    return guard


def admins_skip_login(login_path: str, target: str) -> Guard:
    def guard(path: str, session: Any) -> Optional[Redirect]:
        if path == login_path and _is_admin(session):
            return Redirect(target)
        return None

    return guard


ROUTES = {
    DASHBOARD_PATH: Route("dashboard", "adminpanel/pages/dashboard.html", dashboard.initialize, "Dashboard"),
    "/product-manager": Route(
        "product-manager", "adminpanel/pages/products.html", products.initialize, "Product Manager"
    ),
    "/media-hub": Route("media-hub", "adminpanel/pages/media_hub.html", media_hub.initialize, "Media Hub"),
    "/profile": Route("profile", "adminpanel/pages/profile.html", profile.initialize, "User Profile"),
    LOGIN_PATH: Route("admin-login", "adminpanel/pages/login.html", login.initialize, "Sign In"),
}

GUARDS = (
    legacy_redirects({"/": DASHBOARD_PATH}),
    require_admin(LOGIN_PATH),
    admins_skip_login(LOGIN_PATH, DASHBOARD_PATH),
)
