from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Tuple

from django.contrib.auth import authenticate, login as django_login, logout as django_logout
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from apps.common import get_logger
from apps.users.permissions import is_store_admin
from .dtos import Session
from .protocols import UserAccountRepositoryProtocol

logger = get_logger(__name__).bind(component="auth", layer="service")

ServiceError = Tuple[str, str, Optional[Dict[str, Any]]]


def session_for(user, tokens: Optional[RefreshToken] = None) -> Session:
    full_name = (getattr(user, "full_name", "") or "").strip()
    return Session(
        user_id=user.id,
        email=user.email,
        display_name=full_name or user.email,
        is_admin=is_store_admin(user),
        access_token=str(tokens.access_token) if tokens is not None else None,
        refresh_token=str(tokens) if tokens is not None else None,
    )


class RegistrationService:
    def __init__(self, users: UserAccountRepositoryProtocol):
        self.users = users
        self.logger = logger.bind(service="RegistrationService")

    def signup(self, data: Dict[str, Any]):
        """Create a shopper account. Returns ``(user, error)``."""
        email = data["email"].strip().lower()
        self.logger.debug("Received signup request", email=email)
        if self.users.email_exists(email):
            self.logger.info("Signup rejected: email already registered", email=email)
            return None, (
                "CONFLICT",
                "An account with this email already exists.",
                {"email": email},
            )
        user = self.users.create_user(
            email=email, password=data["password"], full_name=data["full_name"].strip()
        )
        self.logger.info("User signed up", user_id=user.id)
        return user, None


class SessionService:
    """Django session plus JWT pair for the storefront and the admin panel."""

    def __init__(
        self,
        authenticator: Callable[..., Any] = authenticate,
        login: Callable[..., None] = django_login,
        logout: Callable[..., None] = django_logout,
        token_factory: Callable[[Any], RefreshToken] = RefreshToken.for_user,
    ):
        self.authenticator = authenticator
        self._login = login
        self._logout = logout
        self.token_factory = token_factory
        self.logger = logger.bind(service="SessionService")

    def start(self, request, user) -> Session:
        self._login(request, user, backend="django.contrib.auth.backends.ModelBackend")
        session = session_for(user, self.token_factory(user))
        self.logger.info("Session started", user_id=user.id, is_admin=session.is_admin)
        return session

    def login(
        self, request, email: str, password: str, *, admin: bool = False
    ) -> Tuple[Optional[Session], Optional[ServiceError]]:
        email = (email or "").strip().lower()
        user = self.authenticator(request, username=email, password=password)
        if user is None:
            self.logger.info("Login rejected: bad credentials", email=email, admin=admin)
            return None, ("UNAUTHORIZED", "Invalid email or password.", None)
        if admin and not is_store_admin(user):
            self.logger.warning("Admin login rejected: not an administrator", user_id=user.id)
            return None, ("FORBIDDEN", "This account does not have admin access.", None)
        return self.start(request, user), None

    def logout(self, request, refresh_token: Optional[str] = None) -> Optional[ServiceError]:
        user_id = getattr(getattr(request, "user", None), "id", None)
        if refresh_token:
            try:
                RefreshToken(refresh_token).blacklist()
            except TokenError as exc:
                self.logger.warning("Logout failed: token error", user_id=user_id, error=str(exc))
                return ("VALIDATION_ERROR", "Invalid token", {"refresh": str(exc)})
        self._logout(request)
        self.logger.info("User logged out", user_id=user_id)
        return None

    def current(self, request) -> Optional[Session]:
        user = getattr(request, "user", None)
        if user is None or not getattr(user, "is_authenticated", False):
            return None
        return session_for(user)
