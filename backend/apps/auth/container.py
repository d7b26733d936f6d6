from __future__ import annotations

from .repositories import DjangoUserAccountRepository
from .services import RegistrationService, SessionService


def build_registration_service() -> RegistrationService:
    return RegistrationService(users=DjangoUserAccountRepository())


def build_session_service() -> SessionService:
    return SessionService()
