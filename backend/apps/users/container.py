from __future__ import annotations

from .repositories import UserRepository
from .services import ProfileService


def build_profile_service() -> ProfileService:
    return ProfileService(users=UserRepository())
