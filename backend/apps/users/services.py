from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from apps.common import get_logger
from .dtos import ProfileDTO, user_to_profile
from .permissions import is_store_admin
from .protocols import UserRepositoryProtocol

logger = get_logger(__name__).bind(component="users", layer="service")

ServiceError = Tuple[str, str, Optional[Dict[str, Any]]]


class ProfileService:
    def __init__(self, users: UserRepositoryProtocol):
        self.users = users
        self.logger = logger.bind(service="ProfileService")

    def get_profile(self, user_id: int) -> Optional[ProfileDTO]:
        user = self.users.get(id=user_id)
        if not user:
            self.logger.info("Profile not found", user_id=user_id)
            return None
        return user_to_profile(user, is_admin=is_store_admin(user))

    def update_full_name(
        self, user_id: int, full_name: str
    ) -> Tuple[Optional[ProfileDTO], Optional[ServiceError]]:
        user = self.users.get(id=user_id)
        if not user:
            self.logger.warning("Profile update failed: not found", user_id=user_id)
            return None, ("NOT_FOUND", "User not found", {"id": str(user_id)})
        user = self.users.update(user, full_name=full_name)
        self.logger.info("Profile updated", user_id=user_id)
        return user_to_profile(user, is_admin=is_store_admin(user)), None
