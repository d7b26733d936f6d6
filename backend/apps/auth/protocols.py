from __future__ import annotations

from typing import Any, Optional, Protocol


class UserAccountRepositoryProtocol(Protocol):
    def email_exists(self, email: str) -> bool: ...

    def create_user(self, *, email: str, password: str, full_name: str) -> Any: ...

    def get_by_email(self, email: str) -> Optional[Any]: ...
