from __future__ import annotations

from typing import Optional, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from apps.users.models import User


class UserRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional["User"]: ...

    def update(self, obj: "User", **data) -> "User": ...
