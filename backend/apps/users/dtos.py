from dataclasses import dataclass
from typing import Optional

from .models import User


@dataclass
class ProfileDTO:
    id: int
    email: str
    full_name: str
    display_name: str
    member_since: Optional[str]
    is_admin: bool


def user_to_profile(u: User, *, is_admin: bool = False) -> ProfileDTO:
    joined = getattr(u, "date_joined", None)
    return ProfileDTO(
        id=u.id,
        email=u.email,
        full_name=u.full_name,
        display_name=u.full_name.strip() or u.email,
        member_since=joined.isoformat() if joined is not None else None,
        is_admin=is_admin,
    )
