from dataclasses import dataclass
from typing import Optional


@dataclass
class Session:
    user_id: int
    email: str
    display_name: str
    is_admin: bool = False
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
