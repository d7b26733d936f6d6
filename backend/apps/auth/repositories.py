from __future__ import annotations

from typing import Any, Optional

from django.contrib.auth import get_user_model

from .protocols import UserAccountRepositoryProtocol


class DjangoUserAccountRepository(UserAccountRepositoryProtocol):
    def __init__(self) -> None:
        self.model = get_user_model()

    def email_exists(self, email: str) -> bool:
        return self.model.objects.filter(email__iexact=email).exists()

    def create_user(self, *, email: str, password: str, full_name: str):
        # The email doubles as the username so ModelBackend can authenticate by email.
        return self.model.objects.create_user(
            username=email, email=email, password=password, full_name=full_name
        )

    def get_by_email(self, email: str) -> Optional[Any]:
        return self.model.objects.filter(email__iexact=email).first()
