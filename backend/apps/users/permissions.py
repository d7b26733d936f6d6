from django.conf import settings
from rest_framework.permissions import BasePermission


def is_store_admin(user) -> bool:
    """Staff accounts and the configured admin mailbox may use the admin panel."""
    if user is None or not getattr(user, "is_authenticated", False):
        return False
    if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
        return True
    email = (getattr(user, "email", "") or "").lower()
    return bool(email) and email == settings.ADMIN_EMAIL.lower()


class IsStoreAdmin(BasePermission):
    message = "Only store administrators may use this endpoint."

    def has_permission(self, request, view):
        return is_store_admin(getattr(request, "user", None))
