import re

from rest_framework import serializers

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 8


def validate_full_name(value: str) -> str:
    """Full name is mandatory on signup; surrounding whitespace is dropped."""
    trimmed = (value or "").strip()
    if not trimmed:
        raise serializers.ValidationError("Full name is required.")
    return trimmed


def validate_email_address(value: str) -> str:
    trimmed = (value or "").strip()
    if not trimmed:
        raise serializers.ValidationError("Email is required.")
    if not EMAIL_PATTERN.match(trimmed):
        raise serializers.ValidationError("Please enter a valid email address.")
    return trimmed.lower()


def validate_password(value: str, *, signup: bool = False) -> str:
    """
    Login only needs a non-empty password; signup additionally enforces the
    minimum length.
    """
    if not value:
        raise serializers.ValidationError("Password is required.")
    if signup and len(value) < MIN_PASSWORD_LENGTH:
        raise serializers.ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long."
        )
    return value
