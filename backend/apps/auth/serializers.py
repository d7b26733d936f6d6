from rest_framework import serializers

from apps.users.validators import (
    validate_email_address,
    validate_full_name,
    validate_password as validate_password_rules,
)


class SignupRequestSerializer(serializers.Serializer):
    full_name = serializers.CharField(allow_blank=True, trim_whitespace=False)
    email = serializers.CharField(allow_blank=True)
    password = serializers.CharField(write_only=True, allow_blank=True, trim_whitespace=False)

    def validate_full_name(self, value: str) -> str:
        return validate_full_name(value)

    def validate_email(self, value: str) -> str:
        return validate_email_address(value)

    def validate_password(self, value: str) -> str:
        return validate_password_rules(value, signup=True)


class LoginRequestSerializer(serializers.Serializer):
    email = serializers.CharField(allow_blank=True)
    password = serializers.CharField(write_only=True, allow_blank=True, trim_whitespace=False)

    def validate_email(self, value: str) -> str:
        return validate_email_address(value)

    def validate_password(self, value: str) -> str:
        return validate_password_rules(value)


class SessionSerializer(serializers.Serializer):
    authenticated = serializers.BooleanField()
    user_id = serializers.IntegerField(required=False)
    email = serializers.EmailField(required=False)
    display_name = serializers.CharField(required=False)
    is_admin = serializers.BooleanField(required=False)
    access = serializers.CharField(required=False)
    refresh = serializers.CharField(required=False)


class LogoutRequestSerializer(serializers.Serializer):
    refresh = serializers.CharField(required=False, allow_blank=True)


def session_payload(session) -> dict:
    if session is None:
        return {"authenticated": False}
    data = {
        "authenticated": True,
        "user_id": session.user_id,
        "email": session.email,
        "display_name": session.display_name,
        "is_admin": session.is_admin,
    }
    if session.access_token:
        data["access"] = session.access_token
        data["refresh"] = session.refresh_token
    return data
