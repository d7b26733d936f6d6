from rest_framework import serializers

from .validators import validate_full_name


class ProfileSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    email = serializers.EmailField()
    full_name = serializers.CharField(allow_blank=True)
    display_name = serializers.CharField()
    member_since = serializers.DateTimeField(allow_null=True)
    is_admin = serializers.BooleanField()

    def to_representation(self, instance):
        if hasattr(instance, "__dataclass_fields__"):
            return {
                "id": instance.id,
                "email": instance.email,
                "full_name": instance.full_name,
                "display_name": instance.display_name,
                "member_since": instance.member_since,
                "is_admin": instance.is_admin,
            }
        return super().to_representation(instance)


class ProfileUpdateSerializer(serializers.Serializer):
    full_name = serializers.CharField()

    def validate_full_name(self, value: str) -> str:
        return validate_full_name(value)
