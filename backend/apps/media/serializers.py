from rest_framework import serializers

from .config import KNOWN_KEYS
from .upscaler import ALLOWED_SCALES


class _SourceSerializer(serializers.Serializer):
    file = serializers.FileField(required=False)
    url = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        if not attrs.get("file") and not (attrs.get("url") or "").strip():
            raise serializers.ValidationError("Provide an image file or an image URL.")
        return attrs


class MediaUploadRequestSerializer(_SourceSerializer):
    custom_name = serializers.CharField(required=False, allow_blank=True, max_length=255)


class MediaUpscaleRequestSerializer(_SourceSerializer):
    scale = serializers.ChoiceField(choices=ALLOWED_SCALES, default=2)


class TransformLinkSerializer(serializers.Serializer):
    key = serializers.CharField()
    label = serializers.CharField()
    url = serializers.CharField()


class ToastSerializer(serializers.Serializer):
    type = serializers.CharField()
    title = serializers.CharField()
    message = serializers.CharField(allow_blank=True)


class UploadResultSerializer(serializers.Serializer):
    name = serializers.CharField()
    url = serializers.CharField()
    optimized = serializers.BooleanField()
    links = TransformLinkSerializer(many=True)


class UpscaleResultSerializer(serializers.Serializer):
    name = serializers.CharField()
    original_url = serializers.CharField()
    output_url = serializers.CharField()
    scale = serializers.IntegerField()


class MediaHistorySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    file_name = serializers.CharField()
    file_url = serializers.CharField()
    media_type = serializers.CharField()
    admin_email = serializers.CharField()
    created_at = serializers.CharField(allow_null=True)
    thumbnail_url = serializers.CharField(allow_blank=True)


class SystemConfigUpdateSerializer(serializers.Serializer):
    values = serializers.DictField(child=serializers.CharField(allow_blank=True))

    def validate_values(self, values):
        unknown = sorted(set(values) - set(KNOWN_KEYS))
        if unknown:
            raise serializers.ValidationError(f"Unknown config keys: {', '.join(unknown)}")
        return values
