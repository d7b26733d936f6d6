from typing import Dict

from drf_spectacular.utils import OpenApiResponse, inline_serializer
from rest_framework import serializers


class ErrorDetailSerializer(serializers.Serializer):
    code = serializers.CharField()
    message = serializers.CharField()
    status = serializers.IntegerField()
    details = serializers.JSONField(required=False)
    hint = serializers.CharField(required=False, allow_blank=True)
    extra = serializers.JSONField(required=False)


class ErrorResponseSerializer(serializers.Serializer):
    error = ErrorDetailSerializer()


class DetailResponseSerializer(serializers.Serializer):
    detail = serializers.CharField()


def error_responses(*status_codes: int) -> Dict[int, OpenApiResponse]:
    """Envelope responses for each of ``status_codes``, for use in ``extend_schema``."""
    return {code: OpenApiResponse(response=ErrorResponseSerializer) for code in status_codes}


def paginated_response(
    item_serializer_class: type[serializers.Serializer],
) -> type[serializers.Serializer]:
    """Schema for a ``PageNumberPagination`` page of ``item_serializer_class``."""
    name = getattr(item_serializer_class, "__name__", "Items")
    return inline_serializer(
        name=f"Paginated{name}",
        fields={
            "count": serializers.IntegerField(),
            "next": serializers.CharField(allow_null=True),
            "previous": serializers.CharField(allow_null=True),
            "results": item_serializer_class(many=True),
        },
    )
