from dataclasses import asdict

from django.conf import settings
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import error_responses
from apps.api.utils import error_response
from apps.common import get_logger
from apps.storefront.ui import Toaster
from apps.users.permissions import IsStoreAdmin
from .container import (
    build_media_history_service,
    build_media_uploader,
    build_system_config_service,
    build_upscale_service,
)
from .serializers import (
    MediaHistorySerializer,
    MediaUploadRequestSerializer,
    MediaUpscaleRequestSerializer,
    SystemConfigUpdateSerializer,
    UploadResultSerializer,
    UpscaleResultSerializer,
)
from .staging import InvalidStagedFile, StagingArea, stage_source

logger = get_logger(__name__).bind(component="media", layer="view")

_UPSTREAM_ERRORS = error_responses(400, 502, 503, 504)


class _MediaView(APIView):
    permission_classes = [IsStoreAdmin]
    parser_classes = [MultiPartParser, FormParser, JSONParser]

    @staticmethod
    def admin_email(request) -> str:
        return getattr(request.user, "email", "") or ""


@extend_schema(tags=["Media"])
class MediaUploadView(_MediaView):
    service = build_media_uploader()
    log = logger.bind(view="MediaUploadView")

    @extend_schema(
        summary="Optimize (when TinyPNG is configured) and upload an image to Cloudinary",
        request=MediaUploadRequestSerializer,
        responses={201: UploadResultSerializer, **_UPSTREAM_ERRORS},
    )
    def post(self, request):
        serializer = MediaUploadRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        toasts = Toaster()
        with StagingArea() as area:
            try:
                item = stage_source(area, data)
            except InvalidStagedFile as exc:
                return error_response("VALIDATION_ERROR", str(exc))
            result = self.service.upload(
                item,
                custom_name=data.get("custom_name", ""),
                admin_email=self.admin_email(request),
                toasts=toasts,
            )
        self.log.info("Media uploaded", name=result.name)
        body = UploadResultSerializer(asdict(result)).data
        return Response({**body, "toasts": toasts.drain()}, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Media"])
class MediaUpscaleView(_MediaView):
    service = build_upscale_service(max_wait=settings.UPSCALE_REQUEST_MAX_WAIT)
    log = logger.bind(view="MediaUpscaleView")

    @extend_schema(
        summary="Upscale an image with Replicate and wait for the result",
        request=MediaUpscaleRequestSerializer,
        responses={200: UpscaleResultSerializer, **_UPSTREAM_ERRORS},
    )
    def post(self, request):
        serializer = MediaUpscaleRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        toasts = Toaster()
        with StagingArea() as area:
            try:
                item = stage_source(area, data)
            except InvalidStagedFile as exc:
                return error_response("VALIDATION_ERROR", str(exc))
            result = self.service.upscale(
                item,
                scale=int(data["scale"]),
                admin_email=self.admin_email(request),
                toasts=toasts,
            )
        body = UpscaleResultSerializer(asdict(result)).data
        return Response({**body, "toasts": toasts.drain()})


@extend_schema(tags=["Media"])
class MediaHistoryView(_MediaView):
    service = build_media_history_service()
    log = logger.bind(view="MediaHistoryView")

    @extend_schema(
        summary="Recent uploads and upscales, newest first",
        parameters=[OpenApiParameter("limit", int, required=False)],
        responses={200: MediaHistorySerializer(many=True)},
    )
    def get(self, request):
        try:
            limit = max(1, min(int(request.query_params.get("limit", 50)), 200))
        except (TypeError, ValueError):
            limit = 50
        rows = self.service.recent(limit)
        return Response(MediaHistorySerializer([asdict(r) for r in rows], many=True).data)

    @extend_schema(summary="Clear all media history", responses={200: None})
    def delete(self, request):
        deleted = self.service.clear()
        self.log.info("Media history cleared", deleted=deleted, admin=self.admin_email(request))
        return Response({"deleted": deleted})


@extend_schema(tags=["Media"])
class SystemConfigView(_MediaView):
    service = build_system_config_service()
    log = logger.bind(view="SystemConfigView")

    @extend_schema(summary="Media tool settings with secrets masked")
    def get(self, request):
        return Response(self.service.public_view())

    @extend_schema(summary="Update media tool settings", request=SystemConfigUpdateSerializer)
    def put(self, request):
        serializer = SystemConfigUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.service.update(serializer.validated_data["values"])
        return Response(self.service.public_view())
