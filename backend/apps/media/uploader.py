from __future__ import annotations

from typing import Callable, Optional

from apps.api.exceptions import ExternalServiceError
from apps.common import get_logger
from .clients import CloudinaryClient, TinifyClient
from .config import (
    CLOUDINARY_CLOUD_NAME,
    CLOUDINARY_UPLOAD_PRESET,
    CORS_PROXY_URL,
    TINYPNG_API_KEY,
    SystemConfigService,
)
from .dtos import UploadResult
from .history import MediaHistoryService
from .models import MediaHistory
from .protocols import ToastSink
from .staging import StagedItem
from .transforms import transform_links

logger = get_logger(__name__).bind(component="media", layer="service")


class MediaUploader:
    """Optional TinyPNG pass, then a Cloudinary upload and a history record."""

    def __init__(
        self,
        config: SystemConfigService,
        history: MediaHistoryService,
        toasts: Optional[ToastSink] = None,
        cloudinary_factory: Callable[..., CloudinaryClient] = CloudinaryClient,
        tinify_factory: Callable[..., TinifyClient] = TinifyClient,
        timeout: float = 30.0,
    ):
        self.config = config
        self.history = history
        self.toasts = toasts
        self.cloudinary_factory = cloudinary_factory
        self.tinify_factory = tinify_factory
        self.timeout = timeout
        self.logger = logger.bind(service="MediaUploader")

    def _toast(self, sink: Optional[ToastSink], kind: str, title: str, message: str = "") -> None:
        sink = sink or self.toasts
        if sink is not None:
            sink.show(kind, title, message)

    def upload(
        self,
        item: StagedItem,
        custom_name: str = "",
        admin_email: str = "",
        toasts: Optional[ToastSink] = None,
    ) -> UploadResult:
        cfg = self.config.require(CLOUDINARY_CLOUD_NAME, CLOUDINARY_UPLOAD_PRESET)
        custom_name = (custom_name or "").strip()
        source = item.source
        optimized = False

        if cfg.get(TINYPNG_API_KEY):
            tinify = self.tinify_factory(
                cfg[TINYPNG_API_KEY], timeout=self.timeout, proxy_prefix=cfg.get(CORS_PROXY_URL, "")
            )
            try:
                source = tinify.download(tinify.shrink(source, item.content_type or "application/octet-stream"))
                optimized = True
            except ExternalServiceError as exc:
                self.logger.warning("Optimization skipped", item_id=item.id, error=exc.message)
                self._toast(toasts, "info", "Optimization Skipped", "TinyPNG was unavailable. Uploading the original image.")
                source = item.source
        else:
            self.logger.debug("Skipping optimization: API key missing", item_id=item.id)

        cloudinary = self.cloudinary_factory(
            cfg[CLOUDINARY_CLOUD_NAME], cfg[CLOUDINARY_UPLOAD_PRESET], timeout=self.timeout
        )
        try:
            uploaded = cloudinary.upload(source, public_id=custom_name or None, filename=item.name)
        except ExternalServiceError as exc:
            self._toast(toasts, "error", "Upload Failed", exc.message)
            raise

        final_name = custom_name or uploaded.public_id
        self._toast(toasts, "success", "Upload Successful", final_name)
        self.history.record(final_name, uploaded.secure_url, MediaHistory.UPLOAD, admin_email)
        self.logger.info("Upload finished", name=final_name, optimized=optimized)
        return UploadResult(
            name=final_name,
            url=uploaded.secure_url,
            optimized=optimized,
            links=transform_links(uploaded.secure_url),
        )
