from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from apps.api.exceptions import ExternalServiceError
from apps.common import get_logger
from .clients import CloudinaryClient, ReplicateClient
from .config import (
    CLOUDINARY_CLOUD_NAME,
    CLOUDINARY_UPSCALER_PRESET,
    REPLICATE_API_TOKEN,
    UPSCALER_MODEL,
    SystemConfigService,
)
from .dtos import UpscaleResult
from .history import MediaHistoryService
from .models import MediaHistory
from .protocols import ToastSink
from .retry import RetryPolicy
from .staging import StagedItem

logger = get_logger(__name__).bind(component="media", layer="service")

ALLOWED_SCALES = (2, 4)
URL_UPLOAD_NAME = "URL_Upload.jpg"
TERMINAL_STATES = ("succeeded", "failed", "canceled")


class UpscaleFailed(ExternalServiceError):
    def __init__(self, message: str):
        super().__init__("replicate", message)


class UpscaleTimeout(ExternalServiceError):
    def __init__(self, attempts: int):
        super().__init__(
            "replicate",
            f"Upscaling did not finish after {attempts} status checks.",
            timeout=True,
        )
        self.attempts = attempts


def _first_output(output: Any) -> str:
    if isinstance(output, (list, tuple)):
        return output[0] if output else ""
    return output or ""


class UpscaleService:
    """Stage the source on Cloudinary, run the Replicate model and poll it to completion.

    Polling follows ``policy``: each status check is preceded by one of the
    policy's delays, and running out of delays raises ``UpscaleTimeout``.
    """

    def __init__(
        self,
        config: SystemConfigService,
        history: MediaHistoryService,
        toasts: Optional[ToastSink] = None,
        cloudinary_factory: Callable[..., CloudinaryClient] = CloudinaryClient,
        replicate_factory: Callable[..., ReplicateClient] = ReplicateClient,
        policy: Optional[RetryPolicy] = None,
        timeout: float = 30.0,
    ):
        self.config = config
        self.history = history
        self.toasts = toasts
        self.cloudinary_factory = cloudinary_factory
        self.replicate_factory = replicate_factory
        self.policy = policy or RetryPolicy()
        self.timeout = timeout
        self.logger = logger.bind(service="UpscaleService")

    def _toast(self, sink: Optional[ToastSink], kind: str, title: str, message: str = "") -> None:
        sink = sink or self.toasts
        if sink is not None:
            sink.show(kind, title, message)

    def upscale(
        self,
        item: StagedItem,
        scale: int = 2,
        admin_email: str = "",
        toasts: Optional[ToastSink] = None,
    ) -> UpscaleResult:
        if scale not in ALLOWED_SCALES:
            raise ValueError(f"Scale must be one of {ALLOWED_SCALES}, got {scale!r}")
        cfg = self.config.require(REPLICATE_API_TOKEN, CLOUDINARY_CLOUD_NAME, CLOUDINARY_UPSCALER_PRESET)
        name = item.name if item.is_file else URL_UPLOAD_NAME
        try:
            original_url = self._stage(item, cfg)
            replicate = self.replicate_factory(cfg[REPLICATE_API_TOKEN], timeout=self.timeout)
            prediction = replicate.create_prediction(cfg.get(UPSCALER_MODEL, ""), original_url, scale)
            output_url = self._wait(replicate, prediction)
        except ExternalServiceError as exc:
            self.logger.error("Upscale failed", name=name, scale=scale, error=exc.message)
            self._toast(toasts, "error", "Upscale Failed", exc.message)
            raise

        label = f"{name} ({scale}x)"
        self.history.record(label, output_url, MediaHistory.UPSCALE, admin_email)
        self._toast(toasts, "success", "Upscale Successful", label)
        self.logger.info("Upscale finished", name=name, scale=scale)
        return UpscaleResult(name=label, original_url=original_url, output_url=output_url, scale=scale)

    def _stage(self, item: StagedItem, cfg: Dict[str, str]) -> str:
        if not item.is_file:
            return item.url
        cloudinary = self.cloudinary_factory(
            cfg[CLOUDINARY_CLOUD_NAME], cfg[CLOUDINARY_UPSCALER_PRESET], timeout=self.timeout
        )
        return cloudinary.upload(item.read(), filename=item.name).secure_url

    def _wait(self, replicate: ReplicateClient, prediction: Dict[str, Any]) -> str:
        status_url = (prediction.get("urls") or {}).get("get")
        if not status_url:
            raise UpscaleFailed("Replicate did not return a status URL.")
        self.logger.debug("Waiting for prediction", max_wait=self.policy.budget, attempts=self.policy.max_attempts)
        attempts = 0
        for delay in self.policy.delays():
            self.policy.sleep(delay)
            attempts += 1
            prediction = replicate.get_prediction(status_url)
            state = prediction.get("status")
            self.logger.debug("Polled prediction", attempt=attempts, status=state)
            if state == "succeeded":
                return _first_output(prediction.get("output"))
            if state in TERMINAL_STATES:
                raise UpscaleFailed(f"AI failed: {prediction.get('error') or 'Unknown'}")
        raise UpscaleTimeout(attempts)
