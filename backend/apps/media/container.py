from __future__ import annotations

from django.conf import settings
from django.core.cache import cache

from .config import SystemConfigService
from .history import MediaHistoryService
from .repositories import MediaHistoryRepository, SystemConfigRepository
from .retry import RetryPolicy
from .uploader import MediaUploader
from .upscaler import UpscaleService


def build_system_config_service() -> SystemConfigService:
    return SystemConfigService(repo=SystemConfigRepository(), cache_backend=cache)


def build_media_history_service() -> MediaHistoryService:
    return MediaHistoryService(repo=MediaHistoryRepository())


def build_media_uploader() -> MediaUploader:
    return MediaUploader(
        config=build_system_config_service(),
        history=build_media_history_service(),
        timeout=settings.MEDIA_HTTP_TIMEOUT,
    )


def build_upscale_service(max_wait=None, **policy_overrides) -> UpscaleService:
    """``max_wait`` bounds the total polling sleep, for callers serving a request."""
    policy = RetryPolicy.from_settings(**policy_overrides)
    if max_wait is not None:
        policy = policy.capped(max_wait)
    return UpscaleService(
        config=build_system_config_service(),
        history=build_media_history_service(),
        policy=policy,
        timeout=settings.MEDIA_HTTP_TIMEOUT,
    )
