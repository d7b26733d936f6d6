from __future__ import annotations

import os
from typing import Any, Dict, Mapping, Optional

from django.db import DatabaseError

from apps.api.exceptions import ApplicationError
from apps.common import get_logger
from .protocols import CacheBackendProtocol, SystemConfigRepositoryProtocol

logger = get_logger(__name__).bind(component="media", layer="service")

CLOUDINARY_CLOUD_NAME = "CLOUDINARY_CLOUD_NAME"
CLOUDINARY_UPLOAD_PRESET = "CLOUDINARY_UPLOAD_PRESET"
CLOUDINARY_UPSCALER_PRESET = "CLOUDINARY_UPSCALER_PRESET"
TINYPNG_API_KEY = "TINYPNG_API_KEY"
CORS_PROXY_URL = "CORS_PROXY_URL"
REPLICATE_API_TOKEN = "REPLICATE_API_TOKEN"
UPSCALER_MODEL = "UPSCALER_MODEL"

KNOWN_KEYS = (
    CLOUDINARY_CLOUD_NAME,
    CLOUDINARY_UPLOAD_PRESET,
    CLOUDINARY_UPSCALER_PRESET,
    TINYPNG_API_KEY,
    CORS_PROXY_URL,
    REPLICATE_API_TOKEN,
    UPSCALER_MODEL,
)
SECRET_KEYS = frozenset({TINYPNG_API_KEY, REPLICATE_API_TOKEN})


def mask(value: str) -> str:
    if not value:
        return ""
    return "***" + value[-4:] if len(value) > 8 else "***"


class MediaConfigError(ApplicationError):
    def __init__(self, message: str, missing=()):
        super().__init__(
            "CONFIGURATION_ERROR",
            message,
            status_code=503,
            details={"missing": list(missing)} if missing else None,
            hint="Set the missing keys from the admin settings or the environment.",
        )


class SystemConfigService:
    """Key/value settings for the media tools.

    Rows in ``system_config`` win over environment variables of the same name.
    The merged mapping is cached until the next ``update``.
    """

    cache_key = "media:system_config"

    def __init__(
        self,
        repo: SystemConfigRepositoryProtocol,
        cache_backend: CacheBackendProtocol,
        env: Optional[Mapping[str, str]] = None,
        timeout: int = 300,
    ):
        self.repo = repo
        self.cache = cache_backend
        self.env = os.environ if env is None else env
        self.timeout = timeout
        self.logger = logger.bind(service="SystemConfigService")

    def load(self) -> Dict[str, str]:
        cached = self.cache.get(self.cache_key)
        if cached is not None:
            return dict(cached)
        config = {key: self.env.get(key, "") for key in KNOWN_KEYS}
        try:
            rows = list(self.repo.list())
        except DatabaseError as exc:
            self.logger.error("Failed to load system config", error=str(exc))
            raise ApplicationError(
                "SERVICE_UNAVAILABLE", "Could not load API keys from database."
            ) from exc
        for row in rows:
            config[row.key] = row.value
        self.cache.set(self.cache_key, config, timeout=self.timeout)
        self.logger.debug("System config loaded", keys=len(config))
        return dict(config)

    def get(self, key: str, default: str = "") -> str:
        return self.load().get(key) or default

    def require(self, *keys: str) -> Dict[str, str]:
        """The loaded config, or ``MediaConfigError`` naming any blank key."""
        config = self.load()
        missing = [key for key in keys if not config.get(key)]
        if missing:
            self.logger.warning("Media tools are not configured", missing=missing)
            raise MediaConfigError("API tokens or Cloudinary details are not set.", missing)
        return config

    def update(self, values: Mapping[str, Any]) -> Dict[str, str]:
        for key, value in values.items():
            self.repo.upsert({"key": key}, value="" if value is None else str(value))
        self.cache.delete(self.cache_key)
        self.logger.info("System config updated", keys=sorted(values))
        return self.load()

    def public_view(self) -> Dict[str, str]:
        return {
            key: mask(value) if key in SECRET_KEYS else value
            for key, value in self.load().items()
        }
