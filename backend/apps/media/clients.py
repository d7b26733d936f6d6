"""Thin ``requests`` clients for the third-party media APIs.

Every transport or protocol failure surfaces as ``ExternalServiceError``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import requests

from apps.api.exceptions import ExternalServiceError
from apps.common import get_logger

logger = get_logger(__name__).bind(component="media", layer="client")

Source = Union[bytes, str]


class _HttpClient:
    service = "http"

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
        proxy_prefix: str = "",
    ):
        self.session = session or requests.Session()
        self.timeout = timeout
        self.proxy_prefix = proxy_prefix or ""
        self.logger = logger.bind(client=type(self).__name__)

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        target = f"{self.proxy_prefix}{url}"
        try:
            return self.session.request(method, target, timeout=self.timeout, **kwargs)
        except requests.Timeout as exc:
            self.logger.warning("Upstream timed out", url=url)
            raise ExternalServiceError(self.service, f"{self.service} did not respond in time", timeout=True) from exc
        except requests.RequestException as exc:
            self.logger.warning("Upstream request failed", url=url, error=str(exc))
            raise ExternalServiceError(self.service, f"Network error talking to {self.service}") from exc

    def _json(self, response: requests.Response) -> Dict[str, Any]:
        try:
            return response.json()
        except ValueError as exc:
            raise ExternalServiceError(
                self.service,
                f"{self.service} response was not JSON",
                upstream_status=response.status_code,
            ) from exc

    def _error_text(self, response: requests.Response, fallback: str) -> str:
        try:
            body = response.json()
        except ValueError:
            return f"{fallback} ({response.status_code})"
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict):
            return error.get("message") or fallback
        if isinstance(body, dict):
            return body.get("detail") or body.get("message") or error or fallback
        return fallback


@dataclass
class CloudinaryUpload:
    public_id: str
    secure_url: str


class CloudinaryClient(_HttpClient):
    service = "cloudinary"
    base_url = "https://api.cloudinary.com/v1_1"

    def __init__(self, cloud_name: str, upload_preset: str, **kwargs):
        super().__init__(**kwargs)
        self.cloud_name = cloud_name
        self.upload_preset = upload_preset

    @property
    def upload_url(self) -> str:
        return f"{self.base_url}/{self.cloud_name}/image/upload"

    def upload(self, source: Source, public_id: Optional[str] = None, filename: str = "upload") -> CloudinaryUpload:
        data = {"upload_preset": self.upload_preset}
        if public_id:
            data["public_id"] = public_id
        files = None
        if isinstance(source, bytes):
            files = {"file": (filename, source)}
        else:
            data["file"] = source
        response = self._request("POST", self.upload_url, data=data, files=files)
        if not response.ok:
            raise ExternalServiceError(
                self.service,
                f"Cloudinary error: {self._error_text(response, 'Upload failed')}",
                upstream_status=response.status_code,
            )
        body = self._json(response)
        if not body.get("secure_url"):
            raise ExternalServiceError(self.service, "Cloudinary did not return a URL", upstream_status=response.status_code)
        self.logger.info("Uploaded to Cloudinary", public_id=body.get("public_id"))
        return CloudinaryUpload(public_id=body.get("public_id", ""), secure_url=body["secure_url"])


class TinifyClient(_HttpClient):
    service = "tinify"
    shrink_url = "https://api.tinify.com/shrink"

    def __init__(self, api_key: str, **kwargs):
        super().__init__(**kwargs)
        self.auth = ("api", api_key)

    def shrink(self, source: Source, content_type: str = "application/octet-stream") -> str:
        """Compress ``source`` and return the URL of the optimized image."""
        if isinstance(source, bytes):
            response = self._request(
                "POST", self.shrink_url, data=source, auth=self.auth, headers={"Content-Type": content_type}
            )
        else:
            response = self._request("POST", self.shrink_url, json={"source": {"url": source}}, auth=self.auth)
        if not response.ok:
            raise ExternalServiceError(
                self.service,
                f"TinyPNG API Error: {self._error_text(response, response.reason or 'error')}",
                upstream_status=response.status_code,
            )
        body = self._json(response)
        before = (body.get("input") or {}).get("size")
        after = (body.get("output") or {}).get("size")
        if before and after:
            self.logger.info("Optimized image", saved_percent=round((1 - after / before) * 100, 1))
        url = response.headers.get("Location") or (body.get("output") or {}).get("url")
        if not url:
            raise ExternalServiceError(self.service, "TinyPNG did not return an optimized image URL.")
        return url

    def download(self, url: str) -> bytes:
        response = self._request("GET", url, auth=self.auth)
        if not response.ok:
            raise ExternalServiceError(
                self.service, "Could not download optimized image", upstream_status=response.status_code
            )
        return response.content


class ReplicateClient(_HttpClient):
    service = "replicate"
    predictions_url = "https://api.replicate.com/v1/predictions"

    def __init__(self, api_token: str, **kwargs):
        super().__init__(**kwargs)
        self.headers = {"Authorization": f"Token {api_token}"}

    def create_prediction(self, version: str, image_url: str, scale: int) -> Dict[str, Any]:
        response = self._request(
            "POST",
            self.predictions_url,
            json={"version": version, "input": {"img": image_url, "scale": int(scale)}},
            headers=self.headers,
        )
        if response.status_code != 201:
            raise ExternalServiceError(
                self.service,
                f"API Error ({response.status_code}): {self._error_text(response, 'Unknown Replicate Error')}",
                upstream_status=response.status_code,
            )
        prediction = self._json(response)
        self.logger.info("Prediction started", prediction_id=prediction.get("id"))
        return prediction

    def get_prediction(self, status_url: str) -> Dict[str, Any]:
        response = self._request("GET", status_url, headers=self.headers)
        if not response.ok:
            raise ExternalServiceError(
                self.service, "Replicate status check failed", upstream_status=response.status_code
            )
        return self._json(response)
