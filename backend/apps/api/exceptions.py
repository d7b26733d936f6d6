from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple

from django.core.exceptions import (
    PermissionDenied as DjangoPermissionDenied,
    ValidationError as DjangoValidationError,
)
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import (
    AuthenticationFailed,
    MethodNotAllowed,
    NotAuthenticated,
    NotFound,
    ParseError,
    PermissionDenied,
    Throttled,
    ValidationError,
)
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from apps.api.utils import error_response
from apps.common import get_logger

logger = get_logger(__name__).bind(component="api", layer="exception")

GENERIC_SERVER_MESSAGE = "Something went wrong"

STATUS_CODE_DEFAULTS: Dict[int, Tuple[str, str]] = {
    status.HTTP_400_BAD_REQUEST: ("VALIDATION_ERROR", "Validation failed"),
    status.HTTP_401_UNAUTHORIZED: ("UNAUTHORIZED", "Authentication required"),
    status.HTTP_403_FORBIDDEN: ("FORBIDDEN", "You do not have permission to perform this action"),
    status.HTTP_404_NOT_FOUND: ("NOT_FOUND", "Resource not found"),
    status.HTTP_405_METHOD_NOT_ALLOWED: ("METHOD_NOT_ALLOWED", "Method not allowed"),
    status.HTTP_409_CONFLICT: ("CONFLICT", "Resource conflict"),
    status.HTTP_415_UNSUPPORTED_MEDIA_TYPE: ("UNSUPPORTED_MEDIA_TYPE", "Unsupported media type"),
    status.HTTP_429_TOO_MANY_REQUESTS: ("TOO_MANY_REQUESTS", "Request was throttled"),
}

# (exception types, code, fallback message); first match wins.
_EXCEPTION_CODES = (
    ((ValidationError,), "VALIDATION_ERROR", "Validation failed"),
    ((ParseError,), "VALIDATION_ERROR", "Malformed request"),
    ((AuthenticationFailed,), "UNAUTHORIZED", "Authentication failed"),
    ((NotAuthenticated,), "UNAUTHORIZED", "Authentication required"),
    (
        (PermissionDenied, DjangoPermissionDenied),
        "FORBIDDEN",
        "You do not have permission to perform this action",
    ),
    ((NotFound, Http404), "NOT_FOUND", "Resource not found"),
    ((MethodNotAllowed,), "METHOD_NOT_ALLOWED", "Method not allowed"),
    ((Throttled,), "TOO_MANY_REQUESTS", "Request was throttled"),
)


class ApplicationError(Exception):
    """
    Domain error raised from services or views and rendered as the envelope.

    Args:
        code: Machine readable error code.
        message: Human readable explanation.
        status_code: Explicit HTTP status; derived from the code when omitted.
        details: Structured details for clients.
        hint: Remediation hint.
        extra: Additional machine readable fields.
        headers: Response headers.
    """

    def __init__(
        self,
        code: str,
        message: str,
        *,
        status_code: Optional[int] = None,
        details: Optional[Any] = None,
        hint: Optional[str] = None,
        extra: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        self.hint = hint
        self.extra = extra
        self.headers = headers

    def to_response(self) -> Response:
        return error_response(
            self.code,
            self.message,
            self.details,
            http_status=self.status_code,
            hint=self.hint,
            extra=self.extra,
            headers=self.headers,
        )


class ExternalServiceError(ApplicationError):
    """A third-party HTTP API (image hosting, compression, upscaling) failed."""

    def __init__(
        self,
        service: str,
        message: str,
        *,
        upstream_status: Optional[int] = None,
        timeout: bool = False,
    ):
        super().__init__(
            "UPSTREAM_TIMEOUT" if timeout else "UPSTREAM_ERROR",
            message,
            details={"service": service, "upstreamStatus": upstream_status},
        )
        self.service = service
        self.upstream_status = upstream_status


def global_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """DRF ``EXCEPTION_HANDLER``: every failure leaves as the error envelope."""
    log = _bind_logger(context)

    if isinstance(exc, ApplicationError):
        log.info("Handled application error", code=exc.code, status=exc.status_code)
        return exc.to_response()

    if isinstance(exc, DjangoValidationError):
        exc = ValidationError(_django_validation_payload(exc))

    response = drf_exception_handler(exc, context)
    if response is None:
        log.exception("Unhandled exception reached the API boundary")
        return error_response(
            "SERVER_ERROR",
            GENERIC_SERVER_MESSAGE,
            http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    code, message, details, hint = _describe(exc, response.data, response.status_code)
    if response.status_code >= 500:
        log.error("Converted server error", code=code, status=response.status_code)
    else:
        log.info("Converted API exception", code=code, status=response.status_code)
    headers = dict(response.headers) if getattr(response, "headers", None) else None
    return error_response(
        code, message, details, http_status=response.status_code, hint=hint, headers=headers
    )


def _bind_logger(context: Dict[str, Any]):
    log = logger
    view = context.get("view")
    request = context.get("request")
    if view is not None:
        log = log.bind(view=type(view).__name__)
    if request is not None:
        log = log.bind(method=getattr(request, "method", None), path=getattr(request, "path", None))
    return log


def _django_validation_payload(exc: DjangoValidationError):
    if hasattr(exc, "message_dict"):
        return exc.message_dict
    return list(exc.messages)


def _describe(
    exc: Exception, payload: Any, status_code: int
) -> Tuple[str, str, Optional[Any], Optional[str]]:
    if status_code >= 500:
        return "SERVER_ERROR", GENERIC_SERVER_MESSAGE, None, None

    for types, code, fallback in _EXCEPTION_CODES:
        if isinstance(exc, types):
            break
    else:
        code, fallback = STATUS_CODE_DEFAULTS.get(status_code, ("UNKNOWN_ERROR", "Request failed"))

    message = _extract_message(payload, fallback)
    details: Optional[Any] = None
    hint: Optional[str] = None
    if code == "VALIDATION_ERROR":
        details = payload
    elif isinstance(exc, MethodNotAllowed):
        details = {"allowedMethods": list(getattr(exc, "allowed_methods", []) or [])}
    elif isinstance(exc, Throttled) and exc.wait is not None:
        details = {"retryAfter": exc.wait}
        hint = "Wait before retrying this request."
    elif code == "UNKNOWN_ERROR" and isinstance(payload, (dict, list)) and payload:
        details = payload
    return code, message, details, hint


def _extract_message(payload: Any, fallback: str) -> str:
    if isinstance(payload, str):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("detail"), str):
        return payload["detail"]
    if isinstance(payload, list) and payload and isinstance(payload[0], str):
        return payload[0]
    return fallback


__all__ = ["ApplicationError", "ExternalServiceError", "global_exception_handler"]
