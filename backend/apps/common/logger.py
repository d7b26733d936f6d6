import logging
from typing import Any, Dict, Optional

# Context keys whose values never reach the log stream verbatim.
SENSITIVE_KEYS = frozenset(
    {"token", "api_key", "apikey", "authorization", "password", "secret", "refresh"}
)
REDACTED = "***"
MAX_VALUE_LENGTH = 300


class AppLogger:
    """Stdlib logger wrapper that carries bound key/value context.

    Messages are rendered as ``"message | key=value key=value"`` so they stay
    grep-friendly without a structured log pipeline.
    """

    def __init__(
        self,
        name: str,
        context: Optional[Dict[str, Any]] = None,
        _logger: Optional[logging.Logger] = None,
    ):
        self._logger = _logger or logging.getLogger(name)
        self._name = name
        self._context = context or {}

    @property
    def context(self) -> Dict[str, Any]:
        return dict(self._context)

    def bind(self, **extra: Any) -> "AppLogger":
        """Return a child logger with ``extra`` merged into the bound context."""
        return AppLogger(self._name, {**self._context, **extra}, _logger=self._logger)

    def unbind(self, *keys: str) -> "AppLogger":
        remaining = {k: v for k, v in self._context.items() if k not in keys}
        return AppLogger(self._name, remaining, _logger=self._logger)

    def debug(self, message: str, **context: Any) -> None:
        self._log(logging.DEBUG, message, context)

    def info(self, message: str, **context: Any) -> None:
        self._log(logging.INFO, message, context)

    def warning(self, message: str, **context: Any) -> None:
        self._log(logging.WARNING, message, context)

    def error(self, message: str, **context: Any) -> None:
        self._log(logging.ERROR, message, context)

    def exception(self, message: str, **context: Any) -> None:
        """Log at ERROR level with the active exception's traceback attached."""
        self._log(logging.ERROR, message, context, exc_info=True)

    def _log(
        self, level: int, message: str, context: Dict[str, Any], exc_info: bool = False
    ) -> None:
        if not self._logger.isEnabledFor(level):
            return
        payload = {**self._context, **context}
        self._logger.log(level, self.render(message, payload), exc_info=exc_info)

    @classmethod
    def render(cls, message: str, context: Dict[str, Any]) -> str:
        if not context:
            return message
        pairs = " ".join(
            f"{key}={cls._stringify(key, value)}" for key, value in context.items()
        )
        return f"{message} | {pairs}"

    @staticmethod
    def _stringify(key: str, value: Any) -> str:
        if value is not None and key.lower() in SENSITIVE_KEYS:
            return REDACTED
        if isinstance(value, (str, int, float, bool)) or value is None:
            text = str(value)
        else:
            text = repr(value)
        if len(text) > MAX_VALUE_LENGTH:
            text = text[: MAX_VALUE_LENGTH - 3] + "..."
        return text


def get_logger(name: str) -> AppLogger:
    return AppLogger(name)
