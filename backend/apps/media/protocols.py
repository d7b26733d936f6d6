from __future__ import annotations

from typing import Any, Iterable, Optional, Protocol


class SystemConfigRepositoryProtocol(Protocol):
    def list(self, **filters) -> Iterable[Any]: ...

    def upsert(self, lookup, **defaults): ...


class MediaHistoryRepositoryProtocol(Protocol):
    def create(self, **data) -> Any: ...

    def recent(self, limit: int) -> Iterable[Any]: ...

    def clear(self) -> int: ...


class ToastSink(Protocol):
    def show(self, kind: str, title: str, message: str = "") -> None: ...


class CacheBackendProtocol(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any, timeout: Optional[int] = None) -> None: ...

    def delete(self, key: str) -> None: ...
