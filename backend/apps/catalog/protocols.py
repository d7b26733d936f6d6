from __future__ import annotations

from typing import Any, Iterable, List, Optional, Protocol, Sequence, Tuple

from .models import Product, Slide


class CacheBackendProtocol(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any, timeout: Optional[int] = None) -> None: ...


class ProductRepositoryProtocol(Protocol):
    def list(self, **filters) -> Iterable[Product]: ...

    def get(self, **filters) -> Optional[Product]: ...

    def list_by_ids(self, ids: Sequence[int]) -> Iterable[Product]: ...

    def list_by_category(self, category: str, brand: Optional[str] = None) -> Iterable[Product]: ...

    def search(self, query: str) -> Iterable[Product]: ...

    def latest(self, limit: int) -> Iterable[Product]: ...

    def category_counts(self) -> List[Tuple[str, int]]: ...

    def count(self, **filters) -> int: ...

    def create(self, **data) -> Product: ...

    def update(self, obj: Product, **data) -> Product: ...

    def delete(self, obj: Product) -> None: ...


class SlideRepositoryProtocol(Protocol):
    def list(self, **filters) -> Iterable[Slide]: ...

    def list_active(self) -> Iterable[Slide]: ...

    def get(self, **filters) -> Optional[Slide]: ...

    def create(self, **data) -> Slide: ...

    def update(self, obj: Slide, **data) -> Slide: ...

    def delete(self, obj: Slide) -> None: ...
