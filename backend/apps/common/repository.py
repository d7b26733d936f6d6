from typing import Any, Dict, Generic, Iterable, Optional, Tuple, Type, TypeVar

from django.db import models

T = TypeVar("T", bound=models.Model)


class GenericRepository(Generic[T]):
    """Thin ORM wrapper shared by every app's repositories.

    Services only talk to repositories, so tests can swap them for in-memory
    fakes without touching the database.
    """

    def __init__(self, model: Type[T]):
        self.model = model

    def get(self, **filters) -> Optional[T]:
        return self.model.objects.filter(**filters).first()

    def list(self, **filters) -> Iterable[T]:
        return self.model.objects.filter(**filters)

    def exists(self, **filters) -> bool:
        return self.model.objects.filter(**filters).exists()

    def count(self, **filters) -> int:
        return self.model.objects.filter(**filters).count()

    def create(self, **data) -> T:
        return self.model.objects.create(**data)

    def upsert(self, lookup: Dict[str, Any], **defaults) -> Tuple[T, bool]:
        """Insert or update the row matching ``lookup``; returns ``(obj, created)``."""
        return self.model.objects.update_or_create(defaults=defaults, **lookup)

    def update(self, obj: T, **data) -> T:
        for k, v in data.items():
            setattr(obj, k, v)
        obj.save()
        return obj

    def delete(self, obj: T) -> None:
        obj.delete()

    def delete_where(self, **filters) -> int:
        deleted, _ = self.model.objects.filter(**filters).delete()
        return deleted
