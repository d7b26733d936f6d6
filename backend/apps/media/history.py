from __future__ import annotations

from typing import List

from apps.common import get_logger
from .dtos import MediaHistoryDTO
from .protocols import MediaHistoryRepositoryProtocol
from .transforms import thumbnail_url

logger = get_logger(__name__).bind(component="media", layer="service")


def _to_dto(row) -> MediaHistoryDTO:
    created = getattr(row, "created_at", None)
    return MediaHistoryDTO(
        id=row.id,
        file_name=row.file_name,
        file_url=row.file_url,
        media_type=row.media_type,
        admin_email=row.admin_email,
        created_at=created.isoformat() if created is not None else None,
        thumbnail_url=thumbnail_url(row.file_url),
    )


class MediaHistoryService:
    def __init__(self, repo: MediaHistoryRepositoryProtocol):
        self.repo = repo
        self.logger = logger.bind(service="MediaHistoryService")

    def record(self, name: str, url: str, media_type: str, admin_email: str = "") -> bool:
        """Log a finished upload or upscale; a failure here never reaches the caller."""
        try:
            self.repo.create(
                file_name=name,
                file_url=url,
                media_type=media_type,
                admin_email=admin_email or "unknown",
            )
        except Exception as exc:
            self.logger.error("Failed to save media history", name=name, error=str(exc))
            return False
        return True

    def recent(self, limit: int = 50) -> List[MediaHistoryDTO]:
        return [_to_dto(row) for row in self.repo.recent(limit)]

    def clear(self) -> int:
        deleted = self.repo.clear()
        self.logger.info("Media history cleared", deleted=deleted)
        return deleted
