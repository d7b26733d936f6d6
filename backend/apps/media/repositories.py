from apps.common.repository import GenericRepository
from .models import MediaHistory, SystemConfig


class SystemConfigRepository(GenericRepository[SystemConfig]):
    def __init__(self):
        super().__init__(SystemConfig)


class MediaHistoryRepository(GenericRepository[MediaHistory]):
    def __init__(self):
        super().__init__(MediaHistory)

    def recent(self, limit: int):
        return self.model.objects.order_by("-created_at", "-id")[:limit]

    def clear(self) -> int:
        return self.delete_where()
