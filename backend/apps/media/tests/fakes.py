from types import SimpleNamespace

from apps.media.clients import CloudinaryUpload
from apps.media.config import (
    CLOUDINARY_CLOUD_NAME,
    CLOUDINARY_UPLOAD_PRESET,
    CLOUDINARY_UPSCALER_PRESET,
    REPLICATE_API_TOKEN,
    SystemConfigService,
    TINYPNG_API_KEY,
    UPSCALER_MODEL,
)
from apps.media.history import MediaHistoryService


class FakeCache:
    def __init__(self):
        self.store = {}

    def get(self, key, default=None):
        return self.store.get(key, default)

    def set(self, key, value, timeout=None):
        self.store[key] = value

    def delete(self, key):
        self.store.pop(key, None)


class FakeConfigRepository:
    def __init__(self, values=None):
        self.rows = dict(values or {})
        self.list_calls = 0

    def list(self, **filters):
        self.list_calls += 1
        return [SimpleNamespace(key=k, value=v) for k, v in self.rows.items()]

    def upsert(self, lookup, **defaults):
        self.rows[lookup["key"]] = defaults["value"]
        return SimpleNamespace(key=lookup["key"], value=defaults["value"]), True


class FakeHistoryRepository:
    def __init__(self):
        self.rows = []

    def create(self, **data):
        row = SimpleNamespace(id=len(self.rows) + 1, created_at=None, **data)
        self.rows.append(row)
        return row

    def recent(self, limit):
        return list(reversed(self.rows))[:limit]

    def clear(self):
        count = len(self.rows)
        self.rows = []
        return count


class RecordingToasts:
    def __init__(self):
        self.shown = []

    def show(self, kind, title, message=""):
        self.shown.append((kind, title, message))

    @property
    def titles(self):
        return [title for _, title, _ in self.shown]


class FakeCloudinary:
    def __init__(self, cloud_name, preset, error=None, **kwargs):
        self.cloud_name = cloud_name
        self.preset = preset
        self.error = error
        self.uploads = []

    def upload(self, source, public_id=None, filename="upload"):
        if self.error:
            raise self.error
        self.uploads.append((source, public_id, filename))
        public_id = public_id or "abc123"
        return CloudinaryUpload(
            public_id=public_id,
            secure_url=f"https://res.cloudinary.com/{self.cloud_name}/image/upload/v1/{public_id}.jpg",
        )


MEDIA_CONFIG = {
    CLOUDINARY_CLOUD_NAME: "demo",
    CLOUDINARY_UPLOAD_PRESET: "unsigned",
    CLOUDINARY_UPSCALER_PRESET: "upscaler",
    TINYPNG_API_KEY: "",
    REPLICATE_API_TOKEN: "r8_secret_token",
    UPSCALER_MODEL: "model-version",
}


def make_config(**overrides):
    values = dict(MEDIA_CONFIG)
    values.update(overrides)
    return SystemConfigService(FakeConfigRepository(values), FakeCache(), env={})


def make_history():
    repo = FakeHistoryRepository()
    return MediaHistoryService(repo), repo
