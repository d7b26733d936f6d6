from __future__ import annotations

import mimetypes
import os
import tempfile
import uuid
from dataclasses import dataclass
from typing import BinaryIO, Dict, Iterator, Optional, Union

from apps.common import get_logger

logger = get_logger(__name__).bind(component="media", layer="staging")


class InvalidStagedFile(ValueError):
    pass


@dataclass
class StagedItem:
    id: str
    name: str
    content_type: str = ""
    path: Optional[str] = None
    url: Optional[str] = None

    @property
    def is_file(self) -> bool:
        return self.path is not None

    @property
    def default_name(self) -> str:
        """Original name without its extension."""
        stem, _ = os.path.splitext(self.name)
        return stem or self.name

    def read(self) -> bytes:
        if self.path is None:
            raise InvalidStagedFile(f"{self.id} is a URL, not a file")
        with open(self.path, "rb") as handle:
            return handle.read()

    @property
    def source(self) -> Union[bytes, str]:
        return self.read() if self.is_file else self.url


class StagingArea:
    """Files and URLs waiting to be uploaded or upscaled.

    Uploaded files are spooled to temp files; ``discard`` and ``clear`` delete
    them.
    """

    def __init__(self, prefix: str = "pending", directory: Optional[str] = None):
        self.prefix = prefix
        self.directory = directory
        self._items: Dict[str, StagedItem] = {}

    def _new_id(self) -> str:
        return f"{self.prefix}-{uuid.uuid4().hex[:12]}"

    def stage_file(self, name: str, stream: Union[bytes, BinaryIO], content_type: str = "") -> StagedItem:
        content_type = content_type or mimetypes.guess_type(name)[0] or ""
        if not content_type.startswith("image/"):
            raise InvalidStagedFile(f'File "{name}" is not an image.')
        _, suffix = os.path.splitext(name)
        with tempfile.NamedTemporaryFile(
            prefix="ariesmall-", suffix=suffix, dir=self.directory, delete=False
        ) as handle:
            if isinstance(stream, bytes):
                handle.write(stream)
            else:
                for chunk in iter(lambda: stream.read(64 * 1024), b""):
                    handle.write(chunk)
        item = StagedItem(id=self._new_id(), name=name, content_type=content_type, path=handle.name)
        self._items[item.id] = item
        logger.debug("Staged file", item_id=item.id, name=name)
        return item

    def stage_url(self, url: str) -> StagedItem:
        url = (url or "").strip()
        if not url:
            raise InvalidStagedFile("Please enter a valid image URL.")
        name = url.rstrip("/").split("/")[-1] or url
        item = StagedItem(id=self._new_id(), name=name, url=url)
        self._items[item.id] = item
        return item

    def get(self, item_id: str) -> Optional[StagedItem]:
        return self._items.get(item_id)

    def discard(self, item_id: str) -> None:
        item = self._items.pop(item_id, None)
        if item is not None and item.path and os.path.exists(item.path):
            os.unlink(item.path)

    def clear(self) -> None:
        for item_id in list(self._items):
            self.discard(item_id)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[StagedItem]:
        return iter(list(self._items.values()))

    def __enter__(self) -> "StagingArea":
        return self

    def __exit__(self, *exc) -> None:
        self.clear()


def stage_source(area: StagingArea, data) -> StagedItem:
    """Stage the validated ``file`` (an uploaded file) or, failing that, ``url``."""
    upload = data.get("file")
    if upload is not None:
        return area.stage_file(upload.name, upload, getattr(upload, "content_type", "") or "")
    return area.stage_url(data.get("url") or "")
