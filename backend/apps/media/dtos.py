from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class MediaHistoryDTO:
    id: int
    file_name: str
    file_url: str
    media_type: str
    admin_email: str
    created_at: Optional[str]
    thumbnail_url: str = ""


@dataclass
class TransformLink:
    key: str
    label: str
    url: str


@dataclass
class UploadResult:
    name: str
    url: str
    optimized: bool
    links: List[TransformLink] = field(default_factory=list)


@dataclass
class UpscaleResult:
    name: str
    original_url: str
    output_url: str
    scale: int
