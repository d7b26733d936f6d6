from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional


def split_csv(raw: Any) -> List[str]:
    """Split a comma separated form value (or pass a list through), dropping blanks."""
    if raw is None:
        return []
    parts = raw if isinstance(raw, (list, tuple)) else str(raw).split(",")
    return [str(p).strip() for p in parts if str(p).strip()]


def compose_images(main_image: str, gallery: List[str]) -> List[str]:
    """Main image first, gallery after.

    A gallery without a main image keeps an empty first slot so gallery
    images never get promoted to the main image.
    """
    main_image = (main_image or "").strip()
    if main_image:
        return [main_image, *gallery]
    if gallery:
        return ["", *gallery]
    return []


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


@dataclass
class ProductWriteCommand:
    name: Optional[str] = None
    brand: Optional[str] = None
    category: Optional[str] = None
    price: Optional[Decimal] = None
    rating: Optional[Decimal] = None
    description: Optional[str] = None
    images: Optional[List[str]] = None
    features: Optional[List[str]] = None
    warranty: Optional[str] = None

    @staticmethod
    def from_raw(payload: Dict[str, Any], partial: bool = False) -> "ProductWriteCommand":
        data = dict(payload or {})
        data.pop("id", None)

        def text(key):
            if key not in data:
                return None if partial else ""
            return str(data.get(key) or "").strip()

        images = None
        if "images" in data:
            images = [str(u or "").strip() for u in data.get("images") or []]
        elif "image_main" in data or "images_gallery" in data or not partial:
            images = compose_images(
                str(data.get("image_main") or ""), split_csv(data.get("images_gallery"))
            )
        features = None
        if "features" in data or not partial:
            features = split_csv(data.get("features"))
        return ProductWriteCommand(
            name=text("name"),
            brand=text("brand"),
            category=text("category"),
            price=_to_decimal(data.get("price")),
            rating=_to_decimal(data.get("rating")),
            description=text("description"),
            images=images,
            features=features,
            warranty=text("warranty"),
        )

    def as_fields(self) -> Dict[str, Any]:
        """Only the fields that were supplied."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


@dataclass
class SlideWriteCommand:
    fields: Dict[str, Any] = field(default_factory=dict)

    TEXT_FIELDS = (
        "title",
        "description",
        "button_text",
        "button_link",
        "image_url_desktop",
        "image_url_mobile",
        "thumbnail_url",
        "fit_desktop",
        "fit_mobile",
    )
    FLAG_FIELDS = ("is_active", "show_overlay")

    @staticmethod
    def _flag(value: Any) -> bool:
        # Select inputs post the strings "true" / "false".
        if isinstance(value, str):
            return value.strip().lower() == "true"
        return bool(value)

    @classmethod
    def from_raw(cls, payload: Dict[str, Any]) -> "SlideWriteCommand":
        data = dict(payload or {})
        out: Dict[str, Any] = {}
        for key in cls.TEXT_FIELDS:
            if key in data:
                out[key] = str(data[key] or "").strip()
        for key in cls.FLAG_FIELDS:
            if key in data:
                out[key] = cls._flag(data[key])
        return cls(fields=out)
