from decimal import Decimal
from typing import Any, Dict, Iterable, List

from .dtos import ProductDTO, SlideDTO
from .models import Product, Slide


def _iso(value):
    return value.isoformat() if value is not None else None


class ProductMapper:
    @staticmethod
    def to_dto(product: Product) -> ProductDTO:
        return ProductDTO(
            id=product.id,
            name=product.name,
            brand=product.brand or "",
            category=product.category,
            price=Decimal(product.price),
            rating=float(product.rating or 0),
            description=product.description or "",
            images=[str(url or "") for url in (product.images or [])],
            features=[str(f) for f in (product.features or []) if f],
            warranty=product.warranty or "",
            created_at=_iso(product.created_at),
        )

    @staticmethod
    def many_to_dto(products: Iterable[Product]) -> List[ProductDTO]:
        return [ProductMapper.to_dto(p) for p in products]


class SlideMapper:
    # Storage column -> client-facing key for hero slides.
    CLIENT_FIELDS = (
        ("id", "id"),
        ("title", "title"),
        ("description", "description"),
        ("button_text", "buttonText"),
        ("button_link", "buttonLink"),
        ("image_url_desktop", "backgroundImageDesktop"),
        ("image_url_mobile", "backgroundImageMobile"),
        ("thumbnail_url", "thumbnailImage"),
        ("show_overlay", "overlay"),
        ("fit_desktop", "fitDesktop"),
        ("fit_mobile", "fitMobile"),
    )

    @staticmethod
    def to_dto(slide: Slide) -> SlideDTO:
        return SlideDTO(
            id=slide.id,
            title=slide.title,
            description=slide.description,
            button_text=slide.button_text,
            button_link=slide.button_link,
            image_url_desktop=slide.image_url_desktop,
            image_url_mobile=slide.image_url_mobile,
            thumbnail_url=slide.thumbnail_url,
            show_overlay=bool(slide.show_overlay),
            fit_desktop=slide.fit_desktop,
            fit_mobile=slide.fit_mobile,
            is_active=bool(slide.is_active),
            created_at=_iso(slide.created_at),
        )

    @staticmethod
    def many_to_dto(slides: Iterable[Slide]) -> List[SlideDTO]:
        return [SlideMapper.to_dto(s) for s in slides]

    @classmethod
    def to_client(cls, slide: SlideDTO) -> Dict[str, Any]:
        return {target: getattr(slide, source) for source, target in cls.CLIENT_FIELDS}
