from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional


@dataclass
class ProductDTO:
    id: int
    name: str
    brand: str
    category: str
    price: Decimal
    rating: float
    description: str
    images: List[str] = field(default_factory=list)
    features: List[str] = field(default_factory=list)
    warranty: str = ""
    created_at: Optional[str] = None

    @property
    def image(self) -> str:
        return self.images[0] if self.images else ""


@dataclass
class SlideDTO:
    id: int
    title: str
    description: str
    button_text: str
    button_link: str
    image_url_desktop: str
    image_url_mobile: str
    thumbnail_url: str
    show_overlay: bool
    fit_desktop: str
    fit_mobile: str
    is_active: bool
    created_at: Optional[str] = None


@dataclass
class CategoryCountDTO:
    category: str
    count: int


@dataclass
class DashboardStatsDTO:
    total_products: int
    unique_categories: int
    category_counts: List[CategoryCountDTO]
    latest_products: List[ProductDTO]
