import types
from datetime import datetime
from decimal import Decimal

from apps.catalog.mappers import ProductMapper, SlideMapper


def test_product_mapper_normalizes_optional_columns():
    product = types.SimpleNamespace(
        id=7,
        name="Fridge",
        brand=None,
        category="Home Appliances",
        price="25999.00",
        rating=None,
        description=None,
        images=["", "https://img/g.jpg"],
        features=["Frost free", ""],
        warranty=None,
        created_at=datetime(2024, 3, 1, 12, 0, 0),
    )
    dto = ProductMapper.to_dto(product)
    assert dto.brand == ""
    assert dto.price == Decimal("25999.00")
    assert dto.rating == 0.0
    assert dto.images == ["", "https://img/g.jpg"]
    assert dto.image == ""
    assert dto.features == ["Frost free"]
    assert dto.created_at == "2024-03-01T12:00:00"


def test_slide_to_client_keys():
    slide = types.SimpleNamespace(
        id=1,
        title="Big Sale",
        description="",
        button_text="Shop now",
        button_link="/category/audio",
        image_url_desktop="d",
        image_url_mobile="m",
        thumbnail_url="t",
        show_overlay=0,
        fit_desktop="cover",
        fit_mobile="cover",
        is_active=1,
        created_at=None,
    )
    client = SlideMapper.to_client(SlideMapper.to_dto(slide))
    assert client == {
        "id": 1,
        "title": "Big Sale",
        "description": "",
        "buttonText": "Shop now",
        "buttonLink": "/category/audio",
        "backgroundImageDesktop": "d",
        "backgroundImageMobile": "m",
        "thumbnailImage": "t",
        "overlay": False,
        "fitDesktop": "cover",
        "fitMobile": "cover",
    }
