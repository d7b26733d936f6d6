from rest_framework import serializers

from .commands import split_csv


class CsvListField(serializers.Field):
    """Accepts a JSON list or a comma separated string; always yields a list."""

    default_error_messages = {"invalid": "Expected a list or a comma separated string."}

    def to_internal_value(self, data):
        if isinstance(data, (list, tuple, str)):
            return split_csv(data)
        self.fail("invalid")

    def to_representation(self, value):
        return list(value or [])


class ProductReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    brand = serializers.CharField(allow_blank=True)
    category = serializers.CharField()
    price = serializers.DecimalField(max_digits=12, decimal_places=2)
    rating = serializers.FloatField()
    description = serializers.CharField(allow_blank=True)
    image = serializers.CharField(allow_blank=True)
    images = serializers.ListField(child=serializers.CharField(allow_blank=True))
    features = serializers.ListField(child=serializers.CharField())
    warranty = serializers.CharField(allow_blank=True)
    created_at = serializers.CharField(allow_null=True)

    def to_representation(self, instance):
        if instance is None:
            return None
        if hasattr(instance, "__dataclass_fields__"):
            return {
                "id": instance.id,
                "name": instance.name,
                "brand": instance.brand,
                "category": instance.category,
                "price": f"{instance.price:.2f}",
                "rating": instance.rating,
                "description": instance.description,
                "image": instance.image,
                "images": list(instance.images),
                "features": list(instance.features),
                "warranty": instance.warranty,
                "created_at": instance.created_at,
            }
        return super().to_representation(instance)


class ProductDetailSerializer(serializers.Serializer):
    product = ProductReadSerializer()
    related = ProductReadSerializer(many=True)


class ProductWriteSerializer(serializers.Serializer):
    # Product-manager form: main image plus a comma separated gallery, or an explicit images list.
    name = serializers.CharField()
    brand = serializers.CharField(required=False, allow_blank=True)
    category = serializers.CharField()
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    rating = serializers.DecimalField(
        max_digits=2, decimal_places=1, min_value=0, max_value=5, required=False
    )
    description = serializers.CharField(required=False, allow_blank=True)
    image_main = serializers.CharField(required=False, allow_blank=True)
    images_gallery = CsvListField(required=False)
    images = serializers.ListField(
        child=serializers.CharField(allow_blank=True), required=False
    )
    features = CsvListField(required=False)
    warranty = serializers.CharField(required=False, allow_blank=True)


class ProductListQuerySerializer(serializers.Serializer):
    category = serializers.CharField(required=False)
    brand = serializers.CharField(required=False)
    q = serializers.CharField(required=False, allow_blank=True)
    min_price = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    max_price = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    sort = serializers.ChoiceField(
        choices=["default", "price-asc", "price-desc", "rating-desc", "name-asc"],
        required=False,
        default="default",
    )


class HeroSlideSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    title = serializers.CharField(allow_blank=True)
    description = serializers.CharField(allow_blank=True)
    buttonText = serializers.CharField(allow_blank=True)
    buttonLink = serializers.CharField(allow_blank=True)
    backgroundImageDesktop = serializers.CharField(allow_blank=True)
    backgroundImageMobile = serializers.CharField(allow_blank=True)
    thumbnailImage = serializers.CharField(allow_blank=True)
    overlay = serializers.BooleanField()
    fitDesktop = serializers.CharField()
    fitMobile = serializers.CharField()


class SlideSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    title = serializers.CharField(required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    button_text = serializers.CharField(required=False, allow_blank=True)
    button_link = serializers.CharField(required=False, allow_blank=True)
    image_url_desktop = serializers.URLField(required=False, allow_blank=True)
    image_url_mobile = serializers.URLField(required=False, allow_blank=True)
    thumbnail_url = serializers.URLField(required=False, allow_blank=True)
    show_overlay = serializers.BooleanField(required=False)
    fit_desktop = serializers.ChoiceField(choices=["cover", "contain"], required=False)
    fit_mobile = serializers.ChoiceField(choices=["cover", "contain"], required=False)
    is_active = serializers.BooleanField(required=False)
    created_at = serializers.CharField(read_only=True)

    def to_representation(self, instance):
        if hasattr(instance, "__dataclass_fields__"):
            return dict(instance.__dict__)
        return super().to_representation(instance)


class CategoryCountSerializer(serializers.Serializer):
    category = serializers.CharField()
    count = serializers.IntegerField()


class DashboardSerializer(serializers.Serializer):
    total_products = serializers.IntegerField()
    unique_categories = serializers.IntegerField()
    category_counts = CategoryCountSerializer(many=True)
    latest_products = ProductReadSerializer(many=True)
