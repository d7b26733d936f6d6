from rest_framework import serializers

from apps.catalog.serializers import ProductReadSerializer


class LineItemSerializer(serializers.Serializer):
    product = ProductReadSerializer()
    quantity = serializers.IntegerField()
    line_total = serializers.DecimalField(max_digits=14, decimal_places=2)


class CartSummarySerializer(serializers.Serializer):
    subtotal = serializers.DecimalField(max_digits=14, decimal_places=2)
    tax = serializers.DecimalField(max_digits=14, decimal_places=2)
    total = serializers.DecimalField(max_digits=14, decimal_places=2)
    item_count = serializers.IntegerField()


class CartReadSerializer(serializers.Serializer):
    items = LineItemSerializer(many=True)
    summary = CartSummarySerializer()
    sync_failed = serializers.ListField(child=serializers.CharField(), required=False)


class CartAddSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1, default=1)


class CartQuantitySerializer(serializers.Serializer):
    # Zero or less removes the line.
    quantity = serializers.IntegerField()


class WishlistToggleSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()


class WishlistReadSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.IntegerField())
    count = serializers.IntegerField()
    in_wishlist = serializers.BooleanField(required=False)
    sync_failed = serializers.ListField(child=serializers.CharField(), required=False)
