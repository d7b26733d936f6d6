from contextlib import contextmanager

from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiResponse

from apps.api.schemas import ErrorResponseSerializer
from apps.api.utils import error_response
from apps.catalog.container import build_catalog_service
from apps.common import get_logger
from .middleware import get_shop_store
from .serializers import (
    CartAddSerializer,
    CartQuantitySerializer,
    CartReadSerializer,
    CartSummarySerializer,
    LineItemSerializer,
    WishlistReadSerializer,
    WishlistToggleSerializer,
)

logger = get_logger(__name__).bind(component="carts", layer="view")


def store_for(request):
    store = getattr(request, "shop_store", None)
    return store if store is not None else get_shop_store(request)


@contextmanager
def collect_sync_failures(store):
    """Yield a list that fills with the operations whose backend write failed."""
    failed = []
    unsubscribe = store.subscribe(
        lambda event: failed.append(event.payload.get("operation", "")) if event.kind == "sync_failed" else None
    )
    try:
        yield failed
    finally:
        unsubscribe()


def cart_payload(store, failed=None):
    data = {
        "items": LineItemSerializer(store.line_items, many=True).data,
        "summary": CartSummarySerializer(store.summary()).data,
    }
    if failed:
        data["sync_failed"] = list(failed)
    return data


def wishlist_payload(store, failed=None, **extra):
    data = {"ids": store.wishlist_ids, "count": store.wishlist_count, **extra}
    if failed:
        data["sync_failed"] = list(failed)
    return data


@extend_schema(tags=["Cart"])
class CartView(APIView):
    permission_classes = [AllowAny]
    catalog = build_catalog_service()
    log = logger.bind(view="CartView")

    @extend_schema(summary="Current cart with summary", responses={200: CartReadSerializer})
    def get(self, request):
        return Response(cart_payload(store_for(request)))

    @extend_schema(
        summary="Add a product to the cart",
        request=CartAddSerializer,
        responses={200: CartReadSerializer, 404: OpenApiResponse(response=ErrorResponseSerializer)},
    )
    def post(self, request):
        serializer = CartAddSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        product_id = serializer.validated_data["product_id"]
        product = self.catalog.get_product(product_id)
        if product is None:
            return error_response("NOT_FOUND", "Product not found", {"id": str(product_id)})
        store = store_for(request)
        with collect_sync_failures(store) as failed:
            store.add_to_cart(product, serializer.validated_data["quantity"])
        self.log.debug("Added to cart", product_id=product_id, cart_count=store.cart_count)
        return Response(cart_payload(store, failed))


@extend_schema(tags=["Cart"])
class CartItemView(APIView):
    permission_classes = [AllowAny]
    log = logger.bind(view="CartItemView")

    @extend_schema(summary="Set line quantity", request=CartQuantitySerializer, responses={200: CartReadSerializer})
    def patch(self, request, product_id: int):
        serializer = CartQuantitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        store = store_for(request)
        with collect_sync_failures(store) as failed:
            store.set_quantity(product_id, serializer.validated_data["quantity"])
        return Response(cart_payload(store, failed))

    @extend_schema(summary="Remove line", responses={200: CartReadSerializer})
    def delete(self, request, product_id: int):
        store = store_for(request)
        with collect_sync_failures(store) as failed:
            store.remove_from_cart(product_id)
        return Response(cart_payload(store, failed), status=status.HTTP_200_OK)


@extend_schema(tags=["Cart"])
class WishlistView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(summary="Wishlist product ids", responses={200: WishlistReadSerializer})
    def get(self, request):
        return Response(wishlist_payload(store_for(request)))

    @extend_schema(summary="Toggle a product in the wishlist", request=WishlistToggleSerializer, responses={200: WishlistReadSerializer})
    def post(self, request):
        serializer = WishlistToggleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        store = store_for(request)
        with collect_sync_failures(store) as failed:
            member = store.toggle_wishlist(serializer.validated_data["product_id"])
        return Response(wishlist_payload(store, failed, in_wishlist=member))
