from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse

from apps.api.schemas import ErrorResponseSerializer, paginated_response
from apps.api.utils import error_from_tuple, error_response
from apps.common import get_logger
from apps.users.permissions import IsStoreAdmin
from .container import (
    build_catalog_service,
    build_dashboard_service,
    build_product_admin_service,
    build_slide_service,
)
from .filters import apply_price_and_sort
from .pagination import ProductListPagination
from .serializers import (
    DashboardSerializer,
    HeroSlideSerializer,
    ProductDetailSerializer,
    ProductListQuerySerializer,
    ProductReadSerializer,
    ProductWriteSerializer,
    SlideSerializer,
)

logger = get_logger(__name__).bind(component="catalog", layer="view")


@extend_schema(tags=["Catalog"])
class ProductListView(APIView):
    permission_classes = [AllowAny]
    service = build_catalog_service()
    log = logger.bind(view="ProductListView")

    @extend_schema(
        operation_id="products_list",
        summary="List products",
        description=(
            "Category/brand matching is case-insensitive and slug tolerant. "
            "Price window and sort are applied over the matched set. "
            "Paginated via ?page and ?limit."
        ),
        parameters=[ProductListQuerySerializer],
        responses={200: paginated_response(ProductReadSerializer)},
    )
    def get(self, request):
        query = ProductListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data
        self.log.debug("Handling product list request", **{k: str(v) for k, v in params.items()})

        if params.get("q"):
            products = self.service.search(params["q"])
        elif params.get("category"):
            products = self.service.list_by_category(params["category"], params.get("brand"))
        else:
            products = self.service.list_products()
        products = apply_price_and_sort(
            products, params.get("min_price"), params.get("max_price"), params.get("sort", "default")
        )

        paginator = ProductListPagination()
        page = paginator.paginate_queryset(products, request, view=self)
        data = ProductReadSerializer(page if page is not None else products, many=True).data
        if page is None:
            return Response(data)
        return paginator.get_paginated_response(data)


@extend_schema(tags=["Catalog"])
class ProductDetailView(APIView):
    permission_classes = [AllowAny]
    service = build_catalog_service()
    log = logger.bind(view="ProductDetailView")

    @extend_schema(
        operation_id="products_retrieve",
        summary="Get product with related products",
        parameters=[OpenApiParameter("product_id", int, OpenApiParameter.PATH)],
        responses={200: ProductDetailSerializer, 404: OpenApiResponse(response=ErrorResponseSerializer)},
    )
    def get(self, request, product_id: int):
        dto = self.service.get_product(product_id)
        if not dto:
            return error_response("NOT_FOUND", "Product not found", {"id": str(product_id)})
        related = self.service.related_products(dto)
        return Response(
            {
                "product": ProductReadSerializer(dto).data,
                "related": ProductReadSerializer(related, many=True).data,
            }
        )


@extend_schema(tags=["Catalog"])
class CategoryListView(APIView):
    permission_classes = [AllowAny]
    service = build_catalog_service()

    @extend_schema(summary="List distinct product categories", responses={200: {"type": "array", "items": {"type": "string"}}})
    def get(self, request):
        return Response(self.service.list_categories())


@extend_schema(tags=["Catalog"])
class HeroSlideListView(APIView):
    permission_classes = [AllowAny]
    service = build_catalog_service()

    @extend_schema(summary="Active hero slides", responses={200: HeroSlideSerializer(many=True)})
    def get(self, request):
        return Response(self.service.list_hero_slides())


@extend_schema(tags=["Admin"])
class AdminProductListView(APIView):
    permission_classes = [IsStoreAdmin]
    service = build_product_admin_service()
    log = logger.bind(view="AdminProductListView")

    @extend_schema(
        summary="List products for the product manager (newest first)",
        parameters=[OpenApiParameter("q", str, required=False, description="Name, brand or category")],
        responses={200: ProductReadSerializer(many=True)},
    )
    def get(self, request):
        rows = self.service.list_products(request.query_params.get("q"))
        return Response(ProductReadSerializer(rows, many=True).data)

    @extend_schema(
        summary="Create product",
        request=ProductWriteSerializer,
        responses={201: ProductReadSerializer, 400: OpenApiResponse(response=ErrorResponseSerializer)},
    )
    def post(self, request):
        serializer = ProductWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto, error = self.service.create_product(serializer.validated_data)
        if error:
            return error_from_tuple(error)
        self.log.info("Product created via API", product_id=dto.id)
        return Response(ProductReadSerializer(dto).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Admin"])
class AdminProductDetailView(APIView):
    permission_classes = [IsStoreAdmin]
    service = build_product_admin_service()
    log = logger.bind(view="AdminProductDetailView")

    def _write(self, request, product_id: int, partial: bool):
        serializer = ProductWriteSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        dto, error = self.service.update_product(product_id, serializer.validated_data, partial=partial)
        if error:
            return error_from_tuple(error)
        return Response(ProductReadSerializer(dto).data)

    @extend_schema(
        summary="Replace product",
        request=ProductWriteSerializer,
        responses={200: ProductReadSerializer, 404: OpenApiResponse(response=ErrorResponseSerializer)},
    )
    def put(self, request, product_id: int):
        return self._write(request, product_id, partial=False)

    @extend_schema(
        summary="Update product",
        request=ProductWriteSerializer,
        responses={200: ProductReadSerializer, 404: OpenApiResponse(response=ErrorResponseSerializer)},
    )
    def patch(self, request, product_id: int):
        return self._write(request, product_id, partial=True)

    @extend_schema(summary="Delete product", responses={204: None, 404: OpenApiResponse(response=ErrorResponseSerializer)})
    def delete(self, request, product_id: int):
        self.log.info("Deleting product", product_id=product_id)
        _, error = self.service.delete_product(product_id)
        if error:
            return error_from_tuple(error)
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(tags=["Admin"])
class AdminSlideListView(APIView):
    permission_classes = [IsStoreAdmin]
    service = build_slide_service()

    @extend_schema(summary="List all slides", responses={200: SlideSerializer(many=True)})
    def get(self, request):
        return Response(SlideSerializer(self.service.list_slides(), many=True).data)

    @extend_schema(summary="Create slide", request=SlideSerializer, responses={201: SlideSerializer})
    def post(self, request):
        serializer = SlideSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = self.service.create_slide(serializer.validated_data)
        return Response(SlideSerializer(dto).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Admin"])
class AdminSlideDetailView(APIView):
    permission_classes = [IsStoreAdmin]
    service = build_slide_service()

    @extend_schema(
        summary="Update slide",
        request=SlideSerializer,
        responses={200: SlideSerializer, 404: OpenApiResponse(response=ErrorResponseSerializer)},
    )
    def patch(self, request, slide_id: int):
        serializer = SlideSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        dto, error = self.service.update_slide(slide_id, serializer.validated_data)
        if error:
            return error_from_tuple(error)
        return Response(SlideSerializer(dto).data)

    @extend_schema(summary="Delete slide", responses={204: None, 404: OpenApiResponse(response=ErrorResponseSerializer)})
    def delete(self, request, slide_id: int):
        _, error = self.service.delete_slide(slide_id)
        if error:
            return error_from_tuple(error)
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(tags=["Admin"])
class DashboardView(APIView):
    permission_classes = [IsStoreAdmin]
    service = build_dashboard_service()

    @extend_schema(summary="Dashboard statistics", responses={200: DashboardSerializer})
    def get(self, request):
        stats = self.service.stats()
        return Response(
            {
                "total_products": stats.total_products,
                "unique_categories": stats.unique_categories,
                "category_counts": [row.__dict__ for row in stats.category_counts],
                "latest_products": ProductReadSerializer(stats.latest_products, many=True).data,
            }
        )
