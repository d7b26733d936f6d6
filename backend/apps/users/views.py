from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiResponse

from apps.api.schemas import ErrorResponseSerializer
from apps.api.utils import error_from_tuple, error_response
from apps.common import get_logger
from .container import build_profile_service
from .serializers import ProfileSerializer, ProfileUpdateSerializer

logger = get_logger(__name__).bind(component="users", layer="view")


@extend_schema(tags=["Users"])
class ProfileView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_profile_service()
    log = logger.bind(view="ProfileView")

    @extend_schema(
        summary="Get own profile",
        responses={200: ProfileSerializer, 404: OpenApiResponse(response=ErrorResponseSerializer)},
    )
    def get(self, request):
        dto = self.service.get_profile(request.user.id)
        if not dto:
            return error_response("NOT_FOUND", "User not found", {"id": str(request.user.id)})
        return Response(ProfileSerializer(dto).data)

    @extend_schema(
        summary="Update own full name",
        request=ProfileUpdateSerializer,
        responses={200: ProfileSerializer, 400: OpenApiResponse(response=ErrorResponseSerializer)},
    )
    def patch(self, request):
        serializer = ProfileUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.log.info("Updating profile", user_id=request.user.id)
        dto, error = self.service.update_full_name(
            request.user.id, serializer.validated_data["full_name"]
        )
        if error:
            return error_from_tuple(error)
        return Response(ProfileSerializer(dto).data)
