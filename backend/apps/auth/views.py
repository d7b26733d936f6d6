from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenRefreshView
from drf_spectacular.utils import extend_schema, OpenApiResponse

from apps.api.schemas import DetailResponseSerializer, ErrorResponseSerializer
from apps.api.utils import error_from_tuple
from apps.common import get_logger
from .container import build_registration_service, build_session_service
from .serializers import (
    LoginRequestSerializer,
    LogoutRequestSerializer,
    SessionSerializer,
    SignupRequestSerializer,
    session_payload,
)

logger = get_logger(__name__).bind(component="auth", layer="view")


@extend_schema(tags=["Auth"])
class SignupView(APIView):
    permission_classes = [AllowAny]
    service = build_registration_service()
    sessions = build_session_service()
    log = logger.bind(view="SignupView")

    @extend_schema(
        summary="Create an account and sign in",
        request=SignupRequestSerializer,
        responses={
            201: SessionSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            409: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        serializer = SignupRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user, error = self.service.signup(serializer.validated_data)
        if error:
            self.log.warning("Signup failed", code=error[0])
            return error_from_tuple(error)
        session = self.sessions.start(request._request, user)
        return Response(session_payload(session), status=status.HTTP_201_CREATED)


class _LoginBase(APIView):
    permission_classes = [AllowAny]
    sessions = build_session_service()
    admin = False

    def post(self, request):
        serializer = LoginRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        session, error = self.sessions.login(
            request._request,
            serializer.validated_data["email"],
            serializer.validated_data["password"],
            admin=self.admin,
        )
        if error:
            return error_from_tuple(error)
        return Response(session_payload(session))


@extend_schema(
    tags=["Auth"],
    summary="Sign in (Django session and JWT pair)",
    request=LoginRequestSerializer,
    responses={200: SessionSerializer, 401: OpenApiResponse(response=ErrorResponseSerializer)},
)
class LoginView(_LoginBase):
    pass


@extend_schema(
    tags=["Auth"],
    summary="Admin panel sign in",
    request=LoginRequestSerializer,
    responses={
        200: SessionSerializer,
        401: OpenApiResponse(response=ErrorResponseSerializer),
        403: OpenApiResponse(response=ErrorResponseSerializer),
    },
)
class AdminLoginView(_LoginBase):
    admin = True


@extend_schema(tags=["Auth"], summary="Refresh JWT")
class RefreshView(TokenRefreshView):
    permission_classes = [AllowAny]


@extend_schema(tags=["Auth"])
class SessionView(APIView):
    permission_classes = [AllowAny]
    sessions = build_session_service()

    @extend_schema(summary="Current session", responses={200: SessionSerializer})
    def get(self, request):
        return Response(session_payload(self.sessions.current(request)))


@extend_schema(tags=["Auth"])
class LogoutView(APIView):
    permission_classes = [AllowAny]
    sessions = build_session_service()
    log = logger.bind(view="LogoutView")

    @extend_schema(
        summary="Sign out (blacklists the refresh token if given)",
        request=LogoutRequestSerializer,
        responses={200: DetailResponseSerializer, 400: OpenApiResponse(response=ErrorResponseSerializer)},
    )
    def post(self, request):
        serializer = LogoutRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        error = self.sessions.logout(request._request, serializer.validated_data.get("refresh"))
        if error:
            return error_from_tuple(error)
        return Response({"detail": "Logged out"}, status=status.HTTP_200_OK)
