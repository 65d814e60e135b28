"""Credential and profile endpoints under ``/api/auth/``."""

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from campus_events.core.responses import envelope
from campus_events.core.throttling import AuthThrottleMixin
from campus_events.users import services

from .permissions import IsAdmin
from .serializers import ChangePasswordSerializer
from .serializers import LoginSerializer
from .serializers import ProfileUpdateSerializer
from .serializers import RegisterSerializer
from .serializers import UserSerializer
from .serializers import UserSummarySerializer


class RegisterView(AuthThrottleMixin, APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(request=RegisterSerializer, responses={201: UserSerializer})
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user, token = services.register_user(**serializer.validated_data)
        return envelope(
            {"user": UserSerializer(user).data, "token": token},
            message="User registered successfully",
            status=status.HTTP_201_CREATED,
        )


class LoginView(AuthThrottleMixin, APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(request=LoginSerializer, responses={200: UserSerializer})
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user, token = services.login(
            serializer.validated_data["email"],
            serializer.validated_data["password"],
            request=request,
        )
        return envelope(
            {"user": UserSerializer(user).data, "token": token},
            message="Login successful",
        )


class LogoutView(APIView):
    """Tokens are stateless; the client discards its copy."""

    permission_classes = [IsAuthenticated]

    @extend_schema(request=None, responses={200: None})
    def post(self, request):
        return envelope(message="Logout successful")


class ProfileView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses=UserSerializer)
    def get(self, request):
        return envelope({"user": UserSerializer(request.user).data})

    @extend_schema(request=ProfileUpdateSerializer, responses=UserSerializer)
    def put(self, request):
        serializer = ProfileUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = services.update_profile(request.user, serializer.validated_data)
        return envelope(
            {"user": UserSerializer(user).data},
            message="Profile updated successfully",
        )


class ChangePasswordView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=ChangePasswordSerializer, responses={200: None})
    def put(self, request):
        serializer = ChangePasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        services.change_password(
            request.user,
            serializer.validated_data["current_password"],
            serializer.validated_data["new_password"],
        )
        return envelope(message="Password changed successfully")


class UserStatsView(APIView):
    permission_classes = [IsAdmin]

    @extend_schema(responses={200: None})
    def get(self, request):
        stats = services.user_stats()
        stats["recent_users"] = UserSummarySerializer(
            stats["recent_users"],
            many=True,
        ).data
        return envelope(stats)
