"""Registration and login endpoints."""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.accounts.dtos import LoginDTO, RegisterDTO
from modules.accounts.repositories.django_repository import UserDjangoRepository
from modules.accounts.serializers import (
    AuthResultSerializer,
    LoginSerializer,
    RegisterSerializer,
)
from modules.accounts.services import AuthService


class _AuthView(APIView):
    authentication_classes: list = []
    permission_classes = [AllowAny]
    throttle_scope = "auth"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = AuthService(repository=UserDjangoRepository())


class RegisterView(_AuthView):
    @extend_schema(request=RegisterSerializer, responses={201: AuthResultSerializer})
    def post(self, request: Request) -> Response:
        """POST /api/v1/auth/register/"""
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = self._service.register(RegisterDTO(**serializer.validated_data))
        return Response(
            AuthResultSerializer(result).data, status=status.HTTP_201_CREATED
        )


class LoginView(_AuthView):
    @extend_schema(request=LoginSerializer, responses={200: AuthResultSerializer})
    def post(self, request: Request) -> Response:
        """POST /api/v1/auth/login/"""
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = self._service.login(LoginDTO(**serializer.validated_data))
        return Response(AuthResultSerializer(result).data)
