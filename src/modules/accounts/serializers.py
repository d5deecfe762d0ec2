"""Account DRF serializers (camelCase wire format)."""

from __future__ import annotations

from rest_framework import serializers

from modules.accounts.models import Role, User


class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(min_length=6, write_only=True, trim_whitespace=False)
    role = serializers.ChoiceField(choices=Role.choices, default=Role.CUSTOMER)


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)


class UserSerializer(serializers.ModelSerializer):
    createdAt = serializers.DateTimeField(source="date_joined", read_only=True)

    class Meta:
        model = User
        fields = ["id", "email", "role", "createdAt"]
        read_only_fields = fields


class AuthResultSerializer(serializers.Serializer):
    user = UserSerializer(read_only=True)
    token = serializers.CharField(read_only=True)
    refreshToken = serializers.CharField(source="refresh_token", read_only=True)
