# mic_core/iam/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from mic_core.common.permissions import ROLE_CHOICES, ROLE_MEDEWERKER
from mic_core.iam.models import UserProfile


class LoginRequestSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField()


class DetailResponseSerializer(serializers.Serializer):
    detail = serializers.CharField()


class PasswordResetRequestSerializer(serializers.Serializer):
    email = serializers.EmailField()


class PasswordResetConfirmSerializer(serializers.Serializer):
    uid = serializers.CharField()
    token = serializers.CharField()
    new_password = serializers.CharField()


class UserProfileSerializer(serializers.ModelSerializer):
    id = serializers.IntegerField(source="pk", read_only=True)

    class Meta:
        model = UserProfile
        fields = ["id", "email", "full_name", "role", "created_at", "updated_at"]
        read_only_fields = fields


class MeUpdateSerializer(serializers.Serializer):
    full_name = serializers.CharField(max_length=255, allow_blank=True, allow_null=True)


class CreateUserSerializer(serializers.Serializer):
    email = serializers.CharField()
    password = serializers.CharField()
    role = serializers.ChoiceField(choices=ROLE_CHOICES, default=ROLE_MEDEWERKER)
    full_name = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)


class ResetPasswordSerializer(serializers.Serializer):
    email = serializers.CharField()
    new_password = serializers.CharField()


class SetRoleSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=ROLE_CHOICES)


class PrivilegedResultSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    user_id = serializers.IntegerField(required=False)
    message = serializers.CharField(required=False)


class SessionSerializer(serializers.Serializer):
    state = serializers.CharField()
    user = UserProfileSerializer(allow_null=True)
    role = serializers.CharField(allow_null=True)
    is_admin = serializers.BooleanField()
    server_time = serializers.DateTimeField()
    api_version = serializers.CharField()
