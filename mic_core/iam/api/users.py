# mic_core/iam/api/users.py

from __future__ import annotations

from django.db.models import Q
from rest_framework import status
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from drf_spectacular.utils import extend_schema

from mic_core.common.api.pagination import paginate
from mic_core.common.permissions import ROLE_SUPER_ADMIN, RequiredRolePermission
from mic_core.iam.api.serializers import (
    CreateUserSerializer,
    PrivilegedResultSerializer,
    ResetPasswordSerializer,
    SetRoleSerializer,
    UserProfileSerializer,
)
from mic_core.iam.models import UserProfile
from mic_core.iam.services.accounts import AccountService


def _failure(message: str) -> Response:
    return Response({"success": False, "message": message}, status=status.HTTP_400_BAD_REQUEST)


def _first_error(errors) -> str:
    """Flatten serializer errors to one readable line."""
    for field, msgs in errors.items():
        msg = msgs[0] if isinstance(msgs, list) and msgs else msgs
        return f"{field}: {msg}"
    return "Ongeldige invoer."


class AdminOnlyView(APIView):
    permission_classes = [RequiredRolePermission]
    required_role = ROLE_SUPER_ADMIN


class CreateUserView(AdminOnlyView):
    """
    CreateUser(email, password, role) -> {success, user_id?, message?}
    """

    @extend_schema(request=CreateUserSerializer, responses={200: PrivilegedResultSerializer}, tags=["Users"])
    def post(self, request):
        ser = CreateUserSerializer(data=request.data)
        if not ser.is_valid():
            return _failure(_first_error(ser.errors))

        try:
            user = AccountService.create_user(actor_user_id=request.user.id, **ser.validated_data)
        except ValueError as e:
            return _failure(str(e))

        return Response(
            {"success": True, "user_id": user.pk, "message": "Gebruiker aangemaakt."},
            status=status.HTTP_200_OK,
        )


class ResetPasswordView(AdminOnlyView):
    """
    ResetPassword(email, new_password) -> {success, message?}
    """

    @extend_schema(request=ResetPasswordSerializer, responses={200: PrivilegedResultSerializer}, tags=["Users"])
    def post(self, request):
        ser = ResetPasswordSerializer(data=request.data)
        if not ser.is_valid():
            return _failure(_first_error(ser.errors))

        try:
            AccountService.reset_password(actor_user_id=request.user.id, **ser.validated_data)
        except ValueError as e:
            return _failure(str(e))

        return Response({"success": True, "message": "Wachtwoord gewijzigd."}, status=status.HTTP_200_OK)


class UserListView(AdminOnlyView):
    @extend_schema(responses={200: UserProfileSerializer(many=True)}, tags=["Users"])
    def get(self, request):
        qs = UserProfile.objects.all().order_by("email", "user_id")
        q = (request.query_params.get("q") or "").strip()
        if q:
            qs = qs.filter(Q(email__icontains=q) | Q(full_name__icontains=q))
        return paginate(request, qs, UserProfileSerializer)


class UserRoleView(AdminOnlyView):
    @extend_schema(request=SetRoleSerializer, responses={200: UserProfileSerializer}, tags=["Users"])
    def patch(self, request, user_id: int):
        ser = SetRoleSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        role = ser.validated_data["role"]
        if user_id == request.user.id and role != ROLE_SUPER_ADMIN:
            raise DRFValidationError({"detail": "Je kunt je eigen beheerdersrol niet intrekken."})

        profile = AccountService.set_role(user_id=user_id, role=role, actor_user_id=request.user.id)
        return Response(UserProfileSerializer(profile).data, status=status.HTTP_200_OK)
