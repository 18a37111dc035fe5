# mic_core/iam/api/me.py

from __future__ import annotations

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from drf_spectacular.utils import extend_schema

from mic_core.common.permissions import user_role
from mic_core.iam.api.serializers import MeUpdateSerializer, UserProfileSerializer
from mic_core.iam.models import UserProfile
from mic_core.iam.services.accounts import AccountService


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: UserProfileSerializer}, tags=["IAM"])
    def get(self, request):
        profile = UserProfile.objects.filter(user_id=request.user.id).first()
        data = UserProfileSerializer(profile).data if profile else {"id": request.user.id, "email": request.user.email}
        data["role"] = user_role(request)
        return Response(data, status=status.HTTP_200_OK)

    @extend_schema(request=MeUpdateSerializer, responses={200: UserProfileSerializer}, tags=["IAM"])
    def patch(self, request):
        ser = MeUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        profile = AccountService.update_profile(
            user_id=request.user.id,
            full_name=ser.validated_data.get("full_name"),
        )
        return Response(UserProfileSerializer(profile).data, status=status.HTTP_200_OK)
