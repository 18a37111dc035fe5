# mic_core/iam/api/session.py

from __future__ import annotations

from django.utils import timezone
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from drf_spectacular.utils import extend_schema

from mic_core.common.permissions import ROLE_SUPER_ADMIN
from mic_core.iam.auth import request_session_key
from mic_core.iam.api.serializers import SessionSerializer, UserProfileSerializer
from mic_core.iam.models import UserProfile
from mic_core.iam.services.session import AuthService


class SessionBootstrapView(APIView):
    """
    Frontend bootstrap endpoint.

    Anonymous callers get state=anonymous instead of a 401 so the UI can
    decide between login screen and app shell in one round trip.
    """
    permission_classes = [AllowAny]

    @extend_schema(responses={200: SessionSerializer}, tags=["IAM"])
    def get(self, request):
        user = request.user

        def _persisted_user_id():
            return user.pk if user and user.is_authenticated else None

        service = AuthService(
            session_loader=_persisted_user_id,
            session_key=request_session_key(request),
        )
        subscription = service.initialize()
        try:
            snapshot = service.snapshot
        finally:
            subscription.dispose()

        profile = None
        if snapshot.user_id is not None:
            profile = UserProfile.objects.filter(user_id=snapshot.user_id).first()

        role = snapshot.role
        if user.is_authenticated and user.is_superuser:
            role = ROLE_SUPER_ADMIN

        return Response(
            {
                "state": snapshot.state.value,
                "user": UserProfileSerializer(profile).data if profile else None,
                "role": role,
                "is_admin": role == ROLE_SUPER_ADMIN,
                "server_time": timezone.now(),
                "api_version": "0.1.0",
            }
        )
