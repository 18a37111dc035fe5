# mic_core/incidents/api/views.py
from __future__ import annotations

from django.utils import timezone
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from drf_spectacular.utils import OpenApiParameter, extend_schema

from mic_core.common.api.params import date_param, date_range_params, truthy
from mic_core.common.permissions import IncidentLogPermission, ReferenceDataPermission, is_super_admin
from mic_core.incidents.aggregation import group_by_registration_key
from mic_core.incidents.api.serializers import (
    CountUpdateSerializer,
    GroupCountUpdateSerializer,
    GroupIdsSerializer,
    IncidentLogCreateSerializer,
    IncidentLogRowSerializer,
    IncidentTypeSerializer,
    IncidentTypeWriteSerializer,
)
from mic_core.incidents.models import IncidentLog, IncidentType
from mic_core.incidents.selectors import incident_logs_qs, incident_types, to_rows, user_logs
from mic_core.incidents.services import IncidentLogService, IncidentTypeService
from mic_core.incidents.types import IncidentLogRow


def _row(log_id: int) -> dict:
    log = incident_logs_qs().get(id=log_id)
    return IncidentLogRowSerializer(IncidentLogRow.from_model(log)).data


class IncidentLogViewSet(viewsets.ViewSet):
    """
    The caller's own registrations. Every query and mutation is filtered
    by request.user, so another user's id behaves like an unknown id.
    """
    permission_classes = [IncidentLogPermission]

    serializer_class = IncidentLogRowSerializer
    queryset = IncidentLog.objects.none()

    @extend_schema(
        parameters=[
            OpenApiParameter(name="date", type=str, required=False, description="YYYY-MM-DD (default: today)"),
            OpenApiParameter(name="start", type=str, required=False),
            OpenApiParameter(name="end", type=str, required=False),
            OpenApiParameter(name="grouped", type=bool, required=False),
        ],
    )
    def list(self, request):
        on = date_param(request, "date")
        start, end = date_range_params(request)
        if on is None and start is None and end is None:
            on = timezone.localdate()

        rows = to_rows(user_logs(user_id=request.user.id, on=on, start=start, end=end))
        if truthy(request.query_params.get("grouped")):
            rows = group_by_registration_key(rows)

        return Response(IncidentLogRowSerializer(rows, many=True).data, status=status.HTTP_200_OK)

    def create(self, request):
        ser = IncidentLogCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        log = IncidentLogService.log_incident(user_id=request.user.id, **ser.validated_data)
        return Response(_row(log.id), status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        ser = CountUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        log = IncidentLogService.update_count(
            user_id=request.user.id,
            log_id=int(pk),
            count=ser.validated_data["count"],
        )
        return Response(_row(log.id), status=status.HTTP_200_OK)

    def destroy(self, request, pk=None):
        IncidentLogService.delete_log(user_id=request.user.id, log_id=int(pk))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=GroupCountUpdateSerializer, responses={200: IncidentLogRowSerializer})
    @action(detail=False, methods=["post"], url_path="group/update-count")
    def group_update_count(self, request):
        ser = GroupCountUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        keeper = IncidentLogService.update_group_count(
            user_id=request.user.id,
            ids=ser.validated_data["ids"],
            count=ser.validated_data["count"],
        )
        return Response(_row(keeper.id), status=status.HTTP_200_OK)

    @extend_schema(request=GroupIdsSerializer, responses={200: None})
    @action(detail=False, methods=["post"], url_path="group/delete")
    def group_delete(self, request):
        ser = GroupIdsSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        deleted = IncidentLogService.delete_group(user_id=request.user.id, ids=ser.validated_data["ids"])
        return Response({"deleted": deleted}, status=status.HTTP_200_OK)


class IncidentTypeViewSet(viewsets.ViewSet):
    permission_classes = [ReferenceDataPermission]

    serializer_class = IncidentTypeSerializer
    queryset = IncidentType.objects.none()

    def list(self, request):
        include_inactive = truthy(request.query_params.get("include_inactive")) and is_super_admin(request)
        qs = incident_types(include_inactive=include_inactive)
        return Response(IncidentTypeSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    def retrieve(self, request, pk=None):
        itype = IncidentType.objects.get(id=int(pk))
        if not itype.is_active and not is_super_admin(request):
            raise IncidentType.DoesNotExist()
        return Response(IncidentTypeSerializer(itype).data, status=status.HTTP_200_OK)

    @extend_schema(request=IncidentTypeWriteSerializer, responses={201: IncidentTypeSerializer})
    def create(self, request):
        ser = IncidentTypeWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        itype = IncidentTypeService.create_type(data=ser.validated_data, actor_user_id=request.user.id)
        return Response(IncidentTypeSerializer(itype).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=IncidentTypeWriteSerializer, responses={200: IncidentTypeSerializer})
    def partial_update(self, request, pk=None):
        ser = IncidentTypeWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        itype = IncidentTypeService.update_type(
            type_id=int(pk),
            data=ser.validated_data,
            actor_user_id=request.user.id,
        )
        return Response(IncidentTypeSerializer(itype).data, status=status.HTTP_200_OK)
