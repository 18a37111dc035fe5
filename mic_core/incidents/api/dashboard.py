# mic_core/incidents/api/dashboard.py

from __future__ import annotations

from datetime import timedelta

from django.utils import timezone
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from drf_spectacular.utils import OpenApiParameter, extend_schema

from mic_core.common.permissions import RequiredRolePermission
from mic_core.common.api.params import date_param, date_range_params
from mic_core.incidents import aggregation as agg
from mic_core.incidents.api.serializers import (
    CategoryGroupSerializer,
    CategoryTotalSerializer,
    HourBucketSerializer,
    IncidentLogRowSerializer,
    NamedCountSerializer,
    SummarySerializer,
    TypeTotalSerializer,
)
from mic_core.incidents.selectors import active_type_infos, to_rows, user_logs

ANALYTICS_DEFAULT_DAYS = 30


class DashboardTodayView(APIView):
    """
    Registration screen payload: the caller's grouped logs for one day plus
    per-type totals (every active type, zero when untouched) bucketed under
    the category headers.
    """
    permission_classes = [RequiredRolePermission]

    @extend_schema(
        parameters=[OpenApiParameter(name="date", type=str, required=False)],
        tags=["Dashboard"],
    )
    def get(self, request):
        on = date_param(request, "date", default=timezone.localdate())

        grouped = agg.group_by_registration_key(to_rows(user_logs(user_id=request.user.id, on=on)))
        type_totals = agg.totals_by_incident_type(grouped, active_type_infos())

        return Response(
            {
                "date": on,
                "total": sum(r.count for r in grouped),
                "logs": IncidentLogRowSerializer(grouped, many=True).data,
                "type_totals": TypeTotalSerializer(type_totals, many=True).data,
                "categories": CategoryGroupSerializer(agg.group_types_by_category(type_totals), many=True).data,
            },
            status=status.HTTP_200_OK,
        )


class AnalyticsView(APIView):
    """
    The caller's own figures over a date range (default: the last 30 days).
    """
    permission_classes = [RequiredRolePermission]

    @extend_schema(
        parameters=[
            OpenApiParameter(name="start", type=str, required=False),
            OpenApiParameter(name="end", type=str, required=False),
        ],
        tags=["Dashboard"],
    )
    def get(self, request):
        today = timezone.localdate()
        start, end = date_range_params(
            request,
            default_start=today - timedelta(days=ANALYTICS_DEFAULT_DAYS),
            default_end=today,
        )

        rows = to_rows(user_logs(user_id=request.user.id, start=start, end=end))
        by_type = agg.totals_by_incident_type_ranked(rows)

        return Response(
            {
                "start": start,
                "end": end,
                "summary": SummarySerializer(agg.summarize(rows)).data,
                "by_type": TypeTotalSerializer(by_type, many=True).data,
                "by_category": CategoryTotalSerializer(agg.totals_by_category(rows, only_nonzero=True), many=True).data,
                "by_location": NamedCountSerializer(agg.totals_by_location(rows), many=True).data,
                "by_hour": HourBucketSerializer(agg.totals_by_hour_of_day(rows), many=True).data,
                "by_client": NamedCountSerializer(agg.totals_by_client(rows), many=True).data,
            },
            status=status.HTTP_200_OK,
        )
