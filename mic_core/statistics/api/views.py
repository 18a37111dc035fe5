# mic_core/statistics/api/views.py

from __future__ import annotations

from django.utils import timezone
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from drf_spectacular.utils import OpenApiParameter, extend_schema

from mic_core.common.api.params import date_range_params
from mic_core.common.dates import shift_months
from mic_core.common.permissions import ROLE_SUPER_ADMIN, RequiredRolePermission, is_super_admin
from mic_core.incidents import aggregation as agg
from mic_core.incidents.api.serializers import (
    CategoryGroupSerializer,
    CategoryTotalSerializer,
    IncidentLogRowSerializer,
)
from mic_core.incidents.selectors import active_type_infos, logs_in_range, to_rows
from mic_core.statistics.api.serializers import (
    DailyPointSerializer,
    DailyTotalSerializer,
    MonthlySummarySerializer,
    StatisticsTotalsSerializer,
)
from mic_core.statistics.selectors import daily_totals, monthly_summary, totals_from_daily

RANGE_PARAMS = [
    OpenApiParameter(name="start", type=str, required=False, description="YYYY-MM-DD"),
    OpenApiParameter(name="end", type=str, required=False, description="YYYY-MM-DD"),
]


def _scope_user_id(request) -> int | None:
    """
    Staff only see their own aggregates. Admins see everything, or one
    user's figures with ?user_id=.
    """
    if not is_super_admin(request):
        return request.user.id

    raw = (request.query_params.get("user_id") or "").strip()
    return int(raw) if raw else None


class DailyTotalsView(APIView):
    permission_classes = [RequiredRolePermission]

    @extend_schema(parameters=RANGE_PARAMS, responses={200: DailyTotalSerializer(many=True)}, tags=["Statistics"])
    def get(self, request):
        start, end = date_range_params(request)
        rows = daily_totals(start=start, end=end, user_id=_scope_user_id(request))
        return Response(DailyTotalSerializer(rows, many=True).data, status=status.HTTP_200_OK)


class MonthlySummaryView(APIView):
    permission_classes = [RequiredRolePermission]

    @extend_schema(parameters=RANGE_PARAMS, responses={200: MonthlySummarySerializer(many=True)}, tags=["Statistics"])
    def get(self, request):
        start, end = date_range_params(request)
        rows = monthly_summary(start=start, end=end, user_id=_scope_user_id(request))
        return Response(MonthlySummarySerializer(rows, many=True).data, status=status.HTTP_200_OK)


class StatisticsView(APIView):
    """
    Admin statistics page (default range: the last month).
    """
    permission_classes = [RequiredRolePermission]
    required_role = ROLE_SUPER_ADMIN

    @extend_schema(parameters=RANGE_PARAMS, tags=["Statistics"])
    def get(self, request):
        today = timezone.localdate()
        start, end = date_range_params(request, default_start=shift_months(today, -1), default_end=today)

        totals = daily_totals(start=start, end=end)
        rows = to_rows(logs_in_range(start=start, end=end))
        type_totals = agg.totals_by_incident_type(rows, active_type_infos())

        return Response(
            {
                "start": start,
                "end": end,
                "totals": StatisticsTotalsSerializer(totals_from_daily(totals)).data,
                "daily": DailyPointSerializer(agg.daily_series(totals), many=True).data,
                "categories": CategoryTotalSerializer(agg.totals_by_category(rows, only_nonzero=False), many=True).data,
                "category_types": CategoryGroupSerializer(agg.group_types_by_category(type_totals), many=True).data,
                "incidents": IncidentLogRowSerializer(rows, many=True).data,
            },
            status=status.HTTP_200_OK,
        )
