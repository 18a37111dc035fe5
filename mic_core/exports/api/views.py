# mic_core/exports/api/views.py

from __future__ import annotations

from django.http import HttpResponse
from django.utils import timezone
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.views import APIView

from drf_spectacular.utils import OpenApiParameter, extend_schema

from mic_core.common.api.params import truthy
from mic_core.common.permissions import ROLE_SUPER_ADMIN, RequiredRolePermission
from mic_core.exports import renderers
from mic_core.exports.backup import build_backup, render_backup
from mic_core.incidents.selectors import logs_in_range, to_rows

CONTENT_TYPES = {
    "csv": "text/csv; charset=utf-8",
    "json": "application/json",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


def _attachment(body: bytes, content_type: str, filename: str) -> HttpResponse:
    resp = HttpResponse(body, content_type=content_type)
    resp["Content-Disposition"] = f'attachment; filename="{filename}"'
    return resp


class IncidentLogExportView(APIView):
    """
    Download all incident logs (newest first) as CSV, JSON or XLSX.
    """
    permission_classes = [RequiredRolePermission]
    required_role = ROLE_SUPER_ADMIN

    def perform_content_negotiation(self, request, force=False):
        # ?format=xlsx selects the file type here, not a DRF renderer
        return super().perform_content_negotiation(request, force=True)

    @extend_schema(
        parameters=[
            OpenApiParameter(name="format", type=str, required=False, enum=list(CONTENT_TYPES)),
            OpenApiParameter(name="period", type=str, required=False, enum=list(renderers.PERIODS)),
            OpenApiParameter(name="metadata", type=bool, required=False, description="JSON only, default true"),
        ],
        responses={(200, "application/octet-stream"): bytes},
        tags=["Exports"],
    )
    def get(self, request):
        fmt = (request.query_params.get("format") or "csv").lower()
        period = (request.query_params.get("period") or renderers.PERIOD_ALL).lower()

        if fmt not in CONTENT_TYPES:
            raise DRFValidationError({"format": f"Must be one of: {', '.join(CONTENT_TYPES)}"})
        if period not in renderers.PERIODS:
            raise DRFValidationError({"period": f"Must be one of: {', '.join(renderers.PERIODS)}"})

        today = timezone.localdate()
        logs = to_rows(logs_in_range(start=renderers.period_start(period, today)))

        if fmt == "json":
            include_metadata = truthy(request.query_params.get("metadata", "1"))
            body = renderers.render_json(renderers.json_records(logs), include_metadata=include_metadata)
        elif fmt == "xlsx":
            body = renderers.render_xlsx(renderers.build_rows(logs), period=period)
        else:
            body = renderers.render_csv(renderers.build_rows(logs))

        return _attachment(body, CONTENT_TYPES[fmt], renderers.export_filename(period, fmt, today))


class BackupView(APIView):
    permission_classes = [RequiredRolePermission]
    required_role = ROLE_SUPER_ADMIN

    @extend_schema(responses={(200, "application/json"): dict}, tags=["Exports"])
    def get(self, request):
        body = render_backup(build_backup())
        filename = f"mic-backup-{timezone.localdate().isoformat()}.json"
        return _attachment(body, CONTENT_TYPES["json"], filename)
