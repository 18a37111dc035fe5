# mic_core/common/middleware.py
from __future__ import annotations

import logging
import time

from django.utils.deprecation import MiddlewareMixin

from mic_core.common.api.exceptions import ensure_request_id

logger = logging.getLogger("mic.request")


class RequestIdMiddleware(MiddlewareMixin):
    """
    Attaches request.request_id (taken from X-Request-ID when the proxy sends
    one) so the error envelope and the access log line share the same id.
    """

    HEADER = "X-Request-ID"
    META_KEY = "HTTP_X_REQUEST_ID"

    def process_request(self, request):
        incoming = (request.META.get(self.META_KEY) or "").strip()
        if incoming:
            request.request_id = incoming[:64]
        ensure_request_id(request)
        request._mic_started = time.monotonic()
        return None

    def process_response(self, request, response):
        rid = ensure_request_id(request)
        response[self.HEADER] = rid

        path = getattr(request, "path", "") or ""
        if path.startswith("/api/"):
            started = getattr(request, "_mic_started", None)
            elapsed_ms = int((time.monotonic() - started) * 1000) if started else -1
            logger.info(
                "%s %s -> %s (%sms) request_id=%s",
                request.method,
                path,
                response.status_code,
                elapsed_ms,
                rid,
            )
        return response
