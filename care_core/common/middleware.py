from __future__ import annotations

from django.utils.deprecation import MiddlewareMixin

from care_core.common.api.exceptions import ensure_request_id


class RequestIdMiddleware(MiddlewareMixin):
    """
    Attaches request.request_id (honouring an incoming X-Request-Id) and echoes it back.
    The error envelope reuses the same id so log lines and client reports line up.
    """

    HEADER = "X-Request-Id"
    META_KEY = "HTTP_X_REQUEST_ID"

    def process_request(self, request):
        incoming = (request.META.get(self.META_KEY) or "").strip()
        if incoming:
            request.request_id = incoming[:64]
        ensure_request_id(request)
        return None

    def process_response(self, request, response):
        rid = getattr(request, "request_id", None)
        if rid and not response.has_header(self.HEADER):
            response[self.HEADER] = rid
        return response
