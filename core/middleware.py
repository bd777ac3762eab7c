"""
Core middleware for request safety and observability.

Components
----------
- `RequestSizeLimitMiddleware`:
    * Rejects oversized PUT/PATCH/POST/DELETE bodies with a pre-rendered 413 JSON
      response before DRF parses them (bulk payloads arrive on PUT and DELETE).
    * Relies on `Content-Length` when present; limit from `MAX_REQUEST_BYTES`.

- `RequestIDLogMiddleware`:
    * Reads `X-Request-ID` (or generates one) and reflects it in the response.
    * Stores the id in a contextvar for use by `core.logging.RequestIDFilter`.
    * Logs one structured line per request including latency (ms) and principal id.
"""

from __future__ import annotations

import logging
import re
import time
import uuid
from typing import Callable, Optional

from django.conf import settings
from django.http import HttpRequest, HttpResponse
from rest_framework.renderers import JSONRenderer
from rest_framework.response import Response

from .logging import request_id_var

logger = logging.getLogger("records.request")

_ALLOWED_CHARS = re.compile(r"^[A-Za-z0-9._\-]{1,200}$")
_BODY_METHODS = {"POST", "PUT", "PATCH", "DELETE"}


def _coerce_request_id(raw: str | None) -> str:
    """Keep a safe client-provided request id, otherwise mint a compact uuid4 hex."""
    if raw and _ALLOWED_CHARS.match(raw):
        return raw
    return uuid.uuid4().hex


def _rendered(payload: dict, status: int) -> Response:
    resp = Response(payload, status=status)
    resp.accepted_renderer = JSONRenderer()
    resp.accepted_media_type = "application/json"
    resp.renderer_context = {}
    resp.render()
    return resp


class RequestSizeLimitMiddleware:
    """Reject request bodies larger than `settings.MAX_REQUEST_BYTES` with 413."""

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response
        self.max_bytes: int = int(getattr(settings, "MAX_REQUEST_BYTES", 2_000_000))

    def __call__(self, request: HttpRequest) -> HttpResponse:
        if request.method.upper() in _BODY_METHODS and self.max_bytes > 0:
            raw_len: Optional[str] = request.META.get("CONTENT_LENGTH")
            try:
                content_length = int(raw_len) if raw_len else None
            except ValueError:
                content_length = None

            if content_length is not None and content_length > self.max_bytes:
                return _rendered(
                    {
                        "detail": f"Request entity too large. Max {self.max_bytes} bytes.",
                        "code": "request_too_large",
                        "max_bytes": self.max_bytes,
                    },
                    status=413,
                )

        return self.get_response(request)


class RequestIDLogMiddleware:
    """Correlate a request id with every log line and emit one access line per request."""

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        rid = _coerce_request_id(request.headers.get("X-Request-ID"))
        request.request_id = rid
        token = request_id_var.set(rid)

        start = time.perf_counter()
        try:
            response = self.get_response(request)
        finally:
            duration_ms = int((time.perf_counter() - start) * 1000)
            request_id_var.reset(token)

        response.headers["X-Request-ID"] = rid

        user = getattr(request, "user", None)
        user_id = getattr(user, "id", None) if getattr(user, "is_authenticated", False) else None

        logger.info(
            "request",
            extra={
                "request_id": rid,
                "method": request.method,
                "path": request.path,
                "status": getattr(response, "status_code", 0),
                "user_id": user_id,
                "duration_ms": duration_ms,
            },
        )
        return response
