import re
import time
import uuid
from contextvars import ContextVar
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

# Client supplied IDs end up in logs and response headers
REQUEST_ID_PATTERN = re.compile(r"[A-Za-z0-9._:\-]{1,128}")

logger = structlog.get_logger(__name__)


def _request_id(request: HttpRequest) -> str:
    incoming = request.META.get("HTTP_X_REQUEST_ID", "")
    if REQUEST_ID_PATTERN.fullmatch(incoming):
        return incoming
    return str(uuid.uuid4())


class CorrelationIdMiddleware:
    """Tag every request with a correlation ID and log its outcome.

    A well-formed ``X-Request-ID`` header is reused; anything else is
    replaced by a fresh UUID4.  The ID is bound into structlog's context
    for the duration of the request and echoed in the response header.
    Server errors are logged at ``error`` level, client errors at
    ``warning``.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = _request_id(request)
        token = correlation_id_var.set(cid)
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            correlation_id=cid, method=request.method, path=request.path
        )

        started = time.monotonic()
        logger.info("http.request_started")
        try:
            response = self.get_response(request)
            if response.status_code >= 500:
                log_method = logger.error
            elif response.status_code >= 400:
                log_method = logger.warning
            else:
                log_method = logger.info
            log_method(
                "http.request_finished",
                status_code=response.status_code,
                duration_ms=round((time.monotonic() - started) * 1000, 2),
            )
            response["X-Request-ID"] = cid
            return response
        finally:
            structlog.contextvars.clear_contextvars()
            correlation_id_var.reset(token)
