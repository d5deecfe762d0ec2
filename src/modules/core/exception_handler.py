"""DRF exception handler producing a single error envelope.

Every failure response has the shape::

    {"type": "validation_error" | "client_error" | "server_error",
     "errors": [{"code": str, "detail": str, "attr": str | None}]}

Unexpected exceptions become a generic 500; the traceback is logged,
never returned.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.settings import api_settings
from rest_framework.views import exception_handler as drf_exception_handler

from modules.core.exceptions import DomainError

logger = structlog.get_logger(__name__)

VALIDATION_ERROR = "validation_error"
CLIENT_ERROR = "client_error"
SERVER_ERROR = "server_error"


def api_exception_handler(exc: Exception, context: Dict[str, Any]) -> Optional[Response]:
    view = context.get("view")
    log = logger.bind(view=view.__class__.__name__ if view else None)

    if isinstance(exc, DomainError):
        log.warning("api.domain_error", code=exc.code, detail=exc.detail)
        error_type = VALIDATION_ERROR if exc.status_code == 400 else CLIENT_ERROR
        return Response(
            _envelope(error_type, [_error(exc.code, exc.detail)]),
            status=exc.status_code,
        )

    if isinstance(exc, PydanticValidationError):
        errors = [
            _error(
                err["type"],
                err["msg"],
                ".".join(str(part) for part in err["loc"]) or None,
            )
            for err in exc.errors()
        ]
        return Response(
            _envelope(VALIDATION_ERROR, errors),
            status=status.HTTP_400_BAD_REQUEST,
        )

    response = drf_exception_handler(exc, context)
    if response is None:
        log.exception("api.unhandled_error", error_class=exc.__class__.__name__)
        return Response(
            _envelope(
                SERVER_ERROR,
                [_error("error", "Internal server error.")],
            ),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, exceptions.ValidationError):
        response.data = _envelope(VALIDATION_ERROR, list(_flatten(exc.detail)))
    else:
        error_type = SERVER_ERROR if response.status_code >= 500 else CLIENT_ERROR
        response.data = _envelope(error_type, list(_flatten(exc.detail)))
    return response


def _envelope(error_type: str, errors: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"type": error_type, "errors": errors}


def _error(code: str, detail: str, attr: Optional[str] = None) -> Dict[str, Any]:
    return {"code": code, "detail": detail, "attr": attr}


def _flatten(detail: Any, attr: Optional[str] = None) -> Iterator[Dict[str, Any]]:
    """Walk nested DRF error details, yielding one entry per message.

    Nested serializer paths are joined with dots (``items.0.quantity``).
    Non-field errors are reported on the enclosing field (``None`` at the
    top level).
    """
    if isinstance(detail, dict):
        for key, value in detail.items():
            if key == api_settings.NON_FIELD_ERRORS_KEY:
                yield from _flatten(value, attr)
            else:
                yield from _flatten(value, f"{attr}.{key}" if attr else str(key))
    elif isinstance(detail, list):
        for index, value in enumerate(detail):
            if isinstance(value, (dict, list)):
                yield from _flatten(value, f"{attr}.{index}" if attr else str(index))
            else:
                yield from _flatten(value, attr)
    else:
        yield _error(getattr(detail, "code", "invalid"), str(detail), attr)
