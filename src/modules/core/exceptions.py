"""Error taxonomy shared by every module.

Services raise subclasses of these; ``modules.core.exception_handler``
renders them.  ``status_code`` is the HTTP status the API answers with and
``code`` a stable machine-readable identifier.
"""

from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base class for business-rule failures surfaced to API callers."""

    status_code = 500
    default_code = "error"
    default_detail = "An unexpected error occurred."

    def __init__(self, detail: Optional[str] = None, code: Optional[str] = None) -> None:
        self.detail = detail or self.default_detail
        self.code = code or self.default_code
        super().__init__(self.detail)


class ValidationError(DomainError):
    """Malformed or business-rule-violating input; the caller can fix it."""

    status_code = 400
    default_code = "invalid"
    default_detail = "Invalid input."


class UnauthorizedError(DomainError):
    status_code = 401
    default_code = "not_authenticated"
    default_detail = "Authentication failed."


class ForbiddenError(DomainError):
    status_code = 403
    default_code = "permission_denied"
    default_detail = "You do not have permission to perform this action."


class NotFoundError(DomainError):
    status_code = 404
    default_code = "not_found"
    default_detail = "Resource not found."


class ConflictError(DomainError):
    """Illegal state transition or duplicate unique key; do not retry unchanged."""

    status_code = 409
    default_code = "conflict"
    default_detail = "The request conflicts with the current state."
