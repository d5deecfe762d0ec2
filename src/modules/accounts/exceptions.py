"""Account domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import ConflictError, ForbiddenError, UnauthorizedError


class EmailAlreadyRegistered(ConflictError):
    default_code = "email_already_registered"
    default_detail = "Email already registered"


class InvalidCredentials(UnauthorizedError):
    """Unknown email or wrong password; the two cases are indistinguishable."""

    default_code = "invalid_credentials"
    default_detail = "Invalid credentials"


class AdminSignupDisabled(ForbiddenError):
    default_code = "admin_signup_disabled"
    default_detail = "Self-registration as admin is disabled."
