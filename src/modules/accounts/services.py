"""Authentication service layer.

Registration and login both answer with the user and a fresh SimpleJWT
token pair.  The access token carries ``role`` and ``email`` claims so
clients can render role-specific UI without another round trip.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from django.conf import settings
from django.db import IntegrityError, transaction
from pydantic import BaseModel, ConfigDict
from rest_framework_simplejwt.tokens import RefreshToken

from modules.accounts.exceptions import (
    AdminSignupDisabled,
    EmailAlreadyRegistered,
    InvalidCredentials,
)
from modules.accounts.models import Role, User

if TYPE_CHECKING:
    from modules.accounts.dtos import LoginDTO, RegisterDTO
    from modules.accounts.repositories.interfaces import IUserRepository

logger = structlog.get_logger(__name__)


class AuthResult(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    user: User
    token: str
    refresh_token: str


class AuthService:
    """Application service for registration and login.

    Receives an ``IUserRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IUserRepository) -> None:
        self._repo = repository

    def register(self, dto: RegisterDTO) -> AuthResult:
        """Create an account and sign it in.

        Raises:
            AdminSignupDisabled: ``role=admin`` while admin signup is off.
            EmailAlreadyRegistered: the email is taken.
        """
        log = logger.bind(role=dto.role)

        if dto.role == Role.ADMIN and not settings.ACCOUNTS_ALLOW_ADMIN_SIGNUP:
            log.warning("user.admin_signup_rejected")
            raise AdminSignupDisabled()

        if self._repo.email_exists(dto.email):
            log.warning("user.duplicate_email")
            raise EmailAlreadyRegistered()

        try:
            with transaction.atomic():
                user = self._repo.create(dto.email, dto.password, dto.role)
        except IntegrityError:
            # Lost a race against a concurrent registration.
            log.warning("user.duplicate_email")
            raise EmailAlreadyRegistered() from None

        log.info("user.registered", user_id=str(user.id))
        return self._issue_tokens(user)

    def login(self, dto: LoginDTO) -> AuthResult:
        """Verify credentials and issue tokens.

        Raises:
            InvalidCredentials: unknown email, wrong password or inactive user.
        """
        user = self._repo.get_by_email(dto.email)
        if user is None or not user.is_active or not user.check_password(dto.password):
            logger.warning("user.login_failed")
            raise InvalidCredentials()

        logger.info("user.logged_in", user_id=str(user.id))
        return self._issue_tokens(user)

    @staticmethod
    def _issue_tokens(user: User) -> AuthResult:
        refresh = RefreshToken.for_user(user)
        refresh["role"] = user.role
        refresh["email"] = user.email
        return AuthResult(
            user=user,
            token=str(refresh.access_token),
            refresh_token=str(refresh),
        )
