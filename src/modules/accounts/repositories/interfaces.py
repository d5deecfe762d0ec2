"""User repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.accounts.models import User


class IUserRepository(IRepository["User"]):
    """Repository contract for users."""

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]:
        """Retrieve a user by email (case-insensitive)."""

    @abstractmethod
    def email_exists(self, email: str) -> bool:
        """Whether *email* is already registered."""

    @abstractmethod
    def create(self, email: str, password: str, role: str) -> User:
        """Create a user, hashing *password*."""
