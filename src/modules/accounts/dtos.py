"""Account DTOs for the Service Layer.

- ``RegisterDTO`` / ``LoginDTO``: validated service inputs.
- ``Principal``: the authenticated caller as seen by domain services.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from modules.accounts.models import Role

if TYPE_CHECKING:
    from modules.accounts.models import User


class RegisterDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: EmailStr
    password: str = Field(min_length=6)
    role: Role = Role.CUSTOMER

    @field_validator("email", mode="after")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class LoginDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email", mode="after")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class Principal(BaseModel):
    """Identity and role of the caller; the only user data services need."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @classmethod
    def from_user(cls, user: User) -> Principal:
        return cls(id=user.id, role=user.role)
