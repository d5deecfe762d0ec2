"""Role-based DRF permissions."""

from __future__ import annotations

from rest_framework.permissions import BasePermission

from modules.accounts.models import Role


class HasRole(BasePermission):
    role: Role

    def has_permission(self, request, view) -> bool:
        user = request.user
        return bool(
            user and user.is_authenticated and getattr(user, "role", None) == self.role
        )


class IsAdmin(HasRole):
    role = Role.ADMIN
    message = "Admin role required."


class IsCustomer(HasRole):
    role = Role.CUSTOMER
    message = "Customer role required."
