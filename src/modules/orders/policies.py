"""Role-based visibility rules for orders.

Pure functions of the caller's role: no database access.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional
from uuid import UUID

from modules.accounts.dtos import Principal
from modules.accounts.models import Role

_SCOPES: Dict[str, Callable[[Principal], Optional[UUID]]] = {
    Role.ADMIN: lambda principal: None,
    Role.CUSTOMER: lambda principal: principal.id,
}


def order_scope(principal: Principal) -> Optional[UUID]:
    """Owner id the caller's order listing is restricted to.

    ``None`` means every order is visible.  Every ``Role`` has an entry;
    an unknown role is a programming error and raises ``KeyError``.
    """
    return _SCOPES[principal.role](principal)


def can_access(principal: Principal, owner_id: UUID) -> bool:
    scope = order_scope(principal)
    return scope is None or scope == owner_id
