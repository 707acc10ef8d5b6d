"""
FoodHub Backend - FastAPI Dependencies
=======================================

What:  Injectable request dependencies: the current principal and per-route
       role gates.
How:   `require_roles(...)` builds a dependency that resolves the principal
       from the identity header and evaluates the role predicate before the
       route body (and therefore the service) runs.

Usage:
    @router.post("/orders")
    async def create_order(
        principal: Principal = Depends(require_roles(UserRole.CUSTOMER)),
        db: AsyncSession = Depends(get_db_session),
    ): ...
"""

from typing import Callable, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.config import settings
from foodhub.database import get_db_session
from foodhub.models.user import UserRole
from foodhub.services.principal_service import Principal, principal_service


async def get_current_principal(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> Principal:
    """Resolve the account asserted by the identity gateway for this request."""
    raw_user_id: Optional[str] = request.headers.get(settings.principal_header)
    principal = await principal_service.resolve(db, raw_user_id)
    request.state.principal_id = str(principal.id)
    return principal


def require_roles(*roles: UserRole) -> Callable:
    """Dependency factory: the current principal, if its role is one of `roles`."""

    async def dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        return principal_service.authorize(principal, roles)

    return dependency
