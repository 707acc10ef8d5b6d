"""
FoodHub Backend - Principal Resolver
=====================================

What:  Turns the user id asserted by the upstream identity gateway into a
       Principal {id, email, role, status}, and answers per-operation role
       checks.
How:   Looks the id up in `users` on every request, so a suspension or role
       change takes effect immediately instead of waiting for session expiry.
Who:   Called by the `require_roles` dependency in foodhub.dependencies.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.exceptions import ForbiddenError, StoreError, UnauthorizedError
from foodhub.models.user import User, UserRole, UserStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    """The authenticated account making the current request."""

    id: uuid.UUID
    email: str
    role: UserRole
    status: UserStatus

    def has_role(self, *roles: UserRole) -> bool:
        return self.role in roles


class PrincipalService:
    """Resolves and authorizes request principals."""

    async def resolve(self, db: AsyncSession, raw_user_id: Optional[str]) -> Principal:
        """
        Resolve the asserted user id to an active Principal.

        Raises:
            UnauthorizedError: no id, malformed id, or unknown user (→ 401)
            ForbiddenError: the account is suspended (→ 403)
            StoreError: the lookup itself failed (→ 500)
        """
        if not raw_user_id:
            raise UnauthorizedError()
        try:
            user_id = uuid.UUID(raw_user_id)
        except ValueError:
            raise UnauthorizedError()

        try:
            result = await db.execute(select(User).where(User.id == user_id))
            user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error resolving principal %s: %s", user_id, str(e))
            raise StoreError(context={"original_error": type(e).__name__})

        if user is None:
            raise UnauthorizedError()
        if user.status == UserStatus.SUSPENDED.value:
            logger.info("Rejected request from suspended account %s", user.id)
            raise ForbiddenError(message="Account suspended")

        return Principal(
            id=user.id,
            email=user.email,
            role=UserRole(user.role),
            status=UserStatus(user.status),
        )

    def authorize(self, principal: Principal, roles: Iterable[UserRole]) -> Principal:
        """
        Role predicate evaluated before an operation body runs.

        Raises:
            ForbiddenError: the principal's role is not among `roles`.
        """
        if not principal.has_role(*roles):
            raise ForbiddenError()
        return principal


principal_service = PrincipalService()
