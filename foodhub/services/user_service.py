"""
FoodHub Backend - User Service (Admin Account Moderation)
==========================================================

What:  Admin listing of accounts and suspend / reactivate.
Who:   Called by the admin_users router.

Suspension is read by the principal resolver on the next request, and a
suspended provider's meals drop out of browse and ordering at once.
"""

import logging
import uuid
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from foodhub.database import transactional
from foodhub.exceptions import NotFoundError, StoreError, ValidationError
from foodhub.models.user import User, UserStatus
from foodhub.schemas.user import UserDetailResponse, UserResponse
from foodhub.services.principal_service import Principal

logger = logging.getLogger(__name__)


class UserService:
    async def list_users(self, db: AsyncSession) -> List[UserDetailResponse]:
        """Every account, newest first, with provider storefronts."""
        try:
            result = await db.execute(
                select(User)
                .options(selectinload(User.provider_profile))
                .order_by(User.created_at.desc())
            )
            users = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing users: %s", str(e), exc_info=True)
            raise StoreError(
                message="Could not retrieve users. Please try again.",
                context={"error_type": type(e).__name__},
            )
        return [UserDetailResponse.model_validate(user) for user in users]

    async def set_user_status(
        self,
        db: AsyncSession,
        principal: Principal,
        user_id: uuid.UUID,
        status: UserStatus,
    ) -> UserResponse:
        """
        Suspend or reactivate an account.

        Raises:
            ValidationError: the admin targeted its own account
            NotFoundError: no such user
            StoreError: the database rejected the update
        """
        if user_id == principal.id:
            raise ValidationError(message="You cannot change your own status", field="id")

        try:
            user = await db.get(User, user_id)
            if user is None:
                raise NotFoundError(resource="user", resource_id=str(user_id))
            previous = user.status
            async with transactional(db):
                user.status = status.value
        except SQLAlchemyError as e:
            logger.error("Database error updating user %s: %s", user_id, str(e))
            raise StoreError(
                message="Could not update the user. Please try again.",
                context={"user_id": str(user_id), "original_error": type(e).__name__},
            )

        logger.info(
            "User %s status %s → %s by admin %s", user_id, previous, status.value, principal.id
        )
        return UserResponse.model_validate(user)


user_service = UserService()
