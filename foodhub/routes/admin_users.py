"""
FoodHub Backend - Admin User Route Handlers
============================================

Route Inventory:
    GET   /api/admin/users        every account, newest first
    PATCH /api/admin/users/{id}   suspend or reactivate an account
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.database import get_db_session
from foodhub.dependencies import require_roles
from foodhub.models.user import UserRole, UserStatus
from foodhub.schemas.common import ErrorResponse
from foodhub.schemas.user import UpdateUserStatusRequest, UserDetailResponse, UserResponse
from foodhub.services.principal_service import Principal
from foodhub.services.user_service import user_service

router = APIRouter(prefix="/api/admin", tags=["Admin"])

require_admin = require_roles(UserRole.ADMIN)


@router.get(
    "/users",
    response_model=List[UserDetailResponse],
    summary="List all users",
)
async def list_users(
    principal: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> List[UserDetailResponse]:
    return await user_service.list_users(db=db)


@router.patch(
    "/users/{user_id}",
    response_model=UserResponse,
    responses={
        400: {"description": "Admin targeted its own account", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
    },
    summary="Suspend or reactivate a user",
)
async def update_user_status(
    user_id: UUID,
    payload: UpdateUserStatusRequest,
    principal: Principal = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return await user_service.set_user_status(
        db=db, principal=principal, user_id=user_id, status=UserStatus(payload.status)
    )
