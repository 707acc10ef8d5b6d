"""
FoodHub Backend - Review Route Handler
=======================================

Route Inventory:
    POST /api/reviews   review a meal from a delivered order (201)
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.database import get_db_session
from foodhub.dependencies import require_roles
from foodhub.models.user import UserRole
from foodhub.schemas.common import ErrorResponse
from foodhub.schemas.review import CreateReviewRequest, ReviewResponse
from foodhub.services.principal_service import Principal
from foodhub.services.review_service import review_service

router = APIRouter(prefix="/api/reviews", tags=["Reviews"])


@router.post(
    "",
    status_code=201,
    response_model=ReviewResponse,
    responses={
        403: {"description": "No delivered order contains this meal", "model": ErrorResponse},
        404: {"description": "Meal not found", "model": ErrorResponse},
        409: {"description": "Meal already reviewed", "model": ErrorResponse},
    },
    summary="Review a meal",
)
async def create_review(
    payload: CreateReviewRequest,
    principal: Principal = Depends(require_roles(UserRole.CUSTOMER)),
    db: AsyncSession = Depends(get_db_session),
) -> ReviewResponse:
    return await review_service.create_review(db=db, principal=principal, payload=payload)
