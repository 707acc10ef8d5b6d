"""
FoodHub Backend - Provider Meal Route Handlers
===============================================

Route Inventory:
    POST   /api/provider/meals        add a meal (201)
    PUT    /api/provider/meals/{id}   change one of my meals
    DELETE /api/provider/meals/{id}   remove one of my meals (204)
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.database import get_db_session
from foodhub.dependencies import require_roles
from foodhub.models.user import UserRole
from foodhub.schemas.common import ErrorResponse
from foodhub.schemas.meal import CreateMealRequest, MealResponse, UpdateMealRequest
from foodhub.services.meal_service import meal_service
from foodhub.services.principal_service import Principal

router = APIRouter(prefix="/api/provider", tags=["Provider Meals"])

require_provider = require_roles(UserRole.PROVIDER)


@router.post(
    "/meals",
    status_code=201,
    response_model=MealResponse,
    responses={404: {"description": "Category not found", "model": ErrorResponse}},
    summary="Create a meal",
)
async def create_meal(
    payload: CreateMealRequest,
    principal: Principal = Depends(require_provider),
    db: AsyncSession = Depends(get_db_session),
) -> MealResponse:
    return await meal_service.create_meal(db=db, principal=principal, payload=payload)


@router.put(
    "/meals/{meal_id}",
    response_model=MealResponse,
    responses={
        403: {"description": "Meal belongs to another provider", "model": ErrorResponse},
        404: {"description": "Meal or category not found", "model": ErrorResponse},
    },
    summary="Update a meal",
    description="Only the fields sent are changed. Existing orders keep their prices.",
)
async def update_meal(
    meal_id: UUID,
    payload: UpdateMealRequest,
    principal: Principal = Depends(require_provider),
    db: AsyncSession = Depends(get_db_session),
) -> MealResponse:
    return await meal_service.update_meal(
        db=db, principal=principal, meal_id=meal_id, payload=payload
    )


@router.delete(
    "/meals/{meal_id}",
    status_code=204,
    response_class=Response,
    responses={
        403: {"description": "Meal belongs to another provider", "model": ErrorResponse},
        404: {"description": "Meal not found", "model": ErrorResponse},
        409: {"description": "Meal appears in existing orders", "model": ErrorResponse},
    },
    summary="Delete a meal",
)
async def delete_meal(
    meal_id: UUID,
    principal: Principal = Depends(require_provider),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await meal_service.delete_meal(db=db, principal=principal, meal_id=meal_id)
    return Response(status_code=204)
