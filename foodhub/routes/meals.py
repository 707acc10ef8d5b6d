"""
FoodHub Backend - Public Meal Route Handlers
=============================================

Route Inventory:
    GET /api/meals        browse meals of active providers (filters below)
    GET /api/meals/{id}   one meal with its reviews

No principal is required.
"""

from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.database import get_db_session
from foodhub.schemas.common import ErrorResponse
from foodhub.schemas.meal import MealDetailResponse, MealListItem
from foodhub.services.meal_service import meal_service

router = APIRouter(prefix="/api/meals", tags=["Meals"])


@router.get(
    "",
    response_model=List[MealListItem],
    summary="Browse meals",
)
async def list_meals(
    category_id: Optional[UUID] = Query(default=None),
    provider_id: Optional[UUID] = Query(default=None),
    search: Optional[str] = Query(default=None, min_length=1, description="Name or description contains"),
    min_price: Optional[Decimal] = Query(default=None, ge=0),
    max_price: Optional[Decimal] = Query(default=None, ge=0),
    is_available: Optional[bool] = Query(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> List[MealListItem]:
    return await meal_service.list_meals(
        db=db,
        category_id=category_id,
        provider_id=provider_id,
        search=search,
        min_price=min_price,
        max_price=max_price,
        is_available=is_available,
    )


@router.get(
    "/{meal_id}",
    response_model=MealDetailResponse,
    responses={404: {"description": "Meal not found", "model": ErrorResponse}},
    summary="Get meal details",
)
async def get_meal(
    meal_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> MealDetailResponse:
    return await meal_service.get_meal(db=db, meal_id=meal_id)
