"""
FoodHub Backend - Meal Service (Catalog Browse + Provider Meal Management)
===========================================================================

What:  Public meal listing and detail, and the provider's own create / update
       / delete operations on meals.
How:   Same shape as OrderService: explicit AsyncSession, writes inside
       `transactional()`, SQLAlchemy failures wrapped in StoreError.
Who:   Called by the meals (public) and provider_meals routers.

Visibility:
    Browse and detail only show meals whose provider is active. A meal that
    is unavailable is still listed (the `is_available` filter narrows it);
    it just cannot be ordered.

Price and availability changes never touch existing orders: order items
carry their own `price_at_time`.
"""

import logging
import uuid
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from foodhub.database import transactional
from foodhub.exceptions import (
    ForbiddenError,
    FoodHubError,
    MealInUseError,
    NotFoundError,
    StoreError,
)
from foodhub.models.meal import Category, Meal
from foodhub.models.order import OrderItem
from foodhub.models.review import Review
from foodhub.models.user import User, UserStatus
from foodhub.schemas.meal import (
    CreateMealRequest,
    MealDetailResponse,
    MealListItem,
    MealResponse,
    UpdateMealRequest,
)
from foodhub.services.principal_service import Principal

logger = logging.getLogger(__name__)

# Columns a provider may clear by sending null
NULLABLE_FIELDS = {"description"}


def _visible_meals():
    return (
        select(Meal)
        .join(User, Meal.provider_id == User.id)
        .where(User.status == UserStatus.ACTIVE.value)
        .options(
            selectinload(Meal.category),
            selectinload(Meal.provider).selectinload(User.provider_profile),
        )
    )


class MealService:
    """
    Business logic layer for the meal catalog.

    Responsibilities:
        - list_meals() / get_meal(): public browse over active providers
        - create_meal() / update_meal() / delete_meal(): provider's own meals
    """

    # ── Public Browse ─────────────────────────────────────────────────────

    async def list_meals(
        self,
        db: AsyncSession,
        category_id: Optional[uuid.UUID] = None,
        provider_id: Optional[uuid.UUID] = None,
        search: Optional[str] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        is_available: Optional[bool] = None,
    ) -> List[MealListItem]:
        """
        Meals of active providers, newest first.

        Args:
            search: case-insensitive match on name or description
            min_price / max_price: inclusive price bounds
            is_available: only (un)available meals when given
        """
        criteria = []
        if category_id is not None:
            criteria.append(Meal.category_id == category_id)
        if provider_id is not None:
            criteria.append(Meal.provider_id == provider_id)
        if is_available is not None:
            criteria.append(Meal.is_available.is_(is_available))
        if search:
            pattern = f"%{search}%"
            criteria.append(or_(Meal.name.ilike(pattern), Meal.description.ilike(pattern)))
        if min_price is not None:
            criteria.append(Meal.price >= min_price)
        if max_price is not None:
            criteria.append(Meal.price <= max_price)

        try:
            result = await db.execute(
                _visible_meals().where(*criteria).order_by(Meal.created_at.desc())
            )
            meals = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing meals: %s", str(e), exc_info=True)
            raise StoreError(
                message="Could not retrieve meals. Please try again.",
                context={"error_type": type(e).__name__},
            )
        return [MealListItem.model_validate(meal) for meal in meals]

    async def get_meal(self, db: AsyncSession, meal_id: uuid.UUID) -> MealDetailResponse:
        """One visible meal with its reviews; NotFoundError otherwise."""
        try:
            result = await db.execute(
                _visible_meals()
                .where(Meal.id == meal_id)
                .options(selectinload(Meal.reviews).selectinload(Review.customer))
            )
            meal = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching meal %s: %s", meal_id, str(e))
            raise StoreError(
                message="Could not retrieve the meal. Please try again.",
                context={"meal_id": str(meal_id), "original_error": type(e).__name__},
            )
        if meal is None:
            raise NotFoundError(resource="meal", resource_id=str(meal_id))
        return MealDetailResponse.model_validate(meal)

    # ── Provider Meal Management ──────────────────────────────────────────

    async def create_meal(
        self, db: AsyncSession, principal: Principal, payload: CreateMealRequest
    ) -> MealResponse:
        """
        Add a meal to the provider's menu.

        Raises:
            NotFoundError: the category does not exist
            StoreError: the database rejected the insert
        """
        try:
            async with transactional(db):
                await self._ensure_category(db, payload.category_id)
                meal = Meal(provider_id=principal.id, **payload.model_dump())
                db.add(meal)
        except SQLAlchemyError as e:
            logger.error("Database error creating meal for %s: %s", principal.id, str(e), exc_info=True)
            raise StoreError(
                message="Could not create the meal. Please try again.",
                context={"original_error": type(e).__name__},
            )

        logger.info("Meal %s created by provider %s at %s", meal.id, principal.id, meal.price)
        return MealResponse.model_validate(meal)

    async def update_meal(
        self,
        db: AsyncSession,
        principal: Principal,
        meal_id: uuid.UUID,
        payload: UpdateMealRequest,
    ) -> MealResponse:
        """
        Change the fields sent in `payload` on one of the provider's meals.

        Raises:
            NotFoundError: no such meal, or the new category does not exist
            ForbiddenError: the meal belongs to another provider
            StoreError: the database rejected the update
        """
        changes = {
            field: value
            for field, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or field in NULLABLE_FIELDS
        }

        try:
            meal = await self._get_own_meal(db, principal, meal_id)
            async with transactional(db):
                if "category_id" in changes:
                    await self._ensure_category(db, changes["category_id"])
                for field, value in changes.items():
                    setattr(meal, field, value)
        except FoodHubError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error updating meal %s: %s", meal_id, str(e))
            raise StoreError(
                message="Could not update the meal. Please try again.",
                context={"meal_id": str(meal_id), "original_error": type(e).__name__},
            )

        logger.info("Meal %s updated by provider %s: %s", meal.id, principal.id, sorted(changes))
        return MealResponse.model_validate(meal)

    async def delete_meal(self, db: AsyncSession, principal: Principal, meal_id: uuid.UUID) -> None:
        """
        Remove one of the provider's meals together with its reviews.

        A meal that appears in any order is kept: order history points at it.

        Raises:
            NotFoundError: no such meal
            ForbiddenError: the meal belongs to another provider
            MealInUseError: an order item references the meal
            StoreError: the database rejected the delete
        """
        try:
            meal = await self._get_own_meal(db, principal, meal_id)
            ordered = await db.execute(
                select(OrderItem.id).where(OrderItem.meal_id == meal_id).limit(1)
            )
            if ordered.scalar_one_or_none() is not None:
                raise MealInUseError(context={"meal_id": str(meal_id)})

            async with transactional(db):
                await db.delete(meal)
        except IntegrityError as e:
            # An order referencing the meal was committed after the check
            logger.info("Meal %s gained an order before deletion: %s", meal_id, str(e))
            raise MealInUseError(context={"meal_id": str(meal_id)})
        except FoodHubError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error deleting meal %s: %s", meal_id, str(e))
            raise StoreError(
                message="Could not delete the meal. Please try again.",
                context={"meal_id": str(meal_id), "original_error": type(e).__name__},
            )

        logger.info("Meal %s deleted by provider %s", meal_id, principal.id)

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _get_own_meal(
        self, db: AsyncSession, principal: Principal, meal_id: uuid.UUID
    ) -> Meal:
        meal = await db.get(Meal, meal_id)
        if meal is None:
            raise NotFoundError(resource="meal", resource_id=str(meal_id))
        if meal.provider_id != principal.id:
            raise ForbiddenError(context={"meal_id": str(meal_id)})
        return meal

    async def _ensure_category(self, db: AsyncSession, category_id: uuid.UUID) -> None:
        if await db.get(Category, category_id) is None:
            raise NotFoundError(resource="category", resource_id=str(category_id))


# ── Singleton Instance ────────────────────────────────────────────────────
meal_service = MealService()
