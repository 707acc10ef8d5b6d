"""
FoodHub Backend - Review Service (Review Eligibility Gate)
===========================================================

What:  Records a customer's review of a meal once the customer has received it.
Who:   Called by POST /api/reviews.

Gate, in order:
    1. Meal exists (existence only; availability and provider status do not
       matter for reviews)                                → NotFoundError
    2. A delivered order of this customer contains it     → EligibilityError
    3. Insert; the UNIQUE (customer_id, meal_id) constraint
       rejects a second review                            → DuplicateReviewError
       The insert runs in its own SAVEPOINT, so a refused review leaves the
       rest of the request's work in place.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.database import transactional
from foodhub.exceptions import (
    DuplicateReviewError,
    EligibilityError,
    FoodHubError,
    NotFoundError,
    StoreError,
)
from foodhub.models.meal import Meal
from foodhub.models.order import Order, OrderItem, OrderStatus
from foodhub.models.review import Review
from foodhub.schemas.review import CreateReviewRequest, ReviewResponse
from foodhub.services.principal_service import Principal

logger = logging.getLogger(__name__)

UNIQUE_CONSTRAINT = "uq_reviews_customer_meal"


def _is_duplicate_review(error: IntegrityError) -> bool:
    # PostgreSQL names the constraint; SQLite reports the column pair
    detail = str(error.orig)
    return UNIQUE_CONSTRAINT in detail or "UNIQUE constraint failed: reviews." in detail


class ReviewService:
    async def create_review(
        self,
        db: AsyncSession,
        principal: Principal,
        payload: CreateReviewRequest,
    ) -> ReviewResponse:
        """
        Create a review if the customer has a delivered purchase of the meal.

        Raises:
            NotFoundError: meal does not exist
            EligibilityError: no delivered order of this customer contains the meal
            DuplicateReviewError: the customer already reviewed this meal
            StoreError: any other database failure
        """
        try:
            meal = await db.get(Meal, payload.meal_id)
            if meal is None:
                raise NotFoundError(resource="meal", resource_id=str(payload.meal_id))

            if not await self._has_delivered_purchase(db, principal, payload):
                logger.info(
                    "Review refused: customer %s has no delivered order with meal %s",
                    principal.id,
                    payload.meal_id,
                )
                raise EligibilityError(context={"meal_id": str(payload.meal_id)})

            review = Review(
                customer_id=principal.id,
                meal_id=payload.meal_id,
                rating=payload.rating,
                comment=payload.comment,
            )
            async with transactional(db):
                db.add(review)

        except IntegrityError as e:
            if _is_duplicate_review(e):
                logger.info(
                    "Duplicate review by customer %s for meal %s", principal.id, payload.meal_id
                )
                raise DuplicateReviewError(context={"meal_id": str(payload.meal_id)})
            logger.error("Integrity error creating review: %s", str(e))
            raise StoreError(context={"original_error": type(e).__name__})
        except FoodHubError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error creating review: %s", str(e), exc_info=True)
            raise StoreError(
                message="Could not save the review. Please try again.",
                context={"original_error": type(e).__name__},
            )

        logger.info(
            "Review %s created by customer %s for meal %s (rating %d)",
            review.id,
            principal.id,
            review.meal_id,
            review.rating,
        )
        return ReviewResponse.model_validate(review)

    async def _has_delivered_purchase(
        self, db: AsyncSession, principal: Principal, payload: CreateReviewRequest
    ) -> bool:
        result = await db.execute(
            select(OrderItem.id)
            .join(Order, OrderItem.order_id == Order.id)
            .where(
                OrderItem.meal_id == payload.meal_id,
                Order.customer_id == principal.id,
                Order.status == OrderStatus.DELIVERED.value,
            )
            .limit(1)
        )
        return result.scalar_one_or_none() is not None


review_service = ReviewService()
