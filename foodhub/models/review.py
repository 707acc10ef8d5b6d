"""
FoodHub Backend - Review Model
===============================

What:  ORM model for `reviews`.
How:   UNIQUE (customer_id, meal_id) is the only duplicate guard; the review
       gate maps the resulting IntegrityError to DuplicateReviewError.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from foodhub.database import Base
from foodhub.models.meal import Meal
from foodhub.models.user import User


class Review(Base):
    __tablename__ = "reviews"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    customer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    meal_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("meals.id", ondelete="CASCADE"), nullable=False
    )
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    meal: Mapped[Meal] = relationship(back_populates="reviews")
    customer: Mapped[User] = relationship()

    __table_args__ = (
        UniqueConstraint("customer_id", "meal_id", name="uq_reviews_customer_meal"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating"),
    )

    def __repr__(self) -> str:
        return f"<Review(id={self.id}, meal_id={self.meal_id}, rating={self.rating})>"
