"""
FoodHub Backend - Category and Meal Models
===========================================

What:  ORM models for the catalog: `categories` and `meals`.
Who:   Providers manage their own meals; the public browse endpoints list
       them. The order builder reads price, availability and owner; the
       review gate checks meal existence only.

Price:
    Numeric(10, 2), always > 0. Orders never re-read it after creation: the
    value at order time is copied into `order_items.price_at_time`.
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from foodhub.database import Base
from foodhub.models.user import User

if TYPE_CHECKING:
    from foodhub.models.review import Review


class Category(Base):
    __tablename__ = "categories"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(80), nullable=False, unique=True)


class Meal(Base):
    """A dish offered by one provider."""

    __tablename__ = "meals"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    provider_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    category_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("categories.id"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(80), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    is_available: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=text("true")
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    provider: Mapped[User] = relationship()
    category: Mapped[Category] = relationship()
    # Unloaded rows go through ON DELETE CASCADE
    reviews: Mapped[List["Review"]] = relationship(
        back_populates="meal",
        cascade="all",
        order_by="Review.created_at.desc()",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint("price > 0", name="ck_meals_price_positive"),
        Index("idx_meals_provider_id", "provider_id"),
    )

    def __repr__(self) -> str:
        return f"<Meal(id={self.id}, price={self.price}, available={self.is_available})>"
