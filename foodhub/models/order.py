"""
FoodHub Backend - Order and OrderItem Models
=============================================

What:  ORM models for `orders` and their snapshot line items `order_items`.
Who:   Written by OrderService; read by the review eligibility gate.

Invariants (enforced by OrderService, recorded here for readers):
    - Every item of an order references a meal of `orders.provider_id`.
    - `total_amount` = Σ(price_at_time × quantity), computed once at creation.
    - Items are inserted with their order and never updated or deleted alone.
    - `status` only changes through OrderStatusMachine.

Query Patterns:
    - Customer history:  WHERE customer_id = :id ORDER BY created_at DESC
    - Provider inbox:    WHERE provider_id = :id ORDER BY created_at DESC
    - Review eligibility: order_items JOIN orders WHERE meal_id, customer_id,
      status = 'delivered'
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import List

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from foodhub.database import Base
from foodhub.models.meal import Meal
from foodhub.models.user import User


class OrderStatus(str, Enum):
    PLACED = "placed"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class Order(Base):
    """A customer's order with a single provider."""

    __tablename__ = "orders"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    customer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False
    )
    provider_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False
    )
    delivery_address: Mapped[str] = mapped_column(String(300), nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=OrderStatus.PLACED.value,
        server_default=text("'placed'"),
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    items: Mapped[List["OrderItem"]] = relationship(
        back_populates="order", order_by="OrderItem.position"
    )
    customer: Mapped[User] = relationship(foreign_keys=[customer_id])
    provider: Mapped[User] = relationship(foreign_keys=[provider_id])

    __table_args__ = (
        CheckConstraint(
            "status IN ('placed', 'preparing', 'ready', 'delivered', 'cancelled')",
            name="ck_orders_status",
        ),
        Index("idx_orders_customer_created", "customer_id", "created_at"),
        Index("idx_orders_provider_created", "provider_id", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Order(id={self.id}, status='{self.status}', "
            f"total_amount={self.total_amount})>"
        )


class OrderItem(Base):
    """One requested line of an order, with the meal price frozen at order time."""

    __tablename__ = "order_items"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    order_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False
    )
    meal_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("meals.id"), nullable=False
    )
    # Index of the line in the originating request; keeps item order stable
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price_at_time: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    order: Mapped[Order] = relationship(back_populates="items")
    meal: Mapped[Meal] = relationship()

    __table_args__ = (
        CheckConstraint("quantity BETWEEN 1 AND 20", name="ck_order_items_quantity"),
        Index("idx_order_items_order_id", "order_id"),
        Index("idx_order_items_meal_id", "meal_id"),
    )
