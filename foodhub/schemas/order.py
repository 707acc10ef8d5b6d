"""
FoodHub Backend - Order Request/Response Schemas
=================================================

What:  Pydantic models defining the order API contract.
How:   FastAPI validates request bodies against the request models (shape and
       bounds only: address length, quantity range, UUID ids) before any
       service runs. Domain rules (availability, single provider, transition
       legality) are checked by the services, not here.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Literal

from pydantic import BaseModel, Field

from foodhub.models.order import OrderStatus


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class OrderLineRequest(BaseModel):
    meal_id: uuid.UUID = Field(description="Meal to order")
    quantity: int = Field(ge=1, le=20, description="Units of this meal (1-20)")


class CreateOrderRequest(BaseModel):
    """
    What:  Body of POST /api/orders.

    Duplicate meal ids are accepted; each line becomes its own order item.
    """
    delivery_address: str = Field(min_length=10, max_length=300)
    items: List[OrderLineRequest] = Field(min_length=1)


class UpdateOrderStatusRequest(BaseModel):
    """Body of PATCH /api/provider/orders/{id}/status. Cancellation is not accepted."""
    status: Literal["preparing", "ready", "delivered"]


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class MealSummary(BaseModel):
    """Meal data embedded in order items (current catalog values)."""
    id: uuid.UUID
    name: str
    price: Decimal
    provider_id: uuid.UUID
    category_id: uuid.UUID

    model_config = {"from_attributes": True}


class OrderItemResponse(BaseModel):
    id: uuid.UUID
    meal_id: uuid.UUID
    quantity: int
    price_at_time: Decimal = Field(description="Meal price frozen at order creation")
    meal: MealSummary

    model_config = {"from_attributes": True}


class PartySummary(BaseModel):
    """Counterparty shown in order listings (provider to customers, customer to providers)."""
    id: uuid.UUID
    name: str

    model_config = {"from_attributes": True}


class OrderResponse(BaseModel):
    """
    What:  Full representation of an order with its snapshot items.
    Who:   Returned by create, cancel and status-update endpoints.
    """
    id: uuid.UUID
    customer_id: uuid.UUID
    provider_id: uuid.UUID
    delivery_address: str
    total_amount: Decimal
    status: OrderStatus
    created_at: datetime
    updated_at: datetime
    items: List[OrderItemResponse]

    model_config = {"from_attributes": True}


class OrderDetailResponse(OrderResponse):
    """Order plus both parties, returned by the listing and detail endpoints."""
    customer: PartySummary
    provider: PartySummary
