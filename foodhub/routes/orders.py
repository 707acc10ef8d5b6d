"""
FoodHub Backend - Customer Order Route Handlers
================================================

What:  Customer-facing order endpoints: place, list, view and cancel.
How:   Every handler is gated to the `customer` role; ownership is enforced
       inside OrderService so another customer's order reads as 404.

Route Inventory:
    POST  /api/orders               place an order (201)
    GET   /api/orders               my orders, newest first
    GET   /api/orders/{id}          one of my orders
    PATCH /api/orders/{id}/cancel   cancel while still `placed`
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.database import get_db_session
from foodhub.dependencies import require_roles
from foodhub.models.user import UserRole
from foodhub.schemas.common import ErrorResponse
from foodhub.schemas.order import (
    CreateOrderRequest,
    OrderDetailResponse,
    OrderResponse,
)
from foodhub.services.order_service import order_service
from foodhub.services.principal_service import Principal

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/orders", tags=["Orders"])

require_customer = require_roles(UserRole.CUSTOMER)


@router.post(
    "",
    status_code=201,
    response_model=OrderResponse,
    responses={
        400: {"description": "Unavailable meals or mixed providers", "model": ErrorResponse},
        401: {"description": "No authenticated principal", "model": ErrorResponse},
        403: {"description": "Not a customer, or account suspended", "model": ErrorResponse},
    },
    summary="Place an order",
    description=(
        "Creates an order from meals of a single provider. Prices are taken from "
        "the catalog at order time and frozen into the order items."
    ),
)
async def create_order(
    payload: CreateOrderRequest,
    principal: Principal = Depends(require_customer),
    db: AsyncSession = Depends(get_db_session),
) -> OrderResponse:
    logger.info(
        "Received order request from customer %s: %d line(s)",
        principal.id,
        len(payload.items),
    )
    return await order_service.create_order(db=db, principal=principal, payload=payload)


@router.get(
    "",
    response_model=List[OrderDetailResponse],
    summary="List my orders",
)
async def list_my_orders(
    principal: Principal = Depends(require_customer),
    db: AsyncSession = Depends(get_db_session),
) -> List[OrderDetailResponse]:
    return await order_service.list_customer_orders(db=db, principal=principal)


@router.get(
    "/{order_id}",
    response_model=OrderDetailResponse,
    responses={404: {"description": "Order not found", "model": ErrorResponse}},
    summary="Get one of my orders",
)
async def get_my_order(
    order_id: UUID,
    principal: Principal = Depends(require_customer),
    db: AsyncSession = Depends(get_db_session),
) -> OrderDetailResponse:
    return await order_service.get_customer_order(db=db, principal=principal, order_id=order_id)


@router.patch(
    "/{order_id}/cancel",
    response_model=OrderResponse,
    responses={
        400: {"description": "Order is no longer placed", "model": ErrorResponse},
        404: {"description": "Order not found", "model": ErrorResponse},
    },
    summary="Cancel one of my orders",
)
async def cancel_order(
    order_id: UUID,
    principal: Principal = Depends(require_customer),
    db: AsyncSession = Depends(get_db_session),
) -> OrderResponse:
    return await order_service.cancel_order(db=db, principal=principal, order_id=order_id)
