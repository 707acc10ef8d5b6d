"""
FoodHub Backend - Provider Order Route Handlers
================================================

Route Inventory:
    GET   /api/provider/orders               incoming orders, newest first
    PATCH /api/provider/orders/{id}/status   move an order forward
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.database import get_db_session
from foodhub.dependencies import require_roles
from foodhub.models.order import OrderStatus
from foodhub.models.user import UserRole
from foodhub.schemas.common import ErrorResponse
from foodhub.schemas.order import (
    OrderDetailResponse,
    OrderResponse,
    UpdateOrderStatusRequest,
)
from foodhub.services.order_service import order_service
from foodhub.services.principal_service import Principal

router = APIRouter(prefix="/api/provider", tags=["Provider Orders"])

require_provider = require_roles(UserRole.PROVIDER)


@router.get(
    "/orders",
    response_model=List[OrderDetailResponse],
    summary="List incoming orders",
)
async def list_incoming_orders(
    principal: Principal = Depends(require_provider),
    db: AsyncSession = Depends(get_db_session),
) -> List[OrderDetailResponse]:
    return await order_service.list_provider_orders(db=db, principal=principal)


@router.patch(
    "/orders/{order_id}/status",
    response_model=OrderResponse,
    responses={
        400: {"description": "Illegal status transition", "model": ErrorResponse},
        404: {"description": "Order not found", "model": ErrorResponse},
    },
    summary="Update order status",
    description="Allowed steps: placed → preparing → ready → delivered.",
)
async def update_order_status(
    order_id: UUID,
    payload: UpdateOrderStatusRequest,
    principal: Principal = Depends(require_provider),
    db: AsyncSession = Depends(get_db_session),
) -> OrderResponse:
    return await order_service.set_order_status(
        db=db,
        principal=principal,
        order_id=order_id,
        target=OrderStatus(payload.status),
    )
