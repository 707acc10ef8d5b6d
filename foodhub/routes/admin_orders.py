"""
FoodHub Backend - Admin Order Route Handlers
=============================================

Route Inventory:
    GET /api/admin/orders?status=   every order, optionally filtered by status
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.database import get_db_session
from foodhub.dependencies import require_roles
from foodhub.models.order import OrderStatus
from foodhub.models.user import UserRole
from foodhub.schemas.order import OrderDetailResponse
from foodhub.services.order_service import order_service
from foodhub.services.principal_service import Principal

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.get(
    "/orders",
    response_model=List[OrderDetailResponse],
    summary="List all orders",
)
async def list_all_orders(
    status: Optional[OrderStatus] = Query(default=None, description="Only orders in this status"),
    principal: Principal = Depends(require_roles(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db_session),
) -> List[OrderDetailResponse]:
    return await order_service.list_all_orders(db=db, status=status)
