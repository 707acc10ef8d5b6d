"""
FoodHub Backend - Order Service (Order Builder + Status Changes)
=================================================================

What:  Business logic for creating orders, moving them through the status
       machine, and listing them for customers, providers and admins.
How:   Every method receives the request's AsyncSession explicitly and the
       resolved Principal; ownership is part of each lookup query.
Who:   Called by the orders, provider_orders and admin_orders routers.

Order creation flow (POST /api/orders):
    ┌──────────────┐   ┌──────────────┐   ┌──────────────┐   ┌────────────┐
    │ Fetch meals  │──▶│ One provider │──▶│ Total from   │──▶│ Insert     │
    │ (available,  │   │ only         │   │ fetched      │   │ Order +    │
    │  active prov)│   │              │   │ prices       │   │ items      │
    └──────────────┘   └──────────────┘   └──────────────┘   └────────────┘
    All four steps run inside one `transactional()` scope: any failure leaves
    no Order or OrderItem behind.

Error Handling Strategy:
    Domain refusals raise their FoodHubError subclass and propagate as-is.
    SQLAlchemy failures are wrapped in StoreError (internal detail goes to
    the log and to `context`, never to the client message).
"""

import logging
import uuid
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from foodhub.database import transactional
from foodhub.exceptions import (
    InvalidCancellationError,
    InvalidTransitionError,
    MixedProviderError,
    NotFoundError,
    StoreError,
    UnavailableItemsError,
)
from foodhub.models.meal import Meal
from foodhub.models.order import Order, OrderItem, OrderStatus
from foodhub.models.user import User, UserStatus
from foodhub.schemas.order import (
    CreateOrderRequest,
    OrderDetailResponse,
    OrderResponse,
)
from foodhub.services.order_status import OrderStatusMachine, order_status_machine
from foodhub.services.principal_service import Principal

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def _with_items(query):
    return query.options(selectinload(Order.items).selectinload(OrderItem.meal))


def _with_parties(query):
    return _with_items(query).options(
        selectinload(Order.customer),
        selectinload(Order.provider),
    )


class OrderService:
    """
    Business logic layer for orders.

    Responsibilities:
        - create_order(): Order Builder (availability, single provider,
          price snapshot, atomic insert)
        - set_order_status(): provider-driven transitions
        - cancel_order(): customer-driven cancellation
        - list/get helpers for each role
    """

    def __init__(self, status_machine: OrderStatusMachine = order_status_machine):
        self.status_machine = status_machine

    # ── Order Builder ─────────────────────────────────────────────────────

    async def create_order(
        self,
        db: AsyncSession,
        principal: Principal,
        payload: CreateOrderRequest,
    ) -> OrderResponse:
        """
        Validate a cart against the live catalog and persist it as one order.

        Args:
            db: Request session (the transaction scope is opened here)
            principal: The ordering customer
            payload: Pre-validated delivery address and order lines

        Returns:
            OrderResponse with status `placed`, snapshot items and meal data

        Raises:
            UnavailableItemsError: a meal is missing, unavailable, or its
                provider is not active
            MixedProviderError: the meals belong to more than one provider
            StoreError: the database rejected a read or write
        """
        requested_ids = list(dict.fromkeys(line.meal_id for line in payload.items))

        try:
            async with transactional(db):
                meals = await self._fetch_orderable_meals(db, requested_ids)

                if len(meals) < len(requested_ids):
                    missing = [meal_id for meal_id in requested_ids if meal_id not in meals]
                    logger.info(
                        "Order rejected for customer %s: %d unavailable meal(s)",
                        principal.id,
                        len(missing),
                    )
                    raise UnavailableItemsError(missing_meal_ids=missing)

                provider_ids = {meal.provider_id for meal in meals.values()}
                if len(provider_ids) != 1:
                    logger.info(
                        "Order rejected for customer %s: spans %d providers",
                        principal.id,
                        len(provider_ids),
                    )
                    raise MixedProviderError(
                        context={"provider_ids": sorted(str(p) for p in provider_ids)}
                    )
                provider_id = provider_ids.pop()

                # Each requested line is its own item, duplicates included
                items = [
                    OrderItem(
                        meal=meals[line.meal_id],
                        position=position,
                        quantity=line.quantity,
                        price_at_time=meals[line.meal_id].price,
                    )
                    for position, line in enumerate(payload.items)
                ]
                total_amount = sum(
                    (item.price_at_time * item.quantity for item in items),
                    Decimal("0"),
                ).quantize(CENT)

                order = Order(
                    customer_id=principal.id,
                    provider_id=provider_id,
                    delivery_address=payload.delivery_address,
                    total_amount=total_amount,
                    status=OrderStatus.PLACED.value,
                    items=items,
                )
                db.add(order)

        except SQLAlchemyError as e:
            logger.error("Database error creating order for %s: %s", principal.id, str(e), exc_info=True)
            raise StoreError(
                message="Could not place the order. Please try again.",
                context={"original_error": type(e).__name__, "detail": str(e)},
            )

        logger.info(
            "Order %s placed by customer %s with provider %s: %d item(s), total %s",
            order.id,
            principal.id,
            provider_id,
            len(items),
            total_amount,
        )
        return OrderResponse.model_validate(order)

    async def _fetch_orderable_meals(
        self, db: AsyncSession, meal_ids: Sequence[uuid.UUID]
    ) -> Dict[uuid.UUID, Meal]:
        """Meals among `meal_ids` that are available and whose provider is active."""
        result = await db.execute(
            select(Meal)
            .join(User, Meal.provider_id == User.id)
            .where(
                Meal.id.in_(meal_ids),
                Meal.is_available.is_(True),
                User.status == UserStatus.ACTIVE.value,
            )
        )
        return {meal.id: meal for meal in result.scalars().all()}

    # ── Status Machine Operations ─────────────────────────────────────────

    async def set_order_status(
        self,
        db: AsyncSession,
        principal: Principal,
        order_id: uuid.UUID,
        target: OrderStatus,
    ) -> OrderResponse:
        """
        Provider moves one of its orders forward (preparing → ready → delivered).

        Ownership is checked before legality: another provider's order is
        reported as not found.

        Raises:
            NotFoundError: no such order for this provider
            InvalidTransitionError: target not reachable from current status
            StoreError: the database rejected the read or update
        """
        order = await self._get_owned_order(db, order_id, Order.provider_id == principal.id)
        previous = order.status
        new_status = self.status_machine.ensure_provider_transition(order.status, target)
        conflicting = await self._apply_status(db, order, new_status)
        if conflicting is not None:
            raise InvalidTransitionError(conflicting, new_status.value)
        logger.info(
            "Order %s moved %s → %s by provider %s", order.id, previous, new_status.value, principal.id
        )
        return OrderResponse.model_validate(order)

    async def cancel_order(
        self,
        db: AsyncSession,
        principal: Principal,
        order_id: uuid.UUID,
    ) -> OrderResponse:
        """
        Customer cancels one of its own orders while it is still `placed`.

        Raises:
            NotFoundError: no such order for this customer
            InvalidCancellationError: order has left the `placed` state
            StoreError: the database rejected the read or update
        """
        order = await self._get_owned_order(db, order_id, Order.customer_id == principal.id)
        new_status = self.status_machine.ensure_cancellable(order.status)
        conflicting = await self._apply_status(db, order, new_status)
        if conflicting is not None:
            raise InvalidCancellationError(conflicting)
        logger.info("Order %s cancelled by customer %s", order.id, principal.id)
        return OrderResponse.model_validate(order)

    async def _get_owned_order(self, db: AsyncSession, order_id: uuid.UUID, ownership) -> Order:
        try:
            result = await db.execute(
                _with_items(select(Order)).where(Order.id == order_id, ownership)
            )
            order = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching order %s: %s", order_id, str(e))
            raise StoreError(
                message="Could not retrieve the order. Please try again.",
                context={"order_id": str(order_id), "original_error": type(e).__name__},
            )
        if order is None:
            raise NotFoundError(resource="order", resource_id=str(order_id))
        return order

    async def _apply_status(
        self, db: AsyncSession, order: Order, new_status: OrderStatus
    ) -> Optional[str]:
        """
        Write `new_status` only if the stored status is still the one read.

        Returns None on success, otherwise the status another request wrote
        in between (the caller turns it into the matching refusal).
        """
        expected = order.status
        try:
            async with transactional(db):
                result = await db.execute(
                    update(Order)
                    .where(Order.id == order.id, Order.status == expected)
                    .values(status=new_status.value)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount == 1:
                    await db.refresh(order, attribute_names=["status", "updated_at"])
                    return None
                current = await db.execute(select(Order.status).where(Order.id == order.id))
                conflicting = current.scalar_one()
        except SQLAlchemyError as e:
            logger.error("Database error updating order %s: %s", order.id, str(e))
            raise StoreError(
                message="Could not update the order. Please try again.",
                context={"order_id": str(order.id), "original_error": type(e).__name__},
            )

        logger.warning(
            "Order %s changed to %s while moving %s → %s",
            order.id,
            conflicting,
            expected,
            new_status.value,
        )
        return conflicting

    # ── Queries ───────────────────────────────────────────────────────────

    async def list_customer_orders(
        self, db: AsyncSession, principal: Principal
    ) -> List[OrderDetailResponse]:
        """Customer's own orders, newest first."""
        return await self._list(db, Order.customer_id == principal.id)

    async def get_customer_order(
        self, db: AsyncSession, principal: Principal, order_id: uuid.UUID
    ) -> OrderDetailResponse:
        """One of the customer's own orders; any other id is NotFoundError."""
        orders = await self._list(db, Order.id == order_id, Order.customer_id == principal.id)
        if not orders:
            raise NotFoundError(resource="order", resource_id=str(order_id))
        return orders[0]

    async def list_provider_orders(
        self, db: AsyncSession, principal: Principal
    ) -> List[OrderDetailResponse]:
        """Orders placed with this provider, newest first."""
        return await self._list(db, Order.provider_id == principal.id)

    async def list_all_orders(
        self, db: AsyncSession, status: Optional[OrderStatus] = None
    ) -> List[OrderDetailResponse]:
        """Admin view over every order, optionally filtered by status."""
        criteria = [Order.status == status.value] if status else []
        return await self._list(db, *criteria)

    async def _list(self, db: AsyncSession, *criteria) -> List[OrderDetailResponse]:
        try:
            result = await db.execute(
                _with_parties(select(Order))
                .where(*criteria)
                .order_by(Order.created_at.desc())
            )
            orders = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing orders: %s", str(e), exc_info=True)
            raise StoreError(
                message="Could not retrieve orders. Please try again.",
                context={"error_type": type(e).__name__},
            )
        return [OrderDetailResponse.model_validate(order) for order in orders]


# ── Singleton Instance ────────────────────────────────────────────────────
order_service = OrderService()
