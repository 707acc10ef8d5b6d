"""
FoodHub Backend - User Service Tests
=====================================

What:  Tests for admin account listing and suspension.

What we test:
    ✅ Listing includes every account and provider storefronts
    ✅ Suspending a provider takes its meals off the menu and locks it out
    ✅ Reactivating a provider makes its meals orderable again
    ✅ Admin cannot change its own status; unknown user is not found
"""

import uuid

import pytest

from foodhub.exceptions import (
    ForbiddenError,
    NotFoundError,
    UnavailableItemsError,
    ValidationError,
)
from foodhub.models import UserStatus
from foodhub.schemas.order import CreateOrderRequest
from foodhub.services.order_service import OrderService
from foodhub.services.principal_service import PrincipalService
from foodhub.services.user_service import UserService

from tests.conftest import principal_for


def order_for(meal):
    return CreateOrderRequest(
        delivery_address="12 Harbour Street, Springfield",
        items=[{"meal_id": meal.id, "quantity": 1}],
    )


class TestUserService:

    def setup_method(self):
        self.service = UserService()
        self.orders = OrderService()

    @pytest.mark.asyncio
    async def test_list_users(self, db_session, seed):
        users = await self.service.list_users(db_session)

        assert len(users) == 7
        by_email = {u.email: u for u in users}
        assert by_email["pat@example.com"].provider_profile.business_name == "Pat's Grill"
        assert by_email["carla@example.com"].provider_profile is None
        assert by_email["rex@example.com"].status == UserStatus.SUSPENDED

    @pytest.mark.asyncio
    async def test_suspended_provider_loses_menu_and_access(self, db_session, seed):
        result = await self.service.set_user_status(
            db_session, principal_for(seed.admin), seed.provider.id, UserStatus.SUSPENDED
        )
        await db_session.commit()

        assert result.status == UserStatus.SUSPENDED
        with pytest.raises(UnavailableItemsError):
            await self.orders.create_order(
                db_session, principal_for(seed.customer), order_for(seed.burger)
            )
        with pytest.raises(ForbiddenError):
            await PrincipalService().resolve(db_session, str(seed.provider.id))

    @pytest.mark.asyncio
    async def test_reactivated_provider_meals_orderable(self, db_session, seed):
        await self.service.set_user_status(
            db_session, principal_for(seed.admin), seed.suspended_provider.id, UserStatus.ACTIVE
        )

        order = await self.orders.create_order(
            db_session, principal_for(seed.customer), order_for(seed.pasta)
        )

        assert order.provider_id == seed.suspended_provider.id

    @pytest.mark.asyncio
    async def test_admin_cannot_change_own_status(self, db_session, seed):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.set_user_status(
                db_session, principal_for(seed.admin), seed.admin.id, UserStatus.SUSPENDED
            )

        assert exc_info.value.message == "You cannot change your own status"

    @pytest.mark.asyncio
    async def test_unknown_user_not_found(self, db_session, seed):
        with pytest.raises(NotFoundError):
            await self.service.set_user_status(
                db_session, principal_for(seed.admin), uuid.uuid4(), UserStatus.ACTIVE
            )
