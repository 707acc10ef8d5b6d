"""
FoodHub Backend - Principal Resolver Tests
===========================================
"""

import uuid

import pytest
from sqlalchemy import update
from sqlalchemy.exc import OperationalError

from foodhub.exceptions import ForbiddenError, StoreError, UnauthorizedError
from foodhub.models import User, UserRole, UserStatus
from foodhub.services.principal_service import PrincipalService

from tests.conftest import principal_for


class TestResolve:

    def setup_method(self):
        self.service = PrincipalService()

    @pytest.mark.asyncio
    async def test_resolves_active_user(self, db_session, seed):
        principal = await self.service.resolve(db_session, str(seed.provider.id))

        assert principal.id == seed.provider.id
        assert principal.role is UserRole.PROVIDER
        assert principal.status is UserStatus.ACTIVE

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw", [None, "", "12345", str(uuid.uuid4())])
    async def test_unresolvable_ids_are_unauthorized(self, db_session, seed, raw):
        with pytest.raises(UnauthorizedError):
            await self.service.resolve(db_session, raw)

    @pytest.mark.asyncio
    async def test_suspended_account_forbidden(self, db_session, seed):
        with pytest.raises(ForbiddenError) as exc_info:
            await self.service.resolve(db_session, str(seed.suspended_customer.id))
        assert exc_info.value.message == "Account suspended"

    @pytest.mark.asyncio
    async def test_suspension_applies_on_next_request(self, db_session, seed):
        """Status is read per request, not cached with the identity."""
        await self.service.resolve(db_session, str(seed.customer.id))

        await db_session.execute(
            update(User)
            .where(User.id == seed.customer.id)
            .values(status=UserStatus.SUSPENDED.value)
            .execution_options(synchronize_session="fetch")
        )
        await db_session.commit()

        with pytest.raises(ForbiddenError):
            await self.service.resolve(db_session, str(seed.customer.id))

    @pytest.mark.asyncio
    async def test_lookup_failure_is_store_error(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("SELECT users", {}, Exception("down"))

        with pytest.raises(StoreError):
            await self.service.resolve(mock_db_session, str(uuid.uuid4()))


class TestAuthorize:

    def setup_method(self):
        self.service = PrincipalService()

    @pytest.mark.asyncio
    async def test_matching_role_passes(self, seed):
        principal = principal_for(seed.admin)
        assert self.service.authorize(principal, [UserRole.ADMIN]) is principal

    @pytest.mark.asyncio
    async def test_other_role_forbidden(self, seed):
        with pytest.raises(ForbiddenError):
            self.service.authorize(principal_for(seed.customer), [UserRole.PROVIDER])
