"""
FoodHub Backend - Admin User Schemas
=====================================
"""

import uuid
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

from foodhub.models.user import UserRole, UserStatus
from foodhub.schemas.meal import ProviderProfileSummary


class UpdateUserStatusRequest(BaseModel):
    """Body of PATCH /api/admin/users/{id}: suspend or reactivate an account."""
    status: Literal["active", "suspended"]


class UserResponse(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    role: UserRole
    status: UserStatus

    model_config = {"from_attributes": True}


class UserDetailResponse(UserResponse):
    """Admin listing entry: the account plus its storefront, if any."""
    created_at: datetime
    provider_profile: Optional[ProviderProfileSummary] = None
