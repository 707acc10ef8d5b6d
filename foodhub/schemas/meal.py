"""
FoodHub Backend - Meal Catalog Schemas
=======================================

What:  Request bodies for provider meal management and the response shapes
       of the public browse endpoints.
How:   Bounds mirror the `meals` table: name 2-80 chars, description up to
       500, price positive with two decimals.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from foodhub.schemas.order import PartySummary


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class CreateMealRequest(BaseModel):
    """Body of POST /api/provider/meals. The meal belongs to the caller."""
    category_id: uuid.UUID
    name: str = Field(min_length=2, max_length=80)
    description: Optional[str] = Field(default=None, max_length=500)
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    is_available: bool = True


class UpdateMealRequest(BaseModel):
    """
    Body of PUT /api/provider/meals/{id}.

    Only the fields sent are changed. `description` may be sent as null to
    clear it; a null for any other field is ignored.
    """
    category_id: Optional[uuid.UUID] = None
    name: Optional[str] = Field(default=None, min_length=2, max_length=80)
    description: Optional[str] = Field(default=None, max_length=500)
    price: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    is_available: Optional[bool] = None


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class CategorySummary(BaseModel):
    id: uuid.UUID
    name: str

    model_config = {"from_attributes": True}


class ProviderProfileSummary(BaseModel):
    business_name: str
    address: Optional[str] = None
    phone: Optional[str] = None

    model_config = {"from_attributes": True}


class ProviderSummary(BaseModel):
    """The provider behind a meal, with its storefront when it has one."""
    id: uuid.UUID
    name: str
    provider_profile: Optional[ProviderProfileSummary] = None

    model_config = {"from_attributes": True}


class MealResponse(BaseModel):
    id: uuid.UUID
    provider_id: uuid.UUID
    category_id: uuid.UUID
    name: str
    description: Optional[str] = None
    price: Decimal
    is_available: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class MealListItem(MealResponse):
    """One entry of GET /api/meals."""
    category: CategorySummary
    provider: ProviderSummary


class ReviewSummary(BaseModel):
    id: uuid.UUID
    rating: int
    comment: Optional[str] = None
    created_at: datetime
    customer: PartySummary

    model_config = {"from_attributes": True}


class MealDetailResponse(MealListItem):
    """GET /api/meals/{id}: the meal with its reviews, newest first."""
    reviews: List[ReviewSummary]
