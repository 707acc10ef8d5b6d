"""
FoodHub Backend - Review Request/Response Schemas
==================================================
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class CreateReviewRequest(BaseModel):
    """Body of POST /api/reviews."""
    meal_id: uuid.UUID
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = Field(default=None, max_length=500)


class ReviewResponse(BaseModel):
    id: uuid.UUID
    customer_id: uuid.UUID
    meal_id: uuid.UUID
    rating: int
    comment: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}
