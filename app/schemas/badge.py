"""
Badge schemas.

GET   /badges              → BadgeCollectionResponse
GET   /badges/catalog      → list[CatalogBadgeOut]
GET   /badges/{badge_id}   → BadgeOut
PATCH /badges/{badge_id}   → UserBadgeUpdate → UserBadgeOut
POST  /questions           → rewards: RewardsOut
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import Field, model_validator

from app.models.badge import BadgeRarity
from app.schemas.common import CamelModel


class BadgeOut(CamelModel):
    id: int
    name: str
    description: str
    image_url: str
    category: str = Field(description='Topic category, "milestone" or "special".')
    rarity: BadgeRarity
    unlock_criteria: str = Field(description="JSON-encoded unlock rule as stored.")
    created_at: Optional[datetime] = None


class CatalogBadgeOut(BadgeOut):
    rule: Optional[dict[str, Any]] = Field(
        default=None,
        description="Parsed unlock rule; null when the stored criterion is malformed.",
    )


class UserBadgeOut(CamelModel):
    user_id: int
    badge_id: int
    earned_at: datetime
    display_order: int
    favorite: bool
    badge: BadgeOut


class UserBadgeUpdate(CamelModel):
    """Only the user-adjustable fields of a ledger entry."""
    display_order: Optional[int] = Field(default=None, ge=0)
    favorite: Optional[bool] = None

    @model_validator(mode="after")
    def check_not_empty(self) -> "UserBadgeUpdate":
        if self.display_order is None and self.favorite is None:
            raise ValueError("provide displayOrder and/or favorite")
        return self


class BadgeCollectionResponse(CamelModel):
    earned_badges: list[BadgeOut]
    available_badges: list[BadgeOut]


class RewardsOut(CamelModel):
    badge_earned: Optional[BadgeOut] = None
