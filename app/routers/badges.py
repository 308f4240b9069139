"""
Badges router.

GET   /badges              — earned + still-available badges of the current user
GET   /badges/catalog      — every badge with its parsed unlock rule
GET   /badges/{badge_id}   — one badge
PATCH /badges/{badge_id}   — reorder / favorite an earned badge
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.errors import BadgeNotFoundError, UnlockRuleParseError
from app.core.identity import get_user_id, require_user_id
from app.db.base import get_db
from app.models.badge import Badge
from app.schemas.badge import (
    BadgeCollectionResponse,
    BadgeOut,
    CatalogBadgeOut,
    UserBadgeOut,
    UserBadgeUpdate,
)
from app.schemas.common import ErrorResponse
from app.schemas.unlock_rule import parse_unlock_rule
from app.services.catalog import BadgeCatalog
from app.services.ledger import UserBadgeLedger

router = APIRouter(prefix="/badges", tags=["badges"])


# ---------------------------------------------------------------------------
# Serialization helper
# ---------------------------------------------------------------------------

def _catalog_item(badge: Badge) -> CatalogBadgeOut:
    try:
        rule = parse_unlock_rule(badge.unlock_criteria).model_dump(mode="json")
    except UnlockRuleParseError:
        rule = None
    item = CatalogBadgeOut.model_validate(badge)
    item.rule = rule
    return item


# ---------------------------------------------------------------------------
# GET /badges
# ---------------------------------------------------------------------------

@router.get(
    "",
    response_model=BadgeCollectionResponse,
    summary="Badges earned by the current user and those still available",
)
def list_user_badges(
    user_id: Optional[int] = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    """
    Guests get two empty lists rather than an error.
    Earned badges follow the user's display order.
    """
    if user_id is None:
        return BadgeCollectionResponse(earned_badges=[], available_badges=[])

    earned = [ub.badge for ub in UserBadgeLedger(db).earned_badges(user_id)]
    earned_ids = {b.id for b in earned}
    available = [b for b in BadgeCatalog(db).all() if b.id not in earned_ids]
    return BadgeCollectionResponse(
        earned_badges=[BadgeOut.model_validate(b) for b in earned],
        available_badges=[BadgeOut.model_validate(b) for b in available],
    )


# ---------------------------------------------------------------------------
# GET /badges/catalog
# ---------------------------------------------------------------------------

@router.get(
    "/catalog",
    response_model=list[CatalogBadgeOut],
    summary="Full badge catalog with parsed unlock rules",
)
def list_catalog(db: Session = Depends(get_db)):
    return [_catalog_item(b) for b in BadgeCatalog(db).all()]


# ---------------------------------------------------------------------------
# GET /badges/{badge_id}
# ---------------------------------------------------------------------------

@router.get(
    "/{badge_id}",
    response_model=CatalogBadgeOut,
    summary="Single badge",
    responses={404: {"model": ErrorResponse, "description": "Unknown badge id."}},
)
def get_badge(badge_id: int, db: Session = Depends(get_db)):
    badge = BadgeCatalog(db).by_id(badge_id)
    if badge is None:
        raise BadgeNotFoundError(badge_id)
    return _catalog_item(badge)


# ---------------------------------------------------------------------------
# PATCH /badges/{badge_id}
# ---------------------------------------------------------------------------

@router.patch(
    "/{badge_id}",
    response_model=UserBadgeOut,
    summary="Update display order / favorite flag of an earned badge",
    responses={
        401: {"model": ErrorResponse, "description": "No current user."},
        404: {"model": ErrorResponse, "description": "The user has not earned this badge."},
    },
)
def update_user_badge(
    badge_id: int,
    payload: UserBadgeUpdate,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    entry = UserBadgeLedger(db).update(
        user_id,
        badge_id,
        display_order=payload.display_order,
        favorite=payload.favorite,
    )
    db.commit()
    db.refresh(entry)
    return UserBadgeOut.model_validate(entry)
