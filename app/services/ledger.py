"""
User badge ledger: which badges each user has earned.

Public API
----------
UserBadgeLedger(db).earned_badges(user_id)            → list[UserBadge] (joined with Badge)
UserBadgeLedger(db).earned_badge_ids(user_id)         → set[int]
UserBadgeLedger(db).award(user_id, badge_id)          → UserBadge       (idempotent)
UserBadgeLedger(db).get_or_award(user_id, badge_id)   → (UserBadge, created)
UserBadgeLedger(db).update(user_id, badge_id, ...)    → UserBadge

Idempotency
-----------
(user_id, badge_id) is the primary key of user_badges. award() returns the
existing row when there is one; otherwise it inserts inside a savepoint and,
if a concurrent request inserted first (IntegrityError), rolls back the
savepoint and returns the row that won. A duplicate award never raises.

All methods flush only. The caller is responsible for commit / rollback.
"""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import BadgeNotFoundError, UserBadgeNotFoundError
from app.models.badge import Badge
from app.models.user_badge import UserBadge

logger = logging.getLogger(__name__)


class UserBadgeLedger:
    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: int, badge_id: int) -> Optional[UserBadge]:
        return self.db.get(UserBadge, (user_id, badge_id))

    def earned_badges(self, user_id: int) -> list[UserBadge]:
        return (
            self.db.query(UserBadge)
            .filter(UserBadge.user_id == user_id)
            .order_by(UserBadge.display_order, UserBadge.earned_at, UserBadge.badge_id)
            .all()
        )

    def earned_badge_ids(self, user_id: int) -> set[int]:
        rows = (
            self.db.query(UserBadge.badge_id)
            .filter(UserBadge.user_id == user_id)
            .all()
        )
        return {badge_id for (badge_id,) in rows}

    def award(self, user_id: int, badge_id: int) -> UserBadge:
        entry, _ = self.get_or_award(user_id, badge_id)
        return entry

    def get_or_award(self, user_id: int, badge_id: int) -> tuple[UserBadge, bool]:
        """`created` is False when the row already existed or a concurrent insert won."""
        existing = self.get(user_id, badge_id)
        if existing is not None:
            return existing, False

        if self.db.get(Badge, badge_id) is None:
            raise BadgeNotFoundError(badge_id)

        savepoint = self.db.begin_nested()
        try:
            entry = UserBadge(
                user_id=user_id,
                badge_id=badge_id,
                display_order=0,
                favorite=False,
            )
            self.db.add(entry)
            self.db.flush()
            savepoint.commit()
        except IntegrityError:
            savepoint.rollback()
            winner = self.get(user_id, badge_id)
            if winner is None:
                raise
            logger.info("Badge %s already awarded to user %s concurrently", badge_id, user_id)
            return winner, False

        logger.info("Awarded badge %s to user %s", badge_id, user_id)
        return entry, True

    def update(
        self,
        user_id: int,
        badge_id: int,
        display_order: Optional[int] = None,
        favorite: Optional[bool] = None,
    ) -> UserBadge:
        """Change the user-adjustable fields. earned_at is never touched."""
        entry = self.get(user_id, badge_id)
        if entry is None:
            raise UserBadgeNotFoundError(user_id=user_id, badge_id=badge_id)

        if display_order is not None:
            entry.display_order = display_order
        if favorite is not None:
            entry.favorite = favorite
        self.db.flush()
        return entry
