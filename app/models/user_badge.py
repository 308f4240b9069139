"""
UserBadge — ledger row recording that a user earned a badge.

One row per (user_id, badge_id); the composite primary key enforces it
at the DB level. earned_at is written once by the ledger's award().
"""
from datetime import datetime, timezone
from sqlalchemy import Integer, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.badge import Badge


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class UserBadge(Base):
    __tablename__ = "user_badges"

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    badge_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("badges.id"), primary_key=True
    )
    earned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    favorite: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    badge: Mapped[Badge] = relationship(Badge, lazy="joined")
