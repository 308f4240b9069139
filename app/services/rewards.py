"""
Rewards notifier: turns an evaluation result into the `rewards` payload.

rewards_for_question() is the guard every request handler goes through.
An evaluation failure is logged and reported as "no badge this time"; it
never fails the request that recorded the question.
"""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.core.errors import EvaluationFailedError
from app.models.badge import Badge
from app.models.question import Question
from app.schemas.badge import BadgeOut, RewardsOut
from app.services.achievements import AchievementEvaluator

logger = logging.getLogger(__name__)


def to_payload(badge: Optional[Badge]) -> Optional[RewardsOut]:
    if badge is None:
        return None
    return RewardsOut(badge_earned=BadgeOut.model_validate(badge))


def rewards_for_question(
    db: Session,
    user_id: Optional[int],
    question: Question,
) -> Optional[RewardsOut]:
    try:
        badge = AchievementEvaluator(db).evaluate(user_id, question)
    except EvaluationFailedError:
        logger.exception("Badge evaluation failed for user %s; continuing without reward", user_id)
        db.rollback()
        return None
    return to_payload(badge)
