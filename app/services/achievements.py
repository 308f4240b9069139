"""
Achievement Evaluator — decides which badge (if any) a new question unlocks.

Tiers (evaluated in this order, first hit wins)
-----------------------------------------------
  1. CATEGORY_FIRST
     Trigger : the just-asked question's category C has an unearned
               CategoryFirst(C) badge AND exactly one question in the
               history (the current one included) is classified C.

  2. QUESTION_COUNT
     Trigger : total questions >= threshold. Unearned badges are tried
               highest threshold first, so a user who jumps past several
               milestones is shown the biggest one; the smaller ones are
               picked up on later questions.

  3. CATEGORY_DIVERSITY
     Trigger : distinct categories asked (general included) >= threshold.
               Same highest-threshold-first ordering as tier 2.

At most one badge is awarded per call. Badges that became eligible at the
same time stay eligible (every rule is monotonic) and are awarded on the
next evaluations.

Guests (user_id None) are never evaluated and cause no storage access.
Storage and stored-data errors are raised as EvaluationFailedError; callers
downgrade them to "no badge this time" (see app/services/rewards.py).
"""
from __future__ import annotations

import enum
import logging
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import BadgeNotFoundError, EvaluationFailedError
from app.models.badge import Badge
from app.models.question import Question
from app.schemas.unlock_rule import (
    CategoryDiversityRule,
    CategoryFirstRule,
    QuestionCountRule,
)
from app.services.catalog import BadgeCatalog, CatalogEntry
from app.services.classifier import classify, distinct_categories
from app.services.ledger import UserBadgeLedger
from app.services.questions import list_questions_for_user

logger = logging.getLogger(__name__)


class Tier(str, enum.Enum):
    CATEGORY_FIRST     = "category_first"
    QUESTION_COUNT     = "question_count"
    CATEGORY_DIVERSITY = "category_diversity"


def _by_threshold_desc(entry: CatalogEntry) -> tuple[int, int]:
    """Sort key for threshold tiers: highest count first, lowest badge id on ties."""
    return (-entry.rule.count, entry.badge.id or 0)


# ---------------------------------------------------------------------------
# Individual tier checks (pure)
# ---------------------------------------------------------------------------

def _check_category_first(
    unearned: list[CatalogEntry],
    history: list[str],
    current: str,
) -> Optional[CatalogEntry]:
    category = classify(current)
    seen = sum(1 for text in history if classify(text) == category)
    if seen != 1:
        return None
    for entry in unearned:
        if isinstance(entry.rule, CategoryFirstRule) and entry.rule.category == category:
            return entry
    return None


def _check_question_count(
    unearned: list[CatalogEntry],
    history: list[str],
    current: str,
) -> Optional[CatalogEntry]:
    candidates = [e for e in unearned if isinstance(e.rule, QuestionCountRule)]
    total = len(history)
    for entry in sorted(candidates, key=_by_threshold_desc):
        if total >= entry.rule.count:
            return entry
    return None


def _check_category_diversity(
    unearned: list[CatalogEntry],
    history: list[str],
    current: str,
) -> Optional[CatalogEntry]:
    candidates = [e for e in unearned if isinstance(e.rule, CategoryDiversityRule)]
    if not candidates:
        return None
    distinct = len(distinct_categories(history))
    for entry in sorted(candidates, key=_by_threshold_desc):
        if distinct >= entry.rule.count:
            return entry
    return None


TierCheck = Callable[[list[CatalogEntry], list[str], str], Optional[CatalogEntry]]

# Precedence: first tier with a hit wins.
_TIER_CHECKS: tuple[tuple[Tier, TierCheck], ...] = (
    (Tier.CATEGORY_FIRST,     _check_category_first),
    (Tier.QUESTION_COUNT,     _check_question_count),
    (Tier.CATEGORY_DIVERSITY, _check_category_diversity),
)

TIER_ORDER: tuple[Tier, ...] = tuple(tier for tier, _ in _TIER_CHECKS)


def select_badge(
    entries: list[CatalogEntry],
    earned_ids: set[int],
    history: list[str],
    current: str,
) -> Optional[CatalogEntry]:
    """
    Pure tier selection. `history` is every question text of the user in
    ascending order, `current` (the just-asked question) included.
    """
    unearned = [e for e in entries if e.badge.id not in earned_ids]
    if not unearned:
        return None

    for _tier, check in _TIER_CHECKS:
        hit = check(unearned, history, current)
        if hit is not None:
            return hit
    return None


# ---------------------------------------------------------------------------
# Public — main entry point
# ---------------------------------------------------------------------------

# LookupError / ValueError: stored values that no longer map onto the model
# (e.g. an unknown rarity).
_EVALUATION_ERRORS = (SQLAlchemyError, LookupError, ValueError, BadgeNotFoundError)


class AchievementEvaluator:
    def __init__(self, db: Session):
        self.db = db
        self.catalog = BadgeCatalog(db)
        self.ledger = UserBadgeLedger(db)

    def evaluate(self, user_id: Optional[int], question: Question) -> Optional[Badge]:
        """
        Award and return at most one newly unlocked badge for `user_id`.
        Commits once if a badge was awarded. Returns None when the selected
        badge was already recorded by a concurrent evaluation.
        """
        if user_id is None:
            return None

        try:
            history = list_questions_for_user(self.db, user_id)
            if question.id is None or all(q.id != question.id for q in history):
                history.append(question)

            earned_ids = self.ledger.earned_badge_ids(user_id)
            entries = self.catalog.entries()

            selected = select_badge(
                entries,
                earned_ids,
                [q.question for q in history],
                question.question,
            )
            if selected is None:
                return None

            _, created = self.ledger.get_or_award(user_id, selected.badge.id)
            if not created:
                return None
            logger.info(
                "User %s unlocked %r via %s", user_id, selected.badge.name, selected.rule.type
            )
            self.db.commit()
        except _EVALUATION_ERRORS as exc:
            raise EvaluationFailedError(user_id=user_id, reason=str(exc)) from exc

        return selected.badge
