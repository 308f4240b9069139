"""
Badge catalog: read-only access to badge definitions plus one-shot seeding.

Public API
----------
BadgeCatalog(db).all()                 → list[Badge]         (ordered by id)
BadgeCatalog(db).by_id(badge_id)       → Badge | None
BadgeCatalog(db).by_category(category) → list[Badge]
BadgeCatalog(db).entries()             → list[CatalogEntry]  (badge + parsed rule)
seed_default_badges(db)                → int                 (rows inserted)

Unlock criteria are parsed once per catalog load. A badge whose stored
criterion is malformed is logged and left out of entries(); it still shows
up in all() so it can be listed.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import UnlockRuleParseError
from app.models.badge import Badge, BadgeRarity, MILESTONE, SPECIAL
from app.schemas.unlock_rule import (
    CategoryDiversityRule,
    CategoryFirstRule,
    QuestionCountRule,
    UnlockRule,
    dump_unlock_rule,
    parse_unlock_rule,
)
from app.services.classifier import Category

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogEntry:
    badge: Badge
    rule: UnlockRule


# ---------------------------------------------------------------------------
# Default badges
# ---------------------------------------------------------------------------

_DEFAULT_BADGES: list[tuple[str, str, str, str, BadgeRarity, UnlockRule]] = [
    ("Science Explorer", "Asked your first science question",
     "/badges/science-explorer.svg", Category.science.value, BadgeRarity.common,
     CategoryFirstRule(category=Category.science)),
    ("Math Whiz", "Asked your first math question",
     "/badges/math-whiz.svg", Category.math.value, BadgeRarity.common,
     CategoryFirstRule(category=Category.math)),
    ("Reading Star", "Asked your first question about reading or books",
     "/badges/reading-star.svg", Category.reading.value, BadgeRarity.common,
     CategoryFirstRule(category=Category.reading)),
    ("Curious Mind", "Asked 5 questions",
     "/badges/curious-mind.svg", MILESTONE, BadgeRarity.common,
     QuestionCountRule(count=5)),
    ("Knowledge Seeker", "Asked 10 questions",
     "/badges/knowledge-seeker.svg", MILESTONE, BadgeRarity.uncommon,
     QuestionCountRule(count=10)),
    ("Super Learner", "Asked questions from 3 different categories",
     "/badges/super-learner.svg", SPECIAL, BadgeRarity.rare,
     CategoryDiversityRule(count=3)),
]


def default_badges() -> list[Badge]:
    """Fresh, unsaved Badge rows for the default catalog."""
    return [
        Badge(
            name=name,
            description=description,
            image_url=image_url,
            category=category,
            rarity=rarity,
            unlock_criteria=dump_unlock_rule(rule),
        )
        for name, description, image_url, category, rarity, rule in _DEFAULT_BADGES
    ]


def seed_default_badges(db: Session) -> int:
    """
    Insert the default catalog if and only if the badges table is empty.
    Returns the number of badges inserted (0 when seeding was skipped).
    """
    if db.query(Badge.id).first() is not None:
        logger.info("Badge catalog already populated; skipping seed")
        return 0

    badges = default_badges()
    db.add_all(badges)
    try:
        db.commit()
    except IntegrityError:
        # Another process seeded between our check and insert; unique names held.
        db.rollback()
        logger.info("Badge catalog seeded concurrently; skipping seed")
        return 0

    logger.info("Seeded %d default badges", len(badges))
    return len(badges)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

def build_entries(badges: list[Badge]) -> list[CatalogEntry]:
    """Pair each badge with its parsed rule, skipping malformed criteria."""
    entries: list[CatalogEntry] = []
    for badge in badges:
        try:
            rule = parse_unlock_rule(badge.unlock_criteria)
        except UnlockRuleParseError as exc:
            logger.warning("Skipping badge %s (%s): %s", badge.id, badge.name, exc.reason)
            continue
        entries.append(CatalogEntry(badge=badge, rule=rule))
    return entries


class BadgeCatalog:
    def __init__(self, db: Session):
        self.db = db

    def all(self) -> list[Badge]:
        return self.db.query(Badge).order_by(Badge.id).all()

    def by_id(self, badge_id: int) -> Optional[Badge]:
        return self.db.get(Badge, badge_id)

    def by_category(self, category: Category | str) -> list[Badge]:
        """`category` is a topic or one of the MILESTONE / SPECIAL markers."""
        value = category.value if isinstance(category, Category) else category
        return (
            self.db.query(Badge)
            .filter(Badge.category == value)
            .order_by(Badge.id)
            .all()
        )

    def entries(self) -> list[CatalogEntry]:
        return build_entries(self.all())
