"""
Tests for the badge catalog: default seed, lookups, idempotent seeding.
"""
from __future__ import annotations

from app.models.badge import Badge, BadgeRarity, MILESTONE
from app.schemas.unlock_rule import CategoryFirstRule, QuestionCountRule, CategoryDiversityRule
from app.services.catalog import BadgeCatalog, default_badges, seed_default_badges
from app.services.classifier import Category

DEFAULT_NAMES = {
    "Science Explorer", "Math Whiz", "Reading Star",
    "Curious Mind", "Knowledge Seeker", "Super Learner",
}


class TestDefaultBadges:
    def test_default_set(self):
        assert {b.name for b in default_badges()} == DEFAULT_NAMES

    def test_default_badges_are_fresh_objects(self):
        assert default_badges()[0] is not default_badges()[0]


class TestSeeding:
    def test_seed_skipped_when_catalog_populated(self, db):
        before = db.query(Badge).count()
        assert seed_default_badges(db) == 0
        assert db.query(Badge).count() == before

    def test_seed_ran_once_for_session(self, db):
        names = [b.name for b in db.query(Badge).all()]
        for name in DEFAULT_NAMES:
            assert names.count(name) == 1


class TestCatalogLookups:
    def test_all_ordered_by_id(self, db):
        ids = [b.id for b in BadgeCatalog(db).all()]
        assert ids == sorted(ids)
        assert len(ids) >= len(DEFAULT_NAMES)

    def test_by_id(self, db):
        catalog = BadgeCatalog(db)
        badge = catalog.all()[0]
        assert catalog.by_id(badge.id).name == badge.name

    def test_by_id_unknown(self, db):
        assert BadgeCatalog(db).by_id(424_242) is None

    def test_by_category_topic(self, db):
        badges = BadgeCatalog(db).by_category(Category.science)
        assert [b.name for b in badges] == ["Science Explorer"]

    def test_by_category_accepts_plain_topic_string(self, db):
        badges = BadgeCatalog(db).by_category("math")
        assert [b.name for b in badges] == ["Math Whiz"]

    def test_by_category_marker(self, db):
        names = {b.name for b in BadgeCatalog(db).by_category(MILESTONE)}
        assert names == {"Curious Mind", "Knowledge Seeker"}

    def test_entries_parse_rules(self, db):
        rules = {e.badge.name: e.rule for e in BadgeCatalog(db).entries()}
        assert rules["Science Explorer"] == CategoryFirstRule(category=Category.science)
        assert rules["Knowledge Seeker"] == QuestionCountRule(count=10)
        assert rules["Super Learner"] == CategoryDiversityRule(count=3)

    def test_rarity_ladder(self, db):
        knowledge = next(b for b in BadgeCatalog(db).all() if b.name == "Knowledge Seeker")
        assert knowledge.rarity == BadgeRarity.uncommon
        assert BadgeRarity.common.rank < BadgeRarity.uncommon.rank < BadgeRarity.legendary.rank
