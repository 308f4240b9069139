"""
Tests for the user badge ledger: idempotent award, update, joined reads.
"""
from __future__ import annotations

import pytest

from app.core.errors import BadgeNotFoundError, UserBadgeNotFoundError
from app.db.base import SessionLocal
from app.models.badge import Badge
from app.models.user_badge import UserBadge
from app.services.ledger import UserBadgeLedger


def _badge_id(db, name: str) -> int:
    return db.query(Badge.id).filter(Badge.name == name).scalar()


def _rows(db, user_id: int) -> int:
    return db.query(UserBadge).filter(UserBadge.user_id == user_id).count()


class TestAward:

    def test_award_creates_entry_with_defaults(self, db, new_user_id):
        user = new_user_id()
        badge_id = _badge_id(db, "Science Explorer")
        entry = UserBadgeLedger(db).award(user, badge_id)
        db.commit()

        assert entry.user_id == user
        assert entry.badge_id == badge_id
        assert entry.display_order == 0
        assert entry.favorite is False
        assert entry.earned_at is not None

    def test_award_twice_is_idempotent(self, db, new_user_id):
        user = new_user_id()
        badge_id = _badge_id(db, "Math Whiz")
        ledger = UserBadgeLedger(db)

        first = ledger.award(user, badge_id)
        db.commit()
        earned_at = first.earned_at
        second = ledger.award(user, badge_id)
        db.commit()

        assert _rows(db, user) == 1
        assert second.earned_at == earned_at

    def test_award_from_two_sessions_keeps_one_row(self, db, new_user_id):
        user = new_user_id()
        badge_id = _badge_id(db, "Reading Star")

        other = SessionLocal()
        try:
            UserBadgeLedger(other).award(user, badge_id)
            other.commit()
        finally:
            other.close()

        entry = UserBadgeLedger(db).award(user, badge_id)
        db.commit()
        assert entry.badge_id == badge_id
        assert _rows(db, user) == 1

    def test_concurrent_insert_conflict_returns_winner(self, db, new_user_id):
        """Both requests saw no row; the loser hits the primary key and re-reads."""
        user = new_user_id()
        badge_id = _badge_id(db, "Curious Mind")

        winner_session = SessionLocal()
        try:
            winner = UserBadgeLedger(winner_session).award(user, badge_id)
            winner_session.commit()
            winner_earned_at = winner.earned_at
        finally:
            winner_session.close()

        ledger = UserBadgeLedger(db)
        real_get = ledger.get
        calls = {"n": 0}

        def stale_first_read(user_id, bid):
            calls["n"] += 1
            if calls["n"] == 1:
                return None
            return real_get(user_id, bid)

        ledger.get = stale_first_read
        entry = ledger.award(user, badge_id)
        db.commit()

        assert calls["n"] == 2
        assert entry.earned_at.replace(tzinfo=None) == winner_earned_at.replace(tzinfo=None)
        assert _rows(db, user) == 1

    def test_get_or_award_reports_whether_row_was_inserted(self, db, new_user_id):
        user = new_user_id()
        badge_id = _badge_id(db, "Knowledge Seeker")
        ledger = UserBadgeLedger(db)

        first, created = ledger.get_or_award(user, badge_id)
        db.commit()
        assert created is True

        again, created = ledger.get_or_award(user, badge_id)
        assert created is False
        assert again.badge_id == first.badge_id
        assert _rows(db, user) == 1

    def test_get_or_award_losing_a_race_is_not_created(self, db, new_user_id):
        user = new_user_id()
        badge_id = _badge_id(db, "Super Learner")

        other = SessionLocal()
        try:
            UserBadgeLedger(other).award(user, badge_id)
            other.commit()
        finally:
            other.close()

        ledger = UserBadgeLedger(db)
        real_get = ledger.get
        calls = {"n": 0}

        def stale_first_read(user_id, bid):
            calls["n"] += 1
            return None if calls["n"] == 1 else real_get(user_id, bid)

        ledger.get = stale_first_read

        _, created = ledger.get_or_award(user, badge_id)
        db.commit()
        assert created is False
        assert _rows(db, user) == 1

    def test_award_unknown_badge(self, db, new_user_id):
        with pytest.raises(BadgeNotFoundError):
            UserBadgeLedger(db).award(new_user_id(), 987_654)


class TestReads:

    def test_earned_badges_joined_with_definition(self, db, new_user_id):
        user = new_user_id()
        ledger = UserBadgeLedger(db)
        for name in ("Science Explorer", "Super Learner"):
            ledger.award(user, _badge_id(db, name))
        db.commit()

        earned = ledger.earned_badges(user)
        assert {ub.badge.name for ub in earned} == {"Science Explorer", "Super Learner"}
        assert ledger.earned_badge_ids(user) == {ub.badge_id for ub in earned}

    def test_earned_badges_follow_display_order(self, db, new_user_id):
        user = new_user_id()
        ledger = UserBadgeLedger(db)
        science = _badge_id(db, "Science Explorer")
        math = _badge_id(db, "Math Whiz")
        ledger.award(user, science)
        ledger.award(user, math)
        ledger.update(user, science, display_order=5)
        db.commit()

        assert [ub.badge_id for ub in ledger.earned_badges(user)] == [math, science]

    def test_new_user_has_nothing(self, db, new_user_id):
        user = new_user_id()
        ledger = UserBadgeLedger(db)
        assert ledger.earned_badges(user) == []
        assert ledger.earned_badge_ids(user) == set()


class TestUpdate:

    def test_update_favorite_and_order(self, db, new_user_id):
        user = new_user_id()
        badge_id = _badge_id(db, "Knowledge Seeker")
        ledger = UserBadgeLedger(db)
        entry = ledger.award(user, badge_id)
        db.commit()
        earned_at = entry.earned_at

        entry = ledger.update(user, badge_id, display_order=2, favorite=True)
        db.commit()

        assert entry.display_order == 2
        assert entry.favorite is True
        assert entry.earned_at == earned_at

    def test_partial_update_keeps_other_field(self, db, new_user_id):
        user = new_user_id()
        badge_id = _badge_id(db, "Knowledge Seeker")
        ledger = UserBadgeLedger(db)
        ledger.award(user, badge_id)
        ledger.update(user, badge_id, display_order=3)
        entry = ledger.update(user, badge_id, favorite=True)
        db.commit()

        assert entry.display_order == 3
        assert entry.favorite is True

    def test_update_missing_entry(self, db, new_user_id):
        user = new_user_id()
        with pytest.raises(UserBadgeNotFoundError) as exc_info:
            UserBadgeLedger(db).update(user, _badge_id(db, "Math Whiz"), favorite=True)
        assert exc_info.value.http_status == 404
