"""
Tests for the rewards payload and the caller-side evaluation guard.
"""
from __future__ import annotations

import logging

from app.core.errors import EvaluationFailedError
from app.models.badge import Badge, BadgeRarity
from app.services.rewards import rewards_for_question, to_payload

SCIENCE = "How do magnets work?"


def _badge() -> Badge:
    return Badge(
        id=7,
        name="Science Explorer",
        description="Asked your first science question",
        image_url="/badges/science-explorer.svg",
        category="science",
        rarity=BadgeRarity.common,
        unlock_criteria='{"type":"category_first","category":"science"}',
    )


class TestToPayload:
    def test_none_gives_none(self):
        assert to_payload(None) is None

    def test_badge_is_wrapped(self):
        payload = to_payload(_badge())
        assert payload.badge_earned.id == 7
        assert payload.badge_earned.name == "Science Explorer"

    def test_wire_shape_is_camel_case(self):
        body = to_payload(_badge()).model_dump(mode="json", by_alias=True)
        assert set(body) == {"badgeEarned"}
        assert body["badgeEarned"]["imageUrl"] == "/badges/science-explorer.svg"
        assert body["badgeEarned"]["rarity"] == "common"


class TestRewardsForQuestion:
    def test_awards_first_badge(self, db, ask, new_user_id):
        user = new_user_id()
        rewards = rewards_for_question(db, user, ask(user, SCIENCE))
        assert rewards.badge_earned.name == "Science Explorer"

    def test_guest_gets_nothing(self, db, ask):
        assert rewards_for_question(db, None, ask(None, SCIENCE)) is None

    def test_failure_is_logged_and_downgraded(self, db, ask, new_user_id, monkeypatch, caplog):
        user = new_user_id()
        q = ask(user, SCIENCE)

        def failing_evaluate(self, user_id, question):
            raise EvaluationFailedError(user_id=user_id, reason="database is down")

        monkeypatch.setattr(
            "app.services.rewards.AchievementEvaluator.evaluate", failing_evaluate
        )
        with caplog.at_level(logging.ERROR, logger="app.services.rewards"):
            assert rewards_for_question(db, user, q) is None
        assert "Badge evaluation failed" in caplog.text
