"""
Unlock rules — the machine-readable criterion attached to every badge.

Stored as JSON text in badges.unlock_criteria and parsed into one of:

  {"type": "category_first",     "category": "science"}  → CategoryFirstRule
  {"type": "question_count",     "count": 5}             → QuestionCountRule
  {"type": "category_diversity", "count": 3}             → CategoryDiversityRule

All rules are monotonic in the user's question history: once satisfied,
a rule stays satisfied (CategoryFirst is only *checked* on the question
that first hits the category, but the badge is never revoked).
"""
from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from app.core.errors import UnlockRuleParseError
from app.services.classifier import Category


class CategoryFirstRule(BaseModel):
    """First question asked in `category`."""
    model_config = ConfigDict(frozen=True)

    type: Literal["category_first"] = "category_first"
    category: Category


class QuestionCountRule(BaseModel):
    """At least `count` questions asked in total."""
    model_config = ConfigDict(frozen=True)

    type: Literal["question_count"] = "question_count"
    count: int = Field(ge=1)


class CategoryDiversityRule(BaseModel):
    """Questions asked in at least `count` distinct categories."""
    model_config = ConfigDict(frozen=True)

    type: Literal["category_diversity"] = "category_diversity"
    count: int = Field(ge=1)


UnlockRule = Annotated[
    Union[CategoryFirstRule, QuestionCountRule, CategoryDiversityRule],
    Field(discriminator="type"),
]

_adapter: TypeAdapter[UnlockRule] = TypeAdapter(UnlockRule)


def parse_unlock_rule(raw: str | None) -> UnlockRule:
    """Parse stored JSON into a rule. Raises UnlockRuleParseError on bad input."""
    if not raw:
        raise UnlockRuleParseError(raw, "empty criterion")
    try:
        return _adapter.validate_json(raw)
    except ValidationError as exc:
        reasons = "; ".join(e["msg"] for e in exc.errors())
        raise UnlockRuleParseError(raw, reasons) from exc


def dump_unlock_rule(rule: UnlockRule) -> str:
    return rule.model_dump_json()
