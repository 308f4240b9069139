"""
Question schemas.

POST /questions          → QuestionCreate → QuestionResponse
GET  /questions/recent   → list[QuestionOut]
GET  /questions/history  → list[QuestionOut] (with derived category)
"""
from __future__ import annotations

from datetime import datetime
from typing import Annotated, Optional

from pydantic import Field, field_validator

from app.schemas.badge import RewardsOut
from app.schemas.common import CamelModel


class QuestionCreate(CamelModel):
    """An answered question to record for the current user."""

    question: Annotated[str, Field(
        min_length=1,
        max_length=2_000,
        description="The child's question. Stripped of leading/trailing whitespace.",
        examples=["Why do plants need sunlight?"],
    )]
    answer: Annotated[str, Field(
        min_length=1,
        description="Answer text produced by the answer pipeline.",
    )]
    image_url: Optional[str] = Field(default=None, max_length=512)
    audio_url: Optional[str] = Field(default=None, max_length=512)

    @field_validator("question", "answer", mode="before")
    @classmethod
    def strip_and_check_empty(cls, v: str) -> str:
        stripped = v.strip() if isinstance(v, str) else v
        if not stripped:
            raise ValueError("text must not be empty after stripping whitespace")
        return stripped


class QuestionOut(CamelModel):
    id: int
    user_id: Optional[int] = None
    question: str
    answer: str
    image_url: Optional[str] = None
    audio_url: Optional[str] = None
    created_at: Optional[datetime] = None
    category: Optional[str] = Field(
        default=None, description="Topic category derived from the question text."
    )


class QuestionResponse(QuestionOut):
    rewards: Optional[RewardsOut] = Field(
        default=None,
        description="Present only when this question unlocked a badge.",
    )
