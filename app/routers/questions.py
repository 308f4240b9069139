"""
Questions router.

POST /questions          — record an answered question, check for a new badge
GET  /questions/recent   — latest questions across all users
GET  /questions/history  — the current user's questions, oldest first
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.identity import get_user_id
from app.db.base import get_db
from app.models.question import Question
from app.schemas.question import QuestionCreate, QuestionOut, QuestionResponse
from app.services.classifier import classify
from app.services.questions import create_question, list_questions_for_user, recent_questions
from app.services.rewards import rewards_for_question

router = APIRouter(prefix="/questions", tags=["questions"])


def _question_out(q: Question) -> QuestionOut:
    out = QuestionOut.model_validate(q)
    out.category = classify(q.question).value
    return out


# ---------------------------------------------------------------------------
# POST /questions
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=QuestionResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Record an answered question",
    responses={
        201: {"description": "Question stored; `rewards` present if a badge was unlocked."},
        422: {"description": "Validation error (empty question, etc.)"},
    },
)
def ask(
    payload: QuestionCreate,
    user_id: Optional[int] = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    """
    Persist the question and its answer, then run the achievement engine for
    signed-in users. The question is committed before evaluation, so a failed
    evaluation only means no `rewards` in the response.
    """
    record = create_question(
        db,
        user_id=user_id,
        question=payload.question,
        answer=payload.answer,
        image_url=payload.image_url,
        audio_url=payload.audio_url,
    )
    db.commit()
    db.refresh(record)

    response = QuestionResponse(**_question_out(record).model_dump())
    response.rewards = rewards_for_question(db, user_id, record)
    return response


# ---------------------------------------------------------------------------
# GET /questions/recent
# ---------------------------------------------------------------------------

@router.get(
    "/recent",
    response_model=list[QuestionOut],
    summary="Most recent questions (newest first)",
)
def list_recent(
    limit: Optional[int] = Query(default=None, ge=1, le=100, description="Page size."),
    db: Session = Depends(get_db),
):
    rows = recent_questions(db, limit or settings.RECENT_QUESTIONS_LIMIT)
    return [_question_out(q) for q in rows]


# ---------------------------------------------------------------------------
# GET /questions/history
# ---------------------------------------------------------------------------

@router.get(
    "/history",
    response_model=list[QuestionOut],
    summary="Current user's questions (oldest first)",
)
def list_history(
    user_id: Optional[int] = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    """Guests have no stored history and get an empty list."""
    if user_id is None:
        return []
    return [_question_out(q) for q in list_questions_for_user(db, user_id)]
