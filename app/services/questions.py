"""
Question store: the answered-question history the achievement engine reads.

Public API
----------
list_questions_for_user(db, user_id)          → list[Question]  (oldest first)
create_question(db, user_id, question, ...)   → Question        (flush only)
recent_questions(db, limit)                   → list[Question]  (newest first)
"""
from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from app.models.question import Question


def list_questions_for_user(db: Session, user_id: int) -> list[Question]:
    """Full history of `user_id`, ascending by creation time (id breaks ties)."""
    return (
        db.query(Question)
        .filter(Question.user_id == user_id)
        .order_by(Question.created_at.asc(), Question.id.asc())
        .all()
    )


def create_question(
    db: Session,
    user_id: Optional[int],
    question: str,
    answer: str,
    image_url: Optional[str] = None,
    audio_url: Optional[str] = None,
) -> Question:
    """
    Persist an answered question. Calls db.flush() to obtain the id but does
    NOT commit; the caller is responsible for commit / rollback.
    """
    record = Question(
        user_id=user_id,
        question=question,
        answer=answer,
        image_url=image_url,
        audio_url=audio_url,
    )
    db.add(record)
    db.flush()
    return record


def recent_questions(db: Session, limit: int) -> list[Question]:
    return (
        db.query(Question)
        .order_by(Question.created_at.desc(), Question.id.desc())
        .limit(limit)
        .all()
    )
