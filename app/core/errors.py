"""
Custom exception hierarchy for AskMeBuddy.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing English messages.
"""
from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class AskBuddyException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class BadgeNotFoundError(AskBuddyException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "BADGE_NOT_FOUND"

    def __init__(self, badge_id: int):
        super().__init__(
            message=f"Badge {badge_id} does not exist.",
            details={"badge_id": badge_id},
        )


class UserBadgeNotFoundError(AskBuddyException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "USER_BADGE_NOT_FOUND"

    def __init__(self, user_id: int, badge_id: int):
        super().__init__(
            message=f"User {user_id} has not earned badge {badge_id}.",
            details={"user_id": user_id, "badge_id": badge_id},
        )


class AuthenticationRequiredError(AskBuddyException):
    http_status = status.HTTP_401_UNAUTHORIZED
    code = "AUTHENTICATION_REQUIRED"

    def __init__(self):
        super().__init__(message="This operation requires a signed-in user.")


class EvaluationFailedError(AskBuddyException):
    """Storage failure while evaluating achievements for a user."""
    http_status = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "EVALUATION_FAILED"

    def __init__(self, user_id: int, reason: str):
        super().__init__(
            message=f"Achievement evaluation failed for user {user_id}: {reason}",
            details={"user_id": user_id},
        )


class UnlockRuleParseError(ValueError):
    """A stored unlock criterion is not a valid rule. Never reaches HTTP."""

    def __init__(self, raw: str | None, reason: str):
        self.raw = raw
        self.reason = reason
        super().__init__(f"Invalid unlock rule {raw!r}: {reason}")


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def askbuddy_exception_handler(request: Request, exc: AskBuddyException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
