"""
Current-user dependency.

Sign-in happens upstream; the gateway forwards the authenticated user's
numeric id in `X-User-Id`. No header means a guest.
"""
from typing import Optional

from fastapi import Header

from app.core.errors import AuthenticationRequiredError


def get_user_id(
    x_user_id: Optional[int] = Header(
        default=None,
        ge=1,
        description="Authenticated user id. Omit for guests.",
    ),
) -> Optional[int]:
    return x_user_id


def require_user_id(
    x_user_id: Optional[int] = Header(default=None, ge=1),
) -> int:
    if x_user_id is None:
        raise AuthenticationRequiredError()
    return x_user_id
