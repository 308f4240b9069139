from .badge import Badge, BadgeRarity
from .user_badge import UserBadge
from .question import Question

__all__ = [
    "Badge",
    "BadgeRarity",
    "UserBadge",
    "Question",
]
