"""
Badge — a collectible reward defined in the catalog.

Seeded once (see app/services/catalog.py) and immutable afterwards.

category: a topic category ("science", "math", ...) or one of the
          markers "milestone" / "special".
unlock_criteria: JSON-encoded unlock rule, e.g.
          {"type": "question_count", "count": 5}
          Parsed by app/schemas/unlock_rule.py when the catalog is loaded.
"""
from datetime import datetime
from sqlalchemy import Integer, String, Text, DateTime, Enum, func
from sqlalchemy.orm import Mapped, mapped_column
import enum

from app.db.base import Base


class BadgeRarity(str, enum.Enum):
    common = "common"
    uncommon = "uncommon"
    rare = "rare"
    epic = "epic"
    legendary = "legendary"

    @property
    def rank(self) -> int:
        """Position in the rarity ladder (common == 0)."""
        return list(BadgeRarity).index(self)


MILESTONE = "milestone"
SPECIAL = "special"


class Badge(Base):
    __tablename__ = "badges"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[str] = mapped_column(String(256), nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    rarity: Mapped[str] = mapped_column(
        Enum(BadgeRarity, name="badge_rarity_enum"),
        nullable=False,
        default=BadgeRarity.common,
    )
    unlock_criteria: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
