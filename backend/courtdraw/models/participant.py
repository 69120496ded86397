from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import JSON, String
from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Column, Field, Relationship, SQLModel

if TYPE_CHECKING:
    from courtdraw.models.tournament import Tournament


class Category(str, Enum):
    singles = "singles"
    doubles = "doubles"
    mixed = "mixed"

    @property
    def is_team(self) -> bool:
        """Doubles and mixed entries are a participant plus partner."""
        return self in (Category.doubles, Category.mixed)


class SkillLevel(str, Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"
    expert = "expert"
    elite = "elite"


class Participant(SQLModel, table=True):
    __table_args__ = (
        SAUniqueConstraint("tournament_id", "user_id", "category", name="uq_tournament_user_category"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    tournament_id: int = Field(foreign_key="tournament.id", index=True)
    user_id: str  # identity reference issued by the auth gateway
    name: str
    category: Category = Field(sa_column=Column(String, nullable=False))
    age_groups: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    skill_level: Optional[SkillLevel] = Field(default=None, sa_column=Column(String, nullable=True))

    # Doubles/mixed only
    partner_id: Optional[str] = Field(default=None)
    partner_name: Optional[str] = Field(default=None)

    is_approved: bool = Field(default=False, index=True)
    registered_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    tournament: "Tournament" = Relationship(back_populates="participants")
