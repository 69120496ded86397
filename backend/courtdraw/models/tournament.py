from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import JSON, String
from sqlmodel import Column, Field, Relationship, SQLModel

if TYPE_CHECKING:
    from courtdraw.models.match import Match
    from courtdraw.models.participant import Participant


class Sport(str, Enum):
    badminton = "badminton"
    tennis = "tennis"


class TournamentFormat(str, Enum):
    knockout = "knockout"
    round_robin = "round_robin"


class TournamentStatus(str, Enum):
    draft = "draft"
    published = "published"
    registration_open = "registration_open"
    ongoing = "ongoing"
    completed = "completed"
    cancelled = "cancelled"


class Tournament(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    sport: Sport = Field(default=Sport.badminton, sa_column=Column(String, nullable=False))
    format: TournamentFormat = Field(sa_column=Column(String, nullable=False))
    categories: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    age_groups: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    allow_multiple_age_groups: bool = Field(default=False)
    status: TournamentStatus = Field(default=TournamentStatus.draft, sa_column=Column(String, nullable=False))

    # Set once by fixture generation; guards against double generation
    has_fixtures: bool = Field(default=False)
    fixtures_generated_at: Optional[datetime] = Field(default=None)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow, sa_column_kwargs={"onupdate": datetime.utcnow})

    # Relationships
    participants: List["Participant"] = Relationship(back_populates="tournament")
    matches: List["Match"] = Relationship(back_populates="tournament")
