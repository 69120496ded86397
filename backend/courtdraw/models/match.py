from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import JSON, String
from sqlmodel import Column, Field, Relationship, SQLModel

if TYPE_CHECKING:
    from courtdraw.models.tournament import Tournament

TBD = "TBD"
BYE = "BYE"


class MatchStatus(str, Enum):
    scheduled = "scheduled"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"


TERMINAL_STATUSES = (MatchStatus.completed.value, MatchStatus.cancelled.value)


class WalkoverReason(str, Enum):
    bye = "bye"
    walkover = "walkover"
    forfeit = "forfeit"
    disqualification = "disqualification"


class Match(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    tournament_id: int = Field(foreign_key="tournament.id", index=True)

    # Partition
    category: str = Field(sa_column=Column(String, nullable=False))
    age_group: Optional[str] = Field(default=None)

    round_number: int
    round_name: str
    match_number: int  # 1-based, stable within (partition, round)
    bracket_position: int = Field(default=0)  # 0-based slot index within the round

    # Side 1 = player1 (+ player3 partner), side 2 = player2 (+ player4 partner)
    player1_id: Optional[str] = Field(default=None)
    player1_name: str = Field(default=TBD)
    player2_id: Optional[str] = Field(default=None)
    player2_name: str = Field(default=TBD)
    player3_id: Optional[str] = Field(default=None)
    player3_name: Optional[str] = Field(default=None)
    player4_id: Optional[str] = Field(default=None)
    player4_name: Optional[str] = Field(default=None)

    status: MatchStatus = Field(default=MatchStatus.scheduled, sa_column=Column(String, nullable=False))
    winner_id: Optional[str] = Field(default=None)
    winner_name: Optional[str] = Field(default=None)
    is_walkover: bool = Field(default=False)
    walkover_reason: Optional[str] = Field(default=None)
    player1_score: List[int] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    player2_score: List[int] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    # Knockout advancement target: winner feeds next_match_id on side next_slot (1 or 2)
    next_match_id: Optional[int] = Field(default=None, foreign_key="match.id")
    next_slot: Optional[int] = Field(default=None)

    scheduled_at: Optional[datetime] = Field(default=None)
    court: Optional[str] = Field(default=None)
    started_at: Optional[datetime] = Field(default=None)
    completed_at: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow, sa_column_kwargs={"onupdate": datetime.utcnow})

    # Relationships
    tournament: "Tournament" = Relationship(back_populates="matches")

    @property
    def is_ready(self) -> bool:
        """Both sides are known."""
        return self.player1_id is not None and self.player2_id is not None
