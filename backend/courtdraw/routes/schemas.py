"""Shared request/response models. JSON bodies use camelCase keys."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from courtdraw.models.match import MatchStatus


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class MatchResponse(ApiModel):
    id: int
    tournament_id: int
    category: str
    age_group: Optional[str]
    round_number: int
    round_name: str
    match_number: int
    bracket_position: int
    player1_id: Optional[str]
    player1_name: str
    player2_id: Optional[str]
    player2_name: str
    player3_id: Optional[str]
    player3_name: Optional[str]
    player4_id: Optional[str]
    player4_name: Optional[str]
    status: MatchStatus
    winner_id: Optional[str]
    winner_name: Optional[str]
    is_walkover: bool
    walkover_reason: Optional[str]
    player1_score: List[int]
    player2_score: List[int]
    next_match_id: Optional[int]
    next_slot: Optional[int]
    scheduled_at: Optional[datetime]
    court: Optional[str]
    started_at: Optional[datetime]
    completed_at: Optional[datetime]
    is_ready: bool
