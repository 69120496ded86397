"""
In-memory match drafts produced by the bracket and round-robin builders.

A draft knows its partition, round and slot position; advancement links point
at the (partition, round, position) of the target so the store can resolve
them to real match ids after insert.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from courtdraw.utils.partitioning import PartitionKey
from courtdraw.utils.seeding import BracketEntry

DraftKey = Tuple[PartitionKey, int, int]  # (partition, round_number, bracket_position)


@dataclass
class MatchDraft:
    partition: PartitionKey
    round_number: int
    round_name: str
    match_number: int
    bracket_position: int
    side1: Optional[BracketEntry] = None
    side2: Optional[BracketEntry] = None

    # Knockout only: where the winner goes
    next_position: Optional[int] = None
    next_slot: Optional[int] = None

    # Set for bye slots, which are recorded as already decided
    walkover_reason: Optional[str] = None
    winner: Optional[BracketEntry] = None

    scheduled_at: Optional[datetime] = None
    court: Optional[str] = None

    @property
    def key(self) -> DraftKey:
        return (self.partition, self.round_number, self.bracket_position)

    @property
    def next_key(self) -> Optional[DraftKey]:
        if self.next_position is None:
            return None
        return (self.partition, self.round_number + 1, self.next_position)

    @property
    def is_playable(self) -> bool:
        return self.walkover_reason is None

    def place(self, slot: int, entry: BracketEntry) -> None:
        if slot == 1:
            self.side1 = entry
        elif slot == 2:
            self.side2 = entry
        else:
            raise ValueError(f"slot must be 1 or 2, got {slot}")
