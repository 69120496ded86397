"""
Optional court/time layout for freshly generated fixtures.

Playable matches are laid out in (round, partition, match number) order, one
per court per time slot. Bye walkovers never get a court.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Union

from courtdraw.utils.drafts import MatchDraft

DEFAULT_MATCH_DURATION_MINUTES = 30


@dataclass
class ScheduleOptions:
    start_at: datetime
    match_duration_minutes: int = DEFAULT_MATCH_DURATION_MINUTES
    court_names: List[str] = field(default_factory=list)


def parse_court_names(court_names: Optional[Union[str, List[str]]]) -> List[str]:
    """
    Normalize court names to non-empty strings.

    Accepts "1,5,6" or ["1", "5", "6"]; None and "" give [].
    """
    if court_names is None:
        return []
    if isinstance(court_names, str):
        return [name.strip() for name in court_names.split(",") if name.strip()]
    return [str(name).strip() for name in court_names if str(name).strip()]


def assign_schedule(drafts: Sequence[MatchDraft], options: ScheduleOptions) -> int:
    """Stamp scheduled_at and court on playable drafts. Returns how many were scheduled."""
    if options.match_duration_minutes <= 0:
        raise ValueError("match_duration_minutes must be positive")

    courts = parse_court_names(options.court_names) or ["Court 1"]
    playable = sorted(
        (d for d in drafts if d.is_playable),
        key=lambda d: (d.round_number, d.partition.sort_key(), d.match_number),
    )
    duration = timedelta(minutes=options.match_duration_minutes)

    for index, draft in enumerate(playable):
        time_slot, court_index = divmod(index, len(courts))
        draft.scheduled_at = options.start_at + time_slot * duration
        draft.court = courts[court_index]
    return len(playable)
