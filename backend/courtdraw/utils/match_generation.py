"""
Per-partition match generation: picks the builder for the tournament format
and exposes the expected match counts used to check builder output.
"""

from typing import List, Sequence

from courtdraw.models.tournament import TournamentFormat
from courtdraw.utils.bracket import build_knockout, knockout_match_count
from courtdraw.utils.drafts import MatchDraft
from courtdraw.utils.partitioning import PartitionKey
from courtdraw.utils.round_robin import build_round_robin, rr_matches
from courtdraw.utils.seeding import BracketEntry


def expected_match_count(tournament_format: TournamentFormat, entry_count: int) -> int:
    """B - 1 for knockout, n*(n-1)/2 for round robin; 0 below two entries."""
    if entry_count < 2:
        return 0
    tournament_format = TournamentFormat(tournament_format)
    if tournament_format is TournamentFormat.knockout:
        return knockout_match_count(entry_count)
    if tournament_format is TournamentFormat.round_robin:
        return rr_matches(entry_count)
    raise ValueError(f"Unknown tournament format: {tournament_format}")


def generate_partition_matches(
    tournament_format: TournamentFormat,
    partition: PartitionKey,
    entries: Sequence[BracketEntry],
) -> List[MatchDraft]:
    """Generate all match drafts for one seeded partition."""
    tournament_format = TournamentFormat(tournament_format)
    if tournament_format is TournamentFormat.knockout:
        drafts = build_knockout(partition, entries)
    elif tournament_format is TournamentFormat.round_robin:
        drafts = build_round_robin(partition, entries)
    else:
        raise ValueError(f"Unknown tournament format: {tournament_format}")

    expected = expected_match_count(tournament_format, len(entries))
    if len(drafts) != expected:
        raise ValueError(
            f"{partition.label}: generated {len(drafts)} matches, expected {expected} "
            f"for {len(entries)} entries ({tournament_format.value})"
        )
    return drafts
