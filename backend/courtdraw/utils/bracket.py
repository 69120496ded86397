"""
Knockout bracket builder.

Pads a partition to the next power of two with byes, places seeds with the
standard recursive convention (1 v B, then halves: 1 v 8, 4 v 5, 2 v 7, 3 v 6
for B=8) and emits every match of every round with its advancement link.

Byes always land against the top seeds: seed s meets slot B+1-s, and slots
n+1..B are the byes, so seeds 1..B-n get them. Since n > B/2 two byes never
meet.
"""

from typing import List, Sequence

from courtdraw.models.match import WalkoverReason
from courtdraw.utils.drafts import MatchDraft
from courtdraw.utils.partitioning import PartitionKey
from courtdraw.utils.seeding import BracketEntry

FINAL = "Final"
SEMI_FINAL = "Semi Final"
QUARTER_FINAL = "Quarter Final"


def bracket_size(entry_count: int) -> int:
    """Smallest power of two >= entry_count."""
    if entry_count < 1:
        raise ValueError(f"bracket_size: entry_count must be >= 1, got {entry_count}")
    return 1 << (entry_count - 1).bit_length()


def round_count(entry_count: int) -> int:
    """ceil(log2(entry_count)); 0 for a single entry."""
    if entry_count < 1:
        raise ValueError(f"round_count: entry_count must be >= 1, got {entry_count}")
    return (entry_count - 1).bit_length()


def bye_count(entry_count: int) -> int:
    return bracket_size(entry_count) - entry_count


def knockout_match_count(entry_count: int) -> int:
    """Matches in the tree (byes included as decided slots): B - 1."""
    return bracket_size(entry_count) - 1


def round_name(round_number: int, total_rounds: int) -> str:
    remaining = total_rounds - round_number
    if remaining == 0:
        return FINAL
    if remaining == 1:
        return SEMI_FINAL
    if remaining == 2:
        return QUARTER_FINAL
    return f"Round {round_number}"


def seed_order(size: int) -> List[int]:
    """
    1-based seeds in bracket slot order for a power-of-two bracket.

    Adjacent pairs are the round-1 matches: seed_order(8) == [1, 8, 4, 5, 2, 7, 3, 6].
    """
    if size < 1 or size & (size - 1):
        raise ValueError(f"seed_order: size must be a power of two, got {size}")
    order = [1]
    while len(order) < size:
        doubled = len(order) * 2
        order = [s for seed in order for s in (seed, doubled + 1 - seed)]
    return order


def build_knockout(partition: PartitionKey, entries: Sequence[BracketEntry]) -> List[MatchDraft]:
    """
    Build every match of a single-elimination bracket for seeded entries.

    Returns drafts ordered by round then position. Round-1 slots holding a bye
    are returned as decided walkovers and their entry is already placed in the
    round-2 match it feeds.
    """
    n = len(entries)
    if n < 2:
        raise ValueError(f"build_knockout: need at least 2 entries, got {n}")

    size = bracket_size(n)
    total_rounds = round_count(n)
    slots = seed_order(size)

    drafts: List[MatchDraft] = []
    previous: List[MatchDraft] = []

    first_round_name = round_name(1, total_rounds)
    for position in range(size // 2):
        seed_a, seed_b = slots[2 * position], slots[2 * position + 1]
        draft = MatchDraft(
            partition=partition,
            round_number=1,
            round_name=first_round_name,
            match_number=position + 1,
            bracket_position=position,
            side1=entries[seed_a - 1] if seed_a <= n else None,
            side2=entries[seed_b - 1] if seed_b <= n else None,
        )
        if draft.side2 is None:
            draft.walkover_reason = WalkoverReason.bye.value
            draft.winner = draft.side1
        previous.append(draft)

    for round_number in range(2, total_rounds + 1):
        name = round_name(round_number, total_rounds)
        current = [
            MatchDraft(
                partition=partition,
                round_number=round_number,
                round_name=name,
                match_number=position + 1,
                bracket_position=position,
            )
            for position in range(len(previous) // 2)
        ]
        for index, feeder in enumerate(previous):
            feeder.next_position = index // 2
            feeder.next_slot = 1 if index % 2 == 0 else 2
            if feeder.winner is not None:
                current[feeder.next_position].place(feeder.next_slot, feeder.winner)
        drafts.extend(previous)
        previous = current

    drafts.extend(previous)
    return drafts
