"""
Round-robin builder.

Every entry meets every other entry exactly once. All matches sit in round 1
("Group Stage"); match numbers follow circle-method rounds so consecutive
matches spread entries across the court list.
"""

from typing import List, Sequence, Tuple

from courtdraw.utils.drafts import MatchDraft
from courtdraw.utils.partitioning import PartitionKey
from courtdraw.utils.seeding import BracketEntry

GROUP_STAGE = "Group Stage"


def rr_matches(n: int) -> int:
    """Round robin match count: n * (n-1) / 2"""
    return (n * (n - 1)) // 2


def rr_pairings(n: int) -> List[Tuple[int, int]]:
    """
    All unordered index pairs (a < b) of n entries in circle-method order.

    Odd n gets a phantom BYE position which is dropped from the output.
    """
    if n < 2:
        return []
    n2 = n + 1 if n % 2 == 1 else n
    bye_idx = n if n % 2 == 1 else -1
    half = n2 // 2

    result: List[Tuple[int, int]] = []
    positions = list(range(n2))
    for _ in range(n2 - 1):
        for i in range(half):
            a, b = positions[i], positions[n2 - 1 - i]
            if a == bye_idx or b == bye_idx:
                continue
            result.append((min(a, b), max(a, b)))
        # Rotate: keep 0, move last to second, shift others
        positions = [positions[0]] + [positions[-1]] + positions[1:-1]
    return result


def build_round_robin(partition: PartitionKey, entries: Sequence[BracketEntry]) -> List[MatchDraft]:
    """Build n*(n-1)/2 group-stage matches. No advancement links."""
    n = len(entries)
    if n < 2:
        raise ValueError(f"build_round_robin: need at least 2 entries, got {n}")

    return [
        MatchDraft(
            partition=partition,
            round_number=1,
            round_name=GROUP_STAGE,
            match_number=number,
            bracket_position=number - 1,
            side1=entries[a],
            side2=entries[b],
        )
        for number, (a, b) in enumerate(rr_pairings(n), start=1)
    ]
