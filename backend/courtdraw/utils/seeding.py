"""
Seeding strategies.

Orders the entries of one partition before bracket or round-robin building.
Both strategies take an injectable random.Random so tests can pin the order;
production callers pass nothing and get a freshly seeded generator per call.
"""

import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, List, Optional, Sequence

from courtdraw.models.participant import SkillLevel


class SeedingMethod(str, Enum):
    random = "random"
    skill_based = "skill_based"


# Lower = stronger. Unspecified skill sorts after every known level.
SKILL_RANK = {
    SkillLevel.elite: 0,
    SkillLevel.expert: 1,
    SkillLevel.advanced: 2,
    SkillLevel.intermediate: 3,
    SkillLevel.beginner: 4,
}
UNSPECIFIED_SKILL_RANK = len(SKILL_RANK)


@dataclass(frozen=True)
class BracketEntry:
    """
    One seedable unit: a singles player, or a doubles/mixed participant plus partner.
    """

    user_id: str
    name: str
    participant_id: Optional[int] = None
    skill_level: Optional[SkillLevel] = None
    partner_id: Optional[str] = None
    partner_name: Optional[str] = None

    @property
    def identity(self) -> FrozenSet[str]:
        """Same pair registered from either side has the same identity."""
        if self.partner_id:
            return frozenset({self.user_id, self.partner_id})
        return frozenset({self.user_id})

    @property
    def display_name(self) -> str:
        if self.partner_name:
            return f"{self.name} / {self.partner_name}"
        return self.name


def skill_rank(level: Optional[SkillLevel]) -> int:
    if level is None:
        return UNSPECIFIED_SKILL_RANK
    return SKILL_RANK[SkillLevel(level)]


class SeedingStrategy(ABC):
    """Abstract base class for seeding strategies"""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng if rng is not None else random.Random()

    @abstractmethod
    def seed(self, entries: Sequence[BracketEntry]) -> List[BracketEntry]:
        """Return entries in seed order (index 0 = seed 1). Must be a permutation of the input."""


class RandomSeeding(SeedingStrategy):
    """Uniform shuffle"""

    def seed(self, entries: Sequence[BracketEntry]) -> List[BracketEntry]:
        ordered = list(entries)
        self.rng.shuffle(ordered)
        return ordered


class SkillBasedSeeding(SeedingStrategy):
    """Strongest first; equal skill levels appear in random order"""

    def seed(self, entries: Sequence[BracketEntry]) -> List[BracketEntry]:
        ordered = list(entries)
        # Shuffle then stable-sort: ties keep their shuffled order
        self.rng.shuffle(ordered)
        ordered.sort(key=lambda entry: skill_rank(entry.skill_level))
        return ordered


def get_seeding_strategy(method: SeedingMethod, rng: Optional[random.Random] = None) -> SeedingStrategy:
    """Factory function to get the strategy for a seeding method"""
    method = SeedingMethod(method)
    if method is SeedingMethod.random:
        return RandomSeeding(rng)
    if method is SeedingMethod.skill_based:
        return SkillBasedSeeding(rng)
    raise ValueError(f"No seeding strategy for method: {method}")
