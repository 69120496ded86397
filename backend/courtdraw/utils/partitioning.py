"""
Participant partitioning.

Splits a tournament's approved participants into independent competitions keyed
by (category, age group). Category grouping is always applied; age-group
grouping is optional. A participant registered in several age groups lands in
one partition per age group.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence

from courtdraw.errors import ValidationError
from courtdraw.models.participant import Category, Participant, SkillLevel
from courtdraw.utils.seeding import BracketEntry

INSUFFICIENT_PARTICIPANTS = "insufficient participants"
MIN_PARTITION_SIZE = 2

CATEGORY_ORDER = [Category.singles, Category.doubles, Category.mixed]


class PartitionKey(NamedTuple):
    category: Category
    age_group: Optional[str] = None

    @property
    def label(self) -> str:
        if self.age_group:
            return f"{self.category.value} / {self.age_group}"
        return self.category.value

    def sort_key(self) -> tuple:
        # Open (no age group) first, then age groups alphabetically
        return (CATEGORY_ORDER.index(self.category), self.age_group is not None, self.age_group or "")


@dataclass
class SkippedPartition:
    key: PartitionKey
    participant_count: int
    reason: str = INSUFFICIENT_PARTICIPANTS

    def to_dict(self):
        return {
            "category": self.key.category.value,
            "age_group": self.key.age_group,
            "participant_count": self.participant_count,
            "reason": self.reason,
        }


@dataclass
class PartitionResult:
    """Partitions with enough entries to play, in deterministic order, plus the skipped ones."""

    partitions: Dict[PartitionKey, List[BracketEntry]] = field(default_factory=dict)
    skipped: List[SkippedPartition] = field(default_factory=list)


def entry_from_participant(participant: Participant) -> BracketEntry:
    skill = SkillLevel(participant.skill_level) if participant.skill_level else None
    return BracketEntry(
        user_id=participant.user_id,
        name=participant.name,
        participant_id=participant.id,
        skill_level=skill,
        partner_id=participant.partner_id or None,
        partner_name=participant.partner_name or None,
    )


def validate_participants(
    participants: Sequence[Participant],
    categories: Iterable[str],
    age_groups: Iterable[str],
    allow_multiple_age_groups: bool,
    group_by_age_group: bool,
) -> None:
    """
    Reject participant data that cannot be partitioned.

    Raises:
        ValidationError: unknown category, team category without partner,
            unknown skill level, or (when grouping by age) an undefined or
            disallowed age-group set
    """
    allowed_categories = {Category(c) for c in categories}
    defined_age_groups = set(age_groups)

    for participant in participants:
        try:
            category = Category(participant.category)
        except ValueError:
            raise ValidationError(f"Participant {participant.name} has invalid category '{participant.category}'")

        if allowed_categories and category not in allowed_categories:
            raise ValidationError(
                f"Participant {participant.name} registered for category '{category.value}' "
                "which this tournament does not offer"
            )

        if category.is_team and not participant.partner_id:
            raise ValidationError(f"Participant {participant.name} has no partner for {category.value}")

        if participant.skill_level:
            try:
                SkillLevel(participant.skill_level)
            except ValueError:
                raise ValidationError(
                    f"Participant {participant.name} has invalid skill level '{participant.skill_level}'"
                )

        if not group_by_age_group:
            continue

        participant_groups = list(participant.age_groups or [])
        if len(participant_groups) > 1 and not allow_multiple_age_groups:
            raise ValidationError(
                f"Participant {participant.name} is in {len(participant_groups)} age groups "
                "but this tournament does not allow multiple age groups"
            )
        if defined_age_groups:
            unknown = [g for g in participant_groups if g not in defined_age_groups]
            if unknown:
                raise ValidationError(
                    f"Participant {participant.name} has invalid age groups: {', '.join(unknown)}"
                )


def partition_keys_for(participant: Participant, group_by_age_group: bool) -> List[PartitionKey]:
    category = Category(participant.category)
    if not group_by_age_group or not participant.age_groups:
        return [PartitionKey(category)]
    # dict.fromkeys keeps order and drops repeated age groups
    return [PartitionKey(category, age_group) for age_group in dict.fromkeys(participant.age_groups)]


def partition_participants(
    participants: Sequence[Participant],
    group_by_age_group: bool,
    group_by_category: bool = True,
) -> PartitionResult:
    """
    Group approved participants by (category, age group).

    group_by_category is accepted for API symmetry but always enforced: matches
    never cross categories. Unapproved participants are ignored. Duplicate
    entries within a partition (same player, or the same pair registered from
    both sides) collapse to the first one seen.

    Partitions smaller than MIN_PARTITION_SIZE are reported in `skipped`.

    Raises:
        ValidationError: a player is part of two different entries in the
            same partition (e.g. registered with two partners)
    """
    grouped: Dict[PartitionKey, List[BracketEntry]] = {}
    seen: Dict[PartitionKey, set] = {}
    # user id -> entry it plays in, per partition
    players: Dict[PartitionKey, Dict[str, BracketEntry]] = {}

    for participant in participants:
        if not participant.is_approved:
            continue
        entry = entry_from_participant(participant)
        for key in partition_keys_for(participant, group_by_age_group):
            identities = seen.setdefault(key, set())
            if entry.identity in identities:
                continue
            identities.add(entry.identity)
            used = players.setdefault(key, {})
            for user_id in sorted(entry.identity):
                other = used.get(user_id)
                if other is not None:
                    raise ValidationError(
                        f"Player {user_id} is entered twice in {key.label}: "
                        f"{other.display_name} and {entry.display_name}"
                    )
                used[user_id] = entry
            grouped.setdefault(key, []).append(entry)

    result = PartitionResult()
    for key in sorted(grouped, key=PartitionKey.sort_key):
        entries = grouped[key]
        if len(entries) < MIN_PARTITION_SIZE:
            result.skipped.append(SkippedPartition(key=key, participant_count=len(entries)))
        else:
            result.partitions[key] = entries
    return result
