"""
Fixture Orchestrator Service

Turns a tournament's approved registrations into a persisted fixture set:
1. Check caller role and tournament state
2. Validate and partition participants by (category, age group)
3. Seed each partition
4. Build knockout brackets or round-robin groups
5. Optionally lay matches out on courts
6. Persist every match in one transaction

Nothing is written unless every partition builds; a partition with fewer than
two entries is skipped and reported, not an error, unless all of them are.
"""

import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Tuple

from sqlmodel import Session

from courtdraw.auth import CallerIdentity, require_admin
from courtdraw.errors import ConflictError, NotFoundError, ValidationError
from courtdraw.models.participant import Participant
from courtdraw.models.tournament import Tournament, TournamentFormat
from courtdraw.services.stores import (
    MatchStore,
    ParticipantStore,
    SqlMatchStore,
    SqlParticipantStore,
    SqlTournamentStore,
    TournamentConfigStore,
)
from courtdraw.utils.bracket import bracket_size, bye_count, round_count
from courtdraw.utils.drafts import MatchDraft
from courtdraw.utils.match_generation import generate_partition_matches
from courtdraw.utils.partitioning import (
    MIN_PARTITION_SIZE,
    PartitionKey,
    SkippedPartition,
    partition_participants,
    validate_participants,
)
from courtdraw.utils.scheduling import ScheduleOptions, assign_schedule
from courtdraw.utils.seeding import SeedingMethod, get_seeding_strategy

logger = logging.getLogger(__name__)

# ============================================================================
# Config & Result Models
# ============================================================================


@dataclass
class FixtureConfig:
    seeding_method: SeedingMethod = SeedingMethod.random
    group_by_category: bool = True
    group_by_age_group: bool = False
    scheduling: Optional[ScheduleOptions] = None
    random_seed: Optional[int] = None


class GenerationWarning:
    """Non-fatal issue found while generating"""

    def __init__(self, code: str, message: str, partition: Optional[PartitionKey] = None):
        self.code = code
        self.message = message
        self.partition = partition

    def to_dict(self):
        return {
            "code": self.code,
            "message": self.message,
            "partition": self.partition.label if self.partition else None,
        }


class PartitionSummary:
    """What was built for one partition"""

    def __init__(self, key: PartitionKey, tournament_format: TournamentFormat, entry_count: int):
        self.key = key
        self.format = tournament_format
        self.entry_count = entry_count
        self.matches_created = 0
        self.rounds = 1
        self.byes = 0
        self.bracket_size: Optional[int] = None

        if tournament_format is TournamentFormat.knockout:
            self.bracket_size = bracket_size(entry_count)
            self.byes = bye_count(entry_count)
            self.rounds = round_count(entry_count)

    def to_dict(self):
        return {
            "category": self.key.category.value,
            "age_group": self.key.age_group,
            "format": self.format.value,
            "entry_count": self.entry_count,
            "matches_created": self.matches_created,
            "rounds": self.rounds,
            "byes": self.byes,
            "bracket_size": self.bracket_size,
        }


class GenerationResult:
    """Complete result of fixture generation"""

    def __init__(self, tournament_id: int):
        self.tournament_id = tournament_id
        self.matches_created = 0
        self.matches_scheduled = 0
        self.partitions: List[PartitionSummary] = []
        self.skipped: List[SkippedPartition] = []
        self.warnings: List[GenerationWarning] = []

    def to_dict(self):
        return {
            "success": True,
            "tournament_id": self.tournament_id,
            "matches_created": self.matches_created,
            "matches_scheduled": self.matches_scheduled,
            "partitions": [p.to_dict() for p in self.partitions],
            "skipped_partitions": [s.to_dict() for s in self.skipped],
            "warnings": [w.to_dict() for w in self.warnings],
        }


# ============================================================================
# Planning (pure)
# ============================================================================


def plan_fixtures(
    tournament: Tournament,
    participants: List[Participant],
    config: FixtureConfig,
    rng: Optional[random.Random] = None,
) -> Tuple[List[MatchDraft], GenerationResult]:
    """
    Build every match draft for a tournament without touching storage.

    Raises:
        ValidationError: fewer than two approved participants, invalid
            participant data, or no partition with enough entries
    """
    result = GenerationResult(tournament.id)
    approved = [p for p in participants if p.is_approved]
    if len(approved) < MIN_PARTITION_SIZE:
        raise ValidationError(f"At least {MIN_PARTITION_SIZE} approved participants required")

    validate_participants(
        approved,
        categories=tournament.categories,
        age_groups=tournament.age_groups,
        allow_multiple_age_groups=tournament.allow_multiple_age_groups,
        group_by_age_group=config.group_by_age_group,
    )

    partitioned = partition_participants(
        approved,
        group_by_age_group=config.group_by_age_group,
        group_by_category=config.group_by_category,
    )
    result.skipped = partitioned.skipped
    for skipped in partitioned.skipped:
        result.warnings.append(
            GenerationWarning(
                "PARTITION_SKIPPED",
                f"{skipped.key.label}: {skipped.participant_count} participant(s), {skipped.reason}",
                skipped.key,
            )
        )
        logger.info(
            "Tournament %s: skipping %s (%s participant(s))",
            tournament.id,
            skipped.key.label,
            skipped.participant_count,
        )

    if not partitioned.partitions:
        groups = ", ".join(f"{s.key.label} ({s.participant_count})" for s in partitioned.skipped)
        raise ValidationError(f"No group has enough participants to generate fixtures: {groups}")

    if rng is None:
        rng = random.Random(config.random_seed)
    strategy = get_seeding_strategy(config.seeding_method, rng)
    tournament_format = TournamentFormat(tournament.format)

    drafts: List[MatchDraft] = []
    for key, entries in partitioned.partitions.items():
        seeded = strategy.seed(entries)
        partition_drafts = generate_partition_matches(tournament_format, key, seeded)

        summary = PartitionSummary(key, tournament_format, len(seeded))
        summary.matches_created = len(partition_drafts)
        result.partitions.append(summary)
        drafts.extend(partition_drafts)

        logger.info(
            "Tournament %s: %s has %s entries -> %s matches (%s)",
            tournament.id,
            key.label,
            len(seeded),
            len(partition_drafts),
            tournament_format.value,
        )

    if config.scheduling is not None:
        result.matches_scheduled = assign_schedule(drafts, config.scheduling)

    result.matches_created = len(drafts)
    return drafts, result


# ============================================================================
# Generation
# ============================================================================


def generate_fixtures(
    tournament_id: int,
    config: FixtureConfig,
    caller: CallerIdentity,
    tournament_store: TournamentConfigStore,
    participant_store: ParticipantStore,
    match_store: MatchStore,
    rng: Optional[random.Random] = None,
) -> GenerationResult:
    """
    Generate and persist the complete fixture set for a tournament.

    Raises:
        ForbiddenError: caller is not an admin
        NotFoundError: tournament missing
        ConflictError: fixtures already generated
        ValidationError: participants cannot produce a fixture
        PersistenceError: the write failed and was rolled back
    """
    require_admin(caller)

    tournament = tournament_store.get_tournament(tournament_id)
    if not tournament:
        raise NotFoundError(f"Tournament {tournament_id} not found")
    if tournament.has_fixtures:
        raise ConflictError("Fixtures already generated for this tournament")

    participants = participant_store.list_approved_participants(tournament_id)
    drafts, result = plan_fixtures(tournament, participants, config, rng)

    created = match_store.create_matches(tournament_id, drafts)
    if created != result.matches_created:
        logger.warning(
            "Tournament %s: planned %s matches but store reported %s",
            tournament_id,
            result.matches_created,
            created,
        )
    result.matches_created = created

    logger.info(
        "Tournament %s: generated %s matches across %s partition(s) by %s",
        tournament_id,
        created,
        len(result.partitions),
        caller.user_id,
    )
    return result


def generate_fixtures_for_session(
    session: Session,
    tournament_id: int,
    config: FixtureConfig,
    caller: CallerIdentity,
    rng: Optional[random.Random] = None,
) -> GenerationResult:
    """generate_fixtures wired to the SQL stores of one session."""
    return generate_fixtures(
        tournament_id,
        config,
        caller,
        tournament_store=SqlTournamentStore(session),
        participant_store=SqlParticipantStore(session),
        match_store=SqlMatchStore(session),
        rng=rng,
    )
