"""
Fixture endpoints: generate once per tournament, list, and re-sync advancement.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import Field
from sqlmodel import Session

from courtdraw.auth import CallerIdentity, get_caller, require_admin
from courtdraw.database import get_session
from courtdraw.errors import NotFoundError
from courtdraw.models.tournament import Tournament
from courtdraw.routes.schemas import ApiModel, MatchResponse
from courtdraw.services.advancement_service import resolve_all_dependencies
from courtdraw.services.fixture_orchestrator import FixtureConfig, generate_fixtures_for_session
from courtdraw.services.stores import SqlMatchStore
from courtdraw.utils.scheduling import DEFAULT_MATCH_DURATION_MINUTES, ScheduleOptions, parse_court_names
from courtdraw.utils.seeding import SeedingMethod

router = APIRouter()


class SchedulingRequest(ApiModel):
    start_at: datetime
    match_duration_minutes: int = Field(default=DEFAULT_MATCH_DURATION_MINUTES, gt=0)
    court_names: List[str] = []


class GenerateFixturesRequest(ApiModel):
    seeding_method: SeedingMethod = SeedingMethod.random
    group_by_category: bool = True
    group_by_age_group: bool = False
    scheduling: Optional[SchedulingRequest] = None
    random_seed: Optional[int] = None

    def to_config(self) -> FixtureConfig:
        scheduling = None
        if self.scheduling is not None:
            scheduling = ScheduleOptions(
                start_at=self.scheduling.start_at,
                match_duration_minutes=self.scheduling.match_duration_minutes,
                court_names=parse_court_names(self.scheduling.court_names),
            )
        return FixtureConfig(
            seeding_method=self.seeding_method,
            group_by_category=self.group_by_category,
            group_by_age_group=self.group_by_age_group,
            scheduling=scheduling,
            random_seed=self.random_seed,
        )


class PartitionResponse(ApiModel):
    category: str
    age_group: Optional[str]
    format: str
    entry_count: int
    matches_created: int
    rounds: int
    byes: int
    bracket_size: Optional[int]


class SkippedPartitionResponse(ApiModel):
    category: str
    age_group: Optional[str]
    participant_count: int
    reason: str


class GenerationWarningResponse(ApiModel):
    code: str
    message: str
    partition: Optional[str]


class GenerateFixturesResponse(ApiModel):
    success: bool = True
    message: str
    tournament_id: int
    matches_created: int
    matches_scheduled: int
    partitions: List[PartitionResponse]
    skipped_partitions: List[SkippedPartitionResponse]
    warnings: List[GenerationWarningResponse]


class FixtureListResponse(ApiModel):
    success: bool = True
    tournament_id: int
    total: int
    matches: List[MatchResponse]


class SyncResponse(ApiModel):
    success: bool = True
    matches_processed: int
    slots_advanced: int
    errors: List[str]


@router.post(
    "/tournaments/{tournament_id}/fixtures/generate",
    response_model=GenerateFixturesResponse,
    status_code=201,
)
def generate_tournament_fixtures(
    tournament_id: int,
    payload: Optional[GenerateFixturesRequest] = None,
    session: Session = Depends(get_session),
    caller: CallerIdentity = Depends(get_caller),
) -> GenerateFixturesResponse:
    """Generate every match for the tournament. Admin only; allowed once."""
    payload = payload or GenerateFixturesRequest()
    result = generate_fixtures_for_session(session, tournament_id, payload.to_config(), caller)
    return GenerateFixturesResponse(
        message=f"Generated {result.matches_created} matches successfully",
        **result.to_dict(),
    )


@router.get("/tournaments/{tournament_id}/fixtures", response_model=FixtureListResponse)
def list_tournament_fixtures(
    tournament_id: int,
    category: Optional[str] = None,
    age_group: Optional[str] = None,
    session: Session = Depends(get_session),
) -> FixtureListResponse:
    """List fixtures ordered by category, age group, round and match number."""
    if not session.get(Tournament, tournament_id):
        raise NotFoundError(f"Tournament {tournament_id} not found")
    matches = SqlMatchStore(session).list_matches(tournament_id, category=category, age_group=age_group)
    return FixtureListResponse(
        tournament_id=tournament_id,
        total=len(matches),
        matches=[MatchResponse.model_validate(m) for m in matches],
    )


@router.post("/tournaments/{tournament_id}/fixtures/sync", response_model=SyncResponse)
def sync_tournament_fixtures(
    tournament_id: int,
    session: Session = Depends(get_session),
    caller: CallerIdentity = Depends(get_caller),
) -> SyncResponse:
    """Re-run winner advancement for every completed match. Idempotent."""
    require_admin(caller)
    return SyncResponse(**resolve_all_dependencies(session, tournament_id))
