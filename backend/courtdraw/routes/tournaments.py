from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import field_validator
from sqlmodel import Session, select

from courtdraw.auth import CallerIdentity, get_caller, require_admin
from courtdraw.database import get_session
from courtdraw.errors import NotFoundError
from courtdraw.models.participant import Category
from courtdraw.models.tournament import Sport, Tournament, TournamentFormat, TournamentStatus
from courtdraw.routes.schemas import ApiModel

router = APIRouter()


class TournamentCreate(ApiModel):
    name: str
    sport: Sport = Sport.badminton
    format: TournamentFormat
    categories: List[Category]
    age_groups: List[str] = []
    allow_multiple_age_groups: bool = False
    status: TournamentStatus = TournamentStatus.draft

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("name is required")
        return v.strip()

    @field_validator("categories")
    @classmethod
    def validate_categories(cls, v):
        if not v:
            raise ValueError("at least one category is required")
        return list(dict.fromkeys(v))

    @field_validator("age_groups")
    @classmethod
    def normalize_age_groups(cls, v):
        return list(dict.fromkeys(g.strip() for g in v if g and g.strip()))


class TournamentResponse(ApiModel):
    id: int
    name: str
    sport: Sport
    format: TournamentFormat
    categories: List[Category]
    age_groups: List[str]
    allow_multiple_age_groups: bool
    status: TournamentStatus
    has_fixtures: bool
    fixtures_generated_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


@router.get("/tournaments", response_model=List[TournamentResponse])
def list_tournaments(session: Session = Depends(get_session)):
    """List all tournaments"""
    return session.exec(select(Tournament).order_by(Tournament.id)).all()


@router.post("/tournaments", response_model=TournamentResponse, status_code=201)
def create_tournament(
    tournament_data: TournamentCreate,
    session: Session = Depends(get_session),
    caller: CallerIdentity = Depends(get_caller),
):
    """Create a new tournament (admin)"""
    require_admin(caller)
    data = tournament_data.model_dump()
    data["sport"] = tournament_data.sport.value
    data["format"] = tournament_data.format.value
    data["status"] = tournament_data.status.value
    data["categories"] = [c.value for c in tournament_data.categories]
    tournament = Tournament(**data)
    session.add(tournament)
    session.commit()
    session.refresh(tournament)
    return tournament


@router.get("/tournaments/{tournament_id}", response_model=TournamentResponse)
def get_tournament(tournament_id: int, session: Session = Depends(get_session)):
    """Get a tournament by ID"""
    tournament = session.get(Tournament, tournament_id)
    if not tournament:
        raise NotFoundError(f"Tournament {tournament_id} not found")
    return tournament
