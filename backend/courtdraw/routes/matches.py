"""
Match endpoints (results + status; fixture structure is never changed here).
When a match completes, advancement fills the downstream match side.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session

from courtdraw.auth import CallerIdentity, get_caller, require_admin
from courtdraw.database import get_session
from courtdraw.models.match import MatchStatus, WalkoverReason
from courtdraw.routes.schemas import ApiModel, MatchResponse
from courtdraw.services import advancement_service
from courtdraw.services.advancement_service import CompletionResult
from courtdraw.services.stores import SqlMatchStore

router = APIRouter()


class MatchEnvelope(ApiModel):
    success: bool = True
    match: MatchResponse


class MatchStatusUpdate(ApiModel):
    status: MatchStatus


class MatchCompleteRequest(ApiModel):
    winner_id: str
    player1_score: Optional[List[int]] = None
    player2_score: Optional[List[int]] = None


class DeclareWinnerRequest(ApiModel):
    winner_id: str
    reason: WalkoverReason = WalkoverReason.walkover
    player1_score: Optional[List[int]] = None
    player2_score: Optional[List[int]] = None


class MatchScheduleRequest(ApiModel):
    scheduled_at: Optional[datetime] = None
    court: Optional[str] = None


class MatchCompletionResponse(ApiModel):
    success: bool = True
    message: str
    match: MatchResponse
    advanced_count: int
    already_completed: bool


def _completion_response(result: CompletionResult) -> MatchCompletionResponse:
    if result.already_completed:
        message = "Match already completed with this winner"
    elif result.advanced_count:
        message = "Match completed and winner advanced"
    else:
        message = "Match completed"
    return MatchCompletionResponse(
        message=message,
        match=MatchResponse.model_validate(result.match),
        advanced_count=result.advanced_count,
        already_completed=result.already_completed,
    )


@router.get("/matches/{match_id}", response_model=MatchEnvelope)
def get_match(match_id: int, session: Session = Depends(get_session)) -> MatchEnvelope:
    """Get a single match"""
    match = SqlMatchStore(session).get_match(match_id)
    return MatchEnvelope(match=MatchResponse.model_validate(match))


@router.patch("/matches/{match_id}/status", response_model=MatchEnvelope)
def update_match_status(
    match_id: int,
    payload: MatchStatusUpdate,
    session: Session = Depends(get_session),
    caller: CallerIdentity = Depends(get_caller),
) -> MatchEnvelope:
    """Start or cancel a match. Completed and cancelled are terminal."""
    require_admin(caller)
    match = advancement_service.update_match_status(session, match_id, payload.status)
    return MatchEnvelope(match=MatchResponse.model_validate(match))


@router.post("/matches/{match_id}/complete", response_model=MatchCompletionResponse)
def complete_match(
    match_id: int,
    payload: MatchCompleteRequest,
    session: Session = Depends(get_session),
    caller: CallerIdentity = Depends(get_caller),
) -> MatchCompletionResponse:
    """Record the result and advance the winner. Re-sending the same result is a no-op."""
    require_admin(caller)
    result = advancement_service.complete_match(
        session,
        match_id,
        payload.winner_id,
        player1_score=payload.player1_score,
        player2_score=payload.player2_score,
    )
    return _completion_response(result)


@router.post("/matches/{match_id}/declare-winner", response_model=MatchCompletionResponse)
def declare_match_winner(
    match_id: int,
    payload: DeclareWinnerRequest,
    session: Session = Depends(get_session),
    caller: CallerIdentity = Depends(get_caller),
) -> MatchCompletionResponse:
    """Complete a match by walkover, forfeit or disqualification."""
    require_admin(caller)
    result = advancement_service.declare_winner(
        session,
        match_id,
        payload.winner_id,
        payload.reason,
        player1_score=payload.player1_score,
        player2_score=payload.player2_score,
    )
    return _completion_response(result)


@router.post("/matches/{match_id}/schedule", response_model=MatchEnvelope)
def schedule_match(
    match_id: int,
    payload: MatchScheduleRequest,
    session: Session = Depends(get_session),
    caller: CallerIdentity = Depends(get_caller),
) -> MatchEnvelope:
    """Set the date/time and court of a match"""
    require_admin(caller)
    match = advancement_service.schedule_match(session, match_id, payload.scheduled_at, payload.court)
    return MatchEnvelope(match=MatchResponse.model_validate(match))
