"""
Match completion and knockout advancement.

When a match completes, its winner (and doubles partner) is written into the
side of the downstream match it feeds. Completion, administrative walkovers,
status changes and bulk re-sync all go through here so the idempotency rules
live in one place.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from sqlmodel import Session, select

from courtdraw.errors import ConflictError, NotFoundError, ValidationError
from courtdraw.models.match import TERMINAL_STATUSES, Match, MatchStatus, WalkoverReason
from courtdraw.models.tournament import Tournament
from courtdraw.services.stores import SqlMatchStore, Winner

logger = logging.getLogger(__name__)

# Reasons an admin may give when declaring a winner without play
DECLARABLE_REASONS = (
    WalkoverReason.walkover,
    WalkoverReason.forfeit,
    WalkoverReason.disqualification,
)
WALKOVER_WINNER_SCORE = [21, 0, 0]
WALKOVER_LOSER_SCORE = [0, 0, 0]


@dataclass
class CompletionResult:
    match: Match
    advanced_count: int
    already_completed: bool = False


def _side_of(match: Match, user_id: str) -> int:
    """Which side (1 or 2) user_id plays on. Partners count for their side."""
    if user_id and user_id in (match.player1_id, match.player3_id):
        return 1
    if user_id and user_id in (match.player2_id, match.player4_id):
        return 2
    raise ValidationError(f"Winner {user_id} is not playing in match {match.id}")


def winner_on_side(match: Match, side: int) -> Winner:
    if side == 1:
        return Winner(match.player1_id, match.player1_name, match.player3_id, match.player3_name)
    return Winner(match.player2_id, match.player2_name, match.player4_id, match.player4_name)


def winner_of(match: Match) -> Optional[Winner]:
    """The recorded winner with partner details, or None if undecided."""
    if match.winner_id is None:
        return None
    return winner_on_side(match, _side_of(match, match.winner_id))


def _validate_scores(*scores: Optional[Sequence[int]]) -> None:
    for score in scores:
        if score is not None and any(int(points) < 0 for points in score):
            raise ValidationError("Scores cannot be negative")


def apply_advancement_for_completed_match(session: Session, match_id: int) -> int:
    """
    Advance the winner of a completed match into its downstream match.

    Returns count of downstream slots written (0 or 1).
    Idempotent: calling twice produces same DB state. Commits.
    """
    store = SqlMatchStore(session)
    match = store.get_match(match_id)
    if MatchStatus(match.status) is not MatchStatus.completed:
        return 0
    winner = winner_of(match)
    if winner is None:
        return 0

    advanced = store.update_match_winner(match.id, winner)
    session.commit()
    return advanced


def _finish(
    session: Session,
    match_id: int,
    winner_id: str,
    player1_score: Optional[Sequence[int]],
    player2_score: Optional[Sequence[int]],
    walkover_reason: Optional[WalkoverReason] = None,
) -> CompletionResult:
    store = SqlMatchStore(session)
    match = store.get_match(match_id)
    status = MatchStatus(match.status)

    if status is MatchStatus.cancelled:
        raise ConflictError(f"Match {match.id} is cancelled and cannot be completed")

    winner = winner_on_side(match, _side_of(match, winner_id))

    if status is MatchStatus.completed:
        if match.winner_id != winner.user_id:
            raise ConflictError(f"Match {match.id} already completed with a different winner")
        # Same result delivered again: only repair a missing downstream slot
        advanced = store.update_match_winner(match.id, winner)
        session.commit()
        logger.debug("Match %s completion re-delivered, %s slot(s) advanced", match.id, advanced)
        return CompletionResult(match=match, advanced_count=advanced, already_completed=True)

    if not match.is_ready:
        raise ValidationError(f"Match {match.id} cannot be completed until both sides are known")

    _validate_scores(player1_score, player2_score)

    now = datetime.utcnow()
    match.winner_id = winner.user_id
    match.winner_name = winner.name
    match.status = MatchStatus.completed.value
    match.completed_at = now
    if match.started_at is None:
        match.started_at = now
    if player1_score is not None:
        match.player1_score = list(player1_score)
    if player2_score is not None:
        match.player2_score = list(player2_score)
    if walkover_reason is not None:
        match.is_walkover = True
        match.walkover_reason = walkover_reason.value
    session.add(match)

    try:
        advanced = store.update_match_winner(match.id, winner)
    except ConflictError:
        session.rollback()
        raise
    session.commit()
    session.refresh(match)

    logger.info(
        "Match %s (%s, %s) completed, winner %s, %s slot(s) advanced",
        match.id,
        match.category,
        match.round_name,
        winner.user_id,
        advanced,
    )
    return CompletionResult(match=match, advanced_count=advanced)


def complete_match(
    session: Session,
    match_id: int,
    winner_id: str,
    player1_score: Optional[Sequence[int]] = None,
    player2_score: Optional[Sequence[int]] = None,
) -> CompletionResult:
    """
    Record a played result and advance the winner.

    Raises:
        NotFoundError: match missing
        ValidationError: winner not in the match, a side still TBD, negative scores
        ConflictError: match cancelled, completed with another winner, or the
            downstream side already holds someone else
    """
    return _finish(session, match_id, winner_id, player1_score, player2_score)


def declare_winner(
    session: Session,
    match_id: int,
    winner_id: str,
    reason: WalkoverReason,
    player1_score: Optional[Sequence[int]] = None,
    player2_score: Optional[Sequence[int]] = None,
) -> CompletionResult:
    """Complete a match administratively (walkover, forfeit, disqualification)."""
    reason = WalkoverReason(reason)
    if reason not in DECLARABLE_REASONS:
        raise ValidationError(f"Reason '{reason.value}' cannot be declared")

    if player1_score is None and player2_score is None:
        match = SqlMatchStore(session).get_match(match_id)
        if _side_of(match, winner_id) == 1:
            player1_score, player2_score = WALKOVER_WINNER_SCORE, WALKOVER_LOSER_SCORE
        else:
            player1_score, player2_score = WALKOVER_LOSER_SCORE, WALKOVER_WINNER_SCORE

    return _finish(session, match_id, winner_id, player1_score, player2_score, walkover_reason=reason)


def _validate_status_transition(current: MatchStatus, new: MatchStatus) -> None:
    if current.value in TERMINAL_STATUSES:
        raise ConflictError(f"Match is {current.value}; status cannot change")
    if new is MatchStatus.completed:
        raise ValidationError("Use match completion to set a match completed")
    if new is MatchStatus.scheduled and current is not MatchStatus.scheduled:
        raise ValidationError("Cannot revert to scheduled")


def update_match_status(session: Session, match_id: int, status: MatchStatus) -> Match:
    """Move a match to in_progress or cancelled."""
    store = SqlMatchStore(session)
    match = store.get_match(match_id)
    current = MatchStatus(match.status)
    new = MatchStatus(status)
    _validate_status_transition(current, new)

    if new is MatchStatus.in_progress:
        if not match.is_ready:
            raise ValidationError(f"Match {match.id} cannot start until both sides are known")
        if match.started_at is None:
            match.started_at = datetime.utcnow()
    match.status = new.value

    session.add(match)
    session.commit()
    session.refresh(match)
    logger.info("Match %s status %s -> %s", match.id, current.value, new.value)
    return match


def schedule_match(
    session: Session,
    match_id: int,
    scheduled_at: Optional[datetime],
    court: Optional[str] = None,
) -> Match:
    """Set the time and court of a match that has not finished."""
    store = SqlMatchStore(session)
    match = store.get_match(match_id)
    if match.status in TERMINAL_STATUSES:
        raise ConflictError(f"Match {match.id} is {match.status} and cannot be rescheduled")

    match.scheduled_at = scheduled_at
    match.court = court.strip() if court and court.strip() else None
    session.add(match)
    session.commit()
    session.refresh(match)
    return match


def resolve_all_dependencies(session: Session, tournament_id: int) -> Dict:
    """
    Bulk re-run advancement for every completed match of a tournament.

    Returns:
        Dict with:
        - matches_processed: completed matches that feed a downstream match
        - slots_advanced: downstream sides written by this call
        - errors: one message per match whose downstream side conflicts

    Guarantees:
        - Idempotent (safe to call multiple times)
        - Deterministic ordering (category, age group, round, match number)
    """
    if not session.get(Tournament, tournament_id):
        raise NotFoundError(f"Tournament {tournament_id} not found")

    store = SqlMatchStore(session)
    completed = session.exec(
        select(Match)
        .where(
            Match.tournament_id == tournament_id,
            Match.status == MatchStatus.completed.value,
            Match.winner_id.is_not(None),
            Match.next_match_id.is_not(None),
        )
        .order_by(Match.category, Match.age_group, Match.round_number, Match.match_number)
    ).all()

    matches_processed = 0
    slots_advanced = 0
    errors: List[str] = []

    for match in completed:
        matches_processed += 1
        try:
            slots_advanced += store.update_match_winner(match.id, winner_of(match))
        except ConflictError as exc:
            errors.append(f"Match {match.id}: {exc.message}")
    session.commit()

    logger.info(
        "Synced tournament %s: %s processed, %s advanced, %s errors",
        tournament_id,
        matches_processed,
        slots_advanced,
        len(errors),
    )
    return {
        "matches_processed": matches_processed,
        "slots_advanced": slots_advanced,
        "errors": errors,
    }
