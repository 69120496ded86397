"""
Storage seams for fixture generation and progression.

The orchestrator and advancement logic talk to these protocols; the Sql*
classes implement them on a SQLModel session. Only SqlMatchStore.create_matches
commits on its own, because the fixture batch and the tournament's
has_fixtures flag must land in one transaction. The single-match writes flush
and leave the commit to the calling service.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Protocol, Sequence

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from courtdraw.errors import ConflictError, NotFoundError, PersistenceError
from courtdraw.models.match import BYE, TBD, Match, MatchStatus
from courtdraw.models.participant import Participant
from courtdraw.models.tournament import Tournament, TournamentStatus
from courtdraw.utils.drafts import DraftKey, MatchDraft

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Winner:
    """Who advances: the player plus, for doubles/mixed, the partner."""

    user_id: str
    name: str
    partner_id: Optional[str] = None
    partner_name: Optional[str] = None


@dataclass(frozen=True)
class DownstreamSlot:
    target_match_id: int
    position: int  # 1 or 2


class TournamentConfigStore(Protocol):
    def get_tournament(self, tournament_id: int) -> Optional[Tournament]: ...


class ParticipantStore(Protocol):
    def list_approved_participants(self, tournament_id: int) -> List[Participant]: ...


class MatchStore(Protocol):
    def create_matches(self, tournament_id: int, drafts: Sequence[MatchDraft]) -> int: ...

    def update_match_winner(self, match_id: int, winner: Winner) -> int: ...

    def get_downstream_slot(self, match_id: int) -> Optional[DownstreamSlot]: ...


# ============================================================================
# SQL implementations
# ============================================================================


class SqlTournamentStore:
    def __init__(self, session: Session):
        self.session = session

    def get_tournament(self, tournament_id: int) -> Optional[Tournament]:
        return self.session.get(Tournament, tournament_id)


class SqlParticipantStore:
    def __init__(self, session: Session):
        self.session = session

    def list_approved_participants(self, tournament_id: int) -> List[Participant]:
        """Approved participants in registration order (id ascending)."""
        return list(
            self.session.exec(
                select(Participant)
                .where(
                    Participant.tournament_id == tournament_id,
                    Participant.is_approved == True,  # noqa: E712
                )
                .order_by(Participant.id)
            ).all()
        )


def match_from_draft(tournament_id: int, draft: MatchDraft) -> Match:
    """Map a draft onto a new Match row. Advancement ids are resolved after flush."""
    match = Match(
        tournament_id=tournament_id,
        category=draft.partition.category.value,
        age_group=draft.partition.age_group,
        round_number=draft.round_number,
        round_name=draft.round_name,
        match_number=draft.match_number,
        bracket_position=draft.bracket_position,
        next_slot=draft.next_slot,
        scheduled_at=draft.scheduled_at,
        court=draft.court,
    )
    if draft.side1 is not None:
        match.player1_id = draft.side1.user_id
        match.player1_name = draft.side1.name
        match.player3_id = draft.side1.partner_id
        match.player3_name = draft.side1.partner_name
    if draft.side2 is not None:
        match.player2_id = draft.side2.user_id
        match.player2_name = draft.side2.name
        match.player4_id = draft.side2.partner_id
        match.player4_name = draft.side2.partner_name
    if draft.walkover_reason is not None:
        match.status = MatchStatus.completed.value
        match.is_walkover = True
        match.walkover_reason = draft.walkover_reason
        if draft.side2 is None:
            match.player2_name = BYE
        match.completed_at = datetime.utcnow()
        if draft.winner is not None:
            match.winner_id = draft.winner.user_id
            match.winner_name = draft.winner.name
    return match


class SqlMatchStore:
    def __init__(self, session: Session):
        self.session = session

    def create_matches(self, tournament_id: int, drafts: Sequence[MatchDraft]) -> int:
        """
        Insert the whole fixture batch and mark the tournament as having fixtures.

        All-or-nothing: the has_fixtures flip is a compare-and-set in the same
        transaction, so a concurrent second generation finds zero rows to claim
        and gets ConflictError without writing anything.

        Raises:
            ConflictError: fixtures were already generated for the tournament
            PersistenceError: any storage failure (the batch is rolled back)
        """
        now = datetime.utcnow()
        try:
            claimed = self.session.exec(
                update(Tournament)
                .where(
                    Tournament.id == tournament_id,
                    Tournament.has_fixtures == False,  # noqa: E712
                )
                .values(
                    has_fixtures=True,
                    fixtures_generated_at=now,
                    status=TournamentStatus.ongoing.value,
                    updated_at=now,
                )
            )
            if claimed.rowcount != 1:
                self.session.rollback()
                raise ConflictError("Fixtures already generated for this tournament")

            rows: Dict[DraftKey, Match] = {}
            for draft in drafts:
                match = match_from_draft(tournament_id, draft)
                self.session.add(match)
                rows[draft.key] = match
            self.session.flush()

            for draft in drafts:
                if draft.next_key is None:
                    continue
                target = rows.get(draft.next_key)
                if target is None:
                    raise PersistenceError(
                        f"Advancement target missing for {draft.partition.label} "
                        f"round {draft.round_number} position {draft.bracket_position}"
                    )
                rows[draft.key].next_match_id = target.id
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Fixture batch for tournament %s rolled back", tournament_id)
            raise PersistenceError(f"Failed to save fixtures: {exc.__class__.__name__}") from exc
        except PersistenceError:
            self.session.rollback()
            raise

        return len(rows)

    def get_match(self, match_id: int) -> Match:
        match = self.session.get(Match, match_id)
        if not match:
            raise NotFoundError(f"Match {match_id} not found")
        return match

    def list_matches(
        self,
        tournament_id: int,
        category: Optional[str] = None,
        age_group: Optional[str] = None,
    ) -> List[Match]:
        statement = select(Match).where(Match.tournament_id == tournament_id)
        if category:
            statement = statement.where(Match.category == category)
        if age_group:
            statement = statement.where(Match.age_group == age_group)
        statement = statement.order_by(
            Match.category, Match.age_group, Match.round_number, Match.match_number
        )
        return list(self.session.exec(statement).all())

    def get_downstream_slot(self, match_id: int) -> Optional[DownstreamSlot]:
        match = self.get_match(match_id)
        if match.next_match_id is None or match.next_slot is None:
            return None
        return DownstreamSlot(target_match_id=match.next_match_id, position=match.next_slot)

    def update_match_winner(self, match_id: int, winner: Winner) -> int:
        """
        Write the winner of match_id into its downstream side.

        Returns 1 if the side was written, 0 if there is no downstream match,
        the downstream match is cancelled, or the side already holds this
        winner. Only set if null or already same; a different occupant is a
        conflict. Flushes, does not commit.
        """
        slot = self.get_downstream_slot(match_id)
        if slot is None:
            return 0

        target = self.get_match(slot.target_match_id)
        if target.status == MatchStatus.cancelled.value:
            logger.info("Match %s is cancelled; not advancing %s into it", target.id, winner.user_id)
            return 0

        if slot.position == 1:
            current = target.player1_id
        elif slot.position == 2:
            current = target.player2_id
        else:
            raise PersistenceError(f"Invalid downstream slot {slot.position} on match {target.id}")

        if current == winner.user_id:
            logger.debug("Match %s slot %s already holds %s", target.id, slot.position, winner.user_id)
            return 0
        if current is not None:
            raise ConflictError(
                f"Match {target.id} slot {slot.position} already holds a different entry"
            )
        if target.status == MatchStatus.completed.value:
            raise ConflictError(f"Match {target.id} is already completed")

        if slot.position == 1:
            target.player1_id = winner.user_id
            target.player1_name = winner.name or TBD
            target.player3_id = winner.partner_id
            target.player3_name = winner.partner_name
        else:
            target.player2_id = winner.user_id
            target.player2_name = winner.name or TBD
            target.player4_id = winner.partner_id
            target.player4_name = winner.partner_name
        self.session.add(target)
        self.session.flush()
        logger.info("Advanced %s into match %s slot %s", winner.user_id, target.id, slot.position)
        return 1
