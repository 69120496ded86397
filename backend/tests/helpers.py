"""Builders for tournaments and registrations used across tests."""

from typing import List, Optional, Sequence

from sqlmodel import Session

from courtdraw.auth import CallerIdentity
from courtdraw.models.participant import Participant
from courtdraw.models.tournament import Tournament

ADMIN = CallerIdentity(user_id="admin-1", roles=frozenset({"admin"}))
PLAYER = CallerIdentity(user_id="player-1", roles=frozenset({"player"}))


def create_tournament(
    session: Session,
    format: str = "knockout",
    categories: Sequence[str] = ("singles", "doubles", "mixed"),
    age_groups: Sequence[str] = (),
    allow_multiple_age_groups: bool = False,
    name: str = "City Open",
) -> Tournament:
    tournament = Tournament(
        name=name,
        format=format,
        categories=list(categories),
        age_groups=list(age_groups),
        allow_multiple_age_groups=allow_multiple_age_groups,
    )
    session.add(tournament)
    session.commit()
    session.refresh(tournament)
    return tournament


def add_participant(
    session: Session,
    tournament: Tournament,
    user_id: str,
    category: str = "singles",
    skill_level: Optional[str] = None,
    age_groups: Sequence[str] = (),
    partner_id: Optional[str] = None,
    partner_name: Optional[str] = None,
    is_approved: bool = True,
    name: Optional[str] = None,
) -> Participant:
    participant = Participant(
        tournament_id=tournament.id,
        user_id=user_id,
        name=name or f"Player {user_id}",
        category=category,
        skill_level=skill_level,
        age_groups=list(age_groups),
        partner_id=partner_id,
        partner_name=partner_name,
        is_approved=is_approved,
    )
    session.add(participant)
    session.commit()
    session.refresh(participant)
    return participant


def add_singles(session: Session, tournament: Tournament, count: int, prefix: str = "s") -> List[Participant]:
    return [add_participant(session, tournament, f"{prefix}{i}") for i in range(1, count + 1)]


def add_doubles(session: Session, tournament: Tournament, count: int, category: str = "doubles") -> List[Participant]:
    return [
        add_participant(
            session,
            tournament,
            f"d{i}a",
            category=category,
            partner_id=f"d{i}b",
            partner_name=f"Partner d{i}b",
        )
        for i in range(1, count + 1)
    ]
