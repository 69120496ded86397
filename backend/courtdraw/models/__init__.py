from courtdraw.models.match import Match, MatchStatus, WalkoverReason
from courtdraw.models.participant import Category, Participant, SkillLevel
from courtdraw.models.tournament import Sport, Tournament, TournamentFormat, TournamentStatus

__all__ = [
    "Tournament",
    "TournamentFormat",
    "TournamentStatus",
    "Sport",
    "Participant",
    "Category",
    "SkillLevel",
    "Match",
    "MatchStatus",
    "WalkoverReason",
]
