from bowling_league import db  # noqa: F401 - imported for model imports

from .application import ApplicationStatus, TournamentApplication
from .participation import TournamentParticipation
from .player import Player
from .season import Season
from .tournament import Tournament

__all__ = [
    "Player",
    "Season",
    "Tournament",
    "TournamentParticipation",
    "TournamentApplication",
    "ApplicationStatus",
]
