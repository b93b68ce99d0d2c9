"""
Plain data carriers passed between the scoring core and its repositories.

Repositories convert whatever their storage returns (ORM rows, documents)
into these snapshots, so the scoring functions never touch a database.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class TournamentStatus(str, Enum):
    """Tournament lifecycle states.

    The str mixin allows direct comparison with the raw values stored in the
    database (``tournament.status == TournamentStatus.COMPLETED``).
    """

    UPCOMING = "UPCOMING"
    ONGOING = "ONGOING"
    COMPLETED = "COMPLETED"


# COMPLETED is terminal
ALLOWED_TRANSITIONS = {
    TournamentStatus.UPCOMING: {TournamentStatus.ONGOING},
    TournamentStatus.ONGOING: {TournamentStatus.UPCOMING, TournamentStatus.COMPLETED},
    TournamentStatus.COMPLETED: set(),
}


@dataclass
class ResultSnapshot:
    """One player's participation in one tournament"""

    id: int
    tournament_id: int
    player_id: int
    handicap: int = None
    game_scores: list = field(default_factory=list)
    finals_scores: list = field(default_factory=list)
    final_position: int = None
    rating_points_earned: float = None
    tournament_name: str = ""
    tournament_date: object = None


@dataclass(frozen=True)
class SeasonSnapshot:
    id: int
    name: str
    start_date: object = None
    end_date: object = None
    is_active: bool = False
    points_distribution: dict = None

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "is_active": self.is_active,
        }


@dataclass(frozen=True)
class TournamentSnapshot:
    id: int
    season_id: int
    name: str
    date: object
    status: str
    participant_count: int = 0


@dataclass(frozen=True)
class PlayerSnapshot:
    id: int
    first_name: str
    last_name: str
    is_active: bool = True

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()


@dataclass
class TournamentBreakdown:
    """A single tournament's contribution to a leaderboard entry"""

    tournament_id: int
    tournament_name: str
    date: object
    position: int
    points: float

    def to_dict(self):
        return {
            "tournament_id": self.tournament_id,
            "tournament_name": self.tournament_name,
            "date": self.date.isoformat() if self.date else None,
            "position": self.position,
            "points": self.points,
        }


@dataclass
class LeaderboardEntry:
    player_id: int
    player_name: str
    is_active: bool
    total_points: float = 0
    tournaments_played: int = 0
    average_points: float = 0.0
    average_game_score: float = 0.0
    rank: int = 0
    tournaments: list = field(default_factory=list)

    def to_dict(self):
        return {
            "rank": self.rank,
            "player_id": self.player_id,
            "player_name": self.player_name,
            "is_active": self.is_active,
            "total_points": self.total_points,
            "tournaments_played": self.tournaments_played,
            "average_points": self.average_points,
            "average_game_score": self.average_game_score,
            "tournaments": [t.to_dict() for t in self.tournaments],
        }


@dataclass
class Leaderboard:
    season: SeasonSnapshot
    entries: list = field(default_factory=list)
    last_updated: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def total_players(self):
        return len(self.entries)

    def to_dict(self):
        """Convert leaderboard to dictionary for API responses"""
        return {
            "season": self.season.to_dict(),
            "leaderboard": [entry.to_dict() for entry in self.entries],
            "total_players": self.total_players,
            "last_updated": self.last_updated.isoformat(),
        }
