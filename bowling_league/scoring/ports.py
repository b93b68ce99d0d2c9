"""
Storage interface used by the scoring core.

Each storage technology provides one implementation (see
bowling_league.repositories). All fetch methods return snapshots from
bowling_league.scoring.types.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager


class ScoringRepository(ABC):
    """Narrow persistence port for handicap, placement and leaderboard logic"""

    @abstractmethod
    def get_season(self, season_id):
        """SeasonSnapshot or None"""

    @abstractmethod
    def get_tournament(self, tournament_id):
        """TournamentSnapshot or None"""

    @abstractmethod
    def get_players(self, player_ids):
        """Mapping of player id to PlayerSnapshot for the ids that exist"""

    @abstractmethod
    def fetch_recent_completed_results(self, player_id, season_id, before=None):
        """
        The player's results in COMPLETED tournaments of the season, most
        recent tournament first. When ``before`` is given, only tournaments
        dated strictly earlier are returned.
        """

    @abstractmethod
    def fetch_tournament_results(self, tournament_id):
        """Every result of a tournament, in admission order"""

    @abstractmethod
    def fetch_season_results(self, season_id):
        """Every result belonging to a COMPLETED tournament of the season"""

    @abstractmethod
    def persist_handicap(self, participation_id, handicap):
        """Store the handicap computed at admission"""

    @abstractmethod
    def claim_completion(self, tournament_id):
        """
        Atomically move a tournament from ONGOING to COMPLETED.

        Returns:
            True if this call performed the transition, False if the
            tournament was not ONGOING (including a concurrent completion)
        """

    @abstractmethod
    def persist_placements(self, results):
        """Store final_position and rating_points_earned of every result"""

    @contextmanager
    def unit_of_work(self):
        """
        Scope one claim-score-commit sequence.

        commit() and rollback() inside the block only affect writes made
        inside it. Adapters backed by a session transaction need nothing more.
        """
        yield self

    def commit(self):
        """Make the writes of the current unit of work durable"""

    def rollback(self):
        """Discard the writes of the current unit of work"""
