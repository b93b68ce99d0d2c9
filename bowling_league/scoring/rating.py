"""
Rating points and season leaderboards.

Rating points come from the season's points distribution, a mapping of
1-based final position to points. Positions missing from the mapping earn
nothing. The leaderboard sums the points a player earned across the season's
completed tournaments.
"""

import logging
from numbers import Real

from bowling_league.errors import InvalidPointsDistributionError, NotFoundError
from bowling_league.scoring.handicap import played_scores
from bowling_league.scoring.types import (
    Leaderboard,
    LeaderboardEntry,
    TournamentBreakdown,
)

logger = logging.getLogger(__name__)


def normalize_points_distribution(distribution):
    """
    Validate a points distribution and key it by integer position.

    JSON objects arrive with string keys ("1": 100); they are converted to ints.

    Raises:
        InvalidPointsDistributionError: on non-positive or non-integer
            positions, or negative/non-numeric point values
    """
    if distribution is None:
        return None
    if not isinstance(distribution, dict):
        raise InvalidPointsDistributionError("Points distribution must be an object")

    normalized = {}
    for key, value in distribution.items():
        try:
            position = int(key)
        except (TypeError, ValueError):
            raise InvalidPointsDistributionError(
                f"Invalid placement '{key}': placements must be positive integers"
            )
        if isinstance(key, bool) or str(position) != str(key).strip() or position < 1:
            raise InvalidPointsDistributionError(
                f"Invalid placement '{key}': placements must be positive integers"
            )
        if isinstance(value, bool) or not isinstance(value, Real) or value < 0:
            raise InvalidPointsDistributionError(
                f"Invalid points for placement {position}: must be a non-negative number"
            )
        normalized[position] = value
    return normalized


def points_for(points_distribution, position):
    """Points awarded for a final position (0 when unmapped)"""
    if not points_distribution or position is None:
        return 0
    points = points_distribution.get(position)
    if points is None:
        points = points_distribution.get(str(position))
    if points is None or points < 0:
        return 0
    return points


def assign_rating_points(placements, points_distribution):
    """
    Write final position and rating points onto each placed result.

    Both fields are set together so a result never carries one without the
    other.

    Args:
        placements: (result, position) pairs from resolve_placements()
        points_distribution: season points table, may be None

    Returns:
        list of the updated results in placement order
    """
    scored = []
    for result, position in placements:
        result.final_position = position
        result.rating_points_earned = points_for(points_distribution, position)
        scored.append(result)
    return scored


def aggregate_leaderboard(season, results, players):
    """
    Build a leaderboard from already-scored results.

    Args:
        season: SeasonSnapshot the leaderboard belongs to
        results: participation results of the season's completed tournaments
        players: mapping of player id to PlayerSnapshot

    Returns:
        Leaderboard with entries ranked by total points
    """
    entries = {}
    game_totals = {}

    for result in results:
        if result.rating_points_earned is None:
            continue

        player = players.get(result.player_id)
        if player is None:
            logger.debug(f"Skipping result {result.id}: player {result.player_id} not found")
            continue

        entry = entries.get(result.player_id)
        if entry is None:
            entry = LeaderboardEntry(
                player_id=player.id,
                player_name=player.full_name,
                is_active=player.is_active,
            )
            entries[result.player_id] = entry
            game_totals[result.player_id] = [0, 0]

        entry.total_points += result.rating_points_earned
        entry.tournaments_played += 1
        entry.tournaments.append(
            TournamentBreakdown(
                tournament_id=result.tournament_id,
                tournament_name=result.tournament_name,
                date=result.tournament_date,
                position=result.final_position,
                points=result.rating_points_earned,
            )
        )

        for score in played_scores(result.game_scores):
            game_totals[result.player_id][0] += score
            game_totals[result.player_id][1] += 1

    for player_id, entry in entries.items():
        pins, games = game_totals[player_id]
        entry.average_points = entry.total_points / entry.tournaments_played
        entry.average_game_score = pins / games if games else 0

    # Ties keep first-seen order and still get consecutive ranks
    ranked = sorted(entries.values(), key=lambda e: e.total_points, reverse=True)
    for index, entry in enumerate(ranked):
        entry.rank = index + 1

    return Leaderboard(season=season, entries=ranked)


def build_leaderboard(repository, season_id):
    """
    Season leaderboard from persisted positions and points.

    Raises:
        NotFoundError: if the season does not exist
    """
    season = repository.get_season(season_id)
    if season is None:
        raise NotFoundError(f"Season with ID {season_id} not found")

    results = [
        result
        for result in repository.fetch_season_results(season_id)
        if result.rating_points_earned is not None
    ]
    players = repository.get_players({result.player_id for result in results})

    return aggregate_leaderboard(season, results, players)
