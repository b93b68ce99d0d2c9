"""
Handicap calculation

A player's handicap is derived from the qualification games of their two most
recent completed tournaments in the season. Bowlers averaging below the
reference score receive a positive per-game adjustment, those above it a
negative one, bounded to +/- MAX_HANDICAP.
"""

import logging
import math
from numbers import Real

logger = logging.getLogger(__name__)

REFERENCE_AVERAGE = 180
MAX_HANDICAP = 15
HISTORY_TOURNAMENTS = 2
GAMES_PER_TOURNAMENT = 6


def played_scores(scores):
    """Scores that count as played games (numeric and non-zero)"""
    played = []
    for score in scores or []:
        if isinstance(score, bool) or not isinstance(score, Real):
            continue
        if math.isnan(score) or score <= 0:
            continue
        played.append(score)
    return played


def has_played_games(result):
    return bool(played_scores(result.game_scores))


def round_half_up(value):
    """Round to the nearest integer, halves toward positive infinity"""
    return math.floor(value + 0.5)


def clamp_handicap(raw):
    return max(-MAX_HANDICAP, min(MAX_HANDICAP, raw))


def handicap_from_results(results):
    """
    Compute a handicap from a player's history.

    Args:
        results: participation results ordered most recent first; only the
            first HISTORY_TOURNAMENTS are used

    Returns:
        int handicap in [-15, 15], or None when there is not enough history
    """
    recent = list(results)[:HISTORY_TOURNAMENTS]
    if len(recent) < HISTORY_TOURNAMENTS:
        return None

    total_score = 0
    total_games = 0
    for result in recent:
        for score in played_scores((result.game_scores or [])[:GAMES_PER_TOURNAMENT]):
            total_score += score
            total_games += 1

    if total_games == 0:
        return None

    average = total_score / total_games
    return clamp_handicap(round_half_up((REFERENCE_AVERAGE - average) / 2))


def compute_handicap(repository, player_id, season_id, before=None):
    """
    Compute the handicap a player gets when admitted to a tournament.

    Args:
        repository: ScoringRepository used to fetch the player's history
        player_id: Player being admitted
        season_id: Season of the tournament
        before: Only tournaments dated strictly before this date count

    Returns:
        int handicap or None (no handicap applied)
    """
    history = [
        result
        for result in repository.fetch_recent_completed_results(
            player_id, season_id, before=before
        )
        if has_played_games(result)
    ]
    handicap = handicap_from_results(history)
    logger.debug(
        f"Handicap for player {player_id} in season {season_id}: {handicap} "
        f"({min(len(history), HISTORY_TOURNAMENTS)} tournaments considered)"
    )
    return handicap
