"""
Season management and leaderboard service

Seasons own the points distribution used to rate completed tournaments.
Leaderboards are computed from stored results through the scoring core and
cached per season until a tournament completes or the distribution changes.
"""

from bowling_league import db
from bowling_league.errors import ConflictError, NotFoundError, ValidationError
from bowling_league.models import Season
from bowling_league.repositories import SqlScoringRepository
from bowling_league.scoring import build_leaderboard, normalize_points_distribution
from bowling_league.services.validation import (
    months_between,
    optional_bool,
    parse_date,
    require_string,
)
from bowling_league.utils.cache_utils import cached_query, invalidate_query_cache
from bowling_league.utils.logging_config import ContextualLogger
from bowling_league.utils.performance import PerformanceMonitor, timer

logger = ContextualLogger(__name__)

MIN_SEASON_MONTHS = 2
MAX_SEASON_MONTHS = 4


def get_season(season_id):
    season = db.session.get(Season, season_id)
    if season is None:
        raise NotFoundError(f"Season with ID {season_id} not found")
    return season


def get_active_season():
    season = Season.get_current_season()
    if season is None:
        raise NotFoundError("No active season found")
    return season


def list_seasons():
    """All seasons, newest first"""
    return Season.query.order_by(Season.start_date.desc()).all()


def _validate_dates(start_date, end_date, exclude_id=None):
    if start_date >= end_date:
        raise ValidationError("Start date must be before end date")

    months = months_between(start_date, end_date)
    if months < MIN_SEASON_MONTHS or months > MAX_SEASON_MONTHS:
        raise ValidationError(
            f"Season duration should be approximately 3 months "
            f"({MIN_SEASON_MONTHS}-{MAX_SEASON_MONTHS} months allowed)"
        )

    query = Season.query
    if exclude_id is not None:
        query = query.filter(Season.id != exclude_id)
    for existing in query.all():
        if existing.overlaps(start_date, end_date):
            raise ConflictError(
                f'Season dates overlap with existing season "{existing.name}"'
            )


def create_season(data):
    """
    Create a season from a request payload.

    Expected keys: name, start_date, end_date, and optionally is_active and
    points_distribution.
    """
    name = require_string(data, "name", max_length=100)
    start_date = parse_date(data.get("start_date"), "start_date")
    end_date = parse_date(data.get("end_date"), "end_date")
    is_active = optional_bool(data, "is_active") or False
    distribution = normalize_points_distribution(data.get("points_distribution"))

    _validate_dates(start_date, end_date)

    season = Season(name=name, start_date=start_date, end_date=end_date)
    if distribution is not None:
        season.set_points_distribution(distribution)
    db.session.add(season)
    db.session.flush()

    if is_active:
        season.activate()

    db.session.commit()
    logger.bind(season_id=season.id).info(f"Season '{season.name}' created")
    return season


def update_season(season_id, data):
    season = get_season(season_id)

    if "name" in data:
        season.name = require_string(data, "name", max_length=100)

    if "start_date" in data or "end_date" in data:
        start_date = parse_date(data.get("start_date", season.start_date), "start_date")
        end_date = parse_date(data.get("end_date", season.end_date), "end_date")
        _validate_dates(start_date, end_date, exclude_id=season.id)
        season.start_date = start_date
        season.end_date = end_date

    if "points_distribution" in data:
        season.set_points_distribution(
            normalize_points_distribution(data["points_distribution"])
        )
        invalidate_leaderboard(season.id)

    is_active = optional_bool(data, "is_active")
    if is_active:
        season.activate()
    elif is_active is False:
        season.is_active = False

    db.session.commit()
    logger.bind(season_id=season.id).info("Season updated")
    return season


def delete_season(season_id):
    season = get_season(season_id)
    tournament_count = season.get_tournament_count()
    if tournament_count:
        raise ConflictError(
            f"Cannot delete season with {tournament_count} tournaments. "
            "Delete its tournaments first."
        )
    db.session.delete(season)
    db.session.commit()
    invalidate_leaderboard(season_id)
    logger.bind(season_id=season_id).info("Season deleted")


def activate_season(season_id):
    """Make a season the active one, deactivating every other season"""
    season = get_season(season_id)
    season.activate()
    db.session.commit()
    logger.bind(season_id=season.id).info("Season activated")
    return season


def get_rating_config(season_id):
    season = get_season(season_id)
    if not season.points_distribution:
        raise NotFoundError(f"Rating configuration not found for season {season_id}")
    return season.rating_config_dict()


def set_rating_config(season_id, points_distribution):
    """Replace a season's points distribution and drop its cached leaderboard"""
    season = get_season(season_id)
    distribution = normalize_points_distribution(points_distribution)
    if distribution is None:
        raise ValidationError("points_distribution is required")

    season.set_points_distribution(distribution)
    db.session.commit()
    invalidate_leaderboard(season.id)

    logger.bind(season_id=season.id).info(
        f"Points distribution updated for {len(distribution)} positions"
    )
    return season.rating_config_dict()


@cached_query("leaderboard", timeout_config="LEADERBOARD_CACHE_TIMEOUT")
@timer
def get_leaderboard(season_id):
    """Season leaderboard as a response dict (cached)"""
    with PerformanceMonitor(f"leaderboard season {season_id}"):
        leaderboard = build_leaderboard(SqlScoringRepository(), season_id)
    return leaderboard.to_dict()


def get_active_leaderboard():
    return get_leaderboard(get_active_season().id)


def invalidate_leaderboard(season_id):
    invalidate_query_cache("leaderboard", season_id)
