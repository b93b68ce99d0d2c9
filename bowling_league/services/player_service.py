"""Player roster service"""

from sqlalchemy import or_

from bowling_league import db
from bowling_league.errors import ConflictError, NotFoundError, ValidationError
from bowling_league.models import Player, Tournament, TournamentParticipation
from bowling_league.services.season_service import invalidate_leaderboard
from bowling_league.services.validation import (
    optional_bool,
    optional_string,
    require_string,
)
from bowling_league.utils.logging_config import ContextualLogger

logger = ContextualLogger(__name__)

RECENT_PARTICIPATIONS = 10
SUGGESTION_LIMIT = 10


def get_player(player_id):
    player = db.session.get(Player, player_id)
    if player is None:
        raise NotFoundError(f"Player with ID {player_id} not found")
    return player


def _check_email_available(email, exclude_id=None):
    if not email:
        return
    query = Player.query.filter(Player.email == email)
    if exclude_id is not None:
        query = query.filter(Player.id != exclude_id)
    if query.first():
        raise ConflictError(f"A player with email {email} already exists")


def _normalize_email(data):
    email = optional_string(data, "email", max_length=120)
    if email is None:
        return None
    email = email.lower()
    if "@" not in email:
        raise ValidationError("email must be a valid email address")
    return email


def create_player(data):
    first_name = require_string(data, "first_name", max_length=50)
    last_name = require_string(data, "last_name", max_length=50)
    email = _normalize_email(data)
    _check_email_available(email)

    player = Player.create_player(first_name, last_name, email=email)
    is_active = optional_bool(data, "is_active")
    if is_active is not None:
        player.is_active = is_active

    db.session.commit()
    logger.bind(player_id=player.id).info(f"Player {player.full_name} created")
    return player


def list_players(search=None, is_active=None, page=1, per_page=10):
    """Players ordered by last name, optionally filtered by name/email and status"""
    query = Player.query
    if is_active is not None:
        query = query.filter(Player.is_active.is_(is_active))
    if search:
        pattern = f"%{search.strip().lower()}%"
        query = query.filter(
            or_(
                db.func.lower(Player.first_name).like(pattern),
                db.func.lower(Player.last_name).like(pattern),
                db.func.lower(Player.email).like(pattern),
            )
        )
    query = query.order_by(Player.last_name.asc(), Player.first_name.asc())
    return query.paginate(page=page, per_page=per_page, error_out=False)


def suggest_players(query, limit=SUGGESTION_LIMIT):
    """Autocomplete: active players whose first or last name contains query"""
    text = (query or "").strip().lower()
    pattern = f"%{text}%"
    return (
        Player.query.filter(Player.is_active.is_(True))
        .filter(
            or_(
                db.func.lower(Player.first_name).like(pattern),
                db.func.lower(Player.last_name).like(pattern),
            )
        )
        .order_by(Player.last_name.asc(), Player.first_name.asc())
        .limit(limit)
        .all()
    )


def get_recent_participations(player_id, limit=RECENT_PARTICIPATIONS):
    return (
        TournamentParticipation.query.join(Tournament)
        .filter(TournamentParticipation.player_id == player_id)
        .order_by(Tournament.date.desc())
        .limit(limit)
        .all()
    )


def _invalidate_player_leaderboards(player_id):
    """Leaderboards show names and roster status, so drop the ones listing this player"""
    season_ids = (
        db.session.query(Tournament.season_id)
        .join(TournamentParticipation)
        .filter(TournamentParticipation.player_id == player_id)
        .distinct()
        .all()
    )
    for (season_id,) in season_ids:
        invalidate_leaderboard(season_id)


def player_detail(player_id):
    """Player profile with their most recent tournament results"""
    player = get_player(player_id)
    data = player.to_dict()
    data["participations"] = [
        {
            **participation.to_dict(),
            "tournament": {
                "id": participation.tournament.id,
                "name": participation.tournament.name,
                "date": participation.tournament.date.isoformat(),
                "status": participation.tournament.status,
            },
        }
        for participation in get_recent_participations(player.id)
    ]
    return data


def update_player(player_id, data):
    player = get_player(player_id)

    first_name = optional_string(data, "first_name", max_length=50)
    last_name = optional_string(data, "last_name", max_length=50)
    player.set_names(first_name, last_name)

    if "email" in data:
        email = _normalize_email(data)
        _check_email_available(email, exclude_id=player.id)
        player.email = email

    is_active = optional_bool(data, "is_active")
    if is_active is not None:
        player.is_active = is_active

    db.session.commit()
    _invalidate_player_leaderboards(player.id)
    logger.bind(player_id=player.id).info("Player updated")
    return player


def deactivate_player(player_id):
    """Take a player off the active roster; their results stay on record"""
    player = get_player(player_id)
    player.is_active = False
    db.session.commit()
    _invalidate_player_leaderboards(player.id)
    logger.bind(player_id=player.id).info("Player deactivated")
    return player
