"""
Tournament service

Covers the tournament lifecycle around the scoring core: scheduling,
admission of players (directly or through applications), result entry and
status changes. Completion is delegated to scoring.complete_tournament so
placements and rating points are written exactly once.
"""

from sqlalchemy.exc import IntegrityError

from bowling_league import db
from bowling_league.errors import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from bowling_league.models import (
    ApplicationStatus,
    Player,
    Tournament,
    TournamentApplication,
    TournamentParticipation,
)
from bowling_league.repositories import SqlScoringRepository
from bowling_league.scoring import (
    ALLOWED_TRANSITIONS,
    TournamentStatus,
    complete_tournament,
    compute_handicap,
)
from bowling_league.services import season_service
from bowling_league.services.validation import (
    optional_int,
    optional_string,
    parse_date,
    parse_scores,
    require_string,
)
from bowling_league.utils.logging_config import ContextualLogger
from bowling_league.utils.performance import PerformanceMonitor, timer

logger = ContextualLogger(__name__)

FINALS_GAMES = 2
READ_ONLY_RESULT_FIELDS = ("handicap", "final_position", "rating_points_earned")


def get_tournament(tournament_id):
    tournament = db.session.get(Tournament, tournament_id)
    if tournament is None:
        raise NotFoundError(f"Tournament with ID {tournament_id} not found")
    return tournament


def _get_participation(tournament, participation_id):
    participation = db.session.get(TournamentParticipation, participation_id)
    if participation is None:
        raise NotFoundError(f"Participation with ID {participation_id} not found")
    if participation.tournament_id != tournament.id:
        raise ValidationError("Participation does not belong to this tournament")
    return participation


def _check_date_in_season(season, day):
    if not season.contains_date(day):
        raise ValidationError(
            f"Tournament date must be within season dates "
            f"({season.start_date.isoformat()} to {season.end_date.isoformat()})"
        )


def _ensure_not_completed(tournament, action):
    if tournament.is_completed:
        raise ConflictError(f"Cannot {action} a completed tournament")


# Scheduling


def create_tournament(data):
    """Schedule a tournament inside one of the seasons"""
    season_id = optional_int(data, "season_id")
    if season_id is None:
        raise ValidationError("season_id is required")
    season = season_service.get_season(season_id)

    day = parse_date(data.get("date"), "date")
    _check_date_in_season(season, day)

    tournament = Tournament(
        season_id=season.id,
        name=require_string(data, "name", max_length=120),
        date=day,
        location=optional_string(data, "location", max_length=200),
        description=optional_string(data, "description"),
        max_participants=optional_int(data, "max_participants", minimum=1),
        status=TournamentStatus.UPCOMING.value,
    )
    db.session.add(tournament)
    db.session.commit()

    logger.bind(tournament_id=tournament.id, season_id=season.id).info(
        f"Tournament '{tournament.name}' scheduled for {day.isoformat()}"
    )
    return tournament


def list_tournaments(
    season_id=None, status=None, from_date=None, to_date=None, page=1, per_page=10
):
    """Tournaments newest first, paginated"""
    query = Tournament.query
    if season_id is not None:
        query = query.filter(Tournament.season_id == season_id)
    if status:
        try:
            status = TournamentStatus(status.upper())
        except ValueError:
            raise ValidationError(f"Unknown tournament status {status!r}")
        query = query.filter(Tournament.status == status.value)
    if from_date:
        query = query.filter(Tournament.date >= parse_date(from_date, "from_date"))
    if to_date:
        query = query.filter(Tournament.date <= parse_date(to_date, "to_date"))

    query = query.order_by(Tournament.date.desc(), Tournament.id.desc())
    return query.paginate(page=page, per_page=per_page, error_out=False)


def get_upcoming(limit=5):
    return Tournament.get_upcoming(limit=limit)


def update_tournament(tournament_id, data):
    """Edit tournament details; status changes go through update_status()"""
    tournament = get_tournament(tournament_id)

    if "status" in data:
        raise ValidationError("Use the status endpoint to change tournament status")

    if "season_id" in data or "date" in data:
        _ensure_not_completed(tournament, "move")
        season_id = optional_int(data, "season_id") or tournament.season_id
        season = season_service.get_season(season_id)
        day = parse_date(data.get("date", tournament.date), "date")
        _check_date_in_season(season, day)
        tournament.season_id = season.id
        tournament.date = day

    if "name" in data:
        tournament.name = require_string(data, "name", max_length=120)
    if "location" in data:
        tournament.location = optional_string(data, "location", max_length=200)
    if "description" in data:
        tournament.description = optional_string(data, "description")
    if "max_participants" in data:
        max_participants = optional_int(data, "max_participants", minimum=1)
        if max_participants is not None and max_participants < tournament.participant_count:
            raise ConflictError(
                f"Tournament already has {tournament.participant_count} participants"
            )
        tournament.max_participants = max_participants

    db.session.commit()
    if tournament.is_completed:
        season_service.invalidate_leaderboard(tournament.season_id)

    logger.bind(tournament_id=tournament.id).info("Tournament updated")
    return tournament


def delete_tournament(tournament_id):
    tournament = get_tournament(tournament_id)
    participant_count = tournament.participant_count
    if participant_count:
        raise ConflictError(
            f"Cannot delete tournament with {participant_count} participants. "
            "Remove participants first."
        )
    db.session.delete(tournament)
    db.session.commit()
    logger.bind(tournament_id=tournament_id).info("Tournament deleted")


# Status


def update_status(tournament_id, status):
    """
    Move a tournament through its lifecycle.

    UPCOMING <-> ONGOING are plain updates. ONGOING -> COMPLETED resolves
    placements and rating points; only one request can win that transition.
    """
    tournament = get_tournament(tournament_id)
    log = logger.bind(tournament_id=tournament.id)

    try:
        target = TournamentStatus(str(status).upper())
    except ValueError:
        raise ValidationError(f"Unknown tournament status {status!r}")

    if target is TournamentStatus.COMPLETED:
        with PerformanceMonitor(f"complete tournament {tournament.id}"):
            scored = complete_tournament(SqlScoringRepository(), tournament.id)
        season_service.invalidate_leaderboard(tournament.season_id)
        db.session.refresh(tournament)
        log.info(f"Tournament completed, {len(scored)} players placed")
        return tournament

    current = TournamentStatus(tournament.status)
    if target not in ALLOWED_TRANSITIONS[current]:
        raise InvalidTransitionError(
            f"Cannot change tournament status from {current.value} to {target.value}"
        )

    tournament.status = target.value
    db.session.commit()
    log.info(f"Tournament status changed {current.value} -> {target.value}")
    return tournament


# Admission


def _get_player(player_id):
    player = db.session.get(Player, player_id)
    if player is None:
        raise NotFoundError(f"Player with ID {player_id} not found")
    return player


def _check_can_admit(tournament, player_id):
    _ensure_not_completed(tournament, "add players to")
    if tournament.is_full():
        raise ValidationError("Tournament is full")
    if tournament.has_participant(player_id):
        raise ConflictError("Player is already participating in this tournament")


@timer
def _admit(tournament, player):
    """Create the participation and set its handicap from prior results"""
    participation = TournamentParticipation(
        tournament_id=tournament.id, player_id=player.id, game_scores=[], finals_scores=[]
    )
    db.session.add(participation)
    db.session.flush()

    repository = SqlScoringRepository()
    handicap = compute_handicap(
        repository, player.id, tournament.season_id, before=tournament.date
    )
    repository.persist_handicap(participation.id, handicap)
    return participation


def add_participant(tournament_id, player_id):
    """Admit a player directly, bypassing the application queue"""
    tournament = get_tournament(tournament_id)
    player = _get_player(player_id)
    _check_can_admit(tournament, player.id)

    try:
        participation = _admit(tournament, player)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Player is already participating in this tournament")

    logger.bind(tournament_id=tournament.id, player_id=player.id).info(
        f"Player admitted with handicap {participation.handicap}"
    )
    return participation


def apply_to_tournament(tournament_id, player_id):
    tournament = get_tournament(tournament_id)
    player = _get_player(player_id)

    _ensure_not_completed(tournament, "apply to")
    if not player.is_active:
        raise ValidationError("Inactive players cannot apply to tournaments")
    if tournament.is_full():
        raise ValidationError("Tournament is full")
    if tournament.applications.filter_by(player_id=player.id).first():
        raise ConflictError("Player has already applied to this tournament")
    if tournament.has_participant(player.id):
        raise ConflictError("Player is already participating in this tournament")

    application = TournamentApplication(
        tournament_id=tournament.id,
        player_id=player.id,
        status=ApplicationStatus.PENDING,
    )
    db.session.add(application)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Player has already applied to this tournament")

    logger.bind(tournament_id=tournament.id, player_id=player.id).info(
        "Tournament application received"
    )
    return application


def list_applications(tournament_id, status=None):
    tournament = get_tournament(tournament_id)
    query = tournament.applications
    if status:
        query = query.filter_by(status=status.upper())
    return query.order_by(TournamentApplication.application_date.asc()).all()


def _get_pending_application(application_id):
    application = db.session.get(TournamentApplication, application_id)
    if application is None:
        raise NotFoundError(f"Application with ID {application_id} not found")
    if not application.is_pending:
        raise ValidationError(
            f"Application has already been {application.status.lower()}"
        )
    return application


def approve_application(application_id):
    """Approve a pending application and admit the player"""
    application = _get_pending_application(application_id)
    tournament = application.tournament
    _check_can_admit(tournament, application.player_id)

    try:
        participation = _admit(tournament, application.player)
        application.status = ApplicationStatus.APPROVED
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Player is already participating in this tournament")

    logger.bind(tournament_id=tournament.id, player_id=application.player_id).info(
        f"Application {application.id} approved, handicap {participation.handicap}"
    )
    return application, participation


def reject_application(application_id):
    application = _get_pending_application(application_id)
    application.status = ApplicationStatus.REJECTED
    db.session.commit()

    logger.bind(
        tournament_id=application.tournament_id, player_id=application.player_id
    ).info(f"Application {application.id} rejected")
    return application


# Results


def list_participants(tournament_id):
    tournament = get_tournament(tournament_id)
    return (
        tournament.participations.order_by(TournamentParticipation.id.asc()).all()
    )


def record_results(tournament_id, participation_id, data):
    """
    Enter qualification and finals scores for one participant.

    Qualification games may be entered incrementally up to the tournament's
    current game count. Finals are either absent or exactly two games.
    """
    tournament = get_tournament(tournament_id)
    participation = _get_participation(tournament, participation_id)
    _ensure_not_completed(tournament, "record results for")

    for field in READ_ONLY_RESULT_FIELDS:
        if field in data:
            raise ValidationError(f"{field} cannot be set directly")

    if "game_scores" in data:
        participation.game_scores = parse_scores(
            data["game_scores"], "game_scores", max_length=tournament.game_count
        ) or []
    if "finals_scores" in data:
        participation.finals_scores = parse_scores(
            data["finals_scores"], "finals_scores", exact_lengths=(0, FINALS_GAMES)
        ) or []

    db.session.commit()
    logger.bind(tournament_id=tournament.id, player_id=participation.player_id).info(
        f"Results recorded: {len(participation.game_scores)} games, "
        f"{len(participation.finals_scores)} finals games"
    )
    return participation


def remove_participant(tournament_id, participation_id):
    tournament = get_tournament(tournament_id)
    participation = _get_participation(tournament, participation_id)
    _ensure_not_completed(tournament, "remove players from")

    player_id = participation.player_id
    db.session.delete(participation)
    db.session.commit()
    logger.bind(tournament_id=tournament.id, player_id=player_id).info(
        "Participant removed"
    )
