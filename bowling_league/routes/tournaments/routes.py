from flask import current_app, jsonify, request

from bowling_league import limiter
from bowling_league.errors import ValidationError
from bowling_league.routes import get_json_body, page_args, paginated
from bowling_league.routes.tournaments import bp
from bowling_league.services import tournament_service


def _player_id(data):
    player_id = data.get("player_id")
    if isinstance(player_id, bool) or not isinstance(player_id, int):
        raise ValidationError("player_id is required")
    return player_id


@bp.route("/tournaments", methods=["GET"])
def list_tournaments():
    """Tournaments, filterable by season_id, status, from_date and to_date"""
    page, per_page = page_args(current_app.config.get("ITEMS_PER_PAGE", 10))
    pagination = tournament_service.list_tournaments(
        season_id=request.args.get("season_id", type=int),
        status=request.args.get("status"),
        from_date=request.args.get("from_date"),
        to_date=request.args.get("to_date"),
        page=page,
        per_page=per_page,
    )
    return jsonify(paginated(pagination, [t.to_dict() for t in pagination.items]))


@bp.route("/tournaments", methods=["POST"])
def create_tournament():
    tournament = tournament_service.create_tournament(get_json_body())
    return jsonify(tournament.to_dict()), 201


@bp.route("/tournaments/upcoming")
def upcoming_tournaments():
    limit = min(max(request.args.get("limit", 5, type=int), 1), 50)
    tournaments = tournament_service.get_upcoming(limit=limit)
    return jsonify([t.to_dict() for t in tournaments])


@bp.route("/tournaments/<int:tournament_id>")
def tournament_detail(tournament_id):
    """Tournament with participants in final standing order"""
    tournament = tournament_service.get_tournament(tournament_id)
    return jsonify(tournament.to_dict(include_participants=True))


@bp.route("/tournaments/<int:tournament_id>", methods=["PUT", "PATCH"])
def update_tournament(tournament_id):
    tournament = tournament_service.update_tournament(tournament_id, get_json_body())
    return jsonify(tournament.to_dict())


@bp.route("/tournaments/<int:tournament_id>", methods=["DELETE"])
def delete_tournament(tournament_id):
    tournament_service.delete_tournament(tournament_id)
    return jsonify({"message": "Tournament deleted successfully"})


@bp.route("/tournaments/<int:tournament_id>/status", methods=["PATCH", "PUT"])
def update_status(tournament_id):
    data = get_json_body()
    if not data.get("status"):
        raise ValidationError("status is required")
    tournament = tournament_service.update_status(tournament_id, data["status"])
    return jsonify(tournament.to_dict(include_participants=True))


@bp.route("/tournaments/<int:tournament_id>/participants", methods=["GET"])
def list_participants(tournament_id):
    participations = tournament_service.list_participants(tournament_id)
    return jsonify([p.to_dict() for p in participations])


@bp.route("/tournaments/<int:tournament_id>/participants", methods=["POST"])
def add_participant(tournament_id):
    """Admit a player directly"""
    participation = tournament_service.add_participant(
        tournament_id, _player_id(get_json_body())
    )
    return jsonify(participation.to_dict()), 201


@bp.route(
    "/tournaments/<int:tournament_id>/participants/<int:participation_id>",
    methods=["PATCH", "PUT"],
)
def record_results(tournament_id, participation_id):
    participation = tournament_service.record_results(
        tournament_id, participation_id, get_json_body()
    )
    return jsonify(participation.to_dict())


@bp.route(
    "/tournaments/<int:tournament_id>/participants/<int:participation_id>",
    methods=["DELETE"],
)
def remove_participant(tournament_id, participation_id):
    tournament_service.remove_participant(tournament_id, participation_id)
    return jsonify({"message": "Participant removed successfully"})


@bp.route("/tournaments/<int:tournament_id>/applications", methods=["GET"])
def list_applications(tournament_id):
    applications = tournament_service.list_applications(
        tournament_id, status=request.args.get("status")
    )
    return jsonify([a.to_dict() for a in applications])


@bp.route("/tournaments/<int:tournament_id>/applications", methods=["POST"])
@limiter.limit("20 per hour")
def apply_to_tournament(tournament_id):
    application = tournament_service.apply_to_tournament(
        tournament_id, _player_id(get_json_body())
    )
    return jsonify(application.to_dict()), 201


@bp.route("/applications/<int:application_id>/approve", methods=["POST"])
def approve_application(application_id):
    application, participation = tournament_service.approve_application(application_id)
    return jsonify(
        {"application": application.to_dict(), "participation": participation.to_dict()}
    )


@bp.route("/applications/<int:application_id>/reject", methods=["POST"])
def reject_application(application_id):
    application = tournament_service.reject_application(application_id)
    return jsonify(application.to_dict())
