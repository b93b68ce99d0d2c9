from flask import current_app, jsonify, request

from bowling_league import limiter
from bowling_league.routes import get_json_body, page_args, paginated
from bowling_league.routes.players import bp
from bowling_league.services import player_service


def _is_active_arg():
    value = request.args.get("is_active")
    if value is None:
        return None
    return value.lower() in ("1", "true", "yes")


@bp.route("", methods=["GET"])
def list_players():
    """Roster, optionally filtered by ?search= and ?is_active="""
    page, per_page = page_args(current_app.config.get("ITEMS_PER_PAGE", 10))
    pagination = player_service.list_players(
        search=request.args.get("search"),
        is_active=_is_active_arg(),
        page=page,
        per_page=per_page,
    )
    return jsonify(paginated(pagination, [p.to_dict() for p in pagination.items]))


@bp.route("/suggestions")
def suggest_players():
    """Name autocomplete over active players, ?q= and optional ?limit="""
    limit = min(request.args.get("limit", player_service.SUGGESTION_LIMIT, type=int), 50)
    players = player_service.suggest_players(request.args.get("q", ""), limit=max(limit, 1))
    return jsonify([{**p.to_summary(), "email": p.email} for p in players])


@bp.route("", methods=["POST"])
@limiter.limit("60 per hour")
def create_player():
    player = player_service.create_player(get_json_body())
    return jsonify(player.to_dict()), 201


@bp.route("/<int:player_id>")
def player_detail(player_id):
    return jsonify(player_service.player_detail(player_id))


@bp.route("/<int:player_id>", methods=["PUT", "PATCH"])
def update_player(player_id):
    player = player_service.update_player(player_id, get_json_body())
    return jsonify(player.to_dict())


@bp.route("/<int:player_id>", methods=["DELETE"])
def deactivate_player(player_id):
    """Players are never hard-deleted; their results feed past leaderboards"""
    player = player_service.deactivate_player(player_id)
    return jsonify(player.to_dict())
