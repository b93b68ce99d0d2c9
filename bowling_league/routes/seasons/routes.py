from flask import jsonify

from bowling_league.routes import get_json_body
from bowling_league.routes.seasons import bp
from bowling_league.services import season_service


@bp.route("", methods=["GET"])
def list_seasons():
    """Get all seasons, newest first"""
    return jsonify([season.to_dict() for season in season_service.list_seasons()])


@bp.route("", methods=["POST"])
def create_season():
    season = season_service.create_season(get_json_body())
    return jsonify(season.to_dict()), 201


@bp.route("/active")
def active_season():
    """Get the current active season"""
    return jsonify(season_service.get_active_season().to_dict(include_tournaments=True))


@bp.route("/active/leaderboard")
def active_leaderboard():
    return jsonify(season_service.get_active_leaderboard())


@bp.route("/<int:season_id>")
def season_detail(season_id):
    season = season_service.get_season(season_id)
    return jsonify(season.to_dict(include_tournaments=True))


@bp.route("/<int:season_id>", methods=["PUT", "PATCH"])
def update_season(season_id):
    season = season_service.update_season(season_id, get_json_body())
    return jsonify(season.to_dict())


@bp.route("/<int:season_id>", methods=["DELETE"])
def delete_season(season_id):
    season_service.delete_season(season_id)
    return jsonify({"message": "Season deleted successfully"})


@bp.route("/<int:season_id>/activate", methods=["POST"])
def activate_season(season_id):
    season = season_service.activate_season(season_id)
    return jsonify(season.to_dict())


@bp.route("/<int:season_id>/leaderboard")
def season_leaderboard(season_id):
    """Season standings by total rating points"""
    return jsonify(season_service.get_leaderboard(season_id))


@bp.route("/<int:season_id>/rating-config", methods=["GET"])
def get_rating_config(season_id):
    return jsonify(season_service.get_rating_config(season_id))


@bp.route("/<int:season_id>/rating-config", methods=["PUT"])
def set_rating_config(season_id):
    data = get_json_body()
    config = season_service.set_rating_config(
        season_id, data.get("points_distribution")
    )
    return jsonify(config)
