from flask import Blueprint

bp = Blueprint("players", __name__)

from bowling_league.routes.players import routes  # noqa: E402, F401
