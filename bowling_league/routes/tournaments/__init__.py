from flask import Blueprint

bp = Blueprint("tournaments", __name__)

from bowling_league.routes.tournaments import routes  # noqa: E402, F401
