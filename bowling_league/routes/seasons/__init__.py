from flask import Blueprint

bp = Blueprint("seasons", __name__)

from bowling_league.routes.seasons import routes  # noqa: E402, F401
