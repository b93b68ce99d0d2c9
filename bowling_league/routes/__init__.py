"""Helpers shared by the JSON blueprints"""

from flask import request

from bowling_league.errors import ValidationError


def get_json_body():
    """Request JSON object, or a ValidationError for anything else"""
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def page_args(default_per_page=10):
    page = max(request.args.get("page", 1, type=int), 1)
    per_page = request.args.get("per_page", default_per_page, type=int)
    return page, min(max(per_page, 1), 100)


def paginated(pagination, items):
    return {
        "data": items,
        "meta": {
            "total": pagination.total,
            "page": pagination.page,
            "per_page": pagination.per_page,
            "pages": pagination.pages,
        },
    }
