"""Parsing helpers for request payloads and CLI arguments"""

from datetime import date, datetime

from bowling_league.errors import ValidationError


def parse_date(value, field="date"):
    """Parse an ISO date (or datetime) string into a date"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required (YYYY-MM-DD)")
    text = value.strip()
    try:
        if len(text) > 10:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        return date.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"{field} must be an ISO date (YYYY-MM-DD), got {value!r}")


def require_string(data, field, max_length=None):
    value = data.get(field)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required")
    value = value.strip()
    if max_length and len(value) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return value


def optional_string(data, field, max_length=None):
    if data.get(field) is None:
        return None
    return require_string(data, field, max_length)


def optional_int(data, field, minimum=None):
    value = data.get(field)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer")
    if minimum is not None and value < minimum:
        raise ValidationError(f"{field} must be at least {minimum}")
    return value


def optional_bool(data, field):
    value = data.get(field)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise ValidationError(f"{field} must be true or false")
    return value


def parse_scores(value, field, max_length=None, exact_lengths=None):
    """
    Validate a list of bowling scores.

    Every entry must be a non-negative integer; 0 marks a game not played.
    """
    if value is None:
        return None
    if not isinstance(value, list):
        raise ValidationError(f"{field} must be a list of scores")
    for score in value:
        if isinstance(score, bool) or not isinstance(score, int) or score < 0:
            raise ValidationError(f"{field} must contain non-negative integers")
    if max_length is not None and len(value) > max_length:
        raise ValidationError(f"{field} accepts at most {max_length} games")
    if exact_lengths is not None and len(value) not in exact_lengths:
        allowed = " or ".join(str(n) for n in exact_lengths)
        raise ValidationError(f"{field} must contain {allowed} scores")
    return list(value)


def months_between(start_date, end_date):
    """Calendar months from start to end, ignoring the day of month"""
    return (end_date.year - start_date.year) * 12 + (end_date.month - start_date.month)
