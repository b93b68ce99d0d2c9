"""Exceptions raised by the league services and the scoring core"""


class LeagueError(Exception):
    """Base exception for all league errors.

    Route handlers translate subclasses into JSON error responses using
    ``status_code``.
    """

    status_code = 400

    def __init__(self, message=None):
        super().__init__(message)
        self.message = message or self.__class__.__doc__


class NotFoundError(LeagueError):
    """Requested resource was not found"""

    status_code = 404


class ValidationError(LeagueError):
    """Submitted data is invalid"""

    status_code = 400


class ConflictError(LeagueError):
    """Request conflicts with the current state of the resource"""

    status_code = 409


class InvalidTransitionError(ConflictError):
    """Tournament status transition is not allowed"""


class InvalidPointsDistributionError(ValidationError):
    """Points distribution must map positive placements to non-negative points"""
