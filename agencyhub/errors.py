"""Typed failures raised by the domain services.

Each kind carries the HTTP status the API layer answers with, so the
presentation layer can tell them apart without parsing messages.
"""


class AgencyHubError(Exception):
    """Base exception for AgencyHub domain failures."""

    status_code = 500
    kind = "internal_error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__


class NotFoundError(AgencyHubError):
    """Requested record does not exist."""

    status_code = 404
    kind = "not_found"


class UnauthorizedError(AgencyHubError):
    """Missing or invalid credentials."""

    status_code = 401
    kind = "unauthorized"


class ForbiddenError(AgencyHubError):
    """Requester may not access this resource."""

    status_code = 403
    kind = "forbidden"


class InvalidInputError(AgencyHubError):
    """Malformed or missing input."""

    status_code = 400
    kind = "invalid_input"


class InvalidTimeZoneError(InvalidInputError):
    """Unrecognized IANA time zone."""

    kind = "invalid_time_zone"


class InvalidDateTimeError(InvalidInputError):
    """Malformed date or time string."""

    kind = "invalid_date_time"


class InvalidStatusTransitionError(InvalidInputError):
    """Status change not allowed from the current status."""

    kind = "invalid_status_transition"


class ConflictError(AgencyHubError):
    """Identity already exists."""

    status_code = 409
    kind = "conflict"
