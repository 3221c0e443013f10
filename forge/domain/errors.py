"""
Domain error taxonomy.

Every error carries the HTTP status code the API layer answers with.
"""


class ForgeError(Exception):
    """Base class for errors raised by the site evaluation core."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ForgeError, ValueError):
    """Missing or malformed input: required fields, negative area, unknown category."""

    status_code = 400


class NotFoundError(ForgeError):
    """Record absent in the caller's owned scope."""

    status_code = 404


class InvalidStateError(ForgeError):
    """Operation not allowed for the record's current status."""

    status_code = 409
