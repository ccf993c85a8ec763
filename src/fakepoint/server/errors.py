"""
Fakepoint Server Errors

Errors raised by the management layer and rendered as JSON ``{"error": ...}``
bodies by the server's exception handlers.
"""


class FakepointError(Exception):
    """Base error carrying the HTTP status it maps to."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'error': self.message}


class ValidationError(FakepointError):
    """Missing or invalid fields in a request body."""

    status_code = 400


class NotFoundError(FakepointError):
    """Unknown endpoint id."""

    status_code = 404


class ConflictError(FakepointError):
    """Another endpoint already owns the (path, method) key."""

    status_code = 409
