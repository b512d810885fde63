"""Errors raised by the room session layer.

Each error carries the HTTP status it maps to; the app-level handler in
``supp_trivia.__init__`` turns them into ``{"error": message}`` responses.
"""


class SessionError(Exception):
    status_code = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'error': self.message}


class ValidationError(SessionError):
    """A required field is missing or malformed."""
    status_code = 400


class NotFoundError(SessionError):
    status_code = 404


class StateError(SessionError):
    """The room is in the wrong phase for the operation."""
    status_code = 400


class ConflictError(SessionError):
    """Nickname already used in the room."""
    status_code = 400


class CapacityError(SessionError):
    status_code = 400


class TurnError(SessionError):
    """A team tried to play out of turn."""
    status_code = 400


class ConcurrentUpdateError(SessionError):
    """The room changed between read and write."""
    status_code = 409


class GenerationError(SessionError):
    """The judge call failed or its answer could not be used."""
    status_code = 500
