"""
Domain Errors

Exception types raised by the services and repositories. Controllers map
each one onto an HTTP status code.
"""


class BitWordError(Exception):
    """Base class for all BitWord domain errors."""
    status_code = 500


class NotFoundError(BitWordError):
    """A referenced game record does not exist."""
    status_code = 404


class EmptyCatalogError(BitWordError):
    """No active term exists for the requested difficulty."""
    status_code = 404

    def __init__(self, difficulty):
        self.difficulty = difficulty
        super().__init__(f"No word available for difficulty '{difficulty}'")


class ValidationError(BitWordError):
    """Malformed input, rejected before any state is touched."""
    status_code = 400


class AlreadyCompletedError(BitWordError):
    """Completion was requested for a game that is already completed."""
    status_code = 409


class RepositoryError(BitWordError):
    """The underlying storage failed or is unavailable."""
    status_code = 500
