"""
Fixture engine error taxonomy.

Services raise these; the HTTP layer renders them as
{"success": false, "error": "<message>"} with the class's status code.
"""


class FixtureError(Exception):
    """Base class for all fixture engine errors"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FixtureError):
    """Input cannot produce a fixture (too few participants, bad category, bad age-group config)"""

    status_code = 400


class ForbiddenError(FixtureError):
    """Caller lacks the role required for the operation"""

    status_code = 403


class NotFoundError(FixtureError):
    """Tournament, participant or match missing"""

    status_code = 404


class ConflictError(FixtureError):
    """Fixtures already generated, or a terminal match would change"""

    status_code = 409


class PersistenceError(FixtureError):
    """Storage write failed; the batch was rolled back"""

    status_code = 500
