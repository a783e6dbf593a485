"""Domain errors raised by the service layer.

Routers never catch these one by one; ``liftlog.main`` registers exception
handlers that map them onto HTTP responses.
"""


class LiftLogError(Exception):
    """Base class for every error raised on purpose by the service layer."""

    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFound(LiftLogError):
    """A referenced row does not exist or is not owned by the caller."""

    status_code = 404

    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class WriteFailure(LiftLogError):
    """The top-level row of an operation could not be written."""

    status_code = 500


class WriteConflict(WriteFailure):
    """A concurrent writer got there first; the request can be retried."""

    status_code = 409


class DuplicateWorkout(WriteConflict):
    pass


class InvalidTransition(LiftLogError):
    """The requested lifecycle change is not valid for the day's current state."""

    status_code = 409
