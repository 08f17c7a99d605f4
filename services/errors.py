"""
Workflow error taxonomy.

Services raise these; the API blueprints turn them into
{"ok": false, "error": ...} responses using the carried status code.
"""


class WorkflowError(Exception):
    """Base class for errors raised by workflow services."""
    status_code = 500

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {'ok': False, 'error': self.message}


class NotFoundError(WorkflowError):
    """A referenced entity does not exist."""
    status_code = 404


class InvalidTransitionError(WorkflowError):
    """The entity's current status does not allow the requested change."""
    status_code = 400


class WorkflowValidationError(WorkflowError):
    """The request is missing data or the linked records are incomplete."""
    status_code = 400
