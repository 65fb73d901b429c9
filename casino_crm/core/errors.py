"""
Error Taxonomy Module

Every failure a request handler can report is one of the exceptions below.
Each carries the HTTP status it is rendered with; the handlers registered in
``casino_crm.main`` turn them into ``{"error": message}`` responses.
"""


class CRMError(Exception):
    """Base class for errors that map to a flat ``{"error": ...}`` body."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(CRMError):
    status_code = 401
    default_message = "Unauthorized"


class ValidationError(CRMError):
    """A required field is missing or a parameter has an unusable value."""
    status_code = 400
    default_message = "Invalid request"


class ConflictError(CRMError):
    """
    A unique field (e.g. client email) is already taken.

    Rendered as 400 like any other rejected input.
    """
    status_code = 400
    default_message = "Resource already exists"


class NotFoundError(CRMError):
    status_code = 404
    default_message = "Not found"


class ReferenceNotFoundError(NotFoundError):
    """
    A row referenced from the request body does not exist.

    Rendered as 400: the request is at fault, not the addressed resource.
    """
    status_code = 400


class UpstreamError(CRMError):
    """Any other failure of the database or the object store."""
    status_code = 500
    default_message = "Upstream service failure"
