"""Error taxonomy shared by the API and the client layer.

Each error carries the HTTP status it maps to; the API renders them as
``{"success": false, "message": ..., "errors": ...}``.
"""

from typing import Any, List, Optional


class PortalError(Exception):
    """Base class for all application errors"""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Any]] = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"success": False, "message": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body


class ValidationError(PortalError):
    """Malformed or missing input; also raised for weak passwords"""

    status_code = 400
    default_message = "Validation errors"


class AuthenticationError(PortalError):
    """Bad credentials, bad or expired token, unknown user"""

    status_code = 401
    default_message = "Invalid credentials"


class AuthorizationError(PortalError):
    """Role or ownership check failed"""

    status_code = 403
    default_message = "Insufficient permissions"


class NotFoundError(PortalError):
    status_code = 404
    default_message = "Resource not found"


class ConflictError(PortalError):
    """Duplicate value for a unique field"""

    status_code = 409
    default_message = "Resource already exists"


class InternalError(PortalError):
    status_code = 500
    default_message = "Internal server error"


ERRORS_BY_STATUS = {
    cls.status_code: cls
    for cls in (ValidationError, AuthenticationError, AuthorizationError, NotFoundError, ConflictError)
}


def error_for_status(status_code: int, message: Optional[str] = None, errors: Optional[List[Any]] = None) -> PortalError:
    """Build the error matching an HTTP status code (500 for anything unknown)"""
    cls = ERRORS_BY_STATUS.get(status_code, InternalError)
    return cls(message, errors)
