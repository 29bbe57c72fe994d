from typing import Any, Dict, Optional


class MomentumError(Exception):
    """Base class for errors surfaced to API callers and client code."""

    status_code: int = 500
    default_error_type: str = "momentum_error"

    def __init__(self, message: str, error_type: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.error_type = error_type or self.default_error_type
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "detail": self.message,
            "error_type": self.error_type,
            "details": self.details,
        }


class ValidationError(MomentumError):
    """A required field is missing or a value is malformed."""
    status_code = 400
    default_error_type = "validation_error"


class FutureDateError(ValidationError):
    """A habit completion was requested for a day that has not happened yet."""
    status_code = 422
    default_error_type = "future_date"


class AuthorizationError(MomentumError):
    """The caller does not own the record, or is not authenticated."""
    status_code = 403
    default_error_type = "authorization_error"


class AuthenticationError(AuthorizationError):
    """Credentials are missing or wrong."""
    status_code = 401
    default_error_type = "authentication_error"


class NotFoundError(MomentumError):
    status_code = 404
    default_error_type = "not_found"


class NetworkError(MomentumError):
    """Transport or backend failure."""
    status_code = 503
    default_error_type = "network_error"


ERROR_TYPES = {
    cls.default_error_type: cls
    for cls in (MomentumError, ValidationError, FutureDateError,
                AuthorizationError, AuthenticationError, NotFoundError, NetworkError)
}


def error_from_payload(status: int, payload: Optional[Dict[str, Any]]) -> MomentumError:
    """Rebuild a domain error from an API error response."""
    payload = payload or {}
    detail = payload.get("detail") or f"Request failed with status {status}"
    if not isinstance(detail, str):
        # FastAPI request validation returns a list of problems
        detail = str(detail)
    error_type = payload.get("error_type")
    details = payload.get("details") or {}

    cls = ERROR_TYPES.get(error_type)
    if cls is None:
        if status == 401:
            cls = AuthenticationError
        elif status == 403:
            cls = AuthorizationError
        elif status == 404:
            cls = NotFoundError
        elif status in (400, 409, 422):
            cls = ValidationError
        else:
            cls = NetworkError
    return cls(detail, error_type=error_type, details=details)
