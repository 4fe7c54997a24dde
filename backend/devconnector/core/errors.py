"""
Error kinds raised by the profile/post services.

Each error carries the HTTP status the boundary layer reports it with and a
message that is safe to show to the caller.
"""
from typing import Any, Dict, List, Optional, Sequence

from fastapi import status


class ServiceError(Exception):
    """Base class for expected, classified service failures."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, object]:
        return {"message": self.message}


class UnauthenticatedError(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class UnauthorizedError(ServiceError):
    """Raised when a caller mutates an aggregate it does not own."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "User not authorized."


class ValidationError(ServiceError):
    """
    Raised with every violated field at once, never just the first one.

    Args:
        errors: List of {"field": ..., "message": ...} pairs
    """
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"

    def __init__(self, errors: List[Dict[str, str]], message: Optional[str] = None):
        self.errors = list(errors)
        super().__init__(message)

    def to_dict(self) -> Dict[str, object]:
        return {"message": self.message, "errors": self.errors}


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class AlreadyLikedError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Post already liked."


class NotLikedError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Post has not yet been liked."


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "The resource was modified concurrently, please retry."


class UpstreamUnavailableError(ServiceError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Repository lookup is currently unavailable"


class StoreUnavailableError(ServiceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server error"


def missing_fields(values: Dict[str, Optional[str]], messages: Dict[str, str]) -> List[Dict[str, str]]:
    """Return a {"field", "message"} pair for every field in ``messages`` left blank."""
    errors = []
    for field, message in messages.items():
        value = values.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            errors.append({"field": field, "message": message})
    return errors


def require_fields(values: Dict[str, Optional[str]], messages: Dict[str, str]) -> None:
    """
    Check that every field named in ``messages`` has a non-blank value.

    Raises:
        ValidationError: listing all missing fields together
    """
    errors = missing_fields(values, messages)
    if errors:
        raise ValidationError(errors)


def request_errors(raw_errors: Sequence[Dict[str, Any]]) -> List[Dict[str, str]]:
    """
    Convert FastAPI request validation errors into {"field", "message"} pairs.

    The leading ``body``/``query``/``path`` location is dropped, so a bad
    ``from`` in the body is reported as field ``from``.
    """
    errors = []
    for error in raw_errors:
        loc = [str(part) for part in error.get("loc", ())]
        if len(loc) > 1 and loc[0] in ("body", "query", "path", "header"):
            loc = loc[1:]
        errors.append({"field": ".".join(loc), "message": error.get("msg", "Invalid value")})
    return errors
