"""Error taxonomy shared by every bounded context.

Business-rule failures are raised as typed errors. Each error carries an
``ErrorKind`` and the HTTP status it maps to, so the API layer can translate
errors without inspecting message text.
"""

from enum import Enum


class ErrorKind(Enum):
    INVALID_ARGUMENT = "invalid_argument"
    NOT_FOUND = "not_found"
    INSUFFICIENT_STOCK = "insufficient_stock"
    INVALID_STATE = "invalid_state"
    ACCESS_DENIED = "access_denied"
    INTERNAL = "internal"


class DomainError(Exception):
    """Base class for all errors raised by the domain."""

    kind = ErrorKind.INTERNAL
    status_code = 500

    def __init__(self, message: str, **details) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        return {"error": self.kind.value, "message": self.message}


class InvalidArgument(DomainError):
    """Malformed input, detected before any mutation."""

    kind = ErrorKind.INVALID_ARGUMENT
    status_code = 400


class NotFound(DomainError):
    """Unknown product or order."""

    kind = ErrorKind.NOT_FOUND
    status_code = 404


class InsufficientStock(DomainError):
    """Requested quantity exceeds the stock currently available."""

    kind = ErrorKind.INSUFFICIENT_STOCK
    status_code = 400

    def __init__(self, message: str, product_id: str, available: int, requested: int) -> None:
        super().__init__(message, product_id=product_id, available=available, requested=requested)
        self.product_id = product_id
        self.available = available
        self.requested = requested


class InvalidState(DomainError):
    """Illegal lifecycle transition or mutation of an immutable field."""

    kind = ErrorKind.INVALID_STATE
    status_code = 400


class AccessDenied(DomainError):
    """The requester does not own the resource.

    Reported as 404 so that the existence of other users' orders is not leaked.
    """

    kind = ErrorKind.ACCESS_DENIED
    status_code = 404


class Internal(DomainError):
    """Unexpected failure."""

    kind = ErrorKind.INTERNAL
    status_code = 500
