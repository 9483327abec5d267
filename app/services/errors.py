"""Service-level errors. Each maps to one HTTP status and a client-safe message."""


class ServiceError(Exception):
    """Base class for errors returned to clients as {"status": "error", "message": ...}."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ValidationFailedError(ServiceError):
    """Raised when input fails shape or length checks, before any store access."""

    status_code = 422


class DuplicateEmailError(ServiceError):
    """Raised when an insert violates the unique email constraint."""

    status_code = 409

    def __init__(self, message: str = "Email already registered.") -> None:
        super().__init__(message)


class RecordNotFoundError(ServiceError):
    """Raised when a history record does not exist."""

    status_code = 404

    def __init__(self, message: str = "History entry not found.") -> None:
        super().__init__(message)


class UnauthorizedError(ServiceError):
    """Raised for a missing session and for an insufficient role alike."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class StoreError(ServiceError):
    """Raised when the database fails; the underlying detail is only logged."""

    status_code = 500
