"""Domain exceptions raised by services and mapped to HTTP responses by the API layer."""


class CarRentalError(Exception):
    """Base class for all expected, client-facing failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidOperationError(CarRentalError):
    """Raised when a request is well-formed but violates a business rule."""
    pass


class AuthenticationError(CarRentalError):
    """Raised when authentication fails."""
    pass


class PermissionDeniedError(CarRentalError):
    """Raised when an authenticated user may not perform an action."""
    pass


class ResourceNotFoundError(CarRentalError):
    """Raised when a referenced resource does not exist."""
    pass


class ConflictError(CarRentalError):
    """Raised when an operation conflicts with existing state."""
    pass
