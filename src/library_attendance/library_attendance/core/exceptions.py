class DomainError(Exception):
    """Base exception for business rule violations."""

    http_status = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidOrExpiredTokenError(ValidationError):
    """Raised when a QR token is unknown or already expired (never distinguished)."""

    def __init__(self, message: str = "Invalid or expired QR code"):
        super().__init__(message)


class LocationRequiredError(ValidationError):
    """Raised when a submission lacks numeric lat/lng but one is required."""

    def __init__(self, message: str = "Location required"):
        super().__init__(message)


class InvalidDescriptorError(ValidationError):
    """Raised when a face descriptor is not exactly 128 numbers."""

    def __init__(self, message: str = "Invalid face descriptor"):
        super().__init__(message)


class NotEnrolledError(ValidationError):
    """Raised when verifying a face for a user without a stored descriptor."""

    def __init__(self, message: str = "Face not registered for this user"):
        super().__init__(message)


class FaceMismatchError(ValidationError):
    """Raised when a server-side face check rejects the supplied descriptor."""

    def __init__(self, message: str = "Face verification failed"):
        super().__init__(message)


class AuthenticationError(DomainError):
    """Raised when credentials or bearer tokens are missing or invalid."""

    http_status = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    http_status = 403


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""

    http_status = 404
