class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    """Raised when a requested record does not exist."""

    status_code = 404


class ConflictError(DomainError):
    """Raised when a record would duplicate an existing one."""

    status_code = 409


class BiometricError(DomainError):
    """Raised when the fingerprint helper or a device reports a failure."""

    status_code = 502


class DeviceConnectionError(BiometricError):
    """Raised when a biometric terminal cannot be reached."""
