"""Custom exceptions for RideLink."""


class RideLinkError(Exception):
    """Base class for all errors surfaced to callers."""
    pass


class ValidationError(RideLinkError):
    """Raised when required input is missing or malformed."""
    pass


class NotFoundError(RideLinkError):
    """Raised when a ride, driver, user or token cannot be found."""
    pass


class InvalidRoleError(RideLinkError):
    """Raised when a role string is not one of rider or driver."""
    pass


class ConflictError(RideLinkError):
    """Raised on duplicate registration or a lost concurrent update."""
    pass


class InvalidTransitionError(ConflictError):
    """Raised when a ride is not in a state the operation can start from."""
    pass


class AuthError(RideLinkError):
    """Base class for authentication errors."""
    pass


class InvalidCredentialsError(AuthError):
    """Raised when login fails. Never says which part was wrong."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class OtpNotFoundError(AuthError):
    """Raised when no one-time passcode is pending for the user."""

    def __init__(self, message: str = "OTP not found"):
        super().__init__(message)


class InvalidOtpError(AuthError):
    """Raised when a one-time passcode is wrong or expired."""

    def __init__(self, message: str = "Invalid or expired OTP"):
        super().__init__(message)


class UnauthorizedError(AuthError):
    """Raised when a session token is missing, unknown or expired."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class InvalidResetTokenError(AuthError):
    """Raised when a password reset token has expired."""

    def __init__(self, message: str = "Password reset token has expired"):
        super().__init__(message)


class StorageError(RideLinkError):
    """Raised when the data server cannot be reached or answers badly."""
    pass
