class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials or a login code are invalid."""


class Forbidden(DomainError):
    """Raised when an actor's role does not allow an action."""


class NotFound(DomainError):
    """Raised when a referenced employee, absence or attendance does not exist."""


class DuplicateSessionError(DomainError):
    """Raised on a second check-in for the same employee and day."""


class ConfigurationError(DomainError):
    """Raised when a company rule is missing or malformed."""


class InvalidRangeError(DomainError):
    """Raised for an unknown report window."""


class ExternalNotificationError(DomainError):
    """Raised when the ledger side-channel call fails."""


class StorageError(DomainError):
    """Raised when the persistence layer fails."""


class DuplicateKeyError(StorageError):
    """Raised when an insert or update hits a unique key."""
