class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class ConfigError(DomainError):
    """Raised when no active semester (or other required configuration) exists for "now"."""


class WindowClosedError(DomainError):
    """Raised when an action is attempted outside its legal time window."""


class StateError(DomainError):
    """Raised when the ledger is not in a state that allows the action."""


class ConflictError(DomainError):
    """Raised when the action collides with something already recorded."""


class NotFoundError(DomainError):
    """Raised when a referenced class or user does not exist."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""
