class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when a request carries no authenticated session."""


class AuthorizationError(DomainError):
    """Raised when a role lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a requested record does not exist."""
