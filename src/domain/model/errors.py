"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Route handlers catch them and map to appropriate HTTP status codes.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class NotFoundError(DomainError):
    """Requested entity does not exist."""


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""


class ValidationError(DomainError):
    """Input violates a business validation rule."""


class UserNotFoundError(NotFoundError):
    """No user is registered with the given email."""


class DuplicateEmailError(DuplicateError):
    """A user with this email is already registered."""


class InvalidCredentialsError(DomainError):
    """Email/password pair does not match any user.

    Raised identically for unknown emails and wrong passwords.
    """


class InvalidOrExpiredTokenError(DomainError):
    """Reset token is unknown, already used, or past its expiry."""


class MailDeliveryError(DomainError):
    """Email could not be rendered or handed to the transport."""


class StoreError(DomainError):
    """User store failed (connectivity or unclassified driver error)."""
