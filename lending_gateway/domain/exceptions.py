"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """Input is malformed or outside the accepted range"""

    pass


class NotFoundError(DomainException):
    """Entity does not exist or is not owned by the caller"""

    pass


class ComputationError(DomainException):
    """Degenerate arithmetic input (e.g. a zero-period schedule)"""

    pass


class AuthenticationError(DomainException):
    """Credentials or employee id rejected"""

    pass


class ConflictError(DomainException):
    """Entity with the same unique key already exists"""

    pass


class StorageUnavailableError(DomainException):
    """Database read or write failed"""

    pass
