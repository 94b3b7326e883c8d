"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the boundary layer can catch them uniformly.  Each subclass carries a
``category`` that the boundary maps to a distinct response (bad request,
not found, conflict).
"""


class DomainException(Exception):
    """Base class for all domain errors."""

    category = "conflict"


class ValidationError(DomainException):
    """Malformed input, e.g. a non-positive quantity."""

    category = "bad-request"


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    category = "not-found"


class InsufficientStockError(DomainException):
    """The requested quantity exceeds the units in stock."""


class InvalidStateError(DomainException):
    """The operation is not permitted in the order's current status."""


class InvalidTransitionError(DomainException):
    """The requested status change is not in the transition table."""


class ContentionError(DomainException):
    """Concurrent writers kept winning; bounded retries were exhausted."""
