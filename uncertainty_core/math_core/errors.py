"""Error taxonomy for uncertain arithmetic.

Every error is raised synchronously at the point where a contract is
violated. Each class also derives from the matching builtin so callers can
keep using ``except ValueError`` / ``except ZeroDivisionError``.
"""


class UncertaintyError(Exception):
    """Base class for all errors raised by uncertainty_core."""
    pass


class DomainError(UncertaintyError, ValueError):
    """Raised when a mean, variance or raw value is NaN, infinite or negative."""
    pass


class DivisionByZeroError(UncertaintyError, ZeroDivisionError):
    """Raised when the divisor's mean is exactly zero."""
    pass


class InvalidArgumentError(UncertaintyError, ValueError):
    """Raised for absent or empty sample collections and bad settings."""
    pass
