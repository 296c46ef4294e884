"""
Uncertain Value

An immutable (mean, variance) pair propagated through arithmetic with
first-order error propagation:
- Validated construction (finite mean, finite non-negative variance)
- Construction from raw floats with a ULP-derived variance
- +, -, *, / with variance saturation on every result
- Exact structural equality and a consistent hash

Operands are always treated as independent; no covariance is tracked.
"""

from __future__ import annotations
import math
import numbers
import numpy as np
from dataclasses import dataclass
from decimal import Decimal
from functools import singledispatch
from typing import Iterable, Optional, Tuple, Union

from scipy import stats

from .errors import DomainError, InvalidArgumentError
from .error_propagation import (
    PropagationRule, propagate_add, propagate_subtract,
    propagate_multiply, propagate_divide
)
from .rounding_model import BINARY32, BINARY64, FloatFormat, representation_variance
from .saturation import DEFAULT_SATURATION, SaturationPolicy


Operand = Union['UncertainValue', numbers.Real, Decimal]


def _to_float64(value, name: str = 'value') -> float:
    """Promote a supported numeric to a Python float (binary64)."""
    if isinstance(value, (str, bytes)):
        raise TypeError(f"{name} must be a number, got {type(value).__name__}")
    try:
        return float(value)
    except OverflowError as exc:
        raise DomainError(f"{name} is out of float64 range: {value!r}") from exc
    except ValueError as exc:
        # e.g. a signalling Decimal NaN
        raise DomainError(f"{name} is not a finite number: {value!r}") from exc


@dataclass(frozen=True)
class UncertainValue:
    """
    A measurement result: central estimate plus squared uncertainty.

    Attributes:
        mean: Central estimate, always finite
        variance: sigma^2, always finite and >= 0

    Two values are equal only when both fields match exactly. Values that
    are statistically indistinguishable but carry different bits are not
    equal; use ``overlaps`` for that question.
    """
    mean: float
    variance: float

    # Make numpy scalars defer to the reflected operators below
    __array_ufunc__ = None

    def __post_init__(self):
        mean = _to_float64(self.mean, 'mean')
        variance = _to_float64(self.variance, 'variance')

        if not math.isfinite(mean):
            raise DomainError(f"Mean must be finite, got {mean!r}")
        if not math.isfinite(variance) or variance < 0:
            raise DomainError(f"Variance must be finite and >= 0, got {variance!r}")

        object.__setattr__(self, 'mean', mean)
        object.__setattr__(self, 'variance', variance)

    # -------------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------------

    @classmethod
    def from_mean_variance(cls, mean: float, variance: float) -> 'UncertainValue':
        """Create from an explicit mean and variance."""
        return cls(mean, variance)

    @classmethod
    def from_mean_stddev(cls, mean: float, stddev: float) -> 'UncertainValue':
        """
        Create from a mean and a standard deviation.

        Raises:
            DomainError: if mean is not finite or stddev is NaN, infinite
                or negative
        """
        stddev = _to_float64(stddev, 'stddev')
        if not math.isfinite(stddev) or stddev < 0:
            raise DomainError(f"Standard deviation must be finite and >= 0, got {stddev!r}")
        return cls(mean, stddev * stddev)

    @classmethod
    def from_float(cls, value: Union[numbers.Real, Decimal]) -> 'UncertainValue':
        """
        Create from a raw number, deriving variance from its rounding error.

        numpy.float32 uses the binary32 ULP; every other supported type is
        promoted to binary64 first.

        Raises:
            DomainError: if value is NaN, infinite or overflows float64
            TypeError: for non-numeric input
        """
        return _from_number(value)

    @classmethod
    def from_samples(cls, samples: Iterable['UncertainValue']) -> 'UncertainValue':
        """Combine samples into one value (statistical + instrumental variance)."""
        from .aggregation import from_samples
        return from_samples(samples)

    @classmethod
    def from_numeric_samples(cls, samples) -> 'UncertainValue':
        """Combine raw numeric samples, each converted with ``from_float``."""
        from .aggregation import from_numeric_samples
        return from_numeric_samples(samples)

    # -------------------------------------------------------------------------
    # Derived quantities
    # -------------------------------------------------------------------------

    @property
    def stddev(self) -> float:
        return math.sqrt(self.variance)

    @property
    def is_exact(self) -> bool:
        return self.variance == 0

    @property
    def relative_uncertainty(self) -> float:
        """stddev / |mean|; inf for an uncertain zero, 0 for an exact zero."""
        stddev = self.stddev
        if self.mean == 0:
            return float('inf') if stddev > 0 else 0.0
        return stddev / abs(self.mean)

    def confidence_interval(self, confidence: float = 0.95) -> Tuple[float, float]:
        """Two-sided normal confidence interval as (lower, upper)."""
        if not 0 < confidence < 1:
            raise InvalidArgumentError(f"confidence must be in (0, 1), got {confidence!r}")
        z = stats.norm.ppf((1 + confidence) / 2)
        half_width = float(z) * self.stddev
        return (self.mean - half_width, self.mean + half_width)

    def overlaps(self, other: 'UncertainValue', k: float = 1.0) -> bool:
        """
        True when the mean ± k*stddev intervals of both values intersect.

        Statistical compatibility check; ``==`` stays exact.
        """
        if not (math.isfinite(k) and k >= 0):
            raise InvalidArgumentError(f"k must be finite and >= 0, got {k!r}")
        return abs(self.mean - other.mean) <= k * (self.stddev + other.stddev)

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def _propagate(self, other: 'UncertainValue', rule: PropagationRule,
                   policy: Optional[SaturationPolicy]) -> 'UncertainValue':
        policy = policy or DEFAULT_SATURATION
        mean, variance = rule(self.mean, self.variance, other.mean, other.variance)
        return UncertainValue(mean, policy.saturate(mean, variance))

    def add(self, other: Operand, policy: Optional[SaturationPolicy] = None) -> 'UncertainValue':
        return self._propagate(_require_operand(other), propagate_add, policy)

    def subtract(self, other: Operand, policy: Optional[SaturationPolicy] = None) -> 'UncertainValue':
        return self._propagate(_require_operand(other), propagate_subtract, policy)

    def multiply(self, other: Operand, policy: Optional[SaturationPolicy] = None) -> 'UncertainValue':
        return self._propagate(_require_operand(other), propagate_multiply, policy)

    def divide(self, other: Operand, policy: Optional[SaturationPolicy] = None) -> 'UncertainValue':
        """
        Divide by another value.

        Raises:
            DivisionByZeroError: if other's mean is exactly zero
            DomainError: if the quotient's mean overflows
        """
        return self._propagate(_require_operand(other), propagate_divide, policy)

    def __add__(self, other):
        other = _coerce_operand(other)
        if other is NotImplemented:
            return other
        return self._propagate(other, propagate_add, None)

    def __radd__(self, other):
        other = _coerce_operand(other)
        if other is NotImplemented:
            return other
        return other._propagate(self, propagate_add, None)

    def __sub__(self, other):
        other = _coerce_operand(other)
        if other is NotImplemented:
            return other
        return self._propagate(other, propagate_subtract, None)

    def __rsub__(self, other):
        other = _coerce_operand(other)
        if other is NotImplemented:
            return other
        return other._propagate(self, propagate_subtract, None)

    def __mul__(self, other):
        other = _coerce_operand(other)
        if other is NotImplemented:
            return other
        return self._propagate(other, propagate_multiply, None)

    def __rmul__(self, other):
        other = _coerce_operand(other)
        if other is NotImplemented:
            return other
        return other._propagate(self, propagate_multiply, None)

    def __truediv__(self, other):
        other = _coerce_operand(other)
        if other is NotImplemented:
            return other
        return self._propagate(other, propagate_divide, None)

    def __rtruediv__(self, other):
        other = _coerce_operand(other)
        if other is NotImplemented:
            return other
        return other._propagate(self, propagate_divide, None)

    def __neg__(self) -> 'UncertainValue':
        return UncertainValue(-self.mean, self.variance)

    def __pos__(self) -> 'UncertainValue':
        return self

    # -------------------------------------------------------------------------
    # Presentation
    # -------------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.mean:g} ± {self.stddev:g}"

    def __format__(self, format_spec: str) -> str:
        if not format_spec:
            return str(self)
        return f"{format(self.mean, format_spec)} ± {format(self.stddev, format_spec)}"


# =============================================================================
# OPERAND COERCION
# =============================================================================

def _coerce_operand(other):
    """Promote a plain real number through the rounding model."""
    if isinstance(other, UncertainValue):
        return other
    if isinstance(other, (numbers.Real, Decimal)):
        return _from_number(other)
    return NotImplemented


def _require_operand(other) -> UncertainValue:
    coerced = _coerce_operand(other)
    if coerced is NotImplemented:
        raise TypeError(f"Unsupported operand type: {type(other).__name__}")
    return coerced


# =============================================================================
# CONSTRUCTION FROM RAW NUMBERS
# =============================================================================

def _from_format(value: float, fmt: FloatFormat) -> UncertainValue:
    variance = float(representation_variance(value, fmt))
    mean = float(value)
    # |x| >= 2**565 squares its half-ulp past float64 range
    return UncertainValue(mean, DEFAULT_SATURATION.saturate(mean, variance))


@singledispatch
def _from_number(value) -> UncertainValue:
    raise TypeError(f"Cannot derive a rounding error for {type(value).__name__}")


@_from_number.register(float)
def _(value: float) -> UncertainValue:
    return _from_format(value, BINARY64)


@_from_number.register(np.float32)
def _(value: np.float32) -> UncertainValue:
    return _from_format(value, BINARY32)


@_from_number.register(np.floating)
def _(value: np.floating) -> UncertainValue:
    # float16, float64 and extended precision all use the binary64 rule
    return _from_format(_to_float64(value), BINARY64)


@_from_number.register(numbers.Real)
def _(value: numbers.Real) -> UncertainValue:
    # int, bool, Fraction, numpy integers
    return _from_format(_to_float64(value), BINARY64)


@_from_number.register(Decimal)
def _(value: Decimal) -> UncertainValue:
    return _from_format(_to_float64(value), BINARY64)
