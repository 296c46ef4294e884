"""
Error Propagation Formulas

First-order (linearized) propagation for the four arithmetic operators.
Each rule maps the moments of two independent operands to the mean and
raw variance of the result:

    Var(f) = sum_i (df/dx_i)^2 * Var(x_i)

Covariance between operands is never tracked. Terms are evaluated directly
and only re-evaluated in square-root form when an intermediate product
leaves float64 range, so a variance is inf only when the true value is.
Saturation is applied by the caller, not here.
"""

from __future__ import annotations
import math
import numpy as np
from typing import Callable, Tuple

from .errors import DivisionByZeroError

Moments = Tuple[float, float]
PropagationRule = Callable[[float, float, float, float], Moments]


def _rescaled(m: float, v: float, d: float = 1.0) -> float:
    """(m / d^2)^2 * v evaluated as the square of m / d / d * sqrt(v)."""
    with np.errstate(over='ignore', under='ignore'):
        r = np.float64(m) / d / d * np.sqrt(np.float64(v))
        return float(r * r)


def _scaled(m: float, v: float) -> float:
    # m^2 * v, treating an exact operand as contributing exactly nothing
    if v == 0 or m == 0:
        return 0.0
    term = m * m * v
    if math.isfinite(term) and term != 0:
        return term
    # m * m overflowed or underflowed on its own
    return _rescaled(m, v)


def _quotient(numerator: float, denominator: float) -> float:
    # Powers of tiny divisors underflow to 0; IEEE semantics give inf there
    if numerator == 0:
        return 0.0
    with np.errstate(divide='ignore', over='ignore', invalid='ignore'):
        return float(np.float64(numerator) / np.float64(denominator))


def _over_square(va: float, mb: float, mb2: float) -> float:
    # va / mb^2
    if va == 0:
        return 0.0
    if 0 < mb2 < math.inf:
        return _quotient(va, mb2)
    with np.errstate(over='ignore', under='ignore'):
        r = np.sqrt(np.float64(va)) / np.float64(mb)
        return float(r * r)


def _over_fourth_power(ma: float, vb: float, mb: float, mb2: float) -> float:
    # ma^2 * vb / mb^4
    if vb == 0 or ma == 0:
        return 0.0
    numerator = _scaled(ma, vb)
    mb4 = mb2 * mb2
    if 0 < numerator < math.inf and 0 < mb4 < math.inf:
        term = _quotient(numerator, mb4)
        if math.isfinite(term):
            return term
    return _rescaled(ma, vb, mb)


def propagate_add(ma: float, va: float, mb: float, vb: float) -> Moments:
    """a + b: Var = va + vb."""
    return ma + mb, va + vb


def propagate_subtract(ma: float, va: float, mb: float, vb: float) -> Moments:
    """a - b: Var = va + vb."""
    return ma - mb, va + vb


def propagate_multiply(ma: float, va: float, mb: float, vb: float) -> Moments:
    """a * b: Var = mb^2 va + ma^2 vb."""
    return ma * mb, _scaled(mb, va) + _scaled(ma, vb)


def propagate_divide(ma: float, va: float, mb: float, vb: float) -> Moments:
    """
    a / b: Var = va / mb^2 + ma^2 vb / mb^4.

    Raises:
        DivisionByZeroError: if mb is exactly zero, whatever vb is
    """
    if mb == 0:
        raise DivisionByZeroError(f"Divisor mean is exactly zero (variance={vb!r})")

    mean = ma / mb
    mb2 = mb * mb
    variance = _over_square(va, mb, mb2) + _over_fourth_power(ma, vb, mb, mb2)
    return mean, variance
