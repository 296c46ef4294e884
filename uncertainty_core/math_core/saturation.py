"""
Variance Saturation Policy

Keeps propagated variance representable after linear propagation, which
blows up near singularities (division by a near-zero mean) or overflows
when large means are multiplied:
- Scale-aware ceiling: mean^2 * max_relative_stddev^2
- Absolute floor on the ceiling for near-zero means
- NaN / inf / oversized variance replaced by the ceiling

The policy never touches the mean and never repairs a negative variance;
that is an invariant violation caught by value construction.
"""

from __future__ import annotations
import logging
import math
import numpy as np
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from .errors import InvalidArgumentError

if TYPE_CHECKING:
    from ..config.parameters import SaturationConfig

logger = logging.getLogger(__name__)

# Relative standard deviation beyond which the small-error assumption is not credible
MAX_RELATIVE_STDDEV = 1e8
MAX_RELATIVE_VARIANCE_FACTOR = MAX_RELATIVE_STDDEV * MAX_RELATIVE_STDDEV  # 1e16

# Minimum ceiling, so that means near zero still admit a huge-but-finite variance
ABSOLUTE_VARIANCE_MAX = 1e300

MAX_FINITE = float(np.finfo(np.float64).max)

Number = Union[float, np.ndarray]


@dataclass(frozen=True)
class SaturationPolicy:
    """
    Numeric-stability safeguard for propagated variance.

    Attributes:
        max_relative_stddev: Largest credible stddev / |mean| ratio
        absolute_variance_max: Lower bound of the ceiling
    """
    max_relative_stddev: float = MAX_RELATIVE_STDDEV
    absolute_variance_max: float = ABSOLUTE_VARIANCE_MAX

    def __post_init__(self):
        for name in ('max_relative_stddev', 'absolute_variance_max'):
            value = getattr(self, name)
            if not (math.isfinite(value) and value > 0):
                raise InvalidArgumentError(f"{name} must be finite and > 0, got {value!r}")

    @classmethod
    def from_config(cls, config: 'SaturationConfig') -> 'SaturationPolicy':
        """Build a policy from the saturation section of the parameters."""
        return cls(
            max_relative_stddev=float(config.max_relative_stddev),
            absolute_variance_max=float(config.absolute_variance_max),
        )

    @property
    def relative_variance_factor(self) -> float:
        return self.max_relative_stddev * self.max_relative_stddev

    def ceiling(self, mean: Number) -> Number:
        """
        Effective variance ceiling for a result mean.

        max(mean^2 * K, absolute_variance_max), capped at the largest finite
        float64 once mean^2 * K overflows.
        """
        if isinstance(mean, np.ndarray):
            with np.errstate(over='ignore'):
                relative = mean * mean * self.relative_variance_factor
            return np.minimum(np.maximum(relative, self.absolute_variance_max), MAX_FINITE)

        relative = mean * mean * self.relative_variance_factor
        return min(max(relative, self.absolute_variance_max), MAX_FINITE)

    def saturate(self, mean: Number, variance: Number) -> Number:
        """
        Clamp a raw propagated variance.

        Args:
            mean: Mean of the result (not modified)
            variance: Raw variance from a propagation formula

        Returns:
            The ceiling if variance is NaN, infinite or above it, else variance
        """
        ceiling = self.ceiling(mean)

        if isinstance(variance, np.ndarray) or isinstance(ceiling, np.ndarray):
            variance = np.asarray(variance, dtype=np.float64)
            with np.errstate(invalid='ignore'):
                clamp = ~np.isfinite(variance) | (variance > ceiling)
            if np.any(clamp):
                logger.debug("Saturated %d variance(s) to ceiling", int(np.count_nonzero(clamp)))
            return np.where(clamp, ceiling, variance)

        if not math.isfinite(variance) or variance > ceiling:
            logger.debug(
                "Variance saturated: mean=%r raw_variance=%r ceiling=%r", mean, variance, ceiling
            )
            return ceiling
        return variance


DEFAULT_SATURATION = SaturationPolicy()


def saturate_variance(mean: Number, variance: Number) -> Number:
    """Apply the default policy (max relative stddev 1e8, floor 1e300)."""
    return DEFAULT_SATURATION.saturate(mean, variance)
