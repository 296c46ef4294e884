"""
Sample Aggregation

Collapses a collection of measurements into a single UncertainValue:
- Mean of the sample means
- Instrumental variance: average of each sample's own variance
- Statistical variance: Bessel-corrected spread of the means, divided by n
  (squared standard error of the mean)

Total variance is the sum of both components.
"""

from __future__ import annotations
import logging
import numpy as np
from dataclasses import dataclass
from typing import Iterable, List

from .errors import InvalidArgumentError
from .rounding_model import representation_variance
from .saturation import DEFAULT_SATURATION
from .uncertain_value import UncertainValue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SampleSummary:
    """Aggregation result with its variance components."""
    mean: float
    statistical_variance: float
    instrumental_variance: float
    n_samples: int

    @property
    def total_variance(self) -> float:
        return self.statistical_variance + self.instrumental_variance

    def to_value(self) -> UncertainValue:
        """Validated UncertainValue; a non-finite total raises DomainError."""
        return UncertainValue(self.mean, self.total_variance)


def _summarize(means: np.ndarray, variances: np.ndarray) -> SampleSummary:
    n = means.size
    with np.errstate(over='ignore', invalid='ignore'):
        mean = float(np.mean(means))
        instrumental = float(np.mean(variances))

        if n > 1:
            statistical = float(np.var(means, ddof=1)) / n
        else:
            statistical = 0.0

    summary = SampleSummary(
        mean=mean,
        statistical_variance=statistical,
        instrumental_variance=instrumental,
        n_samples=n,
    )
    logger.debug(
        "Aggregated %d samples: mean=%r statistical=%r instrumental=%r",
        n, mean, statistical, instrumental
    )
    return summary


def _materialize(samples) -> List:
    if samples is None:
        raise InvalidArgumentError("Sample collection must not be None")
    items = list(samples)
    if not items:
        raise InvalidArgumentError("Sample collection must contain at least one element")
    return items


def summarize_samples(samples: Iterable[UncertainValue]) -> SampleSummary:
    """
    Break a sample collection down into its variance components.

    Args:
        samples: Non-empty iterable of UncertainValue

    Returns:
        SampleSummary

    Raises:
        InvalidArgumentError: if samples is None or empty
        TypeError: if an element is not an UncertainValue
    """
    items = _materialize(samples)
    for item in items:
        if not isinstance(item, UncertainValue):
            raise TypeError(
                f"Expected UncertainValue samples, got {type(item).__name__}; "
                "use from_numeric_samples for raw numbers"
            )

    means = np.fromiter((s.mean for s in items), dtype=np.float64, count=len(items))
    variances = np.fromiter((s.variance for s in items), dtype=np.float64, count=len(items))
    return _summarize(means, variances)


def from_samples(samples: Iterable[UncertainValue]) -> UncertainValue:
    """Combine UncertainValue samples into one value."""
    return summarize_samples(samples).to_value()


def summarize_numeric_samples(samples) -> SampleSummary:
    """
    Variance components of raw numeric samples.

    numpy arrays are converted in one vectorized pass with a width chosen
    from their dtype (float32 arrays keep the binary32 ULP). Other iterables
    go through UncertainValue.from_float element by element.
    """
    if isinstance(samples, np.ndarray):
        if samples.size == 0:
            raise InvalidArgumentError("Sample collection must contain at least one element")
        # Non-finite elements raise DomainError here
        variances = representation_variance(samples).ravel()
        means = samples.astype(np.float64).ravel()
        variances = DEFAULT_SATURATION.saturate(means, variances)
        return _summarize(means, variances)

    items = _materialize(samples)
    return summarize_samples([UncertainValue.from_float(x) for x in items])


def from_numeric_samples(samples) -> UncertainValue:
    """Combine raw numeric samples into one value."""
    return summarize_numeric_samples(samples).to_value()
