"""
uncertainty_core - numbers that carry their own error bars.

UncertainValue pairs a mean with a variance and propagates the variance
through +, -, *, / with first-order error propagation. Values built from
raw floats get a variance from their IEEE-754 rounding error, and every
propagated variance is kept finite by a scale-aware saturation ceiling.
"""

from .math_core import (
    UncertainValue,
    FloatFormat, BINARY64, BINARY32, ulp, representation_variance,
    SaturationPolicy, DEFAULT_SATURATION, saturate_variance,
    SampleSummary, summarize_samples, summarize_numeric_samples,
    from_samples, from_numeric_samples,
    UncertaintyError, DomainError, DivisionByZeroError, InvalidArgumentError,
)
from .config import Parameters, get_default_parameters, setup_logging

__version__ = "0.1.0"

__all__ = [
    'UncertainValue',
    'FloatFormat', 'BINARY64', 'BINARY32', 'ulp', 'representation_variance',
    'SaturationPolicy', 'DEFAULT_SATURATION', 'saturate_variance',
    'SampleSummary', 'summarize_samples', 'summarize_numeric_samples',
    'from_samples', 'from_numeric_samples',
    'UncertaintyError', 'DomainError', 'DivisionByZeroError', 'InvalidArgumentError',
    'Parameters', 'get_default_parameters', 'setup_logging',
]
