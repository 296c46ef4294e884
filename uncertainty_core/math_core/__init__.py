"""
Mathematical Core Module

1. Uncertain Value (validated mean/variance pair)
2. Rounding Model (ULP-derived variance)
3. Saturation Policy (variance ceiling)
4. Error Propagation (first-order rules for + - * /)
5. Aggregation (statistical + instrumental variance)
"""

# 1. Uncertain Value
from .uncertain_value import UncertainValue

# 2. Rounding Model
from .rounding_model import (
    FloatFormat, BINARY64, BINARY32, format_for, ulp, representation_variance
)

# 3. Saturation Policy
from .saturation import (
    SaturationPolicy, DEFAULT_SATURATION, saturate_variance,
    MAX_RELATIVE_STDDEV, MAX_RELATIVE_VARIANCE_FACTOR, ABSOLUTE_VARIANCE_MAX
)

# 4. Error Propagation
from .error_propagation import (
    propagate_add, propagate_subtract, propagate_multiply, propagate_divide
)

# 5. Aggregation
from .aggregation import (
    SampleSummary, summarize_samples, summarize_numeric_samples,
    from_samples, from_numeric_samples
)

from .errors import (
    UncertaintyError, DomainError, DivisionByZeroError, InvalidArgumentError
)

__all__ = [
    # Value type
    'UncertainValue',

    # Rounding model
    'FloatFormat', 'BINARY64', 'BINARY32', 'format_for', 'ulp', 'representation_variance',

    # Saturation
    'SaturationPolicy', 'DEFAULT_SATURATION', 'saturate_variance',
    'MAX_RELATIVE_STDDEV', 'MAX_RELATIVE_VARIANCE_FACTOR', 'ABSOLUTE_VARIANCE_MAX',

    # Propagation
    'propagate_add', 'propagate_subtract', 'propagate_multiply', 'propagate_divide',

    # Aggregation
    'SampleSummary', 'summarize_samples', 'summarize_numeric_samples',
    'from_samples', 'from_numeric_samples',

    # Errors
    'UncertaintyError', 'DomainError', 'DivisionByZeroError', 'InvalidArgumentError',
]
