"""
Rounding Model

Derives an uncertainty from the representation error of IEEE-754 values:
- Bit-level ULP decomposition for binary64 and binary32
- Half-ULP standard deviation (round-to-nearest worst case)
- Vectorized over numpy arrays, scalars handled as 0-d arrays

Rounding a real number to the nearest representable float introduces an
error of at most 0.5 ulp. That bound is taken as one standard deviation,
which gives a reproducible variance with no free parameters.
"""

from __future__ import annotations
import numpy as np
from dataclasses import dataclass
from typing import Optional, Union

from .errors import DomainError


ArrayLike = Union[np.ndarray, float, int]


@dataclass(frozen=True)
class FloatFormat:
    """
    Layout of an IEEE-754 binary interchange format.

    Attributes:
        name: Format name (binary64, binary32)
        dtype: numpy float dtype holding the value
        bits_dtype: Unsigned integer dtype of the same width
        mantissa_bits: Width of the stored fraction field
        bias: Exponent bias
        exponent_mask: Mask of the biased exponent field after shifting
    """
    name: str
    dtype: np.dtype
    bits_dtype: np.dtype
    mantissa_bits: int
    bias: int
    exponent_mask: int

    @property
    def min_subnormal(self) -> float:
        """Smallest positive magnitude of the format, as a float64."""
        return float(np.finfo(self.dtype).smallest_subnormal)


BINARY64 = FloatFormat(
    name="binary64",
    dtype=np.dtype(np.float64),
    bits_dtype=np.dtype(np.uint64),
    mantissa_bits=52,
    bias=1023,
    exponent_mask=0x7FF,
)

BINARY32 = FloatFormat(
    name="binary32",
    dtype=np.dtype(np.float32),
    bits_dtype=np.dtype(np.uint32),
    mantissa_bits=23,
    bias=127,
    exponent_mask=0xFF,
)


def format_for(dtype: np.dtype) -> FloatFormat:
    """
    Select the rounding format for a numpy dtype.

    Only genuine 32-bit floats keep their own width; integers, half
    precision, extended precision and everything else are promoted to
    binary64.
    """
    if np.dtype(dtype) == BINARY32.dtype:
        return BINARY32
    return BINARY64


def _as_format(values: ArrayLike, fmt: Optional[FloatFormat]) -> tuple:
    arr = np.asarray(values)
    if fmt is None:
        fmt = format_for(arr.dtype)

    try:
        with np.errstate(over='ignore', invalid='ignore'):
            arr = arr.astype(fmt.dtype)
    except OverflowError as exc:
        # Python ints beyond float64 range
        raise DomainError(f"Value is out of {fmt.name} range: {values!r}") from exc

    if not np.all(np.isfinite(arr)):
        raise DomainError(f"Value must be finite to derive a rounding error, got {values!r}")

    return arr, fmt


def ulp(values: ArrayLike, fmt: Optional[FloatFormat] = None) -> np.ndarray:
    """
    Unit in the last place of every element.

    Args:
        values: Scalar or array of finite numbers
        fmt: Format to evaluate in; inferred from the dtype when omitted

    Returns:
        float64 array of the same shape holding ulp(x)

    Raises:
        DomainError: if any element is NaN or infinite
    """
    arr, fmt = _as_format(values, fmt)

    bits = arr.view(fmt.bits_dtype)
    shift = fmt.bits_dtype.type(fmt.mantissa_bits)
    mask = fmt.bits_dtype.type(fmt.exponent_mask)
    biased_exponent = ((bits >> shift) & mask).astype(np.int32)

    # Zero and subnormals both carry a zero exponent field
    normal = biased_exponent != 0
    exponent = np.where(normal, biased_exponent - fmt.bias - fmt.mantissa_bits, 0)

    return np.where(
        normal,
        np.ldexp(np.float64(1.0), exponent.astype(np.int32)),
        np.float64(fmt.min_subnormal),
    )


def representation_variance(values: ArrayLike, fmt: Optional[FloatFormat] = None) -> np.ndarray:
    """
    Variance (0.5 * ulp)^2 implied by rounding to the nearest float.

    Computed in float64. For binary64 magnitudes at or above 2^565 the
    square overflows to inf; callers saturate it.
    """
    half_ulp = 0.5 * ulp(values, fmt)
    with np.errstate(over='ignore', under='ignore'):
        return half_ulp * half_ulp
