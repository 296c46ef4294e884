import logging
import math

import numpy as np
import pytest

from uncertainty_core import DEFAULT_SATURATION, InvalidArgumentError, SaturationPolicy, saturate_variance
from uncertainty_core.config import SaturationConfig

MAX_FINITE = float(np.finfo(np.float64).max)


def test_default_constants():
    assert DEFAULT_SATURATION.max_relative_stddev == 1e8
    assert DEFAULT_SATURATION.relative_variance_factor == 1e16
    assert DEFAULT_SATURATION.absolute_variance_max == 1e300


def test_ceiling_uses_absolute_floor_near_zero():
    assert DEFAULT_SATURATION.ceiling(0.0) == 1e300
    assert DEFAULT_SATURATION.ceiling(1.0) == 1e300
    assert DEFAULT_SATURATION.ceiling(-1e100) == 1e300


def test_ceiling_scales_with_mean():
    assert DEFAULT_SATURATION.ceiling(1e143) == 1e143 * 1e143 * 1e16
    assert DEFAULT_SATURATION.ceiling(-1e143) == DEFAULT_SATURATION.ceiling(1e143)


def test_ceiling_capped_when_relative_limit_overflows():
    assert DEFAULT_SATURATION.ceiling(1e200) == MAX_FINITE


def test_variance_below_ceiling_unchanged():
    assert saturate_variance(1.0, 0.5) == 0.5
    assert saturate_variance(0.0, 0.0) == 0.0
    assert saturate_variance(1e143, 1e301) == 1e301


@pytest.mark.parametrize("variance", [float("nan"), float("inf"), 1e301 * 10])
def test_non_finite_or_large_variance_clamped(variance):
    assert saturate_variance(1.0, variance) == 1e300


def test_clamped_exactly_to_relative_ceiling():
    assert saturate_variance(1e143, 1e303) == 1e302


def test_negative_variance_is_not_repaired():
    assert saturate_variance(1.0, -1.0) == -1.0


def test_saturation_always_finite_for_finite_mean():
    for mean in (0.0, 1e-300, 1.0, 1e150, -1e300, MAX_FINITE):
        assert math.isfinite(saturate_variance(mean, float("inf")))


def test_array_saturation_elementwise():
    means = np.array([1.0, 1e143, 0.0, 2.0])
    variances = np.array([0.5, 1e303, np.nan, np.inf])
    result = DEFAULT_SATURATION.saturate(means, variances)
    np.testing.assert_array_equal(result, [0.5, 1e143 * 1e143 * 1e16, 1e300, 1e300])


def test_custom_policy():
    policy = SaturationPolicy(max_relative_stddev=10.0, absolute_variance_max=1.0)
    assert policy.relative_variance_factor == 100.0
    assert policy.saturate(2.0, 1000.0) == 400.0
    assert policy.saturate(0.0, 5.0) == 1.0
    assert policy.saturate(2.0, 3.0) == 3.0


@pytest.mark.parametrize("kwargs", [
    {"max_relative_stddev": 0.0},
    {"max_relative_stddev": -1.0},
    {"absolute_variance_max": float("inf")},
    {"absolute_variance_max": float("nan")},
])
def test_invalid_policy_parameters(kwargs):
    with pytest.raises(InvalidArgumentError):
        SaturationPolicy(**kwargs)


def test_policy_from_config():
    policy = SaturationPolicy.from_config(SaturationConfig(max_relative_stddev=1e4, absolute_variance_max=1e10))
    assert policy == SaturationPolicy(1e4, 1e10)
    assert SaturationPolicy.from_config(SaturationConfig()) == DEFAULT_SATURATION


def test_saturation_logged_at_debug(caplog):
    with caplog.at_level(logging.DEBUG, logger="uncertainty_core.math_core.saturation"):
        saturate_variance(1.0, float("inf"))
    assert "saturated" in caplog.text.lower()


def test_no_log_when_within_ceiling(caplog):
    with caplog.at_level(logging.DEBUG, logger="uncertainty_core.math_core.saturation"):
        saturate_variance(1.0, 1.0)
    assert caplog.records == []
