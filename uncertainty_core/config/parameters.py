"""Default numeric-stability and logging parameters.

Defaults match the constants the arithmetic operators are built on; a YAML
file only changes the policies a caller constructs explicitly.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

import yaml

from ..math_core.errors import InvalidArgumentError
from .paths import DEFAULT_CONFIG_FILE, DEFAULT_LOG_FILE


@dataclass
class SaturationConfig:
    max_relative_stddev: float = 1e8  # stddev/|mean| beyond which linearization is not credible
    absolute_variance_max: float = 1e300  # ceiling floor for near-zero means


@dataclass
class LoggingConfig:
    level: str = "INFO"
    log_to_file: bool = False
    log_file: str = str(DEFAULT_LOG_FILE)


@dataclass
class Parameters:
    saturation: SaturationConfig = field(default_factory=SaturationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_default_parameters(config_path: Optional[Union[str, Path]] = None) -> Parameters:
    """Return a Parameters instance, loading from config/uncertainty_config.yaml if available."""
    params = Parameters()

    config_path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_FILE
    if not config_path.exists():
        return params

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise InvalidArgumentError(f"Malformed config file {config_path}: {exc}") from exc

    if not data:
        return params
    if not isinstance(data, dict):
        raise InvalidArgumentError(f"Config file {config_path} must contain a mapping")

    if "saturation" in data:
        s = data["saturation"] or {}
        params.saturation = SaturationConfig(
            max_relative_stddev=float(s.get("max_relative_stddev", params.saturation.max_relative_stddev)),
            absolute_variance_max=float(s.get("absolute_variance_max", params.saturation.absolute_variance_max)),
        )

    if "logging" in data:
        lg = data["logging"] or {}
        params.logging = LoggingConfig(
            level=str(lg.get("level", params.logging.level)).upper(),
            log_to_file=bool(lg.get("log_to_file", params.logging.log_to_file)),
            log_file=str(lg.get("log_file", params.logging.log_file)),
        )

    return params
