"""Configuration: parameters, paths and logging setup."""

from .logging_config import setup_logging, setup_logging_from_parameters
from .parameters import (
    Parameters, SaturationConfig, LoggingConfig, get_default_parameters
)
from .paths import PROJECT_ROOT, CONFIG_DIR, DEFAULT_CONFIG_FILE, LOG_DIR, DEFAULT_LOG_FILE

__all__ = [
    'setup_logging', 'setup_logging_from_parameters',
    'Parameters', 'SaturationConfig', 'LoggingConfig', 'get_default_parameters',
    'PROJECT_ROOT', 'CONFIG_DIR', 'DEFAULT_CONFIG_FILE', 'LOG_DIR', 'DEFAULT_LOG_FILE',
]
