"""Path configuration for uncertainty_core.

Centralizes the filesystem locations used by config loading and logging.
"""
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[2]
CONFIG_DIR = PROJECT_ROOT / "config"
DEFAULT_CONFIG_FILE = CONFIG_DIR / "uncertainty_config.yaml"
LOG_DIR = PROJECT_ROOT / "logs"
DEFAULT_LOG_FILE = LOG_DIR / "uncertainty.log"
