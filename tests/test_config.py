import logging
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler

import pytest

from uncertainty_core import DEFAULT_SATURATION, InvalidArgumentError, SaturationPolicy
from uncertainty_core.config import (
    DEFAULT_CONFIG_FILE, Parameters, get_default_parameters,
    setup_logging, setup_logging_from_parameters
)


@contextmanager
def preserved_root_logger():
    # setup_logging replaces root handlers, including pytest's capture handlers
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    try:
        yield root
    finally:
        for handler in root.handlers:
            if handler not in handlers:
                handler.close()
        root.handlers[:] = handlers
        root.setLevel(level)


def test_defaults_when_file_missing(tmp_path):
    params = get_default_parameters(tmp_path / "missing.yaml")
    assert params == Parameters()
    assert params.saturation.max_relative_stddev == 1e8
    assert params.saturation.absolute_variance_max == 1e300
    assert params.logging.level == "INFO"
    assert params.logging.log_to_file is False


def test_shipped_config_matches_builtin_constants():
    assert DEFAULT_CONFIG_FILE.exists()
    params = get_default_parameters()
    assert SaturationPolicy.from_config(params.saturation) == DEFAULT_SATURATION


def test_yaml_overrides(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "saturation:\n"
        "  max_relative_stddev: 1000\n"
        "logging:\n"
        "  level: debug\n"
        "  log_to_file: true\n"
        f"  log_file: {tmp_path / 'run.log'}\n"
    )
    params = get_default_parameters(path)
    assert params.saturation.max_relative_stddev == 1000.0
    assert params.saturation.absolute_variance_max == 1e300
    assert params.logging.level == "DEBUG"
    assert params.logging.log_to_file is True
    assert params.logging.log_file == str(tmp_path / "run.log")


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert get_default_parameters(path) == Parameters()


def test_malformed_yaml_rejected(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("saturation: [unclosed\n")
    with pytest.raises(InvalidArgumentError):
        get_default_parameters(path)


def test_non_mapping_document_rejected(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n")
    with pytest.raises(InvalidArgumentError):
        get_default_parameters(path)


def test_config_policy_is_opt_in(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("saturation:\n  max_relative_stddev: 1.0\n  absolute_variance_max: 1.0\n")
    policy = SaturationPolicy.from_config(get_default_parameters(path).saturation)
    assert policy.saturate(1.0, 50.0) == 1.0
    assert DEFAULT_SATURATION.saturate(1.0, 50.0) == 50.0


def test_setup_logging_console_only():
    with preserved_root_logger() as root:
        setup_logging(logging.DEBUG)
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], logging.StreamHandler)


def test_setup_logging_with_rotating_file(tmp_path):
    log_file = tmp_path / "logs" / "uncertainty.log"
    with preserved_root_logger() as root:
        setup_logging("INFO", log_file)
        assert any(isinstance(h, RotatingFileHandler) for h in root.handlers)

        logging.getLogger("uncertainty_core.test").info("hello")
        for handler in root.handlers:
            handler.flush()
    assert "| INFO | uncertainty_core.test | hello" in log_file.read_text()


def test_setup_logging_from_parameters(tmp_path):
    params = Parameters()
    params.logging.level = "WARNING"
    params.logging.log_to_file = True
    params.logging.log_file = str(tmp_path / "from_params.log")
    with preserved_root_logger() as root:
        setup_logging_from_parameters(params)
        assert root.level == logging.WARNING
        assert any(isinstance(h, RotatingFileHandler) for h in root.handlers)
