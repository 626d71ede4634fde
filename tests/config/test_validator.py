import logging

import pytest

from pzsdev.config.validator import ValidationError, validate_config


@pytest.mark.unit
def test_validate_config_accepts_defaults(valid_config):
    validate_config(valid_config)


@pytest.mark.unit
def test_validate_config_accepts_string_paths(valid_config):
    valid_config["paths"]["source"] = "game/game.pzs"

    validate_config(valid_config)


@pytest.mark.unit
def test_validate_config_reports_all_errors(valid_config):
    valid_config["server"]["port"] = 70000
    valid_config["server"]["poll_interval"] = 0
    valid_config["logging"]["level"] = "LOUD"
    valid_config["export"]["armorgames"] = "yes"

    with pytest.raises(ValidationError) as excinfo:
        validate_config(valid_config)

    message = str(excinfo.value)
    assert "server.port must be between 1 and 65535" in message
    assert "server.poll_interval must be greater than 0" in message
    assert "logging.level must be one of" in message
    assert "export.armorgames must be true or false" in message


@pytest.mark.unit
@pytest.mark.parametrize("port", ["3000", True, 3.5, None])
def test_validate_config_port_must_be_integer(valid_config, port):
    valid_config["server"]["port"] = port

    with pytest.raises(ValidationError, match="server.port must be an integer"):
        validate_config(valid_config)


@pytest.mark.unit
def test_validate_config_missing_path(valid_config):
    valid_config["paths"]["template"] = ""

    with pytest.raises(ValidationError, match="paths.template is required"):
        validate_config(valid_config)


@pytest.mark.unit
def test_validate_config_path_wrong_type(valid_config):
    valid_config["paths"]["source"] = 42

    with pytest.raises(ValidationError, match="paths.source must be a path string"):
        validate_config(valid_config)


@pytest.mark.unit
def test_validate_config_blank_default_title(valid_config):
    valid_config["export"]["default_title"] = "   "

    with pytest.raises(ValidationError, match="export.default_title"):
        validate_config(valid_config)


@pytest.mark.unit
def test_validate_config_section_must_be_mapping(valid_config):
    valid_config["server"] = ["not", "a", "mapping"]

    with pytest.raises(ValidationError, match="server must be a mapping"):
        validate_config(valid_config)


@pytest.mark.unit
def test_validate_config_lowercase_log_level(valid_config):
    valid_config["logging"]["level"] = "debug"

    validate_config(valid_config)


@pytest.mark.unit
def test_validate_config_warns_on_slow_polling(valid_config, caplog):
    valid_config["server"]["poll_interval"] = 30

    with caplog.at_level(logging.WARNING):
        validate_config(valid_config)

    assert "server.poll_interval=30s is high" in caplog.text
