"""Tests for exit code mapping through run()."""

from unittest.mock import patch

import pytest

from catalog_tool.core.exceptions import (
    ConfigError,
    HttpStatusError,
    InputError,
    NetworkError,
    TimeoutError,
)
from catalog_tool.core.exit_codes import ExitCode


def _run_with(error):
    with patch("catalog_tool.cli.main.app", side_effect=error):
        with pytest.raises(SystemExit) as exc_info:
            from catalog_tool.cli.main import run

            run()
    return exc_info.value.code


@pytest.mark.unit
def test_run_network_error_maps_to_exit_code():
    assert _run_with(NetworkError("fail")) == ExitCode.NETWORK_ERROR


@pytest.mark.unit
def test_run_timeout_maps_to_exit_code():
    assert _run_with(TimeoutError("slow")) == ExitCode.TIMEOUT


@pytest.mark.unit
def test_run_api_error_maps_to_exit_code():
    error = HttpStatusError("duplicate key value", status_code=409)
    assert _run_with(error) == ExitCode.API_ERROR


@pytest.mark.unit
def test_run_input_error_maps_to_exit_code():
    assert _run_with(InputError("bad")) == ExitCode.INPUT_ERROR


@pytest.mark.unit
def test_run_config_error_maps_to_exit_code():
    assert _run_with(ConfigError("bad")) == ExitCode.CONFIG_ERROR


@pytest.mark.unit
def test_run_unexpected_error_exits_1():
    assert _run_with(RuntimeError("boom")) == 1


@pytest.mark.unit
def test_run_prints_message(capsys):
    _run_with(HttpStatusError("duplicate key value", status_code=409))
    assert "Error: duplicate key value" in capsys.readouterr().err
