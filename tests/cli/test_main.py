"""Tests for CLI entry point."""

import pytest

from catalog_tool import __version__
from catalog_tool.cli.main import app


@pytest.mark.unit
class TestCliHelp:
    def test_help_flag(self, runner):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "Catalog Tool" in result.stdout
        assert "PostgREST" in result.stdout

    def test_no_args_shows_help(self, runner):
        result = runner.invoke(app, [])
        assert result.exit_code == 0 or result.exit_code == 2
        assert "Catalog Tool" in result.stdout or "Usage" in result.stdout

    @pytest.mark.parametrize(
        "command", ["list", "get", "create", "update", "delete", "rpc", "catalog", "config"]
    )
    def test_commands_registered(self, runner, command):
        result = runner.invoke(app, [command, "--help"])
        assert result.exit_code == 0


@pytest.mark.unit
class TestCliVersion:
    def test_version_flag(self, runner):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"catalog-tool {__version__}" in result.stdout

    def test_version_short_flag(self, runner):
        result = runner.invoke(app, ["-V"])
        assert result.exit_code == 0
        assert f"catalog-tool {__version__}" in result.stdout


@pytest.mark.unit
def test_verbose_flag_accepted(runner):
    result = runner.invoke(app, ["--help", "--verbose"])
    assert result.exit_code == 0


@pytest.mark.unit
def test_unknown_command_fails(runner):
    result = runner.invoke(app, ["nonexistent-command"])
    assert result.exit_code != 0
