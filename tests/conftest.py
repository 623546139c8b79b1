"""Shared test fixtures for Catalog Tool."""

from pathlib import Path
from tempfile import TemporaryDirectory

import httpx
import pytest
from typer.testing import CliRunner

from catalog_tool.cli.main import app
from catalog_tool.core.config import ResolvedConfig

TEST_BASE_URL = "http://catalog.test"


@pytest.fixture
def runner():
    """Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def cli_runner(runner):
    """Invoke the CLI app with the given arguments."""

    def invoke(*args: str, **kwargs):
        return runner.invoke(app, list(args), **kwargs)

    return invoke


@pytest.fixture
def temp_dir():
    """Temporary directory for test files."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def resolved_config():
    return ResolvedConfig(base_url=TEST_BASE_URL, timeout=5.0)


@pytest.fixture
def mock_api():
    """Build an httpx.MockTransport that records every request it serves.

    ``handler`` is either a callable taking the request, or a dict of
    httpx.Response keyword arguments used for every request.
    """

    def make(handler):
        seen: list[httpx.Request] = []

        def respond(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            if callable(handler):
                return handler(request)
            return httpx.Response(**handler)

        return httpx.MockTransport(respond), seen

    return make
