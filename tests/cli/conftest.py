"""CLI fixtures that route commands to a mock REST API."""

import pytest

from catalog_tool.cli.main import app


@pytest.fixture
def invoke(runner, mock_api, monkeypatch):
    """Invoke the CLI against a mock API; returns (result, seen_requests)."""
    monkeypatch.delenv("CATALOG_API_URL", raising=False)
    monkeypatch.delenv("CATALOG_PROFILE", raising=False)

    def run(handler, *args, input=None):
        transport, seen = mock_api(handler)
        result = runner.invoke(
            app,
            ["--url", "http://catalog.test", "--format", "json", *args],
            obj={"transport": transport},
            input=input,
        )
        return result, seen

    return run
