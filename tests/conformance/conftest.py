"""Pytest configuration for conformance tests."""

import pytest
from tests.conformance.runners.api_runner import ApiRunner
from tests.conformance.runners.cli_runner import CliRunner


def get_available_runners():
    """Return list of available harness runners."""
    runners = [ApiRunner(), CliRunner()]
    return runners


@pytest.fixture(params=get_available_runners(), ids=lambda r: r.name)
def runner(request):
    """Provide harness runner for testing.

    This fixture is parametrized to run tests against all available runners.
    Currently includes:
    - api: Uses grammartest.Harness directly
    - cli: Uses the grammartest command line entry point
    """
    return request.param


@pytest.fixture(autouse=True)
def _no_skip_env(monkeypatch):
    """Keep a GRAMMARTEST_SKIP set in the environment from skipping every run."""
    monkeypatch.delenv("GRAMMARTEST_SKIP", raising=False)
