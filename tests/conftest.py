"""Shared test fixtures for apicall.

Every test runs with an isolated environment: config directories point into
``tmp_path``, catalog-related and API-key variables are cleared, and the
working directory is ``tmp_path`` so a stray ``./apis.txt`` is never picked
up.  The bundled catalog is therefore the default catalog in tests.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from apicall.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"

ISOLATED_VARS = [
    "APICALL_CATALOG",
    "APICALL_TIMEOUT",
    "API_KEY",
    "OPENAI_API_KEY",
    "OPENROUTER_API_KEY",
    "MODEL",
    "PROMPT",
    "SYSTEM_PROMPT",
    "VAR",
    "ID",
    "TOKEN",
    "TRACE",
    "NOTE",
    "ROUTE",
    "MESSAGE",
    "TRACE_ID",
    "LIMIT",
    "USER",
    "NO_COLOR",
]


# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time; Typer's CliRunner swaps those streams per invocation.
    """
    yield
    reset_output()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration and environment to a temporary directory.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    for var in ISOLATED_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Catalog fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fixture_catalog() -> Path:
    """Path to the fixture catalog in ``tests/fixtures/apis.txt``."""
    return FIXTURES_DIR / "apis.txt"


@pytest.fixture
def write_catalog(tmp_path: Path):
    """Factory writing catalog text to a file under tmp_path and returning its path."""

    def _write(text: str, name: str = "catalog.txt") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet PLAIN-format output manager for the test."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
