"""End-to-end tests for the apicall command line.

Network access is never needed: calls either go through ``--dry-run`` or
``apicall.client.fetch_api`` is replaced with a fake returning a canned
:class:`httpx.Response`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import httpx
import pytest
from typer.testing import CliRunner

from apicall import __version__
from apicall.app import app, describe_api, main, parse_assignments
from apicall.exceptions import ConnectionError_, InvalidUsageError
from apicall.models import ApiDefinition, HTTPMethod


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class _FakeFetch:
    """Stand-in for ``fetch_api`` that records its arguments."""

    def __init__(self, response: httpx.Response | None = None, exc: Exception | None = None) -> None:
        self.calls: list[dict[str, Any]] = []
        self.response = response or httpx.Response(
            200,
            text='{"url": "https://httpbin.org/get"}',
            request=httpx.Request("GET", "https://httpbin.org/get"),
        )
        self.exc = exc

    def __call__(self, service: str, name: str, **kwargs: Any) -> httpx.Response:
        self.calls.append({"service": service, "name": name, **kwargs})
        if self.exc is not None:
            raise self.exc
        return self.response


@pytest.fixture
def fake_fetch(monkeypatch: pytest.MonkeyPatch) -> _FakeFetch:
    fake = _FakeFetch()
    monkeypatch.setattr("apicall.client.fetch_api", fake)
    return fake


def _invoke(runner: CliRunner, *args: str):
    return runner.invoke(app, list(args))


# ---------------------------------------------------------------------------
# Usage and version
# ---------------------------------------------------------------------------


class TestUsage:
    def test_no_arguments_prints_usage(self, cli_runner: CliRunner) -> None:
        result = _invoke(cli_runner)
        assert result.exit_code == 0
        assert "Commands:" in result.output
        assert "SERVICE.NAME" in result.output

    def test_version(self, cli_runner: CliRunner) -> None:
        result = _invoke(cli_runner, "--version")
        assert result.exit_code == 0
        assert f"apicall {__version__}" in result.output


# ---------------------------------------------------------------------------
# list / where / help
# ---------------------------------------------------------------------------


class TestList:
    def test_lists_bundled_catalog(self, cli_runner: CliRunner) -> None:
        result = _invoke(cli_runner, "list")
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0] == "httpbin.get"
        assert "openai.chat" in lines
        assert "github.repos" in lines

    def test_pattern_filters(self, cli_runner: CliRunner) -> None:
        result = _invoke(cli_runner, "list", "openai")
        assert result.exit_code == 0
        assert result.output.splitlines() == ["openai.models", "openai.chat"]

    def test_pattern_without_matches(self, cli_runner: CliRunner) -> None:
        result = _invoke(cli_runner, "list", "zzz")
        assert result.exit_code == 0
        assert result.output == ""

    def test_explicit_catalog(self, cli_runner: CliRunner, fixture_catalog: Path) -> None:
        result = _invoke(cli_runner, "--config", str(fixture_catalog), "list")
        assert result.exit_code == 0
        assert result.output.splitlines() == ["local.test", "local.echo", "local.compact", "other.ping"]

    def test_catalog_from_environment(
        self, cli_runner: CliRunner, fixture_catalog: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("APICALL_CATALOG", str(fixture_catalog))
        result = _invoke(cli_runner, "list", "other")
        assert result.output.splitlines() == ["other.ping"]

    def test_json_output(self, cli_runner: CliRunner, fixture_catalog: Path) -> None:
        result = _invoke(cli_runner, "--json", "-c", str(fixture_catalog), "list", "local")
        assert result.exit_code == 0
        assert json.loads(result.output) == ["local.test", "local.echo", "local.compact"]

    def test_missing_catalog(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = _invoke(cli_runner, "-c", str(tmp_path / "nope.txt"), "list")
        assert result.exit_code == 7
        assert "Catalog file not found" in result.output

    def test_malformed_catalog(self, cli_runner: CliRunner, write_catalog) -> None:
        path = write_catalog("service name url method headers body\nsvc api http://x BREW {}\n")
        result = _invoke(cli_runner, "-c", str(path), "list")
        assert result.exit_code == 7
        assert "unknown HTTP method 'BREW'" in result.output
        assert ":2:" in result.output

    def test_undecodable_catalog(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "bad.txt"
        path.write_bytes(b"service name url method headers body\nsvc api http://h/\xff GET {}\n")
        result = _invoke(cli_runner, "-c", str(path), "list")
        assert result.exit_code == 7
        assert "Failed to read catalog" in result.output


class TestWhere:
    def test_bundled(self, cli_runner: CliRunner) -> None:
        result = _invoke(cli_runner, "where")
        assert result.exit_code == 0
        assert result.output.strip().endswith("apis.txt")

    def test_working_directory_catalog(self, cli_runner: CliRunner, isolated_env: Path) -> None:
        local = isolated_env / "apis.txt"
        local.write_text("service name url method headers body\n", encoding="utf-8")
        result = _invoke(cli_runner, "where")
        assert Path(result.output.strip()) == local

    def test_explicit(self, cli_runner: CliRunner, fixture_catalog: Path) -> None:
        result = _invoke(cli_runner, "-c", str(fixture_catalog), "where")
        assert result.output.strip() == str(fixture_catalog)


class TestHelp:
    def test_shows_definition(self, cli_runner: CliRunner) -> None:
        result = _invoke(cli_runner, "help", "httpbin.get")
        assert result.exit_code == 0
        assert "httpbin.get" in result.output
        assert "GET https://httpbin.org/get" in result.output

    def test_shows_variables(self, cli_runner: CliRunner) -> None:
        result = _invoke(cli_runner, "help", "openai.chat")
        assert "Variables: API_KEY (required), MODEL, PROMPT (required)" in result.output
        assert "Bearer !$API_KEY" in result.output

    def test_no_matches(self, cli_runner: CliRunner) -> None:
        result = _invoke(cli_runner, "help", "zzz")
        assert result.exit_code == 0
        assert "No APIs match 'zzz'" in result.output

    def test_json_output(self, cli_runner: CliRunner, fixture_catalog: Path) -> None:
        result = _invoke(cli_runner, "--json", "-c", str(fixture_catalog), "help", "other.ping")
        data = json.loads(result.output)
        assert data == [
            {
                "service": "other",
                "name": "ping",
                "url": "http://other.example/ping",
                "method": "HEAD",
                "headers": {},
                "body": "",
            }
        ]


# ---------------------------------------------------------------------------
# Calling APIs
# ---------------------------------------------------------------------------


class TestCall:
    def test_prints_response_body(self, cli_runner: CliRunner, fake_fetch: _FakeFetch) -> None:
        result = _invoke(cli_runner, "httpbin.get")
        assert result.exit_code == 0
        assert '{"url": "https://httpbin.org/get"}' in result.output
        call = fake_fetch.calls[0]
        assert (call["service"], call["name"]) == ("httpbin", "get")
        assert call["variables"] == {}
        assert call["dry_run"] is False

    def test_assignments_become_variables(self, cli_runner: CliRunner, fake_fetch: _FakeFetch) -> None:
        result = _invoke(cli_runner, "httpbin.post", "MESSAGE=hi there", "foo=a=b")
        assert result.exit_code == 0
        assert fake_fetch.calls[0]["variables"] == {"MESSAGE": "hi there", "foo": "a=b"}

    def test_config_is_forwarded(
        self, cli_runner: CliRunner, fake_fetch: _FakeFetch, fixture_catalog: Path
    ) -> None:
        _invoke(cli_runner, "-c", str(fixture_catalog), "local.test")
        assert fake_fetch.calls[0]["config_path"] == str(fixture_catalog)

    def test_http_error_status(self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        response = httpx.Response(
            404, text="no such user", request=httpx.Request("GET", "https://api.github.com/users/x")
        )
        monkeypatch.setattr("apicall.client.fetch_api", _FakeFetch(response=response))
        result = _invoke(cli_runner, "github.user", "USER=x")
        assert result.exit_code == 5
        assert "no such user" in result.output
        assert "HTTP 404 Not Found" in result.output

    def test_connection_error(self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        fake = _FakeFetch(exc=ConnectionError_("Connection to https://httpbin.org/get failed: refused"))
        monkeypatch.setattr("apicall.client.fetch_api", fake)
        result = _invoke(cli_runner, "httpbin.get")
        assert result.exit_code == 6
        assert "Connection to https://httpbin.org/get failed" in result.output

    def test_unknown_api(self, cli_runner: CliRunner) -> None:
        result = _invoke(cli_runner, "unknown.api")
        assert result.exit_code == 1
        assert "Unknown API: unknown.api" in result.output
        assert "apicall list" in result.output

    def test_name_without_dot(self, cli_runner: CliRunner) -> None:
        result = _invoke(cli_runner, "httpbin")
        assert result.exit_code == 1
        assert "Unknown API: httpbin" in result.output

    def test_bad_assignment(self, cli_runner: CliRunner, fake_fetch: _FakeFetch) -> None:
        result = _invoke(cli_runner, "httpbin.get", "novalue")
        assert result.exit_code == 2
        assert "Expected KEY=VALUE, got 'novalue'" in result.output
        assert fake_fetch.calls == []

    def test_missing_required_variable(self, cli_runner: CliRunner, fixture_catalog: Path) -> None:
        result = _invoke(cli_runner, "-c", str(fixture_catalog), "local.echo", "TOKEN=t")
        assert result.exit_code == 2
        assert "Variable ID is required" in result.output


class TestDryRun:
    def test_global_flag(self, cli_runner: CliRunner, fixture_catalog: Path) -> None:
        result = _invoke(
            cli_runner, "--dry-run", "-c", str(fixture_catalog), "local.echo", "ID=1", "TOKEN=t"
        )
        assert result.exit_code == 0
        assert "[dry-run] POST http://localhost/echo/1" in result.output
        assert "Header: X-Token: t" in result.output
        assert 'Body: {"id":"1","note":""}' in result.output
        assert '"dry_run"' in result.output

    def test_trailing_flag(self, cli_runner: CliRunner, fixture_catalog: Path) -> None:
        result = _invoke(cli_runner, "-c", str(fixture_catalog), "local.test", "VAR=x", "--dry-run")
        assert result.exit_code == 0
        assert "[dry-run] GET http://localhost/x" in result.output

    def test_alias_from_environment(self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        result = _invoke(cli_runner, "-n", "openai.chat", "MODEL=gpt-4o-mini", "PROMPT=hello")
        assert result.exit_code == 0
        assert "Header: Authorization: Bearer sk-env" in result.output
        assert '"content":"hello"' in result.output

    def test_quiet_hides_dry_run_details(self, cli_runner: CliRunner) -> None:
        result = _invoke(cli_runner, "-q", "-n", "httpbin.get")
        assert result.exit_code == 0
        assert "[dry-run]" not in result.output


# ---------------------------------------------------------------------------
# Helpers and entry point
# ---------------------------------------------------------------------------


class TestParseAssignments:
    def test_splits_on_first_equals(self) -> None:
        assert parse_assignments(["A=1", "B=x=y", "C="]) == {"A": "1", "B": "x=y", "C": ""}

    def test_last_assignment_wins(self) -> None:
        assert parse_assignments(["A=1", "A=2"]) == {"A": "2"}

    @pytest.mark.parametrize("item", ["novalue", "=value"])
    def test_rejects_invalid(self, item: str) -> None:
        with pytest.raises(InvalidUsageError):
            parse_assignments([item])


class TestDescribeApi:
    def test_optional_and_required_variables(self) -> None:
        api = ApiDefinition(
            service="svc",
            name="api",
            url="https://x/$A",
            method=HTTPMethod.PUT,
            headers={"K": "!$A"},
            body="$B",
        )
        text = describe_api(api)
        assert text.splitlines() == [
            "svc.api",
            "  PUT https://x/$A",
            "  Header: K: !$A",
            "  Body: $B",
            "  Variables: A (required), B",
        ]


class TestMain:
    def test_unexpected_error_exits_1(self, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
        def boom() -> None:
            raise RuntimeError("kaboom")

        monkeypatch.setattr("apicall.app._setup_signal_handlers", lambda: None)
        monkeypatch.setattr("apicall.app.app", boom)
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 1
        assert "Unexpected error: kaboom" in capsys.readouterr().err
