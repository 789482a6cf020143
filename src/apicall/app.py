"""Typer application and CLI entry point for apicall.

Commands::

    apicall                         usage summary
    apicall list [PATTERN]          APIs whose service.name contains PATTERN
    apicall where                   catalog file in use
    apicall help [PATTERN]          full definitions of matching APIs
    apicall SERVICE.NAME [K=V ...]  call an API with K=V as variables

The last form has no sub-command keyword: :class:`_ApiCallGroup` routes any
first argument that is not a known command to the hidden ``call`` command.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``.
"""

from __future__ import annotations

import logging
import signal
import sys
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import typer
from typer.core import TyperGroup

from apicall import __version__
from apicall.exceptions import ApicallError, InvalidUsageError, NotFoundError
from apicall.exit_codes import EXIT_GENERIC_FAILURE, EXIT_HTTP_ERROR
from apicall.models import ApiDefinition
from apicall.output import (
    OutputFormat,
    OutputManager,
    error,
    format_response,
    get_output,
    print_data,
    set_output,
    suggest,
    warning,
)

USAGE = """\
Usage: apicall [OPTIONS] COMMAND [ARGS]...

Call HTTP APIs defined in a templated catalog.

Commands:
  list [PATTERN]               List APIs whose service.name contains PATTERN.
  where                        Show the catalog file in use.
  help [PATTERN]               Show full definitions of matching APIs.
  SERVICE.NAME [KEY=VALUE...]  Call an API, supplying template variables.

Options:
  -c, --config PATH  Catalog file to use.
  --json             JSON output for list and help.
  -n, --dry-run      Print the request instead of sending it.
  --no-color         Disable color output.
  -q, --quiet        Suppress non-essential output.
  -v, --verbose      Enable debug output.
  --version          Show version and exit.
  --help             Show this message and exit.
"""


class _ApiCallGroup(TyperGroup):
    """Command group that treats an unknown first argument as ``SERVICE.NAME``."""

    def resolve_command(self, ctx: Any, args: list[str]) -> Any:  # noqa: ANN401
        if args and not args[0].startswith("-") and args[0] not in self.commands:
            args = ["call", *args]
        return super().resolve_command(ctx, args)


app = typer.Typer(
    name="apicall",
    cls=_ApiCallGroup,
    help="Call HTTP APIs defined in a templated catalog.",
    invoke_without_command=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"apicall {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    config: Optional[str] = typer.Option(
        None, "--config", "-c", help="Catalog file to use."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output for list and help."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Print the request instead of sending it."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~apicall.output.OutputManager`, turns on
    debug logging for ``--verbose``, and stores shared options in
    ``ctx.obj``.  Without a sub-command it prints the usage summary.
    """
    output = OutputManager(
        format=OutputFormat.JSON if json_output else OutputFormat.AUTO,
        no_color=no_color,
        quiet=quiet,
    )
    set_output(output)

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="[debug] %(name)s: %(message)s",
        )

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["dry_run"] = dry_run

    if ctx.invoked_subcommand is None:
        print_data(USAGE)
        raise typer.Exit()


@contextmanager
def _handle_errors() -> Iterator[None]:
    """Print an :class:`ApicallError` to stderr and exit with its code."""
    try:
        yield
    except ApicallError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


# ------------------------------------------------------------------ #
# Commands
# ------------------------------------------------------------------ #


@app.command("list")
def list_command(
    ctx: typer.Context,
    pattern: Optional[str] = typer.Argument(
        None, help="Substring of service.name to filter on."
    ),
) -> None:
    """List APIs whose service.name contains PATTERN."""
    from apicall.catalog import find_apis

    with _handle_errors():
        apis = find_apis(pattern, ctx.obj["config"])

    format_response([api.full_name for api in apis])


@app.command("where")
def where_command(ctx: typer.Context) -> None:
    """Show the catalog file in use."""
    from apicall.config import resolve_catalog_path

    with _handle_errors():
        path = resolve_catalog_path(ctx.obj["config"])
    print_data(str(path))


@app.command("help")
def help_command(
    ctx: typer.Context,
    pattern: Optional[str] = typer.Argument(
        None, help="Substring of service.name to filter on."
    ),
) -> None:
    """Show full definitions of APIs matching PATTERN."""
    from apicall.catalog import find_apis

    with _handle_errors():
        apis = find_apis(pattern, ctx.obj["config"])

    if not apis:
        warning(f"No APIs match '{pattern}'")
        suggest("Run 'apicall list' to see available APIs.")
        return

    if get_output().format == OutputFormat.JSON:
        format_response([api.model_dump(mode="json") for api in apis])
    else:
        format_response("\n\n".join(describe_api(api) for api in apis))


@app.command(
    "call",
    hidden=True,
    context_settings={"ignore_unknown_options": True},
)
def call_command(
    ctx: typer.Context,
    target: str = typer.Argument(..., help="API to call, as service.name."),
    assignments: Optional[list[str]] = typer.Argument(
        None, help="Template variables as KEY=VALUE."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Print the request instead of sending it."
    ),
) -> None:
    """Call SERVICE.NAME and print the raw response body."""
    from apicall.catalog import split_api_name
    from apicall.client import fetch_api

    with _handle_errors():
        service, name = split_api_name(target)
        variables = parse_assignments(assignments or [])
        try:
            response = fetch_api(
                service,
                name,
                config_path=ctx.obj["config"],
                variables=variables,
                dry_run=dry_run or ctx.obj["dry_run"],
            )
        except NotFoundError:
            suggest("Run 'apicall list' to see available APIs.")
            raise

    if response.text:
        print_data(response.text)
    if response.is_error:
        error(f"HTTP {response.status_code} {response.reason_phrase}".rstrip())
        raise typer.Exit(code=EXIT_HTTP_ERROR)


# ------------------------------------------------------------------ #
# Helpers
# ------------------------------------------------------------------ #


def parse_assignments(assignments: list[str]) -> dict[str, str]:
    """Turn ``["KEY=value", ...]`` into a variable mapping.

    Values may contain ``=``; only the first one separates key and value.

    Raises:
        InvalidUsageError: If an item has no ``=`` or an empty key.
    """
    variables: dict[str, str] = {}
    for item in assignments:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise InvalidUsageError(f"Expected KEY=VALUE, got '{item}'")
        variables[key] = value
    return variables


def describe_api(api: ApiDefinition) -> str:
    """Render one definition for ``apicall help``, templates shown verbatim."""
    from apicall.templating import placeholders

    lines = [api.full_name, f"  {api.method.value} {api.url}"]
    for key, value in api.headers.items():
        lines.append(f"  Header: {key}: {value}")
    if api.body:
        lines.append(f"  Body: {api.body}")

    required: dict[str, bool] = {}
    templates = [api.url, *api.headers.values(), api.body]
    for template in templates:
        for placeholder in placeholders(template):
            required[placeholder.name] = required.get(placeholder.name, False) or placeholder.required
    if required:
        rendered = ", ".join(
            f"{name} (required)" if is_required else name
            for name, is_required in required.items()
        )
        lines.append(f"  Variables: {rendered}")
    return "\n".join(lines)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``apicall`` console script.

    Unexpected exceptions are reported on stderr and exit with
    :data:`~apicall.exit_codes.EXIT_GENERIC_FAILURE`.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
