"""People filter builder CLI.

Builds People API profile filters from YAML/JSON filter files, previews
the resulting requests, and runs them against a live account.

Usage:
    people-filter operators --type integer   List operators for a type
    people-filter compile filter.yaml        Compile a filter file
    people-filter attributes                 Load account attributes
    people-filter test filter.yaml           Run a filter against the API
    people-filter serve                      Start the HTTP service
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import Any, Optional

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from src.cli.config import ConnectionConfig, FilterBuilderConfig, load_config
from src.cli.output import (
    format_attribute_table,
    format_compiled_filter,
    format_config,
    format_operator_table,
    format_query_result,
)
from src.errors import FilterBuilderError, format_error
from src.filters.compiler import compile_filter_set
from src.filters.models import Attribute, AttributeType, FilterSet
from src.filters.operators import LIST_ITEM_OPERATORS, operators_for_attribute
from src.filters.preview import build_curl_command, build_request_path, summarize_results
from src.services.attribute_directory import STANDARD_FIELDS, AttributeDirectory
from src.services.people_client import PeopleApiClient, require_api_config

_log = logging.getLogger(__name__)

app = typer.Typer(
    name="people-filter",
    help="Build and test People API profile filters",
    no_args_is_help=True,
)
config_app = typer.Typer(help="Configuration management")

app.add_typer(config_app, name="config")

console = Console()

_config_path: str | None = None


@app.callback()
def main(
    config: Optional[str] = typer.Option(
        None, "--config", help="Path to people-filter.yaml config file"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """People filter builder: compile, preview and test profile filters."""
    global _config_path
    _config_path = config
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s:%(name)s:%(message)s",
    )


# --- Helpers ---


def _load_settings(path: str | None = None) -> FilterBuilderConfig:
    """Load configuration, exiting when the file is missing or invalid."""
    try:
        return load_config(config_path=path or _config_path)
    except FileNotFoundError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
    except (ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Invalid configuration:[/red] {escape(str(e))}")
    raise typer.Exit(1)


def _emit(output: str) -> None:
    """Write pre-rendered output without re-interpreting markup."""
    typer.echo(output.rstrip("\n"))


def _fail(error: FilterBuilderError) -> None:
    """Print a FilterBuilderError and exit non-zero."""
    console.print(f"[red]{escape(format_error(error))}[/red]", highlight=False)
    raise typer.Exit(1)


def _read_structured_file(path: Path) -> Any:
    """Parse a YAML or JSON file (JSON is valid YAML).

    Raises:
        FilterBuilderError: E-1004 when the file cannot be read or parsed.
    """
    try:
        return yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise FilterBuilderError.from_code("E-1004", path=path, reason=e.strerror or str(e)) from e
    except yaml.YAMLError as e:
        raise FilterBuilderError.from_code("E-1004", path=path, reason=f"invalid YAML/JSON ({e})") from e


def load_filter_file(path: Path) -> FilterSet:
    """Load a FilterSet from a YAML or JSON file.

    An empty file is an empty filter set.

    Raises:
        FilterBuilderError: E-1004 when the file is unreadable or malformed.
    """
    data = _read_structured_file(path)
    if data is None:
        return FilterSet()
    if not isinstance(data, dict):
        raise FilterBuilderError.from_code(
            "E-1004", path=path, reason="expected a mapping with 'conditions' and 'logic'"
        )
    try:
        return FilterSet.model_validate(data)
    except ValidationError as e:
        raise FilterBuilderError.from_code(
            "E-1004", path=path, reason=f"{e.error_count()} validation error(s)",
            details={"errors": [err["msg"] for err in e.errors()]},
        ) from e


def load_attributes_file(path: Path) -> list[Attribute]:
    """Load attributes saved by ``people-filter attributes --json``.

    Accepts either a list of attributes or a mapping with an
    ``attributes`` key.

    Raises:
        FilterBuilderError: E-1004 when the file is unreadable or malformed.
    """
    data = _read_structured_file(path)
    if isinstance(data, dict):
        data = data.get("attributes")
    if not isinstance(data, list):
        raise FilterBuilderError.from_code(
            "E-1004", path=path, reason="expected a list of attributes"
        )
    try:
        return [Attribute.model_validate(item) for item in data]
    except ValidationError as e:
        raise FilterBuilderError.from_code(
            "E-1004", path=path, reason=f"{e.error_count()} validation error(s)"
        ) from e


def _resolve_connection(
    settings: FilterBuilderConfig,
    base_url: str | None,
    api_key: str | None,
) -> ConnectionConfig:
    """Connection settings with command-line overrides applied."""
    updates = {}
    if base_url is not None:
        updates["base_url"] = base_url
    if api_key is not None:
        updates["api_key"] = api_key
    return ConnectionConfig(**{**settings.connection.model_dump(), **updates})


# --- Filter commands ---


@app.command()
def operators(
    type: Optional[AttributeType] = typer.Option(None, "--type", "-t", help="Attribute type"),
    field: Optional[str] = typer.Option(None, "--field", "-f", help="Attribute name"),
    list_items: bool = typer.Option(
        False, "--list-items", help="Show operators for list item conditions"
    ),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """List operators applicable to an attribute type."""
    if list_items:
        _emit(
            format_operator_table(list(LIST_ITEM_OPERATORS), title="List Item Operators", as_json=as_json)
        )
        return

    attr_type = type or dict(STANDARD_FIELDS).get(field or "")
    attribute = Attribute(name=field or "", type=attr_type) if attr_type is not None else None
    title = f"Operators for {attr_type.value}" if attr_type is not None else "Operators"
    _emit(
        format_operator_table(operators_for_attribute(attribute), title=title, as_json=as_json)
    )


@app.command("compile")
def compile_cmd(
    file: Path = typer.Argument(..., help="Filter file (YAML or JSON)"),
    attributes_file: Optional[Path] = typer.Option(
        None, "--attributes", "-a", help="Attributes file saved by 'attributes --json'"
    ),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Base URL for the curl preview"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Compile a filter file into People API filter text."""
    try:
        filter_set = load_filter_file(file)
        attributes = load_attributes_file(attributes_file) if attributes_file else None
    except FilterBuilderError as e:
        _fail(e)

    compiled = compile_filter_set(filter_set, attributes)
    _log.debug("Compiled %s: %s", file, compiled.raw)
    _emit(
        format_compiled_filter(
            compiled,
            request_path=build_request_path(compiled.encoded),
            curl=build_curl_command(compiled.encoded, base_url=base_url),
            as_json=as_json,
        )
    )


@app.command()
def attributes(
    base_url: Optional[str] = typer.Option(None, "--base-url", help="People API base URL"),
    api_key: Optional[str] = typer.Option(None, "--api-key", help="People API key"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Load standard, custom and list attributes from the People API."""
    connection = _resolve_connection(_load_settings(), base_url, api_key)

    async def _run():
        async with PeopleApiClient(
            connection.base_url, connection.api_key, timeout=connection.timeout_seconds
        ) as client:
            directory = AttributeDirectory(client, page_limit=connection.page_limit)
            return await directory.list_attributes()

    try:
        require_api_config(connection.base_url, connection.api_key)
        result = asyncio.run(_run())
    except FilterBuilderError as e:
        _fail(e)

    _emit(format_attribute_table(result, as_json=as_json))


@app.command("test")
def test_cmd(
    file: Optional[Path] = typer.Argument(None, help="Filter file (YAML or JSON); omit for no filter"),
    attributes_file: Optional[Path] = typer.Option(
        None, "--attributes", "-a", help="Attributes file saved by 'attributes --json'"
    ),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="People API base URL"),
    api_key: Optional[str] = typer.Option(None, "--api-key", help="People API key"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Run a filter against GET /people/2/persons."""
    connection = _resolve_connection(_load_settings(), base_url, api_key)

    try:
        require_api_config(connection.base_url, connection.api_key)
        filter_set = load_filter_file(file) if file else FilterSet()
        attributes = load_attributes_file(attributes_file) if attributes_file else None
    except FilterBuilderError as e:
        _fail(e)

    encoded = compile_filter_set(filter_set, attributes).encoded

    async def _run():
        async with PeopleApiClient(
            connection.base_url, connection.api_key, timeout=connection.timeout_seconds
        ) as client:
            return await client.execute_filter(encoded)

    result = asyncio.run(_run())
    summary = summarize_results(result.body) if result.success else None
    _emit(
        format_query_result(result, build_request_path(encoded), summary, as_json=as_json)
    )
    if not result.success:
        raise typer.Exit(1)


# --- Server ---


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", help="Bind port"),
):
    """Start the HTTP service (FastAPI + uvicorn)."""
    import uvicorn

    cfg = _load_settings()
    final_host = host or cfg.server.host
    final_port = port or cfg.server.port

    # Propagate config path so the API process loads the same config
    if _config_path:
        os.environ["PEOPLEFILTER_CONFIG_PATH"] = str(_config_path)

    console.print(f"[bold]Starting People filter builder on {final_host}:{final_port}[/bold]")
    uvicorn.run(
        "src.api.main:app",
        host=final_host,
        port=final_port,
        workers=1,
        log_level=cfg.server.log_level,
    )


# --- Config commands ---


@config_app.command("show")
def config_show(
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Display resolved configuration (API key masked)."""
    _emit(format_config(_load_settings(), as_json=as_json))


@config_app.command("validate")
def config_validate(
    config: Optional[str] = typer.Option(None, "--config", help="Config file path"),
):
    """Validate configuration and connection settings."""
    cfg = _load_settings(config)
    try:
        require_api_config(cfg.connection.base_url, cfg.connection.api_key)
    except FilterBuilderError as e:
        _fail(e)

    console.print("[green]Config is valid.[/green]")
    console.print(f"  Base URL: {cfg.connection.base_url}")
    console.print(f"  API key: {cfg.connection.masked_api_key}")


if __name__ == "__main__":
    app()
