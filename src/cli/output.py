"""CLI output formatters for Rich tables and JSON.

Provides human-readable Rich table output (default) and machine-parseable
JSON output (--json flag). All formatting goes through these functions
so the CLI commands stay clean.
"""

import dataclasses
import json
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from src.cli.config import FilterBuilderConfig
from src.filters.models import LIST_SEPARATOR, Attribute, AttributeType, CompiledFilter
from src.filters.operators import OperatorDescriptor
from src.services.attribute_directory import AttributeLoadResult
from src.services.people_client import QueryResult

console = Console()

# Attribute type color map
TYPE_COLORS = {
    AttributeType.string: "white",
    AttributeType.integer: "cyan",
    AttributeType.decimal: "cyan",
    AttributeType.boolean: "magenta",
    AttributeType.date: "blue",
    AttributeType.date_time: "blue",
    AttributeType.enum: "yellow",
    AttributeType.array: "green",
    AttributeType.list_: "green",
}


def _dumps(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def _render(renderable: Any) -> str:
    with console.capture() as capture:
        console.print(renderable)
    return capture.get()


def display_field_name(name: str) -> str:
    """Attribute name with the list separator shown as a dot."""
    return name.replace(LIST_SEPARATOR, ".")


def format_operator_table(
    operators: list[OperatorDescriptor],
    title: str = "Operators",
    as_json: bool = False,
) -> str:
    """Format operator descriptors as a Rich table or JSON.

    Args:
        operators: Ordered operator descriptors.
        title: Table title.
        as_json: If True, return JSON string instead of Rich table.

    Returns:
        Formatted string output.
    """
    if as_json:
        return _dumps([
            {
                "code": op.code.value,
                "label": op.label,
                "description": op.description,
                "applicable_types": [t.value for t in AttributeType if t in op.applicable_types],
            }
            for op in operators
        ])

    if not operators:
        return "No operators apply."

    table = Table(title=title)
    table.add_column("Code", style="cyan", no_wrap=True)
    table.add_column("Label")
    table.add_column("Types", style="dim")

    for op in operators:
        types = ", ".join(t.value for t in AttributeType if t in op.applicable_types)
        table.add_row(op.code.value, op.label, types)

    return _render(table)


def format_compiled_filter(
    compiled: CompiledFilter,
    request_path: str,
    curl: str,
    as_json: bool = False,
) -> str:
    """Format a compiled filter with its request previews.

    Args:
        compiled: Compiler output.
        request_path: Persons search path including the filter.
        curl: Ready-to-run curl command.
        as_json: If True, return JSON string instead of Rich panel.

    Returns:
        Formatted string output.
    """
    if as_json:
        return _dumps({
            "raw": compiled.raw,
            "encoded": compiled.encoded,
            "explanation": compiled.explanation,
            "condition_count": compiled.condition_count,
            "request_path": request_path,
            "curl": curl,
        })

    if compiled.is_empty:
        return _render(Panel(
            "[dim]No complete conditions; the request runs without a filter.[/dim]",
            title="Filter",
            border_style="dim",
        ))

    lines = [
        f"[bold]Conditions:[/bold]  {compiled.condition_count}",
        f"[bold]Meaning:[/bold]     {escape(display_field_name(compiled.explanation))}",
        "",
        "[bold]Raw:[/bold]",
        escape(compiled.raw.replace(LIST_SEPARATOR, "\\u0001")),
        "",
        "[bold]Encoded:[/bold]",
        escape(compiled.encoded),
        "",
        "[bold]Request:[/bold]",
        f"GET {escape(request_path)}",
        "",
        "[bold]curl:[/bold]",
        escape(curl),
    ]
    return _render(Panel("\n".join(lines), title="Compiled Filter", border_style="cyan"))


def format_attribute_table(result: AttributeLoadResult, as_json: bool = False) -> str:
    """Format loaded attributes as a Rich table or JSON.

    Args:
        result: Attributes plus per-source warnings.
        as_json: If True, return JSON string instead of Rich table.

    Returns:
        Formatted string output.
    """
    if as_json:
        return _dumps({
            "attributes": [a.model_dump(mode="json", by_alias=True, exclude_none=True)
                           for a in result.attributes],
            "warnings": result.warnings,
        })

    table = Table(title=f"Attributes ({len(result.attributes)})")
    table.add_column("Name", style="cyan")
    table.add_column("Type")
    table.add_column("Custom", justify="center")
    table.add_column("Details", style="dim")

    for attr in result.attributes:
        color = TYPE_COLORS.get(attr.type, "white")
        table.add_row(
            escape(display_field_name(attr.name)),
            f"[{color}]{attr.type.value}[/{color}]",
            "yes" if attr.is_custom else "",
            escape(_attribute_details(attr)),
        )

    output = _render(table)
    for warning in result.warnings:
        output += _render(f"[yellow]Warning:[/yellow] {escape(warning)}")
    return output


def _attribute_details(attr: Attribute) -> str:
    if attr.is_list:
        return ", ".join(f"{name}: {t.value}" for name, t in attr.schema_fields())
    if attr.enum_values:
        return " | ".join(attr.enum_values)
    return ""


def format_query_result(
    result: QueryResult,
    request_path: str,
    summary: str | None = None,
    as_json: bool = False,
) -> str:
    """Format a test query outcome as a Rich panel or JSON.

    Args:
        result: Query outcome from the People API client.
        request_path: Path that was requested.
        summary: One-line result summary, when available.
        as_json: If True, return JSON string instead of Rich panel.

    Returns:
        Formatted string output.
    """
    if as_json:
        data = dataclasses.asdict(result)
        data["request_path"] = request_path
        data["summary"] = summary
        return _dumps(data)

    color = "green" if result.success else "red"
    lines = [
        f"[bold]Request:[/bold]  GET {escape(request_path)}",
        f"[bold]Status:[/bold]   [{color}]{result.status} {escape(result.status_text)}[/{color}]",
        f"[bold]Time:[/bold]     {result.elapsed_ms} ms",
    ]
    if summary:
        lines.append(f"[bold]Result:[/bold]   {escape(summary)}")
    if result.error:
        lines.append("")
        code = f" ({result.error_code})" if result.error_code else ""
        lines.append(f"[bold red]Error{code}:[/bold red] {escape(result.error)}")
        if result.remediation:
            lines.append(f"[bold]Action:[/bold]   {escape(result.remediation)}")
    if result.body is not None:
        lines.append("")
        body = result.body if isinstance(result.body, str) else _dumps(result.body)
        lines.append(escape(body))

    return _render(Panel("\n".join(lines), title="Test Query", border_style=color))


def format_config(cfg: FilterBuilderConfig, as_json: bool = False) -> str:
    """Format resolved configuration with the API key masked.

    Args:
        cfg: Loaded configuration.
        as_json: If True, return JSON string instead of text.

    Returns:
        Formatted string output.
    """
    data = cfg.model_dump(mode="json")
    data["connection"]["api_key"] = cfg.connection.masked_api_key
    if as_json:
        return _dumps(data)

    lines = []
    for section, values in data.items():
        lines.append(f"[bold]{section.capitalize()}:[/bold]")
        for key, value in values.items():
            lines.append(f"  {key}: {escape(str(value))}")
        lines.append("")
    return _render("\n".join(lines).rstrip())
