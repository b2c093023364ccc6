"""Render API payloads as JSON, YAML, or a table on stdout.

Only successful payloads pass through here; errors are printed by the
error boundary in :mod:`assay_cli.cli.app`.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any

from assay_cli.cli.console import get_rich_console, stdout_console
from assay_cli.exceptions import EnvironmentError

MIN_COLUMN_WIDTH = 10


def _import_yaml() -> Any:
    """Import PyYAML lazily; only the ``yaml`` output format needs it."""
    try:
        import yaml
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "PyYAML is not installed. Install with: pip install PyYAML",
        ) from exc
    return yaml


# ---------------------------------------------------------------------------
# Pure formatters
# ---------------------------------------------------------------------------

def format_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def format_yaml(data: Any) -> str:
    yaml = _import_yaml()
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True).rstrip("\n")


def table_rows(data: Any) -> Any:
    """Pick what a table should show.

    API envelopes ``{"success": ..., "data": [...]}`` are unwrapped so the
    table lists the records rather than the envelope keys.
    """
    if isinstance(data, Mapping) and "data" in data and isinstance(data["data"], (list, Mapping)):
        return data["data"]
    return data


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def _columns(rows: Sequence[Mapping[str, Any]]) -> list[str]:
    columns: list[str] = []
    for row in rows:
        for key in row:
            if key not in columns:
                columns.append(key)
    return columns


def format_plain_table(data: Any) -> str:
    """Plain-text table used when Rich is unavailable."""
    rows = table_rows(data)
    if isinstance(rows, Sequence) and not isinstance(rows, str):
        if not rows:
            return "No results"
        records = [row for row in rows if isinstance(row, Mapping)]
        if len(records) != len(rows):
            return "\n".join(_cell(row) for row in rows)
        headers = _columns(records)
        cells = [[_cell(record.get(h)) for h in headers] for record in records]
        widths = [
            max([len(h), MIN_COLUMN_WIDTH, *(len(r[i]) for r in cells)])
            for i, h in enumerate(headers)
        ]
        lines = [
            " | ".join(h.ljust(w) for h, w in zip(headers, widths)),
            "-|-".join("-" * w for w in widths),
        ]
        lines.extend(" | ".join(c.ljust(w) for c, w in zip(row, widths)) for row in cells)
        return "\n".join(lines)

    if isinstance(rows, Mapping):
        return "\n".join(f"{key}: {json.dumps(value, ensure_ascii=False)}" for key, value in rows.items())
    return _cell(rows)


# ---------------------------------------------------------------------------
# Rich table
# ---------------------------------------------------------------------------

def _build_rich_table(data: Any) -> Any | None:
    """Return a Rich ``Table`` for *data*, or ``None`` when Rich is absent."""
    try:
        from rich.table import Table
    except ModuleNotFoundError:
        return None

    rows = table_rows(data)
    table = Table(show_header=True, header_style="bold magenta", border_style="dim")

    if isinstance(rows, Mapping):
        table.add_column("Field", style="bold")
        table.add_column("Value")
        for key, value in rows.items():
            table.add_row(str(key), _cell(value))
        return table

    if isinstance(rows, Sequence) and not isinstance(rows, str):
        records = [row for row in rows if isinstance(row, Mapping)]
        if not rows or len(records) != len(rows):
            return None
        headers = _columns(records)
        for header in headers:
            table.add_column(header, min_width=MIN_COLUMN_WIDTH, overflow="fold")
        for record in records:
            table.add_row(*(_cell(record.get(h)) for h in headers))
        return table

    return None


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def emit_payload(data: Any, output_format: str) -> None:
    """Print *data* to stdout in *output_format* (``json``/``yaml``/``table``)."""
    if output_format == "yaml":
        stdout_console.raw(format_yaml(data))
        return

    if output_format == "table":
        table = _build_rich_table(data)
        if table is None:
            stdout_console.raw(format_plain_table(data))
            return
        get_rich_console(stderr=False).print(table)
        return

    stdout_console.raw(format_json(data))
