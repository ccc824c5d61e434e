"""Output formatting utilities for the CLI."""

from __future__ import annotations

import json
import sys
from typing import Any

import click

from linear_provider.provider.diagnostics import Diagnostics, Severity


def print_table(headers: list[str], rows: list[list[str]]) -> None:
    """Print a formatted ASCII table with dynamic column widths."""
    if not headers:
        return

    col_widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            if i < len(col_widths):
                col_widths[i] = max(col_widths[i], len(str(cell)))

    def _fmt_row(cells: list[str]) -> str:
        parts = [str(cell).ljust(col_widths[i]) for i, cell in enumerate(cells)]
        return "| " + " | ".join(parts) + " |"

    separator = "+-" + "-+-".join("-" * w for w in col_widths) + "-+"

    click.echo(separator)
    click.echo(_fmt_row(headers))
    click.echo(separator)
    for row in rows:
        # Pad row to match header count if needed
        padded = list(row) + [""] * (len(headers) - len(row))
        click.echo(_fmt_row(padded[: len(headers)]))
    click.echo(separator)


def print_json(data: Any) -> None:
    """Print data as formatted JSON to stdout."""
    json.dump(data, sys.stdout, indent=2, default=str)
    click.echo()  # trailing newline


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    click.echo(f"Error: {message}", err=True)


def print_detail(label: str, value: Any) -> None:
    """Print a key-value detail line."""
    click.echo(f"  {label}: {value}")


def print_diagnostics(diagnostics: Diagnostics) -> None:
    """Print every diagnostic to stderr, errors and warnings alike."""
    for diag in diagnostics:
        prefix = "Error" if diag.severity == Severity.ERROR else "Warning"
        where = f" (attribute {diag.attribute})" if diag.attribute else ""
        click.echo(f"{prefix}: {diag.summary}{where}", err=True)
        if diag.detail:
            click.echo(f"  {diag.detail}", err=True)
