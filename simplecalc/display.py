"""Rendering for results, errors and settings.

Rounding is Python's round() (half-to-even on the stored binary value), and
the decimal point is always '.', whatever the locale.
"""

from __future__ import annotations

import math

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from simplecalc.models import EvaluationError, Settings


def round_result(value: float, precision: int) -> float:
    """Round to `precision` decimal places, folding -0.0 into 0.0."""
    if not math.isfinite(value):
        return value
    return round(value, precision) + 0.0


def format_result(value: float, precision: int) -> str:
    """Fixed-point rendering with exactly `precision` fractional digits."""
    if math.isnan(value):
        return "nan"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return f"{round_result(value, precision):.{precision}f}"


def format_error(error: EvaluationError) -> str:
    return f"Error: {error.message}"


def render_settings(settings: Settings, console: Console, title: str = "Calculator Settings") -> None:
    """Render a Rich table of the current settings."""
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Setting", style="dim", min_width=12)
    table.add_column("Value", style="green")

    table.add_row("Name", escape(settings.display_name))
    table.add_row("Precision", str(settings.precision))
    ops = ", ".join(settings.allowed_operations)
    table.add_row("Operations", escape(ops) if ops else "[dim]none[/dim]")

    console.print()
    console.print(table)
    console.print()
