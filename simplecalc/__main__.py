"""CLI for the simplecalc calculator.

Usage:
    python -m simplecalc                         # Interactive session
    python -m simplecalc calc 2 + 2              # One-shot evaluation
    python -m simplecalc settings                # Show current settings
    python -m simplecalc configure               # Edit and save settings
    python -m simplecalc -s ~/calc.json repl     # Use another settings file
"""

from __future__ import annotations

from pathlib import Path
from typing import List

import typer
from rich.console import Console
from rich.markup import escape

from simplecalc.display import format_error, format_result, render_settings
from simplecalc.evaluator import evaluate
from simplecalc.models import Settings
from simplecalc.repl import console_ask, load_or_create_settings, prompt_for_settings, run_repl, try_save
from simplecalc.store import DEFAULT_SETTINGS_FILE, SETTINGS_ENV_VAR, load_settings

app = typer.Typer(
    name="simplecalc",
    help="Interactive calculator with per-user settings",
    add_completion=False,
)
out = Console(highlight=False)
console = Console(stderr=True)


def _settings_path(ctx: typer.Context) -> Path:
    return ctx.obj["settings_path"]


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    settings_path: Path = typer.Option(
        Path(DEFAULT_SETTINGS_FILE),
        "--settings",
        "-s",
        envvar=SETTINGS_ENV_VAR,
        help="Settings file (JSON)",
    ),
) -> None:
    """Start an interactive session when no command is given."""
    ctx.obj = {"settings_path": settings_path}
    if ctx.invoked_subcommand is None:
        cmd_repl(ctx)


@app.command("repl")
def cmd_repl(ctx: typer.Context) -> None:
    """Start an interactive calculator session."""
    path = _settings_path(ctx)
    ask = console_ask(out)
    settings = load_or_create_settings(path, out, ask)
    run_repl(settings, path, out, ask)


@app.command("calc", context_settings={"ignore_unknown_options": True})
def cmd_calc(
    ctx: typer.Context,
    expression: List[str] = typer.Argument(help="Expression, e.g. '2 + 2' or 'sqrt 9'"),
) -> None:
    """Evaluate a single expression and print the result."""
    path = _settings_path(ctx)
    settings = load_settings(path)
    if settings is None:
        console.print(f"[dim]No settings at {escape(str(path))}, using defaults[/dim]")
        settings = Settings()

    result = evaluate(" ".join(expression), settings)
    if result.error is not None:
        out.print(format_error(result.error), markup=False, soft_wrap=True)
        raise typer.Exit(1)
    out.print(format_result(result.value, settings.precision), markup=False, soft_wrap=True)


@app.command("settings")
def cmd_settings(ctx: typer.Context) -> None:
    """Show the current settings."""
    path = _settings_path(ctx)
    settings = load_settings(path)
    if settings is None:
        console.print(f"[yellow]No settings at {escape(str(path))}[/yellow]")
        render_settings(Settings(), out, title="Calculator Settings (defaults)")
        return
    console.print(f"[dim]Loaded {escape(str(path))}[/dim]")
    render_settings(settings, out)


@app.command("configure")
def cmd_configure(ctx: typer.Context) -> None:
    """Edit settings interactively and save them."""
    path = _settings_path(ctx)
    current = load_settings(path) or Settings()
    settings = prompt_for_settings(current, out, console_ask(out))
    if not try_save(settings, path, out):
        raise typer.Exit(1)
    console.print(f"Settings saved to {escape(str(path))}")


if __name__ == "__main__":
    app()
