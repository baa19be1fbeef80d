"""Interactive calculator session.

Session flow:
1. Load settings, or walk the user through first-run setup
2. Print the banner
3. Loop: read a line → command or expression → print result / error
4. `quit`, `exit` or end of input ends the session

All input goes through an `ask` callable returning None at end of input, so
the loop can be driven by a script as easily as by a terminal.
"""

from __future__ import annotations

import re
from dataclasses import replace
from pathlib import Path
from typing import Callable, Optional

from rich.console import Console
from rich.markup import escape

from simplecalc.display import format_error, format_result
from simplecalc.evaluator import evaluate
from simplecalc.models import DEFAULT_OPERATIONS, Settings
from simplecalc.store import load_settings, save_settings

Ask = Callable[[str], Optional[str]]

QUIT_COMMANDS = ("quit", "exit")
SETTINGS_COMMAND = "settings"

# Optional sign and ASCII digits only; int() would also take "1_0" or "٣"
_PRECISION_RE = re.compile(r"[+-]?\d+", re.ASCII)


def console_ask(console: Console) -> Ask:
    """Build an Ask that reads from the terminal via the console."""

    def ask(prompt: str) -> Optional[str]:
        try:
            return console.input(prompt)
        except (EOFError, KeyboardInterrupt):
            return None

    return ask


def prompt_for_settings(current: Settings, console: Console, ask: Ask) -> Settings:
    """Ask for each setting in turn; blank or invalid answers keep the current value.

    Returns a new Settings; `current` is left untouched.
    """
    name = ask(f"Name ({escape(current.display_name)}): ")
    display_name = name.strip() if name and name.strip() else current.display_name

    precision = current.precision
    answer = ask(f"Precision (decimal places) ({current.precision}): ")
    text = answer.strip() if answer else ""
    if text:
        if not _PRECISION_RE.fullmatch(text):
            console.print(f"[yellow]Not a whole number: {escape(text)}, keeping {current.precision}[/yellow]")
        elif int(text) >= 0:
            precision = int(text)
        else:
            console.print(f"[yellow]Precision cannot be negative, keeping {current.precision}[/yellow]")

    console.print(
        "Allowed operations (comma separated). Available: " + escape(", ".join(DEFAULT_OPERATIONS)),
        highlight=False,
    )
    ops_answer = ask(f"Current: {escape(','.join(current.allowed_operations))} : ")
    allowed = list(current.allowed_operations)
    if ops_answer and ops_answer.strip():
        allowed = [part.strip() for part in ops_answer.split(",") if part.strip()]

    return replace(current, display_name=display_name, precision=precision, allowed_operations=allowed)


def try_save(settings: Settings, path: Path, console: Console) -> bool:
    """Save settings, reporting failure instead of raising."""
    try:
        save_settings(settings, path)
    except OSError as e:
        console.print(f"[red]Could not save settings:[/red] {escape(str(e))}")
        return False
    return True


def load_or_create_settings(path: Path, console: Console, ask: Ask) -> Settings:
    """Load stored settings, or run first-time setup and offer to save."""
    settings = load_settings(path)
    if settings is not None:
        return settings

    console.print("No settings found. Let's customize your calculator.")
    settings = prompt_for_settings(Settings(), console, ask)

    answer = ask("Save these settings for next time? (y/N): ")
    if answer and answer.strip().lower().startswith("y"):
        if try_save(settings, path, console):
            console.print(f"Settings saved to {escape(str(path))}")
    return settings


def print_banner(settings: Settings, console: Console) -> None:
    console.print(f"Welcome, {escape(settings.display_name)}! Simple Calculator starting.")
    console.print("Type expressions like: 2 + 2  or  sqrt 9  or  2 ^ 3", highlight=False)
    console.print("Commands: `settings` to change, `quit` to exit")


def evaluate_line(line: str, settings: Settings) -> str:
    """Evaluate one expression and render the outcome as a display line."""
    result = evaluate(line, settings)
    if result.error is not None:
        return format_error(result.error)
    return format_result(result.value, settings.precision)


def run_repl(settings: Settings, path: Path, console: Console, ask: Ask) -> Settings:
    """Run the read-evaluate-print loop until quit or end of input.

    Returns the settings in effect when the session ended.
    """
    print_banner(settings, console)

    while True:
        line = ask(f"{escape(settings.display_name)}> ")
        if line is None:
            break
        line = line.strip()
        if line.lower() in QUIT_COMMANDS:
            break
        if line.lower() == SETTINGS_COMMAND:
            settings = prompt_for_settings(settings, console, ask)
            try_save(settings, path, console)
            continue
        if not line:
            continue

        console.print(evaluate_line(line, settings), markup=False, highlight=False, soft_wrap=True)

    console.print("Goodbye!")
    return settings
