"""Settings persistence — a flat JSON file next to where the calculator runs.

The file is a single JSON object:

    {
      "display_name": "User",
      "precision": 2,
      "allowed_operations": ["+", "-", "*", "/", "^", "sqrt"]
    }
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from simplecalc.models import Settings

DEFAULT_SETTINGS_FILE = "calculator_settings.json"
SETTINGS_ENV_VAR = "SIMPLECALC_SETTINGS"


def load_settings(path: Path) -> Optional[Settings]:
    """Load settings from a JSON file.

    Returns None when the file is missing, unreadable, or does not hold a
    JSON object. Bad individual fields fall back to their defaults.
    """
    if not path.exists():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError, OSError):
        return None
    if not isinstance(data, dict):
        return None
    return Settings.from_dict(data)


def save_settings(settings: Settings, path: Path) -> Path:
    """Write settings as indented JSON. OSError propagates to the caller."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(settings.to_dict(), indent=2) + "\n", encoding="utf-8")
    return path
