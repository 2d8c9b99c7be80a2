"""Flat TOML command files (Gemini CLI).

Top-level scalar/array fields plus a ``prompt`` string holding the body.
Reading uses the standard library ``tomllib``; writing uses ``tomli-w``.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import tomli_w

from acsync.errors import ParseError

PROMPT_KEY = "prompt"


def load_toml_command(path: Path) -> Tuple[Dict[str, Any], str]:
    """Read a TOML command file into (fields, prompt).

    ``fields`` holds every top-level key except ``prompt``. A missing or
    non-string prompt yields an empty body.
    """
    try:
        data = tomllib.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
        raise ParseError(f"Failed to parse TOML: {e}", path, e) from e

    prompt = data.pop(PROMPT_KEY, "")
    if not isinstance(prompt, str):
        prompt = ""
    return data, prompt


def dump_toml_command(fields: Mapping[str, Any], prompt: str, path: Optional[Path] = None) -> str:
    """Serialize a TOML command with ``prompt`` placed last.

    A blank description is omitted rather than written as an empty string.
    """
    data: Dict[str, Any] = {}

    description = fields.get("description")
    if isinstance(description, str) and description.strip():
        data["description"] = description

    for key, value in fields.items():
        if key in ("description", PROMPT_KEY) or value is None:
            continue
        data[key] = value

    data[PROMPT_KEY] = prompt

    try:
        return tomli_w.dumps(data, multiline_strings=True)
    except (TypeError, ValueError) as e:
        raise ParseError(f"Failed to stringify TOML command: {e}", path, e) from e
