"""Basic file IO helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Any, List

import yaml


def read_yaml_file(path: Path) -> Any:
    """Return the parsed YAML if the file exists, otherwise ``None``."""

    if not path.exists():
        return None
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle)


def read_text_file(path: Path) -> str:
    """Return the file contents as UTF-8 text, or an empty string if missing.

    A leading byte order mark, common in Windows-authored scripts, is dropped.
    """

    if not path.exists():
        return ""
    return path.read_text(encoding="utf-8-sig")


def split_lines(text: str) -> List[str]:
    """Split on ``\\n`` only, matching the tokenizer's line numbering."""

    lines = [line.rstrip("\r") for line in text.split("\n")]
    if lines and lines[-1] == "":
        lines.pop()
    return lines
