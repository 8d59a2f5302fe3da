"""Validate .psstyle.yaml suppression entries for expiry metadata."""

from __future__ import annotations

import sys
from pathlib import Path

from psstyle.suppressions import validate_suppressions
from psstyle.utils import read_yaml_file

CONFIG_FILE = Path(".psstyle.yaml")


def main() -> int:
    data = read_yaml_file(CONFIG_FILE)
    if not data:
        return 0

    if not isinstance(data, dict):
        errors = [f"{CONFIG_FILE}: configuration root must be a mapping"]
    else:
        suppressions = data.get("suppressions") or []
        if isinstance(suppressions, list):
            errors = validate_suppressions(suppressions)
        else:
            errors = [f"{CONFIG_FILE}: 'suppressions' must be a list"]
    if errors:
        sys.stderr.write("Suppression validation failed:\n" + "\n".join(errors) + "\n")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
