"""Script discovery helpers."""

from __future__ import annotations

import fnmatch
from pathlib import Path
from typing import Generator, Iterable

DEFAULT_EXTENSIONS = (".ps1", ".psm1")


def is_excluded(path: Path, patterns: Iterable[str]) -> bool:
    posix = path.as_posix()
    return any(fnmatch.fnmatch(posix, pattern) or fnmatch.fnmatch(path.name, pattern) for pattern in patterns)


def iter_code_files(
    root_paths: Iterable[str],
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS,
    exclude: Iterable[str] = (),
) -> Generator[Path, None, None]:
    """Yield script files beneath the provided paths.

    Paths naming a file are yielded as given, whatever their suffix.
    Directories are walked recursively in sorted order.
    """

    patterns = tuple(exclude)
    suffixes = tuple(extension.lower() for extension in extensions)
    seen = set()
    for root in root_paths:
        root_path = Path(root)
        if root_path.is_file():
            candidates = [root_path]
        else:
            candidates = sorted(
                path for path in root_path.rglob("*") if path.suffix.lower() in suffixes and path.is_file()
            )
        for path in candidates:
            if path in seen or is_excluded(path, patterns):
                continue
            seen.add(path)
            yield path
