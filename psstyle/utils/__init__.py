"""Utility helpers for the linter."""

from .fileio import read_yaml_file, read_text_file, split_lines
from .code import iter_code_files

__all__ = [
    "read_yaml_file",
    "read_text_file",
    "split_lines",
    "iter_code_files",
]
