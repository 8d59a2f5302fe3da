"""Formatting checks: trailing whitespace, tabs, blank lines and the final newline."""

from __future__ import annotations

from psstyle.result import ScanResult
from psstyle.scanner import ScriptFile
from psstyle.severity import Severity

from . import BaseRule, Rule, ScanContext


class WhitespaceRule(BaseRule):
    name = "whitespace"
    prefix = "FMT"
    description = "Indent with spaces, trim trailing whitespace, keep single blank lines and end with a newline."

    def scan(self, context: ScanContext, result: ScanResult) -> None:
        for script in context.scripts:
            self._scan_lines(script, result)
            if script.text and not script.text.endswith("\n"):
                line = len(script.lines)
                result.add_finding(
                    self._finding_at(
                        script,
                        line,
                        len(script.lines[-1]) + 1,
                        title="File does not end with a newline",
                        severity=Severity.LOW,
                        recommendation="Terminate the last line with a newline character.",
                    )
                )

    def _scan_lines(self, script: ScriptFile, result: ScanResult) -> None:
        inside_strings = script.string_lines
        blank_run = 0
        for number, line in enumerate(script.lines, start=1):
            if number in inside_strings:
                blank_run = 0
                continue
            if not line.strip():
                blank_run += 1
                if blank_run == 2:
                    result.add_finding(
                        self._finding_at(
                            script,
                            number,
                            1,
                            title="More than one consecutive blank line",
                            severity=Severity.LOW,
                            recommendation="Separate blocks with a single blank line.",
                        )
                    )
            else:
                blank_run = 0

            stripped = line.rstrip(" \t")
            if stripped != line:
                result.add_finding(
                    self._finding_at(
                        script,
                        number,
                        len(stripped) + 1,
                        title="Trailing whitespace",
                        severity=Severity.LOW,
                        recommendation="Remove whitespace at the end of the line.",
                    )
                )
            indent = line[: len(line) - len(line.lstrip(" \t"))]
            if "\t" in indent:
                result.add_finding(
                    self._finding_at(
                        script,
                        number,
                        indent.index("\t") + 1,
                        title="Tab character used for indentation",
                        severity=Severity.LOW,
                        recommendation="Indent with four spaces.",
                    )
                )


def get_rule() -> Rule:
    return WhitespaceRule()
