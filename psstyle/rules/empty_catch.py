"""Detect ``catch`` blocks that silently swallow errors."""

from __future__ import annotations

from psstyle.result import ScanResult
from psstyle.severity import Severity

from . import BaseRule, Rule, ScanContext


class EmptyCatchRule(BaseRule):
    """Flag catch blocks with no statements. Comments alone do not count."""

    name = "empty_catch"
    prefix = "CAT"
    description = "Avoid empty catch blocks."

    def scan(self, context: ScanContext, result: ScanResult) -> None:
        for script in context.scripts:
            for block in script.iter_catch_blocks():
                if not block.is_empty:
                    continue
                result.add_finding(
                    self._finding(
                        script,
                        block.keyword,
                        title="Empty catch block",
                        severity=Severity.MEDIUM,
                        recommendation=(
                            "Handle the error, rethrow it with 'throw', or at least report it with "
                            "Write-Verbose/Write-Warning so failures are not hidden."
                        ),
                    )
                )


def get_rule() -> Rule:
    return EmptyCatchRule()
