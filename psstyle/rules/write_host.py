"""Discourage ``Write-Host`` in favour of the output and verbose streams."""

from __future__ import annotations

from psstyle.result import ScanResult
from psstyle.severity import Severity

from . import BaseRule, Rule, ScanContext

HOST_COMMANDS = frozenset({"write-host"})


class WriteHostRule(BaseRule):
    name = "write_host"
    prefix = "WHS"
    description = "Use Write-Verbose or Write-Output instead of Write-Host."

    def scan(self, context: ScanContext, result: ScanResult) -> None:
        for script in context.scripts:
            for command in script.iter_commands():
                if command.name.lower() not in HOST_COMMANDS:
                    continue
                result.add_finding(
                    self._finding(
                        script,
                        command.name_token,
                        title="Write-Host bypasses the pipeline",
                        severity=Severity.MEDIUM,
                        recommendation=(
                            "Use Write-Verbose for progress messages and Write-Output for data. Write-Host "
                            "output cannot be captured or suppressed by callers."
                        ),
                    )
                )


def get_rule() -> Rule:
    return WriteHostRule()
