"""Flag dynamic code execution through ``Invoke-Expression``."""

from __future__ import annotations

from psstyle.result import ScanResult
from psstyle.severity import Severity

from . import BaseRule, Rule, ScanContext

EXPRESSION_COMMANDS = frozenset({"invoke-expression", "iex"})


class InvokeExpressionRule(BaseRule):
    name = "invoke_expression"
    prefix = "IEX"
    description = "Avoid Invoke-Expression."

    def scan(self, context: ScanContext, result: ScanResult) -> None:
        for script in context.scripts:
            for command in script.iter_commands():
                if command.name.lower() not in EXPRESSION_COMMANDS:
                    continue
                result.add_finding(
                    self._finding(
                        script,
                        command.name_token,
                        title="Invoke-Expression executes arbitrary strings",
                        severity=Severity.HIGH,
                        recommendation=(
                            "Call the command directly, use the call operator '&' with a command name, or "
                            "build a script block. String evaluation is open to injection."
                        ),
                    )
                )


def get_rule() -> Rule:
    return InvokeExpressionRule()
