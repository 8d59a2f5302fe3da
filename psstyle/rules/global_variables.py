"""Discourage global-scope variables."""

from __future__ import annotations

from psstyle.result import ScanResult
from psstyle.severity import Severity
from psstyle.tokenizer import TokenKind

from . import BaseRule, Rule, ScanContext

GLOBAL_PREFIXES = ("$global:", "${global:")


class GlobalVariablesRule(BaseRule):
    name = "global_variables"
    prefix = "GLB"
    description = "Avoid global variables."

    def scan(self, context: ScanContext, result: ScanResult) -> None:
        for script in context.scripts:
            for token in script.code:
                if token.kind is not TokenKind.VARIABLE or not token.lower.startswith(GLOBAL_PREFIXES):
                    continue
                result.add_finding(
                    self._finding(
                        script,
                        token,
                        title=f"Global variable '{token.text}'",
                        severity=Severity.MEDIUM,
                        recommendation=(
                            "Pass values through parameters or use script scope. Global variables leak state "
                            "between resources and sessions."
                        ),
                    )
                )


def get_rule() -> Rule:
    return GlobalVariablesRule()
