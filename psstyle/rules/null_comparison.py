"""Require ``$null`` on the left-hand side of equality comparisons."""

from __future__ import annotations

from psstyle.result import ScanResult
from psstyle.severity import Severity
from psstyle.tokenizer import TokenKind

from . import BaseRule, Rule, ScanContext

EQUALITY_OPERATORS = frozenset({"-eq", "-ne", "-ceq", "-cne", "-ieq", "-ine"})
NULL_VARIABLE = "$null"


class NullComparisonRule(BaseRule):
    """Flag ``<expr> -eq $null`` style comparisons.

    When the left operand is a collection PowerShell filters it instead of
    comparing it, so ``@() -eq $null`` is an empty array rather than
    ``$false``. Keeping ``$null`` on the left always yields a scalar boolean.
    """

    name = "null_comparison"
    prefix = "NUL"
    description = "Place $null on the left side of equality comparisons."

    def scan(self, context: ScanContext, result: ScanResult) -> None:
        for script in context.scripts:
            for comparison in script.iter_comparisons():
                operator = comparison.operator.lower
                if operator not in EQUALITY_OPERATORS:
                    continue
                right, left = comparison.right, comparison.left
                if right is None or right.kind is not TokenKind.VARIABLE or right.lower != NULL_VARIABLE:
                    continue
                if left is not None and left.lower == NULL_VARIABLE:
                    continue
                result.add_finding(
                    self._finding(
                        script,
                        comparison.operator,
                        title="$null should be on the left side of the comparison",
                        severity=Severity.MEDIUM,
                        recommendation=(
                            f"Rewrite as '$null {comparison.operator.text} <value>'. A collection on the left "
                            "is filtered rather than compared with $null."
                        ),
                    )
                )


def get_rule() -> Rule:
    return NullComparisonRule()
