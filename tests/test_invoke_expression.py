from pathlib import Path

from psstyle.result import ScanResult
from psstyle.rules import ScanContext
from psstyle.rules.invoke_expression import InvokeExpressionRule
from psstyle.scanner import ScriptFile


def run_rule(text):
    context = ScanContext(scripts=[ScriptFile(path=Path("test.ps1"), text=text)])
    result = ScanResult()
    InvokeExpressionRule().scan(context, result)
    return result


def test_invoke_expression_and_alias_are_high():
    result = run_rule(
        "Invoke-Expression $command\n"
        "$out = iex 'Get-Date'\n"
        "& $command\n"
    )

    assert [finding.line for finding in result.findings] == [1, 2]
    assert result.summary.high == 2
    assert result.passed is False
