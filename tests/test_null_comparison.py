from pathlib import Path

from psstyle.result import ScanResult
from psstyle.rules import ScanContext
from psstyle.rules.null_comparison import NullComparisonRule
from psstyle.scanner import ScriptFile


def run_rule(text):
    context = ScanContext(scripts=[ScriptFile(path=Path("test.ps1"), text=text)])
    result = ScanResult()
    NullComparisonRule().scan(context, result)
    return result


def test_null_on_right_side_is_flagged():
    result = run_rule(
        "if ($items -eq $null) { }\n"
        "if ($value -ne $null) { }\n"
        "if ($null -eq $items) { }\n"
        "if ($null -eq $null) { }\n"
        "if ($name -like $null) { }\n"
    )

    assert [finding.line for finding in result.findings] == [1, 2]
    assert result.summary.medium == 2
    assert "$null -ne" in result.findings[1].recommendation


def test_case_sensitive_operators_are_checked():
    result = run_rule("$found = $list -ceq $null\n")

    assert len(result.findings) == 1
    assert result.findings[0].column == 16
