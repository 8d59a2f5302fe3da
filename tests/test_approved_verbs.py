from pathlib import Path

from psstyle.result import ScanResult
from psstyle.rules import ScanContext
from psstyle.rules.approved_verbs import ApprovedVerbsRule
from psstyle.scanner import ScriptFile


def run_rule(text):
    context = ScanContext(scripts=[ScriptFile(path=Path("test.ps1"), text=text)])
    result = ScanResult()
    ApprovedVerbsRule().scan(context, result)
    return result


def test_function_names_are_checked():
    result = run_rule(
        "function Collect-Inventory { }\n"
        "function Get-Inventory { }\n"
        "function Cleanup { }\n"
        "function global:Test-Thing { }\n"
        "filter convertto-upper { $_.ToUpper() }\n"
    )

    assert [(finding.line, finding.severity.value) for finding in result.findings] == [
        (1, "MEDIUM"),
        (3, "LOW"),
    ]
    assert "'Collect'" in result.findings[0].title
