from pathlib import Path

from psstyle.result import ScanResult
from psstyle.rules import ScanContext
from psstyle.rules.hardcoded_computer_name import HardcodedComputerNameRule
from psstyle.scanner import ScriptFile
from psstyle.utils.config import LintConfig

SCRIPT = """Invoke-Command -ComputerName 'BUILD01' -ScriptBlock { Get-Process }
Get-CimInstance -ClassName Win32_BIOS -CN localhost
Invoke-Command -ComputerName $ComputerName -ScriptBlock { Get-Process }
Get-Service -ComputerName "$env:COMPUTERNAME"
"""


def run_rule(text, config=None):
    context = ScanContext(
        scripts=[ScriptFile(path=Path("test.ps1"), text=text)],
        config=config or LintConfig(),
    )
    result = ScanResult()
    HardcodedComputerNameRule().scan(context, result)
    return result


def test_literal_computer_names_are_high():
    result = run_rule(SCRIPT)

    assert [finding.line for finding in result.findings] == [1, 2]
    assert result.summary.high == 2
    assert "'BUILD01'" in result.findings[0].title
    assert result.findings[0].column == 30
    assert result.exit_code() == 2


def test_allowed_names_are_skipped():
    config = LintConfig(allowed_computer_names=["localhost"])

    result = run_rule(SCRIPT, config)

    assert len(result.findings) == 1
    assert result.findings[0].line == 1


def test_ip_addresses_are_reported_whole():
    result = run_rule("Invoke-Command -ComputerName 10.0.0.1 -ScriptBlock { Get-Process }\n")

    assert len(result.findings) == 1
    assert "'10.0.0.1'" in result.findings[0].title
    assert result.findings[0].column == 30


def test_literals_inside_arrays_and_lists_are_flagged():
    result = run_rule(
        "Get-CimInstance -ComputerName @('srv1', $other) -ClassName Win32_BIOS\n"
        "Restart-Computer -ComputerName 'web1','web2' -Force\n"
    )

    assert [(finding.line, finding.title.split("'")[1]) for finding in result.findings] == [
        (1, "srv1"),
        (2, "web1"),
        (2, "web2"),
    ]
