from pathlib import Path

from psstyle.result import ScanResult
from psstyle.rules import ScanContext
from psstyle.rules.wmi_cmdlets import WmiCmdletsRule
from psstyle.scanner import ScriptFile


def run_rule(text):
    context = ScanContext(scripts=[ScriptFile(path=Path("test.ps1"), text=text)])
    result = ScanResult()
    WmiCmdletsRule().scan(context, result)
    return result


def test_wmi_cmdlets_suggest_cim_replacements():
    result = run_rule(
        "Get-WmiObject -Class Win32_BIOS\n"
        "Invoke-WmiMethod -Class Win32_Process -Name Create\n"
        "Get-CimInstance -ClassName Win32_BIOS\n"
    )

    assert len(result.findings) == 2
    assert "Get-CimInstance" in result.findings[0].recommendation
    assert "Invoke-CimMethod" in result.findings[1].recommendation
