"""Prefer CIM cmdlets over the legacy WMI cmdlets."""

from __future__ import annotations

from psstyle.result import ScanResult
from psstyle.severity import Severity

from . import BaseRule, Rule, ScanContext

CIM_REPLACEMENTS = {
    "get-wmiobject": "Get-CimInstance",
    "gwmi": "Get-CimInstance",
    "set-wmiinstance": "Set-CimInstance",
    "swmi": "Set-CimInstance",
    "invoke-wmimethod": "Invoke-CimMethod",
    "iwmi": "Invoke-CimMethod",
    "remove-wmiobject": "Remove-CimInstance",
    "rwmi": "Remove-CimInstance",
    "register-wmievent": "Register-CimIndicationEvent",
}


class WmiCmdletsRule(BaseRule):
    name = "wmi_cmdlets"
    prefix = "WMI"
    description = "Use CIM cmdlets instead of WMI cmdlets."

    def scan(self, context: ScanContext, result: ScanResult) -> None:
        for script in context.scripts:
            for command in script.iter_commands():
                replacement = CIM_REPLACEMENTS.get(command.name.lower())
                if replacement is None:
                    continue
                result.add_finding(
                    self._finding(
                        script,
                        command.name_token,
                        title=f"WMI cmdlet '{command.name}' used",
                        severity=Severity.MEDIUM,
                        recommendation=(
                            f"Use {replacement}. The WMI cmdlets rely on DCOM and are not available in "
                            "PowerShell 7."
                        ),
                    )
                )


def get_rule() -> Rule:
    return WmiCmdletsRule()
