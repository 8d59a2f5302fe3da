"""Flag commands invoked through aliases instead of their full cmdlet names."""

from __future__ import annotations

from psstyle.result import ScanResult
from psstyle.severity import Severity

from . import BaseRule, Rule, ScanContext

ALIASES = {
    "%": "ForEach-Object",
    "?": "Where-Object",
    "ac": "Add-Content",
    "cat": "Get-Content",
    "cd": "Set-Location",
    "chdir": "Set-Location",
    "clc": "Clear-Content",
    "clear": "Clear-Host",
    "cls": "Clear-Host",
    "copy": "Copy-Item",
    "cp": "Copy-Item",
    "cpi": "Copy-Item",
    "del": "Remove-Item",
    "dir": "Get-ChildItem",
    "echo": "Write-Output",
    "erase": "Remove-Item",
    "fl": "Format-List",
    "foreach": "ForEach-Object",
    "ft": "Format-Table",
    "gc": "Get-Content",
    "gci": "Get-ChildItem",
    "gcm": "Get-Command",
    "gi": "Get-Item",
    "gm": "Get-Member",
    "gp": "Get-ItemProperty",
    "gps": "Get-Process",
    "group": "Group-Object",
    "gsv": "Get-Service",
    "gwmi": "Get-WmiObject",
    "iex": "Invoke-Expression",
    "ii": "Invoke-Item",
    "ipmo": "Import-Module",
    "irm": "Invoke-RestMethod",
    "iwr": "Invoke-WebRequest",
    "kill": "Stop-Process",
    "ls": "Get-ChildItem",
    "md": "New-Item -ItemType Directory",
    "measure": "Measure-Object",
    "mi": "Move-Item",
    "move": "Move-Item",
    "mv": "Move-Item",
    "ni": "New-Item",
    "popd": "Pop-Location",
    "ps": "Get-Process",
    "pushd": "Push-Location",
    "pwd": "Get-Location",
    "rd": "Remove-Item",
    "ren": "Rename-Item",
    "ri": "Remove-Item",
    "rm": "Remove-Item",
    "rmdir": "Remove-Item",
    "select": "Select-Object",
    "set": "Set-Variable",
    "si": "Set-Item",
    "sl": "Set-Location",
    "sleep": "Start-Sleep",
    "sort": "Sort-Object",
    "sp": "Set-ItemProperty",
    "spps": "Stop-Process",
    "sv": "Set-Variable",
    "type": "Get-Content",
    "where": "Where-Object",
    "write": "Write-Output",
}


class AvoidAliasesRule(BaseRule):
    """Warn when a command is called through an alias."""

    name = "avoid_aliases"
    prefix = "ALS"
    description = "Use full cmdlet names instead of aliases."

    def scan(self, context: ScanContext, result: ScanResult) -> None:
        for script in context.scripts:
            for command in script.iter_commands():
                target = ALIASES.get(command.name.lower())
                if target is None:
                    continue
                result.add_finding(
                    self._finding(
                        script,
                        command.name_token,
                        title=f"Alias '{command.name}' used instead of '{target}'",
                        severity=Severity.MEDIUM,
                        recommendation=(
                            f"Replace '{command.name}' with '{target}'. Aliases differ between hosts and "
                            "platforms and make scripts harder to read."
                        ),
                    )
                )


def get_rule() -> Rule:
    return AvoidAliasesRule()
