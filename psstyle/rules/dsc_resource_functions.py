"""Check the Get/Set/Test-TargetResource contract of DSC resource modules."""

from __future__ import annotations

from typing import Dict, List

from psstyle.result import ScanResult
from psstyle.scanner import FunctionSite, ScriptFile
from psstyle.severity import Severity

from . import BaseRule, Rule, ScanContext

TARGET_FUNCTIONS = ("get-targetresource", "set-targetresource", "test-targetresource")
EXPECTED_OUTPUT_TYPES = {
    "get-targetresource": ({"hashtable"}, "System.Collections.Hashtable"),
    "test-targetresource": ({"boolean", "bool"}, "System.Boolean"),
}


def _short_type(name: str) -> str:
    return name.lower().rsplit(".", 1)[-1].strip("[]")


class DscResourceFunctionsRule(BaseRule):
    """Every resource module exports all three TargetResource functions with matching keys."""

    name = "dsc_resource_functions"
    prefix = "DSC"
    description = "DSC resources must define Get, Set and Test-TargetResource consistently."

    def scan(self, context: ScanContext, result: ScanResult) -> None:
        for script in context.scripts:
            functions: Dict[str, FunctionSite] = {}
            for function in script.iter_functions():
                key = function.short_name.lower()
                if key in TARGET_FUNCTIONS:
                    functions.setdefault(key, function)
            if not functions:
                continue
            self._check_presence(script, functions, result)
            self._check_output_types(script, functions, result)
            self._check_key_parameters(script, functions, result)

    def _check_presence(self, script: ScriptFile, functions: Dict[str, FunctionSite], result: ScanResult) -> None:
        missing = [name for name in TARGET_FUNCTIONS if name not in functions]
        if not missing:
            return
        anchor = next(iter(functions.values()))
        names = ", ".join(self._display(name) for name in missing)
        result.add_finding(
            self._finding(
                script,
                anchor.name_token,
                title=f"DSC resource module is missing {names}",
                severity=Severity.HIGH,
                recommendation="A resource module must define Get-TargetResource, Set-TargetResource and Test-TargetResource.",
            )
        )

    def _check_output_types(self, script: ScriptFile, functions: Dict[str, FunctionSite], result: ScanResult) -> None:
        for name, (accepted, full) in EXPECTED_OUTPUT_TYPES.items():
            function = functions.get(name)
            if function is None:
                continue
            if any(_short_type(declared) in accepted for declared in function.output_types):
                continue
            result.add_finding(
                self._finding(
                    script,
                    function.name_token,
                    title=f"{function.short_name} does not declare OutputType {full}",
                    severity=Severity.LOW,
                    recommendation=f"Add [OutputType([{full}])] above the param block.",
                )
            )

    def _check_key_parameters(self, script: ScriptFile, functions: Dict[str, FunctionSite], result: ScanResult) -> None:
        getter = functions.get("get-targetresource")
        if getter is None:
            return
        keys: List[str] = [parameter.name for parameter in getter.parameters if parameter.mandatory]
        for name in ("set-targetresource", "test-targetresource"):
            function = functions.get(name)
            if function is None:
                continue
            declared = {parameter.name.lower() for parameter in function.parameters}
            for key in keys:
                if key.lower() in declared:
                    continue
                result.add_finding(
                    self._finding(
                        script,
                        function.name_token,
                        title=f"{function.short_name} is missing key parameter ${key}",
                        severity=Severity.MEDIUM,
                        recommendation="Set- and Test-TargetResource must accept every mandatory parameter of Get-TargetResource.",
                    )
                )

    @staticmethod
    def _display(name: str) -> str:
        return name.split("-", 1)[0].capitalize() + "-TargetResource"


def get_rule() -> Rule:
    return DscResourceFunctionsRule()
