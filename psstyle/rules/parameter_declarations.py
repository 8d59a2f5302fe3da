"""Check how function parameters are declared."""

from __future__ import annotations

from psstyle.result import ScanResult
from psstyle.scanner import FunctionSite, ParameterSite, ScriptFile
from psstyle.severity import Severity

from . import BaseRule, Rule, ScanContext

SWITCH_TYPES = frozenset({"switch", "system.management.automation.switchparameter"})


class ParameterDeclarationsRule(BaseRule):
    """Flag untyped parameters and default values that can never apply."""

    name = "parameter_declarations"
    prefix = "PRM"
    description = "Type parameters and do not give mandatory or switch parameters default values."

    def scan(self, context: ScanContext, result: ScanResult) -> None:
        for script in context.scripts:
            for function in script.iter_functions():
                for parameter in function.parameters:
                    self._check(script, function, parameter, result)

    def _check(
        self,
        script: ScriptFile,
        function: FunctionSite,
        parameter: ParameterSite,
        result: ScanResult,
    ) -> None:
        label = f"${parameter.name} of {function.name}"
        type_name = parameter.type_name
        if type_name is None:
            result.add_finding(
                self._finding(
                    script,
                    parameter.variable,
                    title=f"Parameter {label} has no type",
                    severity=Severity.LOW,
                    recommendation="Declare a type, e.g. [System.String] $Name, so binding validates input.",
                )
            )
        if parameter.default and parameter.mandatory:
            result.add_finding(
                self._finding(
                    script,
                    parameter.variable,
                    title=f"Mandatory parameter {label} has a default value",
                    severity=Severity.MEDIUM,
                    recommendation="Remove the default value or make the parameter optional; it is never used.",
                )
            )
        if parameter.default and type_name is not None and type_name.lower() in SWITCH_TYPES:
            result.add_finding(
                self._finding(
                    script,
                    parameter.variable,
                    title=f"Switch parameter {label} has a default value",
                    severity=Severity.MEDIUM,
                    recommendation="Switch parameters default to $false; invert the name instead of defaulting to $true.",
                )
            )


def get_rule() -> Rule:
    return ParameterDeclarationsRule()
