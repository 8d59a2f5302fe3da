"""Detect passwords handled as plain text."""

from __future__ import annotations

import re

from psstyle.result import ScanResult
from psstyle.scanner import ScriptFile
from psstyle.severity import Severity

from . import BaseRule, Rule, ScanContext

PASSWORD_NAME_PATTERN = re.compile(r"(?i)(password|passphrase|passwd|pwd)")
PLAIN_TYPES = frozenset({"string", "system.string"})
SECURE_STRING_COMMANDS = frozenset({"convertto-securestring"})


class PlaintextPasswordRule(BaseRule):
    """Flag ``ConvertTo-SecureString -AsPlainText`` and string-typed password parameters."""

    name = "plaintext_password"
    prefix = "PWD"
    description = "Use PSCredential or SecureString for passwords."

    def scan(self, context: ScanContext, result: ScanResult) -> None:
        for script in context.scripts:
            self._scan_conversions(script, result)
            self._scan_parameters(script, result)

    def _scan_conversions(self, script: ScriptFile, result: ScanResult) -> None:
        for command in script.iter_commands():
            if command.name.lower() not in SECURE_STRING_COMMANDS:
                continue
            if not command.has_parameter("AsPlainText", min_prefix=3):
                continue
            result.add_finding(
                self._finding(
                    script,
                    command.name_token,
                    title="SecureString created from plain text",
                    severity=Severity.HIGH,
                    recommendation=(
                        "Take a [PSCredential] parameter or read the secret with Read-Host -AsSecureString. "
                        "A plain-text password stays in the script, the history and memory dumps."
                    ),
                )
            )

    def _scan_parameters(self, script: ScriptFile, result: ScanResult) -> None:
        for function in script.iter_functions():
            for parameter in function.parameters:
                if not PASSWORD_NAME_PATTERN.search(parameter.name):
                    continue
                type_name = parameter.type_name
                if type_name is not None and type_name.lower() not in PLAIN_TYPES:
                    continue
                result.add_finding(
                    self._finding(
                        script,
                        parameter.variable,
                        title=f"Password parameter '${parameter.name}' of {function.name} is plain text",
                        severity=Severity.MEDIUM,
                        recommendation=(
                            "Declare the parameter as [System.Management.Automation.PSCredential] "
                            "or [System.Security.SecureString]."
                        ),
                    )
                )


def get_rule() -> Rule:
    return PlaintextPasswordRule()
