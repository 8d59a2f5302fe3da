"""Require Verb-Noun function names with approved verbs."""

from __future__ import annotations

from psstyle.result import ScanResult
from psstyle.severity import Severity

from . import BaseRule, Rule, ScanContext

APPROVED_VERBS = frozenset(
    verb.lower()
    for verb in (
        # common
        "Add", "Clear", "Close", "Copy", "Enter", "Exit", "Find", "Format", "Get", "Hide", "Join",
        "Lock", "Move", "New", "Open", "Optimize", "Pop", "Push", "Redo", "Remove", "Rename",
        "Reset", "Resize", "Search", "Select", "Set", "Show", "Skip", "Split", "Step", "Switch",
        "Undo", "Unlock", "Watch",
        # communications
        "Connect", "Disconnect", "Read", "Receive", "Send", "Write",
        # data
        "Backup", "Checkpoint", "Compare", "Compress", "Convert", "ConvertFrom", "ConvertTo",
        "Dismount", "Edit", "Expand", "Export", "Group", "Import", "Initialize", "Limit", "Merge",
        "Mount", "Out", "Publish", "Restore", "Save", "Sync", "Unpublish", "Update",
        # diagnostic
        "Debug", "Measure", "Ping", "Repair", "Resolve", "Test", "Trace",
        # lifecycle
        "Approve", "Assert", "Build", "Complete", "Confirm", "Deny", "Deploy", "Disable", "Enable",
        "Install", "Invoke", "Register", "Request", "Restart", "Resume", "Start", "Stop", "Submit",
        "Suspend", "Uninstall", "Unregister", "Wait",
        # security
        "Block", "Grant", "Protect", "Revoke", "Unblock", "Unprotect",
        # other
        "Use",
    )
)


class ApprovedVerbsRule(BaseRule):
    name = "approved_verbs"
    prefix = "VRB"
    description = "Name functions Verb-Noun using an approved verb."

    def scan(self, context: ScanContext, result: ScanResult) -> None:
        for script in context.scripts:
            for function in script.iter_functions():
                name = function.short_name
                verb, dash, noun = name.partition("-")
                if not dash or not verb or not noun:
                    result.add_finding(
                        self._finding(
                            script,
                            function.name_token,
                            title=f"Function '{name}' is not named Verb-Noun",
                            severity=Severity.LOW,
                            recommendation="Rename the function to the Verb-Noun form, e.g. Get-ServiceState.",
                        )
                    )
                    continue
                if verb.lower() in APPROVED_VERBS:
                    continue
                result.add_finding(
                    self._finding(
                        script,
                        function.name_token,
                        title=f"Function '{name}' uses unapproved verb '{verb}'",
                        severity=Severity.MEDIUM,
                        recommendation="Pick a verb from Get-Verb so the command is discoverable.",
                    )
                )


def get_rule() -> Rule:
    return ApprovedVerbsRule()
