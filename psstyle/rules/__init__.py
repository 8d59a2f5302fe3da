"""Rule protocol and shared plumbing for lint rules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, Sequence

from psstyle.result import Finding, ScanResult
from psstyle.severity import Severity
from psstyle.utils.config import LintConfig

if TYPE_CHECKING:
    from psstyle.markdown import GuideDocument
    from psstyle.scanner import ScriptFile
    from psstyle.tokenizer import Token


class Rule(Protocol):
    """Protocol implemented by all rule evaluators."""

    name: str

    def scan(self, context: "ScanContext", result: ScanResult) -> None:
        """Analyze the provided context and append findings to ``result``."""


@dataclass
class ScanContext:
    """Bundle inputs shared across rules."""

    scripts: Sequence["ScriptFile"] = ()
    documents: Sequence["GuideDocument"] = ()
    config: LintConfig = field(default_factory=LintConfig)


class BaseRule:
    """Finding-id bookkeeping shared by the built-in rules."""

    name = ""
    prefix = ""
    description = ""

    def __init__(self) -> None:
        self._counter = 0

    def _next_id(self) -> str:
        self._counter += 1
        return f"{self.prefix}{self._counter:03d}"

    def _finding(
        self,
        source: "ScriptFile",
        token: "Token",
        title: str,
        severity: Severity,
        recommendation: str,
    ) -> Finding:
        return self._finding_at(source, token.line, token.column, title, severity, recommendation)

    def _finding_at(
        self,
        source: "ScriptFile | GuideDocument",
        line: int,
        column: int,
        title: str,
        severity: Severity,
        recommendation: str,
    ) -> Finding:
        return Finding(
            id=self._next_id(),
            title=title,
            file=source.display_path,
            line=line,
            column=column,
            severity=severity,
            rule=self.name,
            recommendation=recommendation,
            snippet=source.line_text(line),
        )
