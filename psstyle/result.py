"""Core result data structures for the linter."""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Dict, List, Sequence, Tuple

from .severity import Severity

SEVERITY_ORDER: Sequence[Severity] = (
    Severity.CRITICAL,
    Severity.HIGH,
    Severity.MEDIUM,
    Severity.LOW,
    Severity.INFO,
)


@dataclass
class Finding:
    """Capture a single rule violation."""

    id: str
    title: str
    file: str
    line: int
    column: int
    severity: Severity
    rule: str
    recommendation: str
    snippet: str = ""

    @property
    def location(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"

    def to_dict(self) -> Dict[str, object]:
        data = asdict(self)
        data["severity"] = self.severity.value
        data["location"] = self.location
        return data


@dataclass
class Summary:
    """Aggregate finding counts by severity."""

    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    info: int = 0

    def increment(self, severity: Severity) -> None:
        attr = severity.value.lower()
        setattr(self, attr, getattr(self, attr) + 1)

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)

    def as_rows(self) -> List[Tuple[str, int]]:
        """Return severity/count pairs ordered for reporting."""

        return [(severity.value, getattr(self, severity.value.lower())) for severity in SEVERITY_ORDER]

    @property
    def total(self) -> int:
        return sum(getattr(self, severity.value.lower()) for severity in SEVERITY_ORDER)


@dataclass
class ScanResult:
    """Bundle lint summary, findings and bookkeeping counters."""

    summary: Summary = field(default_factory=Summary)
    findings: List[Finding] = field(default_factory=list)
    suppressed: int = 0
    files_scanned: int = 0

    @property
    def passed(self) -> bool:
        return self.summary.critical == 0 and self.summary.high == 0 and self.summary.medium == 0

    def add_finding(self, finding: Finding) -> None:
        self.summary.increment(finding.severity)
        self.findings.append(finding)

    def to_dict(self) -> Dict[str, object]:
        return {
            "summary": self.summary.to_dict(),
            "findings": [finding.to_dict() for finding in self.ordered_findings()],
            "suppressed": self.suppressed,
            "files_scanned": self.files_scanned,
            "passed": self.passed,
        }

    def exit_code(self) -> int:
        return max((finding.severity.exit_priority for finding in self.findings), default=0)

    def top_findings(self, limit: int = 5) -> List[Finding]:
        """Return findings ordered by severity ranking."""

        severity_rank = {severity: idx for idx, severity in enumerate(SEVERITY_ORDER)}
        ordered = sorted(
            self.findings,
            key=lambda finding: (severity_rank[finding.severity], finding.file, finding.line, finding.id),
        )
        return ordered[:limit]

    def ordered_findings(self) -> List[Finding]:
        """Return findings in source order."""

        return sorted(
            self.findings,
            key=lambda finding: (finding.file, finding.line, finding.column, finding.rule, finding.id),
        )


def format_summary_table(result: ScanResult, max_findings: int = 5) -> str:
    """Create a human-readable summary table for console output."""

    lines: List[str] = []
    lines.append("Lint Summary")
    lines.append("=" * 40)
    header = f"{'Severity':<10} | {'Count':>5}"
    lines.append(header)
    lines.append("-" * len(header))
    for severity, count in result.summary.as_rows():
        lines.append(f"{severity:<10} | {count:>5}")
    lines.append("-" * len(header))
    status = "PASS" if result.passed else "FAIL"
    lines.append(f"Status    : {status}")
    lines.append(f"Files     : {result.files_scanned}")
    lines.append(f"Findings  : {result.summary.total}")
    if result.suppressed:
        lines.append(f"Suppressed: {result.suppressed}")

    findings = result.top_findings(max_findings)
    if findings:
        lines.append("")
        lines.append("Top Findings")
        lines.append("-" * 40)
        for finding in findings:
            lines.append(f"[{finding.severity.value}] {finding.id} {finding.title} ({finding.rule})")
            lines.append(f"  Location: {finding.location}")
    return "\n".join(lines)


def format_findings_text(result: ScanResult) -> str:
    """Render one line per finding, in source order."""

    lines = [
        f"{finding.location}: [{finding.severity.value}] {finding.id} {finding.title} ({finding.rule})"
        for finding in result.ordered_findings()
    ]
    return "\n".join(lines)
