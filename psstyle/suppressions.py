"""Inline and configured suppression of findings."""

from __future__ import annotations

import fnmatch
import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import PurePath
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple

from .result import Finding

logger = logging.getLogger(__name__)

DIRECTIVE_PATTERN = re.compile(
    r"psstyle:\s*(disable-next-line|disable-file|disable)\s*=\s*([A-Za-z0-9_,\- \t]+)",
    re.IGNORECASE,
)
ALL_RULES = "all"
EXPIRY_FORMAT = "%Y-%m-%d"


@dataclass
class InlineDirectives:
    """Rules silenced by comments inside a single file."""

    file_rules: Set[str] = field(default_factory=set)
    line_rules: Dict[int, Set[str]] = field(default_factory=dict)

    def covers(self, rule: str, line: int) -> bool:
        if ALL_RULES in self.file_rules or rule in self.file_rules:
            return True
        rules = self.line_rules.get(line, ())
        return ALL_RULES in rules or rule in rules


def parse_inline_directives(comments: Iterable[Tuple[int, str]]) -> InlineDirectives:
    """Collect ``psstyle: disable...`` directives from ``(line, text)`` comment pairs."""

    directives = InlineDirectives()
    for line, text in comments:
        for match in DIRECTIVE_PATTERN.finditer(text):
            action = match.group(1).lower()
            rules = {name.strip().lower() for name in match.group(2).split(",") if name.strip()}
            if action == "disable-file":
                directives.file_rules.update(rules)
                continue
            target = line + 1 if action == "disable-next-line" else line
            directives.line_rules.setdefault(target, set()).update(rules)
    return directives


def _coerce_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(str(value).strip(), EXPIRY_FORMAT).date()


@dataclass(frozen=True)
class Suppression:
    """A configured waiver for one rule across a path glob."""

    rule: str
    path: str = "*"
    expires: Optional[date] = None
    reason: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Suppression":
        if not isinstance(data, Mapping):
            raise ValueError("suppression entries must be mappings")
        rule = str(data.get("rule") or "").strip().lower()
        if not rule:
            raise ValueError("suppression entry is missing 'rule'")
        expires = data.get("expires")
        try:
            expiry = _coerce_date(expires) if expires is not None else None
        except ValueError:
            raise ValueError(f"suppression for {rule!r} has invalid expiry {expires!r}") from None
        return cls(
            rule=rule,
            path=str(data.get("path") or "*"),
            expires=expiry,
            reason=str(data.get("reason") or ""),
        )

    def is_expired(self, today: date) -> bool:
        return self.expires is not None and self.expires < today

    def matches(self, finding: Finding) -> bool:
        if self.rule not in (ALL_RULES, finding.rule):
            return False
        return fnmatch.fnmatch(PurePath(finding.file).as_posix(), self.path)


class SuppressionSet:
    """Decide whether a finding has been waived."""

    def __init__(self, entries: Iterable[Suppression] = (), today: Optional[date] = None) -> None:
        self.today = today or date.today()
        self.entries: List[Suppression] = []
        for entry in entries:
            if entry.is_expired(self.today):
                logger.warning(
                    "Ignoring expired suppression for rule %s on %s (expired %s)",
                    entry.rule,
                    entry.path,
                    entry.expires,
                )
                continue
            self.entries.append(entry)
        self._inline: Dict[str, InlineDirectives] = {}

    def add_inline(self, file: str, directives: InlineDirectives) -> None:
        self._inline[file] = directives

    def is_suppressed(self, finding: Finding) -> bool:
        directives = self._inline.get(finding.file)
        if directives is not None and directives.covers(finding.rule, finding.line):
            return True
        return any(entry.matches(finding) for entry in self.entries)


def validate_suppressions(entries: Iterable[Any], today: Optional[date] = None) -> List[str]:
    """Return problems with configured suppressions: missing, malformed or past expiry dates."""

    today = today or date.today()
    errors: List[str] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, Mapping):
            errors.append(f"suppressions[{index}]: entry must be a mapping")
            continue
        label = f"suppressions[{index}] ({entry.get('rule', '?')})"
        expires = entry.get("expires")
        if expires is None:
            errors.append(f"{label}: missing expires (YYYY-MM-DD)")
            continue
        try:
            expiry = _coerce_date(expires)
        except ValueError:
            errors.append(f"{label}: invalid expiry format, expected YYYY-MM-DD")
            continue
        if expiry < today:
            errors.append(f"{label}: expired on {expiry}")
    return errors
