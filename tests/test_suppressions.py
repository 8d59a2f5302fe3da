import logging
from datetime import date

import pytest

from psstyle.result import Finding
from psstyle.severity import Severity
from psstyle.suppressions import (
    Suppression,
    SuppressionSet,
    parse_inline_directives,
    validate_suppressions,
)

TODAY = date(2026, 1, 1)


def make_finding(rule="avoid_aliases", file="legacy/old.ps1", line=3):
    return Finding(
        id="ALS001",
        title="Alias",
        file=file,
        line=line,
        column=1,
        severity=Severity.MEDIUM,
        rule=rule,
        recommendation="",
    )


def test_configured_suppression_matches_rule_and_path():
    entries = [Suppression.from_mapping({"rule": "avoid_aliases", "path": "legacy/*", "expires": "2026-06-01"})]
    suppressions = SuppressionSet(entries, today=TODAY)

    assert suppressions.is_suppressed(make_finding())
    assert not suppressions.is_suppressed(make_finding(file="src/new.ps1"))
    assert not suppressions.is_suppressed(make_finding(rule="write_host"))


def test_expired_suppressions_are_dropped_with_a_warning(caplog):
    entries = [Suppression.from_mapping({"rule": "avoid_aliases", "expires": "2025-12-31"})]

    with caplog.at_level(logging.WARNING):
        suppressions = SuppressionSet(entries, today=TODAY)

    assert not suppressions.is_suppressed(make_finding())
    assert "expired" in caplog.text


def test_inline_directives_apply_per_file():
    directives = parse_inline_directives([(2, "# psstyle: disable-next-line=avoid_aliases")])
    suppressions = SuppressionSet(today=TODAY)
    suppressions.add_inline("legacy/old.ps1", directives)

    assert suppressions.is_suppressed(make_finding())
    assert not suppressions.is_suppressed(make_finding(file="other.ps1"))
    assert not suppressions.is_suppressed(make_finding(line=4))


def test_invalid_expiry_is_rejected():
    with pytest.raises(ValueError, match="invalid expiry"):
        Suppression.from_mapping({"rule": "write_host", "expires": "next year"})


def test_validate_suppressions_reports_each_problem():
    errors = validate_suppressions(
        [
            {"rule": "a", "expires": "2026-12-31"},
            {"rule": "b"},
            {"rule": "c", "expires": "31/12/2026"},
            {"rule": "d", "expires": date(2025, 1, 1)},
            "not a mapping",
        ],
        today=TODAY,
    )

    assert errors == [
        "suppressions[1] (b): missing expires (YYYY-MM-DD)",
        "suppressions[2] (c): invalid expiry format, expected YYYY-MM-DD",
        "suppressions[3] (d): expired on 2025-01-01",
        "suppressions[4]: entry must be a mapping",
    ]
