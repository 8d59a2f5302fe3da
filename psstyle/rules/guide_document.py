"""Consistency checks for the Markdown best-practices guide."""

from __future__ import annotations

from typing import Dict

from psstyle.markdown import GuideDocument, Heading
from psstyle.result import ScanResult
from psstyle.severity import Severity
from psstyle.utils.config import GuideOptions

from . import BaseRule, Rule, ScanContext


class GuideDocumentRule(BaseRule):
    """Validate table-of-contents anchors, rule sections and heading uniqueness."""

    name = "guide_document"
    prefix = "DOC"
    description = "Keep the style guide's table of contents and rule sections consistent."

    def scan(self, context: ScanContext, result: ScanResult) -> None:
        options = context.config.guide
        for document in context.documents:
            self._check_links(document, result)
            self._check_duplicates(document, result)
            self._check_sections(document, options, result)
            self._check_toc_coverage(document, result)
            self._check_fences(document, result)

    # ------------------------------------------------------------------
    # Anchors and headings
    # ------------------------------------------------------------------
    def _check_links(self, document: GuideDocument, result: ScanResult) -> None:
        anchors = document.anchors
        for link in document.links:
            if link.anchor.lower() in anchors:
                continue
            result.add_finding(
                self._finding_at(
                    document,
                    link.line,
                    1,
                    title=f"Link '{link.text}' points to missing section #{link.anchor}",
                    severity=Severity.MEDIUM,
                    recommendation="Add the section or correct the anchor so the table of contents resolves.",
                )
            )

    def _check_duplicates(self, document: GuideDocument, result: ScanResult) -> None:
        seen: Dict[str, Heading] = {}
        for heading in document.headings:
            first = seen.setdefault(heading.normalized, heading)
            if first is heading:
                continue
            result.add_finding(
                self._finding_at(
                    document,
                    heading.line,
                    1,
                    title=f"Duplicate heading '{heading.text}' (first on line {first.line})",
                    severity=Severity.MEDIUM,
                    recommendation="Merge the sections or give each rule a distinct title.",
                )
            )

    def _check_toc_coverage(self, document: GuideDocument, result: ScanResult) -> None:
        toc = document.toc_heading
        listed = {link.anchor.lower() for link in document.toc_links}
        if toc is None or not listed:
            return
        for heading in document.headings:
            if heading is toc or heading.level < 2 or heading.anchor in listed:
                continue
            result.add_finding(
                self._finding_at(
                    document,
                    heading.line,
                    1,
                    title=f"Heading '{heading.text}' is not listed in the table of contents",
                    severity=Severity.LOW,
                    recommendation=f"Add '- [{heading.text}](#{heading.anchor})' to the table of contents.",
                )
            )

    # ------------------------------------------------------------------
    # Rule sections and code blocks
    # ------------------------------------------------------------------
    def _check_sections(self, document: GuideDocument, options: GuideOptions, result: ScanResult) -> None:
        for section in document.sections:
            heading = section.heading
            for block in section.code_blocks:
                if block.is_empty:
                    result.add_finding(
                        self._finding_at(
                            document,
                            block.line,
                            1,
                            title=f"Empty code block in '{heading.text}'",
                            severity=Severity.INFO,
                            recommendation="Fill in the example; an empty block marks an unfinished entry.",
                        )
                    )
            if heading.level != options.rule_heading_level:
                continue
            if not section.code_blocks:
                result.add_finding(
                    self._finding_at(
                        document,
                        heading.line,
                        1,
                        title=f"Rule '{heading.text}' has no code example",
                        severity=Severity.MEDIUM,
                        recommendation="Add fenced 'Bad' and 'Good' examples under the rule.",
                    )
                )
            elif options.require_good_example and not any(block.is_good for block in section.code_blocks):
                result.add_finding(
                    self._finding_at(
                        document,
                        heading.line,
                        1,
                        title=f"Rule '{heading.text}' has no 'Good' example",
                        severity=Severity.LOW,
                        recommendation="Label the recommended snippet with a 'Good' line before its code fence.",
                    )
                )

    def _check_fences(self, document: GuideDocument, result: ScanResult) -> None:
        for block in document.code_blocks:
            if block.closed:
                continue
            result.add_finding(
                self._finding_at(
                    document,
                    block.line,
                    1,
                    title="Code fence is never closed",
                    severity=Severity.MEDIUM,
                    recommendation="Close the fence; everything after it renders as code.",
                )
            )


def get_rule() -> Rule:
    return GuideDocumentRule()
