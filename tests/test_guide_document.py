from pathlib import Path

from psstyle.markdown import GuideDocument
from psstyle.result import ScanResult
from psstyle.rules import ScanContext
from psstyle.rules.guide_document import GuideDocumentRule
from psstyle.utils.config import GuideOptions, LintConfig

ROOT = Path(__file__).resolve().parents[1]

GUIDE = """# Guide

## Table of Contents

- [Rules](#rules)
  - [Avoid Aliases](#avoid-aliases)
  - [Missing Rule](#missing-rule)

## Rules

### Avoid Aliases

**Bad:**

```powershell
gci
```

**Good:**

```powershell
Get-ChildItem
```

### Avoid Aliases

**Good:**

```powershell
```
"""


def run_rule(text, options=None):
    document = GuideDocument.parse(Path("guide.md"), text)
    config = LintConfig(guide=options or GuideOptions())
    context = ScanContext(documents=[document], config=config)
    result = ScanResult()
    GuideDocumentRule().scan(context, result)
    return result


def titles(result, severity):
    return [finding.title for finding in result.findings if finding.severity.value == severity]


def test_broken_links_and_duplicate_headings_are_medium():
    result = run_rule(GUIDE)

    assert titles(result, "MEDIUM") == [
        "Link 'Missing Rule' points to missing section #missing-rule",
        "Duplicate heading 'Avoid Aliases' (first on line 11)",
    ]


def test_empty_example_is_info_and_unlisted_heading_is_low():
    result = run_rule(GUIDE)

    assert titles(result, "INFO") == ["Empty code block in 'Avoid Aliases'"]
    assert titles(result, "LOW") == ["Heading 'Avoid Aliases' is not listed in the table of contents"]
    assert [finding.line for finding in result.findings if finding.severity.value == "LOW"] == [25]


def test_rule_sections_need_examples():
    text = "## Rules\n\n### No Example\n\nJust prose.\n\n### Bad Only\n\n**Bad:**\n\n```\nls\n```\n"

    result = run_rule(text)

    assert titles(result, "MEDIUM") == ["Rule 'No Example' has no code example"]
    assert titles(result, "LOW") == ["Rule 'Bad Only' has no 'Good' example"]


def test_good_example_requirement_can_be_disabled():
    text = "### Bad Only\n\n**Bad:**\n\n```\nls\n```\n"

    result = run_rule(text, GuideOptions(require_good_example=False))

    assert result.findings == []


def test_rule_heading_level_is_configurable():
    text = "## Rule Without Example\n\nProse only.\n"

    assert run_rule(text).findings == []
    assert titles(run_rule(text, GuideOptions(rule_heading_level=2)), "MEDIUM") == [
        "Rule 'Rule Without Example' has no code example"
    ]


def test_unclosed_fence_is_medium():
    result = run_rule("### Rule\n\n**Good:**\n\n```powershell\nGet-Item\n")

    assert titles(result, "MEDIUM") == ["Code fence is never closed"]
    assert result.findings[0].line == 5


def test_bundled_guide_is_consistent():
    document = GuideDocument.load(ROOT / "docs/BestPractices.md")
    context = ScanContext(documents=[document])
    result = ScanResult()

    GuideDocumentRule().scan(context, result)

    assert result.findings == []


def test_links_resolve_to_linked_setext_and_html_anchors():
    text = (
        "# Guide\n\n## Contents\n\n"
        "- [Use X](#use-x)\n- [Setext](#setext)\n- [Custom](#custom)\n\n"
        "## [Use X](https://example.com)\n\n"
        "Setext\n------\n\n"
        '<a name="custom"></a>\n'
    )

    result = run_rule(text)

    assert titles(result, "MEDIUM") == []
