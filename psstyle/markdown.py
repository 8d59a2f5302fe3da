"""Parse a Markdown style guide into headings, anchor links and rule sections."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

from .suppressions import InlineDirectives, parse_inline_directives
from .utils import read_text_file, split_lines

HEADING_PATTERN = re.compile(r"^ {0,3}(#{1,6})[ \t]+(.*?)(?:[ \t]+#+)?[ \t]*$")
SETEXT_PATTERN = re.compile(r"^ {0,3}(=+|-+)[ \t]*$")
FENCE_PATTERN = re.compile(r"^ {0,3}(`{3,}|~{3,})[ \t]*([^`]*?)[ \t]*$")
LINK_PATTERN = re.compile(r"\[([^\]]*)\]\(#([^)\s]*)\)")
HTML_ANCHOR_PATTERN = re.compile(r"<[A-Za-z][^>]*?\s(?:name|id)\s*=\s*[\"']([^\"']+)[\"']", re.IGNORECASE)
NOT_PARAGRAPH_PATTERN = re.compile(r"^ {0,3}(?:[-*+>|]|\d+[.)])(?:\s|$)|^ {4}|^\t")
IMAGE_OR_LINK_PATTERN = re.compile(r"!?\[([^\]]*)\](?:\([^)]*\)|\[[^\]]*\])")
STRONG_OR_EM_PATTERN = re.compile(r"(\*{1,3})(?!\s)(.+?)(?<!\s)\1|(?<!\w)(_{1,3})(?!\s)(.+?)(?<!\s)\3(?!\w)")
HTML_TAG_PATTERN = re.compile(r"</?[A-Za-z][^>]*>")
SLUG_STRIP_PATTERN = re.compile(r"[^\w\- ]", re.UNICODE)
GOOD_LABEL_PATTERN = re.compile(r"\bgood\b", re.IGNORECASE)
BAD_LABEL_PATTERN = re.compile(r"\bbad\b", re.IGNORECASE)
TOC_TITLES = frozenset({"table of contents", "contents", "toc"})


def plain_text(text: str) -> str:
    """Reduce inline Markdown to the text GitHub renders: links, images, emphasis and tags."""

    text = HTML_TAG_PATTERN.sub("", text)
    text = IMAGE_OR_LINK_PATTERN.sub(r"\1", text)
    previous = None
    while previous != text:
        previous = text
        text = STRONG_OR_EM_PATTERN.sub(lambda match: match.group(2) or match.group(4), text)
    return text.strip()


def slugify(text: str) -> str:
    """Return the GitHub-style anchor for a heading's text."""

    slug = SLUG_STRIP_PATTERN.sub("", plain_text(text).lower())
    return slug.replace(" ", "-")


@dataclass(frozen=True)
class Heading:
    level: int
    text: str
    line: int
    anchor: str

    @property
    def normalized(self) -> str:
        return " ".join(self.text.lower().split())


@dataclass(frozen=True)
class AnchorLink:
    text: str
    anchor: str
    line: int


@dataclass(frozen=True)
class CodeBlock:
    info: str
    body: str
    line: int
    label: str = ""
    closed: bool = True

    @property
    def is_empty(self) -> bool:
        return not self.body.strip()

    @property
    def is_good(self) -> bool:
        return bool(GOOD_LABEL_PATTERN.search(self.label))

    @property
    def is_bad(self) -> bool:
        return bool(BAD_LABEL_PATTERN.search(self.label))


@dataclass
class Section:
    heading: Heading
    code_blocks: List[CodeBlock] = field(default_factory=list)


@dataclass
class GuideDocument:
    """Structural view of a Markdown guide."""

    path: Path
    headings: List[Heading] = field(default_factory=list)
    links: List[AnchorLink] = field(default_factory=list)
    sections: List[Section] = field(default_factory=list)
    code_blocks: List[CodeBlock] = field(default_factory=list)
    html_anchors: Set[str] = field(default_factory=set)
    lines: List[str] = field(default_factory=list)
    directives: InlineDirectives = field(default_factory=InlineDirectives)

    @classmethod
    def load(cls, path: Path) -> "GuideDocument":
        return cls.parse(path, read_text_file(path))

    @classmethod
    def parse(cls, path: Path, text: str) -> "GuideDocument":
        document = cls(path=path, lines=split_lines(text))
        anchor_counts: Dict[str, int] = {}
        directive_lines: List[Tuple[int, str]] = []
        fence: Optional[Tuple[str, int, int, str, str]] = None
        body: List[str] = []
        section: Optional[Section] = None
        label = ""
        # the last line, if it may still become a setext heading
        paragraph: Optional[Tuple[int, str]] = None

        for number, raw in enumerate(document.lines, start=1):
            if fence is not None:
                marker, width, start, info, fence_label = fence
                stripped = raw.strip()
                if stripped.startswith(marker[0] * width) and not stripped.strip(marker[0]):
                    document._add_block(section, CodeBlock(info, "\n".join(body), start, fence_label))
                    fence, body = None, []
                else:
                    body.append(raw)
                continue

            opener = FENCE_PATTERN.match(raw)
            if opener:
                marker = opener.group(1)
                fence = (marker, len(marker), number, opener.group(2), label)
                paragraph = None
                continue

            underline = SETEXT_PATTERN.match(raw)
            if underline and paragraph is not None:
                heading_line, heading_text = paragraph
                document.links = [link for link in document.links if link.line != heading_line]
                level = 1 if underline.group(1).startswith("=") else 2
                section = document._add_heading(level, heading_text, heading_line, anchor_counts)
                label, paragraph = "", None
                continue

            if "psstyle:" in raw:
                directive_lines.append((number, raw))

            match = HEADING_PATTERN.match(raw)
            if match:
                section = document._add_heading(len(match.group(1)), match.group(2), number, anchor_counts)
                label, paragraph = "", None
                continue

            for link in LINK_PATTERN.finditer(raw):
                document.links.append(AnchorLink(link.group(1), link.group(2), number))
            for anchor in HTML_ANCHOR_PATTERN.finditer(raw):
                document.html_anchors.add(anchor.group(1).lower())
            if raw.strip():
                label = raw.strip()
                paragraph = None if underline or NOT_PARAGRAPH_PATTERN.match(raw) else (number, raw.strip())
            else:
                paragraph = None

        if fence is not None:
            _, _, start, info, fence_label = fence
            document._add_block(section, CodeBlock(info, "\n".join(body), start, fence_label, closed=False))

        document.directives = parse_inline_directives(directive_lines)
        return document

    def _add_heading(self, level: int, raw: str, line: int, anchor_counts: Dict[str, int]) -> Section:
        base = slugify(raw)
        count = anchor_counts.get(base, 0)
        anchor_counts[base] = count + 1
        heading = Heading(
            level=level,
            text=plain_text(raw),
            line=line,
            anchor=base if count == 0 else f"{base}-{count}",
        )
        self.headings.append(heading)
        section = Section(heading)
        self.sections.append(section)
        return section

    def _add_block(self, section: Optional[Section], block: CodeBlock) -> None:
        self.code_blocks.append(block)
        if section is not None:
            section.code_blocks.append(block)

    @property
    def display_path(self) -> str:
        return str(self.path)

    @property
    def anchors(self) -> Set[str]:
        return {heading.anchor for heading in self.headings} | self.html_anchors

    @property
    def toc_heading(self) -> Optional[Heading]:
        for heading in self.headings:
            if heading.normalized in TOC_TITLES:
                return heading
        return None

    @property
    def toc_links(self) -> List[AnchorLink]:
        """Anchor links listed under the table-of-contents heading."""

        toc = self.toc_heading
        if toc is None:
            return []
        end_line = len(self.lines) + 1
        for heading in self.headings:
            if heading.line > toc.line and heading.level <= toc.level:
                end_line = heading.line
                break
        return [link for link in self.links if toc.line < link.line < end_line]

    def line_text(self, line: int) -> str:
        if 1 <= line <= len(self.lines):
            return self.lines[line - 1].strip()
        return ""
