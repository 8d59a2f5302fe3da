"""Lexer for PowerShell script text.

The lexer is deliberately forgiving: it never raises on malformed input.
Unterminated strings, comments and here-strings simply run to the end of
the text, so every rule sees a complete token stream.
"""

from __future__ import annotations

import bisect
import re
from dataclasses import dataclass
from enum import Enum
from typing import List

KEYWORDS = frozenset(
    {
        "begin",
        "break",
        "catch",
        "class",
        "configuration",
        "continue",
        "data",
        "do",
        "dynamicparam",
        "else",
        "elseif",
        "end",
        "enum",
        "exit",
        "filter",
        "finally",
        "for",
        "foreach",
        "function",
        "hidden",
        "if",
        "in",
        "param",
        "process",
        "return",
        "static",
        "switch",
        "throw",
        "trap",
        "try",
        "until",
        "using",
        "while",
        "workflow",
    }
)

COMPARISON_OPERATORS = frozenset(
    prefix + name
    for prefix in ("", "c", "i")
    for name in (
        "eq",
        "ne",
        "gt",
        "ge",
        "lt",
        "le",
        "like",
        "notlike",
        "match",
        "notmatch",
        "contains",
        "notcontains",
        "in",
        "notin",
        "replace",
        "split",
    )
)

DASH_OPERATORS = COMPARISON_OPERATORS | frozenset(
    {
        "and",
        "or",
        "xor",
        "not",
        "band",
        "bor",
        "bxor",
        "bnot",
        "shl",
        "shr",
        "is",
        "isnot",
        "as",
        "join",
        "f",
    }
)

SYMBOL_OPERATORS = (
    "-=",
    "+=",
    "*=",
    "/=",
    "%=",
    "++",
    "--",
    "::",
    "..",
    "||",
    "&&",
    ">>",
    "|",
    "&",
    "=",
    "+",
    "-",
    "*",
    "/",
    "%",
    "!",
    ">",
    "<",
    ",",
    ".",
    "?",
    ":",
)

PUNCTUATION = ("@(", "@{", "$(", "(", ")", "{", "}", "[", "]", ";")

NUMBER_PATTERN = re.compile(
    r"0[xX][0-9a-fA-F]+[lL]?|\d+(?:\.\d+)?(?:[eE][+-]?\d+)?[dDlL]?(?:kb|mb|gb|tb|pb)?",
    re.IGNORECASE,
)
REDIRECTION_PATTERN = re.compile(r"[1-6*]>>?(?:&[1-6])?")
WORD_PATTERN = re.compile(r"[\w][\w\-]*(?:[.:\\/]+[\w\-]+)*")
VARIABLE_PATTERN = re.compile(r"\$(?:\{[^}]*\}?|\w+(?::\w+)?|[$?^])")
SPLAT_PATTERN = re.compile(r"@\w+")
DASH_PATTERN = re.compile(r"-([A-Za-z_]\w*)(:?)")
HERE_STRING_OPEN = re.compile(r"@([\"'])[ \t]*\r?\n")


class TokenKind(str, Enum):
    """Lexical categories produced by :func:`tokenize`."""

    COMMENT = "COMMENT"
    STRING = "STRING"
    VARIABLE = "VARIABLE"
    NUMBER = "NUMBER"
    PARAMETER = "PARAMETER"
    OPERATOR = "OPERATOR"
    PUNCT = "PUNCT"
    KEYWORD = "KEYWORD"
    WORD = "WORD"
    NEWLINE = "NEWLINE"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    line: int
    column: int
    end_line: int

    @property
    def lower(self) -> str:
        return self.text.lower()

    @property
    def parameter_name(self) -> str:
        """Return ``Name`` for a ``-Name`` or ``-Name:`` token."""

        return self.text.lstrip("-").rstrip(":")

    @property
    def value(self) -> str:
        """Return the literal content of a string token, quotes removed."""

        if self.kind is not TokenKind.STRING:
            return self.text
        text = self.text
        if text.startswith("@"):
            body = text[2:]
            body = body.split("\n", 1)[1] if "\n" in body else ""
            if body.endswith(text[1] + "@"):
                body = body[:-2]
            return body.rstrip("\r\n")
        quote = text[0]
        body = text[1:-1] if len(text) > 1 and text.endswith(quote) else text[1:]
        return body.replace(quote * 2, quote)

    def is_punct(self, text: str) -> bool:
        return self.kind is TokenKind.PUNCT and self.text == text

    def is_operator(self, text: str) -> bool:
        return self.kind is TokenKind.OPERATOR and self.text == text


class _Lexer:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.tokens: List[Token] = []
        self._line_starts = [0] + [match.end() for match in re.finditer(r"\n", text)]

    def _line_col(self, offset: int) -> tuple[int, int]:
        line = bisect.bisect_right(self._line_starts, offset)
        return line, offset - self._line_starts[line - 1] + 1

    def _emit(self, kind: TokenKind, start: int, end: int) -> None:
        line, column = self._line_col(start)
        end_line, _ = self._line_col(max(start, end - 1))
        self.tokens.append(Token(kind, self.text[start:end], line, column, end_line))
        self.pos = end

    def run(self) -> List[Token]:
        text = self.text
        length = len(text)
        while self.pos < length:
            char = text[self.pos]
            start = self.pos
            if char in " \t\r\f\v\ufeff":
                self.pos += 1
            elif char == "\n":
                self._emit(TokenKind.NEWLINE, start, start + 1)
            elif char == "`":
                # line continuation or escaped character; neither starts a token
                if text.startswith("\r\n", start + 1):
                    self.pos = start + 3
                else:
                    self.pos = start + 2
            elif text.startswith("<#", start):
                end = text.find("#>", start + 2)
                self._emit(TokenKind.COMMENT, start, length if end < 0 else end + 2)
            elif char == "#":
                end = text.find("\n", start)
                end = length if end < 0 else end
                if end > start and text[end - 1] == "\r":
                    end -= 1
                self._emit(TokenKind.COMMENT, start, end)
            elif char == "@":
                self._lex_at(start)
            elif char == "'":
                self._emit(TokenKind.STRING, start, self._scan_single_quoted(start))
            elif char == '"':
                self._emit(TokenKind.STRING, start, self._scan_double_quoted(start))
            elif char == "$":
                self._lex_dollar(start)
            elif char == "-" and DASH_PATTERN.match(text, start):
                self._lex_dash(start)
            elif self._try_redirection(start):
                continue
            elif char.isdigit():
                self._lex_number_or_word(start)
            elif char.isalpha() or char == "_":
                match = WORD_PATTERN.match(text, start)
                kind = TokenKind.KEYWORD if match.group(0).lower() in KEYWORDS else TokenKind.WORD
                self._emit(kind, start, match.end())
            else:
                self._lex_symbol(start)
        return self.tokens

    def _lex_at(self, start: int) -> None:
        text = self.text
        here = HERE_STRING_OPEN.match(text, start)
        if here:
            quote = here.group(1)
            terminator = re.compile(r"\n" + re.escape(quote) + "@", re.MULTILINE)
            match = terminator.search(text, here.end() - 1)
            self._emit(TokenKind.STRING, start, len(text) if match is None else match.end())
            return
        if text.startswith("@(", start) or text.startswith("@{", start):
            self._emit(TokenKind.PUNCT, start, start + 2)
            return
        splat = SPLAT_PATTERN.match(text, start)
        if splat:
            self._emit(TokenKind.VARIABLE, start, splat.end())
            return
        self._emit(TokenKind.OPERATOR, start, start + 1)

    def _lex_dollar(self, start: int) -> None:
        if self.text.startswith("$(", start):
            self._emit(TokenKind.PUNCT, start, start + 2)
            return
        match = VARIABLE_PATTERN.match(self.text, start)
        if match:
            self._emit(TokenKind.VARIABLE, start, match.end())
        else:
            self._emit(TokenKind.OPERATOR, start, start + 1)

    def _lex_dash(self, start: int) -> None:
        match = DASH_PATTERN.match(self.text, start)
        name, colon = match.group(1), match.group(2)
        if name.lower() in DASH_OPERATORS and not colon:
            self._emit(TokenKind.OPERATOR, start, match.end())
        else:
            self._emit(TokenKind.PARAMETER, start, match.end())

    def _try_redirection(self, start: int) -> bool:
        if start > 0 and not self.text[start - 1].isspace():
            return False
        match = REDIRECTION_PATTERN.match(self.text, start)
        if not match:
            return False
        self._emit(TokenKind.OPERATOR, start, match.end())
        return True

    def _lex_number_or_word(self, start: int) -> None:
        match = NUMBER_PATTERN.match(self.text, start)
        end = match.end()
        if end < len(self.text) and (self.text[end].isalpha() or self.text[end] == "_"):
            word = WORD_PATTERN.match(self.text, start)
            self._emit(TokenKind.WORD, start, word.end())
            return
        self._emit(TokenKind.NUMBER, start, end)

    def _lex_symbol(self, start: int) -> None:
        for punct in PUNCTUATION:
            if self.text.startswith(punct, start):
                self._emit(TokenKind.PUNCT, start, start + len(punct))
                return
        for operator in SYMBOL_OPERATORS:
            if self.text.startswith(operator, start):
                self._emit(TokenKind.OPERATOR, start, start + len(operator))
                return
        self._emit(TokenKind.OPERATOR, start, start + 1)

    def _scan_single_quoted(self, start: int) -> int:
        text = self.text
        index = start + 1
        while True:
            end = text.find("'", index)
            if end < 0:
                return len(text)
            if text.startswith("''", end):
                index = end + 2
                continue
            return end + 1

    def _scan_double_quoted(self, start: int) -> int:
        text = self.text
        length = len(text)
        index = start + 1
        while index < length:
            char = text[index]
            if char == "`":
                index += 2
            elif char == '"':
                if text.startswith('""', index):
                    index += 2
                    continue
                return index + 1
            elif text.startswith("$(", index):
                index = self._skip_subexpression(index + 2)
            else:
                index += 1
        return length

    def _skip_subexpression(self, index: int) -> int:
        text = self.text
        length = len(text)
        depth = 1
        while index < length and depth:
            char = text[index]
            if char == "(":
                depth += 1
            elif char == ")":
                depth -= 1
            elif char == "'":
                index = self._scan_single_quoted(index)
                continue
            elif char == '"':
                index = self._scan_double_quoted(index)
                continue
            index += 1
        return index


def tokenize(text: str) -> List[Token]:
    """Split PowerShell source into a flat list of tokens."""

    return _Lexer(text).run()

