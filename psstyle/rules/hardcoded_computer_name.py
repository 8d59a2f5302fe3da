"""Detect literal computer names passed to ``-ComputerName``."""

from __future__ import annotations

from typing import Iterator, List, Optional, Sequence

from psstyle.result import ScanResult
from psstyle.scanner import CLOSERS, OPENERS
from psstyle.severity import Severity
from psstyle.tokenizer import Token, TokenKind

from . import BaseRule, Rule, ScanContext

PARAMETER_NAMES = ("ComputerName", "CN")
MIN_PREFIX = 4
SINGLE_LITERAL_KINDS = (TokenKind.STRING, TokenKind.WORD, TokenKind.NUMBER)


class HardcodedComputerNameRule(BaseRule):
    """Flag ``-ComputerName 'server01'``, ``-CN 10.0.0.1`` and ``@('a', 'b')`` lists."""

    name = "hardcoded_computer_name"
    prefix = "CMP"
    description = "Avoid hardcoded computer names."

    def scan(self, context: ScanContext, result: ScanResult) -> None:
        allowed = {name.lower() for name in context.config.allowed_computer_names}
        for script in context.scripts:
            for command in script.iter_commands():
                start = command.parameter_index(*PARAMETER_NAMES, min_prefix=MIN_PREFIX)
                if start is None:
                    continue
                for element in _elements(command.arguments, start):
                    literal = _literal(element)
                    if literal is None or literal.lower() in allowed:
                        continue
                    result.add_finding(
                        self._finding(
                            script,
                            element[0],
                            title=f"Hardcoded computer name '{literal}' passed to {command.name}",
                            severity=Severity.HIGH,
                            recommendation=(
                                "Accept the computer name as a parameter or use $env:COMPUTERNAME. Hardcoded "
                                "names expose environment details and break when the script moves."
                            ),
                        )
                    )


def _adjacent(left: Token, right: Token) -> bool:
    return left.end_line == right.line and left.column + len(left.text) == right.column


def _elements(arguments: Sequence[Token], start: int) -> Iterator[List[Token]]:
    """Split the value bound at ``start`` into its comma-separated elements.

    A bare value ends at the first token not glued to the previous one, so
    ``10.0.0.1`` stays one element. An ``@(...)`` value runs to its closing paren.
    """

    tokens = list(arguments[start:])
    wrapped = bool(tokens) and tokens[0].is_punct("@(")
    if wrapped:
        tokens = tokens[1:]
    element: List[Token] = []
    depth = 0
    for token in tokens:
        if token.kind is TokenKind.NEWLINE:
            if not wrapped:
                break
            continue
        if token.kind is TokenKind.PUNCT and token.text in CLOSERS:
            if depth == 0:
                break
            depth -= 1
        elif depth == 0 and token.is_operator(","):
            if element:
                yield element
            element = []
            continue
        elif depth == 0 and not wrapped and element and not _adjacent(element[-1], token):
            break
        if token.kind is TokenKind.PUNCT and token.text in OPENERS:
            depth += 1
        element.append(token)
    if element:
        yield element


def _literal(element: Sequence[Token]) -> Optional[str]:
    if len(element) == 1:
        token = element[0]
        if token.kind not in SINGLE_LITERAL_KINDS:
            return None
        if token.kind is TokenKind.STRING:
            if token.text.startswith('"') and "$" in token.text:
                return None
            return token.value
        return token.text
    # dotted addresses lex as NUMBER "." NUMBER runs
    if all(token.kind is TokenKind.NUMBER or token.is_operator(".") for token in element):
        return "".join(token.text for token in element)
    return None


def get_rule() -> Rule:
    return HardcodedComputerNameRule()
