"""Source scanner: walk tokenized scripts and yield candidate sites for rules."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Set, Tuple

from .suppressions import InlineDirectives, parse_inline_directives
from .tokenizer import COMPARISON_OPERATORS, Token, TokenKind, tokenize
from .utils import read_text_file, split_lines

OPENERS = frozenset({"(", "{", "[", "@(", "@{", "$("})
CLOSERS = frozenset({")", "}", "]"})
STATEMENT_STARTERS = frozenset({";", "{", "(", "@(", "$("})
COMMAND_OPERATORS = frozenset({"|", "&&", "||", "=", "&"})
COMMAND_KEYWORDS = frozenset({"return", "throw", "in"})
PIPELINE_ALIASES = frozenset({"%", "?", "foreach"})
FUNCTION_KEYWORDS = frozenset({"function", "filter", "workflow"})
FALSE_LITERALS = frozenset({"$false", "0"})


@dataclass(frozen=True)
class CommandSite:
    """A command invocation and the arguments that follow it in the same statement."""

    name_token: Token
    arguments: Tuple[Token, ...]

    @property
    def name(self) -> str:
        return self.name_token.text

    def parameter_value(self, *names: str, min_prefix: int = 1) -> Optional[Token]:
        """Return the token bound to a named parameter, honoring prefix abbreviation."""

        index = self.parameter_index(*names, min_prefix=min_prefix)
        return None if index is None else self.arguments[index]

    def parameter_index(self, *names: str, min_prefix: int = 1) -> Optional[int]:
        """Return the position in ``arguments`` of the first token bound to a named parameter."""

        wanted = [name.lower() for name in names]
        for index, token in enumerate(self.arguments):
            if token.kind is not TokenKind.PARAMETER:
                continue
            given = token.parameter_name.lower()
            if not self._parameter_matches(given, wanted, min_prefix):
                continue
            if index + 1 < len(self.arguments):
                following = self.arguments[index + 1]
                if following.kind is not TokenKind.PARAMETER:
                    return index + 1
            return None
        return None

    def has_parameter(self, *names: str, min_prefix: int = 1) -> bool:
        wanted = [name.lower() for name in names]
        return any(
            token.kind is TokenKind.PARAMETER
            and self._parameter_matches(token.parameter_name.lower(), wanted, min_prefix)
            for token in self.arguments
        )

    @staticmethod
    def _parameter_matches(given: str, wanted: Sequence[str], min_prefix: int) -> bool:
        if given in wanted:
            return True
        return len(given) >= min_prefix and any(name.startswith(given) for name in wanted)


@dataclass(frozen=True)
class AttributeSite:
    """An ``[Attribute(...)]`` or ``[type]`` literal."""

    name: str
    token: Token
    arguments: Tuple[Token, ...] = ()
    is_type: bool = False

    @property
    def lower(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class ParameterSite:
    variable: Token
    attributes: Tuple[AttributeSite, ...] = ()
    default: Tuple[Token, ...] = ()

    @property
    def name(self) -> str:
        return self.variable.text.lstrip("$")

    @property
    def type_name(self) -> Optional[str]:
        for attribute in self.attributes:
            if attribute.is_type:
                return attribute.name
        return None

    @property
    def mandatory(self) -> bool:
        for attribute in self.attributes:
            if attribute.lower != "parameter":
                continue
            arguments = attribute.arguments
            for index, token in enumerate(arguments):
                if token.kind is not TokenKind.WORD or token.lower != "mandatory":
                    continue
                if index + 2 < len(arguments) and arguments[index + 1].is_operator("="):
                    return arguments[index + 2].lower not in FALSE_LITERALS
                return True
        return False


@dataclass(frozen=True)
class FunctionSite:
    keyword: Token
    name_token: Token
    attributes: Tuple[AttributeSite, ...]
    parameters: Tuple[ParameterSite, ...]
    body_start: int
    body_end: int

    @property
    def name(self) -> str:
        return self.name_token.text

    @property
    def short_name(self) -> str:
        """Name without a ``global:``/``script:`` scope prefix."""

        return self.name.rsplit(":", 1)[-1]

    @property
    def output_types(self) -> List[str]:
        types: List[str] = []
        for attribute in self.attributes:
            if attribute.lower != "outputtype":
                continue
            for token in attribute.arguments:
                if token.kind is TokenKind.WORD:
                    types.append(token.text)
                elif token.kind is TokenKind.STRING:
                    types.append(token.value)
        return types


@dataclass(frozen=True)
class CatchSite:
    keyword: Token
    body: Tuple[Token, ...]

    @property
    def is_empty(self) -> bool:
        return all(token.kind is TokenKind.NEWLINE for token in self.body)


@dataclass(frozen=True)
class ComparisonSite:
    operator: Token
    left: Optional[Token]
    right: Optional[Token]


@dataclass
class ScriptFile:
    """Tokenized view of a single PowerShell file."""

    path: Path
    text: str
    tokens: List[Token] = field(init=False)
    code: List[Token] = field(init=False)
    lines: List[str] = field(init=False)
    directives: InlineDirectives = field(init=False)

    def __post_init__(self) -> None:
        self.tokens = tokenize(self.text)
        self.code = [token for token in self.tokens if token.kind is not TokenKind.COMMENT]
        self.lines = split_lines(self.text)
        self.directives = parse_inline_directives(
            (token.line, token.text) for token in self.tokens if token.kind is TokenKind.COMMENT
        )
        self._pairs = self._match_brackets()

    @classmethod
    def load(cls, path: Path) -> "ScriptFile":
        return cls(path=path, text=read_text_file(path))

    @property
    def display_path(self) -> str:
        return str(self.path)

    def line_text(self, line: int) -> str:
        if 1 <= line <= len(self.lines):
            return self.lines[line - 1].strip()
        return ""

    @property
    def string_lines(self) -> Set[int]:
        """Line numbers touched by strings that span more than one line."""

        covered: Set[int] = set()
        for token in self.tokens:
            if token.kind is TokenKind.STRING and token.end_line > token.line:
                covered.update(range(token.line, token.end_line + 1))
        return covered

    # ------------------------------------------------------------------
    # Candidate sites
    # ------------------------------------------------------------------
    def iter_commands(self) -> Iterator[CommandSite]:
        code = self.code
        contexts: List[str] = []
        previous: Optional[Token] = None
        param_closers = self._param_closers()
        skip_until = -1
        for index, token in enumerate(code):
            if index > skip_until and self._is_command(index, previous, contexts, param_closers):
                yield CommandSite(token, tuple(self._collect_arguments(index + 1)))
            if token.kind is TokenKind.KEYWORD and token.lower == "enum":
                # enum members are bare names, not commands
                skip_until = max(skip_until, self._enum_body_end(index))
            if token.kind is TokenKind.PUNCT:
                if token.text in ("{", "$(", "@("):
                    contexts.append("block")
                elif token.text == "(":
                    contexts.append("paren")
                elif token.text == "@{":
                    contexts.append("hashtable")
                elif token.text == "[":
                    contexts.append("bracket")
                elif token.text in CLOSERS and contexts:
                    contexts.pop()
            previous = token

    def iter_functions(self) -> Iterator[FunctionSite]:
        code = self.code
        for index, token in enumerate(code):
            if token.kind is not TokenKind.KEYWORD or token.lower not in FUNCTION_KEYWORDS:
                continue
            name_index = self._skip_newlines(index + 1)
            if name_index >= len(code) or code[name_index].kind is not TokenKind.WORD:
                continue
            cursor = self._skip_newlines(name_index + 1)
            inline: Optional[Tuple[int, int]] = None
            if cursor < len(code) and code[cursor].is_punct("("):
                close = self._pairs.get(cursor, len(code))
                inline = (cursor + 1, close)
                cursor = self._skip_newlines(close + 1)
            if cursor >= len(code) or not code[cursor].is_punct("{"):
                continue
            body_end = self._pairs.get(cursor, len(code))
            attributes, param_range = self._function_header(cursor + 1, body_end)
            parameter_range = param_range or inline
            parameters: Tuple[ParameterSite, ...] = ()
            if parameter_range is not None:
                parameters = tuple(self._parse_parameters(*parameter_range))
            yield FunctionSite(
                keyword=token,
                name_token=code[name_index],
                attributes=tuple(attributes),
                parameters=parameters,
                body_start=cursor,
                body_end=body_end,
            )

    def iter_catch_blocks(self) -> Iterator[CatchSite]:
        code = self.code
        for index, token in enumerate(code):
            if token.kind is not TokenKind.KEYWORD or token.lower != "catch":
                continue
            cursor = index + 1
            while cursor < len(code):
                current = code[cursor]
                if current.is_punct("["):
                    cursor = self._pairs.get(cursor, len(code)) + 1
                elif current.kind is TokenKind.NEWLINE or current.is_operator(","):
                    cursor += 1
                else:
                    break
            if cursor < len(code) and code[cursor].is_punct("{"):
                close = self._pairs.get(cursor, len(code))
                yield CatchSite(keyword=token, body=tuple(code[cursor + 1 : close]))

    def iter_comparisons(self) -> Iterator[ComparisonSite]:
        code = self.code
        for index, token in enumerate(code):
            if token.kind is not TokenKind.OPERATOR or not token.text.startswith("-"):
                continue
            if token.lower[1:] not in COMPARISON_OPERATORS:
                continue
            yield ComparisonSite(
                operator=token,
                left=self._neighbour(index, -1),
                right=self._neighbour(index, 1),
            )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _match_brackets(self) -> Dict[int, int]:
        pairs: Dict[int, int] = {}
        stack: List[int] = []
        for index, token in enumerate(self.code):
            if token.kind is not TokenKind.PUNCT:
                continue
            if token.text in OPENERS:
                stack.append(index)
            elif token.text in CLOSERS and stack:
                pairs[stack.pop()] = index
        return pairs

    def _skip_newlines(self, index: int) -> int:
        while index < len(self.code) and self.code[index].kind is TokenKind.NEWLINE:
            index += 1
        return index

    def _neighbour(self, index: int, step: int) -> Optional[Token]:
        index += step
        while 0 <= index < len(self.code):
            if self.code[index].kind is not TokenKind.NEWLINE:
                return self.code[index]
            index += step
        return None

    def _param_closers(self) -> Set[int]:
        """Indexes of the ``)`` tokens that close ``param(...)`` blocks."""

        closers: Set[int] = set()
        for index, token in enumerate(self.code):
            if token.kind is not TokenKind.KEYWORD or token.lower != "param":
                continue
            open_index = self._skip_newlines(index + 1)
            if open_index < len(self.code) and self.code[open_index].is_punct("("):
                close = self._pairs.get(open_index)
                if close is not None:
                    closers.add(close)
        return closers

    def _enum_body_end(self, index: int) -> int:
        for cursor in range(index + 1, len(self.code)):
            token = self.code[cursor]
            if token.is_punct("{"):
                return self._pairs.get(cursor, len(self.code))
            if token.is_punct(";") or token.kind is TokenKind.PUNCT and token.text in CLOSERS:
                break
        return index

    def _is_command(
        self,
        index: int,
        previous: Optional[Token],
        contexts: List[str],
        param_closers: Set[int],
    ) -> bool:
        token = self.code[index]
        if "bracket" in contexts:
            return False
        context = contexts[-1] if contexts else "block"
        if context == "hashtable":
            if previous is None or not previous.is_operator("="):
                return False
        elif not (self._at_statement_start(previous) or index - 1 in param_closers):
            return False

        if token.kind is TokenKind.WORD:
            following = self._neighbour(index, 1)
            if following is not None and following.is_operator("=") and following.line == token.line:
                return False
            return True
        after_pipe = previous is not None and previous.is_operator("|")
        if token.kind in (TokenKind.OPERATOR, TokenKind.KEYWORD):
            return after_pipe and token.lower in PIPELINE_ALIASES
        return False

    @staticmethod
    def _at_statement_start(previous: Optional[Token]) -> bool:
        if previous is None or previous.kind is TokenKind.NEWLINE:
            return True
        if previous.kind is TokenKind.PUNCT:
            return previous.text in STATEMENT_STARTERS
        if previous.kind is TokenKind.OPERATOR:
            return previous.text in COMMAND_OPERATORS
        if previous.kind is TokenKind.KEYWORD:
            return previous.lower in COMMAND_KEYWORDS
        return False

    def _collect_arguments(self, start: int) -> List[Token]:
        arguments: List[Token] = []
        depth = 0
        for token in self.code[start:]:
            if depth == 0:
                if token.kind is TokenKind.NEWLINE or token.is_punct(";"):
                    break
                if token.kind is TokenKind.OPERATOR and token.text in ("|", "||", "&&"):
                    break
                if token.kind is TokenKind.PUNCT and token.text in CLOSERS:
                    break
            if token.kind is TokenKind.PUNCT:
                if token.text in OPENERS:
                    depth += 1
                elif token.text in CLOSERS:
                    depth -= 1
            arguments.append(token)
        return arguments

    def _function_header(
        self, start: int, stop: int
    ) -> Tuple[List[AttributeSite], Optional[Tuple[int, int]]]:
        code = self.code
        attributes: List[AttributeSite] = []
        cursor = self._skip_newlines(start)
        while cursor < stop and code[cursor].is_punct("["):
            close = self._pairs.get(cursor, stop)
            attributes.append(_parse_attribute(code[cursor : close + 1]))
            cursor = self._skip_newlines(close + 1)
        if cursor < stop and code[cursor].kind is TokenKind.KEYWORD and code[cursor].lower == "param":
            open_index = self._skip_newlines(cursor + 1)
            if open_index < stop and code[open_index].is_punct("("):
                return attributes, (open_index + 1, self._pairs.get(open_index, stop))
        return attributes, None

    def _parse_parameters(self, start: int, stop: int) -> Iterator[ParameterSite]:
        chunk: List[Token] = []
        depth = 0
        for token in self.code[start:stop]:
            if token.kind is TokenKind.NEWLINE:
                continue
            if depth == 0 and token.is_operator(","):
                parameter = _parse_parameter(chunk)
                if parameter is not None:
                    yield parameter
                chunk = []
                continue
            if token.kind is TokenKind.PUNCT:
                if token.text in OPENERS:
                    depth += 1
                elif token.text in CLOSERS:
                    depth -= 1
            chunk.append(token)
        parameter = _parse_parameter(chunk)
        if parameter is not None:
            yield parameter


def _matching_bracket(tokens: Sequence[Token], start: int) -> int:
    depth = 0
    for index in range(start, len(tokens)):
        token = tokens[index]
        if token.kind is not TokenKind.PUNCT:
            continue
        if token.text in OPENERS:
            depth += 1
        elif token.text in CLOSERS:
            depth -= 1
            if depth == 0:
                return index
    return len(tokens) - 1


def _parse_attribute(tokens: Sequence[Token]) -> AttributeSite:
    """Parse ``[Name(args)]`` or ``[type]`` given the tokens from ``[`` to ``]``."""

    inner = list(tokens[1:-1]) if len(tokens) > 1 and tokens[-1].is_punct("]") else list(tokens[1:])
    if not inner:
        return AttributeSite(name="", token=tokens[0], is_type=True)
    name = inner[0].text
    if len(inner) > 1 and inner[1].is_punct("("):
        close = _matching_bracket(inner, 1)
        return AttributeSite(name=name, token=inner[0], arguments=tuple(inner[2:close]))
    if len(inner) > 1 and inner[1].is_punct("["):
        name += "[]"
    return AttributeSite(name=name, token=inner[0], is_type=True)


def _parse_parameter(chunk: Sequence[Token]) -> Optional[ParameterSite]:
    attributes: List[AttributeSite] = []
    index = 0
    while index < len(chunk) and chunk[index].is_punct("["):
        close = _matching_bracket(chunk, index)
        attributes.append(_parse_attribute(chunk[index : close + 1]))
        index = close + 1
    if index >= len(chunk) or chunk[index].kind is not TokenKind.VARIABLE:
        return None
    variable = chunk[index]
    default: Tuple[Token, ...] = ()
    if index + 1 < len(chunk) and chunk[index + 1].is_operator("="):
        default = tuple(chunk[index + 2 :])
    return ParameterSite(variable=variable, attributes=tuple(attributes), default=default)
