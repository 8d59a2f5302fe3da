"""Rule registry: named, independent checks and their selection."""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List

from .rules import Rule
from .rules import (
    aliases,
    approved_verbs,
    dsc_resource_functions,
    empty_catch,
    global_variables,
    guide_document,
    hardcoded_computer_name,
    invoke_expression,
    null_comparison,
    parameter_declarations,
    plaintext_password,
    whitespace,
    wmi_cmdlets,
    write_host,
)

RuleFactory = Callable[[], Rule]

BUILTIN_RULES = (
    aliases,
    null_comparison,
    empty_catch,
    hardcoded_computer_name,
    global_variables,
    write_host,
    invoke_expression,
    wmi_cmdlets,
    plaintext_password,
    parameter_declarations,
    approved_verbs,
    dsc_resource_functions,
    whitespace,
    guide_document,
)


class UnknownRuleError(ValueError):
    """Raised when a rule name is not registered."""


class RuleRegistry:
    """Hold rule factories keyed by rule name, in registration order."""

    def __init__(self) -> None:
        self._factories: Dict[str, RuleFactory] = {}
        self._descriptions: Dict[str, str] = {}

    def register(self, factory: RuleFactory) -> None:
        sample = factory()
        name = sample.name
        if name in self._factories:
            raise ValueError(f"rule {name!r} is already registered")
        self._factories[name] = factory
        self._descriptions[name] = getattr(sample, "description", "")

    def names(self) -> List[str]:
        return list(self._factories)

    def describe(self, name: str) -> str:
        return self._descriptions[name]

    def create(self, name: str) -> Rule:
        return self._factories[name]()

    def select(self, include: Iterable[str] = (), exclude: Iterable[str] = ()) -> List[Rule]:
        """Build fresh rule instances; an empty ``include`` selects every rule."""

        include = [name.lower() for name in include]
        exclude = {name.lower() for name in exclude}
        unknown = sorted({*include, *exclude} - set(self._factories))
        if unknown:
            raise UnknownRuleError(f"unknown rule(s): {', '.join(unknown)}")
        wanted = include or self.names()
        return [self.create(name) for name in self.names() if name in wanted and name not in exclude]


def default_registry() -> RuleRegistry:
    registry = RuleRegistry()
    for module in BUILTIN_RULES:
        registry.register(module.get_rule)
    return registry
