"""Load and validate ``.psstyle.yaml`` configuration."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml

from ..severity import Severity
from ..suppressions import Suppression
from .code import DEFAULT_EXTENSIONS
from .fileio import read_yaml_file

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".psstyle.yaml"
KNOWN_KEYS = frozenset(
    {
        "select",
        "ignore",
        "extensions",
        "exclude",
        "severity",
        "allowed_computer_names",
        "guide",
        "suppressions",
    }
)


class ConfigError(ValueError):
    """Raised when the configuration file is missing or malformed."""


@dataclass
class GuideOptions:
    rule_heading_level: int = 3
    require_good_example: bool = True


@dataclass
class LintConfig:
    """Settings shared by the engine and the rules."""

    select: List[str] = field(default_factory=list)
    ignore: List[str] = field(default_factory=list)
    extensions: Tuple[str, ...] = DEFAULT_EXTENSIONS
    exclude: List[str] = field(default_factory=list)
    severity_overrides: Dict[str, Severity] = field(default_factory=dict)
    allowed_computer_names: List[str] = field(default_factory=list)
    guide: GuideOptions = field(default_factory=GuideOptions)
    suppressions: List[Suppression] = field(default_factory=list)
    raw_suppressions: List[Any] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "LintConfig":
        if not isinstance(data, Mapping):
            raise ConfigError("configuration root must be a mapping")
        unknown = sorted(set(data) - KNOWN_KEYS)
        if unknown:
            logger.warning("Ignoring unknown configuration keys: %s", ", ".join(unknown))

        config = cls()
        config.select = _string_list(data, "select")
        config.ignore = _string_list(data, "ignore")
        config.exclude = _string_list(data, "exclude", lower=False)
        config.allowed_computer_names = _string_list(data, "allowed_computer_names")
        if "extensions" in data:
            extensions = _string_list(data, "extensions")
            config.extensions = tuple(ext if ext.startswith(".") else f".{ext}" for ext in extensions)

        severity = data.get("severity") or {}
        if not isinstance(severity, Mapping):
            raise ConfigError("'severity' must map rule names to severity levels")
        for rule, level in severity.items():
            try:
                config.severity_overrides[str(rule).lower()] = Severity.parse(level)
            except ValueError as exc:
                raise ConfigError(f"severity.{rule}: {exc}") from None

        config.guide = _guide_options(data.get("guide") or {})

        suppressions = data.get("suppressions") or []
        if not isinstance(suppressions, list):
            raise ConfigError("'suppressions' must be a list")
        config.raw_suppressions = list(suppressions)
        for index, entry in enumerate(suppressions):
            try:
                config.suppressions.append(Suppression.from_mapping(entry))
            except ValueError as exc:
                raise ConfigError(f"suppressions[{index}]: {exc}") from None
        return config


def _string_list(data: Mapping[str, Any], key: str, lower: bool = True) -> List[str]:
    value = data.get(key)
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        raise ConfigError(f"'{key}' must be a list of strings")
    items = [str(item).strip() for item in value]
    return [item.lower() for item in items] if lower else items


def _guide_options(data: Any) -> GuideOptions:
    if not isinstance(data, Mapping):
        raise ConfigError("'guide' must be a mapping")
    options = GuideOptions()
    level = data.get("rule_heading_level", options.rule_heading_level)
    if isinstance(level, bool) or not isinstance(level, int) or not 1 <= level <= 6:
        raise ConfigError("guide.rule_heading_level must be an integer between 1 and 6")
    options.rule_heading_level = level
    require_good = data.get("require_good_example", options.require_good_example)
    if not isinstance(require_good, bool):
        raise ConfigError("guide.require_good_example must be true or false")
    options.require_good_example = require_good
    return options


def load_config(path: Optional[str] = None) -> LintConfig:
    """Load configuration from ``path`` or the default file in the working directory."""

    explicit = path is not None
    config_path = Path(path) if explicit else Path(CONFIG_FILENAME)
    if not config_path.exists():
        if explicit:
            raise ConfigError(f"configuration file not found: {config_path}")
        return LintConfig()
    try:
        data = read_yaml_file(config_path)
    except yaml.YAMLError as exc:
        raise ConfigError(f"{config_path}: invalid YAML ({exc})") from None
    logger.info("Loaded configuration from %s", config_path)
    return LintConfig.from_mapping(data or {})
