"""Linear lint pipeline: discover sources, run rules, collect findings."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Iterable, List, Optional

from .markdown import GuideDocument
from .registry import RuleRegistry, default_registry
from .result import ScanResult
from .rules import ScanContext
from .scanner import ScriptFile
from .suppressions import SuppressionSet
from .utils import iter_code_files
from .utils.config import LintConfig

logger = logging.getLogger(__name__)


def load_scripts(paths: Iterable[str], config: LintConfig) -> List[ScriptFile]:
    scripts: List[ScriptFile] = []
    for path in iter_code_files(paths, extensions=config.extensions, exclude=config.exclude):
        try:
            scripts.append(ScriptFile.load(path))
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Skipping %s: %s", path, exc)
            continue
        logger.debug("Tokenized %s (%d tokens)", path, len(scripts[-1].tokens))
    return scripts


def load_documents(paths: Iterable[str]) -> List[GuideDocument]:
    documents: List[GuideDocument] = []
    for raw in paths:
        path = Path(raw)
        if not path.is_file():
            raise FileNotFoundError(f"guide document not found: {raw}")
        documents.append(GuideDocument.load(path))
    return documents


def run_scan(
    paths: Iterable[str],
    guide_paths: Iterable[str] = (),
    config: Optional[LintConfig] = None,
    registry: Optional[RuleRegistry] = None,
    today: Optional[date] = None,
) -> ScanResult:
    """Lint scripts under ``paths`` and the guide documents in ``guide_paths``."""

    config = config or LintConfig()
    registry = registry or default_registry()
    rules = registry.select(config.select, config.ignore)

    scripts = load_scripts(paths, config)
    documents = load_documents(guide_paths)
    context = ScanContext(scripts=scripts, documents=documents, config=config)

    suppressions = SuppressionSet(config.suppressions, today=today)
    for source in (*scripts, *documents):
        suppressions.add_inline(source.display_path, source.directives)

    result = ScanResult(files_scanned=len(scripts) + len(documents))
    for rule in rules:
        collected = ScanResult()
        rule.scan(context, collected)
        logger.info("Rule %s reported %d finding(s)", rule.name, len(collected.findings))
        override = config.severity_overrides.get(rule.name)
        for finding in collected.findings:
            if override is not None:
                finding = replace(finding, severity=override)
            if suppressions.is_suppressed(finding):
                result.suppressed += 1
                continue
            result.add_finding(finding)
    return result
