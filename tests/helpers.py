from __future__ import annotations

from pathlib import Path

from slopscan.engine.globs import is_excluded
from slopscan.engine.selector import scan_text
from slopscan.engine.types import Finding
from slopscan.rules.base import Rule
from slopscan.rules.registry import default_registry


def get_rule(name: str) -> Rule:
    return default_registry().rule(name)


def hits(name: str, text: str) -> bool:
    return get_rule(name).test(text)


def excluded(name: str, path: str) -> bool:
    return is_excluded(path, get_rule(name).exclude)


def scan(relpath: str, content: str, **kwargs) -> list[Finding]:
    return scan_text(relpath, content, **kwargs)


def rule_names(findings: list[Finding]) -> set[str]:
    return {f.rule_name for f in findings}


def write_file(root: Path, relpath: str, content: str) -> Path:
    path = root / relpath
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path
