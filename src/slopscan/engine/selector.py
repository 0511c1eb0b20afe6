from __future__ import annotations

from collections.abc import Collection, Iterable

from slopscan.engine.globs import is_excluded, normalize_path
from slopscan.engine.matcher import LineIndex, match_rule, split_lines
from slopscan.engine.types import Finding, Location
from slopscan.languages.registry import classify
from slopscan.rules.base import Rule
from slopscan.rules.registry import PatternRegistry, default_registry
from slopscan.suppressions import parse_suppressions


def active_rules(
    path: str,
    language: str,
    registry: PatternRegistry | None = None,
    *,
    disabled: Collection[str] = (),
) -> list[Rule]:
    """
    Rules that apply to `path`: universal plus language rules, minus rules
    that are disabled (catalogue or caller) or excluded by their globs.
    """

    reg = registry or default_registry()
    selected: list[Rule] = []
    for rule in reg.get_patterns_for_language(language).values():
        if not rule.enabled or rule.name in disabled:
            continue
        if is_excluded(path, rule.exclude):
            continue
        selected.append(rule)
    return selected


def scan_text(
    path: str,
    text: str,
    *,
    registry: PatternRegistry | None = None,
    language: str | None = None,
    disabled: Collection[str] = (),
) -> list[Finding]:
    """
    Classify `path`, run every active rule over `text` and return findings
    ordered by position.

    Findings are dropped when a rule listed in their `suppressed_by` fires on
    the same line, or when an inline `slop:` directive disables them.
    """

    rel = normalize_path(path)
    lang = language or classify(rel, text)
    rules = active_rules(rel, lang, registry, disabled=disabled)
    if not rules:
        return []

    lines = split_lines(text)
    index = LineIndex(text)
    candidates: list[tuple[Rule, Finding]] = []
    for rule in rules:
        for match in match_rule(rule, text, lines=lines, index=index):
            finding = Finding(
                rule_name=rule.name,
                path=rel,
                language=str(lang),
                location=Location(match.line, match.column, match.end_line, match.end_column),
                severity=rule.severity,
                description=rule.description,
                matched_text=match.text,
                fix=rule.fix,
            )
            candidates.append((rule, finding))

    findings = list(_drop_cross_suppressed(candidates))

    suppressions = parse_suppressions(lines)
    if not suppressions.empty:
        findings = [f for f in findings if not suppressions.is_suppressed(f.rule_name, line=f.line)]

    findings.sort(key=lambda f: (f.location.start_line, f.location.start_col, f.rule_name))
    return findings


def _drop_cross_suppressed(candidates: list[tuple[Rule, Finding]]) -> Iterable[Finding]:
    fired: dict[int, set[str]] = {}
    for _rule, finding in candidates:
        fired.setdefault(finding.line, set()).add(finding.rule_name)

    for rule, finding in candidates:
        if rule.suppressed_by and not fired[finding.line].isdisjoint(rule.suppressed_by):
            continue
        yield finding
