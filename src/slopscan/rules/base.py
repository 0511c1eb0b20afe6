from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final, Literal

from slopscan.engine.types import SEVERITIES, FixDescriptor, Severity
from slopscan.languages.registry import is_registered

UNIVERSAL: Final = "universal"

MatchScope = Literal["line", "text"]

# Longest span a pattern may scan between an anchor token and the marker it
# associates with it. Markers further away are treated as unrelated.
MAX_SPAN = 200

# Prefixes that refuse lines starting with a comment. The trailing lazy span
# lets the token appear anywhere in the first MAX_SPAN characters of the line.
SLASH_CODE = rf"^(?![ \t]*(?://|/\*|\*(?![\w(*])))[^\n]{{0,{MAX_SPAN}}}?"
HASH_CODE = rf"^(?![ \t]*#)[^\n]{{0,{MAX_SPAN}}}?"

REMOVE_LINE = FixDescriptor(kind="remove_line")


class MalformedRuleError(ValueError):
    """Raised when a rule definition violates the rule model invariants."""


@dataclass(frozen=True, slots=True)
class Rule:
    """
    One named detection check.

    Exactly one of these holds for every rule:
    - `pattern` is a compiled, bounded regex evaluated by the single-pass matcher
    - `requires_multi_pass` is set and a structural analyzer decides matches
    - `disabled_reason` explains why the rule is catalogued but inert
    """

    name: str
    language: str
    pattern: re.Pattern[str] | None
    severity: Severity
    description: str
    exclude: tuple[str, ...] = ()
    requires_multi_pass: bool = False
    fix: FixDescriptor | None = None
    scope: MatchScope = "line"
    suppressed_by: tuple[str, ...] = ()
    disabled_reason: str | None = None
    known_limitation: str | None = None

    def __post_init__(self) -> None:
        validate_rule(self)

    @property
    def auto_fix(self) -> bool:
        return self.fix is not None

    @property
    def is_universal(self) -> bool:
        return self.language == UNIVERSAL

    @property
    def enabled(self) -> bool:
        return self.disabled_reason is None

    @property
    def case_sensitive(self) -> bool:
        return self.pattern is None or not (self.pattern.flags & re.IGNORECASE)

    def test(self, text: str) -> bool:
        """Return True when the pattern matches anywhere in `text`."""

        if self.pattern is None:
            return False
        return self.pattern.search(text) is not None


def validate_rule(rule: Rule) -> None:
    if not isinstance(rule.name, str) or not rule.name.strip():
        raise MalformedRuleError("Rule name must be a non-empty string.")
    if rule.name != rule.name.strip():
        raise MalformedRuleError(f"Rule name must not carry surrounding whitespace: {rule.name!r}")
    if rule.language != UNIVERSAL and not is_registered(rule.language):
        raise MalformedRuleError(f"{rule.name}: unknown language {rule.language!r}")
    if rule.severity not in SEVERITIES:
        raise MalformedRuleError(f"{rule.name}: severity must be one of {', '.join(SEVERITIES)}, got {rule.severity!r}")
    if not isinstance(rule.exclude, tuple) or any(not isinstance(g, str) or not g for g in rule.exclude):
        raise MalformedRuleError(f"{rule.name}: exclude must be a tuple of non-empty glob strings.")
    if rule.scope not in ("line", "text"):
        raise MalformedRuleError(f"{rule.name}: scope must be 'line' or 'text'.")
    if rule.requires_multi_pass and rule.pattern is not None:
        raise MalformedRuleError(f"{rule.name}: multi-pass rules must not carry a pattern.")
    if rule.pattern is None and not rule.requires_multi_pass and rule.disabled_reason is None:
        raise MalformedRuleError(f"{rule.name}: rule has no pattern and is not multi-pass, so it can never match.")
    if rule.fix is not None and rule.fix.kind == "replace" and not rule.fix.replacement:
        raise MalformedRuleError(f"{rule.name}: replace fixes need a replacement template.")
    if rule.name in rule.suppressed_by:
        raise MalformedRuleError(f"{rule.name}: a rule cannot suppress itself.")


def rule(
    name: str,
    language: str,
    pattern: str | None,
    *,
    severity: Severity,
    description: str,
    exclude: tuple[str, ...] = (),
    ignore_case: bool = False,
    requires_multi_pass: bool = False,
    fix: FixDescriptor | None = None,
    scope: MatchScope = "line",
    suppressed_by: tuple[str, ...] = (),
    disabled_reason: str | None = None,
    known_limitation: str | None = None,
) -> Rule:
    """Compile `pattern` (always multi-line) and build a `Rule`."""

    compiled = None
    if pattern is not None:
        flags = re.MULTILINE | (re.IGNORECASE if ignore_case else 0)
        try:
            compiled = re.compile(pattern, flags)
        except re.error as exc:
            raise MalformedRuleError(f"{name}: invalid pattern: {exc}") from exc
    return Rule(
        name=name,
        language=language,
        pattern=compiled,
        severity=severity,
        description=description,
        exclude=exclude,
        requires_multi_pass=requires_multi_pass,
        fix=fix,
        scope=scope,
        suppressed_by=suppressed_by,
        disabled_reason=disabled_reason,
        known_limitation=known_limitation,
    )


def dedupe(*groups: tuple[str, ...]) -> tuple[str, ...]:
    """Concatenate glob groups, dropping repeats but keeping order."""

    seen: dict[str, None] = {}
    for group in groups:
        for glob in group:
            seen.setdefault(glob, None)
    return tuple(seen)


VENDOR: tuple[str, ...] = ("**/vendor/**", "**/deps/**", "**/third_party/**")
EXAMPLES: tuple[str, ...] = ("**/examples/**",)
BENCHES: tuple[str, ...] = ("**/benches/**",)
