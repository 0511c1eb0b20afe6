from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Severity = Literal["low", "medium", "high", "critical"]
FixKind = Literal["remove_line", "replace"]

# Ordered from least to most important.
SEVERITIES: tuple[Severity, ...] = ("low", "medium", "high", "critical")
_SEVERITY_RANK = {name: idx for idx, name in enumerate(SEVERITIES)}


def severity_rank(severity: str) -> int:
    """Return the ordinal of `severity` (low=0 .. critical=3)."""

    try:
        return _SEVERITY_RANK[severity]
    except KeyError:
        raise ValueError(f"Unknown severity: {severity!r}") from None


def meets_threshold(severity: str, threshold: str) -> bool:
    return severity_rank(severity) >= severity_rank(threshold)


@dataclass(frozen=True, slots=True)
class Location:
    start_line: int  # 1-based
    start_col: int  # 1-based
    end_line: int  # 1-based
    end_col: int  # 1-based, exclusive


@dataclass(frozen=True, slots=True)
class FixDescriptor:
    """
    Mechanical rewrite available for a rule's matches.

    `remove_line` drops the matched line. `replace` substitutes the rule's own
    match using `replacement` as an `re` template. Applying the rewrite is left
    to callers.
    """

    kind: FixKind
    replacement: str | None = None


@dataclass(frozen=True, slots=True)
class Finding:
    rule_name: str
    path: str
    language: str
    location: Location
    severity: Severity
    description: str
    matched_text: str = ""
    fix: FixDescriptor | None = None

    @property
    def auto_fix(self) -> bool:
        return self.fix is not None

    @property
    def line(self) -> int:
        return self.location.start_line


@dataclass(frozen=True, slots=True)
class ScanSummary:
    files_scanned: int
    findings: tuple[Finding, ...]
    files_cancelled: int = 0

    def counts_by_severity(self) -> dict[str, int]:
        counts = {name: 0 for name in SEVERITIES}
        for finding in self.findings:
            counts[finding.severity] += 1
        return counts
