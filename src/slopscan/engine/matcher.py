from __future__ import annotations

import logging
import re
from bisect import bisect_right
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from slopscan.engine.multipass import ANALYZERS, Span
from slopscan.rules.base import Rule

logger = logging.getLogger(__name__)

# Lines longer than this are minified or generated; line rules skip them.
MAX_LINE_LENGTH = 5000


@dataclass(frozen=True, slots=True)
class Match:
    line: int  # 1-based
    column: int  # 1-based
    end_line: int
    end_column: int  # exclusive
    text: str


class LineIndex:
    """Map character offsets in a text to 1-based (line, column) pairs."""

    def __init__(self, text: str) -> None:
        self._starts = [0]
        self._starts.extend(m.end() for m in re.finditer("\n", text))

    def position(self, offset: int) -> tuple[int, int]:
        idx = bisect_right(self._starts, offset) - 1
        return idx + 1, offset - self._starts[idx] + 1


def split_lines(text: str) -> list[str]:
    return [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]


def match_rule(
    rule: Rule,
    text: str,
    *,
    lines: Sequence[str] | None = None,
    index: LineIndex | None = None,
) -> list[Match]:
    """
    Run one rule over `text` and return every match location.

    Multi-pass rules delegate to their analyzer. Disabled rules never match.
    Precomputed `lines` and `index` may be passed when several rules run over
    the same text.
    """

    if not rule.enabled:
        return []
    if rule.requires_multi_pass:
        return _spans_to_matches(ANALYZERS[rule.name](text), text, index or LineIndex(text))
    if rule.pattern is None:
        return []
    if rule.scope == "text":
        return _spans_to_matches((_hit_span(m) for m in rule.pattern.finditer(text)), text, index or LineIndex(text))
    return _match_lines(rule, split_lines(text) if lines is None else lines)


def _match_lines(rule: Rule, lines: Sequence[str]) -> list[Match]:
    assert rule.pattern is not None
    matches: list[Match] = []
    for line_no, line in enumerate(lines, start=1):
        if len(line) > MAX_LINE_LENGTH:
            logger.debug("%s: skipping line %d (%d characters)", rule.name, line_no, len(line))
            continue
        found = rule.pattern.search(line)
        if found is None:
            continue
        start, end = _hit_span(found)
        matches.append(Match(line_no, start + 1, line_no, end + 1, line[start:end]))
    return matches


def _hit_span(found: re.Match[str]) -> Span:
    if "hit" in found.re.groupindex and found.start("hit") != -1:
        return found.span("hit")
    return found.span()


def _spans_to_matches(spans: Iterable[Span], text: str, index: LineIndex) -> list[Match]:
    matches: list[Match] = []
    for start, end in spans:
        line, column = index.position(start)
        end_line, end_column = index.position(end)
        matches.append(Match(line, column, end_line, end_column, text[start:end]))
    return matches
