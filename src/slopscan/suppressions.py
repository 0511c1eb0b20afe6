from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

WILDCARD = "all"


@dataclass(frozen=True, slots=True)
class Suppressions:
    """
    Rule suppressions declared inside a source file.

    Directives (case-insensitive, usually written in a comment):
    - `slop: disable-file=python_eval_exec,go_discarded_error` silences the
      named rules anywhere in the file
    - `slop: disable=rust_bare_unwrap` silences them on the same line
    - `slop: disable-next-line=console_debugging` silences them on the line
      below

    `all` matches every rule.
    """

    disabled_in_file: frozenset[str]
    disabled_on_line: Mapping[int, frozenset[str]]

    @property
    def empty(self) -> bool:
        return not self.disabled_in_file and not self.disabled_on_line

    def is_suppressed(self, rule_name: str, *, line: int | None) -> bool:
        name = rule_name.lower()
        if WILDCARD in self.disabled_in_file or name in self.disabled_in_file:
            return True
        if line is None:
            return False
        disabled = self.disabled_on_line.get(line)
        if not disabled:
            return False
        return WILDCARD in disabled or name in disabled


NO_SUPPRESSIONS = Suppressions(disabled_in_file=frozenset(), disabled_on_line=MappingProxyType({}))

_NAMES = r"(?P<names>[a-z0-9_,\s]+)"
_DISABLE_FILE_RE = re.compile(rf"slop:\s*disable[-_]file\s*=\s*{_NAMES}", re.IGNORECASE)
_DISABLE_LINE_RE = re.compile(rf"slop:\s*disable\s*=\s*{_NAMES}", re.IGNORECASE)
_DISABLE_NEXT_RE = re.compile(rf"slop:\s*disable[-_]next[-_]line\s*=\s*{_NAMES}", re.IGNORECASE)


def parse_suppressions(lines: Sequence[str]) -> Suppressions:
    in_file: set[str] = set()
    on_line: dict[int, set[str]] = {}

    for line_no, line in enumerate(lines, start=1):
        if "slop:" not in line.lower():
            continue

        found = _DISABLE_FILE_RE.search(line)
        if found:
            in_file.update(_parse_names(found.group("names")))

        found = _DISABLE_LINE_RE.search(line)
        if found:
            on_line.setdefault(line_no, set()).update(_parse_names(found.group("names")))

        found = _DISABLE_NEXT_RE.search(line)
        if found:
            on_line.setdefault(line_no + 1, set()).update(_parse_names(found.group("names")))

    if not in_file and not on_line:
        return NO_SUPPRESSIONS
    frozen = {line_no: frozenset(names) for line_no, names in on_line.items()}
    return Suppressions(disabled_in_file=frozenset(in_file), disabled_on_line=MappingProxyType(frozen))


def _parse_names(value: str) -> set[str]:
    return {token.lower() for token in re.split(r"[,\s]+", value.strip()) if token}
