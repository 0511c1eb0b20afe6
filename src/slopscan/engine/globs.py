from __future__ import annotations

from collections.abc import Iterable
from functools import lru_cache

import pathspec


def normalize_path(path: str) -> str:
    """Return a POSIX-style relative path suitable for glob matching."""

    normalized = path.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized


def is_excluded(path: str, globs: Iterable[str]) -> bool:
    """
    Return True when `path` matches ANY glob in `globs`.

    Globs follow gitignore-style wildcard semantics:
    - `**` crosses directory separators (`**/tests/**`, `cmd/**`)
    - `*` stays within one path segment
    - globs without a slash (`main.go`, `*_test.go`) match the file name in
      any directory, globs with a slash are anchored at the project root

    An empty glob collection never excludes anything.
    """

    patterns = tuple(globs)
    if not patterns:
        return False
    return _compiled(patterns).match_file(normalize_path(path))


@lru_cache(maxsize=512)
def _compiled(patterns: tuple[str, ...]) -> pathspec.GitIgnoreSpec:
    return pathspec.GitIgnoreSpec.from_lines(patterns)
