from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from types import MappingProxyType

from slopscan.languages.registry import CommentSyntax, Language, detect_comment_syntax

# Half-open character offsets into the analysed text.
Span = tuple[int, int]
Analyzer = Callable[[str], list[Span]]


def mask_source(text: str, comments: CommentSyntax) -> str:
    """
    Blank out comments and the contents of string/char literals.

    The result has the same length and line breaks as `text`, and quote
    delimiters survive, so offsets found in the mask are valid in `text`.
    """

    out = list(text)
    n = len(text)
    i = 0
    while i < n:
        if comments.block is not None and text.startswith(comments.block[0], i):
            end = text.find(comments.block[1], i + len(comments.block[0]))
            stop = n if end == -1 else end + len(comments.block[1])
            _blank(out, i, stop)
            i = stop
            continue
        if comments.line is not None and text.startswith(comments.line, i):
            end = text.find("\n", i)
            stop = n if end == -1 else end
            _blank(out, i, stop)
            i = stop
            continue
        quote = text[i]
        if quote in "\"'":
            j = i + 1
            while j < n and text[j] != quote and text[j] != "\n":
                j += 2 if text[j] == "\\" else 1
            j = min(j, n)
            _blank(out, i + 1, j)
            i = j + 1 if j < n and text[j] == quote else j
            continue
        i += 1
    return "".join(out)


def _blank(out: list[str], start: int, stop: int) -> None:
    for k in range(start, stop):
        if out[k] != "\n":
            out[k] = " "


def find_block_end(masked: str, open_index: int, opener: str = "{", closer: str = "}") -> int | None:
    """Return the index of the delimiter closing the one at `open_index`."""

    depth = 0
    for idx in range(open_index, len(masked)):
        ch = masked[idx]
        if ch == opener:
            depth += 1
        elif ch == closer:
            depth -= 1
            if depth == 0:
                return idx
    return None


def _enclosing_block_end(masked: str, start: int) -> int:
    depth = 0
    for idx in range(start, len(masked)):
        ch = masked[idx]
        if ch == "{":
            depth += 1
        elif ch == "}":
            if depth == 0:
                return idx
            depth -= 1
    return len(masked)


# ---------------------------------------------------------------------------
# Unchecked allocations
# ---------------------------------------------------------------------------

_ALLOC_RE = re.compile(
    r"(?<![\w.>])(?P<var>[A-Za-z_]\w*)[ \t]*=[ \t]*(?:\([^()\n]{1,80}\)[ \t]*)?"
    r"(?P<fn>malloc|calloc|realloc|strdup|strndup)[ \t]*\("
)
_IN_CONDITION_RE = re.compile(r"\b(?:if|while)[ \t]*\([ \t]*!?[ \t]*\(*[ \t]*$")
_MEM_CALLS = r"mem(?:set|cpy|move)|str(?:n?cpy|n?cat|len)|s?n?printf|fgets|fread"


def _event_re(var: str) -> re.Pattern[str]:
    v = re.escape(var)
    ident = rf"(?<![\w.>]){v}\b"
    checks = "|".join(
        (
            rf"\b(?:if|while)[ \t]*\([ \t]*!?[ \t]*\(*[ \t]*{ident}",
            rf"{ident}[ \t]*[!=]=[ \t]*(?:NULL|nullptr|0)\b",
            rf"\b(?:NULL|nullptr|0)[ \t]*[!=]=[ \t]*{ident}",
            rf"\bassert[ \t]*\([ \t]*!?[ \t]*{ident}",
            rf"{ident}[ \t]*=(?!=)",
            rf"\bfree[ \t]*\([ \t]*{ident}",
            rf"\breturn\b(?![^;\n]*{ident}[ \t]*(?:->|\[))",
        )
    )
    uses = "|".join(
        (
            rf"(?:^|[=(,;{{!])[ \t]*\*[ \t]*{ident}",
            rf"{ident}[ \t]*(?:->|\[)",
            rf"\b(?:{_MEM_CALLS})[ \t]*\([ \t]*{ident}",
        )
    )
    return re.compile(rf"(?P<check>{checks})|(?P<use>{uses})", re.MULTILINE)


def unchecked_allocations(text: str) -> list[Span]:
    """
    Find allocations whose result is used before any NULL check.

    The region examined runs from the end of the allocation call to the close
    of the enclosing block. The first relevant event decides: a check,
    reassignment, free or return clears the allocation, a dereference or a
    buffer call reports it.
    """

    masked = mask_source(text, detect_comment_syntax(Language.C))
    spans: list[Span] = []
    for match in _ALLOC_RE.finditer(masked):
        line_start = masked.rfind("\n", 0, match.start()) + 1
        if _IN_CONDITION_RE.search(masked, line_start, match.start()):
            continue
        call_end = find_block_end(masked, match.end() - 1, "(", ")")
        if call_end is None:
            continue
        region_end = _enclosing_block_end(masked, call_end + 1)
        event = _event_re(match.group("var")).search(masked, call_end + 1, region_end)
        if event is not None and event.lastgroup == "use":
            spans.append((match.start("var"), call_end + 1))
    return spans


# ---------------------------------------------------------------------------
# Placeholder function bodies
# ---------------------------------------------------------------------------

_FUNC_HEAD_RE = re.compile(
    r"^[ \t]*(?:[A-Za-z_][\w \t*&:]{0,200}?[ \t*&])(?P<name>[A-Za-z_]\w*)[ \t]*"
    r"\([^;{}()]{0,400}\)[ \t]*(?:const[ \t]*)?\n?[ \t]*\{",
    re.MULTILINE,
)
_KEYWORDS = frozenset({"if", "else", "for", "while", "switch", "return", "sizeof", "do", "case"})
_PLACEHOLDER_STMT_RE = re.compile(
    r"(?:return(?:[ \t]+(?:\([\w \t*]+\)[ \t]*)?(?:0|-1|NULL|nullptr|false))?"
    r"|\(void\)[ \t]*\w+"
    r"|(?:abort|exit)[ \t]*\([ \t]*\w*[ \t]*\)"
    r"|assert[ \t]*\([ \t]*(?:0|false)\b[^;]*)",
)
_STUB_MARKER_RE = re.compile(
    r"\b(?:TODO|FIXME|XXX|stub(?:bed)?|unimplemented|not[ \t]+(?:yet[ \t]+)?implemented)\b",
    re.IGNORECASE,
)
_MAX_STUB_STATEMENTS = 3


def todo_stub_functions(text: str) -> list[Span]:
    """
    Find functions whose whole body is a placeholder plus an admission.

    A body qualifies when it has no nested block, holds at most a few
    statements that are all placeholders (bare returns of 0/-1/NULL/false,
    `(void)x`, `abort()`, `assert(0 ...)`) and carries a TODO-style marker
    in a comment or string.
    """

    masked = mask_source(text, detect_comment_syntax(Language.C))
    spans: list[Span] = []
    for match in _FUNC_HEAD_RE.finditer(masked):
        if match.group("name") in _KEYWORDS:
            continue
        open_index = match.end() - 1
        close_index = find_block_end(masked, open_index)
        if close_index is None:
            continue
        body = masked[open_index + 1 : close_index]
        if "{" in body:
            continue
        statements = [" ".join(stmt.split()) for stmt in body.split(";")]
        statements = [stmt for stmt in statements if stmt]
        if len(statements) > _MAX_STUB_STATEMENTS:
            continue
        if not all(_PLACEHOLDER_STMT_RE.fullmatch(stmt) for stmt in statements):
            continue
        if _STUB_MARKER_RE.search(text, open_index + 1, close_index) is None:
            continue
        spans.append(match.span("name"))
    return spans


ANALYZERS: Mapping[str, Analyzer] = MappingProxyType(
    {
        "c_unchecked_malloc": unchecked_allocations,
        "c_todo_stub_function": todo_stub_functions,
    }
)
