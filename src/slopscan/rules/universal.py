from __future__ import annotations

from slopscan.languages.registry import all_testfile_globs
from slopscan.rules.base import EXAMPLES, UNIVERSAL, Rule, dedupe, rule

_SECRET_KEY = (
    r"api[_-]?key|secret(?:[_-]?key)?|client[_-]?secret|password|passwd"
    r"|auth[_-]?token|access[_-]?token|private[_-]?key"
)


def builtin_universal_rules() -> list[Rule]:
    tests = all_testfile_globs()
    return [
        rule(
            "hardcoded_secrets",
            UNIVERSAL,
            rf"(?P<hit>\b(?:{_SECRET_KEY})\b)[\"']?[ \t]*(?::=|=>|[:=])[ \t]*[\"'][^\"'\s]{{8,}}[\"']",
            severity="critical",
            description="Credential literal assigned in source.",
            exclude=dedupe(tests, EXAMPLES, ("*.example", "*.sample")),
            ignore_case=True,
        ),
        rule(
            "placeholder_text",
            UNIVERSAL,
            r"(?P<hit>\blorem[ \t]+ipsum\b|\byour[_-](?:api[_-]?key|token|password|secret)[_-]here\b"
            r"|\breplace[_-]?me\b|\bchangeme\b)",
            severity="low",
            description="Placeholder text left where a real value belongs.",
            exclude=dedupe(tests, EXAMPLES, ("*.example", "*.sample")),
            ignore_case=True,
        ),
        rule(
            "temporary_hack_comment",
            UNIVERSAL,
            r"(?:#|//|/\*)[ \t]*(?P<hit>(?i:HACK|XXX|KLUDGE))\b",
            severity="low",
            description="Comment admits a temporary hack.",
            exclude=tests,
        ),
        rule(
            "lint_suppression",
            UNIVERSAL,
            r"(?P<hit>\beslint-disable(?:-next-line|-line)?\b|#[ \t]*noqa\b|#[ \t]*type:[ \t]*ignore\b"
            r"|//[ \t]*nolint\b|#!?\[allow\()",
            severity="low",
            description="Inline lint suppression hides a diagnostic.",
            exclude=tests,
        ),
    ]
