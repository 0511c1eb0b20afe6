from __future__ import annotations

from slopscan.languages.registry import Language, entry_points, testfile_globs
from slopscan.rules.base import MAX_SPAN, REMOVE_LINE, SLASH_CODE, Rule, dedupe, rule

JS = Language.JS
TS = Language.TYPESCRIPT

_CONSOLE_CALL = r"(?P<hit>\bconsole\.(?:log|debug|trace|dir|table))[ \t]*\("
_EMPTY_CATCH = r"(?P<hit>\bcatch\b)[ \t]*(?:\([^)\n]{0,100}\))?[ \t]*\{[ \t]*\}"


def builtin_js_rules() -> list[Rule]:
    tests = testfile_globs(JS)
    return [
        rule(
            "console_debugging",
            JS,
            SLASH_CODE + _CONSOLE_CALL,
            severity="medium",
            description="console.log debugging left in source.",
            exclude=dedupe(tests, entry_points(JS)),
            fix=REMOVE_LINE,
        ),
        rule(
            "js_debugger_statement",
            JS,
            r"^[ \t]*(?P<hit>debugger)[ \t]*;?[ \t]*$",
            severity="high",
            description="`debugger` statement pauses execution under devtools.",
            exclude=tests,
            fix=REMOVE_LINE,
        ),
        rule(
            "placeholder_throw_js",
            JS,
            r"(?P<hit>\bthrow[ \t]+new[ \t]+Error)[ \t]*\([ \t]*[\"'`]"
            rf"[^\"'`\n]{{0,{MAX_SPAN}}}?\b(?:TODO|FIXME|not[ \t]+(?:yet[ \t]+)?implemented|unimplemented)\b",
            severity="high",
            description="Error thrown as a stand-in for an implementation.",
            exclude=tests,
            ignore_case=True,
        ),
        rule(
            "empty_catch_js",
            JS,
            _EMPTY_CATCH,
            severity="high",
            description="Empty catch block swallows the exception.",
            exclude=tests,
        ),
        rule(
            "js_process_exit",
            JS,
            SLASH_CODE + r"(?P<hit>\bprocess\.exit)[ \t]*\(",
            severity="medium",
            description="process.exit() outside a CLI entry point skips pending I/O.",
            exclude=dedupe(tests, entry_points(JS)),
        ),
    ]


def builtin_typescript_rules() -> list[Rule]:
    tests = testfile_globs(TS)
    return [
        rule(
            "ts_console_debugging",
            TS,
            SLASH_CODE + _CONSOLE_CALL,
            severity="medium",
            description="console.log debugging left in source.",
            exclude=dedupe(tests, entry_points(TS)),
            fix=REMOVE_LINE,
        ),
        rule(
            "ts_any_type",
            TS,
            SLASH_CODE + r"(?P<hit>\bas[ \t]+any\b|:[ \t]*any\b)(?![\w$])",
            severity="low",
            description="`any` disables type checking for the value.",
            exclude=dedupe(tests, ("*.d.ts",)),
        ),
        rule(
            "ts_ts_ignore",
            TS,
            r"(?P<hit>//[ \t]*@ts-(?:ignore|nocheck))\b",
            severity="medium",
            description="@ts-ignore/@ts-nocheck silences the compiler.",
            exclude=tests,
        ),
        rule(
            "ts_empty_catch",
            TS,
            _EMPTY_CATCH,
            severity="high",
            description="Empty catch block swallows the exception.",
            exclude=tests,
        ),
    ]
