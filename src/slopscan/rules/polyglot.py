from __future__ import annotations

from slopscan.languages.registry import Language, entry_points, testfile_globs
from slopscan.rules.base import HASH_CODE, MAX_SPAN, REMOVE_LINE, SLASH_CODE, Rule, dedupe, rule

RB = Language.RUBY
PHP = Language.PHP


def builtin_ruby_rules() -> list[Rule]:
    tests = testfile_globs(RB)
    return [
        rule(
            "ruby_debugger",
            RB,
            HASH_CODE + r"(?P<hit>\b(?:binding\.(?:pry|irb)|byebug|debugger))\b",
            severity="high",
            description="Interactive debugger breakpoint left in source.",
            exclude=tests,
            fix=REMOVE_LINE,
        ),
        rule(
            "ruby_puts_debugging",
            RB,
            r"^[ \t]*(?P<hit>(?:puts|pp|p))[ \t(]+(?![ \t]*[\"'])\S",
            severity="medium",
            description="puts/p/pp of a value, usually a debugging leftover.",
            exclude=dedupe(tests, entry_points(RB)),
        ),
        rule(
            "ruby_raise_not_implemented",
            RB,
            r"(?P<hit>\braise[ \t(]+NotImplementedError)\b"
            rf"|(?:\braise[ \t(]+(?:RuntimeError[ \t]*,[ \t]*)?[\"'])[^\"'\n]{{0,{MAX_SPAN}}}?(?i:\b(?:TODO|not[ \t]+implemented)\b)",
            severity="high",
            description="Method raises a placeholder error instead of doing its job.",
            exclude=tests,
        ),
        rule(
            "ruby_rescue_nil",
            RB,
            r"(?P<hit>\brescue[ \t]+nil)\b",
            severity="high",
            description="`rescue nil` turns every exception into nil.",
            exclude=tests,
        ),
    ]


def builtin_php_rules() -> list[Rule]:
    tests = testfile_globs(PHP)
    return [
        rule(
            "php_debug_output",
            PHP,
            SLASH_CODE + r"(?P<hit>(?<![\w>$:])(?:var_dump|print_r|var_export|dd|dump))[ \t]*\(",
            severity="medium",
            description="var_dump/print_r debug output.",
            exclude=tests,
            fix=REMOVE_LINE,
        ),
        rule(
            "php_die_exit",
            PHP,
            SLASH_CODE + r"(?P<hit>(?<![\w>$:])(?:die|exit))[ \t]*(?:\([ \t]*)?(?:'[^'\n]*'|\"[^\"\n]*\"|0\b)",
            severity="low",
            description="die()/exit() with a message instead of an exception.",
            exclude=dedupe(tests, entry_points(PHP)),
        ),
        rule(
            "php_eval",
            PHP,
            SLASH_CODE + r"(?P<hit>(?<![\w>$:])eval)[ \t]*\(",
            severity="high",
            description="eval() runs arbitrary strings as PHP code.",
            exclude=tests,
        ),
        rule(
            "php_error_suppression",
            PHP,
            r"(?:^|[=(,;!]|\breturn\b)[ \t]*(?P<hit>@)[ \t]*\$?[A-Za-z_]\w*[ \t]*\(",
            severity="medium",
            description="@ operator hides warnings and errors from the call.",
            exclude=tests,
        ),
    ]
