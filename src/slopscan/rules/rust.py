from __future__ import annotations

from slopscan.languages.registry import Language, testfile_globs
from slopscan.rules.base import BENCHES, EXAMPLES, MAX_SPAN, REMOVE_LINE, SLASH_CODE, Rule, dedupe, rule

RS = Language.RUST
_TESTS = testfile_globs(RS)
_NON_PRODUCTION = dedupe(_TESTS, EXAMPLES, BENCHES)
_TESTS_AND_BENCHES = dedupe(_TESTS, BENCHES)


def builtin_rust_rules() -> list[Rule]:
    return [
        rule(
            "rust_debugging",
            RS,
            SLASH_CODE + r"(?P<hit>\b(?:e?println|dbg)![ \t]*\()",
            severity="medium",
            description="println!/eprintln!/dbg! debug output; use the log or tracing crates.",
            exclude=_TESTS,
            fix=REMOVE_LINE,
        ),
        rule(
            "placeholder_todo_rust",
            RS,
            SLASH_CODE + r"(?P<hit>\b(?:todo|unimplemented)![ \t]*\()",
            severity="high",
            description="todo!()/unimplemented!() placeholder panics at runtime.",
            exclude=_TESTS,
        ),
        rule(
            "placeholder_panic_todo_rust",
            RS,
            rf"(?P<hit>\bpanic![ \t]*\([ \t]*)\"[^\"\n]{{0,{MAX_SPAN}}}?\b(?:TODO|FIXME|not[ \t]+(?:yet[ \t]+)?implemented|implement)\b",
            severity="high",
            description="panic!() used as a placeholder for unimplemented code.",
            exclude=_TESTS,
            ignore_case=True,
        ),
        rule(
            "rust_bare_unwrap",
            RS,
            r"(?P<hit>\.unwrap[ \t]*\([ \t]*\))",
            severity="medium",
            description="unwrap() panics on None/Err; propagate with `?` or handle the case.",
            exclude=_NON_PRODUCTION,
        ),
        rule(
            "rust_log_debug",
            RS,
            r"(?P<hit>(?<![\w.])(?:log::)?(?:debug|trace)![ \t]*\()",
            severity="low",
            description="debug!/trace! logging left on a hot path.",
            exclude=_TESTS,
        ),
        rule(
            "rust_empty_match_arm",
            RS,
            r"(?P<hit>\bErr[ \t]*\([ \t]*\w+[ \t]*\))[ \t]*=>[ \t]*(?:\{[ \t]*\}|\([ \t]*\))",
            severity="high",
            description="Err arm of a match discards the error.",
            exclude=_TESTS,
        ),
        rule(
            "rust_unnecessary_clone",
            RS,
            r"(?P<hit>\.clone[ \t]*\([ \t]*\))",
            severity="low",
            description="clone() call; borrow instead when ownership is not needed.",
            exclude=_TESTS_AND_BENCHES,
        ),
        rule(
            "rust_unsafe_block",
            RS,
            r"(?P<hit>\bunsafe[ \t]*\{)",
            severity="medium",
            description="unsafe block; document the invariants that make it sound.",
            exclude=_TESTS_AND_BENCHES,
            known_limitation="Also matches `unsafe {` inside comments and strings.",
        ),
        rule(
            "rust_hardcoded_path",
            RS,
            r"(?P<hit>(?:\br#*)?\"/(?:home|Users|tmp|etc|usr|var|opt|root|srv|mnt)/[^\"\s]+)",
            severity="medium",
            description="Hardcoded absolute filesystem path.",
            exclude=_NON_PRODUCTION,
        ),
        rule(
            "rust_expect_production",
            RS,
            r"(?P<hit>\.expect[ \t]*\()[ \t]*[\"']",
            severity="low",
            description="expect() with a literal message still panics in production code.",
            exclude=dedupe(_NON_PRODUCTION, ("build.rs",)),
        ),
    ]
