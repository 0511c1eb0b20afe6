from __future__ import annotations

from slopscan.languages.registry import Language, entry_points, testfile_globs
from slopscan.rules.base import MAX_SPAN, REMOVE_LINE, SLASH_CODE, Rule, dedupe, rule

GO = Language.GO
_TESTS = testfile_globs(GO)
_TESTS_AND_MAIN = dedupe(_TESTS, entry_points(GO))

_PLACEHOLDER_MESSAGE = r"\b(?:TODO|FIXME|not[ \t]+(?:yet[ \t]+)?implemented|unimplemented|implement[ \t]+me)\b"


def builtin_go_rules() -> list[Rule]:
    return [
        rule(
            "placeholder_panic_go",
            GO,
            rf"(?P<hit>(?<![\w.])panic[ \t]*\([ \t]*)\"[^\"\n]{{0,{MAX_SPAN}}}?{_PLACEHOLDER_MESSAGE}",
            severity="high",
            description="panic() used as a placeholder for unimplemented code.",
            exclude=_TESTS,
            ignore_case=True,
        ),
        rule(
            "go_fmt_debugging",
            GO,
            SLASH_CODE + r"(?P<hit>\bfmt\.Print(?:ln|f)?[ \t]*\()",
            severity="medium",
            description="fmt.Print* debug output outside a command entry point.",
            exclude=_TESTS_AND_MAIN,
            fix=REMOVE_LINE,
        ),
        rule(
            "go_log_debugging",
            GO,
            SLASH_CODE + r"(?P<hit>(?<![\w.])log\.(?:Print|Fatal|Panic)(?:ln|f)?[ \t]*\()",
            severity="low",
            description="Standard library log package used instead of the structured logger.",
            exclude=_TESTS_AND_MAIN,
        ),
        rule(
            "go_spew_debugging",
            GO,
            SLASH_CODE
            + r"(?P<hit>\b(?:spew\.(?:Dump|Fdump|Sdump|Printf|Println|Print|Sprintf)|pp\.(?:Println|Printf|Print))[ \t]*\()",
            severity="medium",
            description="spew/pp pretty-printer left in from a debugging session.",
            exclude=_TESTS,
        ),
        rule(
            "go_empty_error_check",
            GO,
            r"(?P<hit>\bif[ \t]+err[ \t]*!=[ \t]*nil[ \t]*\{[ \t]*\})",
            severity="high",
            description="Error is checked but the branch does nothing.",
            exclude=_TESTS,
        ),
        rule(
            "go_discarded_error",
            GO,
            r"^[ \t]*(?P<hit>_[ \t]*=)[ \t]*[A-Za-z_][\w.]*(?:\[[^\]\n]{0,100}\])?[ \t]*\(",
            severity="medium",
            description="Return value (usually an error) assigned to the blank identifier.",
            exclude=_TESTS,
        ),
        rule(
            "go_bare_os_exit",
            GO,
            SLASH_CODE + r"(?P<hit>\bos\.Exit[ \t]*\()",
            severity="medium",
            description="os.Exit outside main skips deferred cleanup.",
            exclude=_TESTS_AND_MAIN,
        ),
        rule(
            "go_empty_interface_param",
            GO,
            rf"(?P<hit>\bfunc\b)[^\n{{]{{0,{MAX_SPAN}}}?\([^)\n]{{0,{MAX_SPAN}}}?\binterface[ \t]*\{{[ \t]*\}}",
            severity="low",
            description="Function parameter typed as interface{}; prefer a concrete type or generics.",
            exclude=_TESTS,
        ),
        rule(
            "go_todo_empty_func",
            GO,
            r"^[ \t]*(?P<hit>func\b)[^{\n]{0,300}\{[ \t]*//[ \t]*(?:TODO|FIXME|HACK|XXX)\b",
            severity="high",
            description="Function body starts with a TODO comment and nothing else.",
            exclude=_TESTS,
            ignore_case=True,
        ),
        rule(
            "go_unchecked_type_assertion",
            GO,
            rf"^[ \t]*[A-Za-z_]\w*[ \t]*:?=(?!=)[ \t]*[^\n]{{1,{MAX_SPAN}}}?(?P<hit>\.\([ \t]*\*?(?:[a-z_]\w*\.)?[A-Z]\w*[ \t]*\))",
            severity="medium",
            description="Single-value type assertion panics when the dynamic type differs; use the comma-ok form.",
            exclude=_TESTS,
            known_limitation="Assertions to builtin lower-case types (e.g. `.(string)`) are not flagged.",
        ),
        rule(
            "go_panic_recoverable",
            GO,
            SLASH_CODE
            + r"(?P<hit>\bpanic[ \t]*\([ \t]*)"
            r"(?:fmt\.Sprintf[ \t]*\(|errors\.New[ \t]*\(|\""
            rf"(?![^\"\n]{{0,{MAX_SPAN}}}?(?i:{_PLACEHOLDER_MESSAGE}))"
            rf"[^\"\n]{{0,{MAX_SPAN}}}?\b(?i:invalid|unknown|cannot|can't|missing|unexpected|unsupported)\b)",
            severity="medium",
            description="panic() for a recoverable condition; return an error instead.",
            exclude=_TESTS,
            suppressed_by=("placeholder_panic_go",),
        ),
        rule(
            "go_error_string_capitalized",
            GO,
            r"(?P<hit>\b(?:errors\.New|fmt\.Errorf)[ \t]*\()[ \t]*\"[A-Z][a-z]",
            severity="low",
            description="Error strings should not be capitalized.",
            exclude=_TESTS,
        ),
        rule(
            "go_defer_close_no_error",
            GO,
            r"^[ \t]*(?P<hit>defer[ \t]+[\w.]+\.Close[ \t]*\([ \t]*\))",
            severity="low",
            description="Deferred Close() discards its error.",
            exclude=_TESTS,
        ),
        rule(
            "go_weak_random",
            GO,
            SLASH_CODE + r"(?P<hit>\brand\.New[ \t]*\([ \t]*rand\.NewSource[ \t]*\()",
            severity="medium",
            description="math/rand source; use crypto/rand for anything security related.",
            exclude=_TESTS,
        ),
        rule(
            "go_unused_append",
            GO,
            r"^[ \t]*(?P<hit>append[ \t]*\()",
            severity="critical",
            description="append() result is discarded, so the slice is never updated.",
            exclude=_TESTS,
        ),
    ]
