from __future__ import annotations

from slopscan.languages.registry import Language, entry_points, testfile_globs
from slopscan.rules.base import EXAMPLES, MAX_SPAN, REMOVE_LINE, SLASH_CODE, Rule, dedupe, rule

JAVA = Language.JAVA
KT = Language.KOTLIN
_JAVA_TESTS = testfile_globs(JAVA)
_KT_TESTS = testfile_globs(KT)

_INCOMPLETE = r"(?:TODO|FIXME|HACK|XXX|not[ \t]+(?:yet[ \t]+)?implemented)\b"
_CATCH_HEAD = rf"(?P<hit>\bcatch[ \t]*\([^)\n]{{0,{MAX_SPAN}}}\))"

# Suppression values that are routine and not worth reporting.
_ACCEPTED_SUPPRESSIONS = ("serial",)


def builtin_java_rules() -> list[Rule]:
    accepted = "|".join(_ACCEPTED_SUPPRESSIONS)
    return [
        rule(
            "placeholder_unsupported_java",
            JAVA,
            r"(?P<hit>\bthrow[ \t]+new[ \t]+UnsupportedOperationException)[ \t]*\(",
            severity="high",
            description="UnsupportedOperationException thrown as a stand-in for an implementation.",
            exclude=_JAVA_TESTS,
        ),
        rule(
            "java_sysout_debugging",
            JAVA,
            SLASH_CODE + r"(?P<hit>\bSystem\.(?:out|err)\.print(?:ln|f)?[ \t]*\()",
            severity="medium",
            description="System.out/System.err printing instead of a logger.",
            exclude=dedupe(_JAVA_TESTS, EXAMPLES),
            fix=REMOVE_LINE,
        ),
        rule(
            "java_stacktrace_debugging",
            JAVA,
            r"(?P<hit>\.printStackTrace[ \t]*\([ \t]*\))",
            severity="medium",
            description="printStackTrace() writes to stderr and bypasses logging.",
            exclude=_JAVA_TESTS,
            fix=REMOVE_LINE,
        ),
        rule(
            "java_throw_todo",
            JAVA,
            rf"(?P<hit>\bthrow[ \t]+new[ \t]+(?:Runtime|IllegalState|IllegalArgument)Exception)[ \t]*\([ \t]*\"[^\"\n]{{0,{MAX_SPAN}}}?\b{_INCOMPLETE}",
            severity="high",
            description="Exception message admits the code path is unfinished.",
            exclude=_JAVA_TESTS,
            ignore_case=True,
        ),
        rule(
            "java_return_null_todo",
            JAVA,
            rf"(?P<hit>\breturn[ \t]+null[ \t]*;)[ \t]*//[^\n]{{0,{MAX_SPAN}}}?\b(?:{_INCOMPLETE}|placeholder|stub)",
            severity="medium",
            description="`return null` marked as a placeholder.",
            exclude=_JAVA_TESTS,
            ignore_case=True,
        ),
        rule(
            "java_empty_catch",
            JAVA,
            _CATCH_HEAD + r"[ \t]*\{[ \t]*\}",
            severity="high",
            description="Empty catch block swallows the exception.",
            exclude=_JAVA_TESTS,
        ),
        rule(
            "java_catch_ignore",
            JAVA,
            _CATCH_HEAD
            + r"[ \t]*\{[ \t]*//[ \t]*(?:ignored?|suppress(?:ed)?|no-?op|intentional(?:ly)?|nothing[ \t]+to[ \t]+do)\b",
            severity="medium",
            description="catch block opens with a comment saying the exception is ignored.",
            exclude=_JAVA_TESTS,
            ignore_case=True,
        ),
        rule(
            "java_suppress_warnings",
            JAVA,
            r"^[ \t]*(?P<hit>@SuppressWarnings)[ \t]*\([ \t]*(?:value[ \t]*=[ \t]*)?\{?[ \t]*\""
            rf"(?!(?:{accepted})\")",
            severity="low",
            description="@SuppressWarnings hides compiler diagnostics.",
            exclude=_JAVA_TESTS,
        ),
        rule(
            "java_raw_type",
            JAVA,
            r"^[ \t]*(?:(?:private|protected|public|static|final)[ \t]+)*"
            r"(?P<hit>(?:List|ArrayList|LinkedList|Map|HashMap|TreeMap|Set|HashSet|TreeSet|Collection|Iterator|Iterable|Queue|Deque))"
            r"[ \t]+[a-z_]\w*[ \t]*[=;]",
            severity="low",
            description="Raw collection type without generic parameters.",
            exclude=_JAVA_TESTS,
        ),
        rule(
            "java_wildcard_catch",
            JAVA,
            r"(?P<hit>\bcatch[ \t]*\([ \t]*(?:final[ \t]+)?(?:java\.lang\.)?(?:Exception|Throwable|Error)[ \t]+\w+[ \t]*\))",
            severity="medium",
            description="Catching Exception/Throwable/Error hides unrelated failures.",
            exclude=_JAVA_TESTS,
            suppressed_by=("java_empty_catch", "java_catch_ignore"),
        ),
    ]


def builtin_kotlin_rules() -> list[Rule]:
    return [
        rule(
            "kotlin_println_debugging",
            KT,
            SLASH_CODE + r"(?P<hit>(?<![\w.])println[ \t]*\()",
            severity="medium",
            description="println() debug output instead of a logger.",
            exclude=dedupe(_KT_TESTS, EXAMPLES, entry_points(KT)),
            fix=REMOVE_LINE,
        ),
        rule(
            "kotlin_todo_call",
            KT,
            r"(?P<hit>(?<![\w.])TODO[ \t]*\()",
            severity="high",
            description="TODO() throws NotImplementedError at runtime.",
            exclude=_KT_TESTS,
        ),
        rule(
            "kotlin_fixme_comment",
            KT,
            r"^[ \t]*(?P<hit>//[ \t]*FIXME)\b",
            severity="low",
            description="FIXME comment marks known-broken code.",
            exclude=_KT_TESTS,
            ignore_case=True,
        ),
        rule(
            "kotlin_empty_catch",
            KT,
            r"(?P<hit>\bcatch[ \t]*\([ \t]*\w+[ \t]*:[ \t]*[\w.]+[ \t]*\))[ \t]*\{[ \t]*\}",
            severity="high",
            description="Empty catch block swallows the exception.",
            exclude=_KT_TESTS,
        ),
        rule(
            "kotlin_swallowed_error",
            KT,
            rf"(?P<hit>\brunCatching)[ \t]*\{{[^{{}}\n]{{0,{MAX_SPAN}}}\}}[ \t]*\.getOrNull[ \t]*\([ \t]*\)",
            severity="medium",
            description="runCatching { }.getOrNull() turns every failure into null.",
            exclude=_KT_TESTS,
        ),
        rule(
            "kotlin_suppress_annotation",
            KT,
            r"^[ \t]*(?P<hit>@(?:file:)?Suppress)[ \t]*\([ \t]*\"",
            severity="low",
            description="@Suppress hides compiler or lint diagnostics.",
            exclude=_KT_TESTS,
        ),
    ]
