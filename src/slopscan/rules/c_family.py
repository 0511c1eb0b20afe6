from __future__ import annotations

from slopscan.languages.registry import Language, entry_points, testfile_globs
from slopscan.rules.base import EXAMPLES, MAX_SPAN, REMOVE_LINE, SLASH_CODE, VENDOR, Rule, dedupe, rule

C = Language.C
CPP = Language.CPP
_TESTS = testfile_globs(C, CPP)
_TESTS_AND_VENDOR = dedupe(_TESTS, VENDOR)

_STUB_MARKER = r"\b(?:TODO|FIXME|not[ \t]+(?:yet[ \t]+)?implemented|unimplemented|implement[ \t]+me)\b"
_CAST_TYPE = r"\([ \t]*(?:const[ \t]+)?(?:(?:unsigned|signed)[ \t]+)?[A-Za-z_]\w*[ \t]*\*+[ \t]*\)"


def builtin_c_rules() -> list[Rule]:
    return [
        rule(
            "c_printf_debugging",
            C,
            r"(?P<hit>(?<![\w.])(?:printf[ \t]*\(|fprintf[ \t]*\([ \t]*std(?:err|out)[ \t]*,))[ \t]*[\"']"
            rf"(?:[^\"'\n]{{0,{MAX_SPAN}}}?\b(?:DEBUG|TRACE)\b|[ \t>*-]{{0,10}}(?:HERE|XXX)\b)",
            severity="medium",
            description="printf debugging output tagged DEBUG/TRACE/HERE.",
            exclude=_TESTS,
            ignore_case=True,
            fix=REMOVE_LINE,
        ),
        rule(
            "c_ifdef_debug_block",
            C,
            r"^[ \t]*(?P<hit>#[ \t]*(?:ifdef[ \t]+_?DEBUG\b|if[ \t]+(?:defined[ \t]*\(?[ \t]*)?_?DEBUG\b|if[ \t]+0\b))",
            severity="low",
            description="Conditionally compiled debug or dead code block.",
            exclude=_TESTS,
        ),
        rule(
            "c_placeholder_todo",
            C,
            rf"(?P<hit>\bassert[ \t]*\()[ \t]*(?:false|0)[ \t]*&&[ \t]*\"[^\"\n]{{0,{MAX_SPAN}}}?{_STUB_MARKER}",
            severity="high",
            description="assert(0 && \"not implemented\") placeholder.",
            exclude=_TESTS,
            ignore_case=True,
        ),
        rule(
            "c_pragma_warning_disable",
            C,
            r"^[ \t]*(?P<hit>#[ \t]*pragma[ \t]+"
            r"(?:warning[ \t]*\([ \t]*disable|(?:GCC|clang)[ \t]+diagnostic[ \t]+ignored))",
            severity="medium",
            description="Compiler warnings disabled with a pragma.",
            exclude=_TESTS_AND_VENDOR,
        ),
        rule(
            "c_goto_usage",
            C,
            None,
            severity="low",
            description="goto usage.",
            disabled_reason="goto-based cleanup chains are idiomatic C error handling.",
        ),
        rule(
            "c_hardcoded_credential_path",
            C,
            r"(?P<hit>[\"'](?:/etc/(?:shadow|gshadow|passwd|sudoers|ssl/private)\b"
            rf"|[^\"'\n]{{0,{MAX_SPAN}}}?/\.ssh/(?:id_(?:rsa|dsa|ecdsa|ed25519)|authorized_keys)\b))",
            severity="critical",
            description="Path to a credential store or private key.",
            exclude=_TESTS,
        ),
        rule(
            "c_magic_number_cast",
            C,
            rf"(?P<hit>{_CAST_TYPE})[ \t]*0[xX][0-9A-Fa-f]{{4,}}\b",
            severity="medium",
            description="Magic address cast to a pointer.",
            exclude=_TESTS,
        ),
        rule(
            "c_sprintf_usage",
            C,
            r"(?P<hit>(?<![\w.>])sprintf[ \t]*\()",
            severity="high",
            description="sprintf() has no bounds check; use snprintf().",
            exclude=_TESTS_AND_VENDOR,
        ),
        rule(
            "c_strcpy_usage",
            C,
            r"(?P<hit>(?<![\w.>])(?:strcpy|strcat)[ \t]*\()",
            severity="high",
            description="strcpy()/strcat() have no bounds check.",
            exclude=_TESTS_AND_VENDOR,
        ),
        rule(
            "c_unsafe_atoi",
            C,
            r"(?P<hit>(?<![\w.>])ato(?:i|l|ll|f)[ \t]*\()",
            severity="medium",
            description="atoi()-family conversions cannot report errors; use strtol().",
            exclude=_TESTS_AND_VENDOR,
        ),
        rule(
            "c_hardcoded_ip",
            C,
            r"(?P<hit>[\"'](?:127\.0\.0\.1|0\.0\.0\.0|localhost)(?::\d{1,5})?[\"'])",
            severity="low",
            description="Hardcoded loopback or wildcard address.",
            exclude=dedupe(_TESTS, EXAMPLES),
        ),
        rule(
            "c_hardcoded_debug_path",
            C,
            r"(?P<hit>[\"']/tmp/[^\"'\s/][^\"'\s]*[\"'])",
            severity="low",
            description="Hardcoded /tmp file, usually a debug dump.",
            exclude=_TESTS,
        ),
        rule(
            "c_return_avoid_warning",
            C,
            r"(?P<hit>\breturn\b[^;\n]{0,100}|=[^;=\n]{0,100});[ \t]*(?:/\*|//)"
            rf"[^\n]{{0,{MAX_SPAN}}}?\b(?:avoid|suppress|silence|shut[ \t]+up|quiet)\b[^\n]{{0,100}}?\bwarnings?\b",
            severity="low",
            description="Statement exists only to silence a compiler warning.",
            exclude=_TESTS,
            ignore_case=True,
        ),
        rule(
            "c_debug_fprintf_conditional",
            C,
            r"(?P<hit>\bif[ \t]*\([ \t]*!?[ \t]*\w*(?:debug|verbose|trace)\w*[ \t]*\))[ \t]*\{?[ \t]*f?printf[ \t]*\(",
            severity="low",
            description="Runtime debug flag guarding printf output.",
            exclude=_TESTS,
            ignore_case=True,
        ),
        rule(
            "c_unchecked_malloc",
            C,
            None,
            severity="medium",
            description="Allocation result is used before it is checked for NULL.",
            exclude=_TESTS,
            requires_multi_pass=True,
        ),
        rule(
            "c_todo_stub_function",
            C,
            None,
            severity="high",
            description="Function body is only a placeholder statement and a TODO.",
            exclude=_TESTS,
            requires_multi_pass=True,
        ),
    ]


def builtin_cpp_rules() -> list[Rule]:
    cpp_entry = entry_points(CPP)
    return [
        rule(
            "cpp_cout_debugging",
            CPP,
            SLASH_CODE + r"(?P<hit>\bstd::(?:cout|cerr|clog)[ \t]*<<)",
            severity="low",
            description="std::cout/std::cerr debug output instead of a logger.",
            exclude=dedupe(_TESTS, EXAMPLES, cpp_entry),
            fix=REMOVE_LINE,
        ),
        rule(
            "cpp_throw_not_implemented",
            CPP,
            r"(?P<hit>\bthrow[ \t]+(?:std::)?(?:runtime_error|logic_error|domain_error|invalid_argument))"
            rf"[ \t]*\([ \t]*\"[^\"\n]{{0,{MAX_SPAN}}}?(?:{_STUB_MARKER}|\bimplement\b)",
            severity="high",
            description="Exception thrown as a stand-in for an implementation.",
            exclude=_TESTS,
            ignore_case=True,
        ),
        rule(
            "cpp_empty_catch",
            CPP,
            rf"(?P<hit>\bcatch[ \t]*\([^)\n]{{0,{MAX_SPAN}}}\))[ \t]*\{{[ \t]*\}}",
            severity="high",
            description="Empty catch block swallows the exception.",
            exclude=_TESTS,
        ),
        rule(
            "cpp_raw_new_delete",
            CPP,
            r"(?:(?:[=(,]|\breturn\b)[ \t]*(?P<hit>new)[ \t]+[A-Za-z_][\w:]*(?:<[^>\n]{0,100}>)?[ \t]*[(\[{;]"
            r"|^[ \t]*(?:delete)(?:[ \t]*\[[ \t]*\])?[ \t]+[A-Za-z_*(])",
            severity="medium",
            description="Manual new/delete; prefer std::make_unique or containers.",
            exclude=dedupe(_TESTS, VENDOR),
        ),
        rule(
            "cpp_c_style_cast",
            CPP,
            rf"(?P<hit>{_CAST_TYPE})[ \t]*[A-Za-z_(&]",
            severity="low",
            description="C-style pointer cast; use static_cast/reinterpret_cast.",
            exclude=_TESTS,
        ),
        rule(
            "cpp_fprintf_stderr",
            CPP,
            r"(?P<hit>\bfprintf[ \t]*\([ \t]*stderr[ \t]*,)",
            severity="low",
            description="fprintf(stderr, ...) debug output in C++ code.",
            exclude=dedupe(_TESTS, EXAMPLES, cpp_entry),
        ),
    ]
