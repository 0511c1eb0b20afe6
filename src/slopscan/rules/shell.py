from __future__ import annotations

from slopscan.languages.registry import Language, testfile_globs
from slopscan.rules.base import HASH_CODE, MAX_SPAN, REMOVE_LINE, Rule, rule

SH = Language.SHELL
_TESTS = testfile_globs(SH)

# Commands that take file operands; an unquoted variable there is word-split.
_FILE_COMMANDS = ("rm", "cp", "mv", "chmod", "chown", "cd", "mkdir", "rmdir", "ln", "touch", "cat", "tar")


def builtin_shell_rules() -> list[Rule]:
    file_commands = "|".join(_FILE_COMMANDS)
    return [
        rule(
            "shell_debugging",
            SH,
            r"^[ \t]*(?P<hit>set[ \t]+(?:-[A-Za-z]*[xv][A-Za-z]*|-o[ \t]+(?:xtrace|verbose)))\b",
            severity="medium",
            description="Shell tracing (set -x / set -v) left enabled.",
            exclude=_TESTS,
            fix=REMOVE_LINE,
        ),
        rule(
            "shell_echo_debug",
            SH,
            r"^[ \t]*(?P<hit>echo)[ \t]+(?:-[neE]+[ \t]+)?[\"']?(?:(?i:DEBUG|TRACE)|HERE|XXX)\b",
            severity="low",
            description="echo debug marker left in a script.",
            exclude=_TESTS,
            fix=REMOVE_LINE,
        ),
        rule(
            "shell_placeholder_todo",
            SH,
            r"^[ \t]*(?P<hit>echo|printf|:)[ \t]+[\"']"
            rf"[^\"'\n]{{0,{MAX_SPAN}}}?\b(?:TODO|FIXME|not[ \t]+(?:yet[ \t]+)?implemented)\b",
            severity="high",
            description="Script prints a placeholder instead of doing the work.",
            exclude=_TESTS,
            ignore_case=True,
        ),
        rule(
            "shell_error_silencing",
            SH,
            HASH_CODE + r"(?P<hit>\|\|[ \t]*true)\b",
            severity="low",
            description="`|| true` hides every failure of the command.",
            exclude=_TESTS,
        ),
        rule(
            "shell_empty_trap",
            SH,
            r"(?P<hit>\btrap[ \t]+(?:''|\"\"))[ \t]+\w",
            severity="medium",
            description="Empty trap ignores the signal entirely.",
            exclude=_TESTS,
        ),
        rule(
            "shell_hardcoded_path",
            SH,
            HASH_CODE + r"(?P<hit>[\"'](?:/home|/Users)/[^/\"'\s]+)",
            severity="medium",
            description="Hardcoded path into a user's home directory.",
            exclude=_TESTS,
        ),
        rule(
            "shell_chmod_777",
            SH,
            r"(?P<hit>\bchmod[ \t]+(?:-[A-Za-z]+[ \t]+)*(?:0?777|a\+rwx))\b",
            severity="high",
            description="World-writable permissions.",
            exclude=_TESTS,
        ),
        rule(
            "shell_curl_pipe_bash",
            SH,
            r"(?P<hit>\b(?:curl|wget)\b)[^|\n]{0,300}\|[ \t]*(?:sudo[ \t]+)?(?:ba|z|da|k)?sh\b",
            severity="critical",
            description="Remote script piped straight into a shell.",
            exclude=_TESTS,
        ),
        rule(
            "shell_unquoted_variable",
            SH,
            rf"^[ \t]*(?:{file_commands})\b(?:[ \t]+-[A-Za-z-]+)*[ \t]+(?:[^\"'\s$]+[ \t]+){{0,10}}"
            r"(?P<hit>\$\{?[A-Za-z_]\w*)",
            severity="medium",
            description="Unquoted variable passed to a file command is subject to word splitting.",
            exclude=_TESTS,
        ),
        rule(
            "shell_eval_usage",
            SH,
            HASH_CODE + r"(?P<hit>(?<![\w.-])eval)[ \t]+\S",
            severity="high",
            description="eval runs arbitrary strings as shell code.",
            exclude=_TESTS,
        ),
    ]
