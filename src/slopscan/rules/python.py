from __future__ import annotations

from slopscan.engine.types import FixDescriptor
from slopscan.languages.registry import Language, entry_points, testfile_globs
from slopscan.rules.base import HASH_CODE, MAX_SPAN, REMOVE_LINE, Rule, dedupe, rule

PY = Language.PYTHON
_TESTS = testfile_globs(PY)

# `def name(args) -> ann:` with one level of nested parens in the arguments.
_DEF_HEAD = (
    r"^[ \t]*(?P<hit>(?:async[ \t]+)?def[ \t]+\w+)[ \t]*"
    r"\((?:[^()]|\([^()\n]{0,100}\)){0,300}\)"
    r"[ \t]*(?:->[ \t]*[^:\n]{1,100})?:"
)
# Body is a single statement, either on the `def` line or the next line.
_SOLE_STATEMENT = r"[ \t]*(?:#[^\n]*(?=\n))?(?:\n[ \t]+)?{stmt}[ \t]*(?:#[^\n]*)?$"


def _def_with_sole(stmt: str) -> str:
    return _DEF_HEAD + _SOLE_STATEMENT.format(stmt=stmt)


def builtin_python_rules() -> list[Rule]:
    return [
        rule(
            "python_debugging",
            PY,
            HASH_CODE
            + r"(?P<hit>(?<![\w.])breakpoint[ \t]*\([ \t]*\)"
            r"|\b(?:i?pdb|pudb)\.set_trace[ \t]*\("
            r"|(?<![\w.])import[ \t]+(?:i?pdb|pudb)\b"
            r"|(?<![\w.])from[ \t]+(?:i?pdb|pudb)[ \t]+import\b)",
            severity="high",
            description="Debugger hook (pdb/ipdb/breakpoint) left in source.",
            exclude=_TESTS,
            fix=REMOVE_LINE,
        ),
        rule(
            "placeholder_not_implemented_py",
            PY,
            r"^[ \t]*(?P<hit>raise[ \t]+NotImplementedError)\b",
            severity="high",
            description="Function raises NotImplementedError instead of doing its job.",
            exclude=_TESTS,
        ),
        rule(
            "placeholder_pass_only_py",
            PY,
            _def_with_sole(r"pass"),
            severity="high",
            description="Function body is only `pass`.",
            exclude=_TESTS,
            scope="text",
        ),
        rule(
            "placeholder_ellipsis_py",
            PY,
            _def_with_sole(r"\.\.\."),
            severity="medium",
            description="Function body is only `...` outside a stub file.",
            exclude=dedupe(_TESTS, ("*.pyi",)),
            scope="text",
        ),
        rule(
            "empty_except_py",
            PY,
            r"^[ \t]*(?P<hit>except\b[^:\n]{0,200}):" + _SOLE_STATEMENT.format(stmt="pass"),
            severity="high",
            description="Exception handler silently discards the error with `pass`.",
            exclude=_TESTS,
            scope="text",
        ),
        rule(
            "mutable_globals_py",
            PY,
            r"^(?P<hit>[A-Z][A-Z0-9_]*)[ \t]*(?::[^=\n]{1,100})?=[ \t]*"
            r"(?:\[[ \t]*\]|list[ \t]*\([ \t]*\))[ \t]*(?:#[^\n]*)?$",
            severity="medium",
            description="Module-level constant-style name bound to an empty mutable list.",
            exclude=dedupe(_TESTS, ("constants.py", "settings.py", "config.py", "defaults.py")),
        ),
        rule(
            "python_bare_except",
            PY,
            r"^(?P<indent>[ \t]*)(?P<hit>except)[ \t]*:",
            severity="medium",
            description="Bare `except:` also catches SystemExit and KeyboardInterrupt.",
            exclude=_TESTS,
            fix=FixDescriptor(kind="replace", replacement=r"\g<indent>except Exception:"),
            suppressed_by=("empty_except_py",),
        ),
        rule(
            "python_eval_exec",
            PY,
            HASH_CODE + r"(?P<hit>(?<![\w.])(?:eval|exec)[ \t]*\()",
            severity="high",
            description="Dynamic code execution with eval()/exec().",
            exclude=_TESTS,
        ),
        rule(
            "python_os_system",
            PY,
            HASH_CODE + r"(?P<hit>\bos\.(?:system|popen)[ \t]*\()",
            severity="high",
            description="Shell command run through os.system(); prefer subprocess with an argument list.",
            exclude=_TESTS,
        ),
        rule(
            "python_chmod_777",
            PY,
            rf"(?P<hit>\bos\.chmod[ \t]*\()[^\n]{{0,{MAX_SPAN}}}?,[ \t]*0o?777\b",
            severity="high",
            description="World-writable permissions (0o777).",
            exclude=_TESTS,
        ),
        rule(
            "python_hardcoded_path",
            PY,
            HASH_CODE + r"(?P<hit>[\"'](?:/home|/Users)/[A-Za-z0-9_.-]+)",
            severity="medium",
            description="Hardcoded path into a user's home directory.",
            exclude=_TESTS,
        ),
        rule(
            "python_logging_debug",
            PY,
            rf"(?P<hit>\blogging\.basicConfig[ \t]*\()[^\n]{{0,{MAX_SPAN}}}?"
            r"\blevel[ \t]*=[ \t]*(?:logging\.DEBUG\b|[\"']DEBUG[\"']|10\b)",
            severity="low",
            description="Root logger configured at DEBUG level.",
            exclude=dedupe(_TESTS, entry_points(PY)),
        ),
        rule(
            "python_os_environ_debug",
            PY,
            r"(?P<hit>\bprint[ \t]*\([ \t]*(?:os\.environ|sys\.argv)[ \t]*[),])",
            severity="high",
            description="Printing the whole environment or argv can leak secrets.",
            exclude=_TESTS,
        ),
        rule(
            "python_shell_injection",
            PY,
            r"(?P<hit>\bsubprocess\.(?:call|run|Popen|check_call|check_output)[ \t]*\()"
            r"[^\n]{0,300}?\bshell[ \t]*=[ \t]*True\b",
            severity="high",
            description="subprocess call with shell=True is open to shell injection.",
            exclude=_TESTS,
            known_limitation="Only detects `shell=True` on the same line as the call.",
        ),
    ]
