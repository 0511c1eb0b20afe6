from __future__ import annotations

import pytest
from helpers import excluded, get_rule, hits, rule_names, scan


@pytest.mark.parametrize(
    "line",
    ["import pdb", "import ipdb", "breakpoint()", "pdb.set_trace()", "from pudb import set_trace"],
)
def test_python_debugging_matches_debugger_hooks(line: str) -> None:
    assert hits("python_debugging", line)


@pytest.mark.parametrize("line", ['print("hello world")', "def print_report():", "# import pdb"])
def test_python_debugging_ignores_ordinary_code(line: str) -> None:
    assert not hits("python_debugging", line)


def test_python_debugging_excludes_test_files() -> None:
    assert excluded("python_debugging", "test_main.py")
    assert excluded("python_debugging", "main_test.py")
    assert excluded("python_debugging", "conftest.py")
    assert not excluded("python_debugging", "src/app/main.py")


def test_placeholder_not_implemented_py() -> None:
    assert hits("placeholder_not_implemented_py", "raise NotImplementedError")
    assert hits("placeholder_not_implemented_py", 'raise NotImplementedError("not yet")')
    assert not hits("placeholder_not_implemented_py", "except NotImplementedError:")
    assert excluded("placeholder_not_implemented_py", "src/tests/unit.py")


def test_placeholder_pass_only_py() -> None:
    assert hits("placeholder_pass_only_py", "def foo(): pass")
    assert hits("placeholder_pass_only_py", "def foo():\n    pass")
    assert hits("placeholder_pass_only_py", "async def fetch(url: str) -> bytes:\n    pass")
    assert not hits("placeholder_pass_only_py", "def foo():\n    return 42")


def test_placeholder_ellipsis_py_skips_stub_files() -> None:
    assert hits("placeholder_ellipsis_py", "def foo(): ...")
    assert hits("placeholder_ellipsis_py", "def foo():\n    ...")
    assert not hits("placeholder_ellipsis_py", "def foo():\n    return 42")
    assert excluded("placeholder_ellipsis_py", "module.pyi")
    assert excluded("placeholder_ellipsis_py", "main_test.py")


def test_empty_except_py() -> None:
    assert hits("empty_except_py", "except Exception: pass")
    assert hits("empty_except_py", "except ValueError:\n    pass")
    assert not hits("empty_except_py", "except Exception:\n    logger.error(e)")


@pytest.mark.parametrize("line", ["CACHE = []", "ITEMS = list()", "HANDLERS: list[str] = []"])
def test_mutable_globals_py_matches_empty_lists(line: str) -> None:
    assert hits("mutable_globals_py", line)


@pytest.mark.parametrize("line", ["REGISTRY = {}", "CONFIG = dict()", "SEEN = set()", "items = []", 'NAME = "hello"'])
def test_mutable_globals_py_ignores_other_bindings(line: str) -> None:
    assert not hits("mutable_globals_py", line)


def test_mutable_globals_py_excludes_settings_modules() -> None:
    for name in ("constants.py", "settings.py", "config.py", "defaults.py", "pkg/settings.py"):
        assert excluded("mutable_globals_py", name)
    assert not excluded("mutable_globals_py", "pkg/state.py")


@pytest.mark.parametrize("line", ["except:", "    except:", "except: "])
def test_python_bare_except_matches(line: str) -> None:
    assert hits("python_bare_except", line)


@pytest.mark.parametrize(
    "line",
    ["except ValueError:", "except Exception as e:", "except (TypeError, ValueError):", "except KeyError:"],
)
def test_python_bare_except_ignores_typed_handlers(line: str) -> None:
    assert not hits("python_bare_except", line)


def test_python_bare_except_fix_keeps_indentation() -> None:
    bare = get_rule("python_bare_except")
    assert bare.fix is not None
    assert bare.fix.kind == "replace"
    assert bare.pattern is not None
    found = bare.pattern.search("    except:")
    assert found is not None
    assert found.expand(bare.fix.replacement or "") == "    except Exception:"


def test_bare_except_with_pass_reports_only_empty_except() -> None:
    findings = scan("src/app.py", "try:\n    run()\nexcept: pass\n")
    assert rule_names(findings) == {"empty_except_py"}


def test_python_eval_exec() -> None:
    assert hits("python_eval_exec", "result = eval(user_input)")
    assert hits("python_eval_exec", "exec(compile(source, name, 'exec'))")
    assert not hits("python_eval_exec", "evaluate(expression)")
    assert not hits("python_eval_exec", "execute(command)")
    assert not hits("python_eval_exec", '"Do not use eval"')
    assert not hits("python_eval_exec", "# result = eval(user_input)")
    assert not hits("python_eval_exec", "  # cls could be anything, even eval().")


def test_python_os_system() -> None:
    assert hits("python_os_system", 'os.system("ls -la")')
    assert hits("python_os_system", "os.system(cmd)")
    assert not hits("python_os_system", '# os.system("rsync /data host")')
    assert not hits("python_os_system", "# use os.system for commands")
    assert not hits("python_os_system", 'os.path.exists("/tmp")')


def test_python_chmod_777() -> None:
    assert hits("python_chmod_777", 'os.chmod("/tmp/file", 0o777)')
    assert hits("python_chmod_777", "os.chmod(path, 0o777)")
    assert not hits("python_chmod_777", "os.chmod(path, 0o755)")
    assert not hits("python_chmod_777", "os.chmod(path, 0o644)")


def test_python_hardcoded_path() -> None:
    assert hits("python_hardcoded_path", 'path = "/home/johndoe/config"')
    assert hits("python_hardcoded_path", "path = '/Users/johndoe/Documents/'")
    assert hits("python_hardcoded_path", 'f = "/home/admin/data/"')
    assert not hits("python_hardcoded_path", '"/home/"')
    assert not hits("python_hardcoded_path", '"config/settings.py"')
    assert not hits("python_hardcoded_path", '"/tmp/cache"')
    assert not hits("python_hardcoded_path", "# Example: '/home/media/media.lawrence.com/'")
    assert not hits("python_hardcoded_path", '# path = "/Users/johndoe/data"')


def test_python_logging_debug() -> None:
    assert hits("python_logging_debug", "logging.basicConfig(level=logging.DEBUG)")
    assert hits("python_logging_debug", 'logging.basicConfig(format="%(message)s", level=logging.DEBUG)')
    assert not hits("python_logging_debug", "logging.basicConfig(level=logging.INFO)")
    assert not hits("python_logging_debug", "logging.basicConfig(level=logging.WARNING)")
    assert not hits("python_logging_debug", 'logging.debug("some message")')
    assert excluded("python_logging_debug", "pkg/__main__.py")


def test_python_os_environ_debug() -> None:
    assert hits("python_os_environ_debug", "print(os.environ)")
    assert hits("python_os_environ_debug", "print( os.environ)")
    assert hits("python_os_environ_debug", "print(sys.argv)")
    assert not hits("python_os_environ_debug", 'val = os.environ.get("KEY")')
    assert not hits("python_os_environ_debug", "logging.debug(os.environ)")
    assert not hits("python_os_environ_debug", 'print(os.path.exists("/tmp"))')


def test_python_shell_injection() -> None:
    assert hits("python_shell_injection", "subprocess.call(cmd, shell=True)")
    assert hits("python_shell_injection", "subprocess.run(cmd, shell=True)")
    assert hits("python_shell_injection", "subprocess.Popen(cmd, shell=True)")
    assert hits("python_shell_injection", "subprocess.run(cmd, capture_output=True, shell=True)")
    assert not hits("python_shell_injection", 'subprocess.run(["ls", "-la"])')
    assert not hits("python_shell_injection", "subprocess.run(cmd, shell=False)")
    assert not hits("python_shell_injection", "subprocess.check_output(cmd)")


def test_python_shell_injection_in_deploy_script_but_not_its_test() -> None:
    code = "import subprocess\nsubprocess.run(cmd, shell=True)\n"
    findings = scan("deploy.py", code)
    assert [f.rule_name for f in findings] == ["python_shell_injection"]
    assert findings[0].line == 2
    assert findings[0].severity == "high"
    assert scan("test_deploy.py", code) == []


@pytest.mark.parametrize("path", ["test_main.py", "main_test.py", "conftest.py", "src/tests/unit.py"])
def test_python_rules_share_test_exclusions(path: str) -> None:
    for name in ("python_bare_except", "python_eval_exec", "python_os_system", "python_shell_injection"):
        assert excluded(name, path)
