from __future__ import annotations

from slopscan.suppressions import NO_SUPPRESSIONS, parse_suppressions


def test_no_directives_returns_shared_empty_instance() -> None:
    result = parse_suppressions(["x = 1", "print('slop')"])
    assert result is NO_SUPPRESSIONS
    assert result.empty
    assert not result.is_suppressed("python_eval_exec", line=1)


def test_disable_file_applies_everywhere() -> None:
    result = parse_suppressions(["# slop: disable-file=python_eval_exec, go_discarded_error"])
    assert result.is_suppressed("python_eval_exec", line=None)
    assert result.is_suppressed("GO_DISCARDED_ERROR", line=42)
    assert not result.is_suppressed("python_os_system", line=1)


def test_disable_file_accepts_underscore_spelling() -> None:
    result = parse_suppressions(["// slop: disable_file=all"])
    assert result.is_suppressed("anything_at_all", line=7)


def test_line_and_next_line_directives() -> None:
    lines = [
        "a()  // slop: disable=rust_bare_unwrap",
        "// slop: disable-next-line=console_debugging,js_process_exit",
        "console.log(x); process.exit(1)",
    ]
    result = parse_suppressions(lines)
    assert result.is_suppressed("rust_bare_unwrap", line=1)
    assert not result.is_suppressed("rust_bare_unwrap", line=2)
    assert result.is_suppressed("console_debugging", line=3)
    assert result.is_suppressed("js_process_exit", line=3)
    assert not result.is_suppressed("console_debugging", line=2)
    assert not result.is_suppressed("console_debugging", line=None)


def test_directives_accumulate_on_one_line() -> None:
    lines = [
        "# slop: disable-next-line=python_eval_exec",
        "eval(x)  # slop: disable=python_debugging",
    ]
    result = parse_suppressions(lines)
    assert result.is_suppressed("python_eval_exec", line=2)
    assert result.is_suppressed("python_debugging", line=2)
