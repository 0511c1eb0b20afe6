from __future__ import annotations

import pytest
from helpers import excluded, hits, rule_names, scan


def test_placeholder_unsupported_java() -> None:
    assert hits("placeholder_unsupported_java", "throw new UnsupportedOperationException();")
    assert hits("placeholder_unsupported_java", 'throw new UnsupportedOperationException("later");')
    assert not hits("placeholder_unsupported_java", "new UnsupportedOperationException();")


def test_java_sysout_debugging() -> None:
    assert hits("java_sysout_debugging", 'System.out.println("value=" + v);')
    assert hits("java_sysout_debugging", 'System.err.printf("%d%n", n);')
    assert not hits("java_sysout_debugging", '// System.out.println("x");')
    assert not hits("java_sysout_debugging", "logger.info(value);")


@pytest.mark.parametrize("path", ["src/test/FooTest.java", "FooTests.java", "src/examples/Demo.java"])
def test_java_sysout_debugging_exclusions(path: str) -> None:
    assert excluded("java_sysout_debugging", path)


def test_java_stacktrace_debugging() -> None:
    assert hits("java_stacktrace_debugging", "e.printStackTrace();")
    assert not hits("java_stacktrace_debugging", "e.printStackTrace(System.err);")


def test_java_throw_todo() -> None:
    assert hits("java_throw_todo", 'throw new RuntimeException("TODO: implement");')
    assert hits("java_throw_todo", 'throw new IllegalStateException("not yet implemented");')
    assert not hits("java_throw_todo", 'throw new RuntimeException("Connection failed");')
    assert not hits("java_throw_todo", 'throw new IOException("TODO");')


@pytest.mark.parametrize(
    "message",
    ["Todos list must not be empty", "Hacker detected", "FIXMEs are tracked elsewhere", "xxxl size unknown"],
)
def test_java_throw_todo_requires_whole_marker(message: str) -> None:
    assert not hits("java_throw_todo", f'throw new IllegalStateException("{message}");')


def test_java_throw_todo_respects_span_bound() -> None:
    near = 'throw new RuntimeException("' + "x" * 180 + ' TODO");'
    far = 'throw new RuntimeException("' + "x" * 210 + ' TODO");'
    assert hits("java_throw_todo", near)
    assert not hits("java_throw_todo", far)


def test_java_return_null_todo() -> None:
    assert hits("java_return_null_todo", "return null; // TODO")
    assert hits("java_return_null_todo", "return null; // stub implementation")
    assert hits("java_return_null_todo", "return null; // todo implement later")
    assert not hits("java_return_null_todo", "return null; // nothing found")
    assert not hits("java_return_null_todo", "return null;")


def test_java_empty_catch_and_catch_ignore() -> None:
    assert hits("java_empty_catch", "} catch (IOException e) {}")
    assert not hits("java_empty_catch", "} catch (IOException e) { log(e); }")
    assert hits("java_catch_ignore", "} catch (IOException e) { // ignored")
    assert hits("java_catch_ignore", "} catch (IOException e) { // IGNORE this error")
    assert not hits("java_catch_ignore", "} catch (IOException e) { // log and rethrow")


def test_java_suppress_warnings_scenario() -> None:
    assert hits("java_suppress_warnings", '@SuppressWarnings("unchecked")')
    assert hits("java_suppress_warnings", '@SuppressWarnings({"unchecked", "rawtypes"})')
    assert not hits("java_suppress_warnings", '@SuppressWarnings("serial")')


def test_java_raw_type() -> None:
    assert hits("java_raw_type", "Set values;")
    assert hits("java_raw_type", "private Map cache = new HashMap();")
    assert hits("java_raw_type", "Iterator iter = list.iterator();")
    assert not hits("java_raw_type", "List<String> names = new ArrayList<>();")
    assert not hits("java_raw_type", "return list;")


def test_java_wildcard_catch() -> None:
    assert hits("java_wildcard_catch", "} catch (Exception e) {")
    assert hits("java_wildcard_catch", "} catch (final Throwable t) {")
    assert not hits("java_wildcard_catch", "} catch (RuntimeException e) {")


def test_java_wildcard_catch_yields_to_empty_catch() -> None:
    findings = scan("src/main/java/App.java", "try { run(); } catch (Exception e) {}\n")
    assert rule_names(findings) == {"java_empty_catch"}


def test_kotlin_println_debugging() -> None:
    assert hits("kotlin_println_debugging", 'println("test")')
    assert hits("kotlin_println_debugging", '    println("value: $v")')
    assert not hits("kotlin_println_debugging", 'fprintln("test")')
    assert not hits("kotlin_println_debugging", 'loggerprintln("test")')
    assert not hits("kotlin_println_debugging", '// println("test")')
    assert excluded("kotlin_println_debugging", "main.kt")
    assert excluded("kotlin_println_debugging", "src/Main.kt")
    assert not excluded("kotlin_println_debugging", "src/main/kotlin/Repository.kt")


def test_kotlin_todo_call() -> None:
    assert hits("kotlin_todo_call", "TODO()")
    assert hits("kotlin_todo_call", 'return TODO("pending")')
    assert not hits("kotlin_todo_call", "val todoList = listOf<String>()")
    assert not hits("kotlin_todo_call", "// TODO: fix this later")


def test_kotlin_fixme_comment() -> None:
    assert hits("kotlin_fixme_comment", "// FIXME: broken on empty input")
    assert hits("kotlin_fixme_comment", "    // fixme")
    assert not hits("kotlin_fixme_comment", "// TODO: later")


def test_kotlin_empty_catch() -> None:
    assert hits("kotlin_empty_catch", "} catch (e: Exception) {}")
    assert not hits("kotlin_empty_catch", "} catch (e: Exception) { log(e) }")


def test_kotlin_swallowed_error() -> None:
    assert hits("kotlin_swallowed_error", "val v = runCatching { doSomething() }.getOrNull()")
    assert not hits("kotlin_swallowed_error", "val v = runCatching { doSomething() }.getOrElse { null }")
    assert not hits("kotlin_swallowed_error", "runCatching { doSomething() }.onFailure { log(it) }")
    assert not hits("kotlin_swallowed_error", "runCatching { doSomething() }.getOrThrow()")


def test_kotlin_suppress_annotation() -> None:
    assert hits("kotlin_suppress_annotation", '@Suppress("UNCHECKED_CAST")')
    assert hits("kotlin_suppress_annotation", '@file:Suppress("unused")')
    assert not hits("kotlin_suppress_annotation", "@Suppress")


def test_kotlin_script_extension_classifies_as_kotlin() -> None:
    findings = scan("build.gradle.kts", 'println("configuring")\n')
    assert [f.language for f in findings] == ["kotlin"]
