from __future__ import annotations

import pytest
from helpers import excluded, get_rule, hits, rule_names, scan


def test_console_debugging_tolerated_in_cli_entry_points() -> None:
    assert hits("console_debugging", 'console.log("state", state);')
    assert hits("console_debugging", "  console.table(rows)")
    assert not hits("console_debugging", '// console.log("x")')
    assert not hits("console_debugging", 'console.error("failed")')
    assert excluded("console_debugging", "cli.js")
    assert excluded("console_debugging", "bin/run.js")
    assert excluded("console_debugging", "src/app.test.js")
    assert excluded("console_debugging", "src/__tests__/app.js")
    assert not excluded("console_debugging", "src/app.js")


def test_js_debugger_statement() -> None:
    assert hits("js_debugger_statement", "  debugger;")
    assert hits("js_debugger_statement", "debugger")
    assert not hits("js_debugger_statement", "const debuggerMode = true;")


def test_placeholder_throw_js() -> None:
    assert hits("placeholder_throw_js", "throw new Error('Not implemented');")
    assert hits("placeholder_throw_js", "throw new Error(`TODO: ${name}`);")
    assert not hits("placeholder_throw_js", 'throw new Error("invalid input");')
    assert not hits("placeholder_throw_js", "throw new Error('todos failed to load');")


def test_empty_catch_js() -> None:
    assert hits("empty_catch_js", "} catch (e) {}")
    assert hits("empty_catch_js", "} catch {}")
    assert not hits("empty_catch_js", "} catch (e) { report(e); }")


def test_js_process_exit() -> None:
    assert hits("js_process_exit", "process.exit(1);")
    assert excluded("js_process_exit", "bin/cli.js")
    assert not excluded("js_process_exit", "src/lib.js")


def test_typescript_rules() -> None:
    assert hits("ts_console_debugging", "console.debug(payload);")
    assert hits("ts_any_type", "let x: any = 1;")
    assert hits("ts_any_type", "const y = value as any;")
    assert not hits("ts_any_type", "let company: string;")
    assert not hits("ts_any_type", "let x: anyThing;")
    assert excluded("ts_any_type", "types/globals.d.ts")
    assert hits("ts_ts_ignore", "// @ts-ignore")
    assert hits("ts_ts_ignore", "// @ts-nocheck")
    assert not hits("ts_ts_ignore", "// @ts-expect-error")
    assert hits("ts_empty_catch", "} catch (err) {}")


def test_declaration_file_classifies_as_typescript() -> None:
    findings = scan("types/globals.d.ts", "export declare function f(x: any): void;\n")
    assert findings == []
    findings = scan("src/api.ts", "export function f(x: any): void {}\n")
    assert rule_names(findings) == {"ts_any_type"}
    assert findings[0].language == "typescript"


def test_js_rules_do_not_apply_to_typescript() -> None:
    findings = scan("src/view.tsx", 'console.log("render");\n')
    assert rule_names(findings) == {"ts_console_debugging"}


def test_ruby_debugger() -> None:
    assert hits("ruby_debugger", "binding.pry")
    assert hits("ruby_debugger", "  byebug")
    assert not hits("ruby_debugger", "# binding.pry")
    assert get_rule("ruby_debugger").auto_fix


def test_ruby_puts_debugging() -> None:
    assert hits("ruby_puts_debugging", "puts user.inspect")
    assert hits("ruby_puts_debugging", "p response")
    assert hits("ruby_puts_debugging", "pp(config)")
    assert not hits("ruby_puts_debugging", 'puts "Starting server"')
    assert not hits("ruby_puts_debugging", "print_report(user)")
    assert excluded("ruby_puts_debugging", "bin/console")
    assert excluded("ruby_puts_debugging", "spec/models/user_spec.rb")


def test_ruby_raise_not_implemented() -> None:
    assert hits("ruby_raise_not_implemented", "raise NotImplementedError")
    assert hits("ruby_raise_not_implemented", 'raise "TODO: handle refunds"')
    assert hits("ruby_raise_not_implemented", "raise RuntimeError, 'not implemented'")
    assert not hits("ruby_raise_not_implemented", 'raise ArgumentError, "bad input"')


def test_ruby_rescue_nil() -> None:
    assert hits("ruby_rescue_nil", "value = Integer(raw) rescue nil")
    assert not hits("ruby_rescue_nil", "rescue NilError => e")


def test_php_rules() -> None:
    assert hits("php_debug_output", "var_dump($user);")
    assert hits("php_debug_output", "print_r($data);")
    assert not hits("php_debug_output", "$logger->dump($x);")
    assert not hits("php_debug_output", "// var_dump($user);")
    assert hits("php_die_exit", 'die("oops");')
    assert hits("php_die_exit", "exit(0);")
    assert excluded("php_die_exit", "public/index.php")
    assert hits("php_eval", "eval($code);")
    assert not hits("php_eval", "$this->eval($code);")
    assert hits("php_error_suppression", "$f = @file_get_contents($path);")
    assert hits("php_error_suppression", "@unlink($tmp);")
    assert not hits("php_error_suppression", '$email = "user@example.com";')


@pytest.mark.parametrize(
    ("path", "content", "expected"),
    [
        ("app/models/user.rb", "binding.pry\n", {"ruby_debugger"}),
        ("lib/tasks/build.rake", "x = load rescue nil\n", {"ruby_rescue_nil"}),
        ("src/Controller.php", "<?php\nvar_dump($req);\n", {"php_debug_output"}),
    ],
)
def test_polyglot_files_pick_up_their_language_rules(path: str, content: str, expected: set[str]) -> None:
    assert rule_names(scan(path, content)) == expected
