from __future__ import annotations

import warnings

import pytest

from slopscan.engine.globs import is_excluded, normalize_path


@pytest.mark.parametrize("path", ["", "main.go", "src/deep/nested/file.py", "tests/x_test.go"])
def test_empty_glob_list_never_excludes(path: str) -> None:
    assert is_excluded(path, []) is False
    assert is_excluded(path, ()) is False


def test_basename_globs_match_in_any_directory() -> None:
    assert is_excluded("main.go", ["main.go"])
    assert is_excluded("cmd/app/main.go", ["main.go"])
    assert is_excluded("pkg/store_test.go", ["*_test.go"])
    assert not is_excluded("pkg/store.go", ["*_test.go"])
    assert not is_excluded("pkg/domain.go", ["main.go"])


def test_single_star_stays_within_a_segment() -> None:
    assert is_excluded("src/a.py", ["src/*.py"])
    assert not is_excluded("src/pkg/a.py", ["src/*.py"])


def test_double_star_crosses_directories() -> None:
    assert is_excluded("cmd/server/main.go", ["cmd/**"])
    assert is_excluded("cmd/a/b/c.go", ["cmd/**"])
    assert not is_excluded("internal/cmd.go", ["cmd/**"])
    assert is_excluded("tests/unit.py", ["**/tests/**"])
    assert is_excluded("src/tests/unit.py", ["**/tests/**"])
    assert is_excluded("a/b/vendor/c/d.c", ["**/vendor/**"])
    assert not is_excluded("src/testsuite/unit.py", ["**/tests/**"])


def test_slash_globs_are_anchored_at_the_root() -> None:
    assert is_excluded("src/main.rs", ["src/main.rs"])
    assert not is_excluded("crates/x/src/main.rs", ["src/main.rs"])


def test_any_glob_in_the_list_excludes() -> None:
    globs = ["*_test.go", "cmd/**", "main.go"]
    assert is_excluded("cmd/x.go", globs)
    assert is_excluded("main.go", globs)
    assert not is_excluded("internal/x.go", globs)


def test_paths_are_normalized_before_matching() -> None:
    assert normalize_path("./src/a.py") == "src/a.py"
    assert normalize_path("src\\pkg\\a.py") == "src/pkg/a.py"
    assert is_excluded("./cmd/main.go", ["cmd/**"])
    assert is_excluded("tests\\unit\\x.py", ["**/tests/**"])


def test_generators_are_accepted() -> None:
    assert is_excluded("main.go", (g for g in ["main.go"]))


def test_compiling_globs_emits_no_deprecation_warning() -> None:
    with warnings.catch_warnings():
        warnings.simplefilter("error", DeprecationWarning)
        assert is_excluded("pkg/gen/api_pb2.py", ("**/gen/*_pb2.py", "fixtures/"))
