from __future__ import annotations

from pathlib import Path

from slopscan.utils import safe_relpath


def test_safe_relpath_returns_relative_path_when_under_root(tmp_path: Path) -> None:
    root = tmp_path
    path = tmp_path / "src" / "example.py"
    assert safe_relpath(path, root) == "src/example.py"


def test_safe_relpath_falls_back_when_not_under_root(tmp_path: Path) -> None:
    root = tmp_path
    path = Path("foo/bar.py")
    assert safe_relpath(path, root) == "foo/bar.py"


def test_safe_relpath_handles_resolve_oserror(tmp_path: Path, monkeypatch) -> None:
    root = tmp_path
    path = tmp_path / "src" / "example.py"

    def _boom(self: Path, strict: bool = False) -> Path:
        raise OSError("boom")

    monkeypatch.setattr(type(root), "resolve", _boom)
    assert safe_relpath(path, root) == "src/example.py"
