from __future__ import annotations

from pathlib import Path

import pytest

from slopscan.rules.registry import PatternRegistry, default_registry


@pytest.fixture()
def registry() -> PatternRegistry:
    return default_registry()


@pytest.fixture()
def project(tmp_path: Path) -> Path:
    (tmp_path / "pyproject.toml").write_text("[project]\nname = \"demo\"\n", encoding="utf-8")
    return tmp_path


@pytest.fixture(autouse=True)
def _isolate_worker_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SLOPSCAN_WORKERS", raising=False)
