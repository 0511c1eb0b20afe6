from __future__ import annotations

import logging
import os
import threading
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from functools import partial
from pathlib import Path

from slopscan.config import ScanConfig, load_config
from slopscan.engine.globs import is_excluded
from slopscan.engine.selector import scan_text
from slopscan.engine.types import Finding, ScanSummary, meets_threshold
from slopscan.languages.registry import allowed_extensions, classify
from slopscan.rules.registry import PatternRegistry, default_registry
from slopscan.utils import safe_relpath

logger = logging.getLogger(__name__)

DEFAULT_SKIP_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".idea",
    ".vscode",
    ".venv",
    "venv",
    "node_modules",
    "dist",
    "build",
    "target",
    "__pycache__",
}

SLOPSCAN_WORKERS_ENV = "SLOPSCAN_WORKERS"
DEFAULT_MAX_WORKERS = 32


@dataclass(frozen=True, slots=True)
class SourceFile:
    path: str  # POSIX path relative to the project root
    text: str


@dataclass(frozen=True, slots=True)
class ScanTarget:
    project_root: Path
    scan_path: Path
    config: ScanConfig


def resolve_worker_count(
    raw_value: str | None,
    *,
    default: int | None = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> int:
    """
    Resolve a safe worker count from an env var-style string.

    - None/""/"auto" fall back to the default
    - Values <= 0 or unparsable values fall back to the default
    - Values above `max_workers` are clamped
    """

    cpu = os.cpu_count() or 1
    resolved_default = min(max(1, default if default is not None else cpu), max_workers)
    if raw_value is None:
        return resolved_default

    normalized = raw_value.strip().lower()
    if not normalized or normalized in {"auto", "default"}:
        return resolved_default

    try:
        workers = int(normalized)
    except ValueError:
        return resolved_default

    if workers <= 0:
        return resolved_default
    return min(workers, max_workers)


def worker_count_from_env(*, default: int | None = None) -> int:
    return resolve_worker_count(os.environ.get(SLOPSCAN_WORKERS_ENV), default=default)


def prepare_target(scan_path: Path) -> ScanTarget:
    scan_path = scan_path.resolve()
    project_root = _detect_project_root(scan_path)
    return ScanTarget(project_root=project_root, scan_path=scan_path, config=load_config(project_root))


def discover_files(target: ScanTarget) -> list[Path]:
    """
    Files under `target.scan_path` whose extension belongs to an enabled
    language, minus `ignore.paths` matches. An explicit file path is always
    kept unless it is ignored, since its language may come from a shebang.
    """

    root = target.project_root
    ignore = target.config.ignore.paths
    allowed_exts = tuple(sorted(allowed_extensions(target.config.languages)))

    if target.scan_path.is_file():
        if is_excluded(safe_relpath(target.scan_path, root), ignore):
            return []
        return [target.scan_path]

    files: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(target.scan_path, topdown=True):
        dirnames[:] = [d for d in dirnames if d not in DEFAULT_SKIP_DIRS]
        base = Path(dirpath)
        for filename in filenames:
            name = filename.lower()
            if not name.endswith(allowed_exts) or name in allowed_exts:
                continue
            path = base / filename
            if is_excluded(safe_relpath(path, root), ignore):
                continue
            files.append(path)
    return sorted(files)


def read_source(path: Path, root: Path) -> SourceFile | None:
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.debug("Skipping unreadable file %s: %s", path, exc)
        return None
    return SourceFile(path=safe_relpath(path, root), text=text)


def scan_sources(
    sources: Iterable[SourceFile],
    *,
    config: ScanConfig | None = None,
    registry: PatternRegistry | None = None,
    workers: int = 1,
    cancel: threading.Event | None = None,
) -> ScanSummary:
    """
    Scan already-loaded files, in parallel when `workers > 1`.

    Files are independent; the registry is shared read-only. When `cancel` is
    set, files that have not started yet are skipped and counted as cancelled.
    Findings follow input order, then position within each file.
    """

    cfg = config or ScanConfig()
    reg = registry or default_registry()
    source_list = list(sources)
    scan_one = partial(_scan_one, cfg, reg, cancel)

    results: list[list[Finding] | None]
    if workers <= 1 or len(source_list) <= 1:
        results = [scan_one(source) for source in source_list]
    else:
        max_workers = min(workers, len(source_list))
        logger.debug("Scanning %d files with %d workers", len(source_list), max_workers)
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            results = list(executor.map(scan_one, source_list))

    findings: list[Finding] = []
    cancelled = 0
    for result in results:
        if result is None:
            cancelled += 1
            continue
        findings.extend(result)
    return ScanSummary(
        files_scanned=len(source_list) - cancelled,
        findings=tuple(findings),
        files_cancelled=cancelled,
    )


def scan_paths(
    paths: Sequence[Path],
    *,
    config: ScanConfig | None = None,
    workers: int | None = None,
    cancel: threading.Event | None = None,
) -> ScanSummary:
    """Discover, read and scan `paths`; configuration comes from the first path's project."""

    sources: list[SourceFile] = []
    resolved_config = config
    for scan_path in paths:
        target = prepare_target(scan_path)
        if resolved_config is None:
            resolved_config = target.config
        target = replace(target, config=resolved_config)
        for path in discover_files(target):
            source = read_source(path, target.project_root)
            if source is not None:
                sources.append(source)

    cfg = resolved_config or ScanConfig()
    effective_workers = workers or cfg.workers or worker_count_from_env()
    return scan_sources(sources, config=cfg, workers=effective_workers, cancel=cancel)


def _scan_one(
    config: ScanConfig,
    registry: PatternRegistry,
    cancel: threading.Event | None,
    source: SourceFile,
) -> list[Finding] | None:
    if cancel is not None and cancel.is_set():
        return None

    language = classify(source.path, source.text)
    if language not in config.languages:
        return []

    findings = scan_text(
        source.path,
        source.text,
        registry=registry,
        language=language,
        disabled=config.rules.disable,
    )
    overrides = config.rules.severity_overrides
    if overrides:
        findings = [
            replace(f, severity=overrides[f.rule_name]) if f.rule_name in overrides else f for f in findings
        ]
    return [f for f in findings if meets_threshold(f.severity, config.min_severity)]


def _detect_project_root(start: Path) -> Path:
    base = start if start.is_dir() else start.parent
    for candidate in (base, *base.parents):
        if (candidate / "pyproject.toml").exists():
            return candidate
    return base
