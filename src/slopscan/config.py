from __future__ import annotations

import re
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, cast

from slopscan.engine.types import SEVERITIES, Severity
from slopscan.languages.registry import PROFILES, is_registered


class ConfigError(ValueError):
    """Raised when a slopscan configuration table is invalid."""


_RULE_NAME_RE = re.compile(r"^[a-z][a-z0-9_]*$")

DEFAULT_LANGUAGES: tuple[str, ...] = tuple(str(p.language) for p in PROFILES)
DEFAULT_MIN_SEVERITY: Severity = "low"
MAX_CONFIG_WORKERS = 32


def _validate_str_list(value: Any, *, field_name: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list) or any(not isinstance(v, str) for v in value):
        raise ConfigError(f"`{field_name}` must be a list of strings.")
    return tuple(v.strip() for v in value if v.strip())


def _validate_severity(value: Any, *, field_name: str) -> Severity:
    if not isinstance(value, str):
        raise ConfigError(f"`{field_name}` must be a string.")
    normalized = value.strip().lower()
    if normalized not in SEVERITIES:
        raise ConfigError(f"`{field_name}` must be one of: {', '.join(SEVERITIES)}.")
    return cast(Severity, normalized)


def _validate_rule_name(value: str, *, field_name: str) -> str:
    normalized = value.strip().lower()
    if not _RULE_NAME_RE.match(normalized):
        raise ConfigError(f"`{field_name}` has an invalid rule name {value!r}; expected snake_case like go_discarded_error.")
    return normalized


@dataclass(frozen=True, slots=True)
class RulesConfig:
    disable: tuple[str, ...] = ()
    severity_overrides: Mapping[str, Severity] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True, slots=True)
class IgnoreConfig:
    paths: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ScanConfig:
    languages: tuple[str, ...] = DEFAULT_LANGUAGES
    min_severity: Severity = DEFAULT_MIN_SEVERITY
    workers: int | None = None
    rules: RulesConfig = field(default_factory=RulesConfig)
    ignore: IgnoreConfig = field(default_factory=IgnoreConfig)


def load_config(project_dir: Path | str = ".") -> ScanConfig:
    """
    Load configuration from `[tool.slopscan]` in `project_dir/pyproject.toml`.

    Missing files or tables yield the defaults.
    """

    pyproject_path = Path(project_dir) / "pyproject.toml"
    if not pyproject_path.exists():
        return ScanConfig()

    try:
        data = tomllib.loads(pyproject_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {pyproject_path}: {exc}") from exc

    tool_table = data.get("tool", {})
    if not isinstance(tool_table, dict):
        return ScanConfig()

    table = tool_table.get("slopscan", {})
    if not isinstance(table, dict):
        raise ConfigError("`tool.slopscan` must be a table.")
    if not table:
        return ScanConfig()
    return parse_config_table(table)


def parse_config_table(table: Mapping[str, Any]) -> ScanConfig:
    languages_raw = table.get("languages")
    languages = DEFAULT_LANGUAGES
    if languages_raw is not None:
        languages = tuple(v.lower() for v in _validate_str_list(languages_raw, field_name="tool.slopscan.languages"))
        unknown = [lang for lang in languages if not is_registered(lang)]
        if unknown:
            raise ConfigError(f"`tool.slopscan.languages` names unknown languages: {', '.join(unknown)}.")

    min_severity = _validate_severity(
        table.get("min-severity", table.get("min_severity", DEFAULT_MIN_SEVERITY)),
        field_name="tool.slopscan.min-severity",
    )

    workers = table.get("workers")
    if workers is not None:
        if isinstance(workers, bool) or not isinstance(workers, int) or workers <= 0:
            raise ConfigError("`tool.slopscan.workers` must be a positive integer.")
        workers = min(workers, MAX_CONFIG_WORKERS)

    return ScanConfig(
        languages=languages,
        min_severity=min_severity,
        workers=workers,
        rules=_parse_rules_config(table.get("rules")),
        ignore=_parse_ignore_config(table.get("ignore")),
    )


def _parse_rules_config(value: Any) -> RulesConfig:
    if value is None:
        return RulesConfig()
    if not isinstance(value, dict):
        raise ConfigError("`tool.slopscan.rules` must be a table.")

    disable = tuple(
        _validate_rule_name(name, field_name="tool.slopscan.rules.disable")
        for name in _validate_str_list(value.get("disable", []), field_name="tool.slopscan.rules.disable")
    )

    raw_overrides = value.get("severity_overrides", value.get("severity-overrides"))
    overrides: dict[str, Severity] = {}
    if raw_overrides is not None:
        if not isinstance(raw_overrides, dict):
            raise ConfigError("`tool.slopscan.rules.severity_overrides` must be a table.")
        for raw_name, raw_severity in raw_overrides.items():
            field_name = f"tool.slopscan.rules.severity_overrides.{raw_name}"
            name = _validate_rule_name(str(raw_name), field_name=field_name)
            overrides[name] = _validate_severity(raw_severity, field_name=field_name)

    return RulesConfig(disable=disable, severity_overrides=MappingProxyType(overrides))


def _parse_ignore_config(value: Any) -> IgnoreConfig:
    if value is None:
        return IgnoreConfig()
    if not isinstance(value, dict):
        raise ConfigError("`tool.slopscan.ignore` must be a table.")
    return IgnoreConfig(paths=_validate_str_list(value.get("paths", []), field_name="tool.slopscan.ignore.paths"))
