from __future__ import annotations

from collections.abc import Iterable, Mapping
from functools import lru_cache
from types import MappingProxyType

from slopscan.engine.multipass import ANALYZERS
from slopscan.languages.registry import PROFILES, is_registered
from slopscan.rules.base import MalformedRuleError, Rule
from slopscan.rules.c_family import builtin_c_rules, builtin_cpp_rules
from slopscan.rules.go import builtin_go_rules
from slopscan.rules.javascript import builtin_js_rules, builtin_typescript_rules
from slopscan.rules.jvm import builtin_java_rules, builtin_kotlin_rules
from slopscan.rules.polyglot import builtin_php_rules, builtin_ruby_rules
from slopscan.rules.python import builtin_python_rules
from slopscan.rules.rust import builtin_rust_rules
from slopscan.rules.shell import builtin_shell_rules
from slopscan.rules.universal import builtin_universal_rules

_EMPTY: Mapping[str, Rule] = MappingProxyType({})


class PatternRegistry:
    """
    Immutable catalog of rules with per-language indices built once.

    Lookups hand out read-only mappings that share the registry's own `Rule`
    objects, so repeated queries return identical rule instances.
    """

    def __init__(self, rules: Iterable[Rule]) -> None:
        by_name: dict[str, Rule] = {}
        for rule in rules:
            if rule.name in by_name:
                raise MalformedRuleError(f"Duplicate rule name: {rule.name}")
            if rule.requires_multi_pass and rule.name not in ANALYZERS:
                raise MalformedRuleError(f"{rule.name}: multi-pass rule has no registered analyzer.")
            by_name[rule.name] = rule

        for rule in by_name.values():
            unknown = [name for name in rule.suppressed_by if name not in by_name]
            if unknown:
                raise MalformedRuleError(f"{rule.name}: suppressed_by names unknown rules: {', '.join(unknown)}")

        universal = {name: rule for name, rule in by_name.items() if rule.is_universal}
        only: dict[str, dict[str, Rule]] = {}
        for name, rule in by_name.items():
            if not rule.is_universal:
                only.setdefault(rule.language, {})[name] = rule

        self._by_name = MappingProxyType(by_name)
        self._universal = MappingProxyType(universal)
        self._only = MappingProxyType({lang: MappingProxyType(rules) for lang, rules in only.items()})
        self._combined = MappingProxyType(
            {
                profile.language: MappingProxyType({**only.get(profile.language, {}), **universal})
                for profile in PROFILES
            }
        )

    @property
    def rules(self) -> tuple[Rule, ...]:
        return tuple(self._by_name.values())

    @property
    def by_name(self) -> Mapping[str, Rule]:
        return self._by_name

    @property
    def universal(self) -> Mapping[str, Rule]:
        return self._universal

    def rule(self, name: str) -> Rule:
        return self._by_name[name]

    def has_language(self, language: str) -> bool:
        """True iff `language` has a profile and at least one rule applies to it."""

        if not is_registered(language):
            return False
        return bool(self._combined.get(language))

    def get_patterns_for_language_only(self, language: str) -> Mapping[str, Rule]:
        return self._only.get(language, _EMPTY)

    def get_patterns_for_language(self, language: str) -> Mapping[str, Rule]:
        """Language-specific rules plus every universal rule."""

        return self._combined.get(language, _EMPTY)


def builtin_rules() -> tuple[Rule, ...]:
    rules: list[Rule] = []
    rules.extend(builtin_universal_rules())
    rules.extend(builtin_js_rules())
    rules.extend(builtin_typescript_rules())
    rules.extend(builtin_python_rules())
    rules.extend(builtin_go_rules())
    rules.extend(builtin_rust_rules())
    rules.extend(builtin_java_rules())
    rules.extend(builtin_kotlin_rules())
    rules.extend(builtin_c_rules())
    rules.extend(builtin_cpp_rules())
    rules.extend(builtin_shell_rules())
    rules.extend(builtin_ruby_rules())
    rules.extend(builtin_php_rules())
    return tuple(rules)


@lru_cache(maxsize=1)
def default_registry() -> PatternRegistry:
    return PatternRegistry(builtin_rules())


def has_language(language: str) -> bool:
    return default_registry().has_language(language)


def get_patterns_for_language(language: str) -> Mapping[str, Rule]:
    return default_registry().get_patterns_for_language(language)


def get_patterns_for_language_only(language: str) -> Mapping[str, Rule]:
    return default_registry().get_patterns_for_language_only(language)
