from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from pathlib import PurePosixPath
from types import MappingProxyType

from slopscan.engine.globs import is_excluded, normalize_path


class UnknownLanguageError(LookupError):
    """Raised when a per-language lookup targets a language with no profile."""


class Language(StrEnum):
    JS = "js"
    TYPESCRIPT = "typescript"
    PYTHON = "python"
    GO = "go"
    RUST = "rust"
    JAVA = "java"
    KOTLIN = "kotlin"
    C = "c"
    CPP = "cpp"
    SHELL = "shell"
    RUBY = "ruby"
    PHP = "php"


# Files nobody could classify are treated as JavaScript, matching the most
# common extension-less scripts in mixed repositories.
DEFAULT_LANGUAGE = Language.JS


@dataclass(frozen=True, slots=True)
class CommentSyntax:
    line: str | None
    block: tuple[str, str] | None = None


@dataclass(frozen=True, slots=True)
class LanguageProfile:
    language: Language
    extensions: tuple[str, ...]
    comments: CommentSyntax
    test_globs: tuple[str, ...]
    entry_points: tuple[str, ...] = ()
    export_patterns: tuple[re.Pattern[str], ...] = ()


_C_STYLE = CommentSyntax(line="//", block=("/*", "*/"))
_HASH = CommentSyntax(line="#")

_TEST_DIRS = ("**/test/**", "**/tests/**")

# Ordered: when two profiles claim the same extension the first one wins
# (`.h` is C, not C++).
PROFILES: tuple[LanguageProfile, ...] = (
    LanguageProfile(
        Language.JS,
        (".js", ".jsx", ".mjs", ".cjs"),
        _C_STYLE,
        test_globs=("*.test.js", "*.spec.js", "*.test.jsx", "*.spec.jsx", "*.test.mjs", "**/__tests__/**", *_TEST_DIRS),
        entry_points=("bin/**", "cli.js", "cli.mjs"),
        export_patterns=(
            re.compile(r"^\s*export\s+(?:default\s+)?(?:async\s+)?(?:function|class|const|let|var)\b"),
            re.compile(r"^\s*module\.exports\s*="),
            re.compile(r"^\s*exports\.\w+\s*="),
        ),
    ),
    LanguageProfile(
        Language.TYPESCRIPT,
        (".ts", ".tsx", ".mts", ".cts", ".d.ts"),
        _C_STYLE,
        test_globs=("*.test.ts", "*.spec.ts", "*.test.tsx", "*.spec.tsx", "**/__tests__/**", *_TEST_DIRS),
        entry_points=("bin/**", "cli.ts"),
        export_patterns=(
            re.compile(
                r"^\s*export\s+(?:default\s+)?(?:declare\s+)?(?:async\s+)?"
                r"(?:function|class|const|let|var|interface|type|enum|namespace)\b"
            ),
            re.compile(r"^\s*export\s*\{"),
        ),
    ),
    LanguageProfile(
        Language.PYTHON,
        (".py", ".pyi", ".pyw"),
        _HASH,
        test_globs=("test_*.py", "*_test.py", "conftest.py", *_TEST_DIRS),
        entry_points=("__main__.py", "manage.py"),
        export_patterns=(re.compile(r"^__all__\s*(?::[^=]+)?="),),
    ),
    LanguageProfile(
        Language.GO,
        (".go",),
        _C_STYLE,
        test_globs=("*_test.go", "**/testdata/**"),
        entry_points=("main.go", "cmd/**"),
        export_patterns=(
            re.compile(r"^func\s+(?:\([^)]*\)\s*)?[A-Z]\w*\s*[(\[]"),
            re.compile(r"^(?:type|var|const)\s+[A-Z]\w*\b"),
        ),
    ),
    LanguageProfile(
        Language.RUST,
        (".rs",),
        _C_STYLE,
        test_globs=("*_test.rs", "*_tests.rs", "tests.rs", "**/tests/**"),
        entry_points=("src/main.rs", "src/bin/**", "build.rs"),
        export_patterns=(
            re.compile(r"^\s*pub(?:\([^)]*\))?\s+(?:async\s+)?(?:fn|struct|enum|trait|mod|const|static|type|use)\b"),
        ),
    ),
    LanguageProfile(
        Language.JAVA,
        (".java",),
        _C_STYLE,
        test_globs=("*Test.java", "*Tests.java", "*IT.java", *_TEST_DIRS),
        entry_points=("Main.java", "Application.java"),
        export_patterns=(
            re.compile(r"^\s*public\s+(?:(?:abstract|final|static|sealed)\s+)*(?:class|interface|enum|record|@interface)\b"),
        ),
    ),
    LanguageProfile(
        Language.KOTLIN,
        (".kt", ".kts", ".gradle.kts"),
        _C_STYLE,
        test_globs=("*Test.kt", "*Tests.kt", *_TEST_DIRS),
        entry_points=("main.kt", "Main.kt", "Application.kt"),
        export_patterns=(
            re.compile(
                r"^(?!\s*(?:private|internal)\b)\s*(?:public\s+)?(?:(?:data|sealed|abstract|open|enum|inline|value)\s+)*"
                r"(?:fun|class|object|interface|typealias|val|const\s+val)\b"
            ),
        ),
    ),
    LanguageProfile(
        Language.C,
        (".c", ".h"),
        _C_STYLE,
        test_globs=("*_test.c", "test_*.c", "*_test.h", *_TEST_DIRS),
        entry_points=("main.c", "src/main.c"),
        export_patterns=(re.compile(r"^\s*extern\s+"), re.compile(r"^\s*#\s*define\s+[A-Z_][A-Z0-9_]*\b")),
    ),
    LanguageProfile(
        Language.CPP,
        (".cpp", ".cc", ".cxx", ".c++", ".hpp", ".hh", ".hxx", ".h++", ".ipp"),
        _C_STYLE,
        test_globs=("*_test.cpp", "*_test.cc", "*_test.cxx", "*_unittest.cc", "test_*.cpp", *_TEST_DIRS),
        entry_points=("main.cpp", "main.cc", "main.cxx", "src/main.cpp"),
        export_patterns=(
            re.compile(r"^\s*extern\s+"),
            re.compile(r"__declspec\s*\(\s*dllexport\s*\)"),
            re.compile(r"__attribute__\s*\(\(\s*visibility\s*\(\s*\"default\"\s*\)\s*\)\)"),
        ),
    ),
    LanguageProfile(
        Language.SHELL,
        (".sh", ".bash", ".zsh", ".ksh"),
        _HASH,
        test_globs=("*_test.sh", "*.test.sh", "*.bats", *_TEST_DIRS),
        export_patterns=(re.compile(r"^\s*export\s+[A-Za-z_]\w*"),),
    ),
    LanguageProfile(
        Language.RUBY,
        (".rb", ".rake", ".gemspec", ".ru"),
        CommentSyntax(line="#", block=("=begin", "=end")),
        test_globs=("*_spec.rb", "*_test.rb", "test_*.rb", "**/spec/**", *_TEST_DIRS),
        entry_points=("bin/**", "exe/**", "Rakefile"),
        export_patterns=(re.compile(r"^\s*module_function\b"), re.compile(r"^\s*public\b")),
    ),
    LanguageProfile(
        Language.PHP,
        (".php", ".phtml"),
        _C_STYLE,
        test_globs=("*Test.php", *_TEST_DIRS),
        entry_points=("index.php", "artisan", "bin/**"),
        export_patterns=(
            re.compile(r"^\s*(?:final\s+|abstract\s+)?(?:class|interface|trait|enum)\s+\w+"),
            re.compile(r"^\s*public\s+(?:static\s+)?function\b"),
        ),
    ),
)

_PROFILE_BY_LANGUAGE = MappingProxyType({p.language: p for p in PROFILES})

# Longest extension first so `.gradle.kts` and `.d.ts` beat their shorter
# suffixes; ties keep profile order.
_EXTENSIONS: tuple[tuple[str, Language], ...] = tuple(
    sorted(
        ((ext, p.language) for p in PROFILES for ext in p.extensions),
        key=lambda item: -len(item[0]),
    )
)

_SHEBANG_RE = re.compile(r"^#!\s*(?:\S*/)?(?:env\s+(?:-\S+\s+)*)?(?P<interp>[A-Za-z][\w.+-]*)")
_SHEBANG_INTERPRETERS = MappingProxyType(
    {
        "python": Language.PYTHON,
        "python2": Language.PYTHON,
        "python3": Language.PYTHON,
    }
)
_PYTHON_VERSIONED_RE = re.compile(r"^python[23](?:\.\d+)?$")


def classify(path: str, content: str | None = None) -> Language:
    """
    Map a file path (and optionally its content) to a language.

    Resolution order: most specific known extension, then the shebang line
    when `content` is supplied, then `DEFAULT_LANGUAGE`. Never raises.
    """

    by_extension = language_for_extension(path)
    if by_extension is not None:
        return by_extension

    if content:
        by_shebang = _language_from_shebang(content)
        if by_shebang is not None:
            return by_shebang

    return DEFAULT_LANGUAGE


def language_for_extension(path: str) -> Language | None:
    name = PurePosixPath(normalize_path(path)).name.lower()
    for ext, language in _EXTENSIONS:
        if name.endswith(ext) and len(name) > len(ext):
            return language
    return None


def _language_from_shebang(content: str) -> Language | None:
    first_line = content.split("\n", 1)[0].strip()
    match = _SHEBANG_RE.match(first_line)
    if match is None:
        return None
    interpreter = match.group("interp").lower()
    if interpreter in _SHEBANG_INTERPRETERS:
        return _SHEBANG_INTERPRETERS[interpreter]
    if _PYTHON_VERSIONED_RE.match(interpreter):
        return Language.PYTHON
    return None


def profile_for(language: str) -> LanguageProfile:
    try:
        return _PROFILE_BY_LANGUAGE[Language(language)]
    except ValueError:
        raise UnknownLanguageError(f"No language profile registered for {language!r}") from None


def is_registered(language: str) -> bool:
    return language in _PROFILE_BY_LANGUAGE


def is_test_file(path: str, language: str | None = None) -> bool:
    """
    Return True when `path` follows a test-file convention.

    Conventions come from the language profile (`language`, or the language
    `classify(path)` resolves to). Directory components named `test` or
    `tests` count for every language.
    """

    profile = profile_for(language) if language is not None else _PROFILE_BY_LANGUAGE[classify(path)]
    return is_excluded(path, profile.test_globs) or is_excluded(path, _TEST_DIRS)


def detect_comment_syntax(extension_or_language: str) -> CommentSyntax:
    """
    Look up comment delimiters by extension (`.py`) or language id (`python`).

    Raises UnknownLanguageError when nothing is registered.
    """

    key = extension_or_language.strip().lower()
    if key.startswith("."):
        for ext, language in _EXTENSIONS:
            if key == ext:
                return _PROFILE_BY_LANGUAGE[language].comments
        raise UnknownLanguageError(f"No comment syntax registered for extension {extension_or_language!r}")
    return profile_for(key).comments


def entry_points(language: str) -> tuple[str, ...]:
    return profile_for(language).entry_points


def export_patterns(language: str) -> tuple[re.Pattern[str], ...]:
    return profile_for(language).export_patterns


def testfile_globs(*languages: str) -> tuple[str, ...]:
    """Union of the test-file globs of `languages`, in first-seen order."""

    return _dedupe(glob for language in languages for glob in profile_for(language).test_globs)


def all_testfile_globs() -> tuple[str, ...]:
    return testfile_globs(*(p.language for p in PROFILES))


def allowed_extensions(enabled_languages: Iterable[str]) -> set[str]:
    enabled = {lang.strip().lower() for lang in enabled_languages}
    exts: set[str] = set()
    for profile in PROFILES:
        if profile.language in enabled:
            exts.update(profile.extensions)
    return exts


def _dedupe(values: Iterable[str]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for value in values:
        seen.setdefault(value, None)
    return tuple(seen)
