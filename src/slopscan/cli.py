from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from slopscan import __version__
from slopscan.config import ConfigError, ScanConfig
from slopscan.engine.types import SEVERITIES, Severity, meets_threshold
from slopscan.languages.registry import classify, is_registered, is_test_file
from slopscan.logging_utils import configure_logging
from slopscan.reporters.json_reporter import render_json, render_rules_json
from slopscan.reporters.terminal import render_terminal

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="slopscan - find debug leftovers, placeholders and unsafe idioms across languages.",
)
console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger(__name__)

_FORMATS = ("terminal", "json")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def _main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Verbose logs (printed to stderr)."),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Reduce non-essential output."),
    ] = False,
) -> None:
    """slopscan CLI."""

    if verbose and quiet:
        raise typer.BadParameter("Choose at most one: --verbose or --quiet.")
    configure_logging(verbose=verbose, quiet=quiet)
    ctx.obj = {"verbose": verbose, "quiet": quiet}


def _cli_settings(ctx: typer.Context) -> dict[str, bool]:
    if not isinstance(ctx.obj, dict):
        return {"verbose": False, "quiet": False}
    return {"verbose": bool(ctx.obj.get("verbose", False)), "quiet": bool(ctx.obj.get("quiet", False))}


def _normalize_format(value: str) -> str:
    normalized = value.strip().lower()
    if normalized not in _FORMATS:
        raise typer.BadParameter(f"Unsupported format. Use: {', '.join(_FORMATS)}.")
    return normalized


def _normalize_severity(value: str, *, option: str) -> Severity:
    normalized = value.strip().lower()
    if normalized not in SEVERITIES:
        raise typer.BadParameter(f"{option} must be one of: {', '.join(SEVERITIES)}.")
    return normalized  # type: ignore[return-value]


def _normalize_languages(values: list[str]) -> tuple[str, ...]:
    languages = tuple(v.strip().lower() for v in values if v.strip())
    unknown = [lang for lang in languages if not is_registered(lang)]
    if unknown:
        raise typer.BadParameter(f"Unknown language(s): {', '.join(unknown)}.")
    return languages


@app.command()
def scan(
    ctx: typer.Context,
    paths: Annotated[
        list[Path] | None,
        typer.Argument(
            exists=True,
            file_okay=True,
            dir_okay=True,
            resolve_path=True,
            help="Files or directories to scan (default: current directory).",
        ),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option("--format", help="Output format: terminal, json.", show_default=True),
    ] = "terminal",
    min_severity: Annotated[
        str | None,
        typer.Option("--min-severity", help="Hide findings below this severity (default: use config)."),
    ] = None,
    languages: Annotated[
        list[str] | None,
        typer.Option("--language", "-l", help="Only scan this language (repeatable)."),
    ] = None,
    fail_on: Annotated[
        str | None,
        typer.Option("--fail-on", help="Exit 1 when any finding reaches this severity."),
    ] = None,
    workers: Annotated[
        int | None,
        typer.Option("--workers", min=1, help="Worker threads (default: config, then SLOPSCAN_WORKERS)."),
    ] = None,
) -> None:
    """Scan files for slop patterns."""

    from slopscan.scanner import prepare_target, scan_paths

    fmt = _normalize_format(output_format)
    targets = paths or [Path(".").resolve()]

    try:
        config: ScanConfig = prepare_target(targets[0]).config
    except ConfigError as exc:
        err_console.print(f"Invalid configuration: {exc}")
        raise typer.Exit(code=2) from exc

    if min_severity is not None:
        config = replace(config, min_severity=_normalize_severity(min_severity, option="--min-severity"))
    if languages:
        config = replace(config, languages=_normalize_languages(languages))
    fail_threshold = _normalize_severity(fail_on, option="--fail-on") if fail_on is not None else None

    settings = _cli_settings(ctx)
    summary = scan_paths(targets, config=config, workers=workers)
    logger.debug("Scanned %d files, %d findings", summary.files_scanned, len(summary.findings))

    if fmt == "json":
        typer.echo(render_json(summary))
    elif not settings["quiet"] or summary.findings:
        render_terminal(summary, console=console)

    if fail_threshold is not None and any(meets_threshold(f.severity, fail_threshold) for f in summary.findings):
        raise typer.Exit(code=1)


@app.command()
def rules(
    language: Annotated[
        str | None,
        typer.Option("--language", "-l", help="Only list rules that apply to this language (universal included)."),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option("--format", help="Output format: terminal, json.", show_default=True),
    ] = "terminal",
) -> None:
    """
    List the rule catalog.
    """

    from slopscan.rules.registry import default_registry

    fmt = _normalize_format(output_format)
    registry = default_registry()
    if language is None:
        selected = list(registry.rules)
    else:
        (lang,) = _normalize_languages([language])
        selected = list(registry.get_patterns_for_language(lang).values())
    selected.sort(key=lambda r: (str(r.language), r.name))

    if fmt == "json":
        typer.echo(render_rules_json(selected))
        return

    table = Table(title="slopscan rules")
    table.add_column("Name", style="bold")
    table.add_column("Language")
    table.add_column("Severity")
    table.add_column("Fix", justify="center")
    table.add_column("Description")
    for r in selected:
        description = r.description
        if not r.enabled:
            description = f"(disabled: {r.disabled_reason}) {description}"
        table.add_row(r.name, str(r.language), r.severity, "yes" if r.auto_fix else "-", description)
    console.print(table)


@app.command(name="classify")
def classify_command(
    paths: Annotated[
        list[Path],
        typer.Argument(exists=True, file_okay=True, dir_okay=False, help="Files to classify."),
    ],
) -> None:
    """Print the language each file resolves to and whether it is a test file."""

    for path in paths:
        try:
            content = path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            err_console.print(f"{path}: cannot read ({exc})")
            content = None
        language = classify(path.as_posix(), content)
        marker = "test" if is_test_file(path.as_posix(), language) else "source"
        typer.echo(f"{path.as_posix()}\t{language}\t{marker}")
