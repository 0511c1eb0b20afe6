from __future__ import annotations

from collections import defaultdict

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from slopscan import __version__
from slopscan.engine.types import SEVERITIES, Finding, ScanSummary, severity_rank

_SEVERITY_ICON = {"critical": "✖", "high": "✖", "medium": "⚠", "low": "ℹ"}
_SEVERITY_STYLE = {"critical": "bold magenta", "high": "bold red", "medium": "yellow", "low": "dim"}


def render_terminal(summary: ScanSummary, *, console: Console) -> None:
    header = Text()
    header.append("slopscan ", style="bold")
    header.append(f"v{__version__}", style="dim")

    console.print(
        Panel(
            header,
            subtitle=f"Scanned {summary.files_scanned} files",
            border_style="cyan",
        )
    )

    by_file: dict[str, list[Finding]] = defaultdict(list)
    for f in summary.findings:
        by_file[f.path].append(f)

    for path in sorted(by_file):
        console.print(Text(path, style="bold"))
        for f in sorted(by_file[path], key=_sort_key):
            _print_finding(console, f)
        console.print()

    _print_summary(summary, console=console)


def _print_finding(console: Console, f: Finding) -> None:
    style = _SEVERITY_STYLE.get(f.severity, "")

    line = Text()
    line.append(f"  {_SEVERITY_ICON.get(f.severity, '•')} ", style=style)
    line.append(f.rule_name, style="bold")
    line.append(f"  ({f.location.start_line}:{f.location.start_col})", style="dim")
    line.append(f"  {f.description}")
    if f.auto_fix:
        line.append("  [fixable]", style="green")
    console.print(line)

    if f.matched_text:
        snippet = f.matched_text.splitlines()[0] if f.matched_text.strip() else f.matched_text
        console.print(Text(f"     {f.location.start_line:>4} │ {snippet}", style="dim"))


def _print_summary(summary: ScanSummary, *, console: Console) -> None:
    console.print(Text("─" * 60, style="dim"))
    counts = summary.counts_by_severity()
    parts = [f"{counts[name]} {name}" for name in reversed(SEVERITIES)]
    console.print(Text(f"{len(summary.findings)} findings: {', '.join(parts)}", style="bold"))
    if summary.files_cancelled:
        console.print(Text(f"{summary.files_cancelled} files skipped after cancellation", style="yellow"))
    console.print(Text("─" * 60, style="dim"))


def _sort_key(f: Finding) -> tuple[int, int, str]:
    return -severity_rank(f.severity), f.location.start_line, f.rule_name
