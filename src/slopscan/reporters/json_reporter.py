from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

from slopscan import __version__
from slopscan.engine.types import Finding, ScanSummary
from slopscan.rules.base import Rule

REPORT_SCHEMA_VERSION = 1


def render_json(summary: ScanSummary) -> str:
    payload = {
        "schema_version": REPORT_SCHEMA_VERSION,
        "tool": {"name": "slopscan", "version": __version__},
        "files_scanned": summary.files_scanned,
        "files_cancelled": summary.files_cancelled,
        "counts": summary.counts_by_severity(),
        "findings": [finding_to_dict(f) for f in summary.findings],
    }
    return json.dumps(payload, indent=2, sort_keys=False)


def finding_to_dict(f: Finding) -> dict[str, Any]:
    fix = None
    if f.fix is not None:
        fix = {"kind": f.fix.kind, "replacement": f.fix.replacement}
    return {
        "rule": f.rule_name,
        "path": f.path,
        "language": f.language,
        "severity": f.severity,
        "description": f.description,
        "location": {
            "start_line": f.location.start_line,
            "start_col": f.location.start_col,
            "end_line": f.location.end_line,
            "end_col": f.location.end_col,
        },
        "matched_text": f.matched_text,
        "auto_fix": f.auto_fix,
        "fix": fix,
    }


def render_rules_json(rules: Iterable[Rule]) -> str:
    payload = [
        {
            "name": r.name,
            "language": str(r.language),
            "severity": r.severity,
            "description": r.description,
            "auto_fix": r.auto_fix,
            "multi_pass": r.requires_multi_pass,
            "enabled": r.enabled,
            "disabled_reason": r.disabled_reason,
            "known_limitation": r.known_limitation,
            "exclude": list(r.exclude),
        }
        for r in rules
    ]
    return json.dumps(payload, indent=2, sort_keys=False)
