# File: canon_scout/report/text_report.py
"""canon_scout.report.text_report: простой текстовый отчёт (шапка, записи, итог)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Union

from canon_scout.aggregator import AuditReport


def _header(report: AuditReport) -> str:
    return f"Date: {report.started_at.isoformat()}\nTested URLs: {', '.join(report.urls)}"


def _body(report: AuditReport) -> str:
    blocks: List[str] = []
    for url, audit in report.audits.items():
        if audit.error is not None:
            blocks.append(json.dumps({"url": url, "error": audit.error}, ensure_ascii=False, indent=2))
            continue
        for record in audit.records():
            blocks.append(json.dumps(record, ensure_ascii=False, indent=2))
    return "\n\n".join(blocks)


def _footer(report: AuditReport) -> str:
    summary = report.summary()
    counts = ", ".join(f"{name}={value}" for name, value in summary.items())
    action = (
        "Review discrepancies."
        if summary["issue"] or summary["warnings"] or summary["errors"]
        else "None."
    )
    return f"Summary: All tests completed ({counts}).\nAction Items: {action}"


def render_text(report: AuditReport, output_path: Union[str, Path]) -> Path:
    """Пишет текстовый отчёт в *output_path* и возвращает путь к файлу."""
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(f"{_header(report)}\n\n{_body(report)}\n\n{_footer(report)}\n", encoding="utf-8")
    return output
