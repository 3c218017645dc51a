# File: canon_scout/report/html_report.py
"""canon_scout.report.html_report: Генерация HTML-отчёта с помощью Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from canon_scout.aggregator import AuditReport, group_sections, relevant_fields

#: шаблоны, которые поставляются вместе с пакетом
DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

#: поля с готовой разметкой diff (экранирование уже сделано в canon_scout.diff)
MARKUP_FIELDS = frozenset({"url_difference", "difference"})


def _sections(report: AuditReport) -> list[dict[str, Any]]:
    sections: list[dict[str, Any]] = []
    for url, audit in report.audits.items():
        groups = [
            {"title": title, "fields": relevant_fields(rows), "rows": rows}
            for title, rows in group_sections(audit.records()).items()
        ]
        sections.append({"url": url, "error": audit.error, "groups": groups})
    return sections


def render_html(
    report: AuditReport,
    template_dir: Union[Path, str, None],
    output_path: Union[Path, str],
) -> Path:
    """Рендерит HTML-отчёт из шаблона и сохраняет его по указанному пути.

    Args:
        report: объект AuditReport.
        template_dir: директория с Jinja2-шаблонами (None — шаблоны пакета).
        output_path: путь к итоговому HTML-файлу.

    Returns:
        Path до сохранённого HTML-файла.

    Пример:
    ```python
    from canon_scout.report.html_report import render_html
    html_path = render_html(report, template_dir=None, output_path='reports/report.html')
    ```
    """
    template_dir = Path(template_dir) if template_dir else DEFAULT_TEMPLATE_DIR
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    template = env.get_template("report.html.j2")

    context: dict[str, Any] = {
        "timestamp": report.started_at.isoformat(),
        "sections": _sections(report),
        "summary": report.summary(),
        "markup_fields": MARKUP_FIELDS,
    }

    html_content = template.render(**context)
    output_path.write_text(html_content, encoding="utf-8")

    return output_path
