# File: canon_scout/report/__init__.py
"""canon_scout.report: сохранение результатов (JSON) и отчёты (текст и HTML)."""

from __future__ import annotations

from .html_report import render_html
from .json_report import render_json
from .text_report import render_text

__all__ = ["render_json", "render_html", "render_text"]
