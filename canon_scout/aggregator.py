# File: canon_scout/aggregator.py
"""canon_scout.aggregator: сбор записей проверки в отчёт по исходным URL."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from canon_scout.prober.models import Outcome, ProbeResult

Record = Dict[str, Any]

#: заголовок раздела HTML-отчёта -> условие попадания записи в раздел
SECTIONS: Dict[str, Any] = {
    "Issues": lambda r: r["issue"],
    "Warnings": lambda r: r["warnings"],
    "Error Handling": lambda r: r["errorHandling"],
    "Info": lambda r: r["info"],
    "Failed Fetches": lambda r: not r["successfulFetch"],
}


@dataclass(slots=True)
class UrlAudit:
    """Результаты по одному исходному URL; ``error`` заполнен, если проверка упала целиком."""

    url: str
    results: List[ProbeResult] = field(default_factory=list)
    error: Optional[str] = None

    def records(self) -> List[Record]:
        return [result.to_dict() for result in self.results]


def group_sections(records: List[Record]) -> Dict[str, List[Record]]:
    """Раскладывает записи по разделам; пустые разделы не возвращаются."""
    grouped = {title: [r for r in records if match(r)] for title, match in SECTIONS.items()}
    return {title: rows for title, rows in grouped.items() if rows}


def relevant_fields(records: List[Record]) -> List[str]:
    """Поля, у которых хотя бы в одной записи есть значение (не ``None`` и не ``""``)."""
    keys = list(dict.fromkeys(key for record in records for key in record))
    return [k for k in keys if any(r.get(k) is not None and r.get(k) != "" for r in records)]


@dataclass(slots=True)
class AuditReport:
    """Итог запуска: исходный URL -> :class:`UrlAudit`, в порядке проверки."""

    audits: Dict[str, UrlAudit] = field(default_factory=dict)
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: Optional[datetime] = None

    def add(self, audit: UrlAudit) -> None:
        self.audits[audit.url] = audit

    @property
    def urls(self) -> List[str]:
        return list(self.audits)

    def summary(self) -> Dict[str, int]:
        """Количество записей по категориям плюс неудачные запросы и упавшие URL."""
        counts = {outcome.value: 0 for outcome in Outcome}
        counts["failedFetches"] = 0
        counts["errors"] = 0
        for audit in self.audits.values():
            if audit.error is not None:
                counts["errors"] += 1
            for result in audit.results:
                counts[result.outcome.value] += 1
                if not result.successful_fetch:
                    counts["failedFetches"] += 1
        return counts

    def to_dict(self) -> Dict[str, Any]:
        """Структура для results.json: URL -> список записей или ``{url, error}``."""
        output: Dict[str, Any] = {}
        for url, audit in self.audits.items():
            if audit.error is not None:
                output[url] = {"url": url, "error": audit.error}
            else:
                output[url] = audit.records()
        return output

    def json(self, *, pretty: bool = False) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)


__all__ = ["AuditReport", "Record", "SECTIONS", "UrlAudit", "group_sections", "relevant_fields"]
