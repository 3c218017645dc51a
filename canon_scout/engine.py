# File: canon_scout/engine.py
"""canon_scout.engine: запуск проверки списка URL и сборка отчёта."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Optional

from aiohttp import ClientSession

from canon_scout.aggregator import AuditReport, UrlAudit
from canon_scout.config import ProbeConfig
from canon_scout.logger import logger
from canon_scout.prober.probe import UrlProber
from canon_scout.variants import TokenFactory

__all__ = ["start_audit"]


async def _audit_one(prober: UrlProber, url: str) -> UrlAudit:
    """Проверяет один исходный URL; любая неожиданная ошибка превращается в запись с ``error``."""
    try:
        results = await prober.probe_url(url)
    except Exception as exc:
        logger.error("Test for %s failed: %s", url, exc)
        return UrlAudit(url=url, error=f"{type(exc).__name__}: {exc}")

    for result in results:
        logger.info(
            "Request: %s, Response Status: %s, Outcome: %s",
            result.url_variation,
            result.status_code,
            result.outcome.value if result.successful_fetch else "failed fetch",
        )
    return UrlAudit(url=url, results=results)


async def start_audit(
    urls: Iterable[str],
    config: ProbeConfig,
    *,
    session: Optional[ClientSession] = None,
    token_factory: Optional[TokenFactory] = None,
) -> AuditReport:
    """
    Проверяет все URL по очереди (варианты одного URL — параллельно) и возвращает AuditReport.

    Parameters
    ----------
    urls : Iterable[str]
        Уже проверенные абсолютные URL.
    config : ProbeConfig
        Таймаут, User-Agent, параллелизм.
    session : ClientSession, optional
        Готовая сессия (тесты подставляют свой резолвер); иначе создаётся своя.
    token_factory : TokenFactory, optional
        Источник случайного сегмента пути для негативного контроля.
    """
    report = AuditReport()
    logger.info("Starting canonical audit…")
    async with UrlProber(config, session=session, token_factory=token_factory) as prober:
        for url in urls:
            report.add(await _audit_one(prober, url))
    report.finished_at = datetime.now(timezone.utc)
    summary = report.summary()
    logger.info(
        "All tests completed: %d URLs, %d issues, %d warnings, %d error handling, %d info",
        len(report.audits),
        summary["issue"],
        summary["warnings"],
        summary["errorHandling"],
        summary["info"],
    )
    return report
