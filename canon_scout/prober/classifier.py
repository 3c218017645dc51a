# File: canon_scout/prober/classifier.py
"""canon_scout.prober.classifier: отнесение результата проверки варианта к одной категории.

Правила проверяются строго по порядку, первое совпадение выигрывает:

1. запрос не дошёл до сервера → ``info``;
2. сам исходный URL отдаёт 200, но canonical указывает на другой адрес → ``issue``;
3. 404 / 410 → ``errorHandling``;
4. вариант отдаёт 200 с canonical, отличным от исходного → ``issue``;
5. 301 ровно на исходный URL → ``info``;
6. вариант отдаёт 302 не на исходный URL → ``issue``;
7. исходный URL отдаёт 200 → ``info``;
8. всё остальное → ``warnings``.
"""

from __future__ import annotations

from typing import Optional

from canon_scout.prober.models import FetchResult, Outcome

__all__ = ["classify"]


def _canonical_mismatch(canonical: Optional[str], original: str) -> bool:
    return bool(canonical) and canonical != original


def classify(variant: str, original: str, fetch: FetchResult) -> Outcome:
    """Возвращает ровно одну категорию для варианта *variant* исходного *original*."""
    if not fetch.successful:
        return Outcome.INFO

    status = fetch.status
    is_original = variant == original
    canonical_mismatch = _canonical_mismatch(fetch.html_canonical, original)

    if is_original and status == 200 and canonical_mismatch:
        return Outcome.ISSUE
    if status in (404, 410):
        return Outcome.ERROR_HANDLING
    if not is_original and status == 200 and canonical_mismatch:
        return Outcome.ISSUE
    if status == 301 and fetch.location == original:
        return Outcome.INFO
    if not is_original and status == 302 and fetch.location != original:
        return Outcome.ISSUE
    if is_original and status == 200:
        return Outcome.INFO
    return Outcome.WARNINGS
