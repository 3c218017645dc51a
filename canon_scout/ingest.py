# File: canon_scout/ingest.py
"""canon_scout.ingest: чтение и проверка списка исходных URL до запуска проверки."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from pydantic import HttpUrl, TypeAdapter, ValidationError

from canon_scout.logger import logger

__all__: Sequence[str] = (
    "InvalidUrlError",
    "collect_urls",
    "read_url_list",
    "remove_duplicates",
    "validate_url",
)

_HTTP_URL = TypeAdapter(HttpUrl)


class InvalidUrlError(ValueError):
    """URL не разбирается как абсолютный http(s)-адрес."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Invalid URL {url!r}: {reason}")
        self.url = url
        self.reason = reason


def validate_url(url: str) -> str:
    """Проверяет URL и возвращает его без изменений (только обрезав пробелы)."""
    candidate = url.strip()
    try:
        _HTTP_URL.validate_python(candidate)
    except ValidationError as exc:
        raise InvalidUrlError(candidate, exc.errors()[0]["msg"]) from exc
    return candidate


def remove_duplicates(urls: Iterable[str]) -> List[str]:
    """Удаляет дубликаты из списка URL, сохраняя порядок."""
    items = list(urls)
    unique = list(dict.fromkeys(items))
    removed = len(items) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique


def read_url_list(path: Union[str, Path]) -> List[str]:
    """Читает файл со списком URL: по одному на строку, пустые строки и ``#``-комментарии пропускаются."""
    p = Path(path).expanduser()
    if not p.is_file():
        logger.error("URL list not found: %s", p)
        raise FileNotFoundError(f"URL list file not found: {p}")
    lines = [line.strip() for line in p.read_text(encoding="utf-8").splitlines()]
    urls = [line for line in lines if line and not line.startswith("#")]
    logger.debug("Loaded %d URLs from %s", len(urls), p)
    return urls


def collect_urls(urls: Iterable[str] = (), file: Optional[Union[str, Path]] = None) -> List[str]:
    """Объединяет URL из аргументов и файла, проверяет каждый и убирает повторы."""
    collected = list(urls)
    if file is not None:
        collected.extend(read_url_list(file))
    return remove_duplicates(validate_url(u) for u in collected)
