# === FILE: canon_scout/logger.py ===
"""Логирование CanonScout.

Один именованный логгер на весь инструмент. Консольный вывод идёт в stderr:
stdout принадлежит результатам (``canon-scout probe`` без файлов печатает туда JSON).

    from canon_scout.logger import logger
    logger.info("Audit started")
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import IO, Optional, Union

LOGGER_NAME = "CanonScout"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(message)s"

# ротация файла логов: 5 MiB x 3
_MAX_LOG_BYTES = 5 * 1024 * 1024
_LOG_BACKUPS = 3


def configure(
    level: Union[int, str] = "INFO",
    log_file: Union[str, Path, None] = None,
    log_format: str = DEFAULT_FORMAT,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """Перенастраивает логгер ``CanonScout``, заменяя все его обработчики.

    ``stream`` по умолчанию — текущий ``sys.stderr`` (берётся в момент вызова,
    чтобы подменённые потоки, например в CliRunner, тоже работали).
    ``log_file`` добавляет ротируемый файл в дополнение к консоли.
    """
    formatter = logging.Formatter(log_format)
    handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stderr)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(
                str(log_file), maxBytes=_MAX_LOG_BYTES, backupCount=_LOG_BACKUPS, encoding="utf-8"
            )
        )

    lg = logging.getLogger(LOGGER_NAME)
    for old in list(lg.handlers):
        lg.removeHandler(old)
        old.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        lg.addHandler(handler)
    lg.setLevel(level)
    lg.propagate = False
    return lg


logger: logging.Logger = configure()

__all__ = ["DEFAULT_FORMAT", "LOGGER_NAME", "configure", "logger"]
