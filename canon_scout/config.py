"""
Модуль для загрузки и валидации конфигурации CanonScout.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProbeConfig(BaseModel):
    """Настройки одного запуска проверки канонических URL."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    timeout: float = Field(10.0, gt=0, description="Таймаут на один запрос (секунд).")
    user_agent: str = Field("CanonScoutBot/1.0", min_length=1, description="Заголовок User-Agent.")
    concurrency: int = Field(5, ge=1, description="Сколько вариантов проверяется одновременно.")
    verify_ssl: bool = Field(True, description="Проверять TLS-сертификаты.")
    max_body_bytes: int = Field(
        2 * 1024 * 1024, ge=1, description="Сколько байт HTML читать для поиска canonical."
    )

    @field_validator("user_agent", mode="before")
    def _strip_user_agent(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> ProbeConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект ProbeConfig.

    Без явного пути используется configs/default.yaml, а если его нет —
    значения по умолчанию. Явно указанный, но отсутствующий файл даёт
    FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return ProbeConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    return ProbeConfig(**data)


__all__ = ["ProbeConfig", "load_config"]
