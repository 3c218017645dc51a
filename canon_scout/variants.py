# File: canon_scout/variants.py
"""canon_scout.variants: генерация структурных вариантов URL для проверки канонизации.

Каждый вариант моделирует реальную ошибку канонизации: http/https, слеш на
конце, регистр пути, www/без www, трекинговые параметры, staging-поддомены.
Результат — упорядоченная последовательность без дубликатов, первым всегда
идёт исходный URL.
"""

from __future__ import annotations

import random
import re
import string
from typing import Callable, List, Optional, Sequence
from urllib.parse import SplitResult, quote, unquote, urlsplit, urlunsplit

__all__: Sequence[str] = (
    "TokenFactory",
    "generate_variants",
    "normalize_original",
    "random_token",
)

TokenFactory = Callable[[], str]

_TOKEN_ALPHABET = string.ascii_lowercase + string.digits
# то же множество символов, что оставляет нетронутым encodeURI
_ENCODE_URI_SAFE = ";,/?:@&=+$!*'()#"


def random_token(rng: Optional[random.Random] = None) -> str:
    """Случайный токен из 8–13 символов ``[a-z0-9]`` для негативного контроля."""
    source = rng if rng is not None else random
    length = source.randint(8, 13)
    return "".join(source.choice(_TOKEN_ALPHABET) for _ in range(length))


def normalize_original(url: str) -> str:
    """Корневой URL всегда заканчивается слешем: ``https://a.b`` -> ``https://a.b/``."""
    parts = urlsplit(url)
    if parts.path == "":
        return urlunsplit(parts._replace(path="/"))
    return url


def _host(parts: SplitResult) -> str:
    host = parts.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    return host


def _host_port(parts: SplitResult) -> str:
    """netloc без userinfo."""
    return parts.netloc.rpartition("@")[2]


def _origin(parts: SplitResult) -> str:
    origin = f"{parts.scheme}://{_host(parts)}"
    if parts.port is not None:
        origin += f":{parts.port}"
    return origin


def _tail(parts: SplitResult) -> str:
    tail = parts.path
    if parts.query:
        tail += f"?{parts.query}"
    if parts.fragment:
        tail += f"#{parts.fragment}"
    return tail


def _prefix_host(original: str, parts: SplitResult, prefix: str) -> str:
    userinfo, sep, host_port = parts.netloc.rpartition("@")
    return original.replace(parts.netloc, f"{userinfo}{sep}{prefix}{host_port}", 1)


def _strip_www(original: str, parts: SplitResult) -> str:
    userinfo, sep, host_port = parts.netloc.rpartition("@")
    stripped = re.sub(r"^www\.", "", host_port, count=1, flags=re.IGNORECASE)
    return original.replace(parts.netloc, f"{userinfo}{sep}{stripped}", 1)


def _case_variants(origin: str, parts: SplitResult, segments: List[str]) -> List[str]:
    tail = _tail(parts)
    variants = [
        origin + tail.lower(),
        origin + tail.upper(),
        f"{origin}/" + "/".join(s[:1].upper() + s[1:].lower() for s in segments),
    ]
    for index, segment in enumerate(segments):
        for transform in (str.upper, str.lower):
            changed = list(segments)
            changed[index] = transform(segment)
            variants.append(f"{origin}/" + "/".join(changed))
    return variants


def generate_variants(original: str, *, token_factory: Optional[TokenFactory] = None) -> List[str]:
    """Возвращает варианты *original* без дубликатов, сохраняя порядок генерации.

    Parameters
    ----------
    original
        Абсолютный URL, уже прошедший :func:`normalize_original`.
    token_factory
        Источник случайного сегмента для варианта, который должен отдать 404.
        По умолчанию :func:`random_token`; в тестах подставляется константа.
    """
    token_factory = token_factory or random_token
    parts = urlsplit(original)
    origin = _origin(parts)
    hostname = parts.hostname or ""
    host_port = _host_port(parts)
    path = parts.path or "/"
    segments = [s for s in parts.path.split("/") if s]

    candidates: List[str] = [
        original,
        re.sub(r"/$", "", original),
        original if original.endswith("/") else f"{original}/",
    ]
    candidates.extend(_case_variants(origin, parts, segments))
    candidates.extend(
        [
            re.sub(r"/+", "//", original),
            original.replace("https:", "http:", 1),
            original.replace("http:", "https:", 1),
        ]
    )

    if hostname.startswith("www."):
        candidates.append(_strip_www(original, parts))
    else:
        candidates.append(_prefix_host(original, parts, "www."))

    candidates.append(f"{original}?key=value")
    if parts.query:
        candidates.append(original.replace(f"?{parts.query}", "", 1))
    candidates.append(f"{original}?wrong=value")

    candidates.append(quote(original, safe=_ENCODE_URI_SAFE))
    candidates.append(unquote(original))

    candidates.append(f"{original}#section")
    if parts.fragment:
        candidates.append(original.replace(f"#{parts.fragment}", "", 1))

    candidates.append(f"{origin}/" + "/".join([*segments[:-1], token_factory()]))

    candidates.extend(
        [
            f"{parts.scheme}://{_host(parts)}:8080{path}",
            f"{parts.scheme}://user:password@{host_port}{path}",
            f"{parts.scheme}://sub.sub2.{host_port}{path}",
            f"{parts.scheme}://staging.{host_port}{path}",
        ]
    )

    return list(dict.fromkeys(candidates))
