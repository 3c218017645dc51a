# canon_scout/prober/models.py
"""
Data models for the CanonScout prober.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class Outcome(str, Enum):
    """Classification of one probed variant; the value is the report field name."""

    ISSUE = "issue"
    ERROR_HANDLING = "errorHandling"
    WARNINGS = "warnings"
    INFO = "info"


@dataclass(slots=True, frozen=True)
class FetchResult:
    """What a single GET observed, before any classification."""

    successful: bool
    duration_ms: int
    status: Optional[int] = None
    robots_header: Optional[str] = None
    link_header: Optional[str] = None
    location: Optional[str] = None
    html_canonical: Optional[str] = None


@dataclass(slots=True, frozen=True)
class ProbeResult:
    """One record per (original URL, variant) pair."""

    original_url: str
    url_variation: str
    outcome: Outcome
    fetch: FetchResult
    url_difference: str = ""
    difference: str = ""

    @property
    def status_code(self) -> Optional[int]:
        return self.fetch.status

    @property
    def successful_fetch(self) -> bool:
        return self.fetch.successful

    def to_dict(self) -> Dict[str, Any]:
        """Every report field, ``None``/``""`` when absent."""
        return {
            "original_url": self.original_url,
            "url_variation": self.url_variation,
            "url_difference": self.url_difference,
            "statusCode": self.fetch.status,
            "robotsHeader": self.fetch.robots_header,
            "linkRelCanonicalHeader": self.fetch.link_header,
            "htmlCanonicalTag": self.fetch.html_canonical,
            "redirectLocation": self.fetch.location,
            "difference": self.difference,
            "successfulFetch": self.fetch.successful,
            "fetchDuration": self.fetch.duration_ms,
            **{flag.value: flag is self.outcome for flag in Outcome},
        }
