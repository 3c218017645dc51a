# File: canon_scout/prober/__init__.py
"""canon_scout.prober: проверка вариантов URL и классификация результата."""

from .classifier import classify
from .models import FetchResult, Outcome, ProbeResult
from .probe import UrlProber, extract_canonical, fetch_variant, probe

__all__ = [
    "FetchResult",
    "Outcome",
    "ProbeResult",
    "UrlProber",
    "classify",
    "extract_canonical",
    "fetch_variant",
    "probe",
]
