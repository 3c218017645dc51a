# File: canon_scout/diff.py
"""Character-level diffs between the original URL and what a probe observed.

The output is only for people reading the HTML report: additions are green,
removals red. Classification never looks at it.
"""
from __future__ import annotations

import difflib
from typing import Optional

from markupsafe import escape

_ADDED = '<span style="color: green;">{}</span>'
_REMOVED = '<span style="color: red;">{}</span>'


def highlight_chars(base: str, other: str) -> str:
    """Render *other* against *base* with inserted/deleted runs wrapped in spans."""
    matcher = difflib.SequenceMatcher(None, base, other, autojunk=False)
    out: list[str] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            out.append(str(escape(base[i1:i2])))
            continue
        # a replace is shown as removal followed by addition
        if tag in ("delete", "replace"):
            out.append(_REMOVED.format(escape(base[i1:i2])))
        if tag in ("insert", "replace"):
            out.append(_ADDED.format(escape(other[j1:j2])))
    return "".join(out)


def highlight_difference(base: str, other: Optional[str], label: str = "") -> str:
    """Labelled diff of *other* against *base*; ``""`` when *other* is unset or equal."""
    if not other or other == base:
        return ""
    highlighted = highlight_chars(base, other)
    if label:
        return f"{label} Difference: {highlighted} "
    return f"{highlighted} "


__all__ = ["highlight_chars", "highlight_difference"]
