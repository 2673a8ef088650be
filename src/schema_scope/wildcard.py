"""Simple glob matching where ``*`` is the only wildcard."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Pattern


@lru_cache(maxsize=1024)
def _compile(pattern: str) -> Pattern[str]:
    parts = [re.escape(part) for part in pattern.split("*")]
    return re.compile(".*".join(parts), re.DOTALL)


def match_simple(pattern: str, name: str) -> bool:
    """Return True if ``name`` matches ``pattern`` (case-sensitive)."""
    if pattern == "":
        return name == ""
    if pattern == "*":
        return True
    return _compile(pattern).fullmatch(name) is not None


def literal_length(pattern: str) -> int:
    """Number of non-wildcard characters in a pattern."""
    return len(pattern.replace("*", ""))
