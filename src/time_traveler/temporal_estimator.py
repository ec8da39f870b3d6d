from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence, Tuple

DEFAULT_START_YEAR = 1000
DEFAULT_DURATION = 100

# First matching keyword wins. "world war ii" sits before "world war i"
# because the latter is a prefix of the former.
START_YEAR_KEYWORDS: Sequence[Tuple[Tuple[str, ...], int]] = (
    (("stone age",), -10_000),
    (("bronze age", "ancient", "prehistoric"), -3000),
    (("iron age",), -1200),
    (("classical", "greece", "roman"), -800),
    (("medieval", "middle ages"), 500),
    (("viking",), 800),
    (("crusade",), 1095),
    (("renaissance",), 1400),
    (("reformation",), 1517),
    (("enlightenment",), 1650),
    (("industrial revolution",), 1760),
    (("world war ii", "second world war"), 1939),
    (("world war i", "first world war"), 1914),
    (("cold war",), 1947),
)

# (keywords, excluded keywords, duration), highest priority first.
DURATION_RULES: Sequence[Tuple[Tuple[str, ...], Tuple[str, ...], int]] = (
    (("dynasty",), (), 200),
    (("age", "period"), (), 300),
    (("industrial revolution",), (), 100),
    (("revolution",), ("industrial",), 15),
    (("world war",), (), 6),
    (("war",), ("world war",), 10),
    (("empire", "civilization"), (), 500),
)


def estimate_start_year(title: str) -> int:
    lowered = title.lower()
    for keywords, year in START_YEAR_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return year
    return DEFAULT_START_YEAR


def estimate_duration(title: str) -> int:
    lowered = title.lower()
    for keywords, excluded, duration in DURATION_RULES:
        if any(keyword in lowered for keyword in keywords) and not any(
            word in lowered for word in excluded
        ):
            return duration
    return DEFAULT_DURATION


def estimate_end_year(title: str, start_year: int, current_year: Optional[int] = None) -> int:
    """Estimate when a topic ended, never later than the current year."""
    now = current_year if current_year is not None else datetime.now().year
    end_year = start_year + estimate_duration(title)
    return max(start_year, min(end_year, now))
