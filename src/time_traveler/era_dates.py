from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

ERA_SIGNS = {
    "BCE": -1,
    "BC": -1,
    "CE": 1,
    "AD": 1,
}

YEAR_REGEX = re.compile(r"\b(?P<year>\d{1,4})\s*(?P<era>BCE|BC|CE|AD)?\b")

PERIOD_SEPARATOR = " - "


@dataclass(frozen=True)
class YearRange:
    start: Optional[int] = None
    end: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        return self.start is None or self.end is None


def _signed_year(raw_year: str, era: Optional[str]) -> Optional[int]:
    magnitude = int(raw_year)
    # There is no year zero; a bare "0" is never a usable year.
    if magnitude == 0:
        return None
    return magnitude * ERA_SIGNS.get(era or "AD", 1)


def iter_years(text: str) -> Iterable[int]:
    """Yield every signed year found in ``text`` in reading order.

    A bare number without an era marker counts as AD.
    """
    if not text:
        return
    for match in YEAR_REGEX.finditer(text):
        year = _signed_year(match.group("year"), match.group("era"))
        if year is not None:
            yield year


def extract_year_range(text: str) -> YearRange:
    years: List[int] = list(iter_years(text))
    if not years:
        return YearRange()
    return YearRange(start=min(years), end=max(years))


def first_year(text: str) -> Optional[int]:
    return next(iter(iter_years(text)), None)


def format_year(year: int) -> str:
    if year < 0:
        return f"{abs(year)} BC"
    return f"{year} AD"


def format_period(start_year: int, end_year: int) -> str:
    if start_year == end_year:
        return format_year(start_year)
    return f"{format_year(start_year)}{PERIOD_SEPARATOR}{format_year(end_year)}"
