"""Historical period classification."""
from __future__ import annotations

from typing import List, Sequence

from millennium.domains.config import PERIODS, Period


def classify_period(year: int, periods: Sequence[Period] = PERIODS) -> Period:
    """First period whose inclusive range contains ``year``.

    Shared boundary years resolve to the earlier period (1500 -> medieval).
    Years outside every range get a one-year 'other' period.
    """
    for period in periods:
        if period.contains(year):
            return period
    return Period("other", "Other", year, year)


def period_keys(periods: Sequence[Period] = PERIODS) -> List[str]:
    return [p.key for p in periods]


def get_period(key: str, periods: Sequence[Period] = PERIODS) -> Period:
    for period in periods:
        if period.key == key:
            return period
    raise KeyError(f"Unknown period '{key}'. Available: {', '.join(period_keys(periods))}")
