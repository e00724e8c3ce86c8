"""
Change-point detection over the enriched GDP series.

Two sources of change points:
    1. Growth acceleration: sliding window over the GDP growth-rate series.
       At index i (with ``margin`` points kept clear at both ends) the mean
       of the ``window`` rates before i is compared with the mean of the
       ``window`` rates from i on. A point is flagged when the earlier mean is
       positive and the later mean exceeds it by ``ratio``.
    2. Curated historical events (Black Death, Bank of England, ...), always
       included whatever the data looks like.

The merged list is sorted by year (stable: detected points come before a
curated event of the same year). No de-duplication happens; when records
are annotated the first point for a year wins.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import List, Optional, Tuple

import numpy as np
import pandas as pd

from millennium.domains.config import PipelineCfg

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangePoint:
    year: int
    type: str
    description: str
    magnitude: Optional[float] = None

    def to_dict(self) -> dict:
        d = asdict(self)
        if d["magnitude"] is None:
            del d["magnitude"]
        return d


HISTORICAL_CHANGE_POINTS: Tuple[ChangePoint, ...] = (
    ChangePoint(1348, "crisis", "Black Death pandemic"),
    ChangePoint(1694, "innovation", "Bank of England founded"),
    ChangePoint(1750, "transformation", "Industrial Revolution begins"),
    ChangePoint(1914, "crisis", "World War I begins"),
    ChangePoint(1929, "crisis", "Great Depression begins"),
    ChangePoint(1971, "transformation", "End of Bretton Woods system"),
    ChangePoint(2008, "crisis", "Global Financial Crisis"),
)


def detect_growth_accelerations(
    df: pd.DataFrame,
    window: int = 10,
    margin: int = 20,
    ratio: float = 1.5,
) -> List[ChangePoint]:
    """Flag years where mean GDP growth jumps by at least ``ratio``.

    Only rows with both ``gdp_real`` and ``gdp_growth_rate`` present take
    part; indices refer to that filtered sequence.
    """
    if "gdp_real" not in df.columns or "gdp_growth_rate" not in df.columns:
        return []

    gdp = df[df["gdp_real"].notna() & df["gdp_growth_rate"].notna()]
    rates = gdp["gdp_growth_rate"].to_numpy(dtype=float)
    years = gdp["year"].to_numpy()

    points: List[ChangePoint] = []
    for i in range(margin, len(rates) - margin):
        before = float(np.mean(rates[i - window:i]))
        after = float(np.mean(rates[i:i + window]))
        if before > 0 and after > before * ratio:
            points.append(
                ChangePoint(
                    year=int(years[i]),
                    type="growth_acceleration",
                    description=f"GDP growth accelerated from {before:.1f}% to {after:.1f}%",
                    magnitude=after / before,
                )
            )
    return points


def identify_change_points(df: pd.DataFrame, cfg: Optional[PipelineCfg] = None) -> List[ChangePoint]:
    cfg = cfg or PipelineCfg()
    detected = detect_growth_accelerations(
        df, window=cfg.cp_window, margin=cfg.cp_margin, ratio=cfg.cp_ratio
    )
    merged = sorted(detected + list(HISTORICAL_CHANGE_POINTS), key=lambda cp: cp.year)
    logger.info(
        "Identified %d change points (%d detected, %d historical)",
        len(merged), len(detected), len(HISTORICAL_CHANGE_POINTS),
    )
    return merged


def attach_change_points(df: pd.DataFrame, points: List[ChangePoint]) -> pd.DataFrame:
    """Return a copy with a ``change_point`` column (first match per year)."""
    by_year = {}
    for cp in points:
        by_year.setdefault(cp.year, cp)
    df = df.copy()
    df["change_point"] = [by_year.get(int(y)) for y in df["year"]]
    return df
