"""Dataset-wide summary and 'dramatic change' narratives."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import pandas as pd

from millennium.domains.config import INDICATORS
from millennium.labels.periods import period_keys
from millennium.lib.df_utils import round_half_up

logger = logging.getLogger(__name__)


@dataclass
class DramaticChange:
    indicator: str
    multiplier: float
    start_year: int
    end_year: int
    description: str

    def to_dict(self) -> dict:
        return dict(self.__dict__)


@dataclass
class DatasetSummary:
    total_years: int
    year_range: Optional[Tuple[int, int]]
    indicators: List[str]
    periods: List[str]
    dramatic_changes: List[DramaticChange] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.total_years == 0

    def to_dict(self) -> dict:
        return {
            "total_years": self.total_years,
            "year_range": list(self.year_range) if self.year_range else None,
            "indicators": list(self.indicators),
            "periods": list(self.periods),
            "dramatic_changes": [c.to_dict() for c in self.dramatic_changes],
        }


def _first_last(df: pd.DataFrame, column: str):
    if column not in df.columns:
        return None
    # zero values carry no ratio
    points = df[df[column].notna() & (df[column] != 0)]
    if points.empty:
        return None
    return points.iloc[0], points.iloc[-1]


def summarize(df: pd.DataFrame) -> DatasetSummary:
    """Summarize the enriched records.

    An empty frame yields an empty summary (no year range, no narratives)
    rather than an error.
    """
    summary = DatasetSummary(
        total_years=len(df),
        year_range=None,
        indicators=INDICATORS.keys(),
        periods=period_keys(),
    )
    if df.empty:
        logger.warning("No records to summarize; returning empty summary")
        return summary

    summary.year_range = (int(df["year"].iloc[0]), int(df["year"].iloc[-1]))

    gdp = _first_last(df, "gdp_real")
    if gdp is not None:
        first, last = gdp
        ratio = float(last["gdp_real"]) / float(first["gdp_real"])
        y0, y1 = int(first["year"]), int(last["year"])
        summary.dramatic_changes.append(
            DramaticChange(
                indicator="GDP",
                multiplier=ratio,
                start_year=y0,
                end_year=y1,
                description=f"Real GDP grew {round_half_up(ratio):,}x from {y0} to {y1}",
            )
        )

    pop = _first_last(df, "population")
    if pop is not None:
        first, last = pop
        ratio = float(last["population"]) / float(first["population"])
        y0, y1 = int(first["year"]), int(last["year"])
        summary.dramatic_changes.append(
            DramaticChange(
                indicator="Population",
                multiplier=ratio,
                start_year=y0,
                end_year=y1,
                description=f"Population grew {round_half_up(ratio)}x from {y0} to {y1}",
            )
        )

    for change in summary.dramatic_changes:
        logger.info("Dramatic change: %s", change.description)
    return summary
