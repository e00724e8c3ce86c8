"""Period segmentation and per-period statistics."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from millennium.domains.config import INDICATORS, PERIODS, Period, PipelineCfg
from millennium.labels.change_points import ChangePoint
from millennium.lib.df_utils import availability, nan_to_none

logger = logging.getLogger(__name__)


@dataclass
class PeriodTrend:
    total_growth: float
    annual_growth: float
    start_year: int
    end_year: int
    start_value: float
    end_value: float
    multiplier: float

    def to_dict(self) -> dict:
        return {k: nan_to_none(v) for k, v in self.__dict__.items()}


@dataclass
class PeriodStats:
    years: int
    data_quality: str
    availability: float
    available_indicators: List[str]
    key_trends: Dict[str, PeriodTrend] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "years": self.years,
            "data_quality": self.data_quality,
            "availability": nan_to_none(self.availability),
            "available_indicators": list(self.available_indicators),
            "key_trends": {k: t.to_dict() for k, t in self.key_trends.items()},
        }


@dataclass
class PeriodSegment:
    period: Period
    data: pd.DataFrame
    change_points: List[ChangePoint]
    stats: Optional[PeriodStats] = None

    @property
    def key(self) -> str:
        return self.period.key


def mean_availability(period_data: pd.DataFrame, indicators: Sequence[str]) -> float:
    scores = availability(period_data, indicators)
    return float(scores.mean()) if len(scores) else 0.0


def assess_data_quality(
    period_data: pd.DataFrame,
    indicators: Optional[Sequence[str]] = None,
    cfg: Optional[PipelineCfg] = None,
) -> str:
    """'high' above 0.8 mean availability, 'medium' above 0.4, else 'low'."""
    cfg = cfg or PipelineCfg()
    avg = mean_availability(period_data, indicators or INDICATORS.keys())
    if avg > cfg.quality_high:
        return "high"
    if avg > cfg.quality_medium:
        return "medium"
    return "low"


def get_available_indicators(
    period_data: pd.DataFrame, indicators: Optional[Sequence[str]] = None
) -> List[str]:
    indicators = list(indicators or INDICATORS.keys())
    return [k for k in indicators if k in period_data.columns and period_data[k].notna().any()]


def _trend(period_data: pd.DataFrame, column: str, min_points: int) -> Optional[PeriodTrend]:
    # first/last of the non-null sequence, not of the calendar period
    points = period_data[period_data[column].notna()]
    if len(points) <= min_points:
        return None
    first, last = points.iloc[0], points.iloc[-1]
    start, end = float(first[column]), float(last[column])
    span = int(last["year"]) - int(first["year"])
    multiplier = end / start if start else np.nan
    if span > 0 and start and multiplier >= 0:
        annual = (np.power(multiplier, 1.0 / span) - 1.0) * 100.0
    else:
        annual = np.nan
    return PeriodTrend(
        total_growth=(end - start) / start * 100.0 if start else np.nan,
        annual_growth=float(annual),
        start_year=int(first["year"]),
        end_year=int(last["year"]),
        start_value=start,
        end_value=end,
        multiplier=float(multiplier),
    )


def calculate_period_trends(
    period_data: pd.DataFrame, cfg: Optional[PipelineCfg] = None
) -> Dict[str, PeriodTrend]:
    cfg = cfg or PipelineCfg()
    trends: Dict[str, PeriodTrend] = {}
    gdp = _trend(period_data, "gdp_real", cfg.gdp_trend_min)
    if gdp is not None:
        trends["gdp"] = gdp
    population = _trend(period_data, "population", cfg.population_trend_min)
    if population is not None:
        trends["population"] = population
    return trends


def segment_by_period(
    df: pd.DataFrame,
    cfg: Optional[PipelineCfg] = None,
    periods: Sequence[Period] = PERIODS,
) -> Dict[str, PeriodSegment]:
    """Slice the enriched frame by period, boundaries inclusive on both ends.

    A boundary year (e.g. 1500) appears in both neighbouring segments.
    """
    cfg = cfg or PipelineCfg()
    indicators = INDICATORS.keys()
    segmented: Dict[str, PeriodSegment] = {}

    for period in periods:
        mask = (df["year"] >= period.start) & (df["year"] <= period.end)
        data = df[mask].reset_index(drop=True)
        if "change_point" in data.columns:
            cps = [cp for cp in data["change_point"] if cp is not None]
        else:
            cps = []

        stats = None
        if len(data):
            stats = PeriodStats(
                years=len(data),
                data_quality=assess_data_quality(data, indicators, cfg),
                availability=mean_availability(data, indicators),
                available_indicators=get_available_indicators(data, indicators),
                key_trends=calculate_period_trends(data, cfg),
            )
            logger.info(
                "Period %s: %d years, quality=%s, indicators=%d",
                period.key, len(data), stats.data_quality, len(stats.available_indicators),
            )
        else:
            logger.warning("Period %s has no data", period.key)

        segmented[period.key] = PeriodSegment(period=period, data=data, change_points=cps, stats=stats)

    return segmented
