"""UK Millennium data pipeline.

Loads the Bank of England "millennium of data" headline sheet and turns it
into what the scrollytelling front-end consumes:

    raw rows -> parse -> enrich (growth rates, periods, change points)
             -> segment by period (+ stats) -> summary

Public API
----------
- MillenniumPipeline(cfg=None)
    .load_data(path=None) -> ProcessedData
    .process(raw_df) -> ProcessedData
    .get_data_for_period(period_key, indicators=None)
    .get_time_series_for_indicator(indicator, start_year=None, end_year=None)
    .get_population_series(min_year=1270)
    .filter_records(metric, period_key="all", require_population=False)
    .to_payload()

Every call to ``process`` recomputes everything from the raw rows.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pandas as pd

from millennium.domains.config import PipelineCfg, resolve_field
from millennium.domains.enriched.enrich_global import enrich
from millennium.domains.parse import parse
from millennium.domains.segments import PeriodSegment, segment_by_period
from millennium.domains.summary import DatasetSummary, summarize
from millennium.labels.change_points import ChangePoint
from millennium.labels.periods import get_period
from millennium.lib.df_utils import nan_to_none
from millennium.lib.io_guards import load_raw_csv

logger = logging.getLogger(__name__)


@dataclass
class ProcessedData:
    raw: pd.DataFrame
    enriched: pd.DataFrame
    periods: Dict[str, PeriodSegment]
    summary: DatasetSummary
    change_points: List[ChangePoint]


def records_to_dicts(df: pd.DataFrame) -> List[dict]:
    """Frame -> list of JSON-ready dicts (NaN -> None, ChangePoint -> dict)."""
    out = []
    for row in df.to_dict(orient="records"):
        rec = {}
        for k, v in row.items():
            if isinstance(v, ChangePoint):
                rec[k] = v.to_dict()
            else:
                rec[k] = nan_to_none(v)
        out.append(rec)
    return out


class MillenniumPipeline:
    def __init__(self, cfg: Optional[PipelineCfg] = None):
        self.cfg = cfg or PipelineCfg()
        self.raw_data: Optional[pd.DataFrame] = None
        self.processed: Optional[ProcessedData] = None

    def load_data(self, path: Path | str | None = None) -> ProcessedData:
        """Read the CSV and process it. Raises DataLoadError on load failure."""
        raw = load_raw_csv(path or self.cfg.csv_path)
        return self.process(raw)

    def process(self, raw: pd.DataFrame) -> ProcessedData:
        logger.info("Processing raw data (%d rows)", len(raw))
        self.raw_data = raw
        records = parse(raw, self.cfg)
        enriched, change_points = enrich(records, self.cfg)
        periods = segment_by_period(enriched, self.cfg)
        summary = summarize(enriched)
        self.processed = ProcessedData(
            raw=records,
            enriched=enriched,
            periods=periods,
            summary=summary,
            change_points=change_points,
        )
        return self.processed

    # ------------------------------------------------------------------
    # Query helpers for the rendering layer
    # ------------------------------------------------------------------
    def get_data_for_period(
        self, period_key: str, indicators: Optional[Sequence[str]] = None
    ) -> Optional[pd.DataFrame]:
        if self.processed is None or period_key not in self.processed.periods:
            return None
        data = self.processed.periods[period_key].data
        if not indicators:
            return data
        cols = ["year"] + [resolve_field(k) for k in indicators]
        return data[cols].copy()

    def get_time_series_for_indicator(
        self,
        indicator: str,
        start_year: Optional[int] = None,
        end_year: Optional[int] = None,
    ) -> Optional[List[dict]]:
        if self.processed is None:
            return None
        df = self.processed.enriched
        column = resolve_field(indicator)
        data = df[df[column].notna()]
        if start_year is not None:
            data = data[data["year"] >= start_year]
        if end_year is not None:
            data = data[data["year"] <= end_year]
        return [{"year": int(y), "value": float(v)} for y, v in zip(data["year"], data[column])]

    def get_population_series(self, min_year: int = 1270) -> Optional[List[dict]]:
        """GB+NI population, falling back to England-only where it is missing."""
        if self.processed is None:
            return None
        df = self.processed.enriched
        value = df["population"].fillna(df["population_england"])
        mask = value.notna() & (df["year"] >= min_year)
        return [
            {"year": int(y), "value": float(v)}
            for y, v in zip(df.loc[mask, "year"], value[mask])
        ]

    def filter_records(
        self, metric: str, period_key: str = "all", require_population: bool = False
    ) -> Optional[pd.DataFrame]:
        """Records where ``metric`` is present, optionally within one period."""
        if self.processed is None:
            return None
        df = self.processed.enriched
        column = resolve_field(metric)
        mask = df[column].notna()
        if require_population:
            mask &= df["population"].notna()
        if period_key != "all":
            period = get_period(period_key)
            mask &= (df["year"] >= period.start) & (df["year"] <= period.end)
        return df[mask].reset_index(drop=True)

    def to_payload(self) -> dict:
        if self.processed is None:
            return {}
        p = self.processed
        periods = {}
        for key, seg in p.periods.items():
            periods[key] = {
                **seg.period.to_dict(),
                "data": records_to_dicts(seg.data),
                "change_points": [cp.to_dict() for cp in seg.change_points],
                "stats": seg.stats.to_dict() if seg.stats else None,
            }
        return {
            "raw": records_to_dicts(p.raw),
            "enriched": records_to_dicts(p.enriched),
            "periods": periods,
            "summary": p.summary.to_dict(),
        }


def run_pipeline(path: Path | str | None = None, cfg: Optional[PipelineCfg] = None) -> MillenniumPipeline:
    pipeline = MillenniumPipeline(cfg)
    pipeline.load_data(path)
    return pipeline


__all__ = ["MillenniumPipeline", "ProcessedData", "run_pipeline", "records_to_dicts"]
