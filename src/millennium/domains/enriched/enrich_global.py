"""Enrichment step over the parsed year records.

Adds to a copy of the parsed frame:
- ``gdp_growth_rate``, ``population_growth_rate``, ``inflation_rate``:
  percent change against the immediately preceding record, only where both
  values are present. The first record never gets a rate.
- ``period`` / ``period_name``: the narrative period of the year.
- ``change_point``: the change point for that year, or None.

The input frame is never modified.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Tuple

import numpy as np
import pandas as pd

from millennium.domains.config import GROWTH_RATES, PipelineCfg
from millennium.labels.change_points import (
    ChangePoint,
    attach_change_points,
    identify_change_points,
)
from millennium.labels.periods import classify_period
from millennium.lib.df_utils import pct_change_strict

logger = logging.getLogger(__name__)


def enrich(
    records: pd.DataFrame, cfg: Optional[PipelineCfg] = None
) -> Tuple[pd.DataFrame, List[ChangePoint]]:
    cfg = cfg or PipelineCfg()
    df = records.copy().reset_index(drop=True)

    for source, target in GROWTH_RATES:
        if source in df.columns:
            df[target] = pct_change_strict(df[source]).values
        else:
            df[target] = np.nan

    periods = [classify_period(int(y)) for y in df["year"]]
    df["period"] = [p.key for p in periods]
    df["period_name"] = [p.name for p in periods]

    change_points = identify_change_points(df, cfg)
    df = attach_change_points(df, change_points)

    logger.info(
        "Enriched %d records: gdp_growth=%d population_growth=%d inflation=%d",
        len(df),
        int(df["gdp_growth_rate"].notna().sum()),
        int(df["population_growth_rate"].notna().sum()),
        int(df["inflation_rate"].notna().sum()),
    )
    return df, change_points


__all__ = ["enrich", "GROWTH_RATES"]
