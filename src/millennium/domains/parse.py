"""Parse raw CSV rows into typed, year-indexed records."""
from __future__ import annotations

import logging
from typing import Optional

import numpy as np
import pandas as pd

from millennium.domains.config import INDICATORS, IndicatorSet, PipelineCfg
from millennium.lib.df_utils import parse_values, parse_years

logger = logging.getLogger(__name__)


def _year_column(raw: pd.DataFrame, cfg: PipelineCfg) -> Optional[str]:
    if cfg.year_column in raw.columns:
        return cfg.year_column
    # the first column holds the year even when its header differs
    return raw.columns[0] if len(raw.columns) else None


def parse(
    raw: pd.DataFrame,
    cfg: Optional[PipelineCfg] = None,
    indicators: IndicatorSet = INDICATORS,
) -> pd.DataFrame:
    """Return one row per valid year in [min_year, max_year], sorted by year.

    Rows whose year cell is not numeric (header/metadata rows of the source
    sheet) are dropped silently. Indicator cells that are empty, 'n/a' or
    unparsable become NaN. Missing indicator columns are all-NaN.
    """
    cfg = cfg or PipelineCfg()
    columns = ["year"] + indicators.keys()

    ycol = _year_column(raw, cfg)
    if ycol is None or raw.empty:
        logger.warning("Raw data has no rows or columns; nothing to parse")
        return pd.DataFrame({c: pd.Series(dtype=float) for c in columns}).astype({"year": int})

    years = parse_years(raw[ycol])
    skipped = years.isna()
    if skipped.any():
        preview = raw.loc[skipped, ycol].head(5).tolist()
        logger.debug("Skipping %d non-year rows, e.g. %s", int(skipped.sum()), preview)

    out = pd.DataFrame({"year": years})
    for key, column in indicators:
        if column in raw.columns:
            out[key] = parse_values(raw[column]).values
        else:
            logger.debug("Column '%s' (%s) not in source; filling NaN", column, key)
            out[key] = np.nan

    out = out[~skipped]
    out = out[(out["year"] >= cfg.min_year) & (out["year"] <= cfg.max_year)]
    out = out.assign(year=out["year"].astype(int))

    # stable sort keeps source order among equal years
    out = out.sort_values("year", kind="mergesort")
    dupes = out["year"].duplicated(keep="first")
    if dupes.any():
        logger.warning(
            "Dropping %d duplicate year rows: %s",
            int(dupes.sum()),
            sorted(set(out.loc[dupes, "year"].tolist())),
        )
        out = out[~dupes]
    out = out.reset_index(drop=True)[columns]

    if len(out):
        logger.info(
            "Processed %d years of data (%d-%d)",
            len(out), int(out["year"].iloc[0]), int(out["year"].iloc[-1]),
        )
    else:
        logger.warning("No rows with a year in [%d, %d]", cfg.min_year, cfg.max_year)
    return out


__all__ = ["parse"]
