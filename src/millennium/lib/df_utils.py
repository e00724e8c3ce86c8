"""Dataframe helper utilities: value parsing, strict growth rates, availability.

These are small helpers shared by the parse, enrichment and segmentation
stages.
"""
from __future__ import annotations

import math
from typing import Iterable

import numpy as np
import pandas as pd

_MISSING_TOKENS = ["", "n/a"]


def parse_values(s: pd.Series) -> pd.Series:
    """Indicator cells -> float; empty, 'n/a' or non-numeric -> NaN."""
    text = s.astype(str).str.strip()
    return pd.to_numeric(text.mask(text.isin(_MISSING_TOKENS)), errors="coerce").astype(float)


def parse_years(s: pd.Series) -> pd.Series:
    """Leading integer of each cell ('1209', '1209.0' -> 1209); NaN when there is none."""
    lead = s.astype(str).str.extract(r"^\s*([+-]?\d+)", expand=False)
    return pd.to_numeric(lead, errors="coerce").astype(float)


def pct_change_strict(s: pd.Series) -> pd.Series:
    """Percent change against the immediately preceding row.

    Unlike ``Series.pct_change`` no forward-filling happens: a NaN on either
    side (or a zero denominator) yields NaN. The first row is always NaN.
    """
    s = s.astype(float).reset_index(drop=True)
    prev = s.shift(1)
    out = (s - prev) / prev * 100.0
    out[prev.isna() | s.isna() | (prev == 0)] = np.nan
    return out


def availability(df: pd.DataFrame, cols: Iterable[str]) -> pd.Series:
    """Non-null fraction per column (0.0 for an empty frame or absent column)."""
    cols = list(cols)
    if len(df) == 0:
        return pd.Series([0.0] * len(cols), index=cols, dtype=float)
    return pd.Series(
        [float(df[c].notna().mean()) if c in df.columns else 0.0 for c in cols],
        index=cols,
        dtype=float,
    )


def round_half_up(x: float) -> int:
    return int(np.floor(x + 0.5))


def nan_to_none(v):
    if isinstance(v, (float, np.floating)) and math.isnan(v):
        return None
    if isinstance(v, np.integer):
        return int(v)
    if isinstance(v, np.floating):
        return float(v)
    return v
