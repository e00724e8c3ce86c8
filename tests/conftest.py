import sys
from pathlib import Path

import pandas as pd
import pytest

# Ensure src is importable during tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT / "src") not in sys.path:
    sys.path.insert(0, str(ROOT / "src"))

from millennium.domains.config import INDICATORS  # noqa: E402


def make_raw(rows):
    """Build a raw (all-text) frame shaped like the source sheet.

    ``rows`` is a list of dicts with a 'year' entry and indicator keys;
    indicator columns not given are left as empty strings.
    """
    records = []
    for r in rows:
        rec = {"Description": str(r["year"])}
        for key, column in INDICATORS:
            v = r.get(key, "")
            rec[column] = "" if v is None else str(v)
        records.append(rec)
    columns = ["Description"] + INDICATORS.columns()
    return pd.DataFrame(records, columns=columns)


def write_raw_csv(path: Path, rows, header_rows=("Units", "Source")) -> Path:
    """Write a CSV with a few non-year metadata rows on top, like the real sheet."""
    df = make_raw(rows)
    meta = pd.DataFrame([{c: label for c in df.columns} for label in header_rows])
    meta["Description"] = list(header_rows)
    path.parent.mkdir(parents=True, exist_ok=True)
    pd.concat([meta, df], ignore_index=True).to_csv(path, index=False)
    return path


@pytest.fixture
def make_raw_frame():
    return make_raw


@pytest.fixture
def raw_csv(tmp_path):
    def _write(rows, name="millennium.csv"):
        return write_raw_csv(tmp_path / name, rows)

    return _write


@pytest.fixture
def long_raw():
    """1209..2016 with GDP everywhere, population from 1300 and CPI from 1700."""
    rows = []
    gdp = 1000.0
    for year in range(1209, 2017):
        # 0.5% growth until 1800, then 2%
        gdp *= 1.02 if year > 1800 else 1.005
        row = {"year": year, "gdp_real": round(gdp, 6)}
        if year >= 1300:
            row["population"] = 3000 + (year - 1300) * 10
        if year >= 1700:
            row["cpi"] = 1 + (year - 1700) * 0.1
        rows.append(row)
    return make_raw(rows)
