"""Static configuration: indicator columns, narrative periods and thresholds."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Tuple


# Bank of England "A millennium of macroeconomic data" headline columns.
# Order matters: it is the iteration order for every per-indicator step.
_INDICATOR_COLUMNS: Tuple[Tuple[str, str], ...] = (
    # Real GDP of England at market prices (2013 prices), £mn
    ("gdp_real", "Real GDP of England at market prices"),
    ("population", "Population (GB+NI)"),
    ("population_england", "Population (England)"),
    ("cpi", "Consumer price index"),
    ("wages", "Real consumption wages"),
    ("gov_spending", "Public sector Total Managed Expenditure.1"),
    ("public_debt", "UK Public sector debt.1"),
    ("interest_rates", "Bank Rate"),
    ("trade_balance", "Trade deficit.1"),
    # modern series, only populated for recent years
    ("unemployment", "Unemployment rate"),
    ("house_price", "House price index"),
)


def _camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(p.capitalize() for p in rest)


class IndicatorSet:
    """Fixed, ordered mapping of indicator key -> source column name.

    Keys are snake_case; the camelCase spelling used by the front-end
    (``gdpReal``, ``housePrice``) resolves to the same key.
    """

    def __init__(self, pairs: Tuple[Tuple[str, str], ...] = _INDICATOR_COLUMNS):
        self._pairs = tuple(pairs)
        self._aliases: Dict[str, str] = {}
        for key, _ in self._pairs:
            self._aliases[key] = key
            self._aliases[_camel(key)] = key

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    def __contains__(self, key: object) -> bool:
        return key in self._aliases

    def keys(self) -> List[str]:
        return [k for k, _ in self._pairs]

    def columns(self) -> List[str]:
        return [c for _, c in self._pairs]

    def resolve(self, key: str) -> str:
        try:
            return self._aliases[key]
        except KeyError:
            raise KeyError(
                f"Unknown indicator '{key}'. Available: {', '.join(self.keys())}"
            ) from None


INDICATORS = IndicatorSet()

# source indicator -> derived rate column
GROWTH_RATES: Tuple[Tuple[str, str], ...] = (
    ("gdp_real", "gdp_growth_rate"),
    ("population", "population_growth_rate"),
    ("cpi", "inflation_rate"),
)

_DERIVED_ALIASES: Dict[str, str] = {}
for _, _rate in GROWTH_RATES:
    _DERIVED_ALIASES[_rate] = _rate
    _DERIVED_ALIASES[_camel(_rate)] = _rate


def resolve_field(key: str, indicators: IndicatorSet = INDICATORS) -> str:
    """Numeric record column for a query key.

    Accepts the indicator keys and the derived rate columns, in snake_case
    or camelCase. Anything else (including non-numeric columns such as
    ``period``) raises KeyError.
    """
    if key in indicators:
        return indicators.resolve(key)
    if key in _DERIVED_ALIASES:
        return _DERIVED_ALIASES[key]
    available = indicators.keys() + [rate for _, rate in GROWTH_RATES]
    raise KeyError(f"Unknown indicator '{key}'. Available: {', '.join(available)}")


@dataclass(frozen=True)
class Period:
    key: str
    name: str
    start: int
    end: int

    def contains(self, year: int) -> bool:
        return self.start <= year <= self.end

    def to_dict(self) -> dict:
        return {"key": self.key, "name": self.name, "start": self.start, "end": self.end}


# Adjacent periods share their boundary year (1500, 1750, 1900, 1950).
PERIODS: Tuple[Period, ...] = (
    Period("medieval", "Medieval Times", 1209, 1500),
    Period("awakening", "Great Awakening", 1500, 1750),
    Period("industrial", "Industrial Explosion", 1750, 1900),
    Period("crisis", "Crisis & Transformation", 1900, 1950),
    Period("modern", "Modern Service Economy", 1950, 2016),
)


@dataclass
class PipelineCfg:
    year_column: str = "Description"
    min_year: int = 1209
    max_year: int = 2016
    # change-point detection
    cp_window: int = 10
    cp_margin: int = 20
    cp_ratio: float = 1.5
    # per-period trends need strictly more points than these
    gdp_trend_min: int = 10
    population_trend_min: int = 5
    # data quality tiers (mean non-null fraction)
    quality_high: float = 0.8
    quality_medium: float = 0.4
    csv_path: Path = Path("data/raw/millenniumofdata_v3_headlines.csv")
    out_dir: Path = Path("data/etl/millennium")
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "PipelineCfg":
        cfg = cls()
        if os.getenv("MILLENNIUM_CSV"):
            cfg.csv_path = Path(os.environ["MILLENNIUM_CSV"])
        if os.getenv("MILLENNIUM_OUT_DIR"):
            cfg.out_dir = Path(os.environ["MILLENNIUM_OUT_DIR"])
        if os.getenv("MILLENNIUM_LOG_LEVEL"):
            cfg.log_level = os.environ["MILLENNIUM_LOG_LEVEL"].upper()
        return cfg
