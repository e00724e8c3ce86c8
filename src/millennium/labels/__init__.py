"""Labels module: period classification and change-point detection."""

from .change_points import (
    HISTORICAL_CHANGE_POINTS,
    ChangePoint,
    attach_change_points,
    detect_growth_accelerations,
    identify_change_points,
)
from .periods import classify_period, get_period, period_keys

__all__ = [
    "HISTORICAL_CHANGE_POINTS",
    "ChangePoint",
    "attach_change_points",
    "detect_growth_accelerations",
    "identify_change_points",
    "classify_period",
    "get_period",
    "period_keys",
]
