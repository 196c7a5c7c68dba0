"""
Small numeric helpers for trend and anomaly analysis.
"""

from typing import Optional, Sequence, Tuple

import numpy as np


def linear_fit(values: Sequence[float]) -> Tuple[float, float]:
    """Least-squares (slope, intercept) of values against their index 0..n-1."""
    if len(values) < 2:
        return 0.0, float(values[0]) if values else 0.0
    x = np.arange(len(values), dtype=float)
    slope, intercept = np.polyfit(x, np.asarray(values, dtype=float), 1)
    return float(slope), float(intercept)


def trend_slope(values: Sequence[float], window: int = 5) -> float:
    """Slope of the least-squares line over the last `window` values."""
    return linear_fit(list(values)[-window:])[0]


def z_score(value: float, history: Sequence[float]) -> Optional[float]:
    """|value - mean| / std of history; None when the history has no spread."""
    arr = np.asarray(history, dtype=float)
    if arr.size == 0:
        return None
    std = float(arr.std())
    if std == 0:
        return None
    return abs(value - float(arr.mean())) / std


def mean(values: Sequence[float]) -> float:
    return float(np.mean(values)) if len(values) else 0.0
