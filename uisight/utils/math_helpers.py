"""Math helpers — guarded means and dispersion. No engine imports."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np


def safe_mean(values: Sequence[float]) -> float:
    """Arithmetic mean, 0.0 for an empty sequence."""
    if len(values) == 0:
        return 0.0
    return float(np.mean(values))


def consistency_score(values: Sequence[float]) -> float:
    """max(0, 1 − CV): 1 = perfectly uniform, 0 = irregular or no data."""
    if len(values) == 0:
        return 0.0
    mean = float(np.mean(values))
    if abs(mean) < 1e-10:
        return 0.0
    return max(0.0, 1.0 - float(np.std(values)) / mean)


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(value, hi))


def clamp_unit(value: float) -> float:
    """Clamp to [0, 1], mapping NaN to 0."""
    if value != value:
        return 0.0
    return clamp(value, 0.0, 1.0)
