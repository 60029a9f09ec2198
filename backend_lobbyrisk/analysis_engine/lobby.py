"""
Lobby-level aggregation of individual risk scores.

Exponential mean: 10 * ln(mean(e^(s/10))). Higher individual scores weigh
super-linearly, so one flagged member is not diluted by several clean ones.
"""

from __future__ import annotations

import math
from typing import Iterable

EMPTY_LOBBY_RISK = 100.0
SMOOTHING_SCALE = 10.0


def lobby_risk_exponential(scores: Iterable[float]) -> float:
    """
    Aggregate per-identity risk scores into one lobby score, rounded to 2 decimals.

    No resolvable identities (empty input) is treated as maximal risk.
    """
    values = [float(s) for s in scores]
    if not values:
        return EMPTY_LOBBY_RISK
    total = sum(math.exp(v / SMOOTHING_SCALE) for v in values)
    return round(math.log(total / len(values)) * SMOOTHING_SCALE, 2)
