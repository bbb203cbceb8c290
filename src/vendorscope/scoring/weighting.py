"""Importance weighting: maps a criterion's importance level to its weight."""

from __future__ import annotations

IMPORTANCE_WEIGHTS: dict[str, int] = {
    "high": 3,
    "medium": 2,
    "low": 1,
}
_DEFAULT_WEIGHT = 1


def importance_weight(importance: str | None) -> int:
    return IMPORTANCE_WEIGHTS.get(importance or "", _DEFAULT_WEIGHT)
