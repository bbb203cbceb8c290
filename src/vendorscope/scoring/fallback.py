"""Fallback scoring: synthetic scores when the AI provider is unavailable.

Fully local and never raises: this is the availability floor of the scoring
pipeline.  Values are random-looking but the shape is fixed:

  - score     = U[3, 5) + importance adjustment + U[-0.5, 0.5), clamped [1, 5]
  - yes/no    = yes >= 4.0 > partial >= 2.5 > no
  - comment   = canned text indexed by (5 - score), strongest first
  - features  = kept when present, else the leading 3-5 catalog entries

The random source is an injected ``numpy.random.Generator`` so tests can seed it.
"""

from __future__ import annotations

import logging

import numpy as np

from src.vendorscope.config import FallbackSettings, settings
from src.vendorscope.models import CriteriaAnswer, Criterion, Vendor, YesNo

logger = logging.getLogger(__name__)

SCORE_SCALE = 5.0

COMMENT_BANK: tuple[str, ...] = (
    "Meets all requirements efficiently",
    "Strong implementation with good support",
    "Solid solution with room for improvement",
    "Basic functionality available",
    "Limited capabilities in this area",
    "Does not meet core requirements",
)

FEATURE_CATALOG: tuple[str, ...] = (
    "Cloud-based deployment",
    "Mobile applications",
    "API integrations",
    "Advanced analytics",
    "24/7 customer support",
    "Custom workflows",
    "Multi-language support",
    "Enterprise security",
)


def classify_answer(score: float, config: FallbackSettings | None = None) -> YesNo:
    cfg = config or settings.fallback
    if score >= cfg.yes_threshold:
        return "yes"
    if score >= cfg.partial_threshold:
        return "partial"
    return "no"


def comment_for_score(score: float) -> str:
    idx = int((SCORE_SCALE - score) * len(COMMENT_BANK) / SCORE_SCALE)
    if 0 <= idx < len(COMMENT_BANK):
        return COMMENT_BANK[idx]
    return COMMENT_BANK[0]


class FallbackScoreGenerator:
    """Synthesise per-criterion scores, answers and features for vendors."""

    def __init__(
        self,
        rng: np.random.Generator | None = None,
        config: FallbackSettings | None = None,
    ) -> None:
        self.rng = rng if rng is not None else np.random.default_rng()
        self.config = config or settings.fallback

    def _adjustment(self, criterion: Criterion) -> float:
        if criterion.importance == "high":
            return self.config.high_adjustment
        if criterion.importance == "medium":
            return self.config.medium_adjustment
        return self.config.low_adjustment

    def score_criterion(self, criterion: Criterion) -> float:
        cfg = self.config
        base = float(self.rng.uniform(cfg.base_min, cfg.base_max))
        jitter = float(self.rng.uniform(-cfg.jitter, cfg.jitter))
        raw = base + self._adjustment(criterion) + jitter
        return min(cfg.score_ceiling, max(cfg.score_floor, raw))

    def _features(self, vendor: Vendor) -> list[str]:
        if vendor.features:
            return list(vendor.features)
        count = int(self.rng.integers(
            self.config.min_features, self.config.max_features, endpoint=True,
        ))
        return list(FEATURE_CATALOG[:count])

    def generate_vendor(self, vendor: Vendor, criteria: list[Criterion]) -> Vendor:
        scores: dict[str, float] = {}
        answers: dict[str, CriteriaAnswer] = {}
        for criterion in criteria:
            s = self.score_criterion(criterion)
            scores[criterion.id] = s
            answers[criterion.id] = CriteriaAnswer(
                yes_no=classify_answer(s, self.config),
                comment=comment_for_score(s),
            )

        return vendor.model_copy(
            update={
                "criteria_scores": scores,
                "criteria_answers": answers,
                "features": self._features(vendor),
            },
        )

    def generate(
        self, vendors: list[Vendor], criteria: list[Criterion],
    ) -> list[Vendor]:
        result = [self.generate_vendor(v, criteria) for v in vendors]
        logger.info(
            "Fallback scores generated: %d vendors x %d criteria",
            len(vendors), len(criteria),
        )
        return result


def generate_fallback_scores(
    vendors: list[Vendor],
    criteria: list[Criterion],
    rng: np.random.Generator | None = None,
) -> list[Vendor]:
    return FallbackScoreGenerator(rng=rng).generate(vendors, criteria)
