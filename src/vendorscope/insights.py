"""Market insights: three independent classifications of a vendor set.

  - maturity        from the mean vendor rating
  - competitiveness from the count of vendors scoring >= 4.0 overall
  - quality         from the mean overall score

All thresholds are inclusive lower bounds.
"""

from __future__ import annotations

import logging
from typing import Callable

from src.vendorscope.config import InsightThresholds, settings
from src.vendorscope.exceptions import EmptyInputError
from src.vendorscope.models import (
    Competitiveness,
    MarketInsights,
    MarketMaturity,
    OverallQuality,
    Vendor,
)

logger = logging.getLogger(__name__)


def classify_maturity(
    avg_rating: float, thresholds: InsightThresholds | None = None,
) -> MarketMaturity:
    t = thresholds or settings.insights
    if avg_rating >= t.mature_rating:
        return "Mature"
    if avg_rating >= t.established_rating:
        return "Established"
    return "Emerging"


def classify_competitiveness(
    top_performers: int, thresholds: InsightThresholds | None = None,
) -> Competitiveness:
    t = thresholds or settings.insights
    if top_performers >= t.highly_competitive_count:
        return "Highly Competitive"
    if top_performers >= t.competitive_count:
        return "Competitive"
    return "Limited Options"


def classify_quality(
    avg_score: float, thresholds: InsightThresholds | None = None,
) -> OverallQuality:
    t = thresholds or settings.insights
    if avg_score >= t.excellent_score:
        return "Excellent"
    if avg_score >= t.good_score:
        return "Good"
    return "Mixed"


def get_market_insights(
    vendors: list[Vendor],
    overall_score_fn: Callable[[Vendor], float],
    thresholds: InsightThresholds | None = None,
) -> MarketInsights:
    if not vendors:
        raise EmptyInputError("Cannot derive market insights from an empty vendor set")

    t = thresholds or settings.insights
    rating_total = 0.0
    score_total = 0.0
    top_performers = 0
    for vendor in vendors:
        score = overall_score_fn(vendor)
        rating_total += vendor.rating
        score_total += score
        if score >= t.top_performer_score:
            top_performers += 1

    n = len(vendors)
    avg_rating = rating_total / n
    avg_score = score_total / n

    insights = MarketInsights(
        market_maturity=classify_maturity(avg_rating, t),
        competitiveness=classify_competitiveness(top_performers, t),
        overall_quality=classify_quality(avg_score, t),
    )
    logger.debug(
        "Market insights over %d vendors: rating=%.3f top=%d score=%.3f -> %s",
        n, avg_rating, top_performers, avg_score, insights.model_dump(),
    )
    return insights
