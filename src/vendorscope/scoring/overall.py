"""Overall score: importance-weighted average of per-criterion scores.

The denominator sums the weights of *all* criteria, scored or not, so a vendor
missing assessments on some criteria is diluted rather than renormalised.
"""

from __future__ import annotations

import logging
from typing import Callable

from src.vendorscope.exceptions import EmptyInputError
from src.vendorscope.models import Criterion, RankedVendor, Vendor
from src.vendorscope.scoring.weighting import importance_weight

logger = logging.getLogger(__name__)


def overall_score(vendor: Vendor, criteria: list[Criterion]) -> float:
    """Weighted overall score for *vendor* on a 0-5 scale."""
    if not criteria:
        raise EmptyInputError(
            "Cannot score a vendor against an empty criteria set",
            context={"vendor_id": vendor.id},
        )

    numerator = sum(
        vendor.criteria_scores[c.id] * importance_weight(c.importance)
        for c in criteria
        if c.id in vendor.criteria_scores
    )
    denominator = sum(importance_weight(c.importance) for c in criteria)

    result = numerator / denominator
    logger.debug(
        "Overall score %s: scored=%d/%d weighted=%.3f/%d -> %.3f",
        vendor.name, len(vendor.criteria_scores), len(criteria),
        numerator, denominator, result,
    )
    return result


def overall_score_fn(criteria: list[Criterion]) -> Callable[[Vendor], float]:
    """Bind *criteria* so callers can score a vendor with a single argument."""

    def _score(vendor: Vendor) -> float:
        return overall_score(vendor, criteria)

    return _score


def rank_vendors(
    vendors: list[Vendor], criteria: list[Criterion],
) -> list[RankedVendor]:
    scored = [(v, overall_score(v, criteria)) for v in vendors]
    scored.sort(key=lambda item: item[1], reverse=True)
    return [
        RankedVendor(rank=i + 1, vendor=v, overall_score=s)
        for i, (v, s) in enumerate(scored)
    ]
