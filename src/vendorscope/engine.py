"""Top-level orchestrator: ties all components together.

Pipeline:
  1. Load / receive vendors and criteria
  2. Score every vendor on every criterion          (Claude Haiku, one call)
     -> on any provider failure: fallback scores    (local, never fails)
  3. Weighted overall score + ranking               (deterministic)
  4. Market insights and export projection          (deterministic)
  5. Strategic comparison / executive summary       (Claude Sonnet, optional)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import numpy as np
from anthropic import Anthropic

from src.vendorscope import provider
from src.vendorscope.config import settings
from src.vendorscope.models import (
    ComparisonOutcome,
    Criterion,
    TechRequest,
    Vendor,
    VendorComparison,
)
from src.vendorscope.provider import Err
from src.vendorscope.scoring.fallback import FallbackScoreGenerator
from src.vendorscope.scoring.overall import overall_score, overall_score_fn

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent.parent.parent / "data"

FALLBACK_NOTICE = "AI comparison failed. Using algorithmic scoring instead."

_STRATEGIC_SYSTEM = (
    "You are a senior technology consultant providing strategic vendor "
    "analysis for enterprise decision makers."
)


def load_vendors_from_json(data: list[dict]) -> list[Vendor]:
    return [Vendor.model_validate(v) for v in data]


def load_criteria_from_json(data: list[dict]) -> list[Criterion]:
    return [Criterion.model_validate(c) for c in data]


def load_sample_vendors() -> list[Vendor]:
    with open(DATA_DIR / "sample_vendors.json") as f:
        return load_vendors_from_json(json.load(f))


def load_sample_criteria() -> list[Criterion]:
    with open(DATA_DIR / "sample_criteria.json") as f:
        return load_criteria_from_json(json.load(f))


def _default_client() -> Anthropic | None:
    if not settings.anthropic_api_key:
        return None
    return Anthropic(api_key=settings.anthropic_api_key)


def merge_comparisons(
    vendors: list[Vendor], comparisons: list[VendorComparison],
) -> list[Vendor]:
    """Apply provider results by vendor id; vendors without a result pass through."""
    by_id = {c.vendor_id: c for c in comparisons}
    merged: list[Vendor] = []
    for vendor in vendors:
        comparison = by_id.get(vendor.id)
        if comparison is None:
            logger.debug("No provider result for vendor %s", vendor.id)
            merged.append(vendor)
            continue
        merged.append(vendor.model_copy(update={
            "criteria_scores": dict(comparison.scores),
            "criteria_answers": dict(comparison.criteria_answers),
            "features": comparison.features or vendor.features,
        }))
    return merged


def generate_detailed_comparison(
    vendors: list[Vendor],
    criteria: list[Criterion],
    tech_request: TechRequest,
    client: Anthropic | None = None,
    rng: np.random.Generator | None = None,
) -> ComparisonOutcome:
    if client is None:
        client = _default_client()

    if client is None:
        logger.info("No provider configured; scoring %d vendors locally", len(vendors))
        result = Err("No Anthropic API key configured")
    else:
        result = provider.compare_vendors(client, vendors, criteria, tech_request)

    if isinstance(result, Err):
        logger.warning("Using fallback scoring: %s", result.reason)
        return ComparisonOutcome(
            vendors=FallbackScoreGenerator(rng=rng).generate(vendors, criteria),
            used_fallback=True,
            notice=FALLBACK_NOTICE,
        )

    scored = merge_comparisons(vendors, result.value)
    logger.info(
        "Provider comparison complete: %d/%d vendors scored",
        len(result.value), len(vendors),
    )
    return ComparisonOutcome(vendors=scored)


def _strategic_prompt(
    vendors: list[Vendor], criteria: list[Criterion], tech_request: TechRequest,
) -> str:
    lines = [
        f"Analyze this vendor comparison for {tech_request.category} solutions:",
        "",
        f"REQUIREMENTS: {tech_request.description or 'Standard evaluation'}",
        "",
        "VENDORS:",
    ]
    for v in vendors:
        top = sorted(
            criteria,
            key=lambda c: v.criteria_scores.get(c.id, 0.0),
            reverse=True,
        )[:3]
        strengths = ", ".join(
            f"{c.name} ({v.criteria_scores.get(c.id, 0.0):.1f})" for c in top
        )
        lines.append(
            f"- {v.name}: Overall Score {overall_score(v, criteria):.1f}/5.0, "
            f"Rating: {v.rating}"
        )
        lines.append(f"  Top Strengths: {strengths}")

    key_criteria = ", ".join(c.name for c in criteria if c.importance == "high")
    lines += [
        "",
        f"KEY CRITERIA: {key_criteria}",
        "",
        "Provide a strategic comparison analysis including:",
        "1. Vendor rankings with key differentiators",
        "2. Pros/cons for each vendor",
        "3. Best fit recommendation based on requirements",
        "4. Risk assessment and mitigation strategies",
        "5. Implementation considerations",
        "",
        "Keep it executive-level and actionable (400-500 words).",
    ]
    return "\n".join(lines)


def generate_strategic_comparison(
    vendors: list[Vendor],
    criteria: list[Criterion],
    tech_request: TechRequest,
    client: Anthropic,
) -> str | None:
    prompt = _strategic_prompt(vendors, criteria, tech_request)
    result = provider.chat(
        client, [{"role": "user", "content": prompt}], system=_STRATEGIC_SYSTEM,
    )
    if isinstance(result, Err):
        logger.warning("Strategic comparison failed: %s", result.reason)
        return None
    return result.value


def generate_summary(
    vendors: list[Vendor],
    criteria: list[Criterion],
    tech_request: TechRequest,
    client: Anthropic,
) -> str | None:
    result = provider.generate_executive_summary(
        client, tech_request.category, vendors, criteria, overall_score_fn(criteria),
    )
    if isinstance(result, Err):
        logger.warning("Executive summary failed: %s", result.reason)
        return None
    return result.value
