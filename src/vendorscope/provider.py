"""AI provider boundary: vendor comparison, chat and executive summaries.

Every call returns ``Ok(value)`` or ``Err(reason)``; nothing here raises for
provider trouble.  Comparison payloads are validated with pydantic before they
reach the scoring code, and yes/no answers are reconciled with their scores.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union

from anthropic import Anthropic, APIError
from pydantic import TypeAdapter, ValidationError

from src.vendorscope.exceptions import ProviderError
from src.vendorscope.llm import call_llm_json, call_llm_text
from src.vendorscope.models import (
    CriteriaAnswer,
    Criterion,
    TechRequest,
    Vendor,
    VendorComparison,
)
from src.vendorscope.scoring.fallback import classify_answer, comment_for_score

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    reason: str


Result = Union[Ok[T], Err]

_COMPARISONS_ADAPTER = TypeAdapter(list[VendorComparison])

_PROVIDER_ERRORS = (APIError, ProviderError)

_COMPARE_SYSTEM_PROMPT = """\
You are a senior technology analyst scoring software vendors against a buyer's
evaluation criteria.

For EVERY vendor and EVERY criterion return:
  - a score from 0.0 to 5.0 (one decimal place),
  - an assessment: "yes" (score >= 4.0), "partial" (2.5 <= score < 4.0) or "no",
  - a one-sentence comment justifying the assessment.
Also list 3-6 notable product features per vendor.

Return ONLY valid JSON, an array with one object per vendor:
[
  {
    "vendorId": "id from input",
    "scores": {"criterion id": 4.2, ...},
    "criteriaAnswers": {"criterion id": {"yesNo": "yes|partial|no", "comment": "..."}, ...},
    "features": ["feature 1", ...]
  }
]
"""

_SUMMARY_SYSTEM_PROMPT = """\
You write executive summaries of software vendor evaluations for enterprise
decision makers.  Be concise, concrete and neutral.  Cover the market landscape,
the top recommendation with its rationale, notable trade-offs between the
leading vendors, and suggested next steps.  Keep it under 350 words.
"""


def _compare_user_message(
    vendors: list[Vendor], criteria: list[Criterion], tech_request: TechRequest,
) -> str:
    payload = {
        "category": tech_request.category,
        "requirements": tech_request.description or "Standard evaluation",
        "vendors": [
            {
                "id": v.id,
                "name": v.name,
                "description": v.description,
                "website": v.website,
                "pricing": v.pricing,
                "match_score": v.rating * 20,
            }
            for v in vendors
        ],
        "criteria": [
            {"id": c.id, "name": c.name, "importance": c.importance, "type": c.type}
            for c in criteria
        ],
    }
    return json.dumps(payload, indent=2)


def _reconcile_answers(comparison: VendorComparison) -> VendorComparison:
    answers = dict(comparison.criteria_answers)
    for criterion_id, score in comparison.scores.items():
        expected = classify_answer(score)
        answer = answers.get(criterion_id)
        if answer is None:
            answers[criterion_id] = CriteriaAnswer(
                yes_no=expected, comment=comment_for_score(score),
            )
        elif answer.yes_no != expected:
            logger.warning(
                "Provider answer %r for %s/%s contradicts score %.2f; using %r",
                answer.yes_no, comparison.vendor_id, criterion_id, score, expected,
            )
            answers[criterion_id] = answer.model_copy(update={"yes_no": expected})
    return comparison.model_copy(update={"criteria_answers": answers})


def parse_comparisons(data: object) -> Result[list[VendorComparison]]:
    """Validate a raw provider payload into comparison entries."""
    if isinstance(data, dict):
        data = data.get("comparisons", data.get("vendors"))
    if not data:
        return Err("Provider returned no comparison data")
    try:
        comparisons = _COMPARISONS_ADAPTER.validate_python(data)
    except ValidationError as exc:
        logger.warning("Provider comparison payload failed validation: %s", exc)
        return Err(f"Malformed comparison payload ({exc.error_count()} errors)")
    return Ok([_reconcile_answers(c) for c in comparisons])


def compare_vendors(
    client: Anthropic,
    vendors: list[Vendor],
    criteria: list[Criterion],
    tech_request: TechRequest,
) -> Result[list[VendorComparison]]:
    user_msg = _compare_user_message(vendors, criteria, tech_request)
    try:
        data = call_llm_json(client, _COMPARE_SYSTEM_PROMPT, user_msg, fast=True)
    except _PROVIDER_ERRORS as exc:
        logger.warning("Vendor comparison call failed: %s", exc)
        return Err(f"Provider call failed: {exc}")
    return parse_comparisons(data)


def chat(
    client: Anthropic,
    messages: list[dict[str, str]],
    system: str = "You are a helpful assistant for software vendor evaluation.",
) -> Result[str]:
    try:
        text = call_llm_text(client, system, messages, fast=False)
    except _PROVIDER_ERRORS as exc:
        logger.warning("Chat call failed: %s", exc)
        return Err(f"Provider call failed: {exc}")
    if not text:
        return Err("Provider returned an empty reply")
    return Ok(text)


def generate_executive_summary(
    client: Anthropic,
    category: str,
    vendors: list[Vendor],
    criteria: list[Criterion],
    overall_score_fn: Callable[[Vendor], float],
) -> Result[str]:
    parts = [f"CATEGORY: {category}", "", "VENDORS:"]
    for v in vendors:
        parts.append(
            f"- {v.name}: match score {overall_score_fn(v) * 20:.0f}/100, "
            f"rating {v.rating}, pricing {v.pricing or 'n/a'}"
        )
        if v.features:
            parts.append(f"  Strengths: {', '.join(v.features)}")
    parts.append("")
    parts.append("CRITERIA:")
    for c in criteria:
        parts.append(f"- {c.name} ({c.importance} importance, {c.type})")

    return chat(
        client,
        [{"role": "user", "content": "\n".join(parts)}],
        system=_SUMMARY_SYSTEM_PROMPT,
    )
