"""Pydantic v2 data models: the data contracts flowing through the system."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------

Importance = Literal["low", "medium", "high"]

YesNo = Literal["yes", "no", "partial"]

Score = Annotated[float, Field(ge=0.0, le=5.0)]

MarketMaturity = Literal["Emerging", "Established", "Mature"]

Competitiveness = Literal["Limited Options", "Competitive", "Highly Competitive"]

OverallQuality = Literal["Mixed", "Good", "Excellent"]

CriteriaOrderState = dict[str, list[str]]  # lowercased category -> criterion ids


class _WireModel(BaseModel):
    """Accepts both snake_case field names and the camelCase wire names."""

    model_config = ConfigDict(populate_by_name=True)


# ---------------------------------------------------------------------------
# Criteria
# ---------------------------------------------------------------------------

class Criterion(_WireModel):
    id: str
    name: str
    importance: Importance = "medium"
    type: str = "other"
    description: str = ""
    is_archived: bool = Field(default=False, alias="isArchived")


class CriteriaAnswer(_WireModel):
    yes_no: YesNo = Field(alias="yesNo")
    comment: str = ""


# ---------------------------------------------------------------------------
# Vendors
# ---------------------------------------------------------------------------

class Vendor(_WireModel):
    id: str
    name: str
    description: str = ""
    website: str = ""
    pricing: str = ""
    rating: float = Field(default=0.0, ge=0.0, le=5.0)
    criteria_scores: dict[str, Score] = Field(
        default_factory=dict, alias="criteriaScores",
    )
    criteria_answers: dict[str, CriteriaAnswer] | None = Field(
        default=None, alias="criteriaAnswers",
    )
    features: list[str] = Field(default_factory=list)


class TechRequest(BaseModel):
    category: str
    description: str | None = None


# ---------------------------------------------------------------------------
# Provider payloads
# ---------------------------------------------------------------------------

class VendorComparison(_WireModel):
    """One validated entry of the provider's comparison payload."""

    vendor_id: str = Field(alias="vendorId")
    scores: dict[str, Score] = Field(default_factory=dict)
    criteria_answers: dict[str, CriteriaAnswer] = Field(
        default_factory=dict, alias="criteriaAnswers",
    )
    features: list[str] | None = None


# ---------------------------------------------------------------------------
# Scoring / output types
# ---------------------------------------------------------------------------

class RankedVendor(BaseModel):
    rank: int
    vendor: Vendor
    overall_score: float


class MarketInsights(BaseModel):
    market_maturity: MarketMaturity
    competitiveness: Competitiveness
    overall_quality: OverallQuality


class ComparisonOutcome(BaseModel):
    vendors: list[Vendor] = Field(default_factory=list)
    used_fallback: bool = False
    notice: str | None = None
