"""Integration-level tests: sample data, provider/fallback switching, full pipeline."""

from __future__ import annotations

import json
from types import SimpleNamespace

import numpy as np

from src.vendorscope.config import settings
from src.vendorscope.engine import (
    DATA_DIR,
    FALLBACK_NOTICE,
    generate_detailed_comparison,
    generate_strategic_comparison,
    generate_summary,
    load_sample_criteria,
    load_sample_vendors,
    merge_comparisons,
)
from src.vendorscope.exceptions import ProviderError
from src.vendorscope.export import project_export
from src.vendorscope.insights import get_market_insights
from src.vendorscope.models import TechRequest, Vendor, VendorComparison
from src.vendorscope.scoring.overall import overall_score_fn, rank_vendors


class _FakeClient:
    def __init__(self, reply: str | None = None, error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []
        self.messages = SimpleNamespace(create=self._create)

    def _create(self, **kwargs):
        self.prompts.append(kwargs["messages"][0]["content"])
        if self.error is not None:
            raise self.error
        return SimpleNamespace(content=[SimpleNamespace(text=self.reply)])


_REQUEST = TechRequest(category="CRM Software", description="Need mobile support")


def test_sample_data_load():
    assert (DATA_DIR / "sample_vendors.json").exists()
    vendors = load_sample_vendors()
    criteria = load_sample_criteria()
    assert len(vendors) == 5
    assert len(criteria) == 6
    assert all(v.id and v.name for v in vendors)
    assert {c.importance for c in criteria} == {"high", "medium", "low"}


def test_sample_answers_use_wire_names():
    vendors = load_sample_vendors()
    salesforce = next(v for v in vendors if v.id == "salesforce")
    assert salesforce.criteria_answers["crit-onboarding"].yes_no == "partial"


class TestDetailedComparison:
    def test_provider_scores_are_merged(self):
        vendors = load_sample_vendors()[:2]
        criteria = load_sample_criteria()
        payload = [{
            "vendorId": vendors[0].id,
            "scores": {c.id: 4.5 for c in criteria},
            "features": ["AI assistant"],
        }]
        outcome = generate_detailed_comparison(
            vendors, criteria, _REQUEST, client=_FakeClient(reply=json.dumps(payload)),
        )
        assert outcome.used_fallback is False
        assert outcome.notice is None
        assert outcome.vendors[0].criteria_scores == {c.id: 4.5 for c in criteria}
        assert outcome.vendors[0].features == ["AI assistant"]
        # vendors absent from the payload pass through unchanged
        assert outcome.vendors[1] == vendors[1]

    def test_provider_failure_falls_back(self):
        vendors = load_sample_vendors()
        criteria = load_sample_criteria()
        outcome = generate_detailed_comparison(
            vendors, criteria, _REQUEST,
            client=_FakeClient(error=ProviderError("timeout")),
            rng=np.random.default_rng(0),
        )
        assert outcome.used_fallback is True
        assert outcome.notice == FALLBACK_NOTICE
        for vendor in outcome.vendors:
            assert set(vendor.criteria_scores) == {c.id for c in criteria}
            assert vendor.features

    def test_empty_provider_payload_falls_back(self):
        outcome = generate_detailed_comparison(
            load_sample_vendors(), load_sample_criteria(), _REQUEST,
            client=_FakeClient(reply="[]"),
        )
        assert outcome.used_fallback is True

    def test_no_api_key_uses_fallback(self, monkeypatch):
        monkeypatch.setattr(settings, "anthropic_api_key", "")
        outcome = generate_detailed_comparison(
            load_sample_vendors(), load_sample_criteria(), _REQUEST,
        )
        assert outcome.used_fallback is True

    def test_merge_keeps_features_when_provider_has_none(self):
        vendor = Vendor(id="v", name="V", features=["Keep"])
        merged = merge_comparisons([vendor], [VendorComparison(vendor_id="v", scores={"c": 3.0})])
        assert merged[0].features == ["Keep"]
        assert merged[0].criteria_scores == {"c": 3.0}


class TestNarratives:
    def test_strategic_prompt_contents(self):
        client = _FakeClient(reply="Strategic analysis")
        vendors = load_sample_vendors()[:1]
        criteria = load_sample_criteria()
        text = generate_strategic_comparison(vendors, criteria, _REQUEST, client)
        assert text == "Strategic analysis"
        prompt = client.prompts[0]
        assert "CRM Software" in prompt
        assert "Need mobile support" in prompt
        assert "Salesforce Sales Cloud: Overall Score" in prompt
        assert "KEY CRITERIA: Mobile Support, API Integration" in prompt
        assert "API Integration (4.8)" in prompt

    def test_strategic_failure_returns_none(self):
        client = _FakeClient(error=ProviderError("down"))
        assert generate_strategic_comparison(
            load_sample_vendors(), load_sample_criteria(), _REQUEST, client,
        ) is None

    def test_summary_failure_returns_none(self):
        client = _FakeClient(reply="")
        assert generate_summary(
            load_sample_vendors(), load_sample_criteria(), _REQUEST, client,
        ) is None


def test_full_pipeline_with_fallback():
    criteria = load_sample_criteria()
    outcome = generate_detailed_comparison(
        load_sample_vendors(), criteria, _REQUEST,
        client=_FakeClient(reply="not json"),
        rng=np.random.default_rng(11),
    )
    fn = overall_score_fn(criteria)

    ranked = rank_vendors(outcome.vendors, criteria)
    assert [r.rank for r in ranked] == [1, 2, 3, 4, 5]
    assert all(1.0 <= r.overall_score <= 5.0 for r in ranked)

    insights = get_market_insights(outcome.vendors, fn)
    # mean sample rating is 4.22
    assert insights.market_maturity == "Mature"

    tables = project_export(outcome.vendors, criteria, fn)
    assert len(tables.comparison) == 5
    assert len(tables.assessment) == 5 * 6
    assert set(tables.to_frames()) == {
        "Vendor Comparison", "Evaluation Criteria", "Vendor Features", "Detailed Assessment",
    }
