"""Unit tests for fallback score generation."""

from __future__ import annotations

import numpy as np

from src.vendorscope.models import Criterion, Vendor
from src.vendorscope.scoring.fallback import (
    COMMENT_BANK,
    FEATURE_CATALOG,
    FallbackScoreGenerator,
    classify_answer,
    comment_for_score,
    generate_fallback_scores,
)


class _PinnedRng:
    """Stands in for a numpy Generator, always drawing one end of the range."""

    def __init__(self, end: str) -> None:
        self.end = end

    def uniform(self, low, high):
        return high if self.end == "high" else low

    def integers(self, low, high, endpoint=False):
        return high if self.end == "high" else low


def _make_criteria() -> list[Criterion]:
    return [
        Criterion(id="crit-1", name="Mobile Support", importance="high", type="feature"),
        Criterion(id="crit-2", name="API Integration", importance="medium", type="technical"),
        Criterion(id="crit-3", name="Documentation", importance="low", type="support"),
    ]


def _make_vendor(vid: str, features: list[str] | None = None) -> Vendor:
    return Vendor(
        id=vid,
        name=f"Vendor {vid}",
        description="Test vendor",
        website=f"{vid}.example.com",
        pricing="$50/month",
        rating=4.0,
        features=features or [],
    )


class TestClassifyAnswer:
    def test_yes_boundary(self):
        assert classify_answer(4.0) == "yes"
        assert classify_answer(3.999) == "partial"

    def test_partial_boundary(self):
        assert classify_answer(2.5) == "partial"
        assert classify_answer(2.499) == "no"

    def test_extremes(self):
        assert classify_answer(5.0) == "yes"
        assert classify_answer(1.0) == "no"


class TestCommentForScore:
    def test_strongest_comment_for_perfect_score(self):
        assert comment_for_score(5.0) == COMMENT_BANK[0]

    def test_index_scales_with_gap(self):
        assert comment_for_score(4.0) == COMMENT_BANK[1]
        assert comment_for_score(2.5) == COMMENT_BANK[3]
        assert comment_for_score(1.0) == COMMENT_BANK[4]

    def test_out_of_range_uses_first(self):
        assert comment_for_score(0.0) == COMMENT_BANK[0]


class TestFallbackScoreGenerator:
    def test_scores_for_all_criteria(self):
        vendors = [_make_vendor("v1"), _make_vendor("v2")]
        result = generate_fallback_scores(vendors, _make_criteria(), rng=np.random.default_rng(1))
        for vendor in result:
            assert set(vendor.criteria_scores) == {"crit-1", "crit-2", "crit-3"}
            assert set(vendor.criteria_answers) == {"crit-1", "crit-2", "crit-3"}

    def test_scores_within_range(self):
        criteria = _make_criteria()
        for seed in range(50):
            gen = FallbackScoreGenerator(rng=np.random.default_rng(seed))
            vendor = gen.generate_vendor(_make_vendor("v"), criteria)
            for score in vendor.criteria_scores.values():
                assert 1.0 <= score <= 5.0

    def test_answers_consistent_with_scores(self):
        gen = FallbackScoreGenerator(rng=np.random.default_rng(42))
        result = gen.generate([_make_vendor(f"v{i}") for i in range(10)], _make_criteria())
        for vendor in result:
            for cid, score in vendor.criteria_scores.items():
                answer = vendor.criteria_answers[cid]
                assert answer.yes_no == classify_answer(score)
                assert answer.comment == comment_for_score(score)

    def test_upper_clamp(self):
        gen = FallbackScoreGenerator(rng=_PinnedRng("high"))
        vendor = gen.generate_vendor(_make_vendor("v"), _make_criteria())
        assert vendor.criteria_scores == {"crit-1": 5.0, "crit-2": 5.0, "crit-3": 5.0}
        assert all(a.yes_no == "yes" for a in vendor.criteria_answers.values())

    def test_lower_end_applies_importance_adjustment(self):
        gen = FallbackScoreGenerator(rng=_PinnedRng("low"))
        vendor = gen.generate_vendor(_make_vendor("v"), _make_criteria())
        assert abs(vendor.criteria_scores["crit-1"] - 3.0) < 1e-9
        assert abs(vendor.criteria_scores["crit-2"] - 2.7) < 1e-9
        assert abs(vendor.criteria_scores["crit-3"] - 2.5) < 1e-9
        assert vendor.criteria_answers["crit-3"].yes_no == "partial"

    def test_seeded_runs_are_reproducible(self):
        vendors = [_make_vendor("v1"), _make_vendor("v2")]
        a = generate_fallback_scores(vendors, _make_criteria(), rng=np.random.default_rng(7))
        b = generate_fallback_scores(vendors, _make_criteria(), rng=np.random.default_rng(7))
        assert [v.criteria_scores for v in a] == [v.criteria_scores for v in b]

    def test_generates_features_if_missing(self):
        result = generate_fallback_scores(
            [_make_vendor("v1")], _make_criteria(), rng=np.random.default_rng(3),
        )
        features = result[0].features
        assert 3 <= len(features) <= 5
        assert features == list(FEATURE_CATALOG[:len(features)])

    def test_feature_count_bounds(self):
        low = FallbackScoreGenerator(rng=_PinnedRng("low")).generate_vendor(
            _make_vendor("v"), _make_criteria(),
        )
        high = FallbackScoreGenerator(rng=_PinnedRng("high")).generate_vendor(
            _make_vendor("v"), _make_criteria(),
        )
        assert len(low.features) == 3
        assert len(high.features) == 5

    def test_preserves_existing_features(self):
        vendor = _make_vendor("v1", features=["Feature 1", "Feature 2"])
        result = generate_fallback_scores([vendor], _make_criteria())
        assert result[0].features == ["Feature 1", "Feature 2"]

    def test_inputs_untouched(self):
        vendor = _make_vendor("v1")
        generate_fallback_scores([vendor], _make_criteria())
        assert vendor.criteria_scores == {}
        assert vendor.criteria_answers is None
        assert vendor.features == []

    def test_empty_inputs(self):
        assert generate_fallback_scores([], _make_criteria()) == []
        result = generate_fallback_scores([_make_vendor("v1")], [])
        assert result[0].criteria_scores == {}
