"""Command-line harness for the vendor scoring engine.

Scores a vendor set (provider first, fallback when unavailable), prints the
ranking and market insights, and writes the compact comparison table as CSV.

    python run.py --category "CRM Software"
    python run.py --vendors vendors.json --criteria criteria.json --seed 7
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

import numpy as np

from src.vendorscope.config import settings
from src.vendorscope.engine import (
    generate_detailed_comparison,
    generate_summary,
    load_criteria_from_json,
    load_sample_criteria,
    load_sample_vendors,
    load_vendors_from_json,
)
from src.vendorscope.export import export_filename, project_export
from src.vendorscope.insights import get_market_insights
from src.vendorscope.models import TechRequest
from src.vendorscope.ordering.manager import CriteriaOrderManager
from src.vendorscope.ordering.storage import JsonFileStore
from src.vendorscope.scoring.overall import overall_score_fn, rank_vendors

logger = logging.getLogger(__name__)


def _load_json(path: str) -> list[dict]:
    with open(path) as f:
        return json.load(f)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Score and classify a vendor set.")
    parser.add_argument("--vendors", help="JSON array of vendors (default: bundled sample)")
    parser.add_argument("--criteria", help="JSON array of criteria (default: bundled sample)")
    parser.add_argument("--category", default="CRM Software", help="Category being evaluated")
    parser.add_argument("--description", default=None, help="Buyer requirements")
    parser.add_argument("--project-id", default="default", help="Project id for criteria order")
    parser.add_argument("--out-dir", default=".", help="Directory for the CSV export")
    parser.add_argument("--seed", type=int, default=None, help="Seed for fallback scoring")
    parser.add_argument("--summary", action="store_true", help="Request an executive summary")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)

    vendors = (
        load_vendors_from_json(_load_json(args.vendors))
        if args.vendors else load_sample_vendors()
    )
    criteria = (
        load_criteria_from_json(_load_json(args.criteria))
        if args.criteria else load_sample_criteria()
    )
    if not vendors or not criteria:
        parser.error("Need at least one vendor and one criterion.")

    tech_request = TechRequest(category=args.category, description=args.description)
    rng = np.random.default_rng(args.seed)

    outcome = generate_detailed_comparison(vendors, criteria, tech_request, rng=rng)
    if outcome.notice:
        print(f"NOTE: {outcome.notice}")

    order = CriteriaOrderManager(args.project_id, JsonFileStore(settings.storage_dir))
    ordered = order.get_ordered_criteria(criteria, args.category)

    print(f"\n{args.category}: {len(outcome.vendors)} vendors, {len(ordered)} criteria")
    for c in ordered:
        print(f"  [{c.importance:>6}] {c.name}")

    print("\nRanking:")
    for ranked in rank_vendors(outcome.vendors, ordered):
        print(f"  #{ranked.rank} {ranked.vendor.name:<30} {ranked.overall_score:.2f}")

    score_fn = overall_score_fn(ordered)
    insights = get_market_insights(outcome.vendors, score_fn)
    print(
        f"\nMarket maturity: {insights.market_maturity} | "
        f"Competitiveness: {insights.competitiveness} | "
        f"Overall quality: {insights.overall_quality}"
    )

    tables = project_export(outcome.vendors, ordered, score_fn)
    out_path = Path(args.out_dir) / export_filename(args.category, "csv")
    out_path.parent.mkdir(parents=True, exist_ok=True)
    tables.compact_frame().to_csv(out_path, index=False)
    print(f"\nExported comparison to {out_path}")

    if args.summary:
        if not settings.anthropic_api_key:
            print("No Anthropic API key found. Set ANTHROPIC_API_KEY in .env")
        else:
            from anthropic import Anthropic

            client = Anthropic(api_key=settings.anthropic_api_key)
            summary = generate_summary(outcome.vendors, ordered, tech_request, client)
            print("\n" + (summary or "Executive summary unavailable."))

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
