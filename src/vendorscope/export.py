"""Export projection: vendors, criteria and scores as flat rows.

Produces the tables a spreadsheet or CSV writer consumes.  Nothing here knows
about file formats; ``ExportTables.to_frames`` hands pandas DataFrames to
whatever writes the file.
"""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Any, Callable, Literal

import pandas as pd
from pydantic import BaseModel, Field

from src.vendorscope.models import Criterion, Vendor

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"
NO_COMMENT = "No comment available"

ExportFormat = Literal["excel", "csv"]

_EXTENSIONS: dict[str, str] = {"excel": "xlsx", "csv": "csv"}

SHEET_NAMES: dict[str, str] = {
    "comparison": "Vendor Comparison",
    "criteria": "Evaluation Criteria",
    "features": "Vendor Features",
    "assessment": "Detailed Assessment",
}

Row = dict[str, Any]

_COMPARISON_COLUMNS = (
    "Vendor Name", "Description", "Website", "Pricing", "Rating", "Overall Score",
)
_COMPACT_COLUMNS = ("Vendor", "Rating", "Overall Score", "Pricing", "Website")


class ExportTables(BaseModel):
    comparison: list[Row] = Field(default_factory=list)
    compact: list[Row] = Field(default_factory=list)
    criteria: list[Row] = Field(default_factory=list)
    features: list[Row] = Field(default_factory=list)
    assessment: list[Row] = Field(default_factory=list)

    def to_frames(self) -> dict[str, pd.DataFrame]:
        """Non-empty workbook tables keyed by sheet name."""
        frames: dict[str, pd.DataFrame] = {}
        for attr, sheet in SHEET_NAMES.items():
            rows = getattr(self, attr)
            if rows:
                frames[sheet] = pd.DataFrame(rows, columns=list(rows[0]))
        return frames

    def compact_frame(self) -> pd.DataFrame:
        if not self.compact:
            return pd.DataFrame()
        return pd.DataFrame(self.compact, columns=list(self.compact[0]))


def _criterion_score(vendor: Vendor, criterion: Criterion) -> str:
    score = vendor.criteria_scores.get(criterion.id)
    return f"{score:.1f}" if score is not None else NOT_AVAILABLE


def criterion_columns(
    criteria: list[Criterion], reserved: tuple[str, ...] = (),
) -> list[str]:
    """Unique column header per criterion, in criteria order.

    A name that clashes with a fixed column or an earlier criterion gets a
    numeric suffix, e.g. ``Support (2)``.
    """
    taken = set(reserved)
    columns: list[str] = []
    for c in criteria:
        column = c.name
        n = 2
        while column in taken:
            column = f"{c.name} ({n})"
            n += 1
        taken.add(column)
        columns.append(column)
    return columns


def comparison_rows(
    vendors: list[Vendor],
    criteria: list[Criterion],
    overall_score_fn: Callable[[Vendor], float],
) -> list[Row]:
    columns = criterion_columns(criteria, _COMPARISON_COLUMNS)
    rows = []
    for v in vendors:
        row: Row = {
            "Vendor Name": v.name,
            "Description": v.description,
            "Website": v.website,
            "Pricing": v.pricing,
            "Rating": v.rating,
            "Overall Score": f"{overall_score_fn(v):.2f}",
        }
        for column, c in zip(columns, criteria):
            row[column] = _criterion_score(v, c)
        rows.append(row)
    return rows


def compact_rows(
    vendors: list[Vendor],
    criteria: list[Criterion],
    overall_score_fn: Callable[[Vendor], float],
) -> list[Row]:
    columns = criterion_columns(criteria, _COMPACT_COLUMNS)
    rows = []
    for v in vendors:
        row: Row = {
            "Vendor": v.name,
            "Rating": v.rating,
            "Overall Score": f"{overall_score_fn(v):.1f}",
            "Pricing": v.pricing,
            "Website": v.website,
        }
        for column, c in zip(columns, criteria):
            row[column] = _criterion_score(v, c)
        rows.append(row)
    return rows


def criteria_rows(criteria: list[Criterion]) -> list[Row]:
    return [
        {"Criteria": c.name, "Type": c.type, "Importance": c.importance}
        for c in criteria
    ]


def feature_rows(vendors: list[Vendor]) -> list[Row]:
    return [
        {"Vendor": v.name, "Feature": feature}
        for v in vendors
        for feature in v.features
    ]


def assessment_rows(vendors: list[Vendor], criteria: list[Criterion]) -> list[Row]:
    rows = []
    for v in vendors:
        answers = v.criteria_answers or {}
        for c in criteria:
            answer = answers.get(c.id)
            rows.append({
                "Vendor": v.name,
                "Criteria": c.name,
                "Score": _criterion_score(v, c),
                "Assessment": answer.yes_no if answer else NOT_AVAILABLE,
                "Comment": (answer.comment if answer else "") or NO_COMMENT,
            })
    return rows


def project_export(
    vendors: list[Vendor],
    criteria: list[Criterion],
    overall_score_fn: Callable[[Vendor], float],
    *,
    include_features: bool = True,
    include_assessment: bool = True,
) -> ExportTables:
    tables = ExportTables(
        comparison=comparison_rows(vendors, criteria, overall_score_fn),
        compact=compact_rows(vendors, criteria, overall_score_fn),
        criteria=criteria_rows(criteria),
        features=feature_rows(vendors) if include_features else [],
        assessment=assessment_rows(vendors, criteria) if include_assessment else [],
    )
    logger.debug(
        "Projected export: %d vendors, %d criteria, %d feature rows, %d assessment rows",
        len(vendors), len(criteria), len(tables.features), len(tables.assessment),
    )
    return tables


def export_filename(
    category: str, fmt: ExportFormat, today: date | None = None,
) -> str:
    slug = re.sub(r"\s+", "-", category).lower()
    day = (today or date.today()).isoformat()
    return f"vendor-comparison-{slug}-{day}.{_EXTENSIONS[fmt]}"
