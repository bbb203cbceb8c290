"""Criteria display order: importance sort or persisted manual order.

Two modes:
  - Sorted (default): active criteria by importance, high first, stable;
    archived criteria after, in their original order.
  - Manual: criteria follow the saved id sequence for the category; ids not
    in the sequence keep their relative order at the end.

Every change is written straight through to the store under
``criteria_order_{project_id}`` (order map) and
``criteria_order_{project_id}_sorting`` (mode flag).
"""

from __future__ import annotations

import logging

from pydantic import TypeAdapter, ValidationError

from src.vendorscope.models import Criterion, CriteriaOrderState
from src.vendorscope.ordering.storage import KeyValueStore
from src.vendorscope.scoring.weighting import importance_weight

logger = logging.getLogger(__name__)

_ORDER_ADAPTER = TypeAdapter(CriteriaOrderState)


def order_key(project_id: str) -> str:
    return f"criteria_order_{project_id}"


def sorting_key(project_id: str) -> str:
    return f"{order_key(project_id)}_sorting"


def sort_by_importance(criteria: list[Criterion]) -> list[Criterion]:
    active = [c for c in criteria if not c.is_archived]
    archived = [c for c in criteria if c.is_archived]
    # sorted() is stable, ties keep their input order
    active = sorted(active, key=lambda c: importance_weight(c.importance), reverse=True)
    return active + archived


def apply_manual_order(
    criteria: list[Criterion], ordered_ids: list[str],
) -> list[Criterion]:
    if not ordered_ids:
        return list(criteria)
    positions: dict[str, int] = {}
    for idx, cid in enumerate(ordered_ids):
        positions.setdefault(cid, idx)
    unmapped = len(ordered_ids)
    return sorted(criteria, key=lambda c: positions.get(c.id, unmapped))


class CriteriaOrderManager:
    def __init__(self, project_id: str, storage: KeyValueStore) -> None:
        self.project_id = project_id
        self.storage = storage
        self._sorted = self._load_sorting()
        self._order = self._load_order()

    # -- loading ------------------------------------------------------------

    def _load_sorting(self) -> bool:
        raw = self.storage.get(sorting_key(self.project_id))
        if raw is None:
            return True
        if not isinstance(raw, bool):
            logger.warning(
                "Ignoring malformed sorting flag for project %s: %r",
                self.project_id, raw,
            )
            return True
        return raw

    def _load_order(self) -> CriteriaOrderState:
        raw = self.storage.get(order_key(self.project_id))
        if raw is None:
            return {}
        try:
            return _ORDER_ADAPTER.validate_python(raw, strict=True)
        except ValidationError as exc:
            logger.warning(
                "Ignoring malformed criteria order for project %s: %s",
                self.project_id, exc.errors()[0]["msg"],
            )
            return {}

    # -- state --------------------------------------------------------------

    @property
    def is_sorted_by_importance(self) -> bool:
        return self._sorted

    @property
    def custom_order(self) -> CriteriaOrderState:
        return {cat: list(ids) for cat, ids in self._order.items()}

    def _persist_order(self) -> None:
        self.storage.set(order_key(self.project_id), self._order)

    def toggle_sorting(self) -> bool:
        self._sorted = not self._sorted
        self.storage.set(sorting_key(self.project_id), self._sorted)
        logger.info(
            "Project %s criteria order mode -> %s",
            self.project_id, "sorted" if self._sorted else "manual",
        )
        return self._sorted

    def save_current_order(self, criteria: list[Criterion]) -> None:
        """Snapshot the presented criteria, grouped by category, as the manual order."""
        grouped: CriteriaOrderState = {}
        for c in criteria:
            grouped.setdefault(c.type.lower(), []).append(c.id)
        self._order = grouped
        self._persist_order()

    def update_order(self, category: str, ordered_ids: list[str]) -> None:
        """Replace (not merge) the saved sequence for one category."""
        self._order = {**self._order, category.lower(): list(ordered_ids)}
        self._persist_order()

    def get_ordered_criteria(
        self, criteria: list[Criterion], category: str,
    ) -> list[Criterion]:
        if self._sorted:
            return sort_by_importance(criteria)
        return apply_manual_order(criteria, self._order.get(category.lower(), []))
