"""Label-based scoring for merged pull requests.

Each level label is worth a fixed number of points. An item carrying several
level labels earns every one of them, so ``[level1, level2]`` scores 35.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from statsbot.ingestion.github import ActivityBundle, ActivityItem

LABEL_POINTS: dict[str, int] = {
    "level1": 10,
    "level2": 25,
    "level3": 45,
}

TIER_LABELS: tuple[str, ...] = tuple(LABEL_POINTS)


@dataclass
class PartnerBreakdown:
    """A bundle narrowed to the items carrying the partner-program label."""

    label: str
    assigned: list[ActivityItem] = field(default_factory=list)
    open: list[ActivityItem] = field(default_factory=list)
    merged: list[ActivityItem] = field(default_factory=list)
    tier_counts: dict[str, int] = field(default_factory=dict)


def label_points(label: str) -> int:
    return LABEL_POINTS.get(label.lower(), 0)


def calculate_score(items: Iterable[ActivityItem]) -> int:
    """Sum the points of every label on every item. Unknown labels are worth 0."""
    return sum(label_points(label) for item in items for label in item.labels)


def filter_by_label(items: Iterable[ActivityItem], label: str) -> list[ActivityItem]:
    """Keep the items carrying ``label`` (case-insensitive exact match), in order."""
    return [item for item in items if item.has_label(label)]


def count_by_tier(items: Iterable[ActivityItem]) -> dict[str, int]:
    items = list(items)
    return {tier: len(filter_by_label(items, tier)) for tier in TIER_LABELS}


def partner_breakdown(bundle: ActivityBundle, label: str) -> PartnerBreakdown:
    merged = filter_by_label(bundle.merged_prs, label)
    return PartnerBreakdown(
        label=label,
        assigned=filter_by_label(bundle.assigned_issues, label),
        open=filter_by_label(bundle.open_prs, label),
        merged=merged,
        tier_counts=count_by_tier(merged),
    )
