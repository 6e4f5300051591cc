"""Grouped counts over the cancellation record set.

The ORM does the grouping and counting; the ``shape_*`` / ``rank_reasons``
helpers turn the grouped rows into summaries and stay database free.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Tuple

from django.db.models import Avg, Count, Q
from django.db.models.functions import TruncMonth

from cancellations.config import CLOSER_ROSTER, EARLY_CHURN_DAYS, TOP_REASONS_LIMIT, UNKNOWN_LABEL
from customers.models import Customer

logger = logging.getLogger(__name__)


def _ratio(numerator, denominator) -> float:
    return numerator / denominator if denominator else 0.0


@dataclass(frozen=True)
class CloserStats:
    name: str
    saves: int = 0
    total: int = 0

    @property
    def losses(self) -> int:
        return self.total - self.saves

    @property
    def save_rate(self) -> float:
        return _ratio(self.saves, self.total)

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "saves": self.saves,
            "cancellations": self.losses,
            "total": self.total,
            "saveRate": self.save_rate,
        }


@dataclass(frozen=True)
class CampaignStats:
    campaign: str
    customers: int = 0
    cancellations: int = 0

    @property
    def churn_rate(self) -> float:
        return _ratio(self.cancellations, self.customers)

    def to_dict(self) -> Dict:
        return {
            "campaign": self.campaign,
            "customers": self.customers,
            "cancellations": self.cancellations,
            "churnRate": self.churn_rate,
        }


@dataclass(frozen=True)
class ChurnSummary:
    total: int = 0
    saved: int = 0
    avg_days_on_platform: int = 0
    early_churn: int = 0
    # reason -> count, in grouping order
    reason_counts: Dict[str, int] = field(default_factory=dict)
    top_reasons: List[Tuple[str, int]] = field(default_factory=list)
    closers: Sequence[CloserStats] = ()
    campaigns: Sequence[CampaignStats] = ()

    @property
    def save_rate(self) -> float:
        return _ratio(self.saved, self.total)

    @property
    def early_churn_rate(self) -> float:
        return _ratio(self.early_churn, self.total)

    def totals_dict(self) -> Dict:
        return {
            "totalCancellations": self.total,
            "totalSaved": self.saved,
            "saveRate": self.save_rate,
            "avgDaysOnPlatform": self.avg_days_on_platform,
            "earlyChurn": self.early_churn,
            "topReasons": [{"reason": reason, "count": count} for reason, count in self.top_reasons],
        }


def rank_reasons(reason_counts: Dict[str, int], limit: int | None = None) -> List[Tuple[str, int]]:
    """Reasons by descending count; equal counts keep their grouping order."""
    ranked = sorted(reason_counts.items(), key=lambda item: item[1], reverse=True)
    return ranked[:limit] if limit is not None else ranked


def shape_closer_stats(rows: Iterable[Dict], roster: Sequence[str] = CLOSER_ROSTER) -> List[CloserStats]:
    """One entry per roster name, in roster order, idle closers included."""
    by_name = {row["closer_name"]: row for row in rows}
    stats = []
    for name in roster:
        row = by_name.get(name) or {}
        stats.append(CloserStats(name=name, saves=row.get("saves") or 0, total=row.get("total") or 0))
    return stats


def shape_campaign_stats(rows: Iterable[Dict]) -> List[CampaignStats]:
    """Fold grouped campaign rows, mapping missing or blank labels to "Unknown"."""
    merged: Dict[str, List[int]] = {}
    for row in rows:
        label = (row.get("source_campaign") or "").strip() or UNKNOWN_LABEL
        counts = merged.setdefault(label, [0, 0])
        counts[0] += row.get("customers") or 0
        counts[1] += row.get("cancellations") or 0
    return [
        CampaignStats(campaign=label, customers=customers, cancellations=cancellations)
        for label, (customers, cancellations) in merged.items()
    ]


def _round_half_up(value) -> int:
    return int(math.floor(value + 0.5))


def build_summary(queryset, roster: Sequence[str] = CLOSER_ROSTER) -> ChurnSummary:
    """Compute the dashboard summary for a (possibly filtered) cancellation queryset."""
    queryset = queryset.order_by()

    totals = queryset.aggregate(
        total=Count("id"),
        saved=Count("id", filter=Q(saved_flag=True)),
        avg_days=Avg("days_on_platform"),
        early=Count("id", filter=Q(days_on_platform__isnull=False, days_on_platform__lte=EARLY_CHURN_DAYS)),
    )

    reason_counts = {
        row["primary_reason"]: row["count"]
        for row in queryset.values("primary_reason").annotate(count=Count("id")).order_by("primary_reason")
    }

    closer_rows = queryset.values("closer_name").annotate(
        saves=Count("id", filter=Q(saved_flag=True)),
        total=Count("id"),
    ).order_by("closer_name")

    campaign_rows = Customer.objects.order_by().values("source_campaign").annotate(
        customers=Count("id", distinct=True),
        cancellations=Count(
            "cancellations",
            filter=Q(cancellations__id__in=queryset.values("id")),
            distinct=True,
        ),
    ).order_by("source_campaign")

    avg_days = totals["avg_days"]
    summary = ChurnSummary(
        total=totals["total"],
        saved=totals["saved"],
        avg_days_on_platform=_round_half_up(avg_days) if avg_days else 0,
        early_churn=totals["early"],
        reason_counts=reason_counts,
        top_reasons=rank_reasons(reason_counts, TOP_REASONS_LIMIT),
        closers=tuple(shape_closer_stats(closer_rows, roster)),
        campaigns=tuple(shape_campaign_stats(campaign_rows)),
    )
    logger.debug(f"Summary computed: total={summary.total} saved={summary.saved} early={summary.early_churn}")
    return summary


def reason_breakdown(queryset) -> Dict:
    """Overall reason counts plus reason counts per customer segment."""
    queryset = queryset.order_by()

    overall = [
        {"label": row["primary_reason"], "value": row["value"]}
        for row in queryset.values("primary_reason").annotate(value=Count("id")).order_by("primary_reason")
    ]

    by_segment: Dict[str, List[Dict]] = {}
    segment_rows = (
        queryset.values("customer__segment", "primary_reason")
        .annotate(value=Count("id"))
        .order_by("customer__segment", "primary_reason")
    )
    for row in segment_rows:
        key = row["customer__segment"] or UNKNOWN_LABEL
        by_segment.setdefault(key, []).append({"reason": row["primary_reason"], "value": row["value"]})

    return {"overall": overall, "bySegment": by_segment}


def monthly_churn(queryset) -> List[Dict]:
    """Cancellation counts per calendar month, oldest first."""
    rows = (
        queryset.order_by()
        .annotate(month=TruncMonth("cancellation_date"))
        .values("month")
        .annotate(value=Count("id"))
        .order_by("month")
    )
    return [{"month": row["month"].strftime("%Y-%m"), "value": row["value"]} for row in rows]
