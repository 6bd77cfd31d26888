"""Health scoring: tiers, history aggregation, dashboard statistics."""
from __future__ import annotations

from dataclasses import dataclass, asdict
from decimal import Decimal, ROUND_HALF_UP

from apps.core.constants import (
    HealthTier, HealthSortOrder,
    HEALTH_EXCELLENT_ABOVE, HEALTH_GOOD_MIN, HEALTH_AVERAGE_MIN,
)


def round_half_up(value, places=0):
    """Round like a spreadsheet does (2.5 -> 3), returning int for places=0."""
    exponent = Decimal(1).scaleb(-places)
    rounded = Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP)
    if places == 0:
        return int(rounded)
    return float(rounded)


@dataclass(frozen=True)
class HealthHistorySummary:
    average: int = 0
    minimum: int = 0
    maximum: int = 0
    sample_count: int = 0

    @property
    def has_data(self):
        return self.sample_count > 0

    def as_dict(self):
        return {**asdict(self), 'has_data': self.has_data}


class HealthScorer:
    """Classifies and summarizes cell group health scores."""

    @staticmethod
    def classify_tier(score):
        """
        Map a 0-100 score to a tier.

        >90 excellent, 70-90 good, 50-69.99 average, below 50 poor.
        A missing score is poor.
        """
        if score is None:
            return HealthTier.POOR
        score = Decimal(str(score))
        if score > HEALTH_EXCELLENT_ABOVE:
            return HealthTier.EXCELLENT
        if score >= HEALTH_GOOD_MIN:
            return HealthTier.GOOD
        if score >= HEALTH_AVERAGE_MIN:
            return HealthTier.AVERAGE
        return HealthTier.POOR

    @staticmethod
    def clamp_score(score):
        """Rounded display score clamped to 0-100."""
        if score is None:
            return 0
        return max(0, min(100, round_half_up(score)))

    @staticmethod
    def summarize_history(samples):
        """
        Average/min/max of attendance-rate samples (fractions 0-1) as percentages.

        Accepts numbers or objects with an ``attendance`` attribute.
        Returns an all-zero summary with has_data False when empty.
        """
        values = []
        for sample in samples:
            rate = getattr(sample, 'attendance', sample)
            values.append(round_half_up(Decimal(str(rate or 0)) * 100))

        if not values:
            return HealthHistorySummary()

        return HealthHistorySummary(
            average=round_half_up(Decimal(sum(values)) / len(values)),
            minimum=min(values),
            maximum=max(values),
            sample_count=len(values),
        )

    @staticmethod
    def dashboard_summary(groups):
        """
        Totals over a filtered set of groups.

        Returns dict with total_groups, total_members, average_health
        (one decimal, 0.0 for no groups).
        """
        groups = list(groups)
        total = len(groups)
        total_members = sum(g.member_count for g in groups)
        average = 0.0
        if total:
            score_sum = sum(Decimal(str(g.health_score or 0)) for g in groups)
            average = round_half_up(score_sum / total, 1)
        return {
            'total_groups': total,
            'total_members': total_members,
            'average_health': average,
        }

    @staticmethod
    def filter_groups(groups, search=None, low_health_only=False, sort_by=HealthSortOrder.NAME):
        """Search by name, optionally keep poor groups only, then sort."""
        selected = list(groups)
        if search:
            needle = search.lower()
            selected = [g for g in selected if needle in g.name.lower()]
        if low_health_only:
            selected = [g for g in selected if (g.health_score or 0) < HEALTH_AVERAGE_MIN]

        if sort_by == HealthSortOrder.HEALTH:
            selected.sort(key=lambda g: g.health_score or 0, reverse=True)
        elif sort_by == HealthSortOrder.MEMBERS:
            selected.sort(key=lambda g: g.member_count, reverse=True)
        else:
            selected.sort(key=lambda g: g.name.lower())
        return selected

    @staticmethod
    def group_health_records(snapshot, groups=None):
        """
        Per-group health view for the dashboard.

        Returns list of dicts with score, tier, member count, history
        summary, attendance_rate and avg_visitors.
        """
        if groups is None:
            groups = snapshot.groups.values()

        records = []
        for group in groups:
            samples = snapshot.samples_for(group.id)
            reports = snapshot.reports_for(group.id)
            tier = HealthScorer.classify_tier(group.health_score)

            attendance_rate = 0.0
            if samples:
                total_rate = sum(Decimal(str(s.attendance or 0)) for s in samples)
                attendance_rate = round_half_up(total_rate / len(samples), 3)

            avg_visitors = 0.0
            if reports:
                avg_visitors = round_half_up(
                    Decimal(sum(r.visitor_count for r in reports)) / len(reports), 1
                )

            records.append({
                'id': group.id,
                'name': group.name,
                'health_score': float(group.health_score or 0),
                'display_score': HealthScorer.clamp_score(group.health_score),
                'tier': tier.value,
                'tier_label': str(tier.label),
                'members_count': group.member_count,
                'report_count': len(reports),
                'attendance_rate': attendance_rate,
                'avg_visitors': avg_visitors,
                'history': HealthScorer.summarize_history(samples).as_dict(),
            })
        return records
