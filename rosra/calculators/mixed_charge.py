"""Mixed user charge formulas (daily users plus monthly subscribers)."""

from collections.abc import Sequence
from typing import Any

from ..models.schema import MixedChargeAnalysis, MixedChargeCategory, UserChargeGapBreakdown
from .base import DomainFormulas, aggregate


class MixedChargeFormulas(DomainFormulas[MixedChargeCategory]):
    """Mixed charges: daily revenue x days in year + monthly revenue x months in year."""

    breakdown_type = UserChargeGapBreakdown

    def _annual(self, daily: float, monthly: float) -> float:
        return daily * self.days_in_year + monthly * self.months_in_year

    def _actual(self, categories: Sequence[MixedChargeCategory]) -> float:
        return sum(
            self._annual(
                c.actual_daily_users * c.actual_daily_fee,
                c.paying_monthly_users * c.actual_monthly_rate,
            )
            for c in categories
        )

    def _potential(self, categories: Sequence[MixedChargeCategory]) -> float:
        return sum(
            self._annual(
                c.estimated_daily_users * c.average_daily_fee,
                c.available_monthly_users * c.average_monthly_rate,
            )
            for c in categories
        )

    def _named_gaps(
        self, categories: Sequence[MixedChargeCategory], actual: float
    ) -> dict[str, float]:
        compliance_gap = 0.0
        rate_gap = 0.0
        for c in categories:
            compliance_gap += self._annual(
                max(0.0, (c.estimated_daily_users - c.actual_daily_users) * c.actual_daily_fee),
                max(
                    0.0,
                    (c.available_monthly_users - c.paying_monthly_users) * c.actual_monthly_rate,
                ),
            )
            rate_gap += self._annual(
                max(0.0, c.actual_daily_users * (c.average_daily_fee - c.actual_daily_fee)),
                max(0.0, c.paying_monthly_users * (c.average_monthly_rate - c.actual_monthly_rate)),
            )
        return {"compliance_gap": compliance_gap, "rate_gap": rate_gap}


def analyze_mixed_charge(
    analysis: MixedChargeAnalysis, config: dict[str, Any] | None = None
) -> MixedChargeAnalysis:
    """Return a copy of the analysis with freshly computed metrics."""
    formulas = MixedChargeFormulas(config)
    return analysis.model_copy(update={"metrics": aggregate(analysis.categories, formulas)})
