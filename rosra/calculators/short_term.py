"""Short-term (daily) user charge formulas."""

from collections.abc import Sequence
from typing import Any

from ..models.schema import ShortTermAnalysis, ShortTermCategory, UserChargeGapBreakdown
from .base import DomainFormulas, aggregate


class ShortTermFormulas(DomainFormulas[ShortTermCategory]):
    """Daily user charges, annualised over the configured days in a year."""

    breakdown_type = UserChargeGapBreakdown

    def _actual(self, categories: Sequence[ShortTermCategory]) -> float:
        return sum(c.actual_daily_users * c.actual_rate * self.days_in_year for c in categories)

    def _potential(self, categories: Sequence[ShortTermCategory]) -> float:
        return sum(
            c.estimated_daily_users * c.potential_rate * self.days_in_year for c in categories
        )

    def _named_gaps(
        self, categories: Sequence[ShortTermCategory], actual: float
    ) -> dict[str, float]:
        compliance_gap = sum(
            max(0.0, (c.estimated_daily_users - c.actual_daily_users) * c.actual_rate)
            * self.days_in_year
            for c in categories
        )
        rate_gap = sum(
            max(0.0, c.actual_daily_users * (c.potential_rate - c.actual_rate)) * self.days_in_year
            for c in categories
        )
        return {"compliance_gap": compliance_gap, "rate_gap": rate_gap}


def analyze_short_term(
    analysis: ShortTermAnalysis, config: dict[str, Any] | None = None
) -> ShortTermAnalysis:
    """Return a copy of the analysis with freshly computed metrics."""
    formulas = ShortTermFormulas(config)
    return analysis.model_copy(update={"metrics": aggregate(analysis.categories, formulas)})
