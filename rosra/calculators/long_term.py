"""Long-term land lease formulas."""

from collections.abc import Sequence
from typing import Any

from ..models.schema import LongTermAnalysis, LongTermCategory, UserChargeGapBreakdown
from .base import DomainFormulas, aggregate


class LongTermFormulas(DomainFormulas[LongTermCategory]):
    """Monthly lease charges, annualised over the configured months in a year."""

    breakdown_type = UserChargeGapBreakdown

    def _actual(self, categories: Sequence[LongTermCategory]) -> float:
        return sum(c.registered_leases * c.actual_rate * self.months_in_year for c in categories)

    def _potential(self, categories: Sequence[LongTermCategory]) -> float:
        return sum(c.estimated_leases * c.potential_rate * self.months_in_year for c in categories)

    def _named_gaps(self, categories: Sequence[LongTermCategory], actual: float) -> dict[str, float]:
        # Unregistered leases count as non-compliant
        compliance_gap = sum(
            max(0.0, (c.estimated_leases - c.registered_leases) * c.actual_rate)
            * self.months_in_year
            for c in categories
        )
        rate_gap = sum(
            max(0.0, c.registered_leases * (c.potential_rate - c.actual_rate))
            * self.months_in_year
            for c in categories
        )
        return {"compliance_gap": compliance_gap, "rate_gap": rate_gap}


def analyze_long_term(
    analysis: LongTermAnalysis, config: dict[str, Any] | None = None
) -> LongTermAnalysis:
    """Return a copy of the analysis with freshly computed metrics."""
    formulas = LongTermFormulas(config)
    return analysis.model_copy(update={"metrics": aggregate(analysis.categories, formulas)})
