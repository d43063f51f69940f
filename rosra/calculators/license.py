"""License formulas."""

from collections.abc import Sequence
from typing import Any

from ..models.schema import AdministrativeGapBreakdown, LicenseAnalysis, LicenseCategory
from .base import DomainFormulas, aggregate


class LicenseFormulas(DomainFormulas[LicenseCategory]):
    """Licenses: compliant licensees x average paid fee.

    Potential revenue charges every estimated licensee the official fee, plus
    the jurisdiction-wide licensees not on any register at the mean fee
    across categories.

    The unregistered term is jurisdiction-wide: it counts the registered
    licensees and the mean fee of every category, including categories that
    are excluded from the per-category sums.
    """

    breakdown_type = AdministrativeGapBreakdown
    clamp_gap = True

    def __init__(
        self, total_estimated_licensees: float, config: dict[str, Any] | None = None
    ) -> None:
        """Initialize license formulas.

        Args:
            total_estimated_licensees: Estimated licensees across the jurisdiction
            config: Analysis configuration dictionary
        """
        super().__init__(config)
        self.total_estimated_licensees = total_estimated_licensees

    @staticmethod
    def average_license_fee(categories: Sequence[LicenseCategory]) -> float:
        """Unweighted mean of the official fee across categories (0 for none)."""
        if not categories:
            return 0.0
        return sum(c.license_fee for c in categories) / len(categories)

    def unregistered_licensees(self, categories: Sequence[LicenseCategory]) -> float:
        """Estimated licensees not on any category's register, floored at 0."""
        total_registered = sum(c.registered_licensees for c in categories)
        return max(0.0, self.total_estimated_licensees - total_registered)

    def calculate_potential_revenue(self, categories: Sequence[LicenseCategory]) -> float:
        """Valid-category revenue at the official fee plus unregistered licensees at the mean fee.

        Args:
            categories: All categories of the analysis

        Returns:
            Potential revenue, 0 when the jurisdiction total is negative
        """
        if self.total_estimated_licensees < 0:
            return 0.0
        unregistered_revenue = self.unregistered_licensees(
            categories
        ) * self.average_license_fee(categories)
        return super().calculate_potential_revenue(categories) + unregistered_revenue

    def calculate_named_gaps(
        self, categories: Sequence[LicenseCategory], actual: float
    ) -> dict[str, float]:
        """Registration gap over all categories; compliance and assessment over valid ones."""
        if not categories:
            return {"registration_gap": 0.0, "compliance_gap": 0.0, "assessment_gap": 0.0}

        total_registered = sum(c.registered_licensees for c in categories)
        registration_gap = max(
            0.0,
            (self.total_estimated_licensees - total_registered)
            * self.average_license_fee(categories),
        )
        return {
            "registration_gap": registration_gap,
            **super().calculate_named_gaps(categories, actual),
        }

    def _actual(self, categories: Sequence[LicenseCategory]) -> float:
        return sum(c.compliant_licensees * c.average_paid_license_fee for c in categories)

    def _potential(self, categories: Sequence[LicenseCategory]) -> float:
        return sum(c.estimated_licensees * c.license_fee for c in categories)

    def _named_gaps(self, categories: Sequence[LicenseCategory], actual: float) -> dict[str, float]:
        compliance_gap = sum(
            max(0.0, (c.registered_licensees - c.compliant_licensees) * c.average_paid_license_fee)
            for c in categories
        )
        assessment_gap = sum(
            max(0.0, c.compliant_licensees * (c.license_fee - c.average_paid_license_fee))
            for c in categories
        )
        return {"compliance_gap": compliance_gap, "assessment_gap": assessment_gap}


def analyze_license(
    analysis: LicenseAnalysis, config: dict[str, Any] | None = None
) -> LicenseAnalysis:
    """Return a copy of the analysis with freshly computed metrics."""
    formulas = LicenseFormulas(analysis.total_estimated_licensees, config)
    return analysis.model_copy(update={"metrics": aggregate(analysis.categories, formulas)})
