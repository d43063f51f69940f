"""Property tax formulas."""

from collections.abc import Sequence
from typing import Any

from ..models.schema import AdministrativeGapBreakdown, PropertyTaxAnalysis, PropertyTaxCategory
from .base import DomainFormulas, aggregate


def _revenue(count: float, value: float, rate: float) -> float:
    return count * value * rate


class PropertyTaxFormulas(DomainFormulas[PropertyTaxCategory]):
    """Property tax: compliant taxpayers x assessed value x rate.

    Potential revenue scales the registered-category revenue (at estimated
    market value) up by the inverse of the jurisdiction-wide registration
    ratio, to stand for the whole estimated taxpayer population.
    """

    breakdown_type = AdministrativeGapBreakdown
    clamp_gap = True

    def __init__(
        self,
        total_estimated_tax_payers: float,
        registered_tax_payers: float,
        config: dict[str, Any] | None = None,
    ) -> None:
        """Initialize property tax formulas.

        Args:
            total_estimated_tax_payers: Estimated taxpayers in the jurisdiction
            registered_tax_payers: Taxpayers on the register
            config: Analysis configuration dictionary
        """
        super().__init__(config)
        self.total_estimated_tax_payers = total_estimated_tax_payers
        self.registered_tax_payers = registered_tax_payers

    @property
    def registration_ratio(self) -> float:
        """Registered / estimated taxpayers, 0 when either total is not positive."""
        if self.total_estimated_tax_payers <= 0 or self.registered_tax_payers <= 0:
            return 0.0
        return self.registered_tax_payers / self.total_estimated_tax_payers

    def _actual(self, categories: Sequence[PropertyTaxCategory]) -> float:
        return sum(
            _revenue(c.compliant_taxpayers, c.average_land_value, c.tax_rate) for c in categories
        )

    def _potential(self, categories: Sequence[PropertyTaxCategory]) -> float:
        ratio = self.registration_ratio
        if ratio == 0:
            return 0.0
        registered_revenue = sum(
            _revenue(c.registered_taxpayers, c.estimated_average_value, c.tax_rate)
            for c in categories
        )
        return registered_revenue / ratio

    def _named_gaps(
        self, categories: Sequence[PropertyTaxCategory], actual: float
    ) -> dict[str, float]:
        ratio = self.registration_ratio
        if ratio == 0:
            return {"registration_gap": 0.0, "compliance_gap": 0.0, "assessment_gap": 0.0}

        registration_gap = max(0.0, actual / ratio - actual)
        compliance_gap = sum(
            max(
                0.0,
                _revenue(
                    c.registered_taxpayers - c.compliant_taxpayers,
                    c.average_land_value,
                    c.tax_rate,
                ),
            )
            for c in categories
        )
        assessment_gap = sum(
            max(
                0.0,
                _revenue(
                    c.compliant_taxpayers,
                    c.estimated_average_value - c.average_land_value,
                    c.tax_rate,
                ),
            )
            for c in categories
        )
        return {
            "registration_gap": registration_gap,
            "compliance_gap": compliance_gap,
            "assessment_gap": assessment_gap,
        }


def analyze_property_tax(
    analysis: PropertyTaxAnalysis, config: dict[str, Any] | None = None
) -> PropertyTaxAnalysis:
    """Return a copy of the analysis with freshly computed metrics."""
    formulas = PropertyTaxFormulas(
        analysis.total_estimated_tax_payers, analysis.registered_tax_payers, config
    )
    return analysis.model_copy(update={"metrics": aggregate(analysis.categories, formulas)})
