"""Abstract formula set shared by every revenue domain, and the generic aggregator."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from ..classifiers.performance import get_performance_message, leveraged_percentage
from ..defaults import load_config
from ..models.schema import Category, GapBreakdown, Metrics
from ..validators.category import valid_categories

C = TypeVar("C", bound=Category)


class DomainFormulas(ABC, Generic[C]):
    """Abstract base class for per-domain revenue formulas.

    A formula set knows how one revenue domain turns category inputs into
    actual revenue, potential revenue and named gap components. Scalar
    jurisdiction-wide inputs (e.g., total estimated licensees) are passed at
    construction, so a formula set is a small immutable strategy object.

    Public `calculate_*` methods filter out invalid categories before
    delegating to the domain's `_actual`, `_potential` and `_named_gaps`.
    """

    breakdown_type: type[GapBreakdown]
    # Floor the total gap at zero (register-based domains)
    clamp_gap: bool = False

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        """Initialize formulas with configuration.

        Args:
            config: Analysis configuration dictionary (defaults to analysis.yaml)
        """
        self.config = config if config is not None else load_config()
        annualisation = self.config.get("annualisation", {})
        self.days_in_year = float(annualisation.get("days_in_year", 365))
        self.months_in_year = float(annualisation.get("months_in_year", 12))

    @abstractmethod
    def _actual(self, categories: Sequence[C]) -> float:
        """Actual revenue of valid categories."""

    @abstractmethod
    def _potential(self, categories: Sequence[C]) -> float:
        """Potential revenue of valid categories."""

    @abstractmethod
    def _named_gaps(self, categories: Sequence[C], actual: float) -> dict[str, float]:
        """Named gap components (each already floored at zero) of valid categories."""

    def calculate_actual_revenue(self, categories: Sequence[C]) -> float:
        """Sum actual revenue over the valid categories."""
        return self._actual(valid_categories(categories))

    def calculate_potential_revenue(self, categories: Sequence[C]) -> float:
        """Sum potential revenue over the valid categories."""
        return self._potential(valid_categories(categories))

    def calculate_named_gaps(self, categories: Sequence[C], actual: float) -> dict[str, float]:
        """Named gap components over the valid categories."""
        return self._named_gaps(valid_categories(categories), actual)

    def calculate_gap(self, actual: float, potential: float) -> float:
        """Total gap, floored at zero for domains with `clamp_gap`."""
        gap = potential - actual
        return max(0.0, gap) if self.clamp_gap else gap

    def calculate_gap_breakdown(
        self, categories: Sequence[C], actual: float, potential: float
    ) -> GapBreakdown:
        """Decompose the gap into named components plus the combined residual.

        Named components are computed first and independently of the totals;
        the combined residual is whatever remains of the total gap.

        Args:
            categories: All categories of the analysis (invalid ones are skipped)
            actual: Actual revenue from calculate_actual_revenue
            potential: Potential revenue from calculate_potential_revenue

        Returns:
            Domain-specific gap breakdown
        """
        named = self.calculate_named_gaps(categories, actual)
        gap = self.calculate_gap(actual, potential)
        combined = max(0.0, gap - sum(named.values()))
        return self.breakdown_type(**named, combined_gaps=combined)


def aggregate(categories: Sequence[C], formulas: DomainFormulas[C]) -> Metrics:
    """Compute the full metrics record for a category collection.

    Args:
        categories: Category models of one analysis
        formulas: Domain formula set

    Returns:
        Fresh Metrics record
    """
    actual = formulas.calculate_actual_revenue(categories)
    potential = formulas.calculate_potential_revenue(categories)
    gap = formulas.calculate_gap(actual, potential)
    gap_breakdown = formulas.calculate_gap_breakdown(categories, actual, potential)

    return Metrics(
        actual=actual,
        potential=potential,
        gap=gap,
        potential_leveraged=leveraged_percentage(actual, potential),
        gap_breakdown=gap_breakdown,
        analysis_message=get_performance_message(actual, potential, formulas.config),
    )
