"""Category validator for revenue-gap inputs."""

from collections.abc import Iterable, Sequence
from typing import TypeVar

from ..models.schema import Category

C = TypeVar("C", bound=Category)


def _label(field_name: str) -> str:
    """Turn a field name into a sentence label (e.g., 'compliant_licensees' -> 'Compliant licensees')."""
    return field_name.replace("_", " ").capitalize()


def validate_category(category: Category) -> list[str]:
    """Check a single category for internal consistency.

    Args:
        category: Any revenue category model

    Returns:
        List of violation reasons (empty list means valid)
    """
    reasons = []

    for field_name, value in category.numeric_fields().items():
        if value < 0:
            reasons.append(f"{_label(field_name)} cannot be negative")

    for smaller, larger in type(category).ordering:
        if getattr(category, smaller) > getattr(category, larger):
            reasons.append(
                f"{_label(smaller)} cannot exceed {_label(larger).lower()}"
            )

    return reasons


def is_valid(category: Category) -> bool:
    """Return True if the category passes every check."""
    return not validate_category(category)


def valid_categories(categories: Iterable[C]) -> list[C]:
    """Filter a collection down to the categories that may enter aggregate sums."""
    return [category for category in categories if is_valid(category)]


class CategoryValidator:
    """Validator for a whole category collection.

    Invalid categories are never rejected: they stay in the stored list and are
    excluded from revenue sums. The validator reports them as warnings so the
    caller can surface them. Structural problems that make the analysis itself
    unreliable (duplicate ids, inconsistent totals) are reported as errors.
    """

    def __init__(self) -> None:
        self.errors: list[str] = []
        self.warnings: list[str] = []
        self.excluded: list[str] = []
        self.checked = 0

    def validate(
        self,
        categories: Sequence[Category],
        totals: dict[str, float] | None = None,
    ) -> bool:
        """Validate categories and optional jurisdiction-wide totals.

        Args:
            categories: Category models of one analysis
            totals: Optional scalar totals (e.g., {'registered_tax_payers': 100,
                'total_estimated_tax_payers': 150})

        Returns:
            True if no errors were found (warnings do not fail validation)
        """
        self.errors = []
        self.warnings = []
        self.excluded = []
        self.checked = len(categories)

        self._validate_categories(categories)
        self._validate_unique_ids(categories)
        if totals:
            self._validate_totals(totals)

        return len(self.errors) == 0

    def _validate_categories(self, categories: Sequence[Category]) -> None:
        """Record each invalid category as an excluded warning."""
        for category in categories:
            reasons = validate_category(category)
            if reasons:
                self.excluded.append(category.id)
                name = category.name or category.id
                self.warnings.append(
                    f"Category '{name}' excluded from totals: {'; '.join(reasons)}"
                )

    def _validate_unique_ids(self, categories: Sequence[Category]) -> None:
        """Check that category ids are unique within the analysis."""
        ids = [c.id for c in categories]
        if len(ids) != len(set(ids)):
            duplicates = sorted({cid for cid in ids if ids.count(cid) > 1})
            self.errors.append(f"Duplicate category IDs found: {', '.join(duplicates)}")

    def _validate_totals(self, totals: dict[str, float]) -> None:
        """Check jurisdiction-wide totals for sign and registration consistency."""
        for name, value in totals.items():
            if value < 0:
                self.errors.append(f"{_label(name)} cannot be negative")

        registered = totals.get("registered_tax_payers")
        estimated = totals.get("total_estimated_tax_payers")
        if registered is not None and estimated is not None:
            if estimated == 0 and registered > 0:
                self.warnings.append(
                    "Total estimated tax payers is 0; potential revenue will be reported as 0"
                )
            elif registered > estimated:
                self.warnings.append(
                    f"Registered tax payers ({registered:,.0f}) exceed total estimated "
                    f"tax payers ({estimated:,.0f}); potential is scaled down"
                )

    def get_report(self) -> str:
        """Get validation report as formatted string.

        The first line summarizes the collection; each error and warning
        follows on its own indented line.

        Returns:
            Multi-line report
        """
        status = "❌ Failed" if self.errors else "✅ Passed"
        lines = [
            f"{status}: {self.checked} categories checked, "
            f"{len(self.excluded)} excluded from totals"
        ]
        lines.extend(f"  ❌ {error}" for error in self.errors)
        lines.extend(f"  ⚠️  {warning}" for warning in self.warnings)
        return "\n".join(lines)
