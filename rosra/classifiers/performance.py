"""Performance classifier: maps the leveraged percentage to tiers and narrative text.

Purely presentational. Every function here is a lookup on the aggregator's
output; thresholds come from the `performance` section of analysis.yaml.
"""

from enum import Enum
from typing import Any

from ..defaults import load_config
from ..formatters import format_currency, format_percentage
from ..models.schema import GapBreakdown


class PerformanceTier(str, Enum):
    """Narrative tier of revenue performance."""

    SEVERE = "severe"
    MODERATE = "moderate"
    STRONG = "strong"


def _thresholds(config: dict[Any, Any] | None) -> dict[str, float]:
    config = config if config is not None else load_config()
    return {key: float(value) for key, value in config.get("performance", {}).items()}


def leveraged_percentage(actual: float, potential: float) -> float:
    """Actual revenue as a percentage of potential (0 when potential is not positive)."""
    return actual / potential * 100 if potential > 0 else 0.0


def get_performance_message(
    actual: float, potential: float, config: dict[Any, Any] | None = None
) -> str:
    """Get the one-line performance message stored with a metrics snapshot.

    Args:
        actual: Actual revenue
        potential: Potential revenue
        config: Optional configuration dictionary

    Returns:
        Canned message for the tier the leveraged percentage falls into
    """
    thresholds = _thresholds(config)
    percentage = leveraged_percentage(actual, potential)

    if percentage >= thresholds.get("excellent", 90):
        return "Excellent revenue performance!"
    if percentage >= thresholds.get("good", 70):
        return "Good revenue performance, but room for improvement."
    if percentage >= thresholds.get("moderate", 50):
        return "Moderate revenue performance. Consider improvement strategies."
    return "Significant room for revenue improvement. Review and update strategies."


def classify(percentage: float, config: dict[Any, Any] | None = None) -> PerformanceTier:
    """Map a leveraged percentage to a narrative tier."""
    thresholds = _thresholds(config)
    if percentage < thresholds.get("severe", 30):
        return PerformanceTier.SEVERE
    if percentage < thresholds.get("strong", 70):
        return PerformanceTier.MODERATE
    return PerformanceTier.STRONG


def get_gap_analysis_message(
    percentage: float,
    actual: float = 0.0,
    potential: float = 0.0,
    label: str = "Revenue",
    currency_symbol: str = "KSh",
    config: dict[Any, Any] | None = None,
) -> str:
    """Get the narrative gap analysis for a leveraged percentage.

    Args:
        percentage: Potential leveraged, in percent
        actual: Actual revenue (quoted in the narrative)
        potential: Potential revenue (quoted in the narrative)
        label: Revenue stream label (e.g., 'Short-term User Charge')
        currency_symbol: Currency symbol for amounts
        config: Optional configuration dictionary

    Returns:
        Narrative paragraph
    """
    tier = classify(percentage, config)
    severe = _thresholds(config).get("severe", 30)
    actual_text = format_currency(actual, currency_symbol)
    potential_text = format_currency(potential, currency_symbol)
    value_text = format_percentage(percentage)

    if tier is PerformanceTier.SEVERE:
        return (
            f"The {label} Revenue Collection faces a significant challenge as the "
            f"percentage of potential leveraged revenue falls below {severe:.0f}% at the "
            f"value {value_text}. This indicates a substantial gap between the revenue "
            f"collected ({actual_text}) and the total estimated potential revenue "
            f"({potential_text}). To close the gap, a comprehensive analysis of existing "
            "revenue channels, revisions of pricing structures may be required."
        )
    if tier is PerformanceTier.MODERATE:
        return (
            f"The {label} Revenue Collection shows moderate performance with {value_text} "
            "of potential revenue being leveraged. While this indicates some success in "
            f"revenue collection ({actual_text} out of {potential_text}), there remains "
            "room for improvement. Strategic initiatives to optimize revenue collection "
            "processes could help bridge the remaining gap."
        )
    return (
        f"The {label} Revenue Collection demonstrates strong performance with {value_text} "
        "of potential revenue being leveraged. This high percentage indicates effective "
        f"revenue collection practices, with {actual_text} collected out of a potential "
        f"{potential_text}. Maintaining current strategies while monitoring for "
        "optimization opportunities is recommended."
    )


# What each gap component says about the revenue stream
_GAP_EXPLANATIONS = {
    "registration_gap": "that a large share of potential payers are not on the register",
    "compliance_gap": (
        "a significant discrepancy between the number of potential payers and "
        "those actually paying"
    ),
    "assessment_gap": "that values or fees applied to paying entities are below their potential",
    "rate_gap": (
        "that the current rates being charged may need to be reviewed and adjusted to "
        "better align with market values or service costs"
    ),
    "combined_gaps": (
        "that multiple factors are contributing to the revenue gap and require a "
        "comprehensive approach"
    ),
}


def gap_title(component: str) -> str:
    """Display title of a gap component (e.g., 'compliance_gap' -> 'Compliance Gap')."""
    return component.replace("_", " ").title()


def largest_gap(breakdown: GapBreakdown) -> tuple[str, float]:
    """Return the (component, value) pair with the largest value; first wins ties."""
    components = breakdown.components()
    name = max(components, key=lambda key: components[key])
    return name, components[name]


def get_breakdown_analysis_message(
    breakdown: GapBreakdown,
    gap: float,
    label: str = "revenue",
    currency_symbol: str = "KSh",
) -> str:
    """Get the narrative naming the gap component that contributes most.

    Args:
        breakdown: Gap breakdown of one analysis
        gap: Total gap of the analysis
        label: Revenue stream label used in the sentence
        currency_symbol: Currency symbol for amounts

    Returns:
        Narrative paragraph
    """
    name, value = largest_gap(breakdown)
    stream = label.lower()

    if value <= 0:
        return (
            f"The gaps in {stream} collection are relatively balanced, with no single "
            f"gap type significantly outweighing the others. The total gap of "
            f"{format_currency(gap, currency_symbol)} suggests a need for a comprehensive "
            "approach to address all aspects of revenue collection equally."
        )

    return (
        f"{gap_title(name)} is identified as the largest gap contributing to the total "
        f"gap in {stream} collection, at {format_currency(value, currency_symbol)}. "
        f"This indicates {_GAP_EXPLANATIONS[name]}."
    )
