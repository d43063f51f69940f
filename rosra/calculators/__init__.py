"""Revenue and gap formulas for each OSR domain."""

from collections.abc import Callable
from typing import Any

from ..models.schema import RosraModel
from .license import analyze_license
from .long_term import analyze_long_term
from .mixed_charge import analyze_mixed_charge
from .property_tax import analyze_property_tax
from .short_term import analyze_short_term

ANALYZERS: dict[str, Callable[..., Any]] = {
    "property_tax": analyze_property_tax,
    "license": analyze_license,
    "short_term": analyze_short_term,
    "long_term": analyze_long_term,
    "mixed_charge": analyze_mixed_charge,
}


def analyze(domain: str, analysis: RosraModel, config: dict[str, Any] | None = None) -> Any:
    """Recompute metrics for an analysis of the given domain.

    Args:
        domain: Analysis domain (e.g., 'short_term')
        analysis: Analysis model of that domain
        config: Optional configuration dictionary

    Returns:
        Copy of the analysis with fresh metrics

    Raises:
        ValueError: If domain is unknown
    """
    if domain not in ANALYZERS:
        raise ValueError(f"Unknown domain '{domain}'. Available: {', '.join(ANALYZERS)}")
    return ANALYZERS[domain](analysis, config)
