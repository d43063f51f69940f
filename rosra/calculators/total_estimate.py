"""Cross-domain rollup of a report's revenue streams.

Sums the metrics of every analysis present on a report, identifies the
largest gap by stream and by gap type, and estimates the potential of the
own-source revenue that none of the five streams cover.
"""

from typing import Any

from pydantic import Field

from ..defaults import domain_label, load_config
from ..models.schema import Metrics, Number, Report, RosraModel
from . import analyze

GAP_TYPES = ("registration_gap", "compliance_gap", "assessment_gap", "rate_gap", "combined_gaps")


class StreamSummary(RosraModel):
    """Headline numbers of one revenue stream."""

    domain: str
    label: str
    actual: Number = 0
    potential: Number = 0
    gap: Number = 0
    potential_leveraged: Number = 0


class TotalEstimate(RosraModel):
    """Totals across every revenue stream of a report."""

    streams: list[StreamSummary] = Field(default_factory=list)
    total_actual: Number = 0
    total_potential: Number = 0
    total_gap: Number = 0
    potential_leveraged: Number = 0
    average_gap_percentage: Number = 0
    gap_breakdown: dict[str, float] = Field(default_factory=dict)
    largest_gap_stream: str | None = None
    largest_gap_type: str | None = None
    actual_osr: Number = 0
    budgeted_osr: Number = 0
    other_revenue: Number = 0
    potential_other_osr: Number = 0


def potential_other_osr(other_revenue: float, average_gap_percentage: float) -> float:
    """Estimate the potential of revenue outside the analysed streams.

    Applies the average gap of the analysed streams to the remaining revenue,
    with the multiplier capped at 10x and a flat 2x when the gap is 100% or more.

    Args:
        other_revenue: Actual OSR not covered by the analysed streams
        average_gap_percentage: Total gap / total potential x 100

    Returns:
        Estimated potential of the other revenue
    """
    if average_gap_percentage >= 100:
        return other_revenue * 2
    multiplier = min(10.0, 1 / (1 - average_gap_percentage / 100))
    return other_revenue * multiplier


def _stream_metrics(report: Report, config: dict[Any, Any]) -> dict[str, Metrics]:
    metrics: dict[str, Metrics] = {}
    for domain, analysis in report.analyses().items():
        refreshed = analyze(domain, analysis, config)
        metrics[domain] = refreshed.metrics
    return metrics


def summarize_report(report: Report, config: dict[Any, Any] | None = None) -> TotalEstimate:
    """Roll every analysis of a report up into a TotalEstimate.

    Metrics are recomputed from the categories rather than read from the
    stored snapshots.

    Args:
        report: Report with zero or more analyses
        config: Optional configuration dictionary

    Returns:
        TotalEstimate for the report
    """
    config = config if config is not None else load_config()
    metrics = _stream_metrics(report, config)

    streams = [
        StreamSummary(
            domain=domain,
            label=domain_label(domain, config),
            actual=m.actual,
            potential=m.potential,
            gap=m.gap,
            potential_leveraged=m.potential_leveraged,
        )
        for domain, m in metrics.items()
    ]

    total_actual = sum(s.actual for s in streams)
    total_potential = sum(s.potential for s in streams)
    total_gap = total_potential - total_actual
    average_gap_percentage = total_gap / total_potential * 100 if total_potential else 0.0

    gap_breakdown = {gap_type: 0.0 for gap_type in GAP_TYPES}
    for m in metrics.values():
        for gap_type, value in m.gap_breakdown.components().items():
            gap_breakdown[gap_type] += value

    largest_stream = max(streams, key=lambda s: s.gap, default=None)
    largest_type = max(gap_breakdown, key=lambda key: gap_breakdown[key])

    other_revenue = max(0.0, report.actual_osr - total_actual)

    return TotalEstimate(
        streams=streams,
        total_actual=total_actual,
        total_potential=total_potential,
        total_gap=total_gap,
        potential_leveraged=total_actual / total_potential * 100 if total_potential > 0 else 0,
        average_gap_percentage=average_gap_percentage,
        gap_breakdown=gap_breakdown,
        largest_gap_stream=largest_stream.label if largest_stream and largest_stream.gap > 0 else None,
        largest_gap_type=largest_type if gap_breakdown[largest_type] > 0 else None,
        actual_osr=report.actual_osr,
        budgeted_osr=report.budgeted_osr,
        other_revenue=other_revenue,
        potential_other_osr=potential_other_osr(other_revenue, average_gap_percentage),
    )
