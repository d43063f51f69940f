"""JSON report files: load, save, recompute metrics and index.

Reports are stored one per file (`<report-id>.json`) in camelCase JSON, the
same document shape the web layer persists. Metrics are a derived cache:
`refresh_metrics` always rebuilds them from the category lists.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from . import __version__
from .calculators import analyze
from .calculators.total_estimate import summarize_report
from .models.index import ReportEntry, ReportIndex
from .models.schema import Report
from .validators.category import CategoryValidator

logger = logging.getLogger(__name__)


def load_report(path: Path) -> Report:
    """Load and validate a report file.

    Args:
        path: Path to a report JSON file

    Returns:
        Parsed Report

    Raises:
        FileNotFoundError: If the file does not exist
        pydantic.ValidationError: If the document does not match the schema
    """
    with open(path) as f:
        data = json.load(f)
    return Report.model_validate(data)


def save_report(report: Report, path: Path) -> Path:
    """Write a report as camelCase JSON, creating parent directories.

    Args:
        report: Report to write
        path: Destination file

    Returns:
        The path written
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(report.to_document(), f, indent=2, default=str)
    return path


def report_path(directory: Path, report_id: str) -> Path:
    """Return the canonical file path of a report in a directory."""
    return directory / f"{report_id}.json"


def _log_exclusions(domain: str, analysis: Any) -> None:
    validator = CategoryValidator()
    validator.validate(analysis.categories)
    for warning in validator.warnings:
        logger.warning("%s: %s", domain, warning)
    for error in validator.errors:
        logger.error("%s: %s", domain, error)


def refresh_metrics(report: Report, config: dict[Any, Any] | None = None) -> Report:
    """Recompute the metrics of every analysis on a report.

    Args:
        report: Report to refresh (not modified)
        config: Optional configuration dictionary

    Returns:
        New Report with fresh metrics snapshots and a bumped updated_at
    """
    updates: dict[str, Any] = {}
    for domain, analysis in report.analyses().items():
        _log_exclusions(domain, analysis)
        updates[domain] = analyze(domain, analysis, config)
    updates["updated_at"] = datetime.now()
    return report.model_copy(update=updates)


def load_reports(directory: Path) -> dict[Path, Report]:
    """Load every report file in a directory.

    Files that are not valid reports (e.g., index.json) are skipped with a
    warning.

    Args:
        directory: Directory containing report JSON files

    Returns:
        Dictionary mapping file path to Report, sorted by file name
    """
    reports: dict[Path, Report] = {}
    for json_file in sorted(directory.glob("*.json")):
        if json_file.name == "index.json":
            continue
        try:
            reports[json_file] = load_report(json_file)
        except (ValueError, OSError) as e:
            logger.warning("Skipping %s: %s", json_file, e)
    return reports


def reports_for_user(directory: Path, user_id: str) -> list[Report]:
    """Return a user's reports, most recently updated first."""
    reports = [r for r in load_reports(directory).values() if r.user_id == user_id]
    return sorted(reports, key=lambda r: r.updated_at, reverse=True)


def delete_report(directory: Path, report_id: str, user_id: str) -> bool:
    """Delete a report file together with its embedded analyses.

    Args:
        directory: Directory containing report files
        report_id: Report to delete
        user_id: Requesting user; must own the report

    Returns:
        True if a file was deleted, False if no such report exists

    Raises:
        ValueError: If the report belongs to another user
    """
    path = report_path(directory, report_id)
    if not path.exists():
        return False
    report = load_report(path)
    if report.user_id != user_id:
        raise ValueError(f"Report '{report_id}' does not belong to user '{user_id}'")
    path.unlink()
    return True


def build_index(directory: Path, config: dict[Any, Any] | None = None) -> ReportIndex:
    """Build an index of every report in a directory.

    Args:
        directory: Directory containing report files
        config: Optional configuration dictionary

    Returns:
        ReportIndex sorted by updated_at, newest first
    """
    entries: list[ReportEntry] = []
    for path, report in load_reports(directory).items():
        summary = summarize_report(report, config)
        entries.append(
            ReportEntry(
                id=report.id,
                user_id=report.user_id,
                title=report.title,
                country=report.country,
                financial_year=report.financial_year,
                file=path.name,
                domains=list(report.analyses()),
                total_actual=summary.total_actual,
                total_potential=summary.total_potential,
                potential_leveraged=summary.potential_leveraged,
                updated_at=report.updated_at,
            )
        )
    entries.sort(key=lambda e: e.updated_at, reverse=True)

    return ReportIndex(
        reports=entries,
        last_updated=datetime.now().isoformat(),
        version=__version__,
    )
