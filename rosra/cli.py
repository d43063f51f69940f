"""Command-line interface for ROSRA revenue-gap reports."""

import argparse
import json
import logging
import sys
from pathlib import Path

from .calculators.total_estimate import summarize_report
from .classifiers.performance import get_breakdown_analysis_message, get_gap_analysis_message
from .defaults import available_domains, default_analysis, domain_label, load_config
from .extractors.spreadsheet import SpreadsheetExtractor
from .formatters import format_currency, format_percentage
from .models.schema import ANALYSIS_TYPES
from .store import build_index, load_report, refresh_metrics, save_report
from .validators.category import CategoryValidator


def analyze_command(args: argparse.Namespace) -> int:
    """Recompute metrics for every analysis in a report file.

    Args:
        args: Parsed command-line arguments (report, optional output)

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        config = load_config()
        report = refresh_metrics(load_report(Path(args.report)), config)
        output_file = Path(args.output) if args.output else Path(args.report)
        save_report(report, output_file)

        symbol = report.currency_symbol
        for domain, analysis in report.analyses().items():
            metrics = analysis.metrics
            label = domain_label(domain, config)
            print(f"\n{label}")
            print(f"   Actual revenue:     {format_currency(metrics.actual, symbol)}")
            print(f"   Potential revenue:  {format_currency(metrics.potential, symbol)}")
            print(f"   Gap:                {format_currency(metrics.gap, symbol)}")
            print(f"   Potential leveraged: {format_percentage(metrics.potential_leveraged)}")
            for name, value in metrics.gap_breakdown.components().items():
                print(f"     {name}: {format_currency(value, symbol)}")
            if args.narrative:
                print()
                print(
                    get_gap_analysis_message(
                        metrics.potential_leveraged,
                        metrics.actual,
                        metrics.potential,
                        label=label,
                        currency_symbol=symbol,
                        config=config,
                    )
                )
                print(
                    get_breakdown_analysis_message(
                        metrics.gap_breakdown, metrics.gap, label=label, currency_symbol=symbol
                    )
                )
            else:
                print(f"   {metrics.analysis_message}")

        print(f"\n✅ Saved metrics to {output_file}")
        return 0

    except Exception as e:
        print(f"❌ Error analyzing report: {e}", file=sys.stderr)
        import traceback

        traceback.print_exc()
        return 1


def validate_command(args: argparse.Namespace) -> int:
    """Validate the categories of every analysis in a report file.

    Args:
        args: Parsed command-line arguments (report)

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        print(f"Validating {args.report}...")
        report = load_report(Path(args.report))

        all_valid = True
        for domain, analysis in report.analyses().items():
            totals = None
            if domain == "property_tax":
                totals = {
                    "total_estimated_tax_payers": analysis.total_estimated_tax_payers,
                    "registered_tax_payers": analysis.registered_tax_payers,
                }
            elif domain == "license":
                totals = {"total_estimated_licensees": analysis.total_estimated_licensees}

            validator = CategoryValidator()
            if not validator.validate(analysis.categories, totals):
                all_valid = False
            print(f"\n{domain_label(domain)} ({len(analysis.categories)} categories)")
            print(validator.get_report())

        if all_valid:
            print("\n✅ Report validated successfully")
            return 0
        else:
            print("\n❌ Report failed validation")
            return 1

    except Exception as e:
        print(f"❌ Error validating: {e}", file=sys.stderr)
        return 1


def import_command(args: argparse.Namespace) -> int:
    """Replace one analysis' categories with rows from a CSV file.

    Args:
        args: Parsed command-line arguments (report, domain, csv)

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        print(f"Importing {args.domain} categories from {args.csv}...")

        report_file = Path(args.report)
        report = load_report(report_file)

        extractor = SpreadsheetExtractor(load_config())
        categories = extractor.extract(Path(args.csv), args.domain)

        analysis = getattr(report, args.domain) or ANALYSIS_TYPES[args.domain]()
        analysis = analysis.model_copy(update={"categories": categories})
        report = refresh_metrics(report.model_copy(update={args.domain: analysis}))
        save_report(report, report_file)

        print(f"✅ Imported {len(categories)} categories into {report_file}")
        return 0

    except Exception as e:
        print(f"❌ Error importing categories: {e}", file=sys.stderr)
        return 1


def summary_command(args: argparse.Namespace) -> int:
    """Print the cross-stream total estimate for a report.

    Args:
        args: Parsed command-line arguments (report, optional json flag)

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        report = load_report(Path(args.report))
        summary = summarize_report(report)

        if args.json:
            print(json.dumps(summary.to_document(), indent=2))
            return 0

        symbol = report.currency_symbol
        print(f"{report.title} ({report.country} {report.financial_year})")
        for stream in summary.streams:
            print(
                f"   {stream.label}: {format_currency(stream.actual, symbol)} of "
                f"{format_currency(stream.potential, symbol)} "
                f"({format_percentage(stream.potential_leveraged)})"
            )
        print(f"   Total actual:    {format_currency(summary.total_actual, symbol)}")
        print(f"   Total potential: {format_currency(summary.total_potential, symbol)}")
        print(f"   Total gap:       {format_currency(summary.total_gap, symbol)}")
        if summary.largest_gap_stream:
            print(f"   Largest gap by source: {summary.largest_gap_stream}")
        if summary.largest_gap_type:
            print(f"   Largest gap type: {summary.largest_gap_type}")
        print(
            f"   Potential of other OSR: {format_currency(summary.potential_other_osr, symbol)}"
        )
        return 0

    except Exception as e:
        print(f"❌ Error summarizing report: {e}", file=sys.stderr)
        return 1


def index_command(args: argparse.Namespace) -> int:
    """Generate index.json listing every report in a directory.

    Args:
        args: Parsed command-line arguments (directory)

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        print("Generating index...")

        directory = Path(args.directory)
        index = build_index(directory)

        index_file = directory / "index.json"
        with open(index_file, "w") as f:
            json.dump(index.to_document(), f, indent=2)

        print(f"✅ Generated {index_file}")
        print(f"   Reports: {len(index.reports)}")
        print(f"   Users: {len({r.user_id for r in index.reports})}")

        return 0

    except Exception as e:
        print(f"❌ Error generating index: {e}", file=sys.stderr)
        return 1


def defaults_command(args: argparse.Namespace) -> int:
    """Print the default analysis of a domain as JSON.

    Args:
        args: Parsed command-line arguments (domain)

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        analysis = default_analysis(args.domain)
        print(json.dumps(analysis.to_document(), indent=2))
        return 0

    except Exception as e:
        print(f"❌ Error building defaults: {e}", file=sys.stderr)
        return 1


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="ROSRA - Revenue gap analysis for own-source revenue streams"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Analyze command
    analyze_parser = subparsers.add_parser("analyze", help="Recompute metrics for a report")
    analyze_parser.add_argument("report", help="Report JSON file")
    analyze_parser.add_argument("--output", help="Write to this file instead of in place")
    analyze_parser.add_argument(
        "--narrative", action="store_true", help="Print narrative gap analysis"
    )

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate report categories")
    validate_parser.add_argument("report", help="Report JSON file")

    # Import command
    import_parser = subparsers.add_parser("import", help="Import categories from CSV")
    import_parser.add_argument("report", help="Report JSON file")
    import_parser.add_argument("domain", choices=available_domains(), help="Analysis domain")
    import_parser.add_argument("csv", help="CSV file, one row per category")

    # Summary command
    summary_parser = subparsers.add_parser("summary", help="Cross-stream total estimate")
    summary_parser.add_argument("report", help="Report JSON file")
    summary_parser.add_argument("--json", action="store_true", help="Print as JSON")

    # Index command
    index_parser = subparsers.add_parser("index", help="Generate index.json for a directory")
    index_parser.add_argument("directory", help="Directory of report files")

    # Defaults command
    defaults_parser = subparsers.add_parser("defaults", help="Print a default analysis")
    defaults_parser.add_argument("domain", choices=available_domains(), help="Analysis domain")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command == "analyze":
        return analyze_command(args)
    elif args.command == "validate":
        return validate_command(args)
    elif args.command == "import":
        return import_command(args)
    elif args.command == "summary":
        return summary_command(args)
    elif args.command == "index":
        return index_command(args)
    elif args.command == "defaults":
        return defaults_command(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
