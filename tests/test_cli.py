"""Tests for the command-line interface."""

import json
from unittest.mock import patch

import pytest

from rosra.cli import main
from rosra.defaults import default_analysis
from rosra.models.schema import LongTermCategory, Report
from rosra.store import load_report, save_report


@pytest.fixture
def report_file(tmp_path):
    """Create a saved report with the default long-term analysis."""
    report = Report(
        id="r1",
        user_id="user-1",
        title="County Report",
        country="Kenya",
        financial_year="2024/25",
        currency_symbol="KSh",
        actual_osr=50000000,
        long_term=default_analysis("long_term"),
    )
    return save_report(report, tmp_path / "r1.json")


class TestAnalyzeCommand:
    """Tests for the analyze command."""

    def test_writes_metrics(self, report_file, capsys):
        """Test that metrics are saved back into the report."""
        assert main(["analyze", str(report_file)]) == 0

        report = load_report(report_file)
        assert report.long_term.metrics is not None
        assert report.long_term.metrics.actual > 0
        output = capsys.readouterr().out
        assert "Long-term User Charge" in output
        assert "✅ Saved metrics" in output

    def test_output_file(self, report_file, tmp_path):
        """Test writing to a separate output file."""
        output_file = tmp_path / "out" / "analysed.json"
        assert main(["analyze", str(report_file), "--output", str(output_file)]) == 0
        assert load_report(report_file).long_term.metrics is None
        assert load_report(output_file).long_term.metrics is not None

    def test_narrative(self, report_file, capsys):
        """Test narrative output."""
        assert main(["analyze", str(report_file), "--narrative"]) == 0
        assert "Revenue Collection" in capsys.readouterr().out

    def test_missing_file(self, tmp_path, capsys):
        """Test failure on a missing report."""
        assert main(["analyze", str(tmp_path / "missing.json")]) == 1
        assert "❌ Error analyzing report" in capsys.readouterr().err


class TestValidateCommand:
    """Tests for the validate command."""

    def test_valid_report(self, report_file, capsys):
        """Test a report that passes validation."""
        assert main(["validate", str(report_file)]) == 0
        assert "✅ Report validated successfully" in capsys.readouterr().out

    def test_duplicate_ids_fail(self, tmp_path, capsys):
        """Test that duplicate category ids fail validation."""
        analysis = default_analysis("long_term")
        analysis.categories.append(LongTermCategory(id="long-term-1", name="Duplicate"))
        path = save_report(Report(user_id="user-1", long_term=analysis), tmp_path / "dup.json")

        assert main(["validate", str(path)]) == 1
        assert "Duplicate category IDs" in capsys.readouterr().out


class TestImportCommand:
    """Tests for the import command."""

    def test_import_csv(self, report_file, tmp_path, capsys):
        """Test replacing an analysis' categories from CSV."""
        csv_file = tmp_path / "licenses.csv"
        csv_file.write_text(
            "name,estimated_licensees,registered_licensees,compliant_licensees,"
            "license_fee,average_paid_license_fee\n"
            "Business Permits,70000,15000,10000,35,30\n"
        )

        assert main(["import", str(report_file), "license", str(csv_file)]) == 0

        report = load_report(report_file)
        assert [c.name for c in report.license.categories] == ["Business Permits"]
        assert report.license.metrics.actual == 300000
        assert "✅ Imported 1 categories" in capsys.readouterr().out

    def test_unknown_domain(self, report_file, tmp_path):
        """Test that argparse rejects unknown domains."""
        with pytest.raises(SystemExit):
            main(["import", str(report_file), "water", str(tmp_path / "x.csv")])


class TestSummaryCommand:
    """Tests for the summary command."""

    def test_text_summary(self, report_file, capsys):
        """Test human-readable summary."""
        assert main(["summary", str(report_file)]) == 0
        output = capsys.readouterr().out
        assert "County Report (Kenya 2024/25)" in output
        assert "Total potential: KSh" in output

    def test_json_summary(self, report_file, capsys):
        """Test JSON summary."""
        assert main(["summary", str(report_file), "--json"]) == 0
        summary = json.loads(capsys.readouterr().out)
        assert summary["streams"][0]["domain"] == "long_term"
        assert summary["totalActual"] > 0


class TestIndexCommand:
    """Tests for the index command."""

    def test_generates_index(self, report_file, capsys):
        """Test that index.json is written next to the reports."""
        assert main(["index", str(report_file.parent)]) == 0

        with open(report_file.parent / "index.json") as f:
            index = json.load(f)
        assert [entry["id"] for entry in index["reports"]] == ["r1"]
        assert "Reports: 1" in capsys.readouterr().out


class TestDefaultsCommand:
    """Tests for the defaults command."""

    def test_prints_defaults(self, capsys):
        """Test printing a default analysis."""
        assert main(["defaults", "mixed_charge"]) == 0
        analysis = json.loads(capsys.readouterr().out)
        assert analysis["categories"][0]["name"] == "Bus Park"
        assert analysis["metrics"] is None


def test_no_command(capsys):
    """Test that running without a command prints help and fails."""
    assert main([]) == 1
    assert "usage" in capsys.readouterr().out


@patch("rosra.cli.summarize_report")
def test_summary_error(mock_summarize, report_file, capsys):
    """Test that unexpected errors are reported with exit code 1."""
    mock_summarize.side_effect = RuntimeError("boom")

    assert main(["summary", str(report_file)]) == 1
    assert "❌ Error summarizing report: boom" in capsys.readouterr().err
    mock_summarize.assert_called_once()
