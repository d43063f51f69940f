"""Tests for Pydantic schema models."""

import pytest
from pydantic import ValidationError

from rosra.calculators.mixed_charge import analyze_mixed_charge
from rosra.models.schema import (
    AdministrativeGapBreakdown,
    LicenseCategory,
    LongTermCategory,
    Metrics,
    MixedChargeAnalysis,
    MixedChargeCategory,
    PropertyTaxCategory,
    Report,
    ShortTermAnalysis,
    ShortTermCategory,
    UserChargeGapBreakdown,
    coerce_number,
)


class TestCoerceNumber:
    """Tests for the numeric coercion applied to every category input."""

    def test_numbers_pass_through(self):
        """Test that ints and floats are returned as floats."""
        assert coerce_number(5) == 5.0
        assert coerce_number(2.5) == 2.5

    def test_numeric_strings(self):
        """Test that numeric strings from forms are parsed."""
        assert coerce_number("1200") == 1200.0
        assert coerce_number("-3.5") == -3.5

    def test_malformed_values_become_zero(self):
        """Test that empty, missing and non-numeric values become 0."""
        assert coerce_number(None) == 0.0
        assert coerce_number("") == 0.0
        assert coerce_number("abc") == 0.0
        assert coerce_number([1, 2]) == 0.0

    def test_non_finite_values_become_zero(self):
        """Test that NaN and infinity become 0."""
        assert coerce_number(float("nan")) == 0.0
        assert coerce_number(float("inf")) == 0.0
        assert coerce_number("-inf") == 0.0

    def test_oversized_integers_become_zero(self):
        """Test that integers too large for a float become 0."""
        assert coerce_number(10**400) == 0.0
        category = PropertyTaxCategory.model_validate({"registeredTaxpayers": 10**400})
        assert category.registered_taxpayers == 0.0


class TestCategory:
    """Tests for category models."""

    def test_malformed_fields_coerced(self):
        """Test that malformed numeric inputs are stored as 0."""
        category = LongTermCategory(
            name="Residential",
            estimated_leases="abc",
            registered_leases=None,
            potential_rate="5000",
        )
        assert category.estimated_leases == 0
        assert category.registered_leases == 0
        assert category.potential_rate == 5000

    def test_negative_values_kept(self):
        """Test that negatives are kept for the validator to reject."""
        category = LongTermCategory(name="Test", estimated_leases=-10)
        assert category.estimated_leases == -10

    def test_camel_case_keys(self):
        """Test that stored camelCase documents are accepted."""
        category = LicenseCategory.model_validate(
            {
                "id": "lic-1",
                "name": "Business Permits",
                "estimatedLicensees": 70000,
                "registeredLicensees": 15000,
                "compliantLicensees": 10000,
                "licenseFee": 35,
                "averagePaidLicenseFee": 30,
            }
        )
        assert category.registered_licensees == 15000
        assert category.average_paid_license_fee == 30

    def test_document_uses_camel_case(self):
        """Test that to_document emits camelCase keys."""
        document = ShortTermCategory(id="st-1", name="Parking").to_document()
        assert document["estimatedDailyUsers"] == 0
        assert document["isExpanded"] is False
        assert "estimated_daily_users" not in document

    def test_missing_id_generated(self):
        """Test that empty ids are replaced with unique generated ids."""
        first = LongTermCategory(name="A", id="")
        second = LongTermCategory(name="B")
        assert first.id
        assert second.id
        assert first.id != second.id

    def test_legacy_mongo_id(self):
        """Test that a Mongo-style _id is used as the category id."""
        category = LongTermCategory.model_validate({"_id": "abc123", "name": "Test"})
        assert category.id == "abc123"

    def test_property_tax_legacy_value_keys(self):
        """Test that older documents with actual/estimated land value load."""
        category = PropertyTaxCategory.model_validate(
            {"name": "Residential", "actualLandValue": 500000, "estimatedLandValue": 750000}
        )
        assert category.average_land_value == 500000
        assert category.estimated_average_value == 750000

    def test_short_term_legacy_fee_keys(self):
        """Test that older short-term documents with daily fee counts load."""
        category = ShortTermCategory.model_validate(
            {"name": "Parking", "estimatedDailyFees": 600, "actualDailyFees": 500}
        )
        assert category.estimated_daily_users == 600
        assert category.actual_daily_users == 500

    def test_mixed_charge_legacy_fee_keys(self):
        """Test that older mixed-charge records with daily user fee keys load."""
        category = MixedChargeCategory.model_validate(
            {"averageDailyUserFee": 50, "actualDailyUserFee": 40}
        )
        assert category.average_daily_fee == 50
        assert category.actual_daily_fee == 40

    def test_numeric_fields(self):
        """Test that numeric_fields lists only the numeric inputs."""
        fields = LongTermCategory(name="Test").numeric_fields()
        assert set(fields) == {
            "estimated_leases",
            "registered_leases",
            "potential_rate",
            "actual_rate",
        }


class TestGapBreakdown:
    """Tests for gap breakdown models."""

    def test_components_order(self):
        """Test that the combined residual is listed last."""
        breakdown = AdministrativeGapBreakdown(
            registration_gap=1, compliance_gap=2, assessment_gap=3, combined_gaps=4
        )
        assert list(breakdown.components()) == [
            "registration_gap",
            "compliance_gap",
            "assessment_gap",
            "combined_gaps",
        ]

    def test_totals(self):
        """Test named_total and total."""
        breakdown = UserChargeGapBreakdown(compliance_gap=100, rate_gap=50, combined_gaps=25)
        assert breakdown.named_total == 150
        assert breakdown.total == 175

    def test_percentages(self):
        """Test components as a percentage of potential revenue."""
        breakdown = UserChargeGapBreakdown(compliance_gap=100, rate_gap=50, combined_gaps=0)
        percentages = breakdown.percentages(1000)
        assert percentages["compliance_gap"] == 10
        assert percentages["rate_gap"] == 5

    def test_percentages_zero_potential(self):
        """Test that percentages are 0 when potential is 0."""
        breakdown = UserChargeGapBreakdown(compliance_gap=100)
        assert breakdown.percentages(0) == {"compliance_gap": 0.0, "rate_gap": 0.0, "combined_gaps": 0.0}


class TestMetrics:
    """Tests for Metrics model."""

    def test_administrative_breakdown_from_document(self):
        """Test that a stored administrative breakdown loads as administrative."""
        metrics = Metrics.model_validate(
            {
                "actual": 100,
                "potential": 200,
                "gap": 100,
                "gapBreakdown": {
                    "registrationGap": 10,
                    "complianceGap": 20,
                    "assessmentGap": 30,
                    "combinedGaps": 40,
                },
            }
        )
        assert isinstance(metrics.gap_breakdown, AdministrativeGapBreakdown)
        assert metrics.gap_breakdown.assessment_gap == 30

    def test_user_charge_breakdown_from_document(self):
        """Test that a stored user-charge breakdown loads as user charge."""
        metrics = Metrics.model_validate(
            {"gapBreakdown": {"complianceGap": 20, "rateGap": 30, "combinedGaps": 0}}
        )
        assert isinstance(metrics.gap_breakdown, UserChargeGapBreakdown)
        assert metrics.gap_breakdown.rate_gap == 30

    def test_breakdown_instance(self):
        """Test that breakdown instances keep their type."""
        metrics = Metrics(gap_breakdown=AdministrativeGapBreakdown(registration_gap=5))
        assert isinstance(metrics.gap_breakdown, AdministrativeGapBreakdown)


class TestMixedChargeAnalysis:
    """Tests for MixedChargeAnalysis model."""

    @pytest.fixture
    def legacy_document(self):
        """Create a mixed-charge document with a single `data` record."""
        return {
            "data": {
                "estimatedDailyUsers": 1000,
                "actualDailyUsers": 600,
                "averageDailyUserFee": 50,
                "actualDailyUserFee": 40,
                "availableMonthlyUsers": 200,
                "payingMonthlyUsers": 120,
                "averageMonthlyRate": 1200,
                "actualMonthlyRate": 1000,
            }
        }

    def test_data_record_becomes_category(self, legacy_document):
        """Test that the `data` record loads as the only category."""
        analysis = MixedChargeAnalysis.model_validate(legacy_document)

        assert len(analysis.categories) == 1
        category = analysis.categories[0]
        assert category.id
        assert category.estimated_daily_users == 1000
        assert category.average_daily_fee == 50
        assert category.actual_daily_fee == 40

    def test_data_record_metrics(self, legacy_document):
        """Test that metrics of a legacy document are not zero."""
        result = analyze_mixed_charge(MixedChargeAnalysis.model_validate(legacy_document))
        assert result.metrics.actual == 10200000
        assert result.metrics.potential == 21130000

    def test_categories_take_precedence(self, legacy_document):
        """Test that an existing category list is kept."""
        document = {**legacy_document, "categories": [{"id": "mc-1", "name": "Bus Park"}]}
        analysis = MixedChargeAnalysis.model_validate(document)
        assert [c.id for c in analysis.categories] == ["mc-1"]


class TestReport:
    """Tests for Report model."""

    def test_requires_user(self):
        """Test that a report must have an owner."""
        with pytest.raises(ValidationError):
            Report(title="No owner")

    def test_defaults(self):
        """Test report defaults."""
        report = Report(user_id="user-1")
        assert report.id
        assert report.title == "Untitled Report"
        assert report.currency_symbol == "$"
        assert report.analyses() == {}

    def test_analyses_present(self):
        """Test that analyses() lists only the analyses present."""
        report = Report(user_id="user-1", short_term=ShortTermAnalysis())
        assert list(report.analyses()) == ["short_term"]

    def test_from_document(self):
        """Test loading a stored camelCase report document."""
        report = Report.model_validate(
            {
                "id": "r1",
                "userId": "user-1",
                "title": "County Report",
                "actualOsr": "2500000",
                "longTerm": {
                    "categories": [
                        {
                            "id": "lt-1",
                            "name": "Residential",
                            "estimatedLeases": 100,
                            "registeredLeases": 80,
                            "potentialRate": 5000,
                            "actualRate": 3000,
                        }
                    ]
                },
            }
        )
        assert report.user_id == "user-1"
        assert report.actual_osr == 2500000
        assert report.long_term.categories[0].registered_leases == 80
        assert report.long_term.metrics is None
