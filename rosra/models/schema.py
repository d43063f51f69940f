"""Pydantic models for ROSRA revenue-gap reports."""

import math
import uuid
from datetime import datetime
from typing import Annotated, Any, ClassVar, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    model_validator,
)
from pydantic.alias_generators import to_camel


def coerce_number(value: Any) -> float:
    """Coerce a raw form/document value to a finite float, 0.0 when malformed.

    Args:
        value: Raw value (number, numeric string, None, "", ...)

    Returns:
        Float value, or 0.0 for anything non-numeric, NaN or infinite
    """
    if isinstance(value, bool):
        return float(value)
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


Number = Annotated[float, BeforeValidator(coerce_number)]


class RosraModel(BaseModel):
    """Base model accepting both snake_case names and camelCase document keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict[str, Any]:
        """Dump to the camelCase JSON shape used by stored reports."""
        return self.model_dump(mode="json", by_alias=True)


class Category(RosraModel):
    """Fields shared by every revenue category."""

    # (smaller, larger) field pairs that must satisfy smaller <= larger
    ordering: ClassVar[tuple[tuple[str, str], ...]] = ()

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Unique within a report")
    name: str = Field("", description="Display label (e.g., 'Business Permits')")
    is_expanded: bool = Field(False, description="UI-only flag, ignored by calculations")

    @model_validator(mode="before")
    @classmethod
    def _fill_missing_id(cls, data: Any) -> Any:
        # Documents sometimes carry a Mongo-style _id, or an empty id
        if isinstance(data, dict) and not data.get("id"):
            data = dict(data)
            legacy_id = data.pop("_id", None)
            data["id"] = str(legacy_id) if legacy_id else str(uuid.uuid4())
        return data

    def numeric_fields(self) -> dict[str, float]:
        """Return all numeric field values keyed by field name."""
        return {
            name: getattr(self, name)
            for name, info in type(self).model_fields.items()
            if info.annotation is float
        }


class PropertyTaxCategory(Category):
    """A property class (e.g., residential, commercial) in a property tax analysis."""

    ordering: ClassVar[tuple[tuple[str, str], ...]] = (
        ("compliant_taxpayers", "registered_taxpayers"),
    )

    registered_taxpayers: Number = Field(0, description="Taxpayers on the register")
    compliant_taxpayers: Number = Field(0, description="Registered taxpayers who paid")
    average_land_value: Number = Field(0, description="Average assessed value on the roll")
    estimated_average_value: Number = Field(0, description="Estimated average market value")
    tax_rate: Number = Field(0, description="Tax rate as a fraction of value (e.g., 0.01)")

    @model_validator(mode="before")
    @classmethod
    def _rename_legacy_values(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            if "actualLandValue" in data and "averageLandValue" not in data:
                data["averageLandValue"] = data.pop("actualLandValue")
            if "estimatedLandValue" in data and "estimatedAverageValue" not in data:
                data["estimatedAverageValue"] = data.pop("estimatedLandValue")
        return data


class LicenseCategory(Category):
    """A license type (e.g., business permits) in a license analysis."""

    ordering: ClassVar[tuple[tuple[str, str], ...]] = (
        ("compliant_licensees", "registered_licensees"),
        ("registered_licensees", "estimated_licensees"),
    )

    estimated_licensees: Number = Field(0, description="Entities estimated to require a license")
    registered_licensees: Number = Field(0, description="Entities holding a license")
    compliant_licensees: Number = Field(0, description="Licensed entities that paid")
    license_fee: Number = Field(0, description="Official license fee")
    average_paid_license_fee: Number = Field(0, description="Average fee actually paid")


class ShortTermCategory(Category):
    """A daily user charge (e.g., parking, market fees)."""

    ordering: ClassVar[tuple[tuple[str, str], ...]] = (
        ("actual_daily_users", "estimated_daily_users"),
        ("actual_rate", "potential_rate"),
    )

    estimated_daily_users: Number = Field(0, description="Estimated daily users of the service")
    actual_daily_users: Number = Field(0, description="Daily users actually paying")
    potential_rate: Number = Field(0, description="Daily charge that should be collected")
    actual_rate: Number = Field(0, description="Daily charge actually collected")

    @model_validator(mode="before")
    @classmethod
    def _rename_legacy_counts(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            if "estimatedDailyFees" in data and "estimatedDailyUsers" not in data:
                data["estimatedDailyUsers"] = data.pop("estimatedDailyFees")
            if "actualDailyFees" in data and "actualDailyUsers" not in data:
                data["actualDailyUsers"] = data.pop("actualDailyFees")
        return data


class LongTermCategory(Category):
    """A class of long-term land leases, charged monthly."""

    ordering: ClassVar[tuple[tuple[str, str], ...]] = (
        ("registered_leases", "estimated_leases"),
        ("actual_rate", "potential_rate"),
    )

    estimated_leases: Number = Field(0, description="Leases estimated to exist")
    registered_leases: Number = Field(0, description="Leases registered and paying")
    potential_rate: Number = Field(0, description="Monthly rate that should be charged")
    actual_rate: Number = Field(0, description="Monthly rate actually charged")


class MixedChargeCategory(Category):
    """A charge with both daily users and monthly subscribers (e.g., bus parks)."""

    ordering: ClassVar[tuple[tuple[str, str], ...]] = (
        ("actual_daily_users", "estimated_daily_users"),
        ("paying_monthly_users", "available_monthly_users"),
    )

    estimated_daily_users: Number = Field(0, description="Estimated daily users")
    actual_daily_users: Number = Field(0, description="Daily users actually paying")
    average_daily_fee: Number = Field(0, description="Daily fee that should be charged")
    actual_daily_fee: Number = Field(0, description="Daily fee actually collected")
    available_monthly_users: Number = Field(0, description="Estimated monthly subscribers")
    paying_monthly_users: Number = Field(0, description="Monthly subscribers actually paying")
    average_monthly_rate: Number = Field(0, description="Monthly rate that should be charged")
    actual_monthly_rate: Number = Field(0, description="Monthly rate actually collected")

    @model_validator(mode="before")
    @classmethod
    def _rename_legacy_fees(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            if "averageDailyUserFee" in data and "averageDailyFee" not in data:
                data["averageDailyFee"] = data.pop("averageDailyUserFee")
            if "actualDailyUserFee" in data and "actualDailyFee" not in data:
                data["actualDailyFee"] = data.pop("actualDailyUserFee")
        return data


class GapBreakdown(RosraModel):
    """Named gap components plus the combined residual.

    The residual absorbs interaction effects so that, whenever the named
    components do not exceed the total gap, the components sum to the gap.
    """

    combined_gaps: Number = Field(0, description="Residual: gap minus named components, >= 0")

    def components(self) -> dict[str, float]:
        """Return components in display order, combined residual last."""
        values = self.model_dump()
        combined = values.pop("combined_gaps")
        return {**values, "combined_gaps": combined}

    @property
    def named_total(self) -> float:
        """Sum of the named components, excluding the combined residual."""
        return sum(v for k, v in self.components().items() if k != "combined_gaps")

    @property
    def total(self) -> float:
        return self.named_total + self.combined_gaps

    def percentages(self, potential: float) -> dict[str, float]:
        """Each component as a percentage of potential revenue (0 when potential is 0)."""
        if potential <= 0:
            return {name: 0.0 for name in self.components()}
        return {name: value / potential * 100 for name, value in self.components().items()}


class AdministrativeGapBreakdown(GapBreakdown):
    """Gap breakdown for register-based revenues (property tax, licenses)."""

    registration_gap: Number = Field(0, description="Lost to unregistered entities")
    compliance_gap: Number = Field(0, description="Lost to registered entities not paying")
    assessment_gap: Number = Field(0, description="Lost to under-valuation / under-pricing")


class UserChargeGapBreakdown(GapBreakdown):
    """Gap breakdown for user charges and leases."""

    compliance_gap: Number = Field(0, description="Lost to users not paying")
    rate_gap: Number = Field(0, description="Lost to charging below the potential rate")


ADMINISTRATIVE_KEYS = ("registration_gap", "registrationGap", "assessment_gap", "assessmentGap")


def _breakdown_kind(value: Any) -> str:
    """Tell administrative from user-charge breakdowns, for models and raw dicts."""
    if isinstance(value, AdministrativeGapBreakdown):
        return "administrative"
    if isinstance(value, dict) and any(key in value for key in ADMINISTRATIVE_KEYS):
        return "administrative"
    return "user_charge"


AnyGapBreakdown = Annotated[
    Union[
        Annotated[AdministrativeGapBreakdown, Tag("administrative")],
        Annotated[UserChargeGapBreakdown, Tag("user_charge")],
    ],
    Discriminator(_breakdown_kind),
]


class Metrics(RosraModel):
    """Aggregate result of one analysis; always recomputed from the categories."""

    actual: Number = Field(0, description="Actual annual revenue")
    potential: Number = Field(0, description="Potential annual revenue")
    gap: Number = Field(0, description="Potential minus actual")
    potential_leveraged: Number = Field(0, description="Actual as a percentage of potential")
    gap_breakdown: AnyGapBreakdown = Field(default_factory=UserChargeGapBreakdown)
    analysis_message: str = Field("", description="Canned performance message")


class PropertyTaxAnalysis(RosraModel):
    """Property tax inputs and their metrics snapshot."""

    total_estimated_tax_payers: Number = Field(0, description="Estimated taxpayers in the jurisdiction")
    registered_tax_payers: Number = Field(0, description="Taxpayers on the register")
    categories: list[PropertyTaxCategory] = Field(default_factory=list)
    metrics: Metrics | None = None


class LicenseAnalysis(RosraModel):
    """License inputs and their metrics snapshot."""

    total_estimated_licensees: Number = Field(0, description="Estimated licensees jurisdiction-wide")
    categories: list[LicenseCategory] = Field(default_factory=list)
    metrics: Metrics | None = None


class ShortTermAnalysis(RosraModel):
    """Short-term user charge inputs and their metrics snapshot."""

    categories: list[ShortTermCategory] = Field(default_factory=list)
    metrics: Metrics | None = None


class LongTermAnalysis(RosraModel):
    """Long-term lease inputs and their metrics snapshot."""

    categories: list[LongTermCategory] = Field(default_factory=list)
    metrics: Metrics | None = None


class MixedChargeAnalysis(RosraModel):
    """Mixed user charge inputs and their metrics snapshot."""

    categories: list[MixedChargeCategory] = Field(default_factory=list)
    metrics: Metrics | None = None

    @model_validator(mode="before")
    @classmethod
    def _wrap_legacy_data(cls, data: Any) -> Any:
        # Older documents hold a single record under `data` instead of a list
        if isinstance(data, dict) and isinstance(data.get("data"), dict):
            data = dict(data)
            legacy = data.pop("data")
            if not data.get("categories"):
                data["categories"] = [legacy]
        return data


# Report attribute name -> analysis model
ANALYSIS_TYPES: dict[str, type[RosraModel]] = {
    "property_tax": PropertyTaxAnalysis,
    "license": LicenseAnalysis,
    "short_term": ShortTermAnalysis,
    "long_term": LongTermAnalysis,
    "mixed_charge": MixedChargeAnalysis,
}


class Report(RosraModel):
    """A user's revenue-gap report: the unit of persistence and deletion."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, description="Report identifier")
    user_id: str = Field(..., description="Owning user")
    title: str = Field("Untitled Report", description="Display title")
    country: str = Field("", description="Country name")
    country_code: str = Field("", description="ISO country code")
    state: str = Field("Not specified", description="State / province / municipality")
    financial_year: str = Field("", description="Financial year label (e.g., '2024/25')")
    currency: str = Field("", description="ISO currency code")
    currency_symbol: str = Field("$", description="Currency symbol used in messages")
    actual_osr: Number = Field(0, description="Actual own-source revenue, all sources")
    budgeted_osr: Number = Field(0, description="Budgeted own-source revenue, all sources")
    population: Number = Field(0, description="Population of the jurisdiction")
    gdp_per_capita: Number = Field(0, description="GDP per capita")
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    property_tax: PropertyTaxAnalysis | None = None
    license: LicenseAnalysis | None = None
    short_term: ShortTermAnalysis | None = None
    long_term: LongTermAnalysis | None = None
    mixed_charge: MixedChargeAnalysis | None = None

    def analyses(self) -> dict[str, RosraModel]:
        """Return the analyses present on this report, keyed by domain."""
        return {
            domain: getattr(self, domain)
            for domain in ANALYSIS_TYPES
            if getattr(self, domain) is not None
        }
