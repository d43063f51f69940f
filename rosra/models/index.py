"""Index model listing the reports stored in a directory."""

from datetime import datetime

from pydantic import Field

from .schema import Number, RosraModel


class ReportEntry(RosraModel):
    """Single report entry in the index."""

    id: str = Field(..., description="Report identifier")
    user_id: str = Field(..., description="Owning user")
    title: str = Field(..., description="Report title")
    country: str = Field("", description="Country name")
    financial_year: str = Field("", description="Financial year label")
    file: str = Field(..., description="Report file name, relative to the index")
    domains: list[str] = Field(default_factory=list, description="Analyses present on the report")
    total_actual: Number = Field(0, description="Actual revenue across analysed streams")
    total_potential: Number = Field(0, description="Potential revenue across analysed streams")
    potential_leveraged: Number = Field(0, description="Actual as a percentage of potential")
    updated_at: datetime = Field(..., description="Last modification of the report")


class ReportIndex(RosraModel):
    """Index of every report in a directory."""

    reports: list[ReportEntry] = Field(..., description="Reports, most recently updated first")
    last_updated: str = Field(..., description="ISO 8601 timestamp of index generation")
    version: str = Field(..., description="Library version that generated this index")
