"""CSV extractor for revenue categories."""

import logging
import re
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.schema import ANALYSIS_TYPES, Category
from .base import BaseExtractor

logger = logging.getLogger(__name__)


def normalize_column(name: str) -> str:
    """Normalize a column header to a snake_case field name.

    Args:
        name: Raw header (e.g., "Registered Licensees", "registeredLicensees")

    Returns:
        snake_case name (e.g., "registered_licensees")
    """
    name = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", str(name).strip())
    return re.sub(r"[^a-z0-9]+", "_", name.lower()).strip("_")


def category_model(domain: str) -> type[Category]:
    """Return the category model class of a domain.

    Raises:
        ValueError: If domain is unknown
    """
    if domain not in ANALYSIS_TYPES:
        raise ValueError(f"Unknown domain '{domain}'. Available: {', '.join(ANALYSIS_TYPES)}")
    annotation = ANALYSIS_TYPES[domain].model_fields["categories"].annotation
    return annotation.__args__[0]  # type: ignore[union-attr, no-any-return]


class SpreadsheetExtractor(BaseExtractor):
    """Extractor for CSV category tables.

    One row per category. Column headers may be snake_case, camelCase or
    spaced words; unknown columns are ignored and missing numeric columns
    default to 0.
    """

    def read(self, source: Path) -> pd.DataFrame:
        """Read a CSV file and normalize its column names."""
        df = pd.read_csv(source)
        df.columns = [normalize_column(c) for c in df.columns]
        return df

    def extract(self, source: Path, domain: str, **kwargs: Any) -> list[Category]:
        """Extract categories of one domain from a CSV file.

        Args:
            source: Path to the CSV file
            domain: Analysis domain (e.g., 'long_term')
            **kwargs: Unused

        Returns:
            List of category models, in file order

        Raises:
            ValueError: If domain is unknown or no column matches a category field
        """
        model = category_model(domain)
        df = self.read(source)
        return self.from_dataframe(df, model)

    def from_dataframe(self, df: pd.DataFrame, model: type[Category]) -> list[Category]:
        """Convert a normalized DataFrame into category models.

        Args:
            df: DataFrame with snake_case columns
            model: Category model class

        Returns:
            List of category models

        Raises:
            ValueError: If no column matches a numeric field of the model
        """
        df = df.copy()
        numeric = [
            name for name, info in model.model_fields.items() if info.annotation is float
        ]
        present = [name for name in numeric if name in df.columns]
        if not present:
            raise ValueError(
                f"No {model.__name__} columns found in {list(df.columns)}. "
                f"Expected any of: {', '.join(numeric)}"
            )

        ignored = [c for c in df.columns if c not in model.model_fields]
        if ignored:
            logger.info("Ignoring columns: %s", ", ".join(ignored))

        # Non-numeric cells become 0, matching the model's own coercion
        for column in present:
            df[column] = pd.to_numeric(df[column], errors="coerce").fillna(0)

        if "name" in df.columns:
            df["name"] = df["name"].fillna("").astype(str)
        if "id" in df.columns:
            df["id"] = df["id"].fillna("").astype(str)

        columns = [c for c in df.columns if c in model.model_fields]
        records = df[columns].to_dict(orient="records")
        return [model.model_validate(record) for record in records]
