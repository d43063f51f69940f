"""Abstract base extractor for category data sources."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from ..models.schema import Category


class BaseExtractor(ABC):
    """Abstract base class for category extractors.

    Extractors read raw category tables from outside the report store (CSV
    exports, spreadsheets kept by revenue offices, ...) and return validated
    category models for one analysis domain.
    """

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        """Initialize extractor with configuration.

        Args:
            config: Optional analysis configuration dictionary
        """
        self.config = config or {}

    @abstractmethod
    def extract(self, source: Path, domain: str, **kwargs: Any) -> list[Category]:
        """Extract categories of one domain from a source.

        Args:
            source: Location of the raw data
            domain: Analysis domain (e.g., 'license')
            **kwargs: Additional extractor-specific arguments

        Returns:
            List of category models

        Raises:
            ValueError: If the domain is unknown or the source has no usable columns
        """
        pass
