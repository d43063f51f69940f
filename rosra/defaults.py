"""Configuration loading and default analysis factories."""

import copy
from functools import lru_cache
from pathlib import Path
from typing import Any, cast

import yaml

from .models.schema import ANALYSIS_TYPES, RosraModel

CONFIG_PATH = Path(__file__).parent / "config" / "analysis.yaml"


@lru_cache(maxsize=None)
def _read_config(path: Path) -> dict[Any, Any]:
    with open(path) as f:
        return cast(dict[Any, Any], yaml.safe_load(f))


def load_config(path: Path | None = None) -> dict[Any, Any]:
    """Load analysis configuration from YAML.

    Args:
        path: Optional alternative config file (defaults to the packaged analysis.yaml)

    Returns:
        Configuration dictionary (a fresh copy; safe to modify)
    """
    return copy.deepcopy(_read_config(path or CONFIG_PATH))


def available_domains() -> list[str]:
    """Return the analysis domains in report order."""
    return list(ANALYSIS_TYPES)


def _domain_defaults(domain: str, config: dict[Any, Any] | None) -> dict[Any, Any]:
    if domain not in ANALYSIS_TYPES:
        raise ValueError(
            f"Unknown domain '{domain}'. Available: {', '.join(available_domains())}"
        )
    config = config if config is not None else load_config()
    return cast(dict[Any, Any], config.get("defaults", {}).get(domain, {}))


def default_analysis(domain: str, config: dict[Any, Any] | None = None) -> RosraModel:
    """Build a new analysis pre-filled with the configured demonstration inputs.

    Every call returns new model instances, so callers may edit the result freely.

    Args:
        domain: Analysis domain (e.g., 'license')
        config: Optional configuration dictionary (defaults to load_config())

    Returns:
        Analysis model for the domain, without metrics

    Raises:
        ValueError: If domain is unknown
    """
    defaults = _domain_defaults(domain, config)
    categories = [
        {"id": f"{domain.replace('_', '-')}-{i}", **category}
        for i, category in enumerate(defaults.get("categories", []), start=1)
    ]
    payload = {key: value for key, value in defaults.items() if key != "categories"}
    return ANALYSIS_TYPES[domain].model_validate({**payload, "categories": categories})


def default_categories(domain: str, config: dict[Any, Any] | None = None) -> list[Any]:
    """Build fresh default categories for a domain.

    Args:
        domain: Analysis domain (e.g., 'long_term')
        config: Optional configuration dictionary

    Returns:
        List of category models

    Raises:
        ValueError: If domain is unknown
    """
    return list(default_analysis(domain, config).categories)  # type: ignore[attr-defined]


def domain_label(domain: str, config: dict[Any, Any] | None = None) -> str:
    """Human-readable label for a domain (e.g., 'Property Tax')."""
    config = config if config is not None else load_config()
    labels = config.get("labels", {})
    return str(labels.get(domain, domain.replace("_", " ").title()))
