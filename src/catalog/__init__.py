"""Policy catalog readers."""

from src.catalog.base import (
    DEFAULT_LOOKAHEAD_DAYS,
    CatalogUnavailableError,
    CoverageResolutionError,
    PolicyCatalogReader,
)
from src.catalog.memory import InMemoryPolicyCatalog
from src.catalog.regions import (
    MAC_REGION_CODES,
    MAC_REGIONS,
    InvalidJurisdictionError,
    validate_mac_region,
)

__all__ = [
    "DEFAULT_LOOKAHEAD_DAYS",
    "CatalogUnavailableError",
    "CoverageResolutionError",
    "PolicyCatalogReader",
    "InMemoryPolicyCatalog",
    "MAC_REGION_CODES",
    "MAC_REGIONS",
    "InvalidJurisdictionError",
    "validate_mac_region",
]
