"""Medicare A/B MAC jurisdictions recognised by the resolver."""

from dataclasses import dataclass
from typing import Optional

from src.catalog.base import CoverageResolutionError


@dataclass(frozen=True)
class MacRegion:
    code: str
    label: str


MAC_REGIONS: tuple[MacRegion, ...] = (
    MacRegion("JE", "Noridian Healthcare Solutions (MAC J-E)"),
    MacRegion("JF", "Noridian Healthcare Solutions (MAC J-F)"),
    MacRegion("JH", "CGS Administrators (MAC J-H)"),
    MacRegion("JJ", "Palmetto GBA (MAC J-J)"),
    MacRegion("JK", "National Government Services (MAC J-K)"),
    MacRegion("JL", "Novitas Solutions (MAC J-L)"),
    MacRegion("JM", "Palmetto GBA (MAC J-M)"),
    MacRegion("JN", "First Coast Service Options (MAC J-N)"),
    MacRegion("J5", "Wisconsin Physicians Service (MAC J-5)"),
    MacRegion("J6", "National Government Services (MAC J-6)"),
    MacRegion("J8", "Wisconsin Physicians Service (MAC J-8)"),
)

MAC_REGION_CODES: tuple[str, ...] = tuple(r.code for r in MAC_REGIONS)


class InvalidJurisdictionError(CoverageResolutionError):
    """Raised when a query names a jurisdiction that is not a MAC region."""

    def __init__(self, jurisdiction: Optional[str], message: str):
        self.jurisdiction = jurisdiction
        super().__init__(message)


@dataclass(frozen=True)
class RegionValidationResult:
    """Result of MAC region validation."""
    valid: bool
    error: Optional[str] = None


def validate_mac_region(mac_region: Optional[str]) -> RegionValidationResult:
    """Check that *mac_region* names a known jurisdiction (case-insensitive)."""
    if not mac_region or not mac_region.strip():
        return RegionValidationResult(valid=False, error="MAC region is required")

    normalized = mac_region.strip().upper()
    if normalized not in MAC_REGION_CODES:
        return RegionValidationResult(
            valid=False,
            error=(
                f"Invalid MAC region: {mac_region}. "
                f"Must be one of: {', '.join(MAC_REGION_CODES)}"
            ),
        )
    return RegionValidationResult(valid=True)

