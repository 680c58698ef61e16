"""Flight category classification from visibility and ceiling."""

from airwx.models.common import FlightCategory

UNLIMITED_VISIBILITY_SM = 10
UNLIMITED_CEILING_FT = 10000


def classify(visibility_sm: float, ceiling_ft: float) -> FlightCategory:
    """Most severe matching category wins; boundary values fall on the milder side."""
    if visibility_sm < 1 or ceiling_ft < 500:
        return FlightCategory.LIFR
    if visibility_sm < 3 or ceiling_ft < 1000:
        return FlightCategory.IFR
    if visibility_sm < 5 or ceiling_ft < 3000:
        return FlightCategory.MVFR
    return FlightCategory.VFR
