"""Country code to eBay marketplace id."""

from typing import Optional

from config import DEFAULT_MARKETPLACE, MARKETPLACE_MAP


def resolve_marketplace(country_code: Optional[str]) -> str:
    """Case-insensitive lookup; unknown or empty codes fall back to EBAY_US."""
    if not country_code:
        return DEFAULT_MARKETPLACE
    return MARKETPLACE_MAP.get(country_code.strip().upper(), DEFAULT_MARKETPLACE)
