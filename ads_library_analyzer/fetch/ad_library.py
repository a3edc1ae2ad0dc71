"""
Ad library search URLs.
"""

from urllib.parse import quote_plus

from ads_library_analyzer.constants import AD_LIBRARY_BASE, DEFAULT_COUNTRY


def build_ad_library_url(
    query: str, country: str = DEFAULT_COUNTRY, active_only: bool = True
) -> str:
    """Public keyword search URL for the Facebook Ad Library."""
    status = "active" if active_only else "all"
    return (
        f"{AD_LIBRARY_BASE}?active_status={status}&ad_type=all"
        f"&country={country}&q={quote_plus(query.strip())}"
        f"&search_type=keyword_unordered&media_type=all"
    )
