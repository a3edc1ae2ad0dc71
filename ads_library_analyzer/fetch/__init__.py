"""
Document fetchers for ad-library pages.

Provider selection happens here so the pipeline only ever sees the
DocumentFetcher interface.
"""

import requests

from ads_library_analyzer.config import (
    Settings,
    get_browserless_api_key,
    get_scrapingbee_api_key,
    get_settings,
)
from ads_library_analyzer.fetch.ad_library import build_ad_library_url
from ads_library_analyzer.fetch.base import (
    DocumentFetcher,
    FetchAuthenticationError,
    FetchError,
    FetchOptions,
    FetchQuotaExceededError,
    FetchRateLimitError,
    FetchTimeoutError,
    MalformedResponseError,
)
from ads_library_analyzer.fetch.browserless import BrowserlessFetcher
from ads_library_analyzer.fetch.direct import DirectFetcher
from ads_library_analyzer.fetch.scrapingbee import ScrapingBeeFetcher


def create_fetcher(
    settings: Settings | None = None, session: requests.Session | None = None
) -> DocumentFetcher:
    """
    Build the fetcher selected by `settings.fetch_provider`.

    Raises:
        MissingCredentialError: If the selected provider's key is not configured
        ValueError: If the provider name is unknown
    """
    settings = settings or get_settings()
    provider = settings.fetch_provider

    if provider == "scrapingbee":
        return ScrapingBeeFetcher(get_scrapingbee_api_key(settings), session=session)
    if provider == "browserless":
        return BrowserlessFetcher(
            get_browserless_api_key(settings),
            base_url=settings.browserless_base_url,
            session=session,
        )
    if provider == "direct":
        return DirectFetcher(session=session)
    raise ValueError(f"Unknown fetch provider: {provider}")


__all__ = [
    "BrowserlessFetcher",
    "DirectFetcher",
    "DocumentFetcher",
    "FetchAuthenticationError",
    "FetchError",
    "FetchOptions",
    "FetchQuotaExceededError",
    "FetchRateLimitError",
    "FetchTimeoutError",
    "MalformedResponseError",
    "ScrapingBeeFetcher",
    "build_ad_library_url",
    "create_fetcher",
]
