"""
Direct HTTP document fetcher.

Plain GET with a browser User-Agent. No JavaScript rendering, so the ad library
usually returns only its page shell; useful for testing and for sources that
serve static HTML.
"""

import logging

import requests

from ads_library_analyzer.constants import USER_AGENT
from ads_library_analyzer.fetch.base import DocumentFetcher, FetchOptions

logger = logging.getLogger(__name__)


class DirectFetcher(DocumentFetcher):
    """Fetch documents with a plain requests GET."""

    @property
    def name(self) -> str:
        return "Direct HTTP"

    def _send(self, url: str, options: FetchOptions) -> requests.Response:
        if options.render_js:
            logger.debug("Direct fetcher cannot render JavaScript; fetching raw HTML")
        headers = {"User-Agent": USER_AGENT, "Accept-Language": "en-US,en;q=0.9"}
        return self.session.get(url, headers=headers, timeout=options.timeout)
