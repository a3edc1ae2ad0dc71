"""
ScrapingBee document fetcher.

Renders the target page through the ScrapingBee HTML API.
"""

import logging

import requests

from ads_library_analyzer.fetch.base import DocumentFetcher, FetchOptions

logger = logging.getLogger(__name__)

SCRAPINGBEE_ENDPOINT = "https://app.scrapingbee.com/api/v1/"


class ScrapingBeeFetcher(DocumentFetcher):
    """Fetch documents via ScrapingBee."""

    def __init__(self, api_key: str, session: requests.Session | None = None):
        super().__init__(session)
        self.api_key = api_key

    @property
    def name(self) -> str:
        return "ScrapingBee"

    def _send(self, url: str, options: FetchOptions) -> requests.Response:
        params = {
            "api_key": self.api_key,
            "url": url,
            "render_js": "true" if options.render_js else "false",
            "window_width": options.viewport_width,
            "window_height": options.viewport_height,
        }
        if options.render_js and options.wait_ms > 0:
            params["wait"] = options.wait_ms
        logger.debug(f"ScrapingBee GET {url} (render_js={options.render_js})")
        return self.session.get(SCRAPINGBEE_ENDPOINT, params=params, timeout=options.timeout)
