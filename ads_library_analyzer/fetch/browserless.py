"""
Browserless document fetcher.

Uses the Browserless /content REST endpoint, which loads the page in headless
Chrome and returns the rendered HTML.
"""

import logging

import requests

from ads_library_analyzer.constants import USER_AGENT
from ads_library_analyzer.fetch.base import DocumentFetcher, FetchOptions

logger = logging.getLogger(__name__)


class BrowserlessFetcher(DocumentFetcher):
    """Fetch rendered documents via Browserless."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://production-sfo.browserless.io",
        session: requests.Session | None = None,
    ):
        super().__init__(session)
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")

    @property
    def name(self) -> str:
        return "Browserless"

    def build_payload(self, url: str, options: FetchOptions) -> dict:
        """Request body for the /content endpoint."""
        payload = {
            "url": url,
            "userAgent": USER_AGENT,
            "viewport": {"width": options.viewport_width, "height": options.viewport_height},
            "gotoOptions": {
                "waitUntil": "networkidle2" if options.render_js else "domcontentloaded",
                "timeout": options.timeout * 1000,
            },
        }
        if options.render_js and options.wait_ms > 0:
            payload["waitForTimeout"] = options.wait_ms
        if not options.render_js:
            payload["setJavaScriptEnabled"] = False
        return payload

    def _send(self, url: str, options: FetchOptions) -> requests.Response:
        logger.debug(f"Browserless POST /content for {url}")
        return self.session.post(
            f"{self.base_url}/content",
            params={"token": self.api_key},
            json=self.build_payload(url, options),
            timeout=options.timeout,
        )
