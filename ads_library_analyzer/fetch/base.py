"""
Document fetcher interface and failure taxonomy.

Every scraping provider is an interchangeable DocumentFetcher: given a target
URL and a few rendering options it returns raw HTML text or raises a FetchError
subclass. The pipeline depends on nothing else.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

import requests

from ads_library_analyzer.constants import (
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_RENDER_WAIT_MS,
    DEFAULT_VIEWPORT,
)


@dataclass(frozen=True)
class FetchOptions:
    """Rendering options passed to a fetcher."""

    render_js: bool = True
    wait_ms: int = DEFAULT_RENDER_WAIT_MS
    viewport_width: int = DEFAULT_VIEWPORT[0]
    viewport_height: int = DEFAULT_VIEWPORT[1]
    timeout: int = DEFAULT_FETCH_TIMEOUT  # seconds


class FetchError(Exception):
    """A fetch failed. The message is shown to the user as the per-company error."""

    kind = "network"

    def __init__(self, message: str, provider: str = "", status_code: int | None = None):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class FetchAuthenticationError(FetchError):
    kind = "authentication"


class FetchRateLimitError(FetchError):
    kind = "rate_limit"


class FetchQuotaExceededError(FetchError):
    kind = "quota_exceeded"


class FetchTimeoutError(FetchError):
    kind = "timeout"


class MalformedResponseError(FetchError):
    kind = "malformed_response"


_STATUS_ERRORS: dict[int, tuple[type[FetchError], str]] = {
    401: (FetchAuthenticationError, "authentication failed, check the API key"),
    403: (FetchAuthenticationError, "access denied, check the API key"),
    402: (FetchQuotaExceededError, "insufficient credits"),
    429: (FetchRateLimitError, "rate limit exceeded, try again later"),
}


def raise_for_provider_status(response: requests.Response, provider: str) -> None:
    """
    Raise the FetchError subclass matching an upstream HTTP status.

    Args:
        response: Provider response
        provider: Display name of the provider (used in the message)

    Raises:
        FetchError: For any status >= 400
    """
    status = response.status_code
    if status < 400:
        return

    error_cls, reason = _STATUS_ERRORS.get(status, (FetchError, "request failed"))
    raise error_cls(f"{provider} {reason} (HTTP {status})", provider=provider, status_code=status)


class DocumentFetcher(ABC):
    """Abstract base class for document fetchers."""

    def __init__(self, session: requests.Session | None = None):
        self.session = session or requests.Session()

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider display name."""
        ...

    @abstractmethod
    def _send(self, url: str, options: FetchOptions) -> requests.Response:
        """Issue the provider request for a target URL."""
        ...

    def fetch(self, url: str, options: FetchOptions | None = None) -> str:
        """
        Fetch a target URL through the provider.

        Args:
            url: Target page (e.g. an ad library search URL)
            options: Rendering options (defaults to FetchOptions())

        Returns:
            Raw document text

        Raises:
            FetchError: On any provider, network or response failure
        """
        options = options or FetchOptions()
        try:
            response = self._send(url, options)
        except requests.Timeout as e:
            raise FetchTimeoutError(
                f"{self.name} request timed out after {options.timeout}s", provider=self.name
            ) from e
        except requests.RequestException as e:
            raise FetchError(f"{self.name} network error: {e}", provider=self.name) from e

        raise_for_provider_status(response, self.name)

        text = response.text
        if not isinstance(text, str) or not text.strip():
            raise MalformedResponseError(
                f"{self.name} returned an empty document",
                provider=self.name,
                status_code=response.status_code,
            )
        return text
