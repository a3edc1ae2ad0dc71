"""
Pytest configuration and shared fixtures for ads_library_analyzer tests.
"""

import pytest

from ads_library_analyzer.config import Settings
from ads_library_analyzer.fetch.base import DocumentFetcher, FetchOptions
from ads_library_analyzer.models import CompanyInput

# Ten "sponsored" markers and one mention of the acmecorp handle, no ad cards
ACME_DOCUMENT = (
    "<html><body>"
    + "".join(f"<div class='x'><span>Sponsored</span><p>Ad body {i}</p></div>" for i in range(10))
    + "<a href='/acmecorp'>acmecorp</a>"
    + "</body></html>"
)

NO_RESULTS_DOCUMENT = (
    "<html><body><div>No ads match your search criteria.</div>"
    "<div>Sponsored</div><div>Sponsored</div><div>Library ID: 1</div></body></html>"
)

NAME_ONLY_DOCUMENT = "<html><body><h1>Results for Acme Corp</h1></body></html>"

UNRELATED_DOCUMENT = "<html><body><h1>Ad Library</h1><p>Search ads</p></body></html>"


class ScriptedFetcher(DocumentFetcher):
    """Fetcher that replays scripted documents (or raises scripted errors) in order."""

    def __init__(self, responses):
        super().__init__()
        self.responses = list(responses)
        self.calls: list[tuple[str, FetchOptions]] = []

    @property
    def name(self) -> str:
        return "Scripted"

    def _send(self, url, options):
        raise NotImplementedError

    def fetch(self, url, options=None):
        self.calls.append((url, options))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def acme():
    """The reference company: handle, domain and name all available."""
    return CompanyInput(
        company_name="Acme Corp",
        website_url="https://acme.com",
        social_url="https://facebook.com/acmecorp",
    )


@pytest.fixture
def settings():
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        fetch_provider="scrapingbee",
        scrapingbee_api_key="sb-test-key",
        browserless_api_key=None,
        openai_api_key=None,
        llm_review_enabled=False,
        request_interval_seconds=0,
    )


@pytest.fixture
def scripted_fetcher():
    """Factory for ScriptedFetcher instances."""
    return ScriptedFetcher


@pytest.fixture
def acme_document():
    return ACME_DOCUMENT


@pytest.fixture
def no_results_document():
    return NO_RESULTS_DOCUMENT


@pytest.fixture
def name_only_document():
    return NAME_ONLY_DOCUMENT


@pytest.fixture
def unrelated_document():
    return UNRELATED_DOCUMENT
