"""
Request and response shaping for the analyze endpoint.

Request body:
    {"companies": [{"companyName", "websiteUrl", "socialUrl"?}, ...],
     "dateRange": 7, "provider"?: "scrapingbee", "scrapingbeeApiKey"?: "...",
     "browserlessApiKey"?: "...", "openaiApiKey"?: "...", "llmReview"?: false}

Response body:
    {"companies": [CompanyResult...], "dateRange": 7, "analysisDate": "YYYY-MM-DD",
     "totalActiveAds": int, "totalNewAds": int}

Keys in the request take precedence over environment settings. A missing
provider key fails the whole request before any company is analyzed.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ads_library_analyzer.analysis.identifiers import is_valid_url
from ads_library_analyzer.analysis.pipeline import AdEstimationPipeline
from ads_library_analyzer.config import FetchProvider, Settings, get_settings
from ads_library_analyzer.constants import DEFAULT_DATE_RANGE_DAYS
from ads_library_analyzer.fetch.base import DocumentFetcher
from ads_library_analyzer.models import CompanyInput, CompanyResult

logger = logging.getLogger(__name__)


class CompanyPayload(BaseModel):
    """One company in the request body."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    company_name: str = Field(default="", alias="companyName")
    website_url: str = Field(default="", alias="websiteUrl")
    social_url: str | None = Field(default=None, alias="socialUrl")

    def to_input(self) -> CompanyInput:
        return CompanyInput.from_dict(
            {
                "company_name": self.company_name,
                "website_url": self.website_url,
                "social_url": self.social_url,
            }
        )


class AnalyzeRequest(BaseModel):
    """Validated request body."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    companies: list[CompanyPayload] = Field(default_factory=list)
    date_range: int = Field(default=DEFAULT_DATE_RANGE_DAYS, gt=0, alias="dateRange")
    provider: FetchProvider | None = None
    scrapingbee_api_key: str | None = Field(default=None, alias="scrapingbeeApiKey")
    browserless_api_key: str | None = Field(default=None, alias="browserlessApiKey")
    openai_api_key: str | None = Field(default=None, alias="openaiApiKey")
    llm_review: bool | None = Field(default=None, alias="llmReview")

    def settings_overrides(self) -> dict[str, Any]:
        return {
            "fetch_provider": self.provider,
            "scrapingbee_api_key": self.scrapingbee_api_key,
            "browserless_api_key": self.browserless_api_key,
            "openai_api_key": self.openai_api_key,
            "llm_review_enabled": self.llm_review,
        }


def summarize_results(
    results: Sequence[CompanyResult], date_range_days: int, analysis_date: str | None = None
) -> dict[str, Any]:
    """
    Build the response body.

    Totals only count companies where ads were found.
    """
    found = [r for r in results if r.found]
    return {
        "companies": [r.to_dict() for r in results],
        "dateRange": date_range_days,
        "analysisDate": analysis_date or datetime.now(UTC).date().isoformat(),
        "totalActiveAds": sum(r.active_ads for r in found),
        "totalNewAds": sum(r.new_ads or 0 for r in found),
    }


def handle_analyze_request(
    body: dict[str, Any],
    settings: Settings | None = None,
    fetcher: DocumentFetcher | None = None,
    show_progress: bool = False,
) -> dict[str, Any]:
    """
    Run the pipeline for a request body and return the response body.

    Args:
        body: Parsed JSON request body
        settings: Base settings (defaults to environment)
        fetcher: Pre-built fetcher (skips provider selection)
        show_progress: Show a progress bar

    Raises:
        pydantic.ValidationError: If the body is malformed
        MissingCredentialError: If a required key is missing
    """
    request = AnalyzeRequest.model_validate(body)
    settings = (settings or get_settings()).with_overrides(**request.settings_overrides())

    companies = [c.to_input() for c in request.companies]
    for company in companies:
        if company.website_url and not is_valid_url(company.website_url):
            logger.warning(
                f"Website URL looks malformed for {company.company_name}: {company.website_url}"
            )

    pipeline = AdEstimationPipeline.from_settings(
        settings, fetcher=fetcher, show_progress=show_progress
    )
    logger.info(f"Analyzing {len(companies)} companies over {request.date_range} days")
    results = pipeline.run(companies, request.date_range)
    return summarize_results(results, request.date_range)
