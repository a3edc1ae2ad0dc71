"""
Per-company ad estimation pipeline.

Companies are analyzed strictly in input order, one at a time, with a
minimum interval between provider requests (see utils.rate_limiting). Each
company goes through:

1. Identifier extraction (handle set, bare domain)
2. Document fetch via the injected DocumentFetcher
3. Evidence scan
4. Confidence classification
5. Count estimation (optionally reviewed by an LLM)

Every failure inside one company's analysis is converted into a CompanyResult
with found=False and a readable error, so one bad company never aborts the
batch. Nothing is retried.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from tqdm import tqdm

from ads_library_analyzer.analysis.classifier import classify
from ads_library_analyzer.analysis.estimator import DEFAULT_CONFIG, EstimatorConfig, estimate
from ads_library_analyzer.analysis.identifiers import build_handle_set, extract_domain
from ads_library_analyzer.analysis.scanner import scan_document
from ads_library_analyzer.config import Settings, get_settings
from ads_library_analyzer.constants import DEFAULT_COUNTRY
from ads_library_analyzer.fetch import create_fetcher
from ads_library_analyzer.fetch.ad_library import build_ad_library_url
from ads_library_analyzer.fetch.base import DocumentFetcher, FetchError, FetchOptions
from ads_library_analyzer.llm.review import LLMEstimateReviewer, ParsedEstimate
from ads_library_analyzer.models import CompanyInput, CompanyResult
from ads_library_analyzer.utils.rate_limiting import RateLimiter

logger = logging.getLogger(__name__)


class AdEstimationPipeline:
    """
    Sequential, failure-isolated ad estimation over a batch of companies.

    Args:
        fetcher: Document fetcher (any provider)
        config: Heuristic constants for the estimator
        rate_limiter: Spacing policy between requests (default: no wait)
        reviewer: Optional LLM reviewer for heuristic estimates
        fetch_options: Rendering options passed to the fetcher
        country: Ad library country filter
        show_progress: Show a tqdm progress bar over the batch
    """

    def __init__(
        self,
        fetcher: DocumentFetcher,
        config: EstimatorConfig = DEFAULT_CONFIG,
        rate_limiter: RateLimiter | None = None,
        reviewer: LLMEstimateReviewer | None = None,
        fetch_options: FetchOptions | None = None,
        country: str = DEFAULT_COUNTRY,
        show_progress: bool = False,
    ):
        self.fetcher = fetcher
        self.config = config
        self.rate_limiter = rate_limiter or RateLimiter.from_interval(0, source_name="pipeline")
        self.reviewer = reviewer
        self.fetch_options = fetch_options or FetchOptions()
        self.country = country
        self.show_progress = show_progress

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        fetcher: DocumentFetcher | None = None,
        config: EstimatorConfig = DEFAULT_CONFIG,
        show_progress: bool = False,
    ) -> AdEstimationPipeline:
        """
        Build a pipeline from settings.

        Credentials are checked here, before any company is processed.

        Raises:
            MissingCredentialError: If the provider (or LLM) key is missing
        """
        settings = settings or get_settings()
        fetcher = fetcher or create_fetcher(settings)

        reviewer = None
        if settings.llm_review_enabled:
            from ads_library_analyzer.llm.openai_client import get_openai_client

            reviewer = LLMEstimateReviewer(
                get_openai_client(settings), model=settings.openai_model, config=config
            )

        return cls(
            fetcher=fetcher,
            config=config,
            rate_limiter=RateLimiter.from_interval(
                settings.request_interval_seconds, source_name=fetcher.name
            ),
            reviewer=reviewer,
            fetch_options=FetchOptions(timeout=settings.fetch_timeout_seconds),
            country=settings.ad_library_country,
            show_progress=show_progress,
        )

    def search_url(self, company: CompanyInput) -> str:
        """Ad library search URL for a company."""
        return build_ad_library_url(company.company_name, country=self.country)

    def analyze_company(self, company: CompanyInput, date_range_days: int) -> CompanyResult:
        """
        Analyze one company. May raise; run() owns failure isolation.
        """
        handles = build_handle_set(company.social_url)
        domain = extract_domain(company.website_url)
        logger.debug(
            f"{company.company_name}: domain={domain or '-'} handles={list(handles) or '-'}"
        )

        document = self.fetcher.fetch(self.search_url(company), self.fetch_options)

        evidence = scan_document(document, company, handles, domain=domain)
        tier = classify(evidence)
        result = estimate(evidence, tier, date_range_days, self.config)
        source = "heuristic"

        # A no-results page is final; the model is not asked to second-guess it
        if self.reviewer is not None and not evidence.no_results_detected:
            outcome = self.reviewer.review(company, evidence, result, date_range_days)
            if isinstance(outcome, ParsedEstimate):
                result = self.reviewer.apply(outcome, evidence, tier, date_range_days)
                source = "llm"

        return CompanyResult.from_estimate(company, result, source=source)

    def run(
        self, companies: Iterable[CompanyInput | dict], date_range_days: int
    ) -> list[CompanyResult]:
        """
        Analyze companies in order.

        Companies with a blank name and records that are not objects are skipped.
        Output order matches input order.

        Args:
            companies: CompanyInput records (or request dicts)
            date_range_days: Window for new-ad estimates (must be > 0)

        Returns:
            One CompanyResult per non-blank company

        Raises:
            ValueError: If date_range_days is not a positive integer
        """
        if isinstance(date_range_days, bool) or not isinstance(date_range_days, int):
            raise ValueError(f"date_range_days must be an integer, got {date_range_days!r}")
        if date_range_days <= 0:
            raise ValueError(f"date_range_days must be > 0, got {date_range_days}")

        records = list(companies)
        results: list[CompanyResult] = []

        for record in tqdm(
            records, desc="Analyzing companies", unit="company", disable=not self.show_progress
        ):
            try:
                company = (
                    record if isinstance(record, CompanyInput) else CompanyInput.from_dict(record)
                )
            except ValueError as e:
                logger.warning(f"Skipping malformed company record: {e}")
                continue

            if not company.company_name.strip():
                logger.debug("Skipping company with blank name")
                continue

            self.rate_limiter()
            try:
                result = self.analyze_company(company, date_range_days)
            except FetchError as e:
                logger.warning(f"Fetch failed for {company.company_name}: {e}")
                result = CompanyResult.failure(company, str(e))
            except Exception as e:
                logger.warning(f"Analysis failed for {company.company_name}: {e}")
                result = CompanyResult.failure(company, f"Analysis failed: {e}")

            logger.info(
                f"{company.company_name}: found={result.found} active={result.active_ads} "
                f"new={result.new_ads} tier={result.tier.value}"
            )
            results.append(result)

        return results
