"""
Unit tests for AdEstimationPipeline.
"""

from unittest.mock import Mock

import pytest

from ads_library_analyzer.analysis.estimator import (
    NO_ACTIVE_ADS_MESSAGE,
    NO_RESULTS_MESSAGE,
    NOT_FOUND_MESSAGE,
)
from ads_library_analyzer.analysis.pipeline import AdEstimationPipeline
from ads_library_analyzer.config import MissingCredentialError
from ads_library_analyzer.fetch import FetchRateLimitError, ScrapingBeeFetcher
from ads_library_analyzer.llm.review import LLMEstimateReviewer
from ads_library_analyzer.models import CompanyInput, ConfidenceTier
from ads_library_analyzer.utils.rate_limiting import NoopRateLimiter, RateLimiter


def _llm_client(content):
    client = Mock()
    client.chat.completions.create.return_value = Mock(
        choices=[Mock(message=Mock(content=content))]
    )
    return client


class TestSingleCompany:
    """End-to-end behaviour for one company."""

    def test_reference_company(self, acme, acme_document, scripted_fetcher):
        pipeline = AdEstimationPipeline(scripted_fetcher([acme_document]))

        [result] = pipeline.run([acme], 7)

        assert result.found is True
        assert result.active_ads == 7
        assert result.new_ads == 2
        assert result.tier is ConfidenceTier.HANDLE
        assert result.error is None
        assert result.source == "heuristic"

    @pytest.mark.parametrize("days,new_ads", [(1, 2), (30, 2), (90, 3)])
    def test_new_ads_follow_date_range(self, acme, acme_document, scripted_fetcher, days, new_ads):
        pipeline = AdEstimationPipeline(scripted_fetcher([acme_document]))
        [result] = pipeline.run([acme], days)
        assert result.active_ads == 7
        assert result.new_ads == new_ads

    @pytest.mark.parametrize("days", [1, 7, 90])
    def test_no_results_page_is_never_found(
        self, acme, no_results_document, scripted_fetcher, days
    ):
        pipeline = AdEstimationPipeline(scripted_fetcher([no_results_document]))

        [result] = pipeline.run([acme], days)

        assert result.found is False
        assert result.active_ads is None
        assert result.new_ads is None
        assert result.error == NO_RESULTS_MESSAGE

    def test_malformed_social_url_falls_back_to_domain(self, scripted_fetcher):
        company = CompanyInput(
            company_name="Widget Works",
            website_url="https://www.acme.com",
            social_url="https://example.com/not-a-profile",
        )
        document = "<a href='https://acme.com'>shop</a>" + "<span>Sponsored</span>" * 10

        [result] = AdEstimationPipeline(scripted_fetcher([document])).run([company], 7)

        assert result.tier is ConfidenceTier.DOMAIN
        assert result.active_ads == 5
        assert result.new_ads == 1

    def test_name_only_without_markers(self, name_only_document, scripted_fetcher):
        company = CompanyInput(company_name="Acme Corp", website_url="https://acme.com")

        [result] = AdEstimationPipeline(scripted_fetcher([name_only_document])).run([company], 7)

        assert result.tier is ConfidenceTier.NAME
        assert result.found is False
        assert result.error == NO_ACTIVE_ADS_MESSAGE

    def test_unrelated_document(self, unrelated_document, scripted_fetcher):
        company = CompanyInput(company_name="Globex", website_url="https://globex.com")

        [result] = AdEstimationPipeline(scripted_fetcher([unrelated_document])).run([company], 7)

        assert result.tier is ConfidenceTier.NONE
        assert result.found is False
        assert result.error == NOT_FOUND_MESSAGE

    def test_search_url_uses_company_name(self, acme, acme_document, scripted_fetcher):
        fetcher = scripted_fetcher([acme_document])
        AdEstimationPipeline(fetcher, country="GB").run([acme], 7)

        url, _ = fetcher.calls[0]
        assert "q=Acme+Corp" in url
        assert "country=GB" in url


class TestBatch:
    """Ordering, skipping and failure isolation across companies."""

    def test_blank_names_skipped_and_order_kept(self, acme_document, scripted_fetcher):
        companies = [
            CompanyInput(company_name="First Co", website_url="https://first.com"),
            CompanyInput(company_name="   ", website_url="https://blank.com"),
            CompanyInput(company_name="Second Co", website_url="https://second.com"),
        ]
        fetcher = scripted_fetcher([acme_document, acme_document])

        results = AdEstimationPipeline(fetcher).run(companies, 7)

        assert [r.company_name for r in results] == ["First Co", "Second Co"]
        assert len(fetcher.calls) == 2

    def test_fetch_error_isolated(self, acme, acme_document, scripted_fetcher):
        error = FetchRateLimitError(
            "ScrapingBee rate limit exceeded, try again later (HTTP 429)",
            provider="ScrapingBee",
            status_code=429,
        )
        fetcher = scripted_fetcher([error, acme_document])
        other = CompanyInput(
            company_name="Acme Again",
            website_url="https://acme.com",
            social_url="https://facebook.com/acmecorp",
        )

        first, second = AdEstimationPipeline(fetcher).run([acme, other], 7)

        assert first.found is False
        assert first.active_ads is None
        assert first.error == "ScrapingBee rate limit exceeded, try again later (HTTP 429)"
        assert second.found is True
        assert second.active_ads == 7

    def test_unexpected_error_isolated(self, acme, acme_document, scripted_fetcher):
        fetcher = scripted_fetcher([RuntimeError("boom"), acme_document])

        first, second = AdEstimationPipeline(fetcher).run([acme, acme], 7)

        assert first.error == "Analysis failed: boom"
        assert first.found is False
        assert second.found is True

    def test_rate_limiter_called_per_company(self, acme, acme_document, scripted_fetcher):
        limiter = Mock()
        fetcher = scripted_fetcher([acme_document, acme_document])
        blank = CompanyInput(company_name="")

        AdEstimationPipeline(fetcher, rate_limiter=limiter).run([acme, blank, acme], 7)

        assert limiter.call_count == 2

    def test_dict_inputs(self, acme_document, scripted_fetcher):
        companies = [
            {
                "companyName": "Acme Corp",
                "websiteUrl": "https://acme.com",
                "socialUrl": "https://facebook.com/acmecorp",
            }
        ]
        [result] = AdEstimationPipeline(scripted_fetcher([acme_document])).run(companies, 7)
        assert result.website_url == "https://acme.com"
        assert result.active_ads == 7

    def test_non_string_fields_are_coerced(self, acme, acme_document, scripted_fetcher):
        fetcher = scripted_fetcher([acme_document, acme_document])
        companies = [{"companyName": 123, "websiteUrl": None}, acme]

        first, second = AdEstimationPipeline(fetcher).run(companies, 7)

        assert first.company_name == "123"
        assert first.website_url == ""
        assert second.company_name == "Acme Corp"
        assert second.active_ads == 7

    def test_malformed_record_skipped(self, acme, acme_document, scripted_fetcher):
        fetcher = scripted_fetcher([acme_document, acme_document])

        results = AdEstimationPipeline(fetcher).run([acme, "Globex", None, acme], 7)

        assert [r.company_name for r in results] == ["Acme Corp", "Acme Corp"]
        assert all(r.active_ads == 7 for r in results)
        assert len(fetcher.calls) == 2

    def test_empty_batch(self, scripted_fetcher):
        assert AdEstimationPipeline(scripted_fetcher([])).run([], 7) == []

    @pytest.mark.parametrize("days", [0, -7, 7.5, "7", True])
    def test_invalid_date_range(self, acme, scripted_fetcher, days):
        fetcher = scripted_fetcher([])
        with pytest.raises(ValueError):
            AdEstimationPipeline(fetcher).run([acme], days)
        assert fetcher.calls == []


class TestLLMReview:
    """Pipeline behaviour with an LLM reviewer attached."""

    def test_model_estimate_is_clamped(self, acme, acme_document, scripted_fetcher):
        reviewer = LLMEstimateReviewer(
            _llm_client('{"found": true, "activeAds": 500, "newAds": 400, "error": null}')
        )
        pipeline = AdEstimationPipeline(scripted_fetcher([acme_document]), reviewer=reviewer)

        [result] = pipeline.run([acme], 7)

        assert result.active_ads == 200
        assert result.new_ads == 30
        assert result.source == "llm"
        assert result.tier is ConfidenceTier.HANDLE

    def test_unparseable_review_keeps_heuristic(self, acme, acme_document, scripted_fetcher):
        reviewer = LLMEstimateReviewer(_llm_client("not json at all"))
        pipeline = AdEstimationPipeline(scripted_fetcher([acme_document]), reviewer=reviewer)

        [result] = pipeline.run([acme], 7)

        assert result.active_ads == 7
        assert result.new_ads == 2
        assert result.source == "heuristic"

    @pytest.mark.parametrize("count", ["Infinity", "1e400", "NaN"])
    def test_non_finite_review_keeps_heuristic(
        self, acme, acme_document, scripted_fetcher, count
    ):
        reviewer = LLMEstimateReviewer(
            _llm_client(f'{{"found": true, "activeAds": {count}, "newAds": 1, "error": null}}')
        )
        pipeline = AdEstimationPipeline(scripted_fetcher([acme_document]), reviewer=reviewer)

        [result] = pipeline.run([acme], 7)

        assert result.active_ads == 7
        assert result.new_ads == 2
        assert result.error is None
        assert result.source == "heuristic"

    def test_reviewer_skipped_on_no_results(self, acme, no_results_document, scripted_fetcher):
        reviewer = Mock()
        pipeline = AdEstimationPipeline(scripted_fetcher([no_results_document]), reviewer=reviewer)

        [result] = pipeline.run([acme], 7)

        reviewer.review.assert_not_called()
        assert result.error == NO_RESULTS_MESSAGE


class TestFromSettings:
    """Tests for AdEstimationPipeline.from_settings."""

    def test_builds_configured_fetcher(self, settings):
        pipeline = AdEstimationPipeline.from_settings(settings)

        assert isinstance(pipeline.fetcher, ScrapingBeeFetcher)
        assert isinstance(pipeline.rate_limiter, NoopRateLimiter)
        assert pipeline.reviewer is None
        assert pipeline.fetch_options.timeout == settings.fetch_timeout_seconds

    def test_interval_rate_limiter(self, settings):
        configured = settings.model_copy(update={"request_interval_seconds": 5.0})
        pipeline = AdEstimationPipeline.from_settings(configured)

        assert type(pipeline.rate_limiter) is RateLimiter
        assert pipeline.rate_limiter.min_interval == pytest.approx(5.0)

    def test_missing_provider_key(self, settings):
        configured = settings.model_copy(update={"scrapingbee_api_key": None})
        with pytest.raises(MissingCredentialError):
            AdEstimationPipeline.from_settings(configured)

    def test_llm_review_needs_openai_key(self, settings):
        configured = settings.model_copy(update={"llm_review_enabled": True})
        with pytest.raises(MissingCredentialError, match="OPENAI_API_KEY"):
            AdEstimationPipeline.from_settings(configured)

    def test_llm_review_enabled(self, settings):
        configured = settings.model_copy(
            update={"llm_review_enabled": True, "openai_api_key": "sk-test"}
        )
        pipeline = AdEstimationPipeline.from_settings(configured)

        assert isinstance(pipeline.reviewer, LLMEstimateReviewer)
        assert pipeline.reviewer.model == configured.openai_model
