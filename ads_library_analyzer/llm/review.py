"""
LLM review of heuristic ad estimates.

The heuristic estimate is described to a chat model together with the scanned
evidence, and the model returns a JSON estimate of its own. Model output is
never trusted structurally:

1. Code fences are stripped and the text between the first "{" and the last
   "}" is parsed.
2. Parsing returns a tagged value, ParsedEstimate or EstimateParseError,
   instead of raising.
3. On any failure the caller keeps the heuristic estimate.

Accepted model counts are clamped to the tier ceiling and the new-ad count is
always recomputed from the date-range ratio.
"""

from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass
from typing import Any

from openai import OpenAIError

from ads_library_analyzer.analysis.estimator import (
    DEFAULT_CONFIG,
    NO_ACTIVE_ADS_MESSAGE,
    NOT_FOUND_MESSAGE,
    EstimatorConfig,
    estimate_new_ads,
)
from ads_library_analyzer.constants import DEFAULT_LLM_MODEL, LLM_MAX_TOKENS, LLM_TEMPERATURE
from ads_library_analyzer.models import AdEstimate, CompanyInput, ConfidenceTier, EvidenceReport

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert Facebook advertising analyst. You review scraped Ad Library "
    "evidence and give realistic, conservative estimates. Always return valid JSON only."
)

_CODE_FENCE_RE = re.compile(r"```(?:json)?\s*|\s*```", re.IGNORECASE)


@dataclass(frozen=True)
class ParsedEstimate:
    """A well-formed estimate returned by the model."""

    found: bool
    active_ads: int | None
    new_ads: int | None
    error: str | None = None


@dataclass(frozen=True)
class EstimateParseError:
    """The model did not produce a usable estimate."""

    reason: str
    raw: str = ""


def _coerce_count(value: Any, field_name: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{field_name} must be a number or null, got {value!r}")
    if not math.isfinite(value):
        raise ValueError(f"{field_name} must be finite, got {value}")
    if value < 0:
        raise ValueError(f"{field_name} must be non-negative, got {value}")
    return int(value)


def parse_estimate_response(text: str | None) -> ParsedEstimate | EstimateParseError:
    """
    Parse model output into a ParsedEstimate.

    Args:
        text: Raw completion text (may contain code fences or prose)

    Returns:
        ParsedEstimate on success, EstimateParseError otherwise. Never raises.
    """
    if not text or not text.strip():
        return EstimateParseError(reason="empty response", raw=text or "")

    cleaned = _CODE_FENCE_RE.sub("", text).strip()
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end <= start:
        return EstimateParseError(reason="no JSON object in response", raw=text)

    try:
        data = json.loads(cleaned[start : end + 1])
    except json.JSONDecodeError as e:
        return EstimateParseError(reason=f"invalid JSON: {e.msg}", raw=text)

    if not isinstance(data, dict):
        return EstimateParseError(reason="JSON is not an object", raw=text)

    found = data.get("found")
    if not isinstance(found, bool):
        return EstimateParseError(reason="'found' must be a boolean", raw=text)

    try:
        active_ads = _coerce_count(data.get("activeAds"), "activeAds")
        new_ads = _coerce_count(data.get("newAds"), "newAds")
    except ValueError as e:
        return EstimateParseError(reason=str(e), raw=text)

    error = data.get("error")
    return ParsedEstimate(
        found=found,
        active_ads=active_ads,
        new_ads=new_ads,
        error=error if isinstance(error, str) and error.strip() else None,
    )


class LLMEstimateReviewer:
    """
    Ask a chat model to sanity-check a heuristic estimate.

    Args:
        client: OpenAI client (anything exposing chat.completions.create)
        model: Chat completion model name
        config: Estimator constants used to clamp and derive counts
    """

    def __init__(
        self,
        client,
        model: str = DEFAULT_LLM_MODEL,
        config: EstimatorConfig = DEFAULT_CONFIG,
        temperature: float = LLM_TEMPERATURE,
        max_tokens: int = LLM_MAX_TOKENS,
    ):
        self.client = client
        self.model = model
        self.config = config
        self.temperature = temperature
        self.max_tokens = max_tokens

    def build_prompt(
        self,
        company: CompanyInput,
        evidence: EvidenceReport,
        estimate: AdEstimate,
        date_range_days: int,
    ) -> str:
        """Describe the company, the scanned evidence and the heuristic estimate."""
        counts = evidence.marker_counts
        handle = evidence.handle_match.handle if evidence.handle_match.matched else "none"
        return f"""Review this Facebook Ad Library scrape and estimate the company's ad activity.

Company Name: "{company.company_name}"
Website URL: "{company.website_url or 'Not provided'}"
Social Profile: "{company.social_url or 'Not provided'}"
Analysis Period: Last {date_range_days} days

Scraped evidence:
- Profile handle found: {handle}
- Website domain found: {evidence.domain_appears}
- Company name found: {evidence.name_appears}
- "Sponsored" markers: {counts.sponsored}
- "Ad" labels: {counts.ad_label}
- Ad cards: {counts.containers}
- Ad cards mentioning the handle: {counts.handle_colocated}

Heuristic estimate (verification tier: {estimate.tier.value}):
- Active ads: {estimate.active_ads if estimate.active_ads is not None else 'none'}
- New ads: {estimate.new_ads if estimate.new_ads is not None else 'none'}

Guidelines:
- Local/small businesses: 1-15 active ads
- Medium businesses: 15-50 active ads
- Large corporations: 50-200+ active ads
- Set "found" to false if the evidence does not belong to this company

Return ONLY a JSON object:
{{
  "found": true/false,
  "activeAds": number_or_null,
  "newAds": number_or_null,
  "error": null_or_error_message
}}"""

    def review(
        self,
        company: CompanyInput,
        evidence: EvidenceReport,
        estimate: AdEstimate,
        date_range_days: int,
    ) -> ParsedEstimate | EstimateParseError:
        """
        Request and parse the model's estimate.

        API failures are returned as EstimateParseError so the caller's fallback
        path is the same for every way the model can let us down.
        """
        prompt = self.build_prompt(company, evidence, estimate, date_range_days)
        try:
            completion = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except OpenAIError as e:
            logger.warning(f"LLM review failed for {company.company_name}: {e}")
            return EstimateParseError(reason=f"request failed: {e}")

        content = completion.choices[0].message.content if completion.choices else None
        result = parse_estimate_response(content)
        if isinstance(result, EstimateParseError):
            logger.warning(
                f"Could not parse LLM review for {company.company_name}: {result.reason}"
            )
            logger.debug(f"Raw LLM output: {result.raw[:500]}")
        return result

    def apply(
        self,
        parsed: ParsedEstimate,
        evidence: EvidenceReport,
        tier: ConfidenceTier,
        date_range_days: int,
    ) -> AdEstimate:
        """Turn an accepted model estimate into a bounded AdEstimate."""
        if not parsed.found or not parsed.active_ads:
            message = parsed.error or (
                NO_ACTIVE_ADS_MESSAGE if evidence.company_evidence else NOT_FOUND_MESSAGE
            )
            return AdEstimate(active_ads=None, new_ads=None, tier=tier, error=message)

        active_ads = min(parsed.active_ads, self.config.cap_for(tier))
        return AdEstimate(
            active_ads=active_ads,
            new_ads=estimate_new_ads(active_ads, date_range_days, self.config),
            tier=tier,
        )
