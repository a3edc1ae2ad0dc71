"""
Ad count estimation.

Converts raw marker counts into a bounded active-ad estimate, conditioned on
the confidence tier, and derives a new-ad estimate from the date range.

Tier weighting (defaults from constants.py, overridable via EstimatorConfig):
- HANDLE: ad cards mentioning the handle, else 70% of "sponsored" markers
- DOMAIN: max(ad containers, 50% of "sponsored"), capped at 75
- NAME: 30% of "sponsored", capped at 25
- NONE: 20% of ad containers, capped at 10

HANDLE and DOMAIN estimates below 3 are replaced by a capped sponsored count
when the document shows ads at all (low count correction).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from ads_library_analyzer.constants import (
    DOMAIN_CAP,
    DOMAIN_SPONSORED_FRACTION,
    HANDLE_CAP,
    HANDLE_SPONSORED_FRACTION,
    LOW_COUNT_SPONSORED_CAP,
    LOW_COUNT_THRESHOLD,
    NAME_CAP,
    NAME_SPONSORED_FRACTION,
    NEW_AD_RATIO_DEFAULT,
    NEW_AD_RATIO_STEPS,
    NONE_CAP,
    NONE_CONTAINER_FRACTION,
)
from ads_library_analyzer.models import AdEstimate, ConfidenceTier, EvidenceReport

logger = logging.getLogger(__name__)

NO_RESULTS_MESSAGE = "No ads found: the ad library search returned no results (company not found)"
NO_ACTIVE_ADS_MESSAGE = "Company found in the ad library but no active ads were detected"
NOT_FOUND_MESSAGE = "Company not found in the ad library results"

# Float products like 0.7 * 10 land a hair above or below the integer
_FLOOR_EPSILON = 1e-9


@dataclass(frozen=True)
class EstimatorConfig:
    """Tunable heuristic constants for the count estimator."""

    handle_sponsored_fraction: float = HANDLE_SPONSORED_FRACTION
    domain_sponsored_fraction: float = DOMAIN_SPONSORED_FRACTION
    name_sponsored_fraction: float = NAME_SPONSORED_FRACTION
    none_container_fraction: float = NONE_CONTAINER_FRACTION
    handle_cap: int = HANDLE_CAP
    domain_cap: int = DOMAIN_CAP
    name_cap: int = NAME_CAP
    none_cap: int = NONE_CAP
    low_count_threshold: int = LOW_COUNT_THRESHOLD
    low_count_sponsored_cap: int = LOW_COUNT_SPONSORED_CAP
    ratio_steps: tuple[tuple[int, float], ...] = NEW_AD_RATIO_STEPS
    ratio_default: float = NEW_AD_RATIO_DEFAULT

    def cap_for(self, tier: ConfidenceTier) -> int:
        """Ceiling for the active-ad estimate at a given tier."""
        return {
            ConfidenceTier.HANDLE: self.handle_cap,
            ConfidenceTier.DOMAIN: self.domain_cap,
            ConfidenceTier.NAME: self.name_cap,
            ConfidenceTier.NONE: self.none_cap,
        }[tier]


DEFAULT_CONFIG = EstimatorConfig()


def _fraction(count: int, fraction: float) -> int:
    return math.floor(count * fraction + _FLOOR_EPSILON)


def new_ad_ratio(date_range_days: int, config: EstimatorConfig = DEFAULT_CONFIG) -> float:
    """
    Share of active ads assumed to be new within the date range.

    Step function evaluated with <= thresholds: 7 -> 0.15, 8..30 -> 0.25,
    anything longer -> 0.4.
    """
    for max_days, ratio in config.ratio_steps:
        if date_range_days <= max_days:
            return ratio
    return config.ratio_default


def estimate_new_ads(
    active_ads: int, date_range_days: int, config: EstimatorConfig = DEFAULT_CONFIG
) -> int:
    """ceil(active_ads * ratio). Never exceeds active_ads because ratio < 1."""
    return math.ceil(active_ads * new_ad_ratio(date_range_days, config))


def raw_count(
    evidence: EvidenceReport, tier: ConfidenceTier, config: EstimatorConfig = DEFAULT_CONFIG
) -> int:
    """Tier-weighted, capped active-ad count before low count correction."""
    counts = evidence.marker_counts

    if tier is ConfidenceTier.HANDLE:
        if counts.handle_colocated > 0:
            count = counts.handle_colocated
        else:
            count = _fraction(counts.sponsored, config.handle_sponsored_fraction)
    elif tier is ConfidenceTier.DOMAIN:
        count = max(
            counts.containers, _fraction(counts.sponsored, config.domain_sponsored_fraction)
        )
    elif tier is ConfidenceTier.NAME:
        count = _fraction(counts.sponsored, config.name_sponsored_fraction)
    else:
        count = _fraction(counts.containers, config.none_container_fraction)

    return min(count, config.cap_for(tier))


def estimate(
    evidence: EvidenceReport,
    tier: ConfidenceTier,
    date_range_days: int,
    config: EstimatorConfig = DEFAULT_CONFIG,
) -> AdEstimate:
    """
    Estimate active and new ads for one company.

    Args:
        evidence: Scanned evidence for the company's ad-library document
        tier: Confidence tier from the classifier
        date_range_days: Window for the new-ad estimate
        config: Heuristic constants

    Returns:
        AdEstimate. active_ads is None whenever no ads were detected.
    """
    if evidence.no_results_detected:
        return AdEstimate(active_ads=None, new_ads=None, tier=tier, error=NO_RESULTS_MESSAGE)

    count = raw_count(evidence, tier, config)

    if (
        tier in (ConfidenceTier.HANDLE, ConfidenceTier.DOMAIN)
        and count < config.low_count_threshold
        and evidence.marker_counts.any_ads
    ):
        corrected = min(evidence.marker_counts.sponsored, config.low_count_sponsored_cap)
        if corrected > count:
            logger.debug(f"Low count correction ({tier.value}): {count} -> {corrected}")
            count = corrected

    if count <= 0:
        message = NO_ACTIVE_ADS_MESSAGE if evidence.company_evidence else NOT_FOUND_MESSAGE
        return AdEstimate(active_ads=None, new_ads=None, tier=tier, error=message)

    return AdEstimate(
        active_ads=count,
        new_ads=estimate_new_ads(count, date_range_days, config),
        tier=tier,
    )
