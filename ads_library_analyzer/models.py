"""
Data models for ad estimation results.

These dataclasses represent the values that flow through the estimation
pipeline: the submitted company, the identifiers derived from it, the evidence
scanned out of an ad-library document, and the final per-company result.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class CompanyInput:
    """A company submitted for analysis."""

    company_name: str
    website_url: str = ""
    social_url: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CompanyInput:
        """
        Build from a request payload (camelCase or snake_case keys).

        Non-string values are stringified; None becomes "".

        Raises:
            ValueError: If data is not a mapping
        """
        if not isinstance(data, dict):
            raise ValueError(f"Company record must be an object, got {type(data).__name__}")
        name = data.get("companyName", data.get("company_name", data.get("name")))
        website = data.get("websiteUrl", data.get("website_url", data.get("url")))
        social = _text(data.get("socialUrl", data.get("social_url")))
        return cls(
            company_name=_text(name),
            website_url=_text(website),
            social_url=social or None,
        )


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


@dataclass(frozen=True)
class HandleSet:
    """Ordered, de-duplicated handle variants derived from a social profile URL."""

    handles: tuple[str, ...] = ()
    platform: str | None = None
    hosts: tuple[str, ...] = ()

    def __iter__(self):
        return iter(self.handles)

    def __len__(self) -> int:
        return len(self.handles)

    def __contains__(self, item: object) -> bool:
        return item in self.handles


class ConfidenceTier(Enum):
    """Which verification signal backs an estimate."""

    HANDLE = "handle"  # Profile handle found in the document
    DOMAIN = "domain"  # Website domain found
    NAME = "name"  # Company name found
    NONE = "none"  # No verification signal

    @property
    def rank(self) -> int:
        """Trust rank (higher = more trusted)."""
        return _TIER_RANK[self]

    def __lt__(self, other: ConfidenceTier) -> bool:
        if not isinstance(other, ConfidenceTier):
            return NotImplemented
        return self.rank < other.rank


_TIER_RANK = {
    ConfidenceTier.NONE: 0,
    ConfidenceTier.NAME: 1,
    ConfidenceTier.DOMAIN: 2,
    ConfidenceTier.HANDLE: 3,
}


@dataclass(frozen=True)
class HandleMatch:
    """Which handle (if any) was found in the document."""

    matched: bool = False
    handle: str | None = None
    exact_case: bool = False  # Handle also appears verbatim in the raw text


@dataclass(frozen=True)
class MarkerCounts:
    """Raw occurrence counts of ad markers. Uncapped."""

    sponsored: int = 0
    ad_label: int = 0
    containers: int = 0
    handle_colocated: int = 0  # Ad cards that mention the matched handle

    @property
    def any_ads(self) -> bool:
        return (self.sponsored + self.ad_label + self.containers) > 0


@dataclass(frozen=True)
class EvidenceReport:
    """Presence signals scanned out of one document."""

    no_results_detected: bool = False
    domain_appears: bool = False
    name_appears: bool = False
    handle_match: HandleMatch = field(default_factory=HandleMatch)
    marker_counts: MarkerCounts = field(default_factory=MarkerCounts)

    @property
    def company_evidence(self) -> bool:
        """True if anything ties the document to the company."""
        return self.handle_match.matched or self.domain_appears or self.name_appears


@dataclass(frozen=True)
class AdEstimate:
    """Bounded ad counts for one company."""

    active_ads: int | None
    new_ads: int | None
    tier: ConfidenceTier
    error: str | None = None

    @property
    def found(self) -> bool:
        return self.active_ads is not None and self.active_ads > 0


@dataclass(frozen=True)
class CompanyResult:
    """Final result for a company. `found` is derived from `active_ads`."""

    company_name: str
    website_url: str
    active_ads: int | None = None
    new_ads: int | None = None
    error: str | None = None
    tier: ConfidenceTier = ConfidenceTier.NONE
    source: str = "heuristic"  # "heuristic" or "llm"

    @property
    def found(self) -> bool:
        return self.active_ads is not None and self.active_ads > 0

    @classmethod
    def from_estimate(
        cls, company: CompanyInput, estimate: AdEstimate, source: str = "heuristic"
    ) -> CompanyResult:
        return cls(
            company_name=company.company_name,
            website_url=company.website_url,
            active_ads=estimate.active_ads,
            new_ads=estimate.new_ads,
            error=estimate.error,
            tier=estimate.tier,
            source=source,
        )

    @classmethod
    def failure(cls, company: CompanyInput, error: str) -> CompanyResult:
        return cls(
            company_name=company.company_name,
            website_url=company.website_url,
            error=error,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the response shape (camelCase keys)."""
        return {
            "companyName": self.company_name,
            "websiteUrl": self.website_url,
            "found": self.found,
            "activeAds": self.active_ads,
            "newAds": self.new_ads,
            "error": self.error,
            "confidenceTier": self.tier.value,
            "source": self.source,
        }
