"""
Evidence scanning over ad-library documents.

The ad library serves opaque, frequently changing markup, so there is no
schema to parse. Evidence is collected with substring and regex matching and
is best-effort: the scanner reports presence signals and raw marker counts,
and leaves all weighting to the estimator.

The scanner is stateless. Scanning the same document with the same inputs
always yields an equal EvidenceReport.
"""

from __future__ import annotations

import re

from ads_library_analyzer.analysis.identifiers import extract_domain, registrable_domain
from ads_library_analyzer.constants import (
    AD_CONTAINER_MARKERS,
    AD_LABEL_PATTERN,
    NO_RESULTS_PHRASES,
    SPONSORED_MARKER,
)
from ads_library_analyzer.models import (
    CompanyInput,
    EvidenceReport,
    HandleMatch,
    HandleSet,
    MarkerCounts,
)

_AD_LABEL_RE = re.compile(AD_LABEL_PATTERN, re.IGNORECASE)
_PUNCTUATION_RE = re.compile(r"[^\w\s]")
_WHITESPACE_RE = re.compile(r"\s+")
_CONTAINER_RE = re.compile("|".join(re.escape(m) for m in AD_CONTAINER_MARKERS))


def strip_punctuation(name: str) -> str:
    """Lowercase a company name and drop punctuation ("Acme, Inc." -> "acme inc")."""
    stripped = _PUNCTUATION_RE.sub("", name.lower())
    return _WHITESPACE_RE.sub(" ", stripped).strip()


def detect_no_results(text_lower: str, phrases: tuple[str, ...] = NO_RESULTS_PHRASES) -> bool:
    """True if the (lowercased) document shows an empty-search message."""
    return any(phrase in text_lower for phrase in phrases)


def domain_appears(text_lower: str, domain: str) -> bool:
    """True if the bare domain or its registrable root appears in the document."""
    if not domain:
        return False
    if domain in text_lower:
        return True
    root = registrable_domain(domain)
    return bool(root) and root != domain and root in text_lower


def name_appears(text_lower: str, company_name: str) -> bool:
    """True if the company name appears, raw or with punctuation stripped."""
    raw = company_name.strip().lower()
    if not raw:
        return False
    if raw in text_lower:
        return True
    stripped = strip_punctuation(company_name)
    return bool(stripped) and stripped in text_lower


def _handle_patterns(handle: str, hosts: tuple[str, ...]) -> list[str]:
    return [handle, f"@{handle}"] + [f"{host}/{handle}" for host in hosts]


def match_handle(text: str, text_lower: str, handles: HandleSet) -> HandleMatch:
    """
    Find the first handle (in priority order) that appears in the document.

    Each handle is tried alone, as "@handle" and as "<host>/handle". Matching is
    case-insensitive; `exact_case` records whether the handle also appears
    verbatim in the raw text.
    """
    for handle in handles:
        for pattern in _handle_patterns(handle, handles.hosts):
            if pattern.lower() in text_lower:
                return HandleMatch(matched=True, handle=handle, exact_case=handle in text)
    return HandleMatch()


def count_colocated(text_lower: str, handle: str | None) -> int:
    """
    Count ad cards that mention the handle.

    The document is split at ad-container markers; each chunk following a
    marker is treated as one card.
    """
    if not handle:
        return 0
    needle = handle.lower()
    chunks = _CONTAINER_RE.split(text_lower)[1:]
    return sum(1 for chunk in chunks if needle in chunk)


def count_markers(text: str, text_lower: str, matched_handle: str | None = None) -> MarkerCounts:
    """Raw, uncapped occurrence counts for each ad marker."""
    return MarkerCounts(
        sponsored=text_lower.count(SPONSORED_MARKER),
        ad_label=len(_AD_LABEL_RE.findall(text)),
        containers=len(_CONTAINER_RE.findall(text_lower)),
        handle_colocated=count_colocated(text_lower, matched_handle),
    )


def scan_document(
    text: str | None,
    company: CompanyInput,
    handles: HandleSet,
    domain: str | None = None,
) -> EvidenceReport:
    """
    Scan a raw ad-library document for presence signals.

    Args:
        text: Raw HTML/text, case preserved
        company: The company being analyzed
        handles: HandleSet derived from the company's social URL
        domain: Bare website domain (derived from company.website_url if omitted)

    Returns:
        EvidenceReport for the document
    """
    text = text or ""
    text_lower = text.lower()
    if domain is None:
        domain = extract_domain(company.website_url)

    handle_match = match_handle(text, text_lower, handles)

    return EvidenceReport(
        no_results_detected=detect_no_results(text_lower),
        domain_appears=domain_appears(text_lower, domain),
        name_appears=name_appears(text_lower, company.company_name),
        handle_match=handle_match,
        marker_counts=count_markers(text, text_lower, handle_match.handle),
    )
