"""
Handle and domain extraction.

Derives the comparison identifiers used by the evidence scanner:
- a HandleSet from a company's social profile URL
- a bare domain (and its registrable root) from the website URL

Nothing in this module raises on malformed input. Bad URLs produce an empty
HandleSet or an empty domain string so the pipeline can continue on the
remaining signals.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from urllib.parse import urlparse

import tldextract

from ads_library_analyzer.constants import BUSINESS_SUFFIXES, MIN_HANDLE_LENGTH
from ads_library_analyzer.models import HandleSet

logger = logging.getLogger(__name__)

# Bundled public suffix snapshot only; never fetch the list over the network
_tld_extract = tldextract.TLDExtract(suffix_list_urls=())


@dataclass(frozen=True)
class SocialPlatform:
    """Host patterns and handle conventions for one social platform."""

    name: str
    hosts: tuple[str, ...]  # In match priority order
    suffix_guesses: tuple[str, ...] = ()
    reserved_segments: frozenset[str] = frozenset()
    name_after: frozenset[str] = frozenset()  # Segments followed by the real handle


PLATFORMS = (
    SocialPlatform(
        name="facebook",
        hosts=("facebook.com", "fb.com", "m.facebook.com"),
        suffix_guesses=("official", "page", "hq", "online"),
        reserved_segments=frozenset(
            {"profile.php", "people", "groups", "events", "watch", "ads", "sharer.php", "share"}
        ),
        name_after=frozenset({"pages", "pg"}),
    ),
    SocialPlatform(
        name="instagram",
        hosts=("instagram.com", "m.instagram.com"),
        suffix_guesses=("official", "hq"),
        reserved_segments=frozenset({"p", "reel", "reels", "explore", "stories"}),
    ),
    SocialPlatform(
        name="tiktok",
        hosts=("tiktok.com", "m.tiktok.com"),
        suffix_guesses=("official", "hq"),
        reserved_segments=frozenset({"tag", "music", "discover", "video"}),
    ),
)

_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)
_WWW_RE = re.compile(r"^www\.", re.IGNORECASE)
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")
_BUSINESS_SUFFIX_RE = re.compile(
    r"[\s._-]*(?:" + "|".join(BUSINESS_SUFFIXES) + r")\.?$", re.IGNORECASE
)


def _host_pattern(host: str) -> re.Pattern:
    # Optional scheme, optional www., exact host, then the path
    return re.compile(
        r"^(?:[a-z]+://)?(?:www\.)?" + re.escape(host) + r"(?::\d+)?(/.*)?$",
        re.IGNORECASE,
    )


_HOST_PATTERNS = [
    (platform, host, _host_pattern(host)) for platform in PLATFORMS for host in platform.hosts
]


def _clean_segment(segment: str) -> str:
    """Strip trailing slash, query string and fragment from a path segment."""
    segment = segment.split("?", 1)[0].split("#", 1)[0]
    return segment.strip().strip("/")


def extract_handle(social_url: str | None) -> tuple[str | None, SocialPlatform | None]:
    """
    Extract the profile handle from a social profile URL.

    The first host pattern that matches wins. Returns (None, None) when the URL
    does not belong to a known platform host, or (None, platform) when the host
    matched but the path holds no usable handle.

    Args:
        social_url: Profile URL (e.g. "https://facebook.com/acmecorp/")

    Returns:
        Tuple of (handle, platform)
    """
    if not social_url or not isinstance(social_url, str):
        return None, None

    url = social_url.strip()
    for platform, _host, pattern in _HOST_PATTERNS:
        match = pattern.match(url)
        if not match:
            continue

        path = _clean_segment(match.group(1) or "")
        segments = [_clean_segment(s) for s in path.split("/")]
        segments = [s for s in segments if s]
        if not segments:
            return None, platform

        first = segments[0]
        if first.lower() in platform.name_after:
            first = segments[1] if len(segments) > 1 else ""
        elif first.lower() in platform.reserved_segments:
            return None, platform

        handle = first.lstrip("@")
        return (handle or None), platform

    logger.debug(f"No known platform host in social URL: {social_url}")
    return None, None


def _strip_suffixes(value: str, suffixes: tuple[str, ...]) -> str:
    lowered = value.lower()
    for suffix in suffixes:
        if lowered.endswith(suffix) and len(lowered) > len(suffix):
            return value[: -len(suffix)].rstrip("._-")
    return value


def build_handle_set(social_url: str | None) -> HandleSet:
    """
    Build the ordered HandleSet for a social profile URL.

    Variants, in priority order: the raw handle, its lowercase form, the form
    with non-alphanumerics removed, the form with business-entity suffixes
    removed, and the form with platform-specific suffixes removed. Duplicates
    and variants of length <= 2 are dropped.
    """
    handle, platform = extract_handle(social_url)
    if not handle or platform is None:
        return HandleSet(platform=platform.name if platform else None)

    lower = handle.lower()
    alnum = _NON_ALNUM_RE.sub("", lower)
    without_business = _NON_ALNUM_RE.sub("", _BUSINESS_SUFFIX_RE.sub("", lower))
    without_platform = _NON_ALNUM_RE.sub("", _strip_suffixes(lower, platform.suffix_guesses))

    variants: list[str] = []
    for candidate in (handle, lower, alnum, without_business, without_platform):
        candidate = candidate.strip()
        if len(candidate) <= MIN_HANDLE_LENGTH or candidate in variants:
            continue
        variants.append(candidate)

    return HandleSet(handles=tuple(variants), platform=platform.name, hosts=platform.hosts)


def extract_domain(website_url: str | None) -> str:
    """
    Extract a bare domain from a website URL.

    Removes the scheme and a leading "www.", then truncates at the first "/".
    Query strings, fragments and ports are dropped as well.

    Returns:
        Lowercase domain, or "" for empty or malformed input
    """
    if not website_url or not isinstance(website_url, str):
        return ""

    domain = _SCHEME_RE.sub("", website_url.strip())
    domain = _WWW_RE.sub("", domain)
    domain = domain.split("/", 1)[0]
    domain = domain.split("?", 1)[0].split("#", 1)[0].split(":", 1)[0]
    domain = domain.lower().strip(".")

    if not domain or " " in domain:
        return ""
    return domain


def registrable_domain(domain: str) -> str:
    """
    Registrable root of a bare domain ("shop.acme.co.uk" -> "acme.co.uk").

    Returns "" when the domain has no recognised public suffix.
    """
    if not domain:
        return ""
    ext = _tld_extract(domain)
    if not ext.domain or not ext.suffix:
        return ""
    return f"{ext.domain}.{ext.suffix}".lower()


def is_valid_url(url: str | None) -> bool:
    """Check that a website URL has an http(s) scheme and a real-looking host."""
    if not url or not isinstance(url, str):
        return False
    candidate = url.strip()
    if not _SCHEME_RE.match(candidate):
        candidate = f"https://{candidate}"
    try:
        parsed = urlparse(candidate)
    except ValueError:
        return False
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        return False
    return bool(registrable_domain(parsed.hostname))
