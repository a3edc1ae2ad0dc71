"""
Ads Library Analyzer - verification-tiered ad activity estimates for companies.

This package provides utilities for:
- Deriving handles and domains from company URLs
- Scanning ad-library documents for presence signals
- Classifying verification confidence and estimating active/new ad counts
- Fetching documents through interchangeable scraping providers
- Optional LLM review of heuristic estimates
"""

import logging

# Set up NullHandler to prevent "No handler found" warnings
# when used as a library. Applications should configure their own handlers.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

# Re-export commonly used items
from ads_library_analyzer.config import MissingCredentialError, Settings, get_settings
from ads_library_analyzer.constants import (
    DATE_RANGE_OPTIONS,
    DEFAULT_DATE_RANGE_DAYS,
    DEFAULT_REQUEST_INTERVAL,
)
from ads_library_analyzer.models import (
    AdEstimate,
    CompanyInput,
    CompanyResult,
    ConfidenceTier,
    EvidenceReport,
    HandleSet,
)

__all__ = [
    "__version__",
    # Config
    "MissingCredentialError",
    "Settings",
    "get_settings",
    # Constants
    "DATE_RANGE_OPTIONS",
    "DEFAULT_DATE_RANGE_DAYS",
    "DEFAULT_REQUEST_INTERVAL",
    # Models
    "AdEstimate",
    "CompanyInput",
    "CompanyResult",
    "ConfidenceTier",
    "EvidenceReport",
    "HandleSet",
]
