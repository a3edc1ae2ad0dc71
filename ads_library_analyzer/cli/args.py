"""
Argument parsing utilities for ads_library_analyzer CLI.

Provides standard argument patterns used across commands.
"""

from ads_library_analyzer.constants import DATE_RANGE_OPTIONS, DEFAULT_DATE_RANGE_DAYS


def add_execute_argument(parser):
    """
    Add standard --execute argument to an ArgumentParser.

    Args:
        parser: argparse.ArgumentParser instance
    """
    parser.add_argument(
        "--execute",
        action="store_true",
        help="Actually fetch and analyze (default is dry-run)",
    )


def add_date_range_argument(parser):
    """Add --date-range (days) restricted to the offered choices."""
    parser.add_argument(
        "--date-range",
        type=int,
        choices=DATE_RANGE_OPTIONS,
        default=DEFAULT_DATE_RANGE_DAYS,
        help=f"Days to count new ads over (default: {DEFAULT_DATE_RANGE_DAYS})",
    )


def add_provider_argument(parser):
    """Add --provider to override FETCH_PROVIDER."""
    parser.add_argument(
        "--provider",
        choices=("scrapingbee", "browserless", "direct"),
        default=None,
        help="Document fetcher (default: FETCH_PROVIDER from .env)",
    )
