"""
Common CLI utilities for ads_library_analyzer commands.
"""

from ads_library_analyzer.cli.args import (
    add_date_range_argument,
    add_execute_argument,
    add_provider_argument,
)
from ads_library_analyzer.cli.logging import log_banner, setup_logging

__all__ = [
    "add_date_range_argument",
    "add_execute_argument",
    "add_provider_argument",
    "log_banner",
    "setup_logging",
]
