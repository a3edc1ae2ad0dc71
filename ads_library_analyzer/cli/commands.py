"""
CLI command entry points for ads_library_analyzer.

These functions are registered as console scripts in pyproject.toml.
"""

import argparse
import json
import sys
from pathlib import Path

from pydantic import ValidationError

from ads_library_analyzer.analysis.identifiers import build_handle_set, extract_domain
from ads_library_analyzer.api import handle_analyze_request
from ads_library_analyzer.cli.args import (
    add_date_range_argument,
    add_execute_argument,
    add_provider_argument,
)
from ads_library_analyzer.cli.logging import log_banner, setup_logging
from ads_library_analyzer.config import MissingCredentialError, get_settings
from ads_library_analyzer.fetch.ad_library import build_ad_library_url
from ads_library_analyzer.models import CompanyInput


def parse_company_arg(value: str) -> dict:
    """Parse "Name|website|social" (website and social optional)."""
    parts = [p.strip() for p in value.split("|")]
    if not parts[0]:
        raise argparse.ArgumentTypeError(f"Company name is required: {value!r}")
    return {
        "companyName": parts[0],
        "websiteUrl": parts[1] if len(parts) > 1 else "",
        "socialUrl": parts[2] if len(parts) > 2 and parts[2] else None,
    }


def load_companies(path: Path) -> list[dict]:
    """Load companies from a JSON file: a list, or a request body with "companies"."""
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("companies", [])
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of companies")
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise ValueError(f"{path}: company #{index + 1} is not an object: {entry!r}")
    return data


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Estimate Facebook Ad Library activity for a list of companies"
    )
    parser.add_argument(
        "--input",
        type=Path,
        help="JSON file with companies (list or request body)",
    )
    parser.add_argument(
        "--company",
        action="append",
        type=parse_company_arg,
        default=[],
        metavar="NAME|WEBSITE|SOCIAL",
        help="Company to analyze (repeatable)",
    )
    add_date_range_argument(parser)
    add_provider_argument(parser)
    parser.add_argument(
        "--llm-review",
        action="store_true",
        help="Ask OpenAI to sanity-check each heuristic estimate",
    )
    parser.add_argument("--output", type=Path, help="Write the JSON response to this file")
    add_execute_argument(parser)
    return parser


def run_analyze(argv: list[str] | None = None) -> int:
    """Entry point for analyze-ads command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    companies = list(args.company)
    if args.input:
        try:
            companies = load_companies(args.input) + companies
        except (OSError, ValueError) as e:
            parser.error(str(e))
    if not companies:
        parser.error("provide at least one --company or an --input file")

    logger = setup_logging("analyze_ads", execute=args.execute)
    settings = get_settings()

    if not args.execute:
        log_banner("Ad Library Analysis", logger, dry_run=True)
        for raw in companies:
            company = CompanyInput.from_dict(raw)
            name = company.company_name
            if not name:
                logger.info("  (skipped: blank company name)")
                continue
            handles = build_handle_set(company.social_url)
            logger.info(f"  {name}")
            logger.info(f"    domain:  {extract_domain(company.website_url) or '-'}")
            logger.info(f"    handles: {', '.join(handles) or '-'}")
            logger.info(
                f"    search:  {build_ad_library_url(name, country=settings.ad_library_country)}"
            )
        logger.info("")
        logger.info("Run with --execute to fetch and analyze.")
        return 0

    log_banner("Ad Library Analysis", logger)
    body = {
        "companies": companies,
        "dateRange": args.date_range,
        "provider": args.provider,
        "llmReview": True if args.llm_review else None,
    }
    try:
        response = handle_analyze_request(body, settings=settings, show_progress=True)
    except MissingCredentialError as e:
        logger.error(f"Configuration error: {e}")
        return 2
    except ValidationError as e:
        logger.error(f"Invalid company list: {e}")
        return 2

    for company in response["companies"]:
        if company["found"]:
            logger.info(
                f"  {company['companyName']}: {company['activeAds']} active, "
                f"{company['newAds']} new ({company['confidenceTier']})"
            )
        else:
            logger.info(f"  {company['companyName']}: {company['error']}")
    logger.info(
        f"Total: {response['totalActiveAds']} active ads, "
        f"{response['totalNewAds']} new in the last {response['dateRange']} days"
    )

    output = json.dumps(response, indent=2)
    if args.output:
        args.output.write_text(output + "\n", encoding="utf-8")
        logger.info(f"Wrote {args.output}")
    else:
        print(output)
    return 0


def main():
    sys.exit(run_analyze())
