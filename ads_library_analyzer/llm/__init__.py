"""LLM review of heuristic ad estimates."""

from ads_library_analyzer.llm.review import (
    EstimateParseError,
    LLMEstimateReviewer,
    ParsedEstimate,
    parse_estimate_response,
)

__all__ = [
    "EstimateParseError",
    "LLMEstimateReviewer",
    "ParsedEstimate",
    "parse_estimate_response",
]
