"""
Confidence classification.

Maps an EvidenceReport to the single most trusted verification signal present.
Tiers are checked from most to least trusted; the first that applies wins:

1. HANDLE: profile handle found in the document
2. DOMAIN: website domain found
3. NAME: company name found
4. NONE: nothing ties the document to the company
"""

from ads_library_analyzer.models import ConfidenceTier, EvidenceReport


def classify(evidence: EvidenceReport) -> ConfidenceTier:
    """Pick the confidence tier for an evidence report. Total and deterministic."""
    if evidence.handle_match.matched:
        return ConfidenceTier.HANDLE
    if evidence.domain_appears:
        return ConfidenceTier.DOMAIN
    if evidence.name_appears:
        return ConfidenceTier.NAME
    return ConfidenceTier.NONE
