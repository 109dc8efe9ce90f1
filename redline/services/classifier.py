"""
Change Classification

Sorts each change into substantive, editorial or structural buckets with
size checks, heading detection and weighted keyword/pattern scoring.
"""

import re
from typing import Optional

from redline.models.redline import ChangeCategory

# Changes with text longer than this are considered structural.
STRUCTURAL_LENGTH_THRESHOLD = 500

LEGAL_KEYWORDS = [
    "liability", "indemnity", "indemnification", "termination", "warranty",
    "confidential", "confidentiality", "breach", "damages", "obligation",
    "covenant", "remedy", "jurisdiction", "governing law", "dispute",
    "arbitration", "force majeure", "representation", "limitation",
    "penalty", "fee", "payment", "compensation", "insurance",
    "intellectual property", "non-compete", "non-solicitation",
    "severability", "assignment", "waiver", "amendment",
]

HEADING_PATTERN = re.compile(r"^\s*#{1,6}\s")
MONETARY_PATTERN = re.compile(
    r"\$[\d,.]+|\b\d+[\d,.]*\s*(dollars|USD|EUR|GBP|pounds|euros)\b",
    re.IGNORECASE
)
DATE_PATTERN = re.compile(
    r"\b\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4}\b"
    r"|\b(January|February|March|April|May|June|July|August|September|October|November|December)"
    r"\s+\d{1,2},?\s*\d{4}\b"
    r"|\b\d{4}-\d{2}-\d{2}\b",
    re.IGNORECASE
)
MODAL_PATTERN = re.compile(
    r"\b(shall|must|will|may not|cannot|required to|obligated to)\b",
    re.IGNORECASE
)
PERCENT_PATTERN = re.compile(r"\d+(\.\d+)?%")
PARTY_PATTERN = re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+)+\b")
DURATION_PATTERN = re.compile(r"\d+\s*(days|months|years|hours|weeks|business days)", re.IGNORECASE)
PUNCTUATION_OR_SPACE = re.compile(r"[\s.,;:!?'\"()\-\[\]{}/\\]")


def classify_change(
    original_text: Optional[str],
    proposed_text: Optional[str],
    structural_length_threshold: int = STRUCTURAL_LENGTH_THRESHOLD
) -> ChangeCategory:
    """
    Categorize a single change.

    Checks run in order: size, heading markup, punctuation-only edits, then
    weighted scoring. Ties go to substantive so ambiguous edits surface for
    review.

    Args:
        original_text: Text before the change (None for inserts)
        proposed_text: Text after the change (None for deletes)
        structural_length_threshold: Length above which a change is structural

    Returns:
        The change category
    """
    old_text = original_text or ""
    new_text = proposed_text or ""

    if len(old_text) > structural_length_threshold or len(new_text) > structural_length_threshold:
        return ChangeCategory.STRUCTURAL

    if HEADING_PATTERN.search(old_text) or HEADING_PATTERN.search(new_text):
        return ChangeCategory.STRUCTURAL

    if is_punctuation_only(old_text, new_text):
        return ChangeCategory.EDITORIAL

    subst_score = score_substantive(old_text + " " + new_text)
    edit_score = score_editorial(old_text, new_text)

    if edit_score > subst_score:
        return ChangeCategory.EDITORIAL
    return ChangeCategory.SUBSTANTIVE


def score_substantive(text: str) -> int:
    """Score text for meaning-changing indicators."""
    score = 0
    if MONETARY_PATTERN.search(text):
        score += 10
    if DATE_PATTERN.search(text):
        score += 8
    if contains_legal_keywords(text):
        score += 7
    if MODAL_PATTERN.search(text):
        score += 6
    if PARTY_PATTERN.search(text):
        score += 5
    if PERCENT_PATTERN.search(text):
        score += 5
    if DURATION_PATTERN.search(text):
        score += 5
    return score


def score_editorial(old_text: str, new_text: str) -> int:
    """Score a change for cosmetic indicators."""
    score = 0
    combined = (old_text + " " + new_text).strip()

    if not combined:
        score += 10

    if len(combined.split()) <= 2:
        score += 4

    # Capitalization-only change
    if old_text.lower() == new_text.lower():
        score += 8

    # Synonym swap
    old_words = old_text.split()
    new_words = new_text.split()
    if abs(len(old_words) - len(new_words)) <= 1 and len(old_words) <= 5:
        score += 3

    return score


def contains_legal_keywords(text: str) -> bool:
    """Check if text contains legal/contract keywords."""
    lower = text.lower()
    return any(keyword in lower for keyword in LEGAL_KEYWORDS)


def is_punctuation_only(old_text: str, new_text: str) -> bool:
    """Check if two strings differ only in punctuation and whitespace."""
    return PUNCTUATION_OR_SPACE.sub("", old_text) == PUNCTUATION_OR_SPACE.sub("", new_text)
