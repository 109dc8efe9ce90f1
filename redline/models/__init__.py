"""
Data models for the Redline Comparator.
"""

from redline.models.redline import (
    ChangeCategory,
    ChangeType,
    DetectedChange,
    Paragraph,
    RawChange,
    RedlineCompareInput,
    RedlineCompareResult,
    Section,
    SectionBoundary,
    Sentence,
)

__all__ = [
    "ChangeCategory",
    "ChangeType",
    "DetectedChange",
    "Paragraph",
    "RawChange",
    "RedlineCompareInput",
    "RedlineCompareResult",
    "Section",
    "SectionBoundary",
    "Sentence",
]
