"""
Redline Comparator

Structural paragraph/sentence diff of two contract snapshots with
substantive / editorial / structural change classification.
"""

from redline.models.redline import (
    ChangeCategory,
    ChangeType,
    DetectedChange,
    RedlineCompareInput,
    RedlineCompareResult,
    Section,
)
from redline.services.comparator import RedlineComparator, compare_rounds

__version__ = "1.0.0"

__all__ = [
    "ChangeCategory",
    "ChangeType",
    "DetectedChange",
    "RedlineComparator",
    "RedlineCompareInput",
    "RedlineCompareResult",
    "Section",
    "compare_rounds",
]
