"""
Similarity Scoring and Pairing

A coarse character-set change ratio used to decide whether two unmatched
blocks are versions of one another, and a greedy pairing built on it.
"""

import re
from typing import List, Sequence, Tuple

from redline.models.redline import Paragraph

# Change ratio below which two blocks count as a modification of each other.
SIMILARITY_PAIR_THRESHOLD = 0.7

_WHITESPACE = re.compile(r"\s+")


def compute_similarity(text1: str, text2: str) -> float:
    """
    Compute a rough change ratio between two strings.

    Whitespace is ignored. The ratio is one minus the Jaccard index of the
    two character sets, so it is a cheap filter rather than an edit distance.

    Args:
        text1: First text
        text2: Second text

    Returns:
        0.0 for identical text up to 1.0 for nothing in common
    """
    a = _WHITESPACE.sub("", text1)
    b = _WHITESPACE.sub("", text2)
    if a == b:
        return 0.0
    if not a or not b:
        return 1.0

    a_set = set(a)
    b_set = set(b)
    return 1.0 - len(a_set & b_set) / len(a_set | b_set)


def pair_by_similarity(
    unmatched_old: Sequence[Paragraph],
    unmatched_new: Sequence[Paragraph],
    threshold: float = SIMILARITY_PAIR_THRESHOLD
) -> Tuple[List[Tuple[Paragraph, Paragraph, float]], List[Paragraph], List[Paragraph]]:
    """
    Greedily pair unmatched old and new paragraphs by similarity.

    Old paragraphs are visited in order; each claims the unused new paragraph
    with the lowest change ratio strictly below ``threshold`` (earliest wins
    on ties). This is order dependent and not a minimum-cost assignment.

    Args:
        unmatched_old: Old paragraphs between two anchors
        unmatched_new: New paragraphs between the same anchors
        threshold: Pairing cutoff

    Returns:
        Tuple of (paired as (old, new, ratio), remaining old, remaining new)
    """
    paired: List[Tuple[Paragraph, Paragraph, float]] = []
    used_new = set()
    paired_old = set()

    for i, old_para in enumerate(unmatched_old):
        best_idx = -1
        best_sim = threshold

        for j, new_para in enumerate(unmatched_new):
            if j in used_new:
                continue
            sim = compute_similarity(old_para.text, new_para.text)
            if sim < best_sim:
                best_sim = sim
                best_idx = j

        if best_idx != -1:
            paired.append((old_para, unmatched_new[best_idx], best_sim))
            used_new.add(best_idx)
            paired_old.add(i)

    remaining_old = [p for i, p in enumerate(unmatched_old) if i not in paired_old]
    remaining_new = [p for j, p in enumerate(unmatched_new) if j not in used_new]

    return paired, remaining_old, remaining_new
