"""
Longest Common Subsequence Matching

Aligns two sequences of normalized strings and recovers which indices on each
side belong to the common subsequence. Used identically for paragraphs and
for the sentences of a modified paragraph.

Runs in O(m * n) time and memory, which is fine for documents with paragraph
counts in the hundreds.
"""

from dataclasses import dataclass, field
from typing import List, Sequence, Set, Tuple


@dataclass
class MatchResult:
    """
    Index pairs shared by two sequences.

    Attributes:
        old_matched: Indices of old items that belong to the LCS
        new_matched: Indices of new items that belong to the LCS
        pairs: (old_index, new_index) pairs in ascending order
    """
    old_matched: Set[int] = field(default_factory=set)
    new_matched: Set[int] = field(default_factory=set)
    pairs: List[Tuple[int, int]] = field(default_factory=list)


def compute_lcs(a: Sequence[str], b: Sequence[str]) -> List[str]:
    """
    Compute the longest common subsequence of two string sequences.

    Classic dynamic programming table with backtracking. When both
    neighbouring cells tie during backtracking, ``j`` steps back first.

    Args:
        a: Old sequence
        b: New sequence

    Returns:
        The common subsequence values, in order
    """
    m = len(a)
    n = len(b)

    dp = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(1, m + 1):
        for j in range(1, n + 1):
            if a[i - 1] == b[j - 1]:
                dp[i][j] = dp[i - 1][j - 1] + 1
            else:
                dp[i][j] = max(dp[i - 1][j], dp[i][j - 1])

    lcs: List[str] = []
    i, j = m, n
    while i > 0 and j > 0:
        if a[i - 1] == b[j - 1]:
            lcs.append(a[i - 1])
            i -= 1
            j -= 1
        elif dp[i - 1][j] > dp[i][j - 1]:
            i -= 1
        else:
            j -= 1

    lcs.reverse()
    return lcs


def find_matched_indices(old_texts: Sequence[str], new_texts: Sequence[str]) -> MatchResult:
    """
    Find the index pairs behind the LCS of two sequences.

    Values may repeat, so both pointers only move forward and each LCS value
    is matched to the first unconsumed occurrence on each side.

    Args:
        old_texts: Normalized old items
        new_texts: Normalized new items

    Returns:
        MatchResult with matched index sets and ordered pairs
    """
    result = MatchResult()
    old_idx = 0
    new_idx = 0

    for value in compute_lcs(old_texts, new_texts):
        while old_idx < len(old_texts) and old_texts[old_idx] != value:
            old_idx += 1
        while new_idx < len(new_texts) and new_texts[new_idx] != value:
            new_idx += 1

        if old_idx < len(old_texts) and new_idx < len(new_texts):
            result.old_matched.add(old_idx)
            result.new_matched.add(new_idx)
            result.pairs.append((old_idx, new_idx))
            old_idx += 1
            new_idx += 1

    return result
