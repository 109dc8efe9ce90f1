"""
Paragraph and Sentence Differs

Two-level structural diff:
- Paragraph level: LCS anchors over normalized paragraphs, greedy
  similarity pairing of the unmatched paragraphs between anchors.
- Sentence level: the same anchor walk inside one modified paragraph, with
  leftover sentences paired in order.

Both return uncategorized RawChange records positioned in old-document
coordinates. Categories are assigned later by the classifier.
"""

from typing import Iterator, List, Sequence, Tuple

from redline.core.logging import get_logger
from redline.models.redline import ChangeType, Paragraph, RawChange, Sentence
from redline.services.lcs import MatchResult, find_matched_indices
from redline.services.segmenter import normalize_whitespace, split_into_sentences
from redline.services.similarity import (
    SIMILARITY_PAIR_THRESHOLD,
    compute_similarity,
    pair_by_similarity,
)

logger = get_logger(__name__)


def _anchor_gaps(
    old_count: int,
    new_count: int,
    match: MatchResult
) -> Iterator[Tuple[List[int], List[int], Tuple[int, int]]]:
    """
    Walk the anchor list and yield the unmatched indices between anchors.

    Sentinel anchors sit at (-1, -1) and (old_count, new_count).

    Yields:
        (unmatched old indices, unmatched new indices, anchor closing the gap)
    """
    anchors = [(-1, -1)] + match.pairs + [(old_count, new_count)]

    for (prev_old, prev_new), (next_old, next_new) in zip(anchors, anchors[1:]):
        old_gap = [i for i in range(prev_old + 1, next_old) if i not in match.old_matched]
        new_gap = [j for j in range(prev_new + 1, next_new) if j not in match.new_matched]
        yield old_gap, new_gap, (next_old, next_new)


def diff_paragraphs(
    old_paragraphs: Sequence[Paragraph],
    new_paragraphs: Sequence[Paragraph],
    threshold: float = SIMILARITY_PAIR_THRESHOLD,
    report_whitespace_changes: bool = True
) -> List[RawChange]:
    """
    Paragraph-level diff using LCS anchors and similarity pairing.

    1. Run LCS over whitespace-normalized paragraphs to find anchors.
    2. Between anchors, collect unmatched old and new paragraphs.
    3. Pair them by similarity into replaces.
    4. Leftover old paragraphs become deletes; leftover new paragraphs become
       inserts at the start of the next anchor's old paragraph (or the end of
       the last old paragraph).

    Args:
        old_paragraphs: Paragraphs of the previous document
        new_paragraphs: Paragraphs of the current document
        threshold: Similarity pairing cutoff
        report_whitespace_changes: Emit a replace for an anchor whose raw
            text differs from its counterpart only in whitespace

    Returns:
        Changes sorted ascending by from_pos
    """
    old_norm = [normalize_whitespace(p.text) for p in old_paragraphs]
    new_norm = [normalize_whitespace(p.text) for p in new_paragraphs]
    match = find_matched_indices(old_norm, new_norm)

    end_of_old = old_paragraphs[-1].end_pos if old_paragraphs else 0
    changes: List[RawChange] = []

    for old_gap, new_gap, (next_old, next_new) in _anchor_gaps(
        len(old_paragraphs), len(new_paragraphs), match
    ):
        paired, remaining_old, remaining_new = pair_by_similarity(
            [old_paragraphs[i] for i in old_gap],
            [new_paragraphs[j] for j in new_gap],
            threshold
        )

        for old_para, new_para, sim in paired:
            changes.append(RawChange(
                change_type=ChangeType.REPLACE,
                original_text=old_para.text,
                proposed_text=new_para.text,
                from_pos=old_para.start_pos,
                to_pos=old_para.end_pos,
                similarity=sim
            ))

        for old_para in remaining_old:
            changes.append(RawChange(
                change_type=ChangeType.DELETE,
                original_text=old_para.text,
                from_pos=old_para.start_pos,
                to_pos=old_para.end_pos
            ))

        if next_old < len(old_paragraphs):
            insert_pos = old_paragraphs[next_old].start_pos
        else:
            insert_pos = end_of_old

        for new_para in remaining_new:
            changes.append(RawChange(
                change_type=ChangeType.INSERT,
                proposed_text=new_para.text,
                from_pos=insert_pos,
                to_pos=insert_pos
            ))

        if report_whitespace_changes and next_old < len(old_paragraphs):
            anchor_old = old_paragraphs[next_old]
            anchor_new = new_paragraphs[next_new]
            if anchor_old.text != anchor_new.text:
                changes.append(RawChange(
                    change_type=ChangeType.REPLACE,
                    original_text=anchor_old.text,
                    proposed_text=anchor_new.text,
                    from_pos=anchor_old.start_pos,
                    to_pos=anchor_old.end_pos,
                    similarity=compute_similarity(anchor_old.text, anchor_new.text)
                ))

    changes.sort(key=lambda c: c.from_pos)

    logger.debug(
        "paragraph_diff_completed",
        old_paragraphs=len(old_paragraphs),
        new_paragraphs=len(new_paragraphs),
        anchors=len(match.pairs),
        changes=len(changes)
    )

    return changes


def diff_sentences(
    old_paragraph: Paragraph,
    new_paragraph: Paragraph,
    report_whitespace_changes: bool = True
) -> List[RawChange]:
    """
    Sentence-level diff within a modified paragraph.

    Refines one paragraph-level replace into finer-grained changes. Leftover
    sentences between anchors are paired 1:1 in order rather than by
    similarity; surplus old sentences become deletes and surplus new ones
    inserts.

    Args:
        old_paragraph: The paragraph as it was, with absolute offsets
        new_paragraph: The paragraph as proposed
        report_whitespace_changes: Emit a replace for an anchored sentence
            whose raw text differs only in whitespace

    Returns:
        Changes in absolute old-document positions, or an empty list when
        either side has at most one sentence
    """
    old_sentences = split_into_sentences(old_paragraph.text)
    new_sentences = split_into_sentences(new_paragraph.text)

    if len(old_sentences) <= 1 or len(new_sentences) <= 1:
        return []

    old_norm = [normalize_whitespace(s.text) for s in old_sentences]
    new_norm = [normalize_whitespace(s.text) for s in new_sentences]
    match = find_matched_indices(old_norm, new_norm)

    base = old_paragraph.start_pos
    changes: List[RawChange] = []

    def span(sentence: Sentence) -> Tuple[int, int]:
        return (
            base + sentence.start_pos_in_paragraph,
            base + sentence.end_pos_in_paragraph
        )

    for old_gap, new_gap, (next_old, next_new) in _anchor_gaps(
        len(old_sentences), len(new_sentences), match
    ):
        unmatched_old = [old_sentences[i] for i in old_gap]
        unmatched_new = [new_sentences[j] for j in new_gap]
        pair_count = min(len(unmatched_old), len(unmatched_new))

        for old_sent, new_sent in zip(unmatched_old, unmatched_new):
            from_pos, to_pos = span(old_sent)
            changes.append(RawChange(
                change_type=ChangeType.REPLACE,
                original_text=old_sent.text,
                proposed_text=new_sent.text,
                from_pos=from_pos,
                to_pos=to_pos
            ))

        for old_sent in unmatched_old[pair_count:]:
            from_pos, to_pos = span(old_sent)
            changes.append(RawChange(
                change_type=ChangeType.DELETE,
                original_text=old_sent.text,
                from_pos=from_pos,
                to_pos=to_pos
            ))

        if next_old < len(old_sentences):
            insert_pos = span(old_sentences[next_old])[0]
        else:
            insert_pos = old_paragraph.end_pos

        for new_sent in unmatched_new[pair_count:]:
            changes.append(RawChange(
                change_type=ChangeType.INSERT,
                proposed_text=new_sent.text,
                from_pos=insert_pos,
                to_pos=insert_pos
            ))

        if report_whitespace_changes and next_old < len(old_sentences):
            anchor_old = old_sentences[next_old]
            anchor_new = new_sentences[next_new]
            if anchor_old.text != anchor_new.text:
                from_pos, to_pos = span(anchor_old)
                changes.append(RawChange(
                    change_type=ChangeType.REPLACE,
                    original_text=anchor_old.text,
                    proposed_text=anchor_new.text,
                    from_pos=from_pos,
                    to_pos=to_pos
                ))

    return changes
