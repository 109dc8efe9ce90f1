"""
Redline Comparison Service

Compares two snapshots of a contract and produces a categorized change list:
- Paragraph-level LCS diff with similarity-based re-pairing
- Sentence-level refinement of modified paragraphs
- Heuristic substantive / editorial / structural classification
- Section heading attribution from the previous snapshot's HTML

All positions are reported in previous-document coordinates, counted after
``\\r\\n`` line endings are normalized to ``\\n``.
"""

import time
from typing import Any, List, Mapping, Optional, Union

from redline.core.config import Settings, get_settings
from redline.core.logging import LoggerMixin
from redline.models.redline import (
    ChangeCategory,
    ChangeType,
    DetectedChange,
    Paragraph,
    RawChange,
    RedlineCompareInput,
    RedlineCompareResult,
)
from redline.services.classifier import classify_change
from redline.services.differ import diff_paragraphs, diff_sentences
from redline.services.segmenter import split_into_paragraphs
from redline.services.sections import (
    SectionExtractor,
    extract_section_boundaries,
    extract_sections,
    find_section_heading,
)
from redline.services.similarity import compute_similarity


class RedlineComparator(LoggerMixin):
    """
    Service for comparing two document snapshots into a redline.

    Each call to ``compare`` is independent: it allocates its own paragraph,
    sentence and change collections and keeps no state between calls.

    Attributes:
        settings: Comparator settings
        section_extractor: Callable turning HTML into heading/body sections
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        section_extractor: Optional[SectionExtractor] = None
    ):
        """
        Initialize the comparator.

        Args:
            settings: Settings to use (defaults to get_settings())
            section_extractor: Section extraction collaborator (defaults to
                the built-in HTML heading extractor)
        """
        self.settings = settings or get_settings()
        self.section_extractor = section_extractor or extract_sections

    def compare(
        self,
        compare_input: Union[RedlineCompareInput, Mapping[str, Any]]
    ) -> RedlineCompareResult:
        """
        Compare two document snapshots and produce a structured change list.

        Flow:
        1. Fast paths for identical and blank documents
        2. Split both texts into paragraphs, index old-document sections
        3. Paragraph-level diff
        4. Sentence-level refinement of close replaces
        5. Categorize changes
        6. Attach section headings
        7. Aggregate counts

        Args:
            compare_input: Snapshot texts and previous HTML

        Returns:
            RedlineCompareResult with changes sorted by from_pos

        Raises:
            pydantic.ValidationError: If compare_input is malformed
        """
        start_time = time.perf_counter()
        if not isinstance(compare_input, RedlineCompareInput):
            compare_input = RedlineCompareInput.model_validate(compare_input)

        # Offsets everywhere below refer to the \r\n-normalized previous text.
        previous_text = compare_input.previous_text.replace("\r\n", "\n")
        current_text = compare_input.current_text.replace("\r\n", "\n")
        log = self.logger.bind(
            session_id=compare_input.session_id,
            round_id=compare_input.round_id
        )

        log.info(
            "redline_comparison_started",
            previous_length=len(previous_text),
            current_length=len(current_text)
        )

        if previous_text == current_text:
            return self._build_result([], start_time)

        fast_path = self._compare_blank_documents(previous_text, current_text)
        if fast_path is not None:
            log.info("redline_comparison_fast_path", total_changes=len(fast_path))
            return self._build_result(fast_path, start_time)

        old_paragraphs = split_into_paragraphs(previous_text)
        new_paragraphs = split_into_paragraphs(current_text)

        try:
            boundaries = extract_section_boundaries(
                compare_input.previous_html,
                previous_text,
                self.section_extractor,
                body_probe_length=self.settings.section_body_probe_length,
                chars_per_word=self.settings.section_chars_per_word
            )
        except Exception as e:
            log.error("section_extraction_failed", error=str(e), exc_info=True)
            raise

        raw_changes = diff_paragraphs(
            old_paragraphs,
            new_paragraphs,
            threshold=self.settings.similarity_pair_threshold,
            report_whitespace_changes=self.settings.report_whitespace_changes
        )
        refined = self._refine_changes(raw_changes)

        changes = [
            DetectedChange(
                change_type=change.change_type,
                category=change.category or classify_change(
                    change.original_text,
                    change.proposed_text,
                    self.settings.structural_length_threshold
                ),
                section_heading=find_section_heading(change.from_pos, boundaries),
                original_text=change.original_text,
                proposed_text=change.proposed_text,
                from_pos=change.from_pos,
                to_pos=change.to_pos
            )
            for change in refined
        ]

        result = self._build_result(changes, start_time)

        log.info(
            "redline_comparison_completed",
            paragraphs_old=len(old_paragraphs),
            paragraphs_new=len(new_paragraphs),
            sections=len(boundaries),
            total_changes=result.total_changes,
            substantive=result.substantive,
            editorial=result.editorial,
            structural=result.structural,
            processing_time_ms=result.processing_time_ms
        )

        return result

    def _refine_changes(self, raw_changes: List[RawChange]) -> List[RawChange]:
        """
        Refine paragraph-level replaces with a sentence-level diff.

        Replaces below the similarity threshold are split into sentence
        changes; when that yields nothing the paragraph change is kept.
        Replaces at or above the threshold are forced to structural.

        Args:
            raw_changes: Paragraph-level changes

        Returns:
            Refined changes sorted by from_pos
        """
        threshold = self.settings.similarity_pair_threshold
        refined: List[RawChange] = []

        for change in raw_changes:
            if change.change_type != ChangeType.REPLACE or not change.original_text or not change.proposed_text:
                refined.append(change)
                continue

            sim = change.similarity
            if sim is None:
                sim = compute_similarity(change.original_text, change.proposed_text)

            if sim >= threshold:
                refined.append(change.model_copy(update={"category": ChangeCategory.STRUCTURAL}))
                continue

            old_para = Paragraph(
                text=change.original_text,
                start_pos=change.from_pos,
                end_pos=change.to_pos,
                index=0
            )
            new_para = Paragraph(
                text=change.proposed_text,
                start_pos=0,
                end_pos=len(change.proposed_text),
                index=0
            )
            sentence_changes = diff_sentences(
                old_para,
                new_para,
                report_whitespace_changes=self.settings.report_whitespace_changes
            )

            if sentence_changes:
                refined.extend(sentence_changes)
            else:
                self.logger.debug("sentence_refinement_fallback", from_pos=change.from_pos)
                refined.append(change)

        refined.sort(key=lambda c: c.from_pos)
        return refined

    def _compare_blank_documents(
        self,
        previous_text: str,
        current_text: str
    ) -> Optional[List[DetectedChange]]:
        """
        Handle documents where one or both sides are blank.

        Args:
            previous_text: Previous snapshot text
            current_text: Current snapshot text

        Returns:
            The complete change list, or None when neither side is blank
        """
        old_trimmed = previous_text.strip()
        new_trimmed = current_text.strip()

        if not old_trimmed and not new_trimmed:
            return []

        if not old_trimmed:
            return [DetectedChange(
                change_type=ChangeType.INSERT,
                category=ChangeCategory.STRUCTURAL,
                proposed_text=new_trimmed,
                from_pos=0,
                to_pos=0
            )]

        if not new_trimmed:
            return [DetectedChange(
                change_type=ChangeType.DELETE,
                category=ChangeCategory.STRUCTURAL,
                original_text=old_trimmed,
                from_pos=0,
                to_pos=len(old_trimmed)
            )]

        return None

    def _build_result(self, changes: List[DetectedChange], start_time: float) -> RedlineCompareResult:
        """Aggregate category counts and timing into a result."""
        counts = {category: 0 for category in ChangeCategory}
        for change in changes:
            counts[change.category] += 1

        return RedlineCompareResult(
            changes=changes,
            total_changes=len(changes),
            substantive=counts[ChangeCategory.SUBSTANTIVE],
            editorial=counts[ChangeCategory.EDITORIAL],
            structural=counts[ChangeCategory.STRUCTURAL],
            processing_time_ms=(time.perf_counter() - start_time) * 1000
        )


def compare_rounds(
    compare_input: Union[RedlineCompareInput, Mapping[str, Any]],
    section_extractor: Optional[SectionExtractor] = None,
    settings: Optional[Settings] = None
) -> RedlineCompareResult:
    """
    Compare two negotiation round snapshots.

    Convenience wrapper around ``RedlineComparator(...).compare``.

    Args:
        compare_input: previous_text, current_text and previous_html
        section_extractor: Section extraction collaborator
        settings: Settings override

    Returns:
        RedlineCompareResult
    """
    return RedlineComparator(settings, section_extractor).compare(compare_input)
