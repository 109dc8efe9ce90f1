"""
Data models for redline comparison operations.

These models define the structure of the comparator's input, its result, and
the intermediate paragraph/sentence/section data used throughout the
comparison. All offsets are character offsets into the previous (old)
document's plain text unless stated otherwise.
"""

from enum import Enum
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class ChangeType(str, Enum):
    """Kind of edit between two document versions."""

    INSERT = "insert"
    DELETE = "delete"
    REPLACE = "replace"


class ChangeCategory(str, Enum):
    """Review bucket a change is sorted into."""

    SUBSTANTIVE = "substantive"
    EDITORIAL = "editorial"
    STRUCTURAL = "structural"


class Paragraph(BaseModel):
    """
    A blank-line delimited block of text.

    Offsets index the ``\\r\\n``-normalized text the paragraph was cut from.
    Only old-document paragraphs carry offsets that are meaningful to callers.
    """

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="Trimmed paragraph text")
    start_pos: int = Field(..., ge=0, description="Offset of the paragraph start")
    end_pos: int = Field(..., ge=0, description="Offset of the first separator character")
    index: int = Field(..., ge=0, description="Position in emission order")


class Sentence(BaseModel):
    """A sentence with offsets relative to its owning paragraph's text."""

    model_config = ConfigDict(frozen=True)

    text: str
    start_pos_in_paragraph: int = Field(..., ge=0)
    end_pos_in_paragraph: int = Field(..., ge=0)


class Section(BaseModel):
    """
    A heading and its body as returned by a section extractor.

    Records come from outside the comparator, so ``level`` and ``word_count``
    are taken as given. Accepts ``wordCount`` as well as ``word_count`` so
    records produced by other services validate unchanged.
    """

    heading: str
    body: str = ""
    level: int = 1
    word_count: int = Field(
        default=0,
        validation_alias=AliasChoices("word_count", "wordCount")
    )


class SectionBoundary(BaseModel):
    """Location of a section heading in the old document's plain text."""

    model_config = ConfigDict(frozen=True)

    heading: str
    level: int
    start_pos: int = Field(..., ge=0)
    end_pos: int = Field(..., ge=0)


class RawChange(BaseModel):
    """
    An uncategorized change emitted by the paragraph and sentence differs.

    ``category`` is only set when a pipeline stage forces one; ``None`` leaves
    the decision to the classifier. ``similarity`` caches the change ratio
    computed while pairing so refinement does not recompute it.
    """

    model_config = ConfigDict(frozen=True)

    change_type: ChangeType
    original_text: Optional[str] = None
    proposed_text: Optional[str] = None
    from_pos: int = Field(..., ge=0)
    to_pos: int = Field(..., ge=0)
    category: Optional[ChangeCategory] = None
    similarity: Optional[float] = Field(None, ge=0.0, le=1.0)


class DetectedChange(BaseModel):
    """
    A single categorized change between two document versions.

    Positions are absolute offsets into the previous document. Inserts are
    point insertions (``from_pos == to_pos``) with no original text; deletes
    have no proposed text; replaces carry both.
    """

    change_type: ChangeType = Field(..., description="Kind of edit")
    category: ChangeCategory = Field(..., description="Review bucket")
    section_heading: Optional[str] = Field(
        None,
        description="Heading of the old-document section containing from_pos"
    )
    original_text: Optional[str] = Field(None, description="Text in the previous version")
    proposed_text: Optional[str] = Field(None, description="Text in the current version")
    from_pos: int = Field(..., ge=0, description="Start offset in the previous version")
    to_pos: int = Field(..., ge=0, description="End offset in the previous version")

    @model_validator(mode="after")
    def check_change_shape(self) -> "DetectedChange":
        """Validate texts and positions agree with the change type."""
        if self.from_pos > self.to_pos:
            raise ValueError("from_pos must not exceed to_pos")
        if self.change_type == ChangeType.INSERT:
            if self.original_text is not None:
                raise ValueError("insert changes cannot carry original_text")
            if self.from_pos != self.to_pos:
                raise ValueError("insert changes must be point insertions")
        elif self.change_type == ChangeType.DELETE:
            if self.proposed_text is not None:
                raise ValueError("delete changes cannot carry proposed_text")
        elif self.original_text is None or self.proposed_text is None:
            raise ValueError("replace changes need both original_text and proposed_text")
        return self


class RedlineCompareInput(BaseModel):
    """
    Input to a redline comparison.

    Only the previous snapshot's HTML is used, for heading extraction.
    ``current_html``, ``session_id`` and ``round_id`` are accepted for callers
    that pass whole round records and are used as log context only.
    Like ``Section``, camelCase keys are accepted alongside snake_case.
    """

    previous_text: str = Field(
        ...,
        validation_alias=AliasChoices("previous_text", "previousText"),
        description="Plain text of the prior snapshot"
    )
    current_text: str = Field(
        ...,
        validation_alias=AliasChoices("current_text", "currentText"),
        description="Plain text of the current snapshot"
    )
    previous_html: str = Field(
        default="",
        validation_alias=AliasChoices("previous_html", "previousHtml"),
        description="Rendered HTML of the prior snapshot"
    )
    current_html: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("current_html", "currentHtml"),
        description="Rendered HTML of the current snapshot"
    )
    session_id: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("session_id", "sessionId"),
        description="Negotiation session identifier"
    )
    round_id: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("round_id", "roundId"),
        description="Negotiation round identifier"
    )


class RedlineCompareResult(BaseModel):
    """
    Result of comparing two document snapshots.

    Contains the ordered change list and per-category counts.
    """

    changes: List[DetectedChange] = Field(
        default_factory=list,
        description="Changes sorted ascending by from_pos"
    )
    total_changes: int = Field(default=0, ge=0, description="Total number of changes")
    substantive: int = Field(default=0, ge=0, description="Number of substantive changes")
    editorial: int = Field(default=0, ge=0, description="Number of editorial changes")
    structural: int = Field(default=0, ge=0, description="Number of structural changes")
    processing_time_ms: float = Field(default=0.0, ge=0.0, description="Wall-clock duration")

    @model_validator(mode="after")
    def check_counts(self) -> "RedlineCompareResult":
        """Validate the category counts account for every change."""
        if self.total_changes != len(self.changes):
            raise ValueError("total_changes must equal the number of changes")
        if self.substantive + self.editorial + self.structural != self.total_changes:
            raise ValueError("category counts must sum to total_changes")
        return self
