"""
Text Segmentation

Splits plain text into paragraphs (blank-line delimited) and paragraphs into
sentences (terminal punctuation followed by whitespace or end of text).
Punctuation inside a token, as in "3.5" or "e.g.,", does not end a sentence.

Sentence detection is a plain punctuation heuristic: abbreviations such as
"Dr." or "Inc." end a sentence too. Classification outcomes depend on this
split, so it is kept as is rather than swapped for an NLP tokenizer.
"""

import re
from typing import List

from redline.models.redline import Paragraph, Sentence

PARAGRAPH_SEPARATOR = re.compile(r"\n\n+")
SENTENCE_PATTERN = re.compile(r".*?(?:[.!?](?:\s|\Z)|\Z)", re.DOTALL)
WHITESPACE_RUN = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs to single spaces and trim."""
    return WHITESPACE_RUN.sub(" ", text).strip()


def split_into_paragraphs(text: str) -> List[Paragraph]:
    """
    Split plain text into paragraphs delimited by two or more newlines.

    ``\\r\\n`` is normalized to ``\\n`` first and all offsets refer to the
    normalized string. The separator belongs to neither neighbour:
    ``end_pos`` is the separator's first offset and the next paragraph's
    ``start_pos`` is the first offset after it. Blank pieces are dropped.

    Args:
        text: Document plain text

    Returns:
        Paragraphs in document order
    """
    normalized = text.replace("\r\n", "\n")
    paragraphs: List[Paragraph] = []
    last_end = 0

    for match in PARAGRAPH_SEPARATOR.finditer(normalized):
        para_text = normalized[last_end:match.start()].strip()
        if para_text:
            paragraphs.append(Paragraph(
                text=para_text,
                start_pos=last_end,
                end_pos=match.start(),
                index=len(paragraphs)
            ))
        last_end = match.end()

    trailing = normalized[last_end:].strip()
    if trailing:
        paragraphs.append(Paragraph(
            text=trailing,
            start_pos=last_end,
            end_pos=len(normalized),
            index=len(paragraphs)
        ))

    return paragraphs


def split_into_sentences(paragraph_text: str) -> List[Sentence]:
    """
    Split paragraph text into sentences.

    Args:
        paragraph_text: Text of a single paragraph

    Returns:
        Sentences with offsets relative to ``paragraph_text``. Text without
        terminal punctuation comes back as a single sentence.
    """
    sentences: List[Sentence] = []

    for match in SENTENCE_PATTERN.finditer(paragraph_text):
        sentence_text = match.group(0).strip()
        if not sentence_text:
            break

        sentences.append(Sentence(
            text=sentence_text,
            start_pos_in_paragraph=match.start(),
            end_pos_in_paragraph=match.start() + len(match.group(0).rstrip())
        ))

    if not sentences and paragraph_text.strip():
        sentences.append(Sentence(
            text=paragraph_text.strip(),
            start_pos_in_paragraph=0,
            end_pos_in_paragraph=len(paragraph_text)
        ))

    return sentences
