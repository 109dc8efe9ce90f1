"""
Tests for paragraph and sentence segmentation.
"""

from redline.services.segmenter import (
    normalize_whitespace,
    split_into_paragraphs,
    split_into_sentences,
)


def test_paragraph_offsets_exclude_separator():
    """Separator belongs to neither neighbouring paragraph."""
    paragraphs = split_into_paragraphs("First.\n\nSecond.")

    assert [p.text for p in paragraphs] == ["First.", "Second."]
    assert [(p.start_pos, p.end_pos) for p in paragraphs] == [(0, 6), (8, 15)]
    assert [p.index for p in paragraphs] == [0, 1]


def test_paragraph_crlf_normalized():
    """Windows line endings are normalized before offsets are taken."""
    paragraphs = split_into_paragraphs("A.\r\n\r\nB.")

    assert [(p.text, p.start_pos, p.end_pos) for p in paragraphs] == [
        ("A.", 0, 2),
        ("B.", 4, 6),
    ]


def test_paragraph_blank_pieces_dropped():
    """Whitespace-only pieces are skipped and do not consume an index."""
    paragraphs = split_into_paragraphs("A.\n\n   \n\nB.")

    assert [p.text for p in paragraphs] == ["A.", "B."]
    assert paragraphs[1].index == 1
    assert paragraphs[1].start_pos == 9


def test_paragraph_long_separator():
    """A run of three newlines is a single separator."""
    paragraphs = split_into_paragraphs("A.\n\n\nB.")

    assert paragraphs[1].start_pos == 5


def test_single_newline_stays_in_paragraph():
    """Only blank lines split paragraphs."""
    paragraphs = split_into_paragraphs("Line one\nline two")

    assert len(paragraphs) == 1
    assert paragraphs[0].text == "Line one\nline two"


def test_empty_text_has_no_paragraphs():
    """Empty and blank input produce nothing."""
    assert split_into_paragraphs("") == []
    assert split_into_paragraphs("\n\n  \n\n") == []


def test_sentences_with_offsets():
    """Sentence offsets are relative to the paragraph text."""
    text = "Alpha one. Beta two. Gamma three."
    sentences = split_into_sentences(text)

    assert [s.text for s in sentences] == ["Alpha one.", "Beta two.", "Gamma three."]
    assert [(s.start_pos_in_paragraph, s.end_pos_in_paragraph) for s in sentences] == [
        (0, 10),
        (11, 20),
        (21, 33),
    ]
    for s in sentences:
        assert text[s.start_pos_in_paragraph:s.end_pos_in_paragraph].strip() == s.text


def test_sentences_all_terminators():
    """Question and exclamation marks end sentences too."""
    sentences = split_into_sentences("Question? Exclamation! Statement.")

    assert [s.text for s in sentences] == ["Question?", "Exclamation!", "Statement."]


def test_sentence_without_terminal_punctuation():
    """Text with no terminal punctuation is one sentence."""
    text = "No terminal punctuation here"
    sentences = split_into_sentences(text)

    assert len(sentences) == 1
    assert sentences[0].text == text
    assert sentences[0].start_pos_in_paragraph == 0
    assert sentences[0].end_pos_in_paragraph == len(text)


def test_abbreviations_over_split():
    """Abbreviations end a sentence; this is an accepted limitation."""
    sentences = split_into_sentences("Dr. Smith signed. It is done.")

    assert [s.text for s in sentences] == ["Dr.", "Smith signed.", "It is done."]


def test_decimal_does_not_end_sentence():
    """Punctuation not followed by whitespace stays inside the sentence."""
    sentences = split_into_sentences("The rate is 3.5 percent. Term ends.")

    assert [s.text for s in sentences] == ["The rate is 3.5 percent.", "Term ends."]


def test_trailing_fragment_is_a_sentence():
    """Text after the last terminator forms its own sentence."""
    sentences = split_into_sentences("Complete sentence. Trailing fragment")

    assert [s.text for s in sentences] == ["Complete sentence.", "Trailing fragment"]


def test_blank_paragraph_has_no_sentences():
    """Blank text yields nothing."""
    assert split_into_sentences("") == []
    assert split_into_sentences("   ") == []


def test_normalize_whitespace():
    """Whitespace runs collapse and ends are trimmed."""
    assert normalize_whitespace("  a \n\t b  ") == "a b"
