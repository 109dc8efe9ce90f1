"""
Section Indexing

Maps heading strings from the previous snapshot's HTML onto character
offsets in its plain text, then attributes change positions to the nearest
preceding heading with a binary search.

Also provides the default section extractor and the HTML-to-plain-text
rendering it relies on. Both use BeautifulSoup with the stdlib html.parser
backend and are sufficient for clean editor HTML output.
"""

import re
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Union

from bs4 import BeautifulSoup, NavigableString, Tag

from redline.core.logging import get_logger
from redline.models.redline import Section, SectionBoundary

logger = get_logger(__name__)

PARSER = "html.parser"
HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]
BLOCK_BREAKS = {name: "\n\n" for name in ["p"] + HEADING_TAGS}
BLOCK_BREAKS["li"] = "\n"
EXCESS_NEWLINES = re.compile(r"\n{3,}")

SectionExtractor = Callable[[str], Sequence[Union[Section, Mapping[str, Any]]]]


def html_to_plain_text(html: str) -> str:
    """
    Render HTML as plain text with paragraph breaks.

    ``<br>`` becomes a newline, paragraphs and headings end with a blank
    line, list items end with a newline. Entities are decoded and
    non-breaking spaces become plain spaces.

    Args:
        html: HTML markup

    Returns:
        Trimmed plain text with at most one blank line between blocks
    """
    soup = BeautifulSoup(html, PARSER)

    for br in soup.find_all("br"):
        br.replace_with("\n")
    for tag in soup.find_all(list(BLOCK_BREAKS)):
        tag.append(BLOCK_BREAKS[tag.name])

    text = soup.get_text().replace("\xa0", " ")
    return EXCESS_NEWLINES.sub("\n\n", text).strip()


def _heading_level(tag: Tag) -> int:
    return int(tag.name[1])


def _nodes_until(start: Tag, stop: Optional[Tag]) -> Iterable[Union[Tag, NavigableString]]:
    """
    Yield the outermost nodes in document order between ``start`` and ``stop``.

    Nesting is ignored: the walk leaves ``start``'s container and descends
    into any container holding ``stop``, so only content strictly between
    the two headings is yielded, each piece once.
    """
    taken = set()
    for node in start.next_elements:
        if node is stop:
            return
        if any(parent is start for parent in node.parents):
            continue
        if node.parent is not None and id(node.parent) in taken:
            taken.add(id(node))
            continue
        if stop is not None and isinstance(node, Tag) and any(d is stop for d in node.descendants):
            continue
        taken.add(id(node))
        yield node


def extract_sections(html: str) -> List[Section]:
    """
    Extract sections from HTML based on heading tags (h1-h6).

    A section's body runs up to the next heading of the same or higher
    level. When no such heading follows, it runs up to the next heading of
    any level.

    Args:
        html: Rendered document HTML

    Returns:
        Sections in document order
    """
    soup = BeautifulSoup(html, PARSER)
    headings = soup.find_all(HEADING_TAGS)
    sections: List[Section] = []

    for i, heading in enumerate(headings):
        level = _heading_level(heading)
        following = headings[i + 1:]

        stop = next((h for h in following if _heading_level(h) <= level), None)
        if stop is None and following:
            stop = following[0]

        body_html = "".join(str(node) for node in _nodes_until(heading, stop))
        body = html_to_plain_text(body_html)

        sections.append(Section(
            heading=heading.get_text().strip(),
            body=body,
            level=level,
            word_count=len(body.split())
        ))

    return sections


def extract_section_boundaries(
    html: str,
    plain_text: str,
    section_extractor: SectionExtractor = extract_sections,
    body_probe_length: int = 40,
    chars_per_word: int = 6
) -> List[SectionBoundary]:
    """
    Locate each extracted section heading in the plain text.

    Headings are searched forward from just after the previous boundary so
    repeated heading text does not collide. A heading missing from the plain
    text is skipped. The end offset is estimated from where the body prefix
    occurs, or from the word count when the prefix cannot be found.

    Exceptions raised by ``section_extractor`` propagate unchanged.

    Args:
        html: HTML of the previous snapshot
        plain_text: Plain text of the previous snapshot
        section_extractor: Callable returning sections in document order
        body_probe_length: Length of the body prefix to search for
        chars_per_word: Estimated characters per word for the fallback end

    Returns:
        Boundaries sorted ascending by start_pos
    """
    sections = [
        s if isinstance(s, Section) else Section.model_validate(s)
        for s in section_extractor(html)
    ]
    boundaries: List[SectionBoundary] = []

    for section in sections:
        search_from = boundaries[-1].start_pos + 1 if boundaries else 0
        heading_idx = plain_text.find(section.heading, search_from)

        if heading_idx == -1:
            logger.debug("section_heading_not_found", heading=section.heading, search_from=search_from)
            continue

        body_idx = plain_text.find(section.body[:body_probe_length], heading_idx)
        if body_idx != -1:
            end_pos = body_idx + len(section.body)
        else:
            end_pos = heading_idx + len(section.heading) + section.word_count * chars_per_word

        boundaries.append(SectionBoundary(
            heading=section.heading,
            level=section.level,
            start_pos=heading_idx,
            end_pos=min(max(end_pos, heading_idx), len(plain_text))
        ))

    return boundaries


def find_section_heading(char_pos: int, boundaries: Sequence[SectionBoundary]) -> Optional[str]:
    """
    Find the heading of the section containing a position.

    Binary search for the last boundary whose start_pos <= char_pos.

    Args:
        char_pos: Offset in the previous document
        boundaries: Boundaries sorted by start_pos

    Returns:
        The heading, or None when char_pos precedes every boundary
    """
    lo = 0
    hi = len(boundaries) - 1
    best = -1

    while lo <= hi:
        mid = (lo + hi) // 2
        if boundaries[mid].start_pos <= char_pos:
            best = mid
            lo = mid + 1
        else:
            hi = mid - 1

    return boundaries[best].heading if best >= 0 else None
