"""Structural region scanning over raw WordprocessingML text.

Nothing in here builds an XML tree. Regions (table rows, marker paragraphs,
placeholder tokens) are located by scanning the part text so that markup
outside the located region is left byte-for-byte untouched.

Position helpers follow :meth:`str.find` and return ``-1`` when nothing is
found; callers decide whether that is an error.
"""

from __future__ import annotations

import re
from typing import Optional

# ``${name}`` with a non-greedy body that stops at the first ``}``
PLACEHOLDER_RE = re.compile(r"\$\{(.*?)\}")
# Same token, but allowed to run across markup an editor spliced into it
SPLIT_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")
MARKUP_TAG_RE = re.compile(r"<[^>]+>")

ROW_OPEN_TAGS = ("<w:tr ", "<w:tr>")
ROW_CLOSE_TAG = "</w:tr>"
TABLE_CLOSE_TAG = "</w:tbl>"

_MERGE_RESTART_RE = re.compile(r'<w:vMerge\s+w:val="restart"\s*/>')
_MERGE_CONTINUE_RE = re.compile(r'<w:vMerge(?:\s+w:val="continue")?\s*/>')

_PARAGRAPH_OPEN = r"<w:p[\s>]"


def placeholder(name: str) -> str:
    return "${" + name + "}"


def find_row_start(xml: str, offset: int) -> int:
    """Return the index of the nearest row-open tag before ``offset``."""

    return max(xml.rfind(tag, 0, offset) for tag in ROW_OPEN_TAGS)


def find_row_end(xml: str, offset: int) -> int:
    """Return the index just past the nearest ``</w:tr>`` at or after ``offset``."""

    end = xml.find(ROW_CLOSE_TAG, offset)
    if end == -1:
        return -1
    return end + len(ROW_CLOSE_TAG)


def find_next_row(xml: str, offset: int) -> Optional[tuple[int, int]]:
    """Return ``(start, end)`` of the first row opening at or after ``offset``.

    Rows belonging to a later table are not considered, so the probe stops
    at the ``</w:tbl>`` that closes the current table.
    """

    candidates = [pos for pos in (xml.find(tag, offset) for tag in ROW_OPEN_TAGS) if pos != -1]
    if not candidates:
        return None
    start = min(candidates)

    table_end = xml.find(TABLE_CLOSE_TAG, offset)
    if table_end != -1 and table_end < start:
        return None

    end = find_row_end(xml, start)
    if end == -1:
        return None
    return start, end


def starts_vertical_merge(row_xml: str) -> bool:
    return _MERGE_RESTART_RE.search(row_xml) is not None


def continues_vertical_merge(row_xml: str) -> bool:
    """Return ``True`` for an explicit or implicit ``continue`` merge marker."""

    return _MERGE_CONTINUE_RE.search(row_xml) is not None


def marker_paragraph_pattern(marker: str) -> str:
    """Regex source for the whole paragraph holding the literal ``marker``.

    The match starts at the last ``<w:p`` before the marker (it never spans
    across another paragraph start) and ends at the first ``/w:p>`` after it.
    """

    return _PARAGRAPH_OPEN + r"(?:(?!" + _PARAGRAPH_OPEN + r").)*?" + re.escape(marker) + r".*?/w:p>"


def block_regex(name: str) -> re.Pattern[str]:
    """Compile the open-paragraph, inner content, close-paragraph pattern for ``name``.

    Group 1 holds the inner content strictly between the two marker
    paragraphs.
    """

    return re.compile(
        marker_paragraph_pattern(placeholder(name))
        + r"(.*?)"
        + marker_paragraph_pattern(placeholder("/" + name)),
        re.DOTALL,
    )


def marker_paragraph_regex(marker: str) -> re.Pattern[str]:
    return re.compile(marker_paragraph_pattern(marker), re.DOTALL)


def tag_regex(name: str) -> re.Pattern[str]:
    """Match ``${name`` followed by anything up to the next ``}``."""

    return re.compile(r"\$\{" + re.escape(name) + r".*?\}")
