"""Table row cloning."""

from __future__ import annotations

import logging

from templatewriter.exceptions import NotFoundError
from templatewriter.placeholders import normalize_search
from templatewriter.scanner import (
    PLACEHOLDER_RE,
    continues_vertical_merge,
    find_next_row,
    find_row_end,
    find_row_start,
    placeholder,
    starts_vertical_merge,
)

logger = logging.getLogger(__name__)


def find_row_span(xml: str, offset: int) -> tuple[int, int]:
    """Return ``(start, end)`` of the row enclosing ``offset``.

    When the row opens a vertical merge (``<w:vMerge w:val="restart"/>``),
    the span is extended over every following row of the same table that
    continues the merge, so the merged rows are handled as one unit.
    """

    row_start = find_row_start(xml, offset)
    if row_start == -1:
        raise NotFoundError("Can not find the start position of the row to clone.")
    row_end = find_row_end(xml, offset)
    if row_end == -1:
        raise NotFoundError("Can not find the end position of the row to clone.")

    if starts_vertical_merge(xml[row_start:row_end]):
        while True:
            next_row = find_next_row(xml, row_end)
            if next_row is None:
                break
            next_start, next_end = next_row
            if not continues_vertical_merge(xml[next_start:next_end]):
                break
            row_end = next_end

    return row_start, row_end


def suffix_placeholders(xml: str, index: int) -> str:
    """Rewrite every ``${name}`` in ``xml`` as ``${name#index}``."""

    def add_suffix(match):
        return placeholder(f"{match.group(1)}#{index}")

    return PLACEHOLDER_RE.sub(add_suffix, xml)


def clone_row(xml: str, search: str, clones: int) -> str:
    """Replace the row holding ``search`` with ``clones`` numbered copies of it.

    The placeholders of copy ``i`` (counting from 1) are renamed to
    ``${name#i}``; the original row is not kept. A placeholder split across
    several runs is not found.
    """

    search = normalize_search(search)
    position = xml.find(search)
    if position == -1:
        raise NotFoundError(
            f"Can not clone row, template variable {search} not found or variable contains markup."
        )

    row_start, row_end = find_row_span(xml, position)
    row = xml[row_start:row_end]
    copies = [suffix_placeholders(row, index) for index in range(1, clones + 1)]
    logger.debug(
        "Cloned %d row(s) around %s into %d copies",
        row.count("</w:tr>"),
        search,
        clones,
    )
    return xml[:row_start] + "".join(copies) + xml[row_end:]
