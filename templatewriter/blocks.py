"""Paragraph-delimited blocks: ``${name}`` ... ``${/name}``.

A block starts with the whole paragraph holding ``${name}`` and ends with the
whole paragraph holding ``${/name}``. Blocks of the same name cannot be
nested. Every function here is a pure text-to-text transform.
"""

from __future__ import annotations

import logging
from typing import Optional

from templatewriter.scanner import (
    PLACEHOLDER_RE,
    block_regex,
    marker_paragraph_regex,
    placeholder,
    tag_regex,
)

logger = logging.getLogger(__name__)


def count_blocks(xml: str, name: str) -> int:
    return len(block_regex(name).findall(xml))


def clone_block(
    xml: str,
    name: str,
    clones: int = 1,
    replace: bool = True,
    block_number: int = 0,
) -> tuple[Optional[str], str]:
    """Repeat the inner content of block ``name``.

    The inner content of the ``block_number``-th block is repeated
    ``clones + 1`` times. Returns ``(content, xml)``; ``content`` is ``None``
    when there is no such block. When ``replace`` is set and the content is
    not empty, the first block in ``xml`` (markers included) is replaced by
    the repeated content.
    """

    pattern = block_regex(name)
    matches = pattern.findall(xml)
    if not 0 <= block_number < len(matches):
        logger.debug("Block %s has no instance %d", name, block_number)
        return None, xml

    content = matches[block_number] * (max(clones, 0) + 1)
    if replace and content:
        xml = pattern.sub(lambda _match: content, xml, count=1)
    return content, xml


def replace_block(xml: str, name: str, content: str) -> str:
    """Replace the first block ``name``, markers included, with ``content``."""

    return block_regex(name).sub(lambda _match: content, xml, count=1)


def replace_block_str(xml: str, search: str, replacement: str) -> str:
    """Replace every literal occurrence of the fragment ``search``."""

    return xml.replace(search, replacement)


def remove_tag(xml: str, name: str) -> str:
    """Drop the paragraphs holding ``${name}`` and ``${/name}``, keeping the content between them."""

    xml = marker_paragraph_regex(placeholder(name)).sub("", xml, count=1)
    return marker_paragraph_regex(placeholder("/" + name)).sub("", xml, count=1)


def delete_tag(xml: str, name: str) -> str:
    """Remove every ``${name...}`` token, leaving the surrounding markup alone.

    Tokens of other variables sharing ``name`` as a prefix are removed too.
    """

    return tag_regex(name).sub("", xml)


def remove_orphan_tags(xml: str) -> str:
    """Remove the marker paragraphs of every placeholder still left in ``xml``."""

    names = list(dict.fromkeys(PLACEHOLDER_RE.findall(xml)))
    for name in names:
        xml = remove_tag(xml, name)
    if names:
        logger.debug("Removed leftover markers: %s", ", ".join(names))
    return xml
