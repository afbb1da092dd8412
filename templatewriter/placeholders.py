"""Scalar placeholder substitution and discovery."""

from __future__ import annotations

import html
from typing import Any, Optional

from templatewriter.scanner import (
    MARKUP_TAG_RE,
    PLACEHOLDER_RE,
    SPLIT_PLACEHOLDER_RE,
    placeholder,
)


def normalize_search(search: str) -> str:
    """Wrap a bare variable name as ``${name}``.

    A search string that already starts with ``${`` or ends with ``}`` is
    used as given.
    """

    if not search.startswith("${") and not search.endswith("}"):
        return placeholder(search)
    return search


def clean_placeholder_markup(xml: str) -> str:
    """Remove markup an editor spliced inside ``${...}`` tokens.

    Word frequently splits ``${name}`` across several runs; stripping the
    run markup inside the token lets the literal placeholder be matched
    again.
    """

    def strip_tags(match):
        return MARKUP_TAG_RE.sub("", match.group(0))

    return SPLIT_PLACEHOLDER_RE.sub(strip_tags, xml)


def coerce_value(value: Any) -> str:
    """Return ``value`` as text, decoding bytes that are not valid UTF-8 as Latin-1."""

    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            return value.decode("latin-1")
    if isinstance(value, str):
        return value
    return str(value)


def escape_value(value: str) -> str:
    """Escape ``&``, ``<``, ``>`` and ``"`` for use inside WordprocessingML text."""

    return html.escape(value, quote=False).replace('"', "&quot;")


def set_value(xml: str, search: str, replacement: Any, limit: Optional[int] = None) -> str:
    """Return ``xml`` with up to ``limit`` occurrences of ``search`` replaced.

    ``limit`` of ``None`` or any negative number replaces every occurrence.
    """

    xml = clean_placeholder_markup(xml)
    search = normalize_search(search)
    value = escape_value(coerce_value(replacement))
    count = -1 if limit is None or limit < 0 else limit
    return xml.replace(search, value, count)


def find_variables(xml: str) -> list[str]:
    """Return every placeholder name in ``xml`` in document order, repeats included."""

    return PLACEHOLDER_RE.findall(xml)
