"""XSL style sheet transforms of the main document part."""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from lxml import etree

from templatewriter.exceptions import TransformError

logger = logging.getLogger(__name__)


def _load_stylesheet(stylesheet) -> etree.XSLT:
    if isinstance(stylesheet, str):
        stylesheet = stylesheet.encode("utf-8")
    if isinstance(stylesheet, bytes):
        stylesheet = etree.fromstring(stylesheet)
    return etree.XSLT(stylesheet)


def _quote_params(params: Mapping[str, object], namespace: str) -> dict[str, object]:
    """Quote ``params`` as XSLT string parameters, qualified by ``namespace`` if given."""

    quoted = {}
    for name, value in params.items():
        if not isinstance(name, str) or not name:
            raise TypeError(f"Invalid XSL parameter name: {name!r}")
        key = f"{{{namespace}}}{name}" if namespace else name
        quoted[key] = etree.XSLT.strparam(str(value))
    return quoted


def apply_xsl_stylesheet(
    xml: str,
    stylesheet,
    params: Optional[Mapping[str, object]] = None,
    namespace: str = "",
) -> str:
    """Return ``xml`` transformed by ``stylesheet``.

    ``stylesheet`` may be XSL source text or a parsed lxml document.
    ``params`` is a flat mapping of string parameters.
    """

    try:
        transform = _load_stylesheet(stylesheet)
    except (etree.XSLTParseError, etree.XMLSyntaxError) as exc:
        raise TransformError("Could not import the given XSL style sheet.") from exc

    try:
        quoted = _quote_params(params or {}, namespace)
    except (TypeError, ValueError) as exc:
        raise TransformError("Could not set values for the given XSL style sheet parameters.") from exc

    try:
        source = etree.fromstring(xml.encode("utf-8"), etree.XMLParser(resolve_entities=False))
    except etree.XMLSyntaxError as exc:
        raise TransformError("Could not load XML from the given template.") from exc

    try:
        result = transform(source, **quoted)
    except etree.XSLTApplyError as exc:
        logger.exception(
            "XSL transform failed: %s",
            transform.error_log,
            extra={"templatewriter_part": "word/document.xml"},
        )
        raise TransformError("Could not transform the given XML document.") from exc

    logger.debug("Applied XSL style sheet with %d parameter(s)", len(quoted))
    return str(result)
