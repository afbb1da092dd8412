"""Raw text of the templated parts of a document package."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterator

from docx.opc.packuri import PackURI

logger = logging.getLogger(__name__)

DOCUMENT_KEY = "document"
DOCUMENT_PARTNAME = PackURI("/word/document.xml")

_PART_KINDS = ("header", "footer")


def partname_for(kind: str, index: int) -> PackURI:
    """Return the package URI of header or footer ``index`` (counting from 1)."""

    if kind not in _PART_KINDS:
        raise ValueError(f"Unknown part kind: {kind}")
    return PackURI(f"/word/{kind}{index}.xml")


@dataclass
class DocumentParts:
    """Mutable state shared by the template operations.

    Parts are keyed ``document``, ``header:N`` and ``footer:N``. Headers and
    footers keep the index they have in the package.
    """

    document: str
    headers: dict[int, str] = field(default_factory=dict)
    footers: dict[int, str] = field(default_factory=dict)

    @classmethod
    def from_archive(cls, archive) -> "DocumentParts":
        """Read the main document and probe ``header1.xml``, ``header2.xml`` ... until one is missing."""

        probed = {kind: {} for kind in _PART_KINDS}
        for kind, found in probed.items():
            index = 1
            while archive.locate_name(partname_for(kind, index).membername):
                found[index] = archive.get_from_name(partname_for(kind, index).membername)
                index += 1

        document = archive.get_from_name(DOCUMENT_PARTNAME.membername)
        logger.debug(
            "Loaded document part with %d header(s) and %d footer(s)",
            len(probed["header"]),
            len(probed["footer"]),
        )
        return cls(document=document, headers=probed["header"], footers=probed["footer"])

    def write_to(self, archive) -> None:
        """Hand every part back to ``archive``: document, headers, then footers."""

        archive.add_from_string(DOCUMENT_PARTNAME.membername, self.document)
        for index, xml in self.headers.items():
            archive.add_from_string(partname_for("header", index).membername, xml)
        for index, xml in self.footers.items():
            archive.add_from_string(partname_for("footer", index).membername, xml)

    def keys(self) -> list[str]:
        keys = [DOCUMENT_KEY]
        keys.extend(f"header:{index}" for index in self.headers)
        keys.extend(f"footer:{index}" for index in self.footers)
        return keys

    def items(self) -> Iterator[tuple[str, str]]:
        for key in self.keys():
            yield key, self.get(key)

    def get(self, key: str) -> str:
        if key == DOCUMENT_KEY:
            return self.document
        container, index = self._locate(key)
        return container[index]

    def set(self, key: str, xml: str) -> None:
        if key == DOCUMENT_KEY:
            self.document = xml
            return
        container, index = self._locate(key)
        container[index] = xml

    def apply(self, transform: Callable[[str], str]) -> None:
        """Replace every part with ``transform(part)``."""

        for key, xml in list(self.items()):
            self.set(key, transform(xml))

    def _locate(self, key: str) -> tuple[dict[int, str], int]:
        kind, _sep, raw_index = key.partition(":")
        containers = {"header": self.headers, "footer": self.footers}
        if kind not in containers or not raw_index.isdigit():
            raise KeyError(key)
        index = int(raw_index)
        if index not in containers[kind]:
            raise KeyError(key)
        return containers[kind], index
