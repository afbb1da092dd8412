"""Fill ``${placeholders}`` in DOCX packages and repeat rows and blocks.

:class:`Template` works on the raw XML text of ``word/document.xml`` and of
every ``word/headerN.xml`` / ``word/footerN.xml`` part instead of a parsed
tree, so formatting outside the edited regions survives untouched. The
source file is never modified; all edits go to a private working copy.
"""

from __future__ import annotations

import errno
import logging
import os
import shutil
import tempfile
from typing import Any, Mapping, Optional

from templatewriter import blocks, placeholders, rows, transform
from templatewriter.conf import get_setting
from templatewriter.exceptions import PackageError, TemplateIOError
from templatewriter.package import PackageArchive
from templatewriter.parts import DocumentParts

logger = logging.getLogger(__name__)


class Template:
    """A DOCX template loaded from ``source_path``.

    Usable as a context manager; leaving the ``with`` block removes the
    working copy unless it was handed out by :meth:`save` or moved by
    :meth:`save_as`.
    """

    def __init__(self, source_path: str | os.PathLike):
        self.source_path = os.fspath(source_path)
        self.temp_path = self._create_working_copy(self.source_path)
        self._released = False
        try:
            self._archive = PackageArchive(self.temp_path)
            self.parts = DocumentParts.from_archive(self._archive)
        except Exception:
            archive = getattr(self, "_archive", None)
            if archive is not None:
                archive.discard()
            os.remove(self.temp_path)
            raise

    def __enter__(self) -> "Template":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    @staticmethod
    def _create_working_copy(source_path: str) -> str:
        try:
            handle, temp_path = tempfile.mkstemp(
                prefix=get_setting("TEMP_PREFIX"),
                suffix=get_setting("TEMP_SUFFIX"),
                dir=get_setting("TEMP_DIR"),
            )
            os.close(handle)
        except OSError as exc:
            raise TemplateIOError(
                "Could not create temporary file with unique name in the temporary directory."
            ) from exc

        try:
            shutil.copyfile(source_path, temp_path)
        except OSError as exc:
            os.remove(temp_path)
            raise TemplateIOError(
                f"Could not copy the template from {source_path} to {temp_path}."
            ) from exc

        logger.info("Copied template %s to working file %s", source_path, temp_path)
        return temp_path

    @property
    def document_xml(self) -> str:
        return self.parts.document

    @document_xml.setter
    def document_xml(self, xml: str) -> None:
        self.parts.document = xml

    # ------------------------------------------------------------------
    # Placeholders

    def set_value(self, search: str, replace: Any, limit: Optional[int] = None) -> None:
        """Replace ``${search}`` with ``replace`` in the document, headers and footers.

        ``limit`` caps the number of replacements per part; ``None`` replaces
        every occurrence.
        """

        self.parts.apply(lambda xml: placeholders.set_value(xml, search, replace, limit))
        logger.debug("Set value for %s (limit=%s)", search, limit)

    def set_value_block(self, block: str, search: str, replace: Any, limit: Optional[int] = None) -> str:
        """Return ``block`` with ``${search}`` replaced; nothing stored is changed."""

        return placeholders.set_value(block, search, replace, limit)

    def get_variables(self) -> list[str]:
        """Return each placeholder name used in any part, once, in first-seen order."""

        found: list[str] = []
        for _key, xml in self.parts.items():
            found.extend(placeholders.find_variables(xml))
        return list(dict.fromkeys(found))

    # ------------------------------------------------------------------
    # Rows

    def clone_row(self, search: str, clones: int) -> None:
        """Replace the table row holding ``${search}`` with ``clones`` numbered copies."""

        self.parts.document = rows.clone_row(self.parts.document, search, clones)

    # ------------------------------------------------------------------
    # Blocks

    def count_blocks(self, blockname: str) -> int:
        return blocks.count_blocks(self.parts.document, blockname)

    def clone_block(
        self,
        blockname: str,
        clones: int = 1,
        replace: bool = True,
        block_number: int = 0,
    ) -> Optional[str]:
        """Repeat the content of a block ``clones + 1`` times.

        Returns the repeated content, or ``None`` when block ``block_number``
        does not exist.
        """

        content, self.parts.document = blocks.clone_block(
            self.parts.document, blockname, clones, replace, block_number
        )
        return content

    def replace_block(self, blockname: str, replacement: str, xml: Optional[str] = None) -> str:
        """Replace the first block ``blockname``, markers included, with ``replacement``.

        With ``xml`` given, that text is transformed and returned instead of
        the stored document.
        """

        if xml is not None:
            return blocks.replace_block(xml, blockname, replacement)
        self.parts.document = blocks.replace_block(self.parts.document, blockname, replacement)
        return self.parts.document

    def delete_block(self, blockname: str, replacement: str = "") -> None:
        self.replace_block(blockname, replacement)

    def replace_block_str(self, search: str, replacement: str, xml: Optional[str] = None) -> str:
        if xml is not None:
            return blocks.replace_block_str(xml, search, replacement)
        self.parts.document = blocks.replace_block_str(self.parts.document, search, replacement)
        return self.parts.document

    def remove_tag(self, blockname: str, xml: Optional[str] = None) -> str:
        """Drop the marker paragraphs of ``blockname`` and keep its content."""

        if xml is not None:
            return blocks.remove_tag(xml, blockname)
        self.parts.document = blocks.remove_tag(self.parts.document, blockname)
        return self.parts.document

    def delete_tag(self, tagname: str, xml: Optional[str] = None) -> str:
        """Remove ``${tagname...}`` tokens but leave their paragraphs in place."""

        if xml is not None:
            return blocks.delete_tag(xml, tagname)
        self.parts.document = blocks.delete_tag(self.parts.document, tagname)
        return self.parts.document

    def remove_orphan_tags(self) -> None:
        self.parts.document = blocks.remove_orphan_tags(self.parts.document)

    # ------------------------------------------------------------------
    # Style sheets

    def apply_xsl_stylesheet(
        self,
        stylesheet,
        params: Optional[Mapping[str, object]] = None,
        namespace: str = "",
    ) -> None:
        self.parts.document = transform.apply_xsl_stylesheet(
            self.parts.document, stylesheet, params, namespace
        )

    # ------------------------------------------------------------------
    # Saving

    def save(self) -> str:
        """Write every part into the working copy and return its path.

        The caller owns the returned file. Changes already applied to the
        parts are kept if writing fails, so a retry writes the same state.
        """

        if self._archive.closed:
            raise PackageError("The template has already been saved.")

        self.parts.write_to(self._archive)
        self._archive.close()
        self._released = True
        logger.info("Saved template %s to %s", self.source_path, self.temp_path)
        return self.temp_path

    def save_as(self, filename: str | os.PathLike) -> str:
        """Remove leftover markers, save, and move the result to ``filename``.

        An existing file at ``filename`` is replaced.
        """

        filename = os.fspath(filename)
        self.remove_orphan_tags()
        temp_path = self.save()
        try:
            try:
                os.replace(temp_path, filename)
            except OSError as exc:
                if exc.errno != errno.EXDEV:
                    raise
                shutil.move(temp_path, filename)
        except OSError as exc:
            logger.exception(
                "Failed to move %s to %s",
                temp_path,
                filename,
                extra={"templatewriter_path": filename},
            )
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise TemplateIOError(f"Could not move the saved template to {filename}.") from exc

        logger.info("Saved template %s as %s", self.source_path, filename)
        return filename

    def close(self) -> None:
        """Release the package and remove the working copy if nobody owns it."""

        if self._released:
            return
        self._archive.discard()
        if os.path.exists(self.temp_path):
            os.remove(self.temp_path)
        self._released = True
        logger.debug("Removed working file %s", self.temp_path)
