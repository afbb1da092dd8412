"""Zip-backed access to the parts of a word-processing package."""

from __future__ import annotations

import logging
import os
import tempfile
import zipfile

from templatewriter.exceptions import PackageError

logger = logging.getLogger(__name__)


class PackageArchive:
    """Mutable view over a DOCX package stored at ``path``.

    Parts are read straight from the zip file. Parts written through
    :meth:`add_from_string` are buffered and only reach the file when the
    archive is closed, at which point the package is rebuilt with the
    original entry order and ``ZipInfo`` metadata preserved.
    """

    def __init__(self, path: str | os.PathLike):
        self.path = os.fspath(path)
        self._pending: dict[str, bytes] = {}
        self.closed = False
        try:
            self._archive = zipfile.ZipFile(self.path)
        except (OSError, zipfile.BadZipFile) as exc:
            raise PackageError(f"Could not open the package {self.path}.") from exc
        self._names = set(self._archive.namelist())

    def locate_name(self, name: str) -> bool:
        return name in self._pending or name in self._names

    def get_from_name(self, name: str) -> str:
        """Return the text of part ``name``, including unsaved changes."""

        self._ensure_open()
        if name in self._pending:
            data = self._pending[name]
        else:
            try:
                data = self._archive.read(name)
            except KeyError as exc:
                raise PackageError(f"Part {name} is missing from {self.path}.") from exc
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise PackageError(f"Part {name} in {self.path} is not valid UTF-8.") from exc

    def add_from_string(self, name: str, content: str | bytes) -> None:
        self._ensure_open()
        if isinstance(content, str):
            content = content.encode("utf-8")
        self._pending[name] = content

    def close(self) -> None:
        """Write buffered parts into the package file and release it."""

        self._ensure_open()
        directory = os.path.dirname(os.path.abspath(self.path))
        handle, rebuilt = tempfile.mkstemp(suffix=".tmp", dir=directory)
        os.close(handle)
        try:
            with zipfile.ZipFile(rebuilt, "w") as output:
                written: set[str] = set()
                for info in self._archive.infolist():
                    content = self._pending.get(info.filename)
                    if content is None:
                        content = self._archive.read(info.filename)

                    new_info = zipfile.ZipInfo(info.filename)
                    new_info.date_time = info.date_time
                    new_info.external_attr = info.external_attr
                    new_info.internal_attr = info.internal_attr
                    new_info.compress_type = info.compress_type
                    new_info.flag_bits = info.flag_bits
                    output.writestr(new_info, content)
                    written.add(info.filename)

                for name, content in self._pending.items():
                    if name not in written:
                        output.writestr(name, content, compress_type=zipfile.ZIP_DEFLATED)
            os.replace(rebuilt, self.path)
        except (OSError, zipfile.BadZipFile) as exc:
            logger.exception(
                "Failed to write package %s",
                self.path,
                extra={"templatewriter_path": self.path},
            )
            if os.path.exists(rebuilt):
                os.remove(rebuilt)
            raise PackageError(f"Could not close the package {self.path}.") from exc

        self._archive.close()
        self.closed = True
        logger.debug("Wrote %d part(s) into %s", len(self._pending), self.path)
        self._pending.clear()

    def discard(self) -> None:
        """Release the package without writing buffered parts."""

        if not self.closed:
            self._archive.close()
            self.closed = True
        self._pending.clear()

    def _ensure_open(self) -> None:
        if self.closed:
            raise PackageError(f"The package {self.path} has already been closed.")
