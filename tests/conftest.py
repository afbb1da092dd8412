"""Shared fixtures for building DOCX packages on disk."""

from __future__ import annotations

import zipfile
from pathlib import Path

import pytest

W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"

CONTENT_TYPES_XML = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="xml" ContentType="application/xml"/>'
    '<Override PartName="/word/document.xml" '
    'ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>'
    "</Types>"
)

MEDIA_BYTES = b"\x89PNG\r\n\x1a\nnot-really-an-image"


def wrap_document(body: str) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<w:document xmlns:w="{W_NS}"><w:body>{body}</w:body></w:document>'
    )


def wrap_header(body: str, root: str = "hdr") -> str:
    return f'<w:{root} xmlns:w="{W_NS}">{body}</w:{root}>'


def paragraph(text: str) -> str:
    return f'<w:p w:rsidR="00A1B2C3"><w:r><w:t>{text}</w:t></w:r></w:p>'


def build_docx(
    path: Path,
    document: str,
    headers: dict[int, str] | None = None,
    footers: dict[int, str] | None = None,
    *,
    include_document: bool = True,
) -> Path:
    with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as archive:
        archive.writestr("[Content_Types].xml", CONTENT_TYPES_XML)
        if include_document:
            archive.writestr("word/document.xml", document)
        for index, xml in (headers or {}).items():
            archive.writestr(f"word/header{index}.xml", xml)
        for index, xml in (footers or {}).items():
            archive.writestr(f"word/footer{index}.xml", xml)
        archive.writestr("word/media/image1.png", MEDIA_BYTES)
    return path


def read_part(path: str | Path, name: str) -> str:
    with zipfile.ZipFile(path) as archive:
        return archive.read(name).decode("utf-8")


@pytest.fixture
def work_dir(tmp_path, settings):
    """Directory receiving working copies, so leftovers can be asserted on."""

    directory = tmp_path / "work"
    directory.mkdir()
    settings.TEMPLATEWRITER_TEMP_DIR = str(directory)
    return directory


@pytest.fixture
def docx_factory(tmp_path):
    def factory(document: str, name: str = "template.docx", **kwargs) -> Path:
        return build_docx(tmp_path / name, document, **kwargs)

    return factory
