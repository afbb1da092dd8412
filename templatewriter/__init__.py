"""Fill placeholders and repeat rows and blocks in DOCX templates."""

from templatewriter.exceptions import (
    NotFoundError,
    PackageError,
    TemplateError,
    TemplateIOError,
    TransformError,
)
from templatewriter.template import Template

__all__ = [
    "NotFoundError",
    "PackageError",
    "Template",
    "TemplateError",
    "TemplateIOError",
    "TransformError",
]
