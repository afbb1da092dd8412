"""Exceptions raised by the ``templatewriter`` package."""


class TemplateError(Exception):
    """Base class for every error raised while processing a template."""


class TemplateIOError(TemplateError, OSError):
    """The working copy of a template could not be created, copied or moved."""


class NotFoundError(TemplateError, LookupError):
    """A placeholder or structural region could not be located in a part."""


class TransformError(TemplateError):
    """An XSL style sheet could not be applied to the document part."""


class PackageError(TemplateError):
    """The document package could not be opened, read or written back."""
