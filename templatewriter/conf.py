"""Settings lookup for ``templatewriter``.

Values are read from the Django settings module when one is configured, using
the ``TEMPLATEWRITER_`` prefix (e.g. ``TEMPLATEWRITER_TEMP_DIR``). Outside of a
Django project the defaults below apply.
"""

from __future__ import annotations

from typing import Any

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

_SETTINGS_PREFIX = "TEMPLATEWRITER_"

DEFAULTS: dict[str, Any] = {
    # Directory for working copies; ``None`` uses the system temp directory
    "TEMP_DIR": None,
    "TEMP_PREFIX": "templatewriter-",
    "TEMP_SUFFIX": ".docx",
}


def get_setting(name: str) -> Any:
    """Return the configured value for ``name`` or its default.

    Reading the attribute loads ``DJANGO_SETTINGS_MODULE`` on first access;
    without a settings module Django raises ``ImproperlyConfigured`` and the
    default is returned.
    """

    if name not in DEFAULTS:
        raise KeyError(f"Unknown templatewriter setting: {name}")
    try:
        return getattr(settings, f"{_SETTINGS_PREFIX}{name}", DEFAULTS[name])
    except ImproperlyConfigured:
        return DEFAULTS[name]
