"""Display helpers: labels per language and currency formatting."""

from nexusledger.services.locale.currency import SUPPORTED_CURRENCIES, format_currency
from nexusledger.services.locale.labels import (
    DEFAULT_LANGUAGE,
    LANGUAGE_NAMES,
    TRANSLATIONS,
    get_label,
)

__all__ = [
    "DEFAULT_LANGUAGE",
    "LANGUAGE_NAMES",
    "SUPPORTED_CURRENCIES",
    "TRANSLATIONS",
    "format_currency",
    "get_label",
]
