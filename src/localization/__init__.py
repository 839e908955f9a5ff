from pathlib import Path

from .catalog import MessageCatalog, KeyAccessor, CatalogText

_catalog_directory = Path(__file__).parent / "locales"
_default_locale = "en"

catalog = MessageCatalog(directory=_catalog_directory, default_locale=_default_locale)

# Attribute access to catalog keys, e.g. Key.order.added
Key = KeyAccessor(catalog)

__all__ = [
    "Key",
    "catalog",
    "MessageCatalog",
    "KeyAccessor",
    "CatalogText",
]
