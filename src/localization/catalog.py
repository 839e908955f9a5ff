from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class CatalogText(str):
    """A catalog string that remembers the key it was read from."""

    key: Optional[str]

    def __new__(cls, value: str, *, key: Optional[str] = None):
        obj = super().__new__(cls, value)
        obj.key = key
        return obj

    def format(self, *args: Any, **kwargs: Any) -> "CatalogText":  # type: ignore[override]
        return CatalogText(super().format(*args, **kwargs), key=self.key)


class MessageCatalog:
    """
    Serves user-facing messages from JSON catalogs, one file per locale.

    Nested objects become dotted keys ("order.added"). A list value is a
    multi-line message and is joined with newlines.
    """

    def __init__(self, directory: Path, default_locale: str = "en"):
        self.directory = directory
        self.default_locale = default_locale
        self._catalogs: Dict[str, Dict[str, CatalogText]] = {}
        self._catalogs[default_locale] = self._read(default_locale)

    def has_key(self, key: str) -> bool:
        return key in self._catalogs[self.default_locale]

    def text(self, key: str, *, locale: Optional[str] = None, **kwargs: Any) -> CatalogText:
        entries = self._entries(locale or self.default_locale)
        entry = entries.get(key) or self._catalogs[self.default_locale].get(key)
        if entry is None:
            raise KeyError(f"Message key '{key}' not found")
        return entry.format(**kwargs) if kwargs else entry

    def _entries(self, locale: str) -> Dict[str, CatalogText]:
        if locale not in self._catalogs:
            self._catalogs[locale] = self._read(locale)
        return self._catalogs[locale]

    def _read(self, locale: str) -> Dict[str, CatalogText]:
        path = self.directory / f"{locale}.json"
        if not path.exists():
            logger.warning("Message catalog for '%s' not found at %s", locale, path)
            return {}

        with path.open("r", encoding="utf-8") as file:
            raw = json.load(file)

        entries: Dict[str, CatalogText] = {}
        self._flatten(raw, "", entries)
        return entries

    def _flatten(self, data: Dict[str, Any], prefix: str, into: Dict[str, CatalogText]) -> None:
        for name, value in data.items():
            key = f"{prefix}.{name}" if prefix else name
            if isinstance(value, dict):
                self._flatten(value, key, into)
            elif isinstance(value, list):
                into[key] = CatalogText("\n".join(str(line) for line in value), key=key)
            else:
                into[key] = CatalogText(str(value), key=key)


class KeyAccessor:
    """Resolves attribute chains to catalog keys: Key.order.added -> "order.added"."""

    def __init__(self, catalog: MessageCatalog, locale: Optional[str] = None, prefix: str = ""):
        self._catalog = catalog
        self._locale = locale
        self._prefix = prefix

    def for_locale(self, locale: str) -> "KeyAccessor":
        return KeyAccessor(self._catalog, locale=locale, prefix=self._prefix)

    def __getattr__(self, item: str):
        if item.startswith("__"):
            raise AttributeError(item)
        key = f"{self._prefix}.{item}" if self._prefix else item
        if self._catalog.has_key(key):
            return self._catalog.text(key, locale=self._locale)
        return KeyAccessor(self._catalog, locale=self._locale, prefix=key)
