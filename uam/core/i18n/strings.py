"""
Localized String Store — dotted-key lookup over ``lang.json``.

The language document is a nested mapping ``namespace.key.lang = text``
(the namespace level is optional). It is flattened into dotted keys for
lookup. Resolution order for ``resolve("downloading", "runner")`` with
current language ``fr``::

    runner.downloading.fr  →  downloading.fr
    runner.downloading.en  →  downloading.en  →  "downloading" (humanized)

Lookup itself never prompts. When the current language has no entry and
an ``on_missing`` handler is registered, the handler is asked for a text;
a non-empty answer is persisted under
``{namespace}.{key}.{language}`` and the table is reloaded.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from uam.core.errors import DocumentCorrupt
from uam.core.persistence.json_document import read_json, write_json

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MissingTranslation:
    """Emitted when the current language has no entry for a key."""

    key: str
    namespace: str | None
    language: str
    fallback: str  # English text, else the humanized key


MissingHandler = Callable[[MissingTranslation], "str | None"]


def humanize(key: str) -> str:
    """``not_set_key`` → ``not set key``."""
    return key.replace("_", " ")


def flatten(data: Any, prefix: str = "") -> dict[str, str]:
    """Flatten nested mappings into ``a.b.c`` keys (scalar leaves only)."""
    flat: dict[str, str] = {}
    if isinstance(data, dict):
        items = ((str(k), v) for k, v in data.items())
    elif isinstance(data, list):
        items = ((str(i), v) for i, v in enumerate(data))
    else:
        if prefix and data is not None:
            flat[prefix] = str(data)
        return flat

    for key, value in items:
        flat.update(flatten(value, f"{prefix}.{key}" if prefix else key))
    return flat


class StringStore:
    """Flat key → text table loaded from the language document.

    Args:
        path: Path to ``lang.json``. A missing file yields an empty table.
        language: Current language code.
        on_missing: Optional handler asked to supply a missing translation.
    """

    def __init__(
        self,
        path: Path,
        language: str = "en",
        on_missing: MissingHandler | None = None,
    ) -> None:
        self.path = path
        self.language = language or "en"
        self.on_missing = on_missing
        self._table: dict[str, str] = {}
        self._declined: set[str] = set()
        self.load()

    def __len__(self) -> int:
        return len(self._table)

    def load(self) -> None:
        """(Re)load the table from disk."""
        if not self.path.is_file():
            logger.info("No language document at %s — using built-in fallbacks", self.path)
            self._table = {}
            return

        data = read_json(self.path)
        if not isinstance(data, dict):
            raise DocumentCorrupt(f"Expected a JSON object in {self.path}")
        self._table = flatten(data)
        logger.debug("Loaded %d strings from %s", len(self._table), self.path)

    # ── Pure resolution ─────────────────────────────────────────

    def lookup(
        self,
        key: str,
        namespace: str | None = None,
        language: str | None = None,
    ) -> str | None:
        """Stored text for one language (namespaced key first), or None."""
        lang = language or self.language
        if namespace:
            text = self._table.get(f"{namespace}.{key}.{lang}")
            if text:
                return text
        return self._table.get(f"{key}.{lang}") or None

    def fallback(self, key: str, namespace: str | None = None) -> str:
        """English text, else the humanized key, else the raw key."""
        return self.lookup(key, namespace, "en") or humanize(key) or key

    def resolve(self, key: str, namespace: str | None = None, **values: Any) -> str:
        """Resolve ``key`` in the current language; never returns ``""``.

        ``values`` are interpolated with ``str.format``.
        """
        text = self.lookup(key, namespace)
        if not text:
            text = self.fallback(key, namespace)
            supplied = self._ask_missing(key, namespace, text)
            if supplied:
                text = supplied
        return _format(text, values) or key

    def _ask_missing(self, key: str, namespace: str | None, base: str) -> str | None:
        if self.on_missing is None:
            return None
        fq_key = f"{namespace}.{key}" if namespace else key
        if fq_key in self._declined:
            return None

        supplied = self.on_missing(MissingTranslation(key, namespace, self.language, base))
        supplied = (supplied or "").strip()
        if not supplied:
            self._declined.add(fq_key)
            return None

        self.set_translation(key, supplied, namespace=namespace)
        return supplied

    # ── Mutation ────────────────────────────────────────────────

    def set_translation(
        self,
        key: str,
        text: str,
        namespace: str | None = None,
        language: str | None = None,
    ) -> None:
        """Persist ``{namespace}.{key}.{language} = text`` and reload."""
        lang = language or self.language
        data = read_json(self.path) if self.path.is_file() else {}
        if not isinstance(data, dict):
            raise DocumentCorrupt(f"Expected a JSON object in {self.path}")

        node = data
        for part in ([namespace] if namespace else []) + [key]:
            child = node.setdefault(part, {})
            if not isinstance(child, dict):
                raise DocumentCorrupt(
                    f"Cannot store translation under '{part}' in {self.path}: not an object"
                )
            node = child
        node[lang] = text

        write_json(self.path, data, sort_keys=True)
        logger.info("Stored translation %s%s.%s", f"{namespace}." if namespace else "", key, lang)
        self.load()


def _format(text: str, values: dict[str, Any]) -> str:
    if not values:
        return text
    try:
        return text.format(**values)
    except (KeyError, IndexError, ValueError):
        return text
