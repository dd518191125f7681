"""Localized strings."""

from uam.core.i18n.strings import MissingHandler, MissingTranslation, StringStore, flatten, humanize

__all__ = ["MissingHandler", "MissingTranslation", "StringStore", "flatten", "humanize"]
