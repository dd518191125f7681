"""
Task model — one installable / configurable unit.

A task is keyed by ``name`` and carries, per platform, an ordered list of
literal shell commands plus an optional download URL. Description and
category are language-keyed mappings.

On disk (``tasks.json``)::

    {"tasks": [{"name": "vim",
                "description": {"en": "Text editor", "fr": "Éditeur"},
                "category": {"en": "Editors"},
                "linux": ["sudo apt install -y vim"],
                "windows": ["winget install -e --id vim.vim"],
                "urls": {"linux": null}}]}
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

PLATFORMS: tuple[str, ...] = ("linux", "windows", "macos")
TEXT_FIELDS: tuple[str, ...] = ("description", "category")

Platform = Literal["linux", "windows", "macos"]


def as_translations(value: Any) -> Any:
    """Read a bare string as an English-only mapping."""
    if value is None:
        return {}
    if isinstance(value, str):
        return {"en": value} if value else {}
    return value


def as_command_list(value: Any) -> Any:
    """Read a bare command string as a one-item list."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    return value


def localized(values: dict[str, str], language: str) -> str:
    """Pick ``language``, then English, then any non-empty value."""
    if not values:
        return ""
    text = values.get(language) or values.get("en")
    if text:
        return text
    return next((v for v in values.values() if v), "")


class Task(BaseModel):
    """A named, platform-keyed set of shell commands."""

    # Unknown keys written by other tools survive a rewrite.
    model_config = ConfigDict(extra="allow")

    name: str
    description: dict[str, str] = Field(default_factory=dict)
    category: dict[str, str] = Field(default_factory=dict)
    linux: list[str] = Field(default_factory=list)
    windows: list[str] = Field(default_factory=list)
    macos: list[str] = Field(default_factory=list)
    urls: dict[str, str | None] = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("task name must not be empty")
        return value

    @field_validator("description", "category", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return as_translations(value)

    @field_validator("linux", "windows", "macos", mode="before")
    @classmethod
    def _coerce_commands(cls, value: Any) -> Any:
        return as_command_list(value)

    @field_validator("urls", mode="before")
    @classmethod
    def _coerce_urls(cls, value: Any) -> Any:
        return value or {}

    def commands_for(self, platform: str) -> list[str]:
        """Commands for ``platform``; empty when the platform is absent."""
        if platform not in PLATFORMS:
            return []
        return list(getattr(self, platform))

    def url_for(self, platform: str) -> str | None:
        url = self.urls.get(platform)
        if not url or url == "null":
            return None
        return url

    def localized(self, field: str, language: str) -> str:
        if field not in TEXT_FIELDS:
            raise ValueError(f"Not a translatable field: {field}")
        return localized(getattr(self, field), language)

    def to_document(self) -> dict[str, Any]:
        """Serialize only the keys that were read or explicitly set."""
        return self.model_dump(mode="json", exclude_unset=True)


class TaskDocument(BaseModel):
    """Root of ``tasks.json``."""

    model_config = ConfigDict(extra="allow")

    tasks: list[Task] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_names(self) -> TaskDocument:
        names = [t.name for t in self.tasks]
        dupes = sorted({n for n in names if names.count(n) > 1})
        if dupes:
            raise ValueError(f"Duplicate task names: {', '.join(dupes)}")
        return self

    def to_document(self) -> dict[str, Any]:
        data = self.model_dump(mode="json", exclude={"tasks"})
        data["tasks"] = [t.to_document() for t in self.tasks]
        return data
