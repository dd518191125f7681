"""
Profile model — a named, ordered set of task references.

On disk (``profiles.json``)::

    {"profiles": [{"name": "dev",
                   "description": {"en": "Developer workstation"},
                   "tasks": ["git", "vim"]}]}

Older documents stored profiles as a ``{name: [task, ...]}`` mapping;
those are read as profiles without a description.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from uam.core.models.task import as_command_list, as_translations, localized


class Profile(BaseModel):
    """Named collection of task names, run in declared order."""

    model_config = ConfigDict(extra="allow")

    name: str
    description: dict[str, str] = Field(default_factory=dict)
    tasks: list[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("profile name must not be empty")
        return value

    @field_validator("description", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return as_translations(value)

    @field_validator("tasks", mode="before")
    @classmethod
    def _coerce_tasks(cls, value: Any) -> Any:
        return as_command_list(value)

    def localized_description(self, language: str) -> str:
        return localized(self.description, language)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True)


class ProfileDocument(BaseModel):
    """Root of ``profiles.json``."""

    model_config = ConfigDict(extra="allow")

    profiles: list[Profile] = Field(default_factory=list)

    @field_validator("profiles", mode="before")
    @classmethod
    def _coerce_mapping(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return [{"name": name, "tasks": tasks} for name, tasks in value.items()]
        return value

    @model_validator(mode="after")
    def _unique_names(self) -> ProfileDocument:
        names = [p.name for p in self.profiles]
        dupes = sorted({n for n in names if names.count(n) > 1})
        if dupes:
            raise ValueError(f"Duplicate profile names: {', '.join(dupes)}")
        return self

    def to_document(self) -> dict[str, Any]:
        data = self.model_dump(mode="json", exclude={"profiles"})
        data["profiles"] = [p.to_document() for p in self.profiles]
        return data
