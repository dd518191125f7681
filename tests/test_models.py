"""
Tests for the document models — Task, Profile and run reports.
"""

import pytest
from pydantic import ValidationError

from uam.core.models import (
    CommandOutcome,
    Profile,
    ProfileDocument,
    ProfileReport,
    RunReport,
    Task,
    TaskDocument,
)


class TestTask:
    def test_minimal(self):
        task = Task(name="vim")
        assert task.description == {}
        assert task.commands_for("linux") == []

    def test_name_is_stripped(self):
        assert Task(name="  vim ").name == "vim"

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            Task(name="   ")

    def test_string_description_reads_as_english(self):
        task = Task(name="curl", description="HTTP client")
        assert task.description == {"en": "HTTP client"}

    def test_string_command_reads_as_list(self):
        task = Task(name="curl", linux="sudo apt install -y curl")
        assert task.linux == ["sudo apt install -y curl"]

    def test_commands_for_unknown_platform(self):
        task = Task(name="vim", linux=["a"])
        assert task.commands_for("beos") == []

    def test_commands_for_returns_copy(self):
        task = Task(name="vim", linux=["a"])
        task.commands_for("linux").append("b")
        assert task.linux == ["a"]

    def test_url_for(self):
        task = Task(name="code", urls={"linux": "https://x/code.deb", "windows": "null", "macos": None})
        assert task.url_for("linux") == "https://x/code.deb"
        assert task.url_for("windows") is None
        assert task.url_for("macos") is None

    def test_localized_fallbacks(self):
        task = Task(name="vim", description={"fr": "Éditeur", "en": "Editor"}, category={"de": "Werkzeug"})
        assert task.localized("description", "fr") == "Éditeur"
        assert task.localized("description", "es") == "Editor"
        assert task.localized("category", "en") == "Werkzeug"
        assert Task(name="x").localized("description", "en") == ""

    def test_localized_rejects_other_fields(self):
        with pytest.raises(ValueError):
            Task(name="vim").localized("linux", "en")

    def test_to_document_keeps_only_set_keys(self):
        task = Task(name="vim", linux=["sudo apt install -y vim"])
        assert task.to_document() == {"name": "vim", "linux": ["sudo apt install -y vim"]}

    def test_unknown_keys_survive(self):
        task = Task.model_validate({"name": "vim", "homepage": "https://vim.org"})
        assert task.to_document()["homepage"] == "https://vim.org"


class TestTaskDocument:
    def test_duplicate_names_rejected(self):
        with pytest.raises(ValidationError, match="Duplicate task names: vim"):
            TaskDocument.model_validate({"tasks": [{"name": "vim"}, {"name": "vim"}]})

    def test_to_document(self):
        doc = TaskDocument.model_validate({"tasks": [{"name": "vim"}], "version": 2})
        assert doc.to_document() == {"version": 2, "tasks": [{"name": "vim"}]}


class TestProfile:
    def test_legacy_mapping(self):
        doc = ProfileDocument.model_validate({"profiles": {"dev": ["git", "vim"]}})
        assert doc.profiles[0].name == "dev"
        assert doc.profiles[0].tasks == ["git", "vim"]

    def test_duplicate_names_rejected(self):
        with pytest.raises(ValidationError):
            ProfileDocument.model_validate({"profiles": [{"name": "a"}, {"name": "a"}]})

    def test_localized_description(self):
        profile = Profile(name="dev", description={"en": "Developer"})
        assert profile.localized_description("fr") == "Developer"


class TestReports:
    def test_failed_commands_do_not_fail_the_report(self):
        report = RunReport(
            task="vim",
            platform="linux",
            commands=[CommandOutcome(command="a", return_code=0), CommandOutcome(command="b", return_code=3)],
        )
        assert report.ok
        assert [c.command for c in report.failed_commands] == ["b"]

    def test_failure(self):
        report = RunReport.failure("foo", "linux", "boom", found=False)
        assert not report.ok
        assert report.error == "boom"
        assert report.found is False

    def test_profile_report_counts(self):
        report = ProfileReport(
            profile="dev",
            reports=[
                RunReport(task="a", platform="linux"),
                RunReport.failure("b", "linux", "x"),
            ],
        )
        assert report.total == 2
        assert report.succeeded == 1
        assert report.failed == 1
        assert not report.ok
