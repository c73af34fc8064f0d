"""
Tests for ignore_hub.wizard
===========================

Prompts are replaced with mocks; questionary never talks to a terminal.
"""

import io
from pathlib import Path
from unittest.mock import MagicMock, patch

import httpx
import pytest
import questionary
import typer
from rich.console import Console

from ignore_hub.config import Settings
from ignore_hub.errors import TemplateFetchError, UsageError
from ignore_hub.models import GenerateOptions, TemplateKind, TemplateRecord
from ignore_hub.wizard import fetch_selected, group_choices, run_wizard
from tests.conftest import make_record


def answer(value) -> MagicMock:
    """A prompt whose ``ask()`` returns ``value``."""
    prompt = MagicMock()
    prompt.ask.return_value = value
    return prompt


@pytest.fixture
def settings(cache_file: Path) -> Settings:
    """Settings reading the pre-filled cache."""
    return Settings(cache_dir=cache_file.parent)


@pytest.fixture
def console() -> Console:
    """Console writing to memory."""
    return Console(file=io.StringIO(), width=120)


@pytest.fixture
def tty():
    """Pretend a terminal is attached."""
    with patch("ignore_hub.wizard.is_interactive_capable", return_value=True):
        yield


class TestGroupChoices:
    """Tests for group_choices."""

    def test_one_separator_per_kind(self, template_index: list[TemplateRecord]) -> None:
        """Kinds are introduced by separators, records follow in order."""
        choices = group_choices(template_index)

        titles = [
            c.line if isinstance(c, questionary.Separator) else c.title
            for c in choices
        ]
        assert titles == [
            "── Frameworks & tools ──",
            "Node",
            "Unity",
            "── Editors & operating systems ──",
            "Global/MonoDevelop",
            "── Languages ──",
            "Java",
            "JavaScript",
        ]

    def test_values_are_records(self, template_index: list[TemplateRecord]) -> None:
        """Choosing an entry yields the record itself."""
        values = [c.value for c in group_choices(template_index) if not isinstance(c, questionary.Separator)]

        assert set(values) == set(template_index)


class TestFetchSelected:
    """Tests for fetch_selected."""

    def test_partial_failure(self, template_index: list[TemplateRecord], settings: Settings) -> None:
        """Failures are collected instead of raised."""
        def fake_source(path, client=None, timeout=None):
            if path == "Unity.gitignore":
                raise TemplateFetchError("404")
            return "x\n"

        with patch("ignore_hub.wizard.fetch_template_source", side_effect=fake_source):
            fetched, failures = fetch_selected(template_index[2:5:2], settings)

        assert [t.meta.id for t in fetched] == ["Node"]
        assert failures == ["Unity"]


class TestRunWizard:
    """Tests for run_wizard."""

    def test_requires_tty(self, settings: Settings, console: Console) -> None:
        """Without a terminal the wizard refuses to start."""
        with patch("ignore_hub.wizard.is_interactive_capable", return_value=False):
            with pytest.raises(UsageError, match="requires a TTY"):
                run_wizard(GenerateOptions(), settings, console=console)

    def test_select_preview_write(
        self, tmp_path: Path, settings: Settings, console: Console, tty,
        template_index: list[TemplateRecord],
    ) -> None:
        """The confirmed selection is merged and written."""
        output = tmp_path / ".gitignore"
        node = template_index[2]

        with (
            patch("questionary.checkbox", return_value=answer([node])),
            patch("questionary.confirm", return_value=answer(True)),
            patch("ignore_hub.wizard.fetch_template_source", return_value="node_modules/\n"),
        ):
            result = run_wizard(GenerateOptions(output=output), settings, console=console)

        assert result.written is True
        assert "node_modules/" in output.read_text()
        assert "Preview" in console.file.getvalue()

    def test_declined_write(
        self, tmp_path: Path, settings: Settings, console: Console, tty,
        template_index: list[TemplateRecord],
    ) -> None:
        """Declining the confirmation aborts without writing."""
        output = tmp_path / ".gitignore"

        with (
            patch("questionary.checkbox", return_value=answer([template_index[2]])),
            patch("questionary.confirm", return_value=answer(False)),
            patch("ignore_hub.wizard.fetch_template_source", return_value="dist\n"),
        ):
            with pytest.raises(typer.Abort):
                run_wizard(GenerateOptions(output=output), settings, console=console)

        assert not output.exists()

    def test_cancelled_selection(self, settings: Settings, console: Console, tty) -> None:
        """Ctrl-C in the checkbox aborts."""
        with patch("questionary.checkbox", return_value=answer(None)):
            with pytest.raises(typer.Abort):
                run_wizard(GenerateOptions(), settings, console=console)

    def test_everything_failed(
        self, settings: Settings, console: Console, tty,
        template_index: list[TemplateRecord],
    ) -> None:
        """Nothing fetched is a TemplateFetchError."""
        with (
            patch("questionary.checkbox", return_value=answer([template_index[4]])),
            patch("ignore_hub.wizard.fetch_template_source", side_effect=TemplateFetchError("boom")),
        ):
            with pytest.raises(TemplateFetchError, match="Unity"):
                run_wizard(GenerateOptions(), settings, console=console)

    def test_stdout_skips_preview(
        self, tmp_path: Path, settings: Settings, console: Console, tty,
        template_index: list[TemplateRecord],
    ) -> None:
        """With stdout nothing is confirmed or written."""
        output = tmp_path / ".gitignore"
        confirm = MagicMock()

        with (
            patch("questionary.checkbox", return_value=answer([template_index[2]])),
            patch("questionary.confirm", confirm),
            patch("ignore_hub.wizard.fetch_template_source", return_value="dist\n"),
        ):
            result = run_wizard(GenerateOptions(output=output, stdout=True), settings, console=console)

        confirm.assert_not_called()
        assert result.written is False
        assert "dist" in result.content
        assert not output.exists()

    def test_index_warning_printed_once(
        self, tmp_path: Path, settings: Settings, console: Console, tty,
        template_index: list[TemplateRecord], offline_client: httpx.Client,
    ) -> None:
        """A failed refresh is shown in the wizard and not handed back again."""
        options = GenerateOptions(output=tmp_path / ".gitignore", refresh=True, stdout=True)

        with (
            patch("questionary.checkbox", return_value=answer([template_index[2]])),
            patch("ignore_hub.wizard.fetch_template_source", return_value="dist\n"),
        ):
            result = run_wizard(options, settings, client=offline_client, console=console)

        assert console.file.getvalue().count("Network refresh failed") == 1
        assert result.warnings == []

    def test_failure_names_printed_literally(
        self, tmp_path: Path, settings: Settings, console: Console, tty,
        template_index: list[TemplateRecord],
    ) -> None:
        """Template names are not interpreted as console markup."""
        odd = make_record("Odd[bold]", TemplateKind.FRAMEWORK)

        def fake_source(path, client=None, timeout=None):
            if path == odd.path:
                raise TemplateFetchError("404")
            return "dist\n"

        with (
            patch("questionary.checkbox", return_value=answer([template_index[2], odd])),
            patch("ignore_hub.wizard.fetch_template_source", side_effect=fake_source),
        ):
            run_wizard(GenerateOptions(output=tmp_path / ".gitignore", stdout=True), settings, console=console)

        assert "Could not fetch: Odd[bold]" in console.file.getvalue()
