"""
Tests for ignore_hub.cli
========================

Tests use Typer's CliRunner for testing CLI commands. Config and cache
locations point into ``tmp_path`` (see the ``isolated_env`` fixture) and
template bodies come from a patched fetcher.

Test Organization
-----------------
- TestVersionCommand: --version flag
- TestHelpOutput: Help text for each command
- TestGenerateCommand: Direct, stdout and failing runs
- TestListCommand: Index listing
- TestDetectCommand: Project detection
"""

from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from ignore_hub import __version__
from ignore_hub.cli import app
from ignore_hub.merge import GENERATED_BLOCK_START
from ignore_hub.models import TemplateIndex, TemplateRecord, TemplateWithSource


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def cached_env(isolated_env: Path, template_index: list[TemplateRecord]) -> Path:
    """Isolated environment with a cached template index."""
    cache = isolated_env / "cache" / "index.json"
    cache.parent.mkdir()
    index = TemplateIndex(fetched_at="2025-01-01T00:00:00+00:00", templates=template_index)
    cache.write_text(index.to_json(), encoding="utf-8")
    return isolated_env


@pytest.fixture
def fetch():
    """Serve a one-line body for every template."""
    def fake_fetch(templates, client=None, timeout=None):
        return [TemplateWithSource(meta=t, source=f"{t.id.lower()}-out/\n") for t in templates]

    with patch("ignore_hub.generator.fetch_templates_with_source", side_effect=fake_fetch) as mock:
        yield mock


# =============================================================================
# Version and Help Tests
# =============================================================================

class TestVersionCommand:
    """Tests for the --version flag."""

    def test_version_flag(self, runner: CliRunner, isolated_env: Path) -> None:
        """--version shows version and exits."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_version_short_flag(self, runner: CliRunner, isolated_env: Path) -> None:
        """-v is an alias for --version."""
        result = runner.invoke(app, ["-v"])

        assert result.exit_code == 0
        assert "ignore-hub" in result.output


class TestHelpOutput:
    """Tests for help text."""

    def test_main_help(self, runner: CliRunner, isolated_env: Path) -> None:
        """Main help lists every command."""
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("generate", "list", "detect"):
            assert command in result.output

    def test_generate_help(self, runner: CliRunner, isolated_env: Path) -> None:
        """generate --help documents its options."""
        result = runner.invoke(app, ["generate", "--help"])

        assert result.exit_code == 0
        assert "--template" in result.output
        assert "--no-interactive" in result.output


# =============================================================================
# Generate Command Tests
# =============================================================================

class TestGenerateCommand:
    """Tests for the generate command."""

    def test_writes_file(self, runner: CliRunner, cached_env: Path, fetch) -> None:
        """Templates given with -t are merged into the output file."""
        output = cached_env / ".gitignore"

        result = runner.invoke(app, ["generate", "-t", "node,unity", "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert "generated .gitignore" in result.output
        content = output.read_text()
        assert content.startswith(GENERATED_BLOCK_START)
        assert "node-out/" in content
        assert "unity-out/" in content

    def test_simple_separation(self, runner: CliRunner, cached_env: Path, fetch) -> None:
        """-s drops the markers and uses plain headers."""
        output = cached_env / ".gitignore"

        result = runner.invoke(app, ["generate", "-t", "node", "-s", "-o", str(output)])

        assert result.exit_code == 0, result.output
        content = output.read_text()
        assert GENERATED_BLOCK_START not in content
        assert "## Node\n" in content

    def test_simple_separation_from_config(
        self, runner: CliRunner, cached_env: Path, fetch, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """simple_separator in the config file has the same effect."""
        config = cached_env / "config.toml"
        config.write_text("simple_separator = true\n")
        monkeypatch.setenv("IGNORE_HUB_CONFIG", str(config))
        output = cached_env / ".gitignore"

        result = runner.invoke(app, ["generate", "-t", "node", "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert GENERATED_BLOCK_START not in output.read_text()

    def test_stdout(self, runner: CliRunner, cached_env: Path, fetch) -> None:
        """--stdout prints the content and writes nothing."""
        output = cached_env / ".gitignore"

        result = runner.invoke(app, ["generate", "-t", "node", "--stdout", "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert GENERATED_BLOCK_START in result.output
        assert "node-out/" in result.output
        assert not output.exists()

    def test_unknown_template(self, runner: CliRunner, cached_env: Path, fetch) -> None:
        """Unresolved templates exit with code 1."""
        output = cached_env / ".gitignore"

        result = runner.invoke(app, ["generate", "-t", "cobol", "-o", str(output)])

        assert result.exit_code == 1
        assert "Error" in result.output
        assert "cobol" in result.output
        assert not output.exists()

    def test_ambiguous_template(self, runner: CliRunner, cached_env: Path, fetch) -> None:
        """Ambiguous names exit with code 1."""
        result = runner.invoke(
            app, ["generate", "-t", "jav", "-o", str(cached_env / ".gitignore")]
        )

        assert result.exit_code == 1
        assert "ambiguous" in result.output

    def test_no_interactive_without_selection(self, runner: CliRunner, cached_env: Path) -> None:
        """--no-interactive alone is rejected."""
        result = runner.invoke(app, ["generate", "--no-interactive"])

        assert result.exit_code == 1
        assert "--no-interactive requires" in result.output

    def test_wizard_needs_tty(self, runner: CliRunner, cached_env: Path) -> None:
        """The wizard refuses to run without a terminal."""
        result = runner.invoke(app, ["generate"])

        assert result.exit_code == 1
        assert "requires a TTY" in result.output

    def test_invalid_config(
        self, runner: CliRunner, cached_env: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A broken config file is reported before any command runs."""
        config = cached_env / "config.toml"
        config.write_text("timeout = 'soon'\n")
        monkeypatch.setenv("IGNORE_HUB_CONFIG", str(config))

        result = runner.invoke(app, ["generate", "-t", "node"])

        assert result.exit_code == 1
        assert "Invalid config file" in result.output


# =============================================================================
# List Command Tests
# =============================================================================

class TestListCommand:
    """Tests for the list command."""

    def test_lists_cached_index(self, runner: CliRunner, cached_env: Path) -> None:
        """All cached templates are shown."""
        result = runner.invoke(app, ["list"])

        assert result.exit_code == 0, result.output
        assert "Templates (5)" in result.output
        assert "Global/MonoDevelop" in result.output
        assert "Index from cache" in result.output

    def test_filter_by_kind(self, runner: CliRunner, cached_env: Path) -> None:
        """--kind limits the table."""
        result = runner.invoke(app, ["list", "--kind", "language"])

        assert result.exit_code == 0, result.output
        assert "Templates (2)" in result.output
        assert "Unity" not in result.output


# =============================================================================
# Detect Command Tests
# =============================================================================

class TestDetectCommand:
    """Tests for the detect command."""

    def test_detects_templates(self, runner: CliRunner, isolated_env: Path, tmp_path: Path) -> None:
        """Detected ids are printed one per line."""
        project = tmp_path / "project"
        project.mkdir()
        (project / "go.mod").touch()

        result = runner.invoke(app, ["detect", str(project)])

        assert result.exit_code == 0
        assert result.output.split() == ["go"]

    def test_nothing_detected(self, runner: CliRunner, isolated_env: Path, tmp_path: Path) -> None:
        """An empty directory reports nothing."""
        project = tmp_path / "empty"
        project.mkdir()

        result = runner.invoke(app, ["detect", str(project)])

        assert result.exit_code == 0
        assert "No templates detected" in result.output
