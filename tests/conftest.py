"""
pytest configuration and shared fixtures for ignore-hub tests.

Fixtures defined here are automatically available to all tests.

Fixtures
--------
template_index : list[TemplateRecord]
    A small template index covering every kind.

node_template, nextjs_template : TemplateWithSource
    Templates with fetched bodies for merge tests.

cache_file : Path
    A temporary cache file pre-filled with ``template_index``.

isolated_env : Path
    Points config and cache environment variables at a temporary directory.
"""

from pathlib import Path

import httpx
import pytest

from ignore_hub.models import (
    TemplateIndex,
    TemplateKind,
    TemplateRecord,
    TemplateWithSource,
)


def make_record(template_id: str, kind: TemplateKind) -> TemplateRecord:
    """Build a record the way the classifier does."""
    return TemplateRecord(
        id=template_id,
        name=template_id,
        path=f"{template_id}.gitignore",
        kind=kind,
    )


@pytest.fixture
def template_index() -> list[TemplateRecord]:
    """A small index with languages, frameworks and a global template."""
    return [
        make_record("Java", TemplateKind.LANGUAGE),
        make_record("JavaScript", TemplateKind.LANGUAGE),
        make_record("Node", TemplateKind.FRAMEWORK),
        make_record("Global/MonoDevelop", TemplateKind.GLOBAL),
        make_record("Unity", TemplateKind.FRAMEWORK),
    ]


@pytest.fixture
def node_template() -> TemplateWithSource:
    """The Node template with a short body."""
    return TemplateWithSource(
        meta=make_record("Node", TemplateKind.FRAMEWORK),
        source="# Node\nnode_modules/\ndist\n",
    )


@pytest.fixture
def nextjs_template() -> TemplateWithSource:
    """The Nextjs template, sharing ``dist`` with Node."""
    return TemplateWithSource(
        meta=make_record("Nextjs", TemplateKind.FRAMEWORK),
        source="# Next\n.next\ndist\n",
    )


@pytest.fixture
def cache_file(tmp_path: Path, template_index: list[TemplateRecord]) -> Path:
    """A valid cached index in a temporary cache directory."""
    path = tmp_path / "cache" / "index.json"
    path.parent.mkdir()
    index = TemplateIndex(fetched_at="2025-01-01T00:00:00+00:00", templates=template_index)
    path.write_text(index.to_json(), encoding="utf-8")
    return path


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep tests away from the real config file and cache."""
    monkeypatch.setenv("IGNORE_HUB_CONFIG", str(tmp_path / "missing-config.toml"))
    monkeypatch.setenv("IGNORE_HUB_CACHE_DIR", str(tmp_path / "cache"))
    monkeypatch.delenv("IGNORE_HUB_LOG_LEVEL", raising=False)
    return tmp_path


@pytest.fixture
def offline_client() -> httpx.Client:
    """An HTTP client whose every request fails with a connection error."""
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("network disabled", request=request)

    return httpx.Client(transport=httpx.MockTransport(handler))


# =============================================================================
# pytest Configuration
# =============================================================================

def pytest_configure(config: pytest.Config) -> None:
    """
    Register custom markers used in the test suite.
    """
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
