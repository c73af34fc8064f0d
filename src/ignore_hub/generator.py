"""
ignore_hub.generator - Generation Pipeline
==========================================

Orchestrates a non-interactive run: from template names on the command
line to a written ``.gitignore``.

Pipeline
--------
    1. Check the option combination
    2. Load the template index (cache or network)
    3. Collect queries: explicit names + auto-detected templates
    4. Resolve queries to template records (all-or-nothing)
    5. Fetch every template body
    6. Read the existing output file and merge
    7. Write the file, or hand the content back for ``--stdout``

Steps 4 and 6 are the pure core (:mod:`ignore_hub.resolver`,
:mod:`ignore_hub.merge`); everything else is I/O. Nothing is retried:
``--refresh`` is how a user retries with a fresh index.

Usage Example
-------------
>>> from ignore_hub.generator import run_generation
>>> from ignore_hub.models import GenerateOptions
>>> result = run_generation(GenerateOptions(templates=["python"]))
>>> result.output_path
PosixPath('/current/dir/.gitignore')
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from ignore_hub.cache import load_template_index
from ignore_hub.classification import normalize_template_name
from ignore_hub.config import Settings
from ignore_hub.detector import detect_project_templates
from ignore_hub.errors import ResolutionError, UsageError
from ignore_hub.github import fetch_templates_with_source
from ignore_hub.merge import merge_gitignore
from ignore_hub.resolver import resolve_template_queries


if TYPE_CHECKING:
    import httpx

    from ignore_hub.models import (
        GenerateOptions,
        IndexLoadResult,
        TemplateIndex,
        TemplateRecord,
        TemplateWithSource,
    )


logger = logging.getLogger(__name__)


# =============================================================================
# Result Data Classes
# =============================================================================

@dataclass
class GenerationResult:
    """
    Outcome of a generation run.

    Attributes
    ----------
    content : str
        The merged ``.gitignore`` content.

    output_path : Path
        Target file (read from, and written to unless ``written`` is False).

    written : bool
        Whether ``content`` was written to ``output_path``.

    templates : list[TemplateRecord]
        Templates merged, in output order.

    index_source : str
        ``"network"`` or ``"cache"``.

    warnings : list[str]
        Non-fatal problems, such as a failed index refresh.
    """

    content: str
    output_path: Path
    written: bool = False
    templates: list[TemplateRecord] = field(default_factory=list)
    index_source: str = "cache"
    warnings: list[str] = field(default_factory=list)


# =============================================================================
# File Helpers
# =============================================================================

def read_existing_output(path: Path) -> str | None:
    """
    Read the current output file.

    Returns
    -------
    str | None
        The content, or ``None`` when the file does not exist.
    """
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None


def write_output(path: Path, content: str) -> None:
    """Write the merged content as UTF-8, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


# =============================================================================
# Pipeline Steps
# =============================================================================

def validate_options(options: GenerateOptions) -> None:
    """
    Reject option combinations that cannot produce a run.

    Raises
    ------
    UsageError
        If ``--no-interactive`` is given without ``--template``/``--auto``.
    """
    if options.non_interactive and not options.has_selection:
        raise UsageError("--no-interactive requires --template or --auto.")


def load_index(
    options: GenerateOptions,
    settings: Settings,
    client: httpx.Client | None = None,
) -> IndexLoadResult:
    """Load the template index as configured by ``settings``."""
    return load_template_index(
        options.refresh,
        settings.cache_file,
        client=client,
        timeout=settings.timeout,
    )


def collect_queries(
    options: GenerateOptions,
    index: TemplateIndex,
    project_path: Path,
) -> list[str]:
    """
    Template queries for this run.

    Explicit names come first. With ``auto``, detected template ids are
    appended, but only those that exist in ``index`` so that a detection
    rule for a template missing upstream cannot fail the run.
    """
    queries = list(options.templates)
    if not options.auto:
        return queries

    available = {normalize_template_name(t.id) for t in index.templates}
    detected = detect_project_templates(project_path)
    supported = [d for d in detected if normalize_template_name(d) in available]
    logger.debug("Detected templates: %s (supported: %s)", detected, supported)
    return queries + supported


def resolve_templates(queries: list[str], index: TemplateIndex) -> list[TemplateRecord]:
    """
    Resolve every query or fail with all issues at once.

    Raises
    ------
    ResolutionError
        If any query is ambiguous or unknown.
    """
    resolution = resolve_template_queries(index.templates, queries)
    if not resolution.ok:
        raise ResolutionError(resolution.issues)
    logger.debug("Resolved templates: %s", [t.id for t in resolution.selected])
    return resolution.selected


def preview_generation(
    options: GenerateOptions,
    templates: list[TemplateWithSource],
) -> str:
    """Merge fetched templates with the current output file, without writing."""
    return merge_gitignore(
        existing_content=read_existing_output(options.output),
        templates=templates,
        include_watermark=options.include_watermark,
        use_simple_section_separator=options.use_simple_section_separator,
    )


# =============================================================================
# Main Entry Point
# =============================================================================

def run_generation(
    options: GenerateOptions,
    settings: Settings | None = None,
    client: httpx.Client | None = None,
    project_path: Path | None = None,
) -> GenerationResult:
    """
    Run the non-interactive pipeline.

    Parameters
    ----------
    options : GenerateOptions
        What to generate and where.

    settings : Settings | None
        Cache location and HTTP timeout. Defaults apply when ``None``.

    client : httpx.Client | None
        Shared HTTP client for the index and template requests.

    project_path : Path | None
        Directory inspected by ``--auto``. Defaults to the working directory.

    Returns
    -------
    GenerationResult
        The merged content and where it went. With ``options.stdout`` the
        file is left untouched and ``written`` is False.

    Raises
    ------
    UsageError
        If the options select no templates.
    IndexLoadError
        If no template index is available.
    ResolutionError
        If any template query fails to resolve.
    TemplateFetchError
        If any template body cannot be downloaded.
    """
    settings = settings or Settings()
    validate_options(options)

    index_result = load_index(options, settings, client=client)
    warnings = [index_result.warning] if index_result.warning else []

    queries = collect_queries(options, index_result.index, project_path or Path.cwd())
    if not queries:
        raise UsageError("No templates resolved. Use --template <names> or --auto.")

    selected = resolve_templates(queries, index_result.index)
    templates = fetch_templates_with_source(selected, client=client, timeout=settings.timeout)
    content = preview_generation(options, templates)

    result = GenerationResult(
        content=content,
        output_path=options.output,
        templates=selected,
        index_source=index_result.source,
        warnings=warnings,
    )

    if options.stdout:
        if not result.content.endswith("\n"):
            result.content += "\n"
        return result

    write_output(options.output, content)
    result.written = True
    logger.debug("Wrote %d bytes to %s", len(content), options.output)
    return result
