"""
ignore_hub.wizard - Interactive Template Selection
==================================================

The wizard started when ``ignore-hub generate`` runs without
``--template``/``--auto`` in a terminal.

Flow
----
    select   -> searchable checkbox list, grouped by template kind
    preview  -> merged result shown in a panel
    done     -> confirm and write (or print with --stdout)

Prompts use questionary, output uses rich, the same pair the rest of the
CLI uses.
"""

from __future__ import annotations

import sys
from itertools import groupby
from typing import TYPE_CHECKING

import questionary
import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from ignore_hub.errors import TemplateFetchError, UsageError
from ignore_hub.generator import (
    GenerationResult,
    load_index,
    preview_generation,
    write_output,
)
from ignore_hub.github import fetch_template_source
from ignore_hub.models import TemplateWithSource


if TYPE_CHECKING:
    from collections.abc import Iterable

    import httpx

    from ignore_hub.config import Settings
    from ignore_hub.models import GenerateOptions, TemplateRecord


KIND_LABELS = {
    "language": "Languages",
    "framework": "Frameworks & tools",
    "global": "Editors & operating systems",
}


def is_interactive_capable() -> bool:
    """Both stdin and stdout must be terminals."""
    return sys.stdin.isatty() and sys.stdout.isatty()


def group_choices(templates: Iterable[TemplateRecord]) -> list[questionary.Choice | questionary.Separator]:
    """
    Checkbox entries for ``templates``, one separator per kind.

    Templates are listed in index order (kind, then name). Choice values are
    the records themselves.
    """
    ordered = sorted(templates, key=lambda t: t.sort_key)
    choices: list[questionary.Choice | questionary.Separator] = []
    for kind, group in groupby(ordered, key=lambda t: t.kind.value):
        choices.append(questionary.Separator(f"── {KIND_LABELS.get(kind, kind)} ──"))
        choices.extend(questionary.Choice(title=t.name, value=t) for t in group)
    return choices


def prompt_templates(templates: list[TemplateRecord]) -> list[TemplateRecord]:
    """
    Ask the user to pick templates.

    Raises
    ------
    typer.Abort
        If the prompt is cancelled (Ctrl-C).
    """
    result = questionary.checkbox(
        "Which templates should go into your .gitignore?",
        choices=group_choices(templates),
        validate=lambda selected: bool(selected) or "Select at least one template",
        use_search_filter=True,
        use_jk_keys=False,
    ).ask()

    if result is None:
        raise typer.Abort()

    return result


def fetch_selected(
    templates: list[TemplateRecord],
    settings: Settings,
    client: httpx.Client | None = None,
) -> tuple[list[TemplateWithSource], list[str]]:
    """
    Fetch every selected body.

    Unlike the direct pipeline, failures do not abort: the preview shows
    what could be fetched and names the rest.

    Returns
    -------
    tuple[list[TemplateWithSource], list[str]]
        Fetched templates in selection order, and names that failed.
    """
    fetched: list[TemplateWithSource] = []
    failures: list[str] = []
    for template in templates:
        try:
            source = fetch_template_source(template.path, client=client, timeout=settings.timeout)
        except TemplateFetchError:
            failures.append(template.name)
            continue
        fetched.append(TemplateWithSource(meta=template, source=source))
    return fetched, failures


def run_wizard(
    options: GenerateOptions,
    settings: Settings,
    client: httpx.Client | None = None,
    console: Console | None = None,
) -> GenerationResult:
    """
    Run the interactive select, preview and write flow.

    Warnings are printed on ``console`` when they occur, so the returned
    result carries none.

    Raises
    ------
    UsageError
        If no terminal is attached.
    TemplateFetchError
        If none of the selected templates could be fetched.
    typer.Abort
        If the user cancels a prompt or declines to write.
    """
    if not is_interactive_capable():
        raise UsageError(
            "Interactive mode requires a TTY. Use --no-interactive with --template or --auto."
        )

    console = console or Console()

    with console.status("Loading gitignore templates..."):
        index_result = load_index(options, settings, client=client)
    if index_result.warning:
        console.print(f"[yellow]Warning:[/] {escape(index_result.warning)}")

    selected = prompt_templates(index_result.index.templates)

    with console.status(f"Fetching {len(selected)} template(s)..."):
        fetched, failures = fetch_selected(selected, settings, client=client)

    if failures:
        console.print(f"[yellow]Could not fetch:[/] {escape(', '.join(failures))}")
    if not fetched:
        raise TemplateFetchError(
            f"Failed to fetch template source for: {', '.join(failures)}",
            failures=failures,
        )

    content = preview_generation(options, fetched)
    result = GenerationResult(
        content=content,
        output_path=options.output,
        templates=[t.meta for t in fetched],
        index_source=index_result.source,
    )

    if options.stdout:
        return result

    console.print(Panel(
        Text(content),
        title=f"[bold]Preview: {options.output}[/]",
        border_style="green",
    ))

    if not questionary.confirm(f"Write {options.output}?", default=True).ask():
        raise typer.Abort()

    write_output(options.output, content)
    result.written = True
    return result
