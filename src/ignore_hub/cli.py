"""
ignore_hub.cli - Command Line Interface
=======================================

Typer-based command line interface for ignore-hub.

Architecture
------------
    app (main entry point, installed as ``ignore-hub`` and ``ih``)
    ├── generate - Merge templates into a .gitignore (wizard or direct)
    ├── list     - Show the template index
    └── detect   - Show templates detected from a project layout

``generate`` is direct when ``--template`` or ``--auto`` is given and
interactive otherwise. ``--no-interactive`` makes the direct mode
mandatory.

Usage Examples
--------------
Interactive wizard:
    $ ignore-hub generate

Direct generation:
    $ ignore-hub generate -t python,node --auto

Print instead of writing:
    $ ignore-hub generate -t go --stdout

See Also
--------
- generator.py: Non-interactive pipeline
- wizard.py: Interactive flow
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import httpx
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ignore_hub import __version__
from ignore_hub.config import Settings, load_settings
from ignore_hub.detector import detect_project_templates
from ignore_hub.errors import IgnoreHubError
from ignore_hub.generator import load_index, run_generation
from ignore_hub.log import setup_logging
from ignore_hub.models import GenerateOptions, TemplateKind
from ignore_hub.wizard import run_wizard


# =============================================================================
# CLI Application Setup
# =============================================================================

app = typer.Typer(
    name="ignore-hub",
    help="Generate a .gitignore from github/gitignore templates.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=True,
)

# stdout carries generated content with --stdout, so messages go to stderr
console = Console()
err_console = Console(stderr=True)


def fail(error: Exception) -> typer.Exit:
    """Print ``error`` and return the exit to raise."""
    err_console.print(f"[red]Error:[/] {escape(str(error))}")
    return typer.Exit(1)


def get_settings(ctx: typer.Context) -> Settings:
    """Settings loaded by the app callback (defaults when run standalone)."""
    if isinstance(ctx.obj, Settings):
        return ctx.obj
    return Settings()


def http_client(settings: Settings) -> httpx.Client:
    """One client shared by every request of a command."""
    return httpx.Client(timeout=settings.timeout, follow_redirects=True)


# =============================================================================
# Version Callback
# =============================================================================

def version_callback(value: bool) -> None:
    """Print the installed version and exit."""
    if value:
        console.print(f"[bold green]ignore-hub[/] {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            help="Log every pipeline step to stderr.",
        ),
    ] = False,
) -> None:
    """
    [bold]ignore-hub[/] - Generate a .gitignore from github/gitignore templates.

    Templates are merged into your existing file: your own rules stay on
    top, the generated block is replaced on every run, and no rule is
    written twice.

    [bold]Quick Start:[/]

        ignore-hub generate

    [bold]Non-interactive:[/]

        ignore-hub generate -t python,node --no-interactive
    """
    try:
        settings = load_settings()
    except ValueError as e:
        raise fail(e) from e

    setup_logging(settings.log_level, verbose=verbose)
    ctx.obj = settings


# =============================================================================
# Generate Command
# =============================================================================

@app.command()
def generate(
    ctx: typer.Context,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output file path (default: ./.gitignore)",
        ),
    ] = None,
    template: Annotated[
        list[str] | None,
        typer.Option(
            "--template",
            "-t",
            help="Templates to include, comma separated or repeated",
        ),
    ] = None,
    auto: Annotated[
        bool,
        typer.Option(
            "--auto",
            "-a",
            help="Detect templates from the current project layout",
        ),
    ] = False,
    refresh: Annotated[
        bool,
        typer.Option(
            "--refresh",
            help="Refresh the template index from GitHub",
        ),
    ] = False,
    stdout: Annotated[
        bool,
        typer.Option(
            "--stdout",
            help="Print the result instead of writing the file",
        ),
    ] = False,
    simple_separation: Annotated[
        bool,
        typer.Option(
            "--simple-separation",
            "-s",
            help="Use `## <Template>` headers and omit the IGNORE-HUB markers",
        ),
    ] = False,
    no_interactive: Annotated[
        bool,
        typer.Option(
            "--no-interactive",
            help="Never start the wizard (requires --template or --auto)",
        ),
    ] = False,
) -> None:
    """
    Generate or update a .gitignore.

    Without [cyan]--template[/] or [cyan]--auto[/] an interactive wizard
    lets you pick templates and preview the result.

    [bold]Examples:[/]

        # Interactive wizard
        ignore-hub generate

        # Python + macOS, written to ./.gitignore
        ignore-hub generate -t python -t global/macos

        # Detect from the project, print to stdout
        ignore-hub generate --auto --stdout
    """
    settings = get_settings(ctx)
    simple = simple_separation or settings.simple_separator

    try:
        options = GenerateOptions(
            output=(output or settings.output).resolve(),
            refresh=refresh,
            stdout=stdout,
            templates=template or [],
            auto=auto,
            non_interactive=no_interactive,
            include_watermark=not simple,
            use_simple_section_separator=simple,
        )

        with http_client(settings) as client:
            if options.has_selection or options.non_interactive:
                result = run_generation(options, settings, client=client)
            else:
                result = run_wizard(options, settings, client=client, console=err_console)
    except (IgnoreHubError, OSError, ValueError) as e:
        raise fail(e) from e

    for warning in result.warnings:
        err_console.print(f"[yellow]Warning:[/] {escape(warning)}")

    if options.stdout:
        typer.echo(result.content, nl=False)
        return

    console.print(f"[green]✓[/] IgnoreHub: generated .gitignore at {escape(str(result.output_path))}")


# =============================================================================
# List Command
# =============================================================================

@app.command("list")
def list_templates(
    ctx: typer.Context,
    kind: Annotated[
        TemplateKind | None,
        typer.Option(
            "--kind",
            "-k",
            help="Only show templates of this kind",
        ),
    ] = None,
    refresh: Annotated[
        bool,
        typer.Option(
            "--refresh",
            help="Refresh the template index from GitHub",
        ),
    ] = False,
) -> None:
    """
    List available templates.

    [bold]Example:[/]

        ignore-hub list --kind language
    """
    settings = get_settings(ctx)

    try:
        with http_client(settings) as client:
            index_result = load_index(GenerateOptions(refresh=refresh), settings, client=client)
    except (IgnoreHubError, OSError) as e:
        raise fail(e) from e

    if index_result.warning:
        err_console.print(f"[yellow]Warning:[/] {escape(index_result.warning)}")

    templates = [
        t for t in index_result.index.templates if kind is None or t.kind == kind
    ]

    table = Table(title=f"Templates ({len(templates)})", show_header=True)
    table.add_column("Template", style="cyan")
    table.add_column("Kind", style="green")
    for t in templates:
        table.add_row(escape(t.id), t.kind.value)

    console.print(table)
    console.print(f"[dim]Index from {index_result.source}, fetched {index_result.index.fetched_at}[/]")


# =============================================================================
# Detect Command
# =============================================================================

@app.command()
def detect(
    path: Annotated[
        Path,
        typer.Argument(
            help="Project directory to inspect",
            exists=True,
            file_okay=False,
            dir_okay=True,
        ),
    ] = Path("."),
) -> None:
    """
    Show templates detected from a project layout (what --auto uses).

    [bold]Example:[/]

        ignore-hub detect ./myproject
    """
    detected = detect_project_templates(path)
    if not detected:
        console.print("[yellow]No templates detected.[/]")
        return

    for template_id in detected:
        console.print(template_id)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    app()
