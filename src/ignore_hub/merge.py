"""
ignore_hub.merge - Template Merge Engine
========================================

Combines user-authored ("manual") ``.gitignore`` content with freshly
fetched template bodies into a single file.

The generated part of the file lives between two sentinel lines::

    ### IGNORE-HUB GENERATED START
    ### language: Python
    __pycache__/
    ...
    ### IGNORE-HUB GENERATED END

Everything outside the sentinels belongs to the user and is preserved on
every run, while the generated block is thrown away and rebuilt. This makes
merging idempotent: feeding the output back in with the same templates
returns it unchanged.

Rule lines (non-blank, non-comment) are deduplicated on their trimmed value
across the manual content and every template of one merge call, so no rule
is ever emitted twice. Comments and blank lines are kept as they are.

All functions here are pure: no I/O, no shared state, no exceptions.

Usage Example
-------------
>>> from ignore_hub.merge import merge_gitignore
>>> merged = merge_gitignore(
...     existing_content="dist\\n",
...     templates=[node_template],
... )
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from ignore_hub.models import MergeOptions, TemplateWithSource


if TYPE_CHECKING:
    from collections.abc import Iterable


# =============================================================================
# On-Disk Format
# =============================================================================

GENERATED_BLOCK_START = "### IGNORE-HUB GENERATED START"
GENERATED_BLOCK_END = "### IGNORE-HUB GENERATED END"

# Non-greedy so every START..END pair is removed on its own.
_GENERATED_BLOCK_PATTERN = re.compile(
    re.escape(GENERATED_BLOCK_START) + r".*?" + re.escape(GENERATED_BLOCK_END) + r"\n?",
    re.DOTALL,
)
_MARKER_LINES = frozenset({GENERATED_BLOCK_START, GENERATED_BLOCK_END})


# =============================================================================
# Line Helpers
# =============================================================================

def normalize_newlines(content: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    return content.replace("\r\n", "\n").replace("\r", "\n")


def is_rule_line(line: str) -> bool:
    """A rule line is non-blank and not a ``#`` comment once trimmed."""
    trimmed = line.strip()
    return bool(trimmed) and not trimmed.startswith("#")


def _trim_trailing_blank_lines(lines: list[str]) -> list[str]:
    end = len(lines)
    while end > 0 and not lines[end - 1].strip():
        end -= 1
    return lines[:end]


def section_header(template: TemplateWithSource, use_simple_section_separator: bool) -> str:
    """
    Header line introducing one template's section.

    Returns
    -------
    str
        ``## <name>`` in simple mode, ``### <kind>: <name>`` otherwise.
    """
    if use_simple_section_separator:
        return f"## {template.meta.name}"
    return f"### {template.meta.kind.value}: {template.meta.name}"


# =============================================================================
# Public Operations
# =============================================================================

def strip_generated_block(content: str) -> str:
    """
    Return the manual portion of an existing ``.gitignore``.

    Line endings are normalized to ``\\n``, every sentinel-delimited block
    is removed, stray marker lines are dropped and trailing whitespace is
    trimmed. Content without markers comes back unchanged apart from that
    normalization.

    Parameters
    ----------
    content : str
        Raw file content, or an empty string when the file is absent.

    Returns
    -------
    str
        The user-owned content, free of sentinel markers.

    Examples
    --------
    >>> strip_generated_block(
    ...     "venv/\\n\\n### IGNORE-HUB GENERATED START\\nx\\n### IGNORE-HUB GENERATED END\\n"
    ... )
    'venv/'
    """
    stripped = _GENERATED_BLOCK_PATTERN.sub("", normalize_newlines(content))
    # Unpaired markers would pair up with the next generated block.
    kept = [line for line in stripped.split("\n") if line not in _MARKER_LINES]
    return "\n".join(kept).rstrip()


def collect_rule_set(content: str) -> set[str]:
    """
    Collect the trimmed rule lines of ``content``.

    Comment lines and blank lines are excluded.

    Examples
    --------
    >>> sorted(collect_rule_set("# Comment\\n\\nnode_modules/\\n  dist\\n"))
    ['dist', 'node_modules/']
    """
    return {
        line.strip()
        for line in normalize_newlines(content).split("\n")
        if is_rule_line(line)
    }


def dedupe_template_lines(source: str, seen_rules: set[str]) -> list[str]:
    """
    Filter a template body against the rules already emitted.

    ``seen_rules`` is updated in place with every rule that is kept, so a
    caller can thread one set through several templates.
    """
    output: list[str] = []
    for line in normalize_newlines(source).split("\n"):
        if not is_rule_line(line):
            output.append(line)
            continue

        rule = line.strip()
        if rule in seen_rules:
            continue
        seen_rules.add(rule)
        output.append(line)

    return _trim_trailing_blank_lines(output)


def build_generated_block(
    templates: Iterable[TemplateWithSource],
    existing_rules: set[str],
    options: MergeOptions,
) -> str:
    """
    Render the generated block for ``templates`` in the given order.

    Each template gets a section header followed by its deduplicated body;
    sections are separated by exactly one blank line. The sentinels wrap
    the whole block when ``options.include_watermark`` is set.

    Parameters
    ----------
    templates : Iterable[TemplateWithSource]
        Templates in final output order.

    existing_rules : set[str]
        Rules already present in the manual content. Not modified; the
        running deduplication set is a copy local to this call.

    options : MergeOptions
        Header style and watermark toggle.

    Returns
    -------
    str
        The block without a trailing newline, or ``""`` when there are no
        templates.
    """
    seen_rules = set(existing_rules)
    sections: list[str] = []

    for template in templates:
        lines = [section_header(template, options.use_simple_section_separator)]
        lines.extend(dedupe_template_lines(template.source, seen_rules))
        sections.append("\n".join(lines))

    if not sections:
        return ""

    block = "\n\n".join(sections)
    if options.include_watermark:
        block = f"{GENERATED_BLOCK_START}\n{block}\n{GENERATED_BLOCK_END}"
    return block


def merge_gitignore(
    existing_content: str | None,
    templates: Iterable[TemplateWithSource],
    include_watermark: bool = True,
    use_simple_section_separator: bool = False,
) -> str:
    """
    Merge templates into an existing ``.gitignore``.

    Parameters
    ----------
    existing_content : str | None
        Current file content; ``None`` when the file does not exist.

    templates : Iterable[TemplateWithSource]
        Fetched templates in the order they should appear.

    include_watermark : bool
        Wrap generated content in sentinel lines. Only watermarked output
        can be regenerated in place.

    use_simple_section_separator : bool
        Use ``## <name>`` section headers.

    Returns
    -------
    str
        The new file content, always ending with a newline.

    Examples
    --------
    >>> merged = merge_gitignore("# User rules\\ndist\\n", [node_template])
    >>> merged.count("\\ndist\\n")
    1
    """
    manual = strip_generated_block(existing_content or "")
    existing_rules = collect_rule_set(manual)
    options = MergeOptions(
        include_watermark=include_watermark,
        use_simple_section_separator=use_simple_section_separator,
    )
    block = build_generated_block(templates, existing_rules, options)

    if not manual:
        return f"{block}\n"
    return f"{manual}\n\n{block}\n"
