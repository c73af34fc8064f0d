"""
ignore_hub.models - Pydantic Models for Templates and Runs
===========================================================

This module defines the data models shared by every layer of ignore-hub.
Pydantic gives us validation of cached index files, JSON serialization,
and immutable template records for free.

Architecture Notes
------------------
The models are organized around the template index:

    TemplateIndex (cached snapshot)
    └── templates: list[TemplateRecord]
        ├── id: str
        ├── name: str
        ├── path: str
        └── kind: TemplateKind (enum)

    TemplateWithSource      record + fetched body, transient
    MergeOptions            how the generated block is rendered
    ResolutionResult        outcome of resolving free-text queries
    └── issues: list[ResolutionIssue]
    GenerateOptions         everything one generation run needs

Usage Example
-------------
>>> from ignore_hub.models import TemplateKind, TemplateRecord
>>> record = TemplateRecord(
...     id="Node", name="Node", path="Node.gitignore", kind=TemplateKind.FRAMEWORK
... )
>>> record.sort_key
('framework', 'node')
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# Enumerations
# =============================================================================

class TemplateKind(str, Enum):
    """
    Classification tag of a template, fixed when the index is built.

    Attributes
    ----------
    LANGUAGE : str
        A programming language template (``Python.gitignore``).

    FRAMEWORK : str
        A framework, tool or engine template (``Node.gitignore``).
        Unknown root templates land here as well.

    GLOBAL : str
        An editor/OS template from the ``Global/`` namespace.
    """

    LANGUAGE = "language"
    FRAMEWORK = "framework"
    GLOBAL = "global"


class IssueType(str, Enum):
    """Why a query could not be resolved to a single template."""

    AMBIGUOUS = "ambiguous"
    UNKNOWN = "unknown"


# =============================================================================
# Template Models
# =============================================================================

class TemplateRecord(BaseModel):
    """
    Canonical identity of one selectable template.

    Records are frozen: they are created when the remote template tree is
    classified and replaced wholesale on refresh.

    Attributes
    ----------
    id : str
        Unique identifier, the file path without ``.gitignore``
        (``Python``, ``Global/macOS``).

    name : str
        Display name used in section headers.

    path : str
        Repository-relative path used to fetch the body.

    kind : TemplateKind
        Classification tag.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1, description="Unique template identifier")
    name: str = Field(min_length=1, description="Display name")
    path: str = Field(min_length=1, description="Path of the template file")
    kind: TemplateKind = Field(description="Template classification")

    @property
    def sort_key(self) -> tuple[str, str]:
        """Ordering used whenever several templates are listed: kind, then name."""
        return (self.kind.value, self.name.casefold())


class TemplateWithSource(BaseModel):
    """A template record paired with its fetched raw text body."""

    meta: TemplateRecord
    source: str


class MergeOptions(BaseModel):
    """
    Rendering options for the generated block.

    Attributes
    ----------
    include_watermark : bool
        Wrap generated content in the start/end sentinel lines.

    use_simple_section_separator : bool
        Use ``## <name>`` headers instead of ``### <kind>: <name>``.

    Examples
    --------
    >>> MergeOptions.simple()
    MergeOptions(include_watermark=False, use_simple_section_separator=True)
    """

    model_config = ConfigDict(frozen=True)

    include_watermark: bool = True
    use_simple_section_separator: bool = False

    @classmethod
    def simple(cls) -> MergeOptions:
        """Options selected by the single ``--simple-separation`` toggle."""
        return cls(include_watermark=False, use_simple_section_separator=True)


# =============================================================================
# Index Snapshot
# =============================================================================

class TemplateIndex(BaseModel):
    """
    A snapshot of the remote template tree, as cached on disk.

    The JSON keys use camelCase (``fetchedAt``, ``sourceRef``) so cache
    files written by earlier releases keep loading.
    """

    model_config = ConfigDict(populate_by_name=True)

    fetched_at: str = Field(alias="fetchedAt", description="ISO-8601 fetch time")
    source_ref: Literal["main"] = Field(default="main", alias="sourceRef")
    templates: list[TemplateRecord] = Field(default_factory=list)

    def to_json(self) -> str:
        """Serialize with the on-disk key names."""
        return self.model_dump_json(by_alias=True, indent=2)


class IndexLoadResult(BaseModel):
    """Where a loaded index came from and any non-fatal warning."""

    index: TemplateIndex
    source: Literal["network", "cache"]
    warning: str | None = None


# =============================================================================
# Query Resolution
# =============================================================================

class ResolutionIssue(BaseModel):
    """
    A query that did not resolve to exactly one template.

    Attributes
    ----------
    type : IssueType
        ``ambiguous`` when several templates matched, ``unknown`` when
        none could be picked.

    query : str
        The normalized candidate query the issue was raised for.

    raw_query : str
        The query as the user typed it (trimmed).

    matches : list[TemplateRecord]
        Competing matches (ambiguous) or suggestions (unknown, at most 8).
    """

    type: IssueType
    query: str
    raw_query: str
    matches: list[TemplateRecord] = Field(default_factory=list)


class ResolutionResult(BaseModel):
    """Selected templates, in first-occurrence order, plus every issue found."""

    selected: list[TemplateRecord] = Field(default_factory=list)
    issues: list[ResolutionIssue] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when every query resolved to a single template."""
        return not self.issues


# =============================================================================
# Run Options
# =============================================================================

class GenerateOptions(BaseModel):
    """
    Options for one generation run, built by the CLI.

    Attributes
    ----------
    output : Path
        File the merged ``.gitignore`` is written to (and read from).

    refresh : bool
        Force a network refresh of the template index.

    stdout : bool
        Print the merged content instead of writing it.

    templates : list[str]
        Free-text template queries. Comma-separated entries are split.

    auto : bool
        Add templates detected from the project layout.

    non_interactive : bool
        Never start the wizard.

    include_watermark, use_simple_section_separator : bool
        Forwarded to the merge engine.
    """

    output: Path = Field(default_factory=lambda: Path.cwd() / ".gitignore")
    refresh: bool = False
    stdout: bool = False
    templates: list[str] = Field(default_factory=list)
    auto: bool = False
    non_interactive: bool = False
    include_watermark: bool = True
    use_simple_section_separator: bool = False

    @field_validator("templates", mode="before")
    @classmethod
    def split_template_values(cls, v: list[str] | str | None) -> list[str]:
        """
        Split comma-separated values and drop blanks.

        ``-t node,python -t go`` arrives as ``["node,python", "go"]`` and
        becomes ``["node", "python", "go"]``.
        """
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        names: list[str] = []
        for value in v:
            for raw in value.split(","):
                trimmed = raw.strip()
                if trimmed:
                    names.append(trimmed)
        return names

    @property
    def merge_options(self) -> MergeOptions:
        """The merge engine's view of these options."""
        return MergeOptions(
            include_watermark=self.include_watermark,
            use_simple_section_separator=self.use_simple_section_separator,
        )

    @property
    def has_selection(self) -> bool:
        """Whether templates were chosen on the command line."""
        return bool(self.templates) or self.auto
