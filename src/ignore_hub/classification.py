"""
ignore_hub.classification - Template Classification
====================================================

Turns the file paths of the upstream template repository into
:class:`~ignore_hub.models.TemplateRecord` objects and builds the
index snapshot that gets cached on disk.

Only two kinds of paths are templates:

- ``<Name>.gitignore`` at the repository root, classified as
  ``language`` or ``framework``;
- ``Global/<Name>.gitignore``, always classified as ``global``.

Root templates are matched against fixed lists of language and framework
names. Names on neither list fall back to a substring heuristic: anything
containing a language hint (``python``, ``java``...) is a language,
everything else a framework.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from ignore_hub.models import TemplateIndex, TemplateKind, TemplateRecord


if TYPE_CHECKING:
    from collections.abc import Iterable


# =============================================================================
# Name Tables
# =============================================================================

GLOBAL_PREFIX = "Global/"
GITIGNORE_SUFFIX = ".gitignore"

_ROOT_TEMPLATE_PATTERN = re.compile(r"^[^/]+\.gitignore$")
_GLOBAL_TEMPLATE_PATTERN = re.compile(r"^Global/.+\.gitignore$")
_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]+")


def normalize_template_name(name: str) -> str:
    """
    Lowercase ``name`` and drop every character outside ``[a-z0-9]``.

    Examples
    --------
    >>> normalize_template_name("Objective-C")
    'objectivec'
    >>> normalize_template_name("Global/macOS")
    'globalmacos'
    """
    return _NON_ALPHANUMERIC.sub("", name.lower())


LANGUAGE_TEMPLATE_NAMES: frozenset[str] = frozenset(
    normalize_template_name(name)
    for name in (
        "AL", "Actionscript", "Ada", "Agda", "C", "C++", "Clojure",
        "CommonLisp", "D", "Dart", "Delphi", "Elixir", "Elm", "Erlang",
        "Fortran", "Gleam", "Go", "Groovy", "Haskell", "Haxe", "Idris",
        "Java", "JavaScript", "Julia", "Kotlin", "Lua", "Luau", "Nim", "Nix",
        "OCaml", "Objective-C", "Perl", "PHP", "PureScript", "Python", "R",
        "Racket", "Raku", "ReScript", "Ruby", "Rust", "Scala", "Scheme",
        "Swift", "TeX", "VBA", "Zig",
    )
)

FRAMEWORK_TEMPLATE_NAMES: frozenset[str] = frozenset(
    normalize_template_name(name)
    for name in (
        "Angular", "AppEngine", "CakePHP", "CFWheels", "CodeIgniter",
        "Concrete5", "CraftCMS", "Dotnet", "Drupal", "EPiServer",
        "ExpressionEngine", "Firebase", "FuelPHP", "Grails", "JENKINS_HOME",
        "Jekyll", "Joomla", "Kohana", "Laravel", "Maven", "Nanoc", "Nestjs",
        "Nextjs", "Node", "PlayFramework", "Plone", "Prestashop", "Rails",
        "Sass", "SymphonyCMS", "Symfony", "Terraform", "TurboGears2",
        "Typo3", "Unity", "UnrealEngine", "VisualStudio", "WordPress",
        "Yeoman", "Yii", "ZendFramework",
    )
)

# Substrings that mark an unlisted root template as a language.
LANGUAGE_HINTS: tuple[str, ...] = (
    "python", "java", "kotlin", "swift", "ruby", "rust", "perl", "php",
    "haskell", "scala", "clojure", "ocaml", "nim", "nix", "racket", "raku",
    "lua", "dart", "elixir", "erlang", "fortran", "julia", "zig",
    "cplusplus", "objectivec", "actionscript", "typescript",
)


# =============================================================================
# Path Parsing
# =============================================================================

def is_supported_template_path(path: str) -> bool:
    """True for root-level and ``Global/`` ``.gitignore`` files."""
    return bool(_ROOT_TEMPLATE_PATTERN.match(path) or _GLOBAL_TEMPLATE_PATTERN.match(path))


def get_template_id_from_path(path: str) -> str:
    """
    Template id for ``path``: the path without its ``.gitignore`` suffix.

    Examples
    --------
    >>> get_template_id_from_path("Global/JetBrains.gitignore")
    'Global/JetBrains'
    """
    return path.removesuffix(GITIGNORE_SUFFIX)


def get_template_name_from_path(path: str) -> str:
    """Display name for ``path``. Identical to the id."""
    return get_template_id_from_path(path)


def classify_root_template(template_name: str) -> TemplateKind:
    """
    Classify a root-level template by name.

    Parameters
    ----------
    template_name : str
        Template name such as ``Python`` or ``LangChain``.

    Returns
    -------
    TemplateKind
        ``LANGUAGE`` or ``FRAMEWORK``; never ``GLOBAL``.
    """
    normalized = normalize_template_name(template_name)

    if normalized in LANGUAGE_TEMPLATE_NAMES:
        return TemplateKind.LANGUAGE
    if normalized in FRAMEWORK_TEMPLATE_NAMES:
        return TemplateKind.FRAMEWORK
    if any(hint in normalized for hint in LANGUAGE_HINTS):
        return TemplateKind.LANGUAGE
    return TemplateKind.FRAMEWORK


def classify_template_path(path: str) -> TemplateRecord | None:
    """
    Build the record for one repository path.

    Returns
    -------
    TemplateRecord | None
        ``None`` when ``path`` is not a supported template file.
    """
    if not is_supported_template_path(path):
        return None

    template_id = get_template_id_from_path(path)
    name = get_template_name_from_path(path)

    if path.startswith(GLOBAL_PREFIX):
        kind = TemplateKind.GLOBAL
    else:
        kind = classify_root_template(name)

    return TemplateRecord(id=template_id, name=name, path=path, kind=kind)


# =============================================================================
# Index Building
# =============================================================================

def sort_templates(templates: Iterable[TemplateRecord]) -> list[TemplateRecord]:
    """Sort by kind, then case-insensitive name."""
    return sorted(templates, key=lambda t: t.sort_key)


def build_template_index(paths: Iterable[str]) -> TemplateIndex:
    """
    Classify ``paths`` into a fresh index snapshot.

    Unsupported paths are dropped. The snapshot is stamped with the
    current UTC time.
    """
    records = (classify_template_path(path) for path in paths)
    return TemplateIndex(
        fetched_at=datetime.now(UTC).isoformat(),
        templates=sort_templates(r for r in records if r is not None),
    )
