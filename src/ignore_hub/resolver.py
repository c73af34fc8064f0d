"""
ignore_hub.resolver - Template Query Resolver
=============================================

Maps user-typed template names (``js``, ``python``, ``global/macos``) onto
template records from the index.

Matching Rules
--------------
Queries and candidate ids/names are compared in normalized form: lowercase
with everything outside ``[a-z0-9]`` removed. A raw query expands into a
list of candidate queries, alias targets first::

    "js"      -> ["javascript", "js"]
    "Python"  -> ["python"]

Each candidate query is tried in turn:

1. exact match on normalized id or name;
2. substring match on normalized id or name.

The first pass that finds anything decides: one match resolves, several
matches are reported as ``ambiguous``. When no candidate query matched at
all, a prefix match across every candidate query is the last chance; a
single hit resolves, anything else is reported as ``unknown`` with at most
8 suggestions.

Nothing here raises. Issues are returned as data so the caller can show
all of them at once.

Usage Example
-------------
>>> from ignore_hub.resolver import resolve_template_queries
>>> result = resolve_template_queries(index.templates, ["js", "node"])
>>> [t.id for t in result.selected]
['JavaScript', 'Node']
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from ignore_hub.classification import normalize_template_name
from ignore_hub.models import (
    IssueType,
    ResolutionIssue,
    ResolutionResult,
    TemplateRecord,
)


if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence


# Short-hands -> canonical names, keyed by normalized query.
TEMPLATE_ALIASES: MappingProxyType[str, tuple[str, ...]] = MappingProxyType({
    "js": ("javascript",),
    "nodejs": ("node",),
    "ts": ("typescript",),
    "csharp": ("csharp", "c#"),
    "py": ("python",),
})

MAX_SUGGESTIONS = 8


# =============================================================================
# Matching Helpers
# =============================================================================

def _normalized_keys(template: TemplateRecord) -> tuple[str, str]:
    return normalize_template_name(template.id), normalize_template_name(template.name)


def _matches_exact(template: TemplateRecord, query: str) -> bool:
    return query in _normalized_keys(template)


def _matches_substring(template: TemplateRecord, query: str) -> bool:
    return any(query in key for key in _normalized_keys(template))


def _matches_prefix(template: TemplateRecord, query: str) -> bool:
    return any(key.startswith(query) for key in _normalized_keys(template))


def dedupe_by_id(templates: Iterable[TemplateRecord]) -> list[TemplateRecord]:
    """Keep the first record for every id, preserving order."""
    seen: set[str] = set()
    output: list[TemplateRecord] = []
    for template in templates:
        if template.id in seen:
            continue
        seen.add(template.id)
        output.append(template)
    return output


def _candidates(
    templates: Sequence[TemplateRecord],
    query: str,
    predicate: Callable[[TemplateRecord, str], bool],
) -> list[TemplateRecord]:
    matched = dedupe_by_id(t for t in templates if predicate(t, query))
    return sorted(matched, key=lambda t: t.sort_key)


def expand_query(raw_query: str) -> list[str]:
    """
    Candidate queries for ``raw_query``, alias expansions first.

    Examples
    --------
    >>> expand_query("JS")
    ['javascript', 'js']
    >>> expand_query("C#")
    ['c']
    """
    normalized = normalize_template_name(raw_query)
    expanded = [
        normalize_template_name(alias)
        for alias in TEMPLATE_ALIASES.get(normalized, (normalized,))
    ]
    # dict.fromkeys keeps first-seen order
    return list(dict.fromkeys([*expanded, normalized]))


# =============================================================================
# Resolution
# =============================================================================

def resolve_query(
    templates: Sequence[TemplateRecord],
    raw_query: str,
) -> TemplateRecord | ResolutionIssue:
    """
    Resolve one query to a single record or an issue.

    Parameters
    ----------
    templates : Sequence[TemplateRecord]
        The template index.

    raw_query : str
        The query as typed, already trimmed.

    Returns
    -------
    TemplateRecord | ResolutionIssue
        The match, or the reason there is no single match.
    """
    queries = expand_query(raw_query)

    for query in queries:
        for predicate in (_matches_exact, _matches_substring):
            candidates = _candidates(templates, query, predicate)
            if len(candidates) == 1:
                return candidates[0]
            if len(candidates) > 1:
                return ResolutionIssue(
                    type=IssueType.AMBIGUOUS,
                    query=query,
                    raw_query=raw_query,
                    matches=candidates,
                )

    fallback = dedupe_by_id(
        template
        for query in queries
        for template in _candidates(templates, query, _matches_prefix)
    )
    if len(fallback) == 1:
        return fallback[0]

    return ResolutionIssue(
        type=IssueType.UNKNOWN,
        query=queries[0],
        raw_query=raw_query,
        matches=fallback[:MAX_SUGGESTIONS],
    )


def resolve_template_queries(
    templates: Sequence[TemplateRecord],
    raw_queries: Iterable[str],
) -> ResolutionResult:
    """
    Resolve a batch of queries.

    Blank queries are skipped. Resolved records are collected in
    first-occurrence order and deduplicated by id; a query that resolves
    to an already selected template is dropped silently. Every query that
    fails adds one issue.

    Callers should treat the batch as failed when ``result.issues`` is
    non-empty.

    Examples
    --------
    >>> result = resolve_template_queries(index, ["node", "java", "node"])
    >>> [t.id for t in result.selected]
    ['Node', 'Java']
    """
    result = ResolutionResult()
    seen: set[str] = set()

    for raw_query in raw_queries:
        query = raw_query.strip()
        if not query:
            continue

        outcome = resolve_query(templates, query)
        if isinstance(outcome, ResolutionIssue):
            result.issues.append(outcome)
            continue

        if outcome.id not in seen:
            seen.add(outcome.id)
            result.selected.append(outcome)

    return result


def render_resolution_message(issues: Iterable[ResolutionIssue]) -> str:
    """
    User-facing description of resolution issues, one line per issue.

    Examples
    --------
    >>> print(render_resolution_message(result.issues))
    Template "ja" is ambiguous. Did you mean one of: Java, JavaScript
    """
    lines: list[str] = []
    for issue in issues:
        suggestions = ", ".join(match.id for match in issue.matches)
        if issue.type == IssueType.AMBIGUOUS:
            lines.append(
                f'Template "{issue.raw_query}" is ambiguous. Did you mean one of: {suggestions}'
            )
        elif suggestions:
            lines.append(f'Template "{issue.raw_query}" not found. Did you mean: {suggestions}')
        else:
            lines.append(f'Template "{issue.raw_query}" not found.')
    return "\n".join(lines)
