"""
ignore_hub.github - Template Source Client
==========================================

Downloads the template tree and template bodies from the
``github/gitignore`` repository.

Endpoints
---------
- Git tree API (one request lists every file)::

    https://api.github.com/repos/github/gitignore/git/trees/main?recursive=1

- Raw file content::

    https://raw.githubusercontent.com/github/gitignore/main/<path>

Every function takes an optional ``httpx.Client`` so callers can share a
connection pool and tests can inject an ``httpx.MockTransport``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING
from urllib.parse import quote

import httpx

from ignore_hub.classification import is_supported_template_path
from ignore_hub.errors import TemplateFetchError
from ignore_hub.models import TemplateRecord, TemplateWithSource


if TYPE_CHECKING:
    from collections.abc import Iterable


logger = logging.getLogger(__name__)

GITHUB_API_TREE_URL = (
    "https://api.github.com/repos/github/gitignore/git/trees/main?recursive=1"
)
RAW_BASE_URL = "https://raw.githubusercontent.com/github/gitignore/main"
USER_AGENT = "ignore-hub"
DEFAULT_TIMEOUT = 15.0


@contextmanager
def _client_scope(client: httpx.Client | None, timeout: float) -> Iterator[httpx.Client]:
    """Yield ``client``, or a short-lived one that is closed afterwards."""
    if client is not None:
        yield client
        return
    with httpx.Client(timeout=timeout, follow_redirects=True) as owned:
        yield owned


def _get(client: httpx.Client, url: str, accept: str) -> httpx.Response:
    try:
        response = client.get(url, headers={"Accept": accept, "User-Agent": USER_AGENT})
    except httpx.HTTPError as e:
        raise TemplateFetchError(f"Request failed for {url}: {e}") from e

    if response.is_error:
        raise TemplateFetchError(f"Request failed ({response.status_code}) for {url}")
    return response


def template_source_url(path: str) -> str:
    """
    Raw content URL for a template path, each segment URL-encoded.

    Examples
    --------
    >>> template_source_url("Global/Visual Studio Code.gitignore")
    'https://raw.githubusercontent.com/github/gitignore/main/Global/Visual%20Studio%20Code.gitignore'
    """
    encoded = "/".join(quote(segment, safe="") for segment in path.split("/"))
    return f"{RAW_BASE_URL}/{encoded}"


def fetch_template_paths(
    client: httpx.Client | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> list[str]:
    """
    List every supported template path in the upstream repository.

    Returns
    -------
    list[str]
        Root and ``Global/`` ``.gitignore`` paths, sorted case-insensitively.

    Raises
    ------
    TemplateFetchError
        If the request fails or the payload has no ``tree``.
    """
    with _client_scope(client, timeout) as http:
        response = _get(http, GITHUB_API_TREE_URL, "application/vnd.github+json")

    try:
        tree = response.json()["tree"]
    except (ValueError, KeyError, TypeError) as e:
        raise TemplateFetchError(f"Unexpected response from {GITHUB_API_TREE_URL}") from e

    paths = [
        entry["path"]
        for entry in tree
        if entry.get("type") == "blob" and is_supported_template_path(entry.get("path", ""))
    ]
    logger.debug("Template tree lists %d templates", len(paths))
    return sorted(paths, key=str.casefold)


def fetch_template_source(
    path: str,
    client: httpx.Client | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> str:
    """
    Download the raw text of one template.

    Raises
    ------
    TemplateFetchError
        If the request fails.
    """
    with _client_scope(client, timeout) as http:
        response = _get(http, template_source_url(path), "text/plain")
    return response.text


def fetch_templates_with_source(
    templates: Iterable[TemplateRecord],
    client: httpx.Client | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> list[TemplateWithSource]:
    """
    Download the bodies of ``templates``, keeping their order.

    Every template is attempted. The merge engine needs the complete list,
    so a single failure fails the whole call.

    Raises
    ------
    TemplateFetchError
        Naming every template that could not be fetched.
    """
    collected: list[TemplateWithSource] = []
    failures: list[str] = []

    with _client_scope(client, timeout) as http:
        for template in templates:
            try:
                source = fetch_template_source(template.path, client=http)
            except TemplateFetchError as e:
                logger.debug("Fetching %s failed: %s", template.path, e)
                failures.append(template.name)
                continue
            logger.debug("Fetched %s (%d bytes)", template.path, len(source))
            collected.append(TemplateWithSource(meta=template, source=source))

    if failures:
        raise TemplateFetchError(
            f"Failed to fetch template source for: {', '.join(failures)}",
            failures=failures,
        )
    return collected
