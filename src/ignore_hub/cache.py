"""
ignore_hub.cache - Template Index Cache
=======================================

Keeps the last fetched template index in ``<cache_dir>/index.json`` so
that normal runs need no tree request at all.

Loading Policy
--------------
1. Without ``refresh``, a valid cache file wins.
2. Otherwise the index is fetched from the network and cached.
3. If the network fails, a valid cache is still used, with a warning.
4. With neither, :class:`~ignore_hub.errors.IndexLoadError` is raised.

An unreadable or malformed cache file counts as "no cache"; it is simply
overwritten by the next successful refresh.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from ignore_hub.classification import build_template_index
from ignore_hub.errors import IndexLoadError, TemplateFetchError
from ignore_hub.github import DEFAULT_TIMEOUT, fetch_template_paths
from ignore_hub.models import IndexLoadResult, TemplateIndex


if TYPE_CHECKING:
    from pathlib import Path

    import httpx


logger = logging.getLogger(__name__)


def read_cache_index(cache_file: Path) -> TemplateIndex | None:
    """
    Read the cached index.

    Returns
    -------
    TemplateIndex | None
        ``None`` when the file is missing or its content is not a valid
        index. Other OS errors (permissions...) propagate.
    """
    try:
        raw = cache_file.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None

    try:
        return TemplateIndex.model_validate_json(raw)
    except ValidationError:
        logger.warning("Ignoring invalid template cache at %s", cache_file)
        return None


def write_cache_index(index: TemplateIndex, cache_file: Path) -> None:
    """Write ``index`` to ``cache_file``, creating parent directories."""
    cache_file.parent.mkdir(parents=True, exist_ok=True)
    cache_file.write_text(index.to_json(), encoding="utf-8")


def refresh_template_index(
    cache_file: Path,
    client: httpx.Client | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> TemplateIndex:
    """Fetch the template tree, rebuild the index and cache it."""
    paths = fetch_template_paths(client=client, timeout=timeout)
    index = build_template_index(paths)
    write_cache_index(index, cache_file)
    logger.debug("Cached %d templates at %s", len(index.templates), cache_file)
    return index


def load_template_index(
    refresh: bool,
    cache_file: Path,
    client: httpx.Client | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> IndexLoadResult:
    """
    Load the template index following the cache policy above.

    Parameters
    ----------
    refresh : bool
        Skip a valid cache and go to the network first.

    cache_file : Path
        Location of ``index.json``.

    client : httpx.Client | None
        Shared HTTP client.

    Returns
    -------
    IndexLoadResult
        The index, where it came from, and a warning when the network
        failed and the cache was used instead.

    Raises
    ------
    IndexLoadError
        If neither the network nor the cache yields an index.
    """
    if not refresh:
        cached = read_cache_index(cache_file)
        if cached is not None:
            logger.debug("Using cached template index from %s", cached.fetched_at)
            return IndexLoadResult(index=cached, source="cache")

    try:
        index = refresh_template_index(cache_file, client=client, timeout=timeout)
    except (TemplateFetchError, OSError) as e:
        fallback = read_cache_index(cache_file)
        if fallback is None:
            raise IndexLoadError(f"Failed to load gitignore index. {e}") from e

        warning = f"Network refresh failed, using cache. {e}"
        logger.warning(warning)
        return IndexLoadResult(index=fallback, source="cache", warning=warning)

    return IndexLoadResult(index=index, source="network")
