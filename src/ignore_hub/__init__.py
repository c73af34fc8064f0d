"""
ignore-hub - .gitignore Generator
=================================

A CLI tool that builds a ``.gitignore`` from the templates of the
github/gitignore repository, either through an interactive wizard or
directly from template names.

Features
--------
- **Idempotent merges**: your own rules are kept, the generated block is
  replaced in place on every run
- **No duplicate rules**: a rule already present is never written again
- **Forgiving names**: ``js``, ``py``, ``nodejs`` and partial names resolve,
  ambiguous names are reported instead of guessed
- **Auto-detection**: ``--auto`` picks templates from your project layout
- **Offline-friendly**: the template index is cached locally

Quick Start
-----------
```bash
pip install ignore-hub

# Pick templates interactively
ignore-hub generate

# Or name them
ignore-hub generate -t python,node --no-interactive
```

Example
-------
>>> from ignore_hub import merge_gitignore
>>> merge_gitignore("dist\\n", templates)

Architecture
------------
- ``merge``: the merge engine (pure)
- ``resolver``: template name resolution (pure)
- ``classification``: template path classification and index building
- ``github``: template downloads
- ``cache``: on-disk index cache
- ``detector``: project layout detection
- ``generator``: the non-interactive pipeline
- ``wizard``: the interactive flow
- ``cli``: Typer command line interface
- ``models``: Pydantic models
"""

# =============================================================================
# Package Metadata
# =============================================================================
__version__ = "0.1.0"
__license__ = "MIT"

# =============================================================================
# Public API Exports
# =============================================================================

from ignore_hub.merge import (
    GENERATED_BLOCK_END,
    GENERATED_BLOCK_START,
    collect_rule_set,
    merge_gitignore,
    strip_generated_block,
)
from ignore_hub.models import (
    MergeOptions,
    TemplateKind,
    TemplateRecord,
    TemplateWithSource,
)
from ignore_hub.resolver import resolve_template_queries


__all__ = [
    "GENERATED_BLOCK_END",
    "GENERATED_BLOCK_START",
    "MergeOptions",
    "TemplateKind",
    "TemplateRecord",
    "TemplateWithSource",
    "__version__",
    "collect_rule_set",
    "merge_gitignore",
    "resolve_template_queries",
    "strip_generated_block",
]
