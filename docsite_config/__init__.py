"""Validate and export configuration for a static documentation site.

This package exposes the ``docsite`` CLI used in CI to check ``site.yaml``
before the site build, plus the loader the build scripts import directly.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.
- ``load_site_config``: Load, merge and validate a configuration file.
- ``build_site_config``: Validate an in-memory configuration mapping.

Examples
--------
>>> from docsite_config import build_site_config
>>> build_site_config({"title": "Docs"}).title
'Docs'
>>> from docsite_config import app
>>> callable(app)
True
"""

from __future__ import annotations

from .cli import app, main
from .config import SiteConfig, SiteConfigError, build_site_config, load_site_config

__all__ = [
    "SiteConfig",
    "SiteConfigError",
    "app",
    "build_site_config",
    "load_site_config",
    "main",
]
