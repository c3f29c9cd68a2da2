"""Load and validate documentation site configuration.

This subpackage parses the project's ``site.yaml`` file, applies an optional
named variant on top of the base document, checks every structural rule
(locale tags, sidebar routes, sibling labels, integration options) and
produces frozen dataclasses (:class:`SiteConfig`, :class:`SidebarGroup`,
etc.) that the external rendering pipeline consumes. The primary entry points
are :func:`load_site_config` for files and :func:`build_site_config` for
in-memory mappings.

Examples
--------
>>> from docsite_config.config import build_site_config
>>> site = build_site_config(
...     {"title": "Docs", "locales": {"root": {"label": "Español", "lang": "es"}}}
... )
>>> site.locale.lang
'es'
"""

from .integrations import INTEGRATION_REGISTRY
from .loader import (
    build_site_config,
    list_variants,
    load_site_config,
    read_config_document,
    resolve_variant,
)
from .models import (
    BuildOptions,
    ConfigIssue,
    ExperimentalFlags,
    IntegrationConfig,
    IssueKind,
    Locale,
    MarkdocOptions,
    MdxOptions,
    SidebarAutogenerate,
    SidebarGroup,
    SidebarLink,
    SidebarNode,
    SiteConfig,
    SiteConfigError,
    SitemapOptions,
    StarlightOptions,
    TableOfContentsOptions,
)

__all__ = [
    "INTEGRATION_REGISTRY",
    "BuildOptions",
    "ConfigIssue",
    "ExperimentalFlags",
    "IntegrationConfig",
    "IssueKind",
    "Locale",
    "MarkdocOptions",
    "MdxOptions",
    "SidebarAutogenerate",
    "SidebarGroup",
    "SidebarLink",
    "SidebarNode",
    "SiteConfig",
    "SiteConfigError",
    "SitemapOptions",
    "StarlightOptions",
    "TableOfContentsOptions",
    "build_site_config",
    "list_variants",
    "load_site_config",
    "read_config_document",
    "resolve_variant",
]
