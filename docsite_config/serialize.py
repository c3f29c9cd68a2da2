"""Convert validated site configuration back into plain, diffable data.

The data produced here has the same shape as the YAML input, so it can be
committed alongside the source configuration, handed to the rendering
pipeline as JSON, or fed back through
:func:`docsite_config.config.build_site_config` to obtain an equal object.

Examples
--------
>>> from docsite_config.config import build_site_config
>>> from docsite_config.serialize import site_config_to_data
>>> site = build_site_config({"title": "Docs"})
>>> site_config_to_data(site)["title"]
'Docs'
"""

from __future__ import annotations

import dataclasses as dc
import io
import typing as typ

import msgspec.json as msgspec_json
from ruamel.yaml import YAML

from .config.models import (
    IntegrationConfig,
    SidebarAutogenerate,
    SidebarGroup,
    SidebarLink,
    SidebarNode,
    SiteConfig,
    StarlightOptions,
)

ExportFormat = typ.Literal["json", "yaml"]


def site_config_to_data(config: SiteConfig) -> dict[str, typ.Any]:
    """Return the configuration as plain dicts and lists in the input shape."""
    data: dict[str, typ.Any] = {
        "version": config.version,
        "title": config.title,
    }
    if config.site is not None:
        data["site"] = config.site
    if config.locales:
        data["locales"] = {
            key: dc.asdict(locale) for key, locale in config.locales.items()
        }
    if config.default_locale is not None:
        data["default_locale"] = config.default_locale
    data["social"] = dict(config.social)
    data["custom_css"] = list(config.custom_css)
    data["sidebar"] = [_sidebar_node_to_data(node) for node in config.sidebar]
    data["build"] = dc.asdict(config.build)
    data["experimental"] = dc.asdict(config.experimental)
    data["integrations"] = [
        _integration_to_data(integration) for integration in config.integrations
    ]
    return data


def _sidebar_node_to_data(node: SidebarNode) -> dict[str, typ.Any]:
    match node:
        case SidebarGroup(label=label, items=items, collapsed=collapsed):
            return {
                "label": label,
                "collapsed": collapsed,
                "items": [_sidebar_node_to_data(child) for child in items],
            }
        case SidebarLink(label=label, link=link, badge=badge):
            entry: dict[str, typ.Any] = {"label": label, "link": link}
            if badge is not None:
                entry["badge"] = badge
            return entry
        case SidebarAutogenerate(label=label, directory=directory, collapsed=collapsed):
            return {
                "label": label,
                "collapsed": collapsed,
                "autogenerate": {"directory": directory},
            }
    msg = f"Unsupported sidebar node {node!r}"
    raise TypeError(msg)


def _integration_to_data(integration: IntegrationConfig) -> dict[str, typ.Any]:
    options = dc.asdict(integration.options)
    if isinstance(integration.options, StarlightOptions):
        if integration.options.table_of_contents is None:
            options["table_of_contents"] = False
    return {"name": integration.name, "options": options}


def dump_json(config: SiteConfig) -> str:
    """Serialize the configuration as indented JSON."""
    encoded = msgspec_json.encode(site_config_to_data(config))
    return msgspec_json.format(encoded, indent=2).decode("utf-8") + "\n"


def dump_yaml(config: SiteConfig) -> str:
    """Serialize the configuration as block-style YAML."""
    yaml = _build_dump_yaml()
    buffer = io.StringIO()
    yaml.dump(site_config_to_data(config), buffer)
    return buffer.getvalue()


def dump_config(config: SiteConfig, fmt: ExportFormat = "json") -> str:
    """Serialize ``config`` in the requested export format."""
    match fmt:
        case "json":
            return dump_json(config)
        case "yaml":
            return dump_yaml(config)
        case _:
            msg = f"Unsupported export format '{fmt}'. Use 'json' or 'yaml'."
            raise ValueError(msg)


def _build_dump_yaml() -> YAML:
    yaml = YAML()
    yaml.width = 120
    yaml.indent(mapping=2, sequence=4, offset=2)
    return yaml


__all__ = [
    "ExportFormat",
    "dump_config",
    "dump_json",
    "dump_yaml",
    "site_config_to_data",
]
