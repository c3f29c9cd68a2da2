"""Unit tests for exporting and diffing validated configuration."""

from __future__ import annotations

import typing as typ

import msgspec.json as msgspec_json
import pytest
from ruamel.yaml import YAML

from docsite_config.config import build_site_config
from docsite_config.diff import ConfigChange, diff_site_configs
from docsite_config.serialize import (
    dump_config,
    dump_json,
    dump_yaml,
    site_config_to_data,
)


def _raw() -> dict[str, typ.Any]:
    return {
        "title": "Documentación de Java",
        "site": "https://docs.example.com",
        "social": {"github": "https://github.com/angelcgar/documentacion-java"},
        "locales": {"root": {"label": "Español", "lang": "es"}},
        "custom_css": ["./src/styles/css-reset-2024.css"],
        "sidebar": [
            {
                "label": "Guides",
                "items": [
                    {"label": "Example Guide", "link": "/guides/example/", "badge": "new"}
                ],
            },
            {"label": "Reference", "autogenerate": {"directory": "reference"}},
        ],
        "build": {"trailing_slash": "always", "compress_html": False},
        "experimental": {"csrf_protection": True},
        "integrations": [
            {"name": "starlight", "options": {"table_of_contents": False}},
            "markdoc",
            "sitemap",
        ],
    }


def test_exported_data_rebuilds_equal_config() -> None:
    site = build_site_config(_raw())
    assert build_site_config(site_config_to_data(site)) == site


def test_export_keeps_locale_and_sidebar_shape() -> None:
    data = site_config_to_data(build_site_config(_raw()))
    assert data["locales"] == {"root": {"label": "Español", "lang": "es", "dir": "ltr"}}
    assert data["sidebar"][0]["items"][0] == {
        "label": "Example Guide",
        "link": "/guides/example/",
        "badge": "new",
    }
    assert data["sidebar"][1]["autogenerate"] == {"directory": "reference"}
    assert data["integrations"][0]["options"]["table_of_contents"] is False


def test_json_export_is_decodable() -> None:
    site = build_site_config(_raw())
    decoded = msgspec_json.decode(dump_json(site))
    assert decoded == site_config_to_data(site)
    assert "Español" in dump_json(site)


def test_yaml_export_round_trips() -> None:
    site = build_site_config(_raw())
    loaded = YAML(typ="safe").load(dump_yaml(site))
    assert build_site_config(loaded) == site


def test_unknown_export_format_fails() -> None:
    with pytest.raises(ValueError, match="Unsupported export format"):
        dump_config(build_site_config(_raw()), "toml")  # type: ignore[arg-type]


def test_identical_configs_have_no_diff() -> None:
    site = build_site_config(_raw())
    assert diff_site_configs(site, build_site_config(_raw())) == []


def test_diff_reports_changed_added_and_removed_leaves() -> None:
    before = build_site_config(_raw())
    raw = _raw()
    raw["build"]["compress_html"] = True
    raw["social"] = {"discord": "https://discord.gg/docs"}
    raw["integrations"] = raw["integrations"][:2]
    after = build_site_config(raw)

    changes = diff_site_configs(before, after)
    assert ConfigChange(
        path="build.compress_html", kind="changed", before=False, after=True
    ) in changes
    assert ConfigChange(
        path="social.github",
        kind="removed",
        before="https://github.com/angelcgar/documentacion-java",
    ) in changes
    assert ConfigChange(
        path="social.discord", kind="added", after="https://discord.gg/docs"
    ) in changes
    assert any(
        change.path.startswith("integrations[2]") and change.kind == "removed"
        for change in changes
    )


def test_change_renders_as_diff_line() -> None:
    change = ConfigChange(path="build.image_service", kind="changed", before="sharp", after="noop")
    assert str(change) == "~ build.image_service: 'sharp' -> 'noop'"
