"""Unit tests for the site configuration loader.

These tests cover :func:`build_site_config` for in-memory mappings and
:func:`load_site_config` for YAML files, including locale validation,
build flags, variant overlays and the aggregated error report.

Usage
-----
Run ``pytest tests/test_loader.py -v`` to execute the suite.
Only pytest's built-in ``tmp_path`` fixture is required.
"""

from __future__ import annotations

import collections.abc as cabc
import copy
import typing as typ
from textwrap import dedent
from types import MappingProxyType

import pytest

from docsite_config.config import (
    BuildOptions,
    ExperimentalFlags,
    IssueKind,
    Locale,
    SiteConfigError,
    build_site_config,
    list_variants,
    load_site_config,
    resolve_variant,
)

if typ.TYPE_CHECKING:
    from pathlib import Path


def _base_raw() -> dict[str, typ.Any]:
    """Return a valid raw configuration modelled on the Java docs site."""
    return {
        "title": "Documentación de Java",
        "social": {"github": "https://github.com/angelcgar/documentacion-java"},
        "locales": {"root": {"label": "Español", "lang": "es"}},
        "custom_css": ["./src/styles/css-reset-2024.css"],
        "sidebar": [
            {
                "label": "Guides",
                "items": [{"label": "Example Guide", "link": "/guides/example/"}],
            },
            {"label": "Reference", "autogenerate": {"directory": "reference"}},
        ],
        "build": {"trailing_slash": "always"},
        "integrations": [{"name": "starlight"}, "markdoc"],
    }


def _issue_kinds(excinfo: pytest.ExceptionInfo[SiteConfigError]) -> list[IssueKind]:
    return [issue.kind for issue in excinfo.value.issues]


def test_valid_config_builds_site() -> None:
    """A complete configuration yields the expected normalized structure."""
    site = build_site_config(_base_raw())
    assert site.title == "Documentación de Java"
    assert site.custom_css == ("./src/styles/css-reset-2024.css",)
    assert site.social["github"].endswith("documentacion-java")
    assert site.build == BuildOptions(trailing_slash="always")
    assert site.experimental == ExperimentalFlags()
    assert [item.name for item in site.integrations] == ["starlight", "markdoc"]


def test_locale_round_trips_unchanged() -> None:
    """The root locale keeps its label and language tag verbatim."""
    site = build_site_config(_base_raw())
    assert site.locale == Locale(label="Español", lang="es")
    assert site.locales["root"].label == "Español"
    assert site.locales["root"].lang == "es"


def test_loading_is_idempotent() -> None:
    """Building the same raw mapping twice yields equal structures."""
    raw = _base_raw()
    snapshot = copy.deepcopy(raw)
    first = build_site_config(raw)
    second = build_site_config(raw)
    assert first == second
    assert raw == snapshot, "Loader must not mutate its input"


def test_site_config_is_read_only() -> None:
    """Validated structures reject mutation."""
    site = build_site_config(_base_raw())
    with pytest.raises(AttributeError):
        site.title = "Other"  # type: ignore[misc]
    with pytest.raises(TypeError):
        site.social["x"] = "https://x.example"  # type: ignore[index]


@pytest.mark.parametrize("lang", ["es", "pt-BR", "zh-Hant-TW", "en-US", "ast", "sr-Latn"])
def test_well_formed_language_tags_are_accepted(lang: str) -> None:
    raw = _base_raw()
    raw["locales"] = {"root": {"label": "Language", "lang": lang}}
    assert build_site_config(raw).locale.lang == lang


@pytest.mark.parametrize("lang", ["", "e", "spanish", "es_ES", "12", "es-"])
def test_malformed_language_tags_fail(lang: str) -> None:
    raw = _base_raw()
    raw["locales"] = {"root": {"label": "Language", "lang": lang}}
    with pytest.raises(SiteConfigError) as excinfo:
        build_site_config(raw)
    assert _issue_kinds(excinfo) == [IssueKind.INVALID_LOCALE]


def test_missing_title_reports_missing_field() -> None:
    raw = _base_raw()
    del raw["title"]
    with pytest.raises(SiteConfigError) as excinfo:
        build_site_config(raw)
    assert excinfo.value.issues[0].kind is IssueKind.MISSING_FIELD
    assert excinfo.value.issues[0].location == "title"


def test_default_locale_must_be_declared() -> None:
    raw = _base_raw()
    raw["locales"]["en"] = {"label": "English", "lang": "en"}
    raw["default_locale"] = "fr"
    with pytest.raises(SiteConfigError) as excinfo:
        build_site_config(raw)
    assert _issue_kinds(excinfo) == [IssueKind.INVALID_LOCALE]


def test_default_locale_used_without_root() -> None:
    raw = _base_raw()
    raw["locales"] = {
        "es": {"label": "Español", "lang": "es"},
        "ar": {"label": "العربية", "lang": "ar", "dir": "rtl"},
    }
    raw["default_locale"] = "ar"
    site = build_site_config(raw)
    assert site.locale == Locale(label="العربية", lang="ar", dir="rtl")


def test_all_violations_are_reported_together() -> None:
    """One error lists every problem rather than stopping at the first."""
    raw = _base_raw()
    raw["locales"]["root"]["lang"] = "espanol!"
    raw["build"]["trailing_slash"] = "sometimes"
    raw["experimental"] = {"csrf_protection": "yes"}
    raw["social"]["mastodon"] = "not a url"
    raw["sidebar"].append({"label": "Empty", "items": []})
    with pytest.raises(SiteConfigError) as excinfo:
        build_site_config(raw)
    kinds = _issue_kinds(excinfo)
    assert IssueKind.INVALID_LOCALE in kinds
    assert IssueKind.EMPTY_GROUP in kinds
    assert kinds.count(IssueKind.INVALID_VALUE) == 3
    message = str(excinfo.value)
    assert message.startswith("Site configuration has 5 issues:")
    assert "locales.root.lang" in message
    assert "build.trailing_slash" in message


def test_unknown_top_level_key_is_rejected() -> None:
    raw = _base_raw()
    raw["sidbar"] = []
    with pytest.raises(SiteConfigError) as excinfo:
        build_site_config(raw)
    assert excinfo.value.issues[0].location == "sidbar"


def test_unsupported_version_is_rejected() -> None:
    raw = _base_raw()
    raw["version"] = 2
    with pytest.raises(SiteConfigError) as excinfo:
        build_site_config(raw)
    assert excinfo.value.issues[0].location == "version"


def test_non_mapping_input_raises_type_error() -> None:
    with pytest.raises(TypeError):
        build_site_config(["title"])  # type: ignore[arg-type]


def _write_config(tmp_path: Path) -> Path:
    path = tmp_path / "site.yaml"
    path.write_text(
        dedent(
            """
            title: Docs
            locales:
              root:
                label: English
                lang: en
            build:
              trailing_slash: always
            sidebar:
              - label: Start
                link: /start/
            integrations:
              - name: starlight
                options:
                  pagefind: true
            variants:
              offline:
                build:
                  image_service: noop
                integrations:
                  - name: starlight
                    options:
                      pagefind: false
              spanish:
                locales:
                  root:
                    label: Español
                    lang: es
            """
        ).strip()
        + "\n",
        encoding="utf-8",
    )
    return path


def test_load_site_config_reads_yaml(tmp_path: Path) -> None:
    site = load_site_config(_write_config(tmp_path))
    assert site.title == "Docs"
    assert site.build.image_service == "sharp"
    assert site.get_integration("starlight").options.pagefind is True


def test_variant_overrides_are_merged(tmp_path: Path) -> None:
    path = _write_config(tmp_path)
    offline = load_site_config(path, variant="offline")
    assert offline.build.image_service == "noop"
    assert offline.build.trailing_slash == "always", "Nested keys must merge"
    assert offline.get_integration("starlight").options.pagefind is False
    spanish = load_site_config(path, variant="spanish")
    assert spanish.locale == Locale(label="Español", lang="es")


def test_unknown_variant_fails(tmp_path: Path) -> None:
    with pytest.raises(SiteConfigError, match="Unknown variant 'beta'"):
        load_site_config(_write_config(tmp_path), variant="beta")


def test_list_variants_keeps_declaration_order(tmp_path: Path) -> None:
    assert list_variants(_write_config(tmp_path)) == ["offline", "spanish"]


def test_resolve_variant_drops_variant_table() -> None:
    document = {"title": "Docs", "variants": {"a": {"title": "A"}}}
    assert resolve_variant(document, None) == {"title": "Docs"}
    assert resolve_variant(document, "a") == {"title": "A"}


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_site_config(tmp_path / "absent.yaml")


def test_non_mapping_document_raises(tmp_path: Path) -> None:
    path = tmp_path / "site.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(TypeError):
        load_site_config(path)


def test_default_locale_on_broken_locale_reports_once() -> None:
    """A locale that fails its own checks still counts as declared."""
    raw = _base_raw()
    raw["locales"] = {"en": {"label": "", "lang": "en"}}
    raw["default_locale"] = "en"
    with pytest.raises(SiteConfigError) as excinfo:
        build_site_config(raw)
    assert [(issue.kind, issue.location) for issue in excinfo.value.issues] == [
        (IssueKind.MISSING_FIELD, "locales.en.label")
    ]


def test_site_config_is_not_hashable() -> None:
    site = build_site_config(_base_raw())
    assert not isinstance(site, cabc.Hashable)
    with pytest.raises(TypeError, match="SiteConfig"):
        hash(site)


def test_non_dict_mapping_is_rejected() -> None:
    with pytest.raises(TypeError, match="must be a dict, got mappingproxy"):
        build_site_config(MappingProxyType({"title": "Docs"}))  # type: ignore[arg-type]
