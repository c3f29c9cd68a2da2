"""Load site configuration YAML into typed, read-only dataclasses."""

from __future__ import annotations

import typing as typ
from types import MappingProxyType

from ruamel.yaml import YAML

from .helpers import (
    IMAGE_SERVICES,
    TEXT_DIRECTIONS,
    TRAILING_SLASH_POLICIES,
    _IssueCollector,
    _bool_option,
    _choice_option,
    _deep_merge,
    _is_http_url,
    _is_language_tag,
    _join,
    _mapping_section,
    _reject_unknown_keys,
    _required_str,
)
from .integrations import _build_integrations
from .models import (
    BuildOptions,
    ExperimentalFlags,
    IssueKind,
    Locale,
    SiteConfig,
    SiteConfigError,
)
from .sidebar import _build_sidebar

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .models import ImageService, TextDirection, TrailingSlash

SUPPORTED_VERSIONS: tuple[int, ...] = (1,)
TOP_LEVEL_KEYS: tuple[str, ...] = (
    "version",
    "title",
    "site",
    "locales",
    "default_locale",
    "social",
    "custom_css",
    "sidebar",
    "build",
    "experimental",
    "integrations",
)
VARIANTS_KEY = "variants"


def load_site_config(path: Path, *, variant: str | None = None) -> SiteConfig:
    """Load and validate the YAML configuration describing a documentation site.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``config/site.yaml``).
    variant : str or None, optional
        Name of an entry under the top-level ``variants`` mapping whose
        overrides are merged onto the base document before validation.

    Returns
    -------
    SiteConfig
        Validated, immutable site configuration.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    SiteConfigError
        If the variant is unknown or the configuration breaks any rule. The
        error lists every violation found.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from docsite_config.config import load_site_config
    >>> config = load_site_config(Path("config/site.yaml"))  # doctest: +SKIP
    >>> config.locale.lang  # doctest: +SKIP
    'es'
    """
    document = read_config_document(path)
    return build_site_config(resolve_variant(document, variant))


def read_config_document(path: Path) -> dict[str, typ.Any]:
    """Read the raw YAML mapping stored at ``path``."""
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    return dict(loaded)


def list_variants(path: Path) -> list[str]:
    """Return the variant names declared in the file, in declaration order."""
    variants = read_config_document(path).get(VARIANTS_KEY) or {}
    if not isinstance(variants, dict):
        msg = f"'{VARIANTS_KEY}' must be a mapping of variant name to overrides."
        raise SiteConfigError(msg)
    return [str(name) for name in variants]


def resolve_variant(
    document: typ.Mapping[str, typ.Any], variant: str | None
) -> dict[str, typ.Any]:
    """Return ``document`` with the named variant's overrides applied.

    Mappings merge recursively; lists and scalars in the variant replace the
    base value. The ``variants`` key itself is dropped from the result.
    """
    base = {key: value for key, value in document.items() if key != VARIANTS_KEY}
    if variant is None:
        return base
    variants = document.get(VARIANTS_KEY) or {}
    if not isinstance(variants, dict) or variant not in variants:
        available = ", ".join(map(str, variants)) if isinstance(variants, dict) else ""
        msg = f"Unknown variant '{variant}'. Known variants: {available or 'none'}"
        raise SiteConfigError(msg)
    overrides = variants[variant] or {}
    if not isinstance(overrides, dict):
        msg = f"Variant '{variant}' must be a mapping of overrides."
        raise SiteConfigError(msg)
    return _deep_merge(base, overrides)


def build_site_config(raw: dict[str, typ.Any]) -> SiteConfig:
    """Validate a raw configuration dict and return a :class:`SiteConfig`.

    ``raw`` is the plain ``dict`` a YAML or JSON loader produces; other mapping
    types are rejected with :class:`TypeError`.

    No I/O happens here. Every violation is collected first; if any exist a
    single :class:`SiteConfigError` listing all of them is raised and no
    partial structure escapes.
    """
    if not isinstance(raw, dict):
        msg = f"Site configuration must be a dict, got {type(raw).__name__}."
        raise TypeError(msg)

    collector = _IssueCollector()
    _reject_unknown_keys(raw, TOP_LEVEL_KEYS, location="", collector=collector)

    version = raw.get("version", SUPPORTED_VERSIONS[-1])
    if version not in SUPPORTED_VERSIONS or isinstance(version, bool):
        collector.add(
            IssueKind.INVALID_VALUE,
            "version",
            f"unsupported configuration version {version!r}",
        )
    title = _required_str(raw, "title", location="", collector=collector)
    site = _build_site_url(raw.get("site"), collector=collector)
    locales = _build_locales(raw.get("locales"), collector=collector)
    declared_locales = raw.get("locales")
    default_locale = _build_default_locale(
        raw.get("default_locale"),
        [str(key) for key in declared_locales]
        if isinstance(declared_locales, dict)
        else [],
        collector=collector,
    )
    social = _build_social(raw.get("social"), collector=collector)
    custom_css = _build_custom_css(raw.get("custom_css"), collector=collector)
    build = _build_build_options(
        _mapping_section(raw, "build", location="", collector=collector),
        collector=collector,
    )
    experimental = _build_experimental_flags(
        _mapping_section(raw, "experimental", location="", collector=collector),
        collector=collector,
    )
    sidebar = _build_sidebar(
        raw.get("sidebar"),
        trailing_slash=build.trailing_slash,
        location="sidebar",
        collector=collector,
    )
    integrations = _build_integrations(
        raw.get("integrations"),
        site_declared=raw.get("site") is not None,
        location="integrations",
        collector=collector,
    )

    if collector:
        raise SiteConfigError(collector.issues)

    return SiteConfig(
        title=typ.cast("str", title),
        locales=locales,
        default_locale=default_locale,
        social=social,
        custom_css=custom_css,
        sidebar=sidebar,
        build=build,
        experimental=experimental,
        integrations=integrations,
        site=site,
        version=typ.cast("int", version),
    )


def _build_site_url(value: object, *, collector: _IssueCollector) -> str | None:
    if value is None:
        return None
    if not _is_http_url(value):
        collector.add(
            IssueKind.INVALID_VALUE,
            "site",
            f"site must be an absolute http(s) URL, got {value!r}",
        )
        return None
    return typ.cast("str", value).strip()


def _build_locales(
    payload: object, *, collector: _IssueCollector
) -> typ.Mapping[str, Locale]:
    """Build the locale table keyed by locale slug (``root`` for the root)."""
    match payload:
        case None:
            return MappingProxyType({})
        case dict():
            pass
        case _:
            collector.add(IssueKind.INVALID_VALUE, "locales", "locales must be a mapping")
            return MappingProxyType({})
    if not payload:
        collector.add(
            IssueKind.MISSING_FIELD, "locales", "at least one locale must be declared"
        )

    locales: dict[str, Locale] = {}
    for key, entry in payload.items():
        location = _join("locales", str(key))
        if not isinstance(entry, dict):
            collector.add(IssueKind.INVALID_VALUE, location, "locale must be a mapping")
            continue
        _reject_unknown_keys(
            entry, ("label", "lang", "dir"), location=location, collector=collector
        )
        label = _required_str(entry, "label", location=location, collector=collector)
        lang = entry.get("lang")
        if lang is None:
            collector.add(
                IssueKind.MISSING_FIELD, _join(location, "lang"), "'lang' is required"
            )
        elif not _is_language_tag(lang):
            collector.add(
                IssueKind.INVALID_LOCALE,
                _join(location, "lang"),
                f"'{lang}' is not a recognized language tag (expected e.g. 'es' or 'pt-BR')",
            )
        direction = _choice_option(
            entry, "dir", "ltr", TEXT_DIRECTIONS, location=location, collector=collector
        )
        if label is not None and _is_language_tag(lang):
            locales[str(key)] = Locale(
                label=label,
                lang=typ.cast("str", lang),
                dir=typ.cast("TextDirection", direction),
            )
    return MappingProxyType(locales)


def _build_default_locale(
    value: object,
    declared: typ.Sequence[str],
    *,
    collector: _IssueCollector,
) -> str | None:
    """Check ``default_locale`` against the locale keys as written.

    Locales that fail their own validation still count as declared here so
    that a broken entry is reported once, under its own location.
    """
    if value is None:
        return None
    if not isinstance(value, str) or value not in declared:
        known = ", ".join(declared) or "none"
        collector.add(
            IssueKind.INVALID_LOCALE,
            "default_locale",
            f"default_locale {value!r} is not a declared locale. Known: {known}",
        )
        return None
    return value


def _build_social(
    payload: object, *, collector: _IssueCollector
) -> typ.Mapping[str, str]:
    match payload:
        case None:
            return MappingProxyType({})
        case dict():
            pass
        case _:
            collector.add(IssueKind.INVALID_VALUE, "social", "social must be a mapping")
            return MappingProxyType({})
    links: dict[str, str] = {}
    for platform, url in payload.items():
        if not _is_http_url(url):
            collector.add(
                IssueKind.INVALID_VALUE,
                _join("social", str(platform)),
                f"social link must be an absolute http(s) URL, got {url!r}",
            )
            continue
        links[str(platform)] = typ.cast("str", url).strip()
    return MappingProxyType(links)


def _build_custom_css(
    payload: object, *, collector: _IssueCollector
) -> tuple[str, ...]:
    match payload:
        case None:
            return ()
        case list() | tuple():
            pass
        case _:
            collector.add(
                IssueKind.INVALID_VALUE, "custom_css", "custom_css must be a list"
            )
            return ()
    paths: list[str] = []
    for index, entry in enumerate(payload):
        if not isinstance(entry, str) or not entry.strip():
            collector.add(
                IssueKind.INVALID_PATH,
                _join("custom_css", index),
                "stylesheet paths must be non-empty strings",
            )
            continue
        paths.append(entry.strip())
    return tuple(paths)


def _build_build_options(
    payload: typ.Mapping[str, typ.Any], *, collector: _IssueCollector
) -> BuildOptions:
    base = BuildOptions()
    _reject_unknown_keys(
        payload,
        ("trailing_slash", "compress_html", "smartypants", "image_service"),
        location="build",
        collector=collector,
    )
    trailing_slash = _choice_option(
        payload,
        "trailing_slash",
        base.trailing_slash,
        TRAILING_SLASH_POLICIES,
        location="build",
        collector=collector,
    )
    image_service = _choice_option(
        payload,
        "image_service",
        base.image_service,
        IMAGE_SERVICES,
        location="build",
        collector=collector,
    )
    return BuildOptions(
        trailing_slash=typ.cast("TrailingSlash", trailing_slash),
        compress_html=_bool_option(
            payload,
            "compress_html",
            base.compress_html,
            location="build",
            collector=collector,
        ),
        smartypants=_bool_option(
            payload,
            "smartypants",
            base.smartypants,
            location="build",
            collector=collector,
        ),
        image_service=typ.cast("ImageService", image_service),
    )


def _build_experimental_flags(
    payload: typ.Mapping[str, typ.Any], *, collector: _IssueCollector
) -> ExperimentalFlags:
    names = ("csrf_protection", "content_collection_cache", "direct_render_script")
    _reject_unknown_keys(payload, names, location="experimental", collector=collector)
    base = ExperimentalFlags()
    return ExperimentalFlags(
        **{
            name: _bool_option(
                payload,
                name,
                getattr(base, name),
                location="experimental",
                collector=collector,
            )
            for name in names
        }
    )


__all__ = [
    "SUPPORTED_VERSIONS",
    "build_site_config",
    "list_variants",
    "load_site_config",
    "read_config_document",
    "resolve_variant",
]
