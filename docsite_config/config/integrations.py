"""Static registry of supported integrations and their option validators.

Integrations are declared as an explicit list of ``{name, options}`` entries.
Each name is resolved against :data:`INTEGRATION_REGISTRY`; the matching
builder validates the option bag and returns a frozen options struct.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from .helpers import (
    _IssueCollector,
    _bool_option,
    _is_http_url,
    _join,
    _reject_unknown_keys,
)
from .models import (
    IntegrationConfig,
    IntegrationOptions,
    IssueKind,
    MarkdocOptions,
    MdxOptions,
    SitemapOptions,
    StarlightOptions,
    TableOfContentsOptions,
)


class _SiteContext(typ.NamedTuple):
    """Site-level values some integrations depend on."""

    site_declared: bool


OptionsBuilder = typ.Callable[
    [typ.Mapping[str, typ.Any], _SiteContext, str, _IssueCollector],
    IntegrationOptions,
]


def _build_starlight_options(
    payload: typ.Mapping[str, typ.Any],
    context: _SiteContext,
    location: str,
    collector: _IssueCollector,
) -> StarlightOptions:
    base = StarlightOptions()
    _reject_unknown_keys(
        payload,
        ("pagefind", "last_updated", "edit_link", "favicon", "table_of_contents"),
        location=location,
        collector=collector,
    )
    edit_link = payload.get("edit_link")
    if edit_link is not None and not _is_http_url(edit_link):
        collector.add(
            IssueKind.INVALID_VALUE,
            _join(location, "edit_link"),
            f"edit_link must be an http(s) URL, got {edit_link!r}",
        )
        edit_link = None
    favicon = payload.get("favicon", base.favicon)
    if not isinstance(favicon, str) or not favicon.strip():
        collector.add(
            IssueKind.INVALID_VALUE,
            _join(location, "favicon"),
            "favicon must be a non-empty path",
        )
        favicon = base.favicon
    return StarlightOptions(
        pagefind=_bool_option(
            payload, "pagefind", base.pagefind, location=location, collector=collector
        ),
        last_updated=_bool_option(
            payload,
            "last_updated",
            base.last_updated,
            location=location,
            collector=collector,
        ),
        edit_link=edit_link,
        favicon=favicon.strip(),
        table_of_contents=_build_toc_options(
            payload.get("table_of_contents", True),
            location=_join(location, "table_of_contents"),
            collector=collector,
        ),
    )


def _build_toc_options(
    value: object, *, location: str, collector: _IssueCollector
) -> TableOfContentsOptions | None:
    """Build the table of contents range; ``false`` disables it."""
    match value:
        case False:
            return None
        case True:
            return TableOfContentsOptions()
        case dict() as payload:
            pass
        case _:
            collector.add(
                IssueKind.INVALID_VALUE,
                location,
                "table_of_contents must be true, false or a mapping",
            )
            return TableOfContentsOptions()

    base = TableOfContentsOptions()
    _reject_unknown_keys(
        payload,
        ("min_heading_level", "max_heading_level"),
        location=location,
        collector=collector,
    )
    levels: dict[str, int] = {}
    for key in ("min_heading_level", "max_heading_level"):
        level = payload.get(key, getattr(base, key))
        if isinstance(level, bool) or not isinstance(level, int) or not 1 <= level <= 6:
            collector.add(
                IssueKind.INVALID_VALUE,
                _join(location, key),
                f"{key} must be an integer between 1 and 6, got {level!r}",
            )
            level = getattr(base, key)
        levels[key] = level
    if levels["min_heading_level"] > levels["max_heading_level"]:
        collector.add(
            IssueKind.INVALID_VALUE,
            location,
            "min_heading_level cannot exceed max_heading_level",
        )
    return TableOfContentsOptions(**levels)


def _build_flag_options(
    options_type: type[MarkdocOptions | MdxOptions | SitemapOptions],
) -> OptionsBuilder:
    """Return a builder for option structs made only of boolean flags."""
    names = tuple(field.name for field in dc.fields(options_type))

    def build(
        payload: typ.Mapping[str, typ.Any],
        context: _SiteContext,
        location: str,
        collector: _IssueCollector,
    ) -> IntegrationOptions:
        base = options_type()
        _reject_unknown_keys(payload, names, location=location, collector=collector)
        values = {
            name: _bool_option(
                payload,
                name,
                getattr(base, name),
                location=location,
                collector=collector,
            )
            for name in names
        }
        return options_type(**values)

    return build


def _build_sitemap_options(
    payload: typ.Mapping[str, typ.Any],
    context: _SiteContext,
    location: str,
    collector: _IssueCollector,
) -> IntegrationOptions:
    if not context.site_declared:
        collector.add(
            IssueKind.MISSING_FIELD,
            "site",
            "the sitemap integration requires the top-level 'site' URL",
        )
    return _build_flag_options(SitemapOptions)(payload, context, location, collector)


INTEGRATION_REGISTRY: typ.Mapping[str, OptionsBuilder] = {
    "starlight": _build_starlight_options,
    "markdoc": _build_flag_options(MarkdocOptions),
    "mdx": _build_flag_options(MdxOptions),
    "sitemap": _build_sitemap_options,
}


def _build_integrations(
    entries: object,
    *,
    site_declared: bool,
    location: str,
    collector: _IssueCollector,
) -> tuple[IntegrationConfig, ...]:
    """Resolve declared integrations against the registry, keeping their order."""
    match entries:
        case None:
            return ()
        case list() | tuple() as items:
            pass
        case _:
            collector.add(
                IssueKind.INVALID_VALUE, location, "integrations must be a list"
            )
            return ()

    context = _SiteContext(site_declared=site_declared)
    resolved: list[IntegrationConfig] = []
    seen: set[str] = set()
    for index, entry in enumerate(items):
        entry_location = _join(location, index)
        match entry:
            case str() as name:
                payload: typ.Mapping[str, typ.Any] = {}
            case {"name": str() as name, **rest}:
                _reject_unknown_keys(
                    rest, ("options",), location=entry_location, collector=collector
                )
                payload = rest.get("options") or {}
                if not isinstance(payload, dict):
                    collector.add(
                        IssueKind.INVALID_VALUE,
                        _join(entry_location, "options"),
                        "options must be a mapping",
                    )
                    payload = {}
            case _:
                collector.add(
                    IssueKind.MISSING_FIELD,
                    _join(entry_location, "name"),
                    "integration entries require a 'name'",
                )
                continue

        builder = INTEGRATION_REGISTRY.get(name)
        if builder is None:
            known = ", ".join(sorted(INTEGRATION_REGISTRY))
            collector.add(
                IssueKind.UNKNOWN_INTEGRATION,
                _join(entry_location, "name"),
                f"unknown integration '{name}'. Known integrations: {known}",
            )
            continue
        if name in seen:
            collector.add(
                IssueKind.DUPLICATE_INTEGRATION,
                _join(entry_location, "name"),
                f"integration '{name}' is declared more than once",
            )
            continue
        seen.add(name)
        options = builder(
            payload, context, _join(entry_location, "options"), collector
        )
        resolved.append(IntegrationConfig(name=name, options=options))
    return tuple(resolved)


__all__ = ["INTEGRATION_REGISTRY", "_build_integrations"]
