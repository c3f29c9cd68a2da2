"""Typed dataclasses describing documentation site configuration structures."""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ
from types import MappingProxyType

TrailingSlash = typ.Literal["always", "never", "ignore"]
ImageService = typ.Literal["sharp", "noop"]
TextDirection = typ.Literal["ltr", "rtl"]


class IssueKind(enum.StrEnum):
    """Categories of configuration violations."""

    MISSING_FIELD = "MissingField"
    INVALID_LOCALE = "InvalidLocale"
    INVALID_PATH = "InvalidPath"
    DUPLICATE_LABEL = "DuplicateLabel"
    EMPTY_GROUP = "EmptyGroup"
    INVALID_VALUE = "InvalidValue"
    UNKNOWN_INTEGRATION = "UnknownIntegration"
    DUPLICATE_INTEGRATION = "DuplicateIntegration"


@dc.dataclass(frozen=True, slots=True)
class ConfigIssue:
    """A single violation found while validating the configuration."""

    kind: IssueKind
    location: str
    message: str

    def __str__(self) -> str:
        return f"[{self.kind}] {self.location}: {self.message}"


class SiteConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete.

    All violations found in one validation pass are carried in ``issues`` so
    callers can report them together.
    """

    def __init__(self, issues: typ.Iterable[ConfigIssue] | str) -> None:
        if isinstance(issues, str):
            self.issues: tuple[ConfigIssue, ...] = ()
            super().__init__(issues)
            return
        self.issues = tuple(issues)
        count = len(self.issues)
        noun = "issue" if count == 1 else "issues"
        lines = [f"Site configuration has {count} {noun}:"]
        lines.extend(f"  - {issue}" for issue in self.issues)
        super().__init__("\n".join(lines))

    @property
    def kinds(self) -> set[IssueKind]:
        """Return the distinct issue kinds carried by this error."""
        return {issue.kind for issue in self.issues}


@dc.dataclass(frozen=True, slots=True)
class Locale:
    """Language identifier plus the label shown in the language picker."""

    label: str
    lang: str
    dir: TextDirection = "ltr"


@dc.dataclass(frozen=True, slots=True)
class SidebarLink:
    """Sidebar entry pointing at a single route."""

    label: str
    link: str
    badge: str | None = None


@dc.dataclass(frozen=True, slots=True)
class SidebarAutogenerate:
    """Sidebar entry expanded from a content directory by the renderer."""

    label: str
    directory: str
    collapsed: bool = False


@dc.dataclass(frozen=True, slots=True)
class SidebarGroup:
    """Labelled, ordered collection of nested sidebar entries."""

    label: str
    items: tuple[SidebarNode, ...]
    collapsed: bool = False


SidebarNode = SidebarGroup | SidebarLink | SidebarAutogenerate


@dc.dataclass(frozen=True, slots=True)
class BuildOptions:
    """Build-time switches forwarded to the rendering pipeline."""

    trailing_slash: TrailingSlash = "ignore"
    compress_html: bool = True
    smartypants: bool = True
    image_service: ImageService = "sharp"


@dc.dataclass(frozen=True, slots=True)
class ExperimentalFlags:
    """Opt-in framework features."""

    csrf_protection: bool = False
    content_collection_cache: bool = False
    direct_render_script: bool = False


@dc.dataclass(frozen=True, slots=True)
class TableOfContentsOptions:
    """Heading range included in the on-page table of contents."""

    min_heading_level: int = 2
    max_heading_level: int = 3


@dc.dataclass(frozen=True, slots=True)
class StarlightOptions:
    """Options for the documentation theme integration."""

    pagefind: bool = True
    last_updated: bool = False
    edit_link: str | None = None
    favicon: str = "/favicon.svg"
    table_of_contents: TableOfContentsOptions | None = dc.field(
        default_factory=TableOfContentsOptions
    )


@dc.dataclass(frozen=True, slots=True)
class MarkdocOptions:
    """Options for the Markdoc content integration."""

    allow_html: bool = False
    ignore_indentation: bool = False


@dc.dataclass(frozen=True, slots=True)
class MdxOptions:
    """Options for the MDX content integration."""

    optimize: bool = False
    gfm: bool = True


@dc.dataclass(frozen=True, slots=True)
class SitemapOptions:
    """Options for the sitemap integration."""

    filter_drafts: bool = True


IntegrationOptions = StarlightOptions | MarkdocOptions | MdxOptions | SitemapOptions


@dc.dataclass(frozen=True, slots=True)
class IntegrationConfig:
    """An enabled integration and its validated options."""

    name: str
    options: IntegrationOptions


@dc.dataclass(frozen=True, slots=True)
class SiteConfig:
    """Validated, read-only description of a documentation site."""

    title: str
    locales: typ.Mapping[str, Locale] = dc.field(
        default_factory=lambda: MappingProxyType({})
    )
    default_locale: str | None = None
    social: typ.Mapping[str, str] = dc.field(
        default_factory=lambda: MappingProxyType({})
    )
    custom_css: tuple[str, ...] = ()
    sidebar: tuple[SidebarNode, ...] = ()
    build: BuildOptions = dc.field(default_factory=BuildOptions)
    experimental: ExperimentalFlags = dc.field(default_factory=ExperimentalFlags)
    integrations: tuple[IntegrationConfig, ...] = ()
    site: str | None = None
    version: int = 1

    # Compared by value but not hashable: ``locales`` and ``social`` are mappings.
    __hash__ = None  # type: ignore[assignment]

    @property
    def locale(self) -> Locale | None:
        """Return the root locale, falling back to the default locale."""
        if "root" in self.locales:
            return self.locales["root"]
        if self.default_locale is not None:
            return self.locales.get(self.default_locale)
        return None

    def get_integration(self, name: str) -> IntegrationConfig | None:
        """Return the enabled integration called ``name``, if any."""
        for integration in self.integrations:
            if integration.name == name:
                return integration
        return None

    def iter_links(self) -> typ.Iterator[SidebarLink]:
        """Yield every sidebar link in navigation order."""
        stack: list[SidebarNode] = list(reversed(self.sidebar))
        while stack:
            node = stack.pop()
            match node:
                case SidebarGroup(items=items):
                    stack.extend(reversed(items))
                case SidebarLink():
                    yield node
                case _:
                    continue


__all__ = [
    "BuildOptions",
    "ConfigIssue",
    "ExperimentalFlags",
    "ImageService",
    "IntegrationConfig",
    "IntegrationOptions",
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
    "TextDirection",
    "TrailingSlash",
]
