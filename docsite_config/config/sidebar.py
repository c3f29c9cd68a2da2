"""Sidebar-specific configuration builders."""

from __future__ import annotations

import typing as typ

from .helpers import (
    _IssueCollector,
    _bool_option,
    _join,
    _optional_str,
    _reject_unknown_keys,
    _required_str,
    _route_problem,
)
from .models import (
    IssueKind,
    SidebarAutogenerate,
    SidebarGroup,
    SidebarLink,
    SidebarNode,
)

_ENTRY_KINDS: tuple[str, ...] = ("items", "link", "autogenerate")
_ENTRY_KEYS: dict[str, tuple[str, ...]] = {
    "items": ("label", "items", "collapsed"),
    "link": ("label", "link", "badge"),
    "autogenerate": ("label", "autogenerate", "collapsed"),
}
_AUTOGENERATE_KEYS: tuple[str, ...] = ("directory",)


def _build_sidebar(
    entries: object,
    *,
    trailing_slash: str,
    location: str,
    collector: _IssueCollector,
) -> tuple[SidebarNode, ...]:
    """Build an ordered sidebar forest, recording every violation found.

    Sibling labels must be unique at each level; the declared order is kept.
    """
    match entries:
        case None:
            return ()
        case list() | tuple() as items:
            pass
        case _:
            collector.add(IssueKind.INVALID_VALUE, location, "sidebar must be a list")
            return ()

    nodes: list[SidebarNode] = []
    seen: dict[str, int] = {}
    for index, entry in enumerate(items):
        entry_location = _join(location, index)
        node = _build_sidebar_entry(
            entry,
            trailing_slash=trailing_slash,
            location=entry_location,
            collector=collector,
        )
        label = _sibling_label(entry)
        if label is not None:
            if label in seen:
                first = _join(location, seen[label])
                collector.add(
                    IssueKind.DUPLICATE_LABEL,
                    entry_location,
                    f"label '{label}' is already used by sibling {first}",
                )
            else:
                seen[label] = index
        if node is not None:
            nodes.append(node)
    return tuple(nodes)


def _sibling_label(entry: object) -> str | None:
    """Return the declared label of a raw entry for duplicate detection."""
    match entry:
        case {"label": str() as label}:
            return _optional_str(label)
        case _:
            return None


def _build_sidebar_entry(
    entry: object,
    *,
    trailing_slash: str,
    location: str,
    collector: _IssueCollector,
) -> SidebarNode | None:
    """Build a single group, link or autogenerate entry."""
    if not isinstance(entry, dict):
        collector.add(
            IssueKind.INVALID_VALUE, location, "sidebar entries must be mappings"
        )
        return None

    label = _required_str(entry, "label", location=location, collector=collector)
    declared = [key for key in _ENTRY_KINDS if key in entry]
    if not declared:
        collector.add(
            IssueKind.MISSING_FIELD,
            location,
            "entry needs one of 'items', 'link' or 'autogenerate'",
        )
        return None
    if len(declared) > 1:
        collector.add(
            IssueKind.INVALID_VALUE,
            location,
            f"entry declares {' and '.join(repr(key) for key in declared)}; "
            "pick exactly one",
        )
        return None

    _reject_unknown_keys(
        entry, _ENTRY_KEYS[declared[0]], location=location, collector=collector
    )
    match declared[0]:
        case "items":
            node = _build_group(
                entry,
                label=label,
                trailing_slash=trailing_slash,
                location=location,
                collector=collector,
            )
        case "link":
            node = _build_link(
                entry,
                label=label,
                trailing_slash=trailing_slash,
                location=location,
                collector=collector,
            )
        case _:
            node = _build_autogenerate(
                entry, label=label, location=location, collector=collector
            )
    return node


def _build_group(
    entry: typ.Mapping[str, typ.Any],
    *,
    label: str | None,
    trailing_slash: str,
    location: str,
    collector: _IssueCollector,
) -> SidebarGroup | None:
    items_location = _join(location, "items")
    raw_items = entry.get("items")
    children = _build_sidebar(
        raw_items,
        trailing_slash=trailing_slash,
        location=items_location,
        collector=collector,
    )
    if isinstance(raw_items, list | tuple | None) and not raw_items:
        collector.add(
            IssueKind.EMPTY_GROUP,
            items_location,
            f"group '{label or '?'}' must contain at least one entry",
        )
    collapsed = _bool_option(
        entry, "collapsed", False, location=location, collector=collector
    )
    if label is None or not children:
        return None
    return SidebarGroup(label=label, items=children, collapsed=collapsed)


def _build_link(
    entry: typ.Mapping[str, typ.Any],
    *,
    label: str | None,
    trailing_slash: str,
    location: str,
    collector: _IssueCollector,
) -> SidebarLink | None:
    link_location = _join(location, "link")
    route = entry.get("link")
    if not isinstance(route, str) or not route.strip():
        collector.add(
            IssueKind.INVALID_PATH,
            link_location,
            "link must be a non-empty route such as '/guides/example/'",
        )
        return None
    route = route.strip()
    problem = _route_problem(route, trailing_slash)
    if problem:
        collector.add(IssueKind.INVALID_PATH, link_location, problem)
        return None
    if label is None:
        return None
    return SidebarLink(label=label, link=route, badge=_optional_str(entry.get("badge")))


def _build_autogenerate(
    entry: typ.Mapping[str, typ.Any],
    *,
    label: str | None,
    location: str,
    collector: _IssueCollector,
) -> SidebarAutogenerate | None:
    auto_location = _join(location, "autogenerate")
    match entry.get("autogenerate"):
        case dict() as payload:
            _reject_unknown_keys(
                payload,
                _AUTOGENERATE_KEYS,
                location=auto_location,
                collector=collector,
            )
            directory = _required_str(
                payload, "directory", location=auto_location, collector=collector
            )
        case _:
            collector.add(
                IssueKind.MISSING_FIELD,
                _join(auto_location, "directory"),
                "autogenerate requires a 'directory'",
            )
            directory = None
    collapsed = _bool_option(
        entry, "collapsed", False, location=location, collector=collector
    )
    if label is None or directory is None:
        return None
    return SidebarAutogenerate(label=label, directory=directory, collapsed=collapsed)


__all__ = ["_build_sidebar"]
