"""Utility helpers shared by the site configuration loader."""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ
from urllib.parse import urlsplit

from .models import ConfigIssue, IssueKind

TRAILING_SLASH_POLICIES: tuple[str, ...] = ("always", "never", "ignore")
IMAGE_SERVICES: tuple[str, ...] = ("sharp", "noop")
TEXT_DIRECTIONS: tuple[str, ...] = ("ltr", "rtl")

# language[-extlang][-script][-region][-variant...]
LANGUAGE_TAG_PATTERN = re.compile(
    r"""
    ^[a-z]{2,3}
    (?:-[a-z]{3}){0,3}
    (?:-[a-z]{4})?
    (?:-(?:[a-z]{2}|\d{3}))?
    (?:-(?:[a-z\d]{5,8}|\d[a-z\d]{3}))*$
    """,
    re.IGNORECASE | re.VERBOSE,
)


@dc.dataclass(slots=True)
class _IssueCollector:
    """Accumulate violations so they can be raised together."""

    issues: list[ConfigIssue] = dc.field(default_factory=list)

    def add(self, kind: IssueKind, location: str, message: str) -> None:
        self.issues.append(ConfigIssue(kind=kind, location=location, message=message))

    def __bool__(self) -> bool:
        return bool(self.issues)


def _join(location: str, key: str | int) -> str:
    """Extend a dotted location with a mapping key or list index."""
    if isinstance(key, int):
        return f"{location}[{key}]"
    return f"{location}.{key}" if location else key


def _is_language_tag(value: object) -> bool:
    """Return True when ``value`` is a well-formed BCP 47 language tag."""
    return isinstance(value, str) and bool(LANGUAGE_TAG_PATTERN.match(value))


def _is_http_url(value: object) -> bool:
    """Return True for absolute ``http``/``https`` URLs with a host."""
    if not isinstance(value, str):
        return False
    parts = urlsplit(value.strip())
    return parts.scheme in {"http", "https"} and bool(parts.netloc)


def _route_problem(route: str, trailing_slash: str) -> str | None:
    """Describe why ``route`` breaks the routing rules, or return None."""
    if not route.startswith("/"):
        return f"route '{route}' must begin with '/'"
    if route.startswith("//") or urlsplit(route).netloc:
        return f"route '{route}' points at another host; use a site-relative path"
    path = re.split(r"[?#]", route, maxsplit=1)[0]
    if trailing_slash == "always" and not path.endswith("/"):
        return f"route '{route}' must end with '/' when trailing_slash is 'always'"
    if trailing_slash == "never" and path != "/" and path.endswith("/"):
        return f"route '{route}' must not end with '/' when trailing_slash is 'never'"
    return None


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _required_str(
    payload: typ.Mapping[str, typ.Any],
    key: str,
    *,
    location: str,
    collector: _IssueCollector,
) -> str | None:
    """Return a non-empty string field or record a MissingField issue."""
    value = payload.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    if value is None or (isinstance(value, str) and not value.strip()):
        collector.add(
            IssueKind.MISSING_FIELD, _join(location, key), f"'{key}' is required"
        )
    else:
        collector.add(
            IssueKind.INVALID_VALUE,
            _join(location, key),
            f"'{key}' must be a string, got {type(value).__name__}",
        )
    return None


def _bool_option(
    payload: typ.Mapping[str, typ.Any],
    key: str,
    default: bool,
    *,
    location: str,
    collector: _IssueCollector,
) -> bool:
    """Return a boolean field, recording an issue when it has another type."""
    value = payload.get(key, default)
    if isinstance(value, bool):
        return value
    collector.add(
        IssueKind.INVALID_VALUE,
        _join(location, key),
        f"'{key}' must be true or false, got {value!r}",
    )
    return default


def _choice_option(
    payload: typ.Mapping[str, typ.Any],
    key: str,
    default: str,
    choices: tuple[str, ...],
    *,
    location: str,
    collector: _IssueCollector,
) -> str:
    """Return an enumerated string field, recording an issue when unknown."""
    value = payload.get(key, default)
    if value in choices:
        return typ.cast("str", value)
    allowed = ", ".join(choices)
    collector.add(
        IssueKind.INVALID_VALUE,
        _join(location, key),
        f"'{key}' must be one of {allowed}; got {value!r}",
    )
    return default


def _mapping_section(
    raw: typ.Mapping[str, typ.Any],
    key: str,
    *,
    location: str,
    collector: _IssueCollector,
) -> typ.Mapping[str, typ.Any]:
    """Return a nested mapping section, treating null as empty."""
    value = raw.get(key)
    match value:
        case None:
            return {}
        case dict():
            return value
        case _:
            collector.add(
                IssueKind.INVALID_VALUE,
                _join(location, key),
                f"'{key}' must be a mapping",
            )
            return {}


def _reject_unknown_keys(
    payload: typ.Mapping[str, typ.Any],
    allowed: typ.Collection[str],
    *,
    location: str,
    collector: _IssueCollector,
) -> None:
    """Record an issue for every key outside ``allowed``."""
    for key in payload:
        if key not in allowed:
            collector.add(
                IssueKind.INVALID_VALUE,
                _join(location, str(key)),
                f"unknown option '{key}'",
            )


def _deep_merge(
    base: typ.Mapping[str, typ.Any], override: typ.Mapping[str, typ.Any]
) -> dict[str, typ.Any]:
    """Overlay ``override`` onto ``base``; mappings merge, everything else replaces."""
    merged: dict[str, typ.Any] = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


__all__ = [
    "IMAGE_SERVICES",
    "LANGUAGE_TAG_PATTERN",
    "TEXT_DIRECTIONS",
    "TRAILING_SLASH_POLICIES",
    "_IssueCollector",
    "_bool_option",
    "_choice_option",
    "_deep_merge",
    "_is_http_url",
    "_is_language_tag",
    "_join",
    "_mapping_section",
    "_optional_str",
    "_reject_unknown_keys",
    "_required_str",
    "_route_problem",
]
