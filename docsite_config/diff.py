"""Report structural drift between two site configurations.

Both sides are normalized with :func:`site_config_to_data` and flattened into
dotted paths (``sidebar[0].items[1].link``) before comparison, so the report
reads like a diff of the configuration file itself.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from .serialize import site_config_to_data

if typ.TYPE_CHECKING:
    from .config.models import SiteConfig

ChangeKind = typ.Literal["added", "removed", "changed"]
_MISSING = object()


@dc.dataclass(frozen=True, slots=True)
class ConfigChange:
    """One leaf-level difference between two configurations."""

    path: str
    kind: ChangeKind
    before: typ.Any = None
    after: typ.Any = None

    def __str__(self) -> str:
        match self.kind:
            case "added":
                return f"+ {self.path} = {self.after!r}"
            case "removed":
                return f"- {self.path} = {self.before!r}"
            case _:
                return f"~ {self.path}: {self.before!r} -> {self.after!r}"


def diff_site_configs(left: SiteConfig, right: SiteConfig) -> list[ConfigChange]:
    """Return the ordered leaf changes needed to turn ``left`` into ``right``."""
    before = _flatten(site_config_to_data(left))
    after = _flatten(site_config_to_data(right))
    changes: list[ConfigChange] = []
    for path in _ordered_paths(before, after):
        old = before.get(path, _MISSING)
        new = after.get(path, _MISSING)
        if old is _MISSING:
            changes.append(ConfigChange(path=path, kind="added", after=new))
        elif new is _MISSING:
            changes.append(ConfigChange(path=path, kind="removed", before=old))
        elif old != new or type(old) is not type(new):
            changes.append(
                ConfigChange(path=path, kind="changed", before=old, after=new)
            )
    return changes


def _ordered_paths(
    before: typ.Mapping[str, typ.Any], after: typ.Mapping[str, typ.Any]
) -> list[str]:
    """Union of both path sets, left order first, then right-only additions."""
    paths = list(before)
    paths.extend(path for path in after if path not in before)
    return paths


def _flatten(value: typ.Any, prefix: str = "") -> dict[str, typ.Any]:
    """Flatten nested dicts and lists into a ``{dotted_path: leaf}`` mapping.

    Empty containers are kept as leaves so that clearing a list is visible.
    """
    flat: dict[str, typ.Any] = {}
    match value:
        case dict() if value:
            for key, child in value.items():
                path = f"{prefix}.{key}" if prefix else str(key)
                flat.update(_flatten(child, path))
        case list() if value:
            for index, child in enumerate(value):
                flat.update(_flatten(child, f"{prefix}[{index}]"))
        case _:
            flat[prefix] = value
    return flat


__all__ = ["ChangeKind", "ConfigChange", "diff_site_configs"]
