"""Cyclopts CLI entrypoint for validating and exporting site configuration.

The ``docsite`` console script defined here checks a ``site.yaml`` file,
exports the normalized structure the rendering pipeline consumes, lists the
declared variants, and reports drift between two variants. Typical usage
involves running ``docsite check`` in CI before the site build and
``docsite diff --right offline`` when variants disagree.

Examples
--------
Validate the default configuration:

>>> from docsite_config.cli import main
>>> main()  # doctest: +SKIP

Export a variant as JSON for the renderer:

>>> from docsite_config.cli import app
>>> app(
...     ["export", "--variant", "offline", "--output", "dist/site.json"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import SiteConfigError, list_variants, load_site_config
from .diff import diff_site_configs
from .serialize import ExportFormat, dump_config

DEFAULT_CONFIG = Path("config/site.yaml")

app = App(name="docsite", config=cyclopts.config.Env("DOCSITE_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _report_failure(error: SiteConfigError) -> typ.NoReturn:
    """Print every configuration issue and exit with status 1."""
    if error.issues:
        count = len(error.issues)
        noun = "issue" if count == 1 else "issues"
        print(f"invalid configuration ({count} {noun}):")
        for issue in error.issues:
            print(f"  {issue}")
    else:
        print(f"invalid configuration: {error}")
    raise SystemExit(1)


@app.command(help="Validate the site configuration and report every issue.")
def check(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="DOCSITE_CONFIG")
    ] = DEFAULT_CONFIG,
    variant: typ.Annotated[
        str | None, Parameter(help="Variant to apply", env_var="DOCSITE_VARIANT")
    ] = None,
) -> None:
    """Validate ``config`` and print a short summary.

    Parameters
    ----------
    config : Path, optional
        Path to the ``site.yaml`` configuration file (overridable via
        ``DOCSITE_CONFIG``).
    variant : str or None, optional
        Variant whose overrides are applied before validation.

    Raises
    ------
    SystemExit
        With status 1 when the configuration is invalid.
    """
    try:
        site = load_site_config(config, variant=variant)
    except SiteConfigError as exc:
        _report_failure(exc)

    name = f"{_format_path(config)}" + (f" [{variant}]" if variant else "")
    links = sum(1 for _ in site.iter_links())
    integrations = ", ".join(item.name for item in site.integrations) or "none"
    print(f"ok {name}: '{site.title}'")
    print(f"  sidebar: {len(site.sidebar)} top-level entries, {links} links")
    print(f"  locales: {', '.join(site.locales) or 'none'}")
    print(f"  integrations: {integrations}")


@app.command(help="Write the normalized configuration for the rendering pipeline.")
def export(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="DOCSITE_CONFIG")
    ] = DEFAULT_CONFIG,
    variant: typ.Annotated[
        str | None, Parameter(help="Variant to apply", env_var="DOCSITE_VARIANT")
    ] = None,
    fmt: typ.Annotated[
        ExportFormat, Parameter(name="--format", help="Output format")
    ] = "json",
    output: typ.Annotated[
        Path | None, Parameter(help="Output file (stdout when omitted)")
    ] = None,
) -> None:
    """Export the validated configuration as JSON or YAML.

    Parameters
    ----------
    config : Path, optional
        Path to the site configuration file.
    variant : str or None, optional
        Variant whose overrides are applied before export.
    fmt : {"json", "yaml"}, optional
        Serialization format, ``json`` by default.
    output : Path or None, optional
        Destination file. Parent directories are created as needed.
    """
    try:
        site = load_site_config(config, variant=variant)
    except SiteConfigError as exc:
        _report_failure(exc)

    rendered = dump_config(site, fmt)
    if output is None:
        print(rendered, end="")
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(rendered, encoding="utf-8")
    print(f"wrote {_format_path(output)}")


@app.command(help="Show how two variants of the configuration differ.")
def diff(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="DOCSITE_CONFIG")
    ] = DEFAULT_CONFIG,
    left: typ.Annotated[
        str | None, Parameter(help="Left-hand variant (base when omitted)")
    ] = None,
    right: typ.Annotated[
        str | None, Parameter(help="Right-hand variant (base when omitted)")
    ] = None,
) -> None:
    """Print the leaf-level changes between two variants of one file."""
    try:
        before = load_site_config(config, variant=left)
        after = load_site_config(config, variant=right)
    except SiteConfigError as exc:
        _report_failure(exc)

    changes = diff_site_configs(before, after)
    left_name = left or "base"
    right_name = right or "base"
    if not changes:
        print(f"{left_name} and {right_name} are identical")
        return
    noun = "change" if len(changes) == 1 else "changes"
    print(f"{left_name} -> {right_name}: {len(changes)} {noun}")
    for change in changes:
        print(f"  {change}")


@app.command(help="List the variants declared in the configuration file.")
def variants(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="DOCSITE_CONFIG")
    ] = DEFAULT_CONFIG,
) -> None:
    """Print each declared variant name on its own line."""
    try:
        names = list_variants(config)
    except SiteConfigError as exc:
        _report_failure(exc)
    if not names:
        print("no variants declared")
        return
    for name in names:
        print(name)


def main() -> None:
    """Invoke the Cyclopts application that powers the ``docsite`` command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
