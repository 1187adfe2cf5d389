"""Cyclopts CLI entrypoint for building blog and material entries.

The ``entries`` console script compiles every configured collection into
``dist/<collection>/list.json`` plus one ``entry.json`` per entry, and
reports internal anchor links that do not resolve. ``entries check-links``
runs the same compilation without touching the output folder, which makes
it suitable as a quick pre-commit check.

Examples
--------
Build with the default collections (``../blog`` and ``../material``):

>>> from content_entries.cli import main
>>> main()  # doctest: +SKIP

Build into a custom directory:

>>> from content_entries.cli import app
>>> app(["build", "--output-dir", "public"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .builder import BuildReport, SiteBuilder
from .config import BuildConfigError, load_build_config
from .errors import ContentError

DEFAULT_CONFIG = Path("config/entries.yaml")

app = App(name="entries", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _resolve_config_path(config: Path | None) -> Path | None:
    """Return the explicit config path, or the default file when it exists."""
    if config is not None:
        return config
    return DEFAULT_CONFIG if DEFAULT_CONFIG.exists() else None


def _print_report(report: BuildReport) -> None:
    for key in report.skipped:
        print(f"No {key} folder found, skipping...")
    for key, count in report.entry_counts.items():
        print(f"{key.capitalize()}: {count} entries processed")
    for line in report.report_lines:
        print(line)


@app.command(help="Compile all collections and write the JSON output tree.")
def build(
    *,
    config: typ.Annotated[
        Path | None, Parameter(help="Path to build config", env_var="INPUT_CONFIG")
    ] = None,
    output_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the output folder", env_var="INPUT_OUTPUT_DIR"),
    ] = None,
    verbose: typ.Annotated[
        bool, Parameter(help="Log progress for every entry")
    ] = False,
) -> None:
    """Build every configured collection.

    Parameters
    ----------
    config : Path or None, optional
        Path to the build configuration; ``config/entries.yaml`` is used when
        present, otherwise the built-in defaults apply.
    output_dir : Path or None, optional
        Override the configured output folder.
    verbose : bool, optional
        Enable debug logging.

    Returns
    -------
    None
        Writes the output tree and prints the written paths followed by the
        anchor link report.
    """
    _configure_logging(verbose=verbose)
    build_config = load_build_config(_resolve_config_path(config))
    report = SiteBuilder(build_config, output_dir=output_dir).run()
    for path in report.written:
        print(f"wrote {_format_path(path)}")
    _print_report(report)
    print("Build complete!")


@app.command(name="check-links", help="Compile all collections and report broken anchors.")
def check_links(
    *,
    config: typ.Annotated[
        Path | None, Parameter(help="Path to build config", env_var="INPUT_CONFIG")
    ] = None,
    verbose: typ.Annotated[
        bool, Parameter(help="Log progress for every entry")
    ] = False,
) -> None:
    """Compile every collection and print the anchor link report.

    Nothing is written; broken links are reported but never change the exit
    status.
    """
    _configure_logging(verbose=verbose)
    build_config = load_build_config(_resolve_config_path(config))
    report = SiteBuilder(build_config).run(write=False)
    _print_report(report)


def main() -> None:
    """Invoke the Cyclopts application that powers the ``entries`` command.

    Content, configuration and filesystem errors abort with a single
    ``Build failed`` line on stderr and exit status 1.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    try:
        app()
    except (ContentError, BuildConfigError, OSError) as exc:
        print(f"Build failed: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
