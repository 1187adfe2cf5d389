"""Load the entry build configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from content_entries._constants import MARKDOWN_BASE_URL_PLACEHOLDER

from .models import (
    COLLECTION_KINDS,
    BuildConfig,
    BuildConfigError,
    CollectionConfig,
    default_collections,
)


def load_build_config(path: Path | None = None) -> BuildConfig:
    """Load the YAML file describing collections and output settings.

    Parameters
    ----------
    path : Path or None, optional
        Filesystem path to the configuration (for example
        ``config/entries.yaml``). ``None`` returns the built-in defaults: a
        required ``blog`` collection at ``../blog`` and an optional
        ``material`` collection at ``../material``, written to ``dist``.

    Returns
    -------
    BuildConfig
        Parsed configuration with defaults applied.

    Raises
    ------
    FileNotFoundError
        If ``path`` is given but does not exist.
    BuildConfigError
        If the YAML cannot be parsed or a collection is malformed.

    Examples
    --------
    >>> config = load_build_config()
    >>> [collection.key for collection in config.collections]
    ['blog', 'material']
    """
    if path is None:
        return BuildConfig(collections=default_collections())

    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        with path.open("r", encoding="utf-8") as handle:
            loaded = loader.load(handle) or {}
    except YAMLError as exc:
        msg = f"Could not parse configuration file '{path}': {exc}"
        raise BuildConfigError(msg) from exc
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise BuildConfigError(msg)

    raw: dict[str, typ.Any] = dict(loaded)
    defaults = raw.get("defaults", {}) or {}
    collections_raw = raw.get("collections")

    if collections_raw is None:
        collections = default_collections()
    else:
        if not isinstance(collections_raw, dict) or not collections_raw:
            msg = "'collections' must be a non-empty mapping."
            raise BuildConfigError(msg)
        collections = [
            _build_collection_config(str(key), payload)
            for key, payload in collections_raw.items()
        ]

    return BuildConfig(
        output_dir=Path(defaults.get("output_dir", "dist")),
        base_url=str(defaults.get("base_url", MARKDOWN_BASE_URL_PLACEHOLDER)),
        pygments_style=str(defaults.get("pygments_style", "default")),
        collections=collections,
    )


def _build_collection_config(key: str, payload: object) -> CollectionConfig:
    """Build a CollectionConfig for a single ``collections`` entry."""
    match payload:
        case None:
            options: typ.Mapping[str, typ.Any] = {}
        case dict():
            options = payload
        case _:
            msg = f"Collection '{key}' must be a mapping."
            raise BuildConfigError(msg)

    kind = options.get("kind") or (key if key in COLLECTION_KINDS else "material")
    if kind not in COLLECTION_KINDS:
        msg = (
            f"Collection '{key}' has unknown kind '{kind}'; "
            f"expected one of {', '.join(COLLECTION_KINDS)}."
        )
        raise BuildConfigError(msg)

    return CollectionConfig(
        key=key,
        source_dir=Path(options.get("source_dir", f"../{key}")),
        kind=kind,
        optional=bool(options.get("optional", False)),
    )


__all__ = ["load_build_config"]
