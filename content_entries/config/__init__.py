"""Load and validate the YAML configuration for entry builds.

The configuration names the collections to compile (``blog`` and
``material`` by default), where their source folders live, and where the
JSON output is written. :func:`load_build_config` applies defaults and
returns a :class:`BuildConfig` the site builder consumes.

Examples
--------
>>> from pathlib import Path
>>> from content_entries.config import load_build_config
>>> config = load_build_config(Path("config/entries.yaml"))  # doctest: +SKIP
>>> config.get_collection("blog").source_dir  # doctest: +SKIP
PosixPath('../blog')
"""

from .loader import load_build_config
from .models import BuildConfig, BuildConfigError, CollectionConfig

__all__ = [
    "BuildConfig",
    "BuildConfigError",
    "CollectionConfig",
    "load_build_config",
]
