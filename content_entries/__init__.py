"""Compile Markdown blog posts and materials into JSON entries.

Each source folder holds a ``README.md`` with YAML front matter and its
assets. The build renders the body to HTML with heading ids, an optional
table of contents and rewritten image and link URLs, then writes one
``entry.json`` per folder and a sorted ``list.json`` per collection.

Exports
-------
- ``app``: Cyclopts application with the ``build`` and ``check-links``
  commands.
- ``main``: Convenience function that invokes the app.

Examples
--------
>>> from content_entries import app
>>> app.name
('entries',)
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
