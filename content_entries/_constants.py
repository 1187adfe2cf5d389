"""Common literal values used across content_entries.

These constants keep filenames, placeholder tokens, and marker strings
centralized so the compiler, builder, and tests can import the same values
without drifting. Intended for internal use within the content_entries
package.

Examples
--------
>>> from content_entries import _constants
>>> _constants.ENTRY_FILE
'entry.json'
>>> _constants.IMAGE_BASE_TEMPLATE.format(
...     base_url=_constants.MARKDOWN_BASE_URL_PLACEHOLDER,
...     collection="blog",
...     slug="my-post",
... )
'%%MARKDOWN_BASE_URL%%/blog/my-post/'
"""

README_FILE = "README.md"
ENTRY_FILE = "entry.json"
LIST_FILE = "list.json"

MARKDOWN_BASE_URL_PLACEHOLDER = "%%MARKDOWN_BASE_URL%%"
TOC_MARKER = "[[toc]]"
ASSETS_PREFIX = "assets/"

IMAGE_BASE_TEMPLATE = "{base_url}/{collection}/{slug}/"
LINK_BASE_TEMPLATE = "/{collection}/{slug}"
