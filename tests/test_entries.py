"""Tests for assembling entries from README documents and sorting them.

These tests build small entry folders under ``tmp_path`` (header images are
generated with Pillow) and check that ``markdown_to_entry`` fills in
defaults, probes header images, rewrites URLs for the entry's collection,
and registers anchors with the link validator. Sorting covers the sticky,
date, and slug tie-break rules.
"""

from __future__ import annotations

import typing as typ

import pytest
from PIL import Image

from content_entries.entries import (
    Entry,
    apply_blog_defaults,
    compare_entries,
    get_image_dimensions,
    load_entry,
    markdown_to_entry,
    read_folders,
    read_markdown_file,
    sort_entries,
)
from content_entries.errors import (
    FrontmatterError,
    HeaderImageError,
    MissingEntryFileError,
)
from content_entries.link_validator import LinkValidator

if typ.TYPE_CHECKING:
    from pathlib import Path

POST = """---
title: First post
published: 2024-01-15
header: header.png
---

## Setup

![diagram](diagram.png)

See [the setup](#setup) :wave:
"""


@pytest.fixture
def blog_root(tmp_path: Path) -> Path:
    """Create ``blog/first-post`` with a README and a 12x8 header image."""
    entry_dir = tmp_path / "blog" / "first-post"
    entry_dir.mkdir(parents=True)
    (entry_dir / "README.md").write_text(POST, encoding="utf-8")
    Image.new("RGB", (12, 8), "white").save(entry_dir / "header.png")
    return tmp_path / "blog"


def test_entry_meta_is_normalised(blog_root: Path) -> None:
    """Dates become ISO strings and hidden/sticky default to ``False``."""
    entry = load_entry(blog_root, "first-post", collection="blog")
    assert entry.slug == "first-post"
    assert entry.meta["title"] == "First post"
    assert entry.meta["published"] == "2024-01-15T00:00:00.000Z"
    assert entry.meta["hidden"] is False
    assert entry.meta["sticky"] is False


def test_header_is_probed_for_dimensions(blog_root: Path) -> None:
    """The header filename becomes an object with the image size."""
    entry = load_entry(blog_root, "first-post", collection="blog")
    assert entry.meta["header"] == {"url": "header.png", "width": 12, "height": 8}


def test_missing_header_image_fails(blog_root: Path) -> None:
    """A header that cannot be probed aborts the entry."""
    (blog_root / "first-post" / "header.png").unlink()
    with pytest.raises(HeaderImageError, match="header.png"):
        load_entry(blog_root, "first-post", collection="blog")


def test_undecodable_header_image_fails(tmp_path: Path) -> None:
    """Files Pillow cannot read are reported as header image errors."""
    bogus = tmp_path / "header.png"
    bogus.write_text("not an image", encoding="utf-8")
    with pytest.raises(HeaderImageError):
        get_image_dimensions(bogus)


def test_urls_are_rewritten_for_the_collection(blog_root: Path) -> None:
    """Images use the placeholder base and links the entry's own path."""
    entry = load_entry(blog_root, "first-post", collection="blog")
    assert 'src="%%MARKDOWN_BASE_URL%%/blog/first-post/diagram.png"' in entry.html
    assert 'href="/blog/first-post#setup"' in entry.html


def test_custom_base_url_is_used(blog_root: Path) -> None:
    """A configured base URL replaces the placeholder."""
    entry = load_entry(
        blog_root, "first-post", collection="blog", base_url="https://cdn.example"
    )
    assert 'src="https://cdn.example/blog/first-post/diagram.png"' in entry.html


def test_anchors_and_links_are_registered(blog_root: Path) -> None:
    """Compiling an entry feeds the link validator."""
    validator = LinkValidator()
    load_entry(blog_root, "first-post", collection="blog", validator=validator)
    assert validator.anchors_for("/blog/first-post") == {"setup"}
    assert [link.anchor for link in validator.links] == ["setup"]
    assert validator.validate().valid


def test_emojify_hook_runs_on_html(blog_root: Path) -> None:
    """Shortcodes are substituted by the supplied hook."""
    entry = load_entry(
        blog_root,
        "first-post",
        collection="blog",
        emojify=lambda html: html.replace(":wave:", "\N{WAVING HAND SIGN}"),
    )
    assert "\N{WAVING HAND SIGN}" in entry.html
    assert ":wave:" not in entry.html


def test_explicit_flags_are_kept(tmp_path: Path) -> None:
    """Front matter flags override the defaults."""
    entry = markdown_to_entry(
        "---\ntitle: A\npublished: 2024-01-15\nhidden: true\nsticky: true\n---\nBody\n",
        slug="a",
        collection="material",
        source_root=tmp_path,
    )
    assert entry.meta["hidden"] is True
    assert entry.meta["sticky"] is True


@pytest.mark.parametrize(
    "document",
    [
        "# No front matter\n",
        "---\nauthor: someone\n---\nBody\n",
        "---\ntitle: A\n---\nBody\n",
    ],
)
def test_invalid_front_matter_is_fatal(tmp_path: Path, document: str) -> None:
    """Missing front matter or required fields raise ``FrontmatterError``."""
    with pytest.raises(FrontmatterError, match="/blog/broken"):
        markdown_to_entry(
            document, slug="broken", collection="blog", source_root=tmp_path
        )


def test_read_folders_skips_drafts_and_files(tmp_path: Path) -> None:
    """Underscore folders and plain files are not entries."""
    for name in ("b-post", "a-post", "_draft"):
        (tmp_path / name).mkdir()
    (tmp_path / "notes.txt").write_text("x", encoding="utf-8")
    assert read_folders(tmp_path) == ["a-post", "b-post"]


def test_missing_readme_is_reported(tmp_path: Path) -> None:
    """An entry folder without README.md is a build error."""
    with pytest.raises(MissingEntryFileError):
        read_markdown_file(tmp_path / "empty" / "README.md")


def _entry(slug: str, published: str, *, sticky: bool = False) -> Entry:
    return Entry(slug=slug, html="", meta={"published": published, "sticky": sticky})


def test_sort_puts_sticky_first_then_newest() -> None:
    """A sticky old entry outranks newer ones; the rest are newest first."""
    entries = [
        _entry("normal-old", "2021-01-01T00:00:00.000Z"),
        _entry("sticky-old", "2020-01-01T00:00:00.000Z", sticky=True),
        _entry("normal-new", "2024-01-01T00:00:00.000Z"),
    ]
    actual = [entry.slug for entry in sort_entries(entries)]
    assert actual == ["sticky-old", "normal-new", "normal-old"]


def test_sort_breaks_date_ties_by_slug_descending() -> None:
    """Entries published at the same instant order by slug, descending."""
    published = "2024-01-01T00:00:00.000Z"
    entries = [_entry("alpha", published), _entry("beta", published)]
    assert [entry.slug for entry in sort_entries(entries)] == ["beta", "alpha"]


def test_compare_entries_is_antisymmetric() -> None:
    """Swapping the arguments flips the sign."""
    a = _entry("a", "2024-01-01T00:00:00.000Z")
    b = _entry("b", "2023-01-01T00:00:00.000Z", sticky=True)
    assert compare_entries(a, b) == -compare_entries(b, a) != 0
    assert compare_entries(a, a) == 0


@pytest.mark.parametrize(
    ("meta", "expected"),
    [
        ({"darken-header": True}, True),
        ({"darkenHeader": True}, True),
        ({}, False),
    ],
)
def test_blog_defaults_fold_darken_header(
    meta: dict[str, typ.Any], expected: bool
) -> None:
    """Both spellings map onto ``darkenHeader`` and the dashed key is dropped."""
    entry = apply_blog_defaults(Entry(slug="a", html="", meta=dict(meta)))
    assert entry.meta["darkenHeader"] is expected
    assert "darken-header" not in entry.meta
