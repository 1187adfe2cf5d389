"""Tests for the ``entries`` command line interface.

The command functions are called directly so the tests can inspect printed
output without Cyclopts exiting the interpreter; ``main`` is exercised for
its error reporting contract.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from content_entries import cli

README = """---
title: Hello
published: 2024-01-15
---

## Intro

Jump to [the intro](#intro) or [nowhere](#intr).
"""


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a project with ``config/entries.yaml`` and one blog post."""
    entry_dir = tmp_path / "content" / "blog" / "hello"
    entry_dir.mkdir(parents=True)
    (entry_dir / "README.md").write_text(README, encoding="utf-8")
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    (config_dir / "entries.yaml").write_text(
        "collections:\n  blog:\n    source_dir: content/blog\n", encoding="utf-8"
    )
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_build_prints_written_paths_and_report(
    project: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """``build`` uses the default config file and lists what it wrote."""
    cli.build()
    out = capsys.readouterr().out
    assert "wrote dist/blog/list.json" in out
    assert "wrote dist/blog/hello/entry.json" in out
    assert "Blog: 1 entries processed" in out
    assert "    ? Did you mean: #intro" in out
    assert (project / "dist" / "blog" / "hello" / "entry.json").exists()


def test_build_honours_output_dir(
    project: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """``--output-dir`` overrides the configured folder."""
    cli.build(output_dir=Path("public"))
    assert "wrote public/blog/list.json" in capsys.readouterr().out
    assert not (project / "dist").exists()


def test_check_links_writes_nothing(
    project: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """``check-links`` reports without creating the output folder."""
    cli.check_links()
    out = capsys.readouterr().out
    assert '    ✗ Anchor "#intr" not found' in out
    assert not (project / "dist").exists()


def test_main_reports_failures(
    project: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Content errors end the process with status 1 and a single message."""
    (project / "content" / "blog" / "hello" / "README.md").write_text(
        "no front matter", encoding="utf-8"
    )
    monkeypatch.setattr(sys, "argv", ["entries", "build"])
    with pytest.raises(SystemExit) as excinfo:
        cli.main()
    assert excinfo.value.code == 1
    assert "Build failed: /blog/hello" in capsys.readouterr().err


def test_main_reports_output_cleanup_failures(
    project: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Filesystem errors while clearing the output folder exit with status 1."""
    (project / "dist").mkdir()

    def _fail(path: object, *args: object, **kwargs: object) -> None:
        raise PermissionError(13, "Permission denied", str(path))

    monkeypatch.setattr("content_entries.builder.shutil.rmtree", _fail)
    monkeypatch.setattr(sys, "argv", ["entries", "build"])
    with pytest.raises(SystemExit) as excinfo:
        cli.main()
    assert excinfo.value.code == 1
    assert "Permission denied" in capsys.readouterr().err
