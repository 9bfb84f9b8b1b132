"""Shared fixtures: isolate each test from any flagreg.toml on disk."""

from pathlib import Path

import pytest

from flagreg.config import CONFIG_FILENAME

LINUX_TRIPLE = "x86_64-unknown-linux-gnu"


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run from an empty temp directory (no flagreg.toml above it)."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def linux_project(project_dir: Path) -> Path:
    """A project whose default target is x86_64 glibc Linux."""
    (project_dir / CONFIG_FILENAME).write_text(
        f'[target]\ntriple = "{LINUX_TRIPLE}"\n', encoding="utf-8"
    )
    return project_dir
