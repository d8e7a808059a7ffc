"""Shared test fixtures for content-index."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from content_index import CIX_DIR
from content_index.config import (
    ContentIndexConfig,
    get_commit_index_path,
    get_index_path,
    save_config,
)


@pytest.fixture
def cli_runner():
    """Click CLI test runner."""
    return CliRunner()


def setup_cix_project(project_root: Path, config: ContentIndexConfig | None = None) -> ContentIndexConfig:
    """Initialize a cix project at the given path.

    This replaces CLI-based initialization for testing.

    Args:
        project_root: Path to the project root
        config: Optional config to use (defaults to ContentIndexConfig())

    Returns:
        The config that was saved
    """
    if config is None:
        config = ContentIndexConfig()

    (project_root / CIX_DIR).mkdir(parents=True, exist_ok=True)
    save_config(config, project_root)

    # Empty index files
    get_index_path(project_root, config).write_text("")
    get_commit_index_path(project_root, config).write_text("")

    return config


@pytest.fixture
def initialized_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A temporary project with cix initialized, used as the working directory."""
    setup_cix_project(tmp_path)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def sample_files(tmp_path: Path) -> Path:
    """
    A directory of small files.

    Structure:
        files/
        ├── a.txt        "alpha"
        ├── b.txt        "bravo"
        ├── same1.txt    "same"
        ├── same2.txt    "same"
        └── sub/
            └── nested.txt  "nested"
    """
    root = tmp_path / "files"
    root.mkdir()
    (root / "a.txt").write_bytes(b"alpha")
    (root / "b.txt").write_bytes(b"bravo")
    (root / "same1.txt").write_bytes(b"same")
    (root / "same2.txt").write_bytes(b"same")
    sub = root / "sub"
    sub.mkdir()
    (sub / "nested.txt").write_bytes(b"nested")
    return root
