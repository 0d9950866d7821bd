"""Shared fixtures for reqtraq tests."""

from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding the reference certdocs."""
    return FIXTURES_DIR


@pytest.fixture
def fixture_repo():
    """Repository context rooted at the fixtures directory."""
    from reqtraq.utilities.git import RepoContext

    return RepoContext(root=FIXTURES_DIR, name="reqtraq")


@pytest.fixture
def tmp_repo(tmp_path: Path):
    """Repository context rooted at a temporary directory."""
    from reqtraq.utilities.git import RepoContext

    return RepoContext(root=tmp_path, name="testrepo")
