"""Shared test fixtures."""

from pathlib import Path

import pytest

from harpoon_marks.core.config.store import ConfigStore
from harpoon_marks.core.marks.engine import MarkEngine
from tests.unit.fakes import FakeEditor


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    path = tmp_path / "project"
    path.mkdir()
    return path


@pytest.fixture
def user_path(tmp_path: Path) -> Path:
    return tmp_path / "config" / "harpoon.json"


@pytest.fixture
def cache_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "harpoon.json"


@pytest.fixture
def store(user_path: Path, cache_path: Path, project_dir: Path) -> ConfigStore:
    """A loaded store over empty config files."""
    config_store = ConfigStore(user_path, cache_path, cwd=project_dir)
    config_store.load()
    return config_store


@pytest.fixture
def editor() -> FakeEditor:
    return FakeEditor(row=5, col=2)


@pytest.fixture
def engine(store: ConfigStore, editor: FakeEditor) -> MarkEngine:
    return MarkEngine(store, editor)
