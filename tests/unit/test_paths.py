"""Tests for path normalization and project keys."""

from pathlib import Path

import pytest

from harpoon_marks.core.paths import branch_key, expand_key, normalize_path, project_key


@pytest.mark.parametrize(
    "path",
    ["src/a.py", "./src/../a.py", "/p/x.lua", "src\\lib\\a.py", "../sibling/b.md", ""],
)
def test_normalize_is_idempotent(path: str, project_dir: Path) -> None:
    once = normalize_path(path, project_dir)
    assert normalize_path(once, project_dir) == once


def test_normalize_makes_paths_inside_cwd_relative(project_dir: Path) -> None:
    absolute = str(project_dir / "src" / "a.py")
    assert normalize_path(absolute, project_dir) == "src/a.py"


def test_normalize_keeps_paths_outside_cwd_absolute(project_dir: Path) -> None:
    assert normalize_path("/p/x.lua", project_dir) == "/p/x.lua"


def test_normalize_does_not_treat_prefix_sibling_as_inside(project_dir: Path) -> None:
    sibling = f"{project_dir}-other/a.py"
    assert normalize_path(sibling, project_dir) == sibling


def test_normalize_converts_backslashes_and_collapses_dots(project_dir: Path) -> None:
    assert normalize_path("src\\lib\\a.py", project_dir) == "src/lib/a.py"
    assert normalize_path("./src/../a.py", project_dir) == "a.py"


def test_normalize_keeps_empty_string(project_dir: Path) -> None:
    assert normalize_path("", project_dir) == ""


def test_normalize_expands_home(
    tmp_path: Path, project_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    assert normalize_path("~/notes.md", project_dir) == (tmp_path / "home" / "notes.md").as_posix()


def test_project_key_is_the_working_directory(project_dir: Path) -> None:
    assert project_key(project_dir) == project_dir.as_posix()


def test_project_key_defaults_to_process_cwd(
    project_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(project_dir)
    assert project_key() == Path.cwd().as_posix()


def test_branch_key_appends_branch_name(
    project_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr("harpoon_marks.core.paths._git_branch", lambda _cwd: "main")
    assert branch_key(project_dir) == f"{project_dir.as_posix()}-main"


def test_branch_key_falls_back_without_branch(
    project_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr("harpoon_marks.core.paths._git_branch", lambda _cwd: None)
    assert branch_key(project_dir) == project_key(project_dir)


def test_branch_key_outside_a_repository_is_the_project_key(
    tmp_path: Path, project_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Works whether git is installed or not: both paths fall back."""
    monkeypatch.delenv("GIT_DIR", raising=False)
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
    assert branch_key(project_dir) == project_key(project_dir)


def test_expand_key_expands_home_and_variables(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("WORK", "/srv/work")
    assert expand_key("~/code") == f"{tmp_path}/code"
    assert expand_key("$WORK/app") == "/srv/work/app"
    assert expand_key("main") == "main"
