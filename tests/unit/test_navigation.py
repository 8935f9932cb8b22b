"""Tests for navigation between marks."""

from harpoon_marks.core.config.store import ConfigStore
from harpoon_marks.core.marks.engine import MarkEngine
from harpoon_marks.core.navigation import Navigator
from tests.unit.fakes import FakeEditor


def _navigator_with(engine: MarkEngine, *files: str) -> Navigator:
    for name in files:
        engine.add(name)
    return Navigator(engine)


def test_nav_file_opens_mark_at_stored_cursor(engine: MarkEngine, editor: FakeEditor) -> None:
    navigator = _navigator_with(engine, "a.lua", "b.lua")

    assert navigator.nav_file(2) is True
    assert editor.opened == [("b.lua", 5, 2)]


def test_nav_file_by_filename(engine: MarkEngine, editor: FakeEditor) -> None:
    navigator = _navigator_with(engine, "a.lua")

    assert navigator.nav_file("a.lua") is True
    assert editor.opened == [("a.lua", 5, 2)]


def test_nav_file_keeps_stable_index_after_removal(
    engine: MarkEngine, editor: FakeEditor
) -> None:
    navigator = _navigator_with(engine, "a.lua", "b.lua", "c.lua")
    engine.remove("a.lua")

    assert navigator.nav_file(1) is False
    assert navigator.nav_file(3) is True
    assert editor.opened == [("c.lua", 5, 2)]


def test_nav_file_out_of_range_does_nothing(engine: MarkEngine, editor: FakeEditor) -> None:
    navigator = _navigator_with(engine, "a.lua")

    assert navigator.nav_file(5) is False
    assert navigator.nav_file(-1) is False
    assert editor.opened == []


def test_nav_next_wraps_around(engine: MarkEngine, editor: FakeEditor) -> None:
    navigator = _navigator_with(engine, "a.lua", "b.lua")
    editor.current = "b.lua"

    navigator.nav_next()

    assert editor.opened[-1][0] == "a.lua"


def test_nav_prev_wraps_around(engine: MarkEngine, editor: FakeEditor) -> None:
    navigator = _navigator_with(engine, "a.lua", "b.lua")
    editor.current = "a.lua"

    navigator.nav_prev()

    assert editor.opened[-1][0] == "b.lua"


def test_nav_next_from_unmarked_file_starts_at_first(
    engine: MarkEngine, editor: FakeEditor
) -> None:
    navigator = _navigator_with(engine, "a.lua", "b.lua")
    editor.current = "elsewhere.lua"

    navigator.nav_next()
    navigator.nav_next()

    assert [name for name, _row, _col in editor.opened] == ["a.lua", "b.lua"]


def test_nav_prev_from_unmarked_file_starts_at_last(
    engine: MarkEngine, editor: FakeEditor
) -> None:
    navigator = _navigator_with(engine, "a.lua", "b.lua")

    navigator.nav_prev()

    assert editor.opened == [("b.lua", 5, 2)]


def test_nav_next_skips_tombstones(engine: MarkEngine, editor: FakeEditor) -> None:
    navigator = _navigator_with(engine, "a.lua", "b.lua", "c.lua")
    engine.remove("b.lua")
    editor.current = "a.lua"

    navigator.nav_next()

    assert editor.opened[-1][0] == "c.lua"


def test_nav_without_marks_returns_false(engine: MarkEngine, editor: FakeEditor) -> None:
    navigator = Navigator(engine)
    assert navigator.nav_next() is False
    assert navigator.nav_prev() is False
    assert editor.opened == []


def test_zero_index_navigation(store: ConfigStore) -> None:
    editor = FakeEditor()
    engine = MarkEngine(store, editor, zero_index=True)
    navigator = _navigator_with(engine, "a.lua", "b.lua")

    assert navigator.nav_file(0) is True
    editor.current = "a.lua"
    assert navigator.nav_next() is True
    assert [name for name, _row, _col in editor.opened] == ["a.lua", "b.lua"]


def test_zero_index_reaches_every_mark(store: ConfigStore) -> None:
    editor = FakeEditor()
    engine = MarkEngine(store, editor, zero_index=True)
    navigator = _navigator_with(engine, "a.lua", "b.lua", "c.lua")

    assert navigator.nav_file(0) is True
    assert navigator.nav_file("a.lua") is True
    assert navigator.nav_file(2) is True
    assert navigator.nav_file(3) is False
    assert [name for name, _row, _col in editor.opened] == ["a.lua", "a.lua", "c.lua"]


def test_zero_index_next_wraps_from_last_mark(store: ConfigStore) -> None:
    editor = FakeEditor()
    engine = MarkEngine(store, editor, zero_index=True)
    navigator = _navigator_with(engine, "a.lua", "b.lua", "c.lua")
    editor.current = "b.lua"

    assert navigator.nav_next() is True
    assert navigator.nav_next() is True

    assert [name for name, _row, _col in editor.opened] == ["c.lua", "a.lua"]
