"""Tests for log level selection."""

import pytest

from harpoon_marks.logging_config import resolve_log_level


def test_verbose_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HARPOON_LOG", "error")
    assert resolve_log_level(verbose=True) == "DEBUG"


@pytest.mark.parametrize(
    ("value", "expected"),
    [("trace", "TRACE"), ("info", "INFO"), ("warn", "WARNING"), ("bogus", "WARNING")],
)
def test_harpoon_log_env(monkeypatch: pytest.MonkeyPatch, value: str, expected: str) -> None:
    monkeypatch.setenv("HARPOON_LOG", value)
    assert resolve_log_level() == expected


def test_default_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("HARPOON_LOG", raising=False)
    assert resolve_log_level() == "WARNING"
