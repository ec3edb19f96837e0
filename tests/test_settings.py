"""Tests for settings resolution."""

from pathlib import Path

import pytest

from settings import DEFAULT_DB_PATH, Settings, read_env_file, truthy


def test_defaults(tmp_path: Path):
    s = Settings.load({}, env_file=tmp_path / ".env")
    assert s.db_path == DEFAULT_DB_PATH
    assert s.tick_ms == 200
    assert s.tick_rate == pytest.approx(0.2)
    assert s.log_file is None
    assert s.alt_screen is True
    assert s.keep_going is False


def test_env_beats_env_file(tmp_path: Path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# local overrides\n"
        "WORKSUITE_DB=file.json\n"
        "WORKSUITE_TICK_MS = 50\n"
        "WORKSUITE_KEEP_GOING=yes\n"
        "OTHER=ignored\n"
        "not an assignment\n"
    )
    s = Settings.load({"WORKSUITE_DB": "env.json", "WORKSUITE_ALT_SCREEN": "off"}, env_file=env_file)
    assert s.db_path == Path("env.json")
    assert s.tick_ms == 50
    assert s.keep_going is True
    assert s.alt_screen is False
    assert "OTHER" not in read_env_file(env_file)


@pytest.mark.parametrize("value", ["fast", "0", "-5"])
def test_bad_tick_rate(tmp_path: Path, value: str):
    with pytest.raises(ValueError):
        Settings.load({"WORKSUITE_TICK_MS": value}, env_file=tmp_path / ".env")


@pytest.mark.parametrize(
    "value, expected",
    [(None, True), ("1", True), ("on", True), ("0", False), ("False", False), (" no ", False), ("", False)],
)
def test_truthy(value, expected):
    assert truthy(value, True) is expected
