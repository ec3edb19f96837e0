"""Tests for key dispatch, frame refresh and the foreground loop."""

import json
import logging

import pytest

from app import App, AppState, dispatch, refresh
from conftest import BrokenKeys, ScriptedKeys, record
from events import InputFailure, InputSurfaceError, Key, TICK
from menu import Screen
from storage import Storage, StoreCorrupt, StoreUnavailable


def press(state, store, *keys):
    for key in keys:
        if not dispatch(state, Key(key), store):
            return False
    return True


def test_tick_changes_nothing(scenario_store):
    state = AppState(screen=Screen.TODOS)
    before = state.cursors.indexes()
    assert dispatch(state, TICK, scenario_store) is True
    assert state.cursors.indexes() == before
    assert state.screen is Screen.TODOS


@pytest.mark.parametrize("screen", list(Screen))
def test_quit_from_any_screen(scenario_store, screen):
    state = AppState(screen=screen)
    assert dispatch(state, Key("q"), scenario_store) is False
    assert state.running is False


def test_screen_switch_keeps_cursors(scenario_store):
    state = AppState(screen=Screen.TODOS)
    press(state, scenario_store, "j", "l")
    before = state.cursors.indexes()
    press(state, scenario_store, "t", "i", "m", "w", "t")
    assert state.cursors.indexes() == before
    assert state.screen is Screen.TODOS


def test_unknown_key_is_noop(scenario_store):
    state = AppState(screen=Screen.TODOS)
    assert press(state, scenario_store, "x", "?", "escape") is True
    assert state.cursors.indexes() == {"Todo": 0, "Doing": None, "Done": None}


def test_navigation_scenario(scenario_store):
    state = AppState(screen=Screen.TODOS)
    press(state, scenario_store, "j")
    assert state.cursors["Todo"].index == 1
    press(state, scenario_store, "j")
    assert state.cursors["Todo"].index == 0
    press(state, scenario_store, "k")
    assert state.cursors["Todo"].index == 1
    press(state, scenario_store, "up", "down", "down")
    assert state.cursors["Todo"].index == 1


def test_navigation_ignored_outside_todos(scenario_store):
    state = AppState(screen=Screen.HOME)
    press(state, scenario_store, "j", "l")
    assert state.cursors.indexes() == {"Todo": 0, "Doing": None, "Done": None}


def test_focus_right_and_left(scenario_store):
    state = AppState(screen=Screen.TODOS)
    press(state, scenario_store, "l")
    assert state.cursors.focus == "Doing"
    assert state.cursors.indexes() == {"Todo": None, "Doing": 0, "Done": None}
    press(state, scenario_store, "right")
    assert state.cursors.focus == "Done"
    assert state.cursors.indexes() == {"Todo": None, "Doing": None, "Done": None}
    press(state, scenario_store, "l", "j")
    assert state.cursors.focus == "Done"
    assert state.cursors["Done"].index is None
    press(state, scenario_store, "h", "left")
    assert state.cursors.focus == "Todo"
    assert state.cursors.indexes() == {"Todo": 0, "Doing": None, "Done": None}


def test_input_failure_raises(scenario_store):
    with pytest.raises(InputSurfaceError):
        dispatch(AppState(), InputFailure(InputSurfaceError("gone")), scenario_store)


def test_refresh_projects_selected_task(scenario_store):
    state = AppState(screen=Screen.TODOS)
    press(state, scenario_store, "j")
    layout = refresh(state, scenario_store)
    assert layout.detail.row[0] == "2"
    assert state.last_good["Todo"][1].id == 2


def test_store_errors_are_fatal_by_default(scenario_store):
    state = AppState(screen=Screen.TODOS)
    refresh(state, scenario_store)
    scenario_store.path.write_text("{broken")
    with pytest.raises(StoreCorrupt):
        refresh(state, scenario_store)
    with pytest.raises(StoreCorrupt):
        dispatch(state, Key("j"), scenario_store)


def test_keep_going_uses_last_good_board(scenario_store):
    state = AppState(screen=Screen.TODOS, keep_going=True)
    refresh(state, scenario_store)
    scenario_store.path.unlink()

    assert press(state, scenario_store, "j") is True
    assert state.cursors["Todo"].index == 1
    layout = refresh(state, scenario_store)
    assert "db.json" in layout.banner
    assert layout.columns[0].items == ["task 1", "task 2"]
    assert layout.detail.row[0] == "2"

    scenario_store.path.write_text(json.dumps([record(1)]))
    layout = refresh(state, scenario_store)
    assert layout.banner is None
    assert state.banner is None
    assert layout.detail.row[0] == "1"


def test_keep_going_without_snapshot_is_fatal(scenario_store):
    state = AppState(screen=Screen.TODOS, keep_going=True)
    scenario_store.path.unlink()
    with pytest.raises(StoreUnavailable):
        refresh(state, scenario_store)


def test_refresh_clamps_cursor_after_shrink(write_store):
    store = write_store([record(i) for i in range(1, 6)])
    state = AppState(screen=Screen.TODOS)
    press(state, store, "j", "j", "j", "j")
    assert refresh(state, store).columns[0].highlighted == 4

    write_store([record(1), record(2)])
    assert refresh(state, store).columns[0].highlighted == 1
    assert state.cursors["Todo"].index == 1

    # the list grows back: the highlight stays where the user last saw it
    write_store([record(i) for i in range(1, 6)])
    layout = refresh(state, store)
    assert layout.columns[0].highlighted == 1
    assert layout.detail.row[0] == "2"


def test_refresh_unselects_emptied_column(write_store):
    store = write_store([record(1), record(2)])
    state = AppState(screen=Screen.TODOS)
    press(state, store, "j")
    write_store([record(3, "Doing")])
    refresh(state, store)
    assert state.cursors["Todo"].index is None
    write_store([record(1), record(2)])
    assert refresh(state, store).columns[0].highlighted is None
    press(state, store, "j")
    assert state.cursors["Todo"].index == 0


def test_banner_hidden_off_the_board(scenario_store):
    state = AppState(screen=Screen.TODOS, keep_going=True)
    refresh(state, scenario_store)
    scenario_store.path.write_text("{broken")
    assert refresh(state, scenario_store).banner is not None

    press(state, scenario_store, "w")
    assert refresh(state, scenario_store).banner is None

    scenario_store.path.write_text(json.dumps([record(1)]))
    press(state, scenario_store, "i")
    assert refresh(state, scenario_store).banner is None
    press(state, scenario_store, "t")
    assert refresh(state, scenario_store).banner is None
    assert state.banner is None


def test_store_failure_logged_once_until_recovery(scenario_store, caplog):
    state = AppState(screen=Screen.TODOS, keep_going=True)
    refresh(state, scenario_store)
    scenario_store.path.write_text("{broken")
    with caplog.at_level(logging.INFO, logger="app"):
        for _ in range(5):
            refresh(state, scenario_store)
            dispatch(state, TICK, scenario_store)
            press(state, scenario_store, "j")
        scenario_store.path.write_text(json.dumps([record(1)]))
        refresh(state, scenario_store)
        refresh(state, scenario_store)

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "invalid JSON" in warnings[0].getMessage()
    assert [r.getMessage() for r in caplog.records].count("store readable again") == 1


def test_run_until_quit(scenario_store):
    frames = []
    app = App(scenario_store, ScriptedKeys(["t", "j", "l", "q"]), tick_rate=0.01,
              draw=lambda layout, out: frames.append(layout))
    state = AppState()
    assert app.run(state) == 0
    assert state.running is False
    assert state.screen is Screen.TODOS
    assert state.cursors.focus == "Doing"
    assert frames[0].screen is Screen.HOME
    assert frames[-1].columns[1].highlighted == 0


def test_run_fails_fast_on_missing_store(tmp_path):
    app = App(Storage(tmp_path / "missing.json"), ScriptedKeys(["q"]), tick_rate=0.01,
              draw=lambda layout, out: None)
    with pytest.raises(StoreUnavailable):
        app.run()


def test_run_raises_input_failure(scenario_store):
    app = App(scenario_store, BrokenKeys(), tick_rate=0.01, draw=lambda layout, out: None)
    with pytest.raises(InputSurfaceError):
        app.run()
