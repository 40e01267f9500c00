import pytest

from starblazers import KEY_BINDINGS, Command, GameMode, handle_key, map_key, tick


def test_every_mode_has_bindings():
    assert set(KEY_BINDINGS) == set(GameMode)


@pytest.mark.parametrize("mode, key, command", [
    (GameMode.MENU, "s", Command.START),
    (GameMode.MENU, "q", Command.QUIT),
    (GameMode.PLAYING, "left", Command.MOVE_LEFT),
    (GameMode.PLAYING, "right", Command.MOVE_RIGHT),
    (GameMode.PLAYING, "space", Command.FIRE),
    (GameMode.PLAYING, "escape", Command.PAUSE),
    (GameMode.PAUSED, "e", Command.RESUME),
    (GameMode.PAUSED, "r", Command.RESTART),
    (GameMode.PAUSED, "q", Command.QUIT),
    (GameMode.GAME_OVER, "r", Command.RESTART),
    (GameMode.GAME_OVER, "q", Command.QUIT),
])
def test_map_key(mode, key, command):
    assert map_key(mode, key) is command


@pytest.mark.parametrize("mode, key", [
    (GameMode.MENU, "left"),
    (GameMode.MENU, "x"),
    (GameMode.PLAYING, "q"),
    (GameMode.PLAYING, "s"),
    (GameMode.PAUSED, "space"),
    (GameMode.GAME_OVER, "e"),
    (GameMode.GAME_OVER, "escape"),
])
def test_unbound_keys_map_to_nothing(mode, key):
    assert map_key(mode, key) is None


def test_unknown_key_is_ignored(state):
    assert handle_key(state, "f13") is None
    assert state.mode is GameMode.MENU
    assert state.running


def test_full_session_by_keys(state):
    handle_key(state, "s")
    assert state.mode is GameMode.PLAYING

    start_x = state.ship.x
    handle_key(state, "left")
    handle_key(state, "left")
    assert state.ship.x == start_x - 40

    handle_key(state, "space")
    assert len(state.bullets) == 1

    handle_key(state, "escape")
    assert state.mode is GameMode.PAUSED
    handle_key(state, "left")
    assert state.ship.x == start_x - 40

    handle_key(state, "e")
    assert state.mode is GameMode.PLAYING

    handle_key(state, "escape")
    handle_key(state, "q")
    assert not state.running


def test_movement_is_per_event_not_per_tick(playing):
    handle_key(playing, "right")
    x = playing.ship.x
    for _ in range(5):
        tick(playing)
        if playing.mode is not GameMode.PLAYING:
            break
    assert playing.ship.x == x


def test_restart_key_from_game_over(state):
    state.mode = GameMode.GAME_OVER
    state.score = 250
    state.level = 6
    state.lives = 0

    assert handle_key(state, "r") is Command.RESTART

    assert state.mode is GameMode.PLAYING
    assert (state.score, state.level, state.lives) == (0, 1, 3)
