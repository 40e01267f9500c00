import os
import random

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from starblazers import GameConfig, GameMode, GameState


class ScriptedRandom:
    """Random stand-in whose randrange replays a fixed list of values"""

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def randrange(self, *args, **kwargs):
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


@pytest.fixture
def config():
    return GameConfig()


@pytest.fixture
def state(config):
    return GameState(config, random.Random(1234))


@pytest.fixture
def playing(state):
    state.mode = GameMode.PLAYING
    return state


@pytest.fixture
def scripted_rng():
    return ScriptedRandom
