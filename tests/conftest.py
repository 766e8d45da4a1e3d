import pytest

from game.space.entities import Kind
from game.space.events import MessageBus
from game.space.session import GameSession
from game.space.utils import make_rng
from game.space.world import World


@pytest.fixture
def bus():
    return MessageBus()


@pytest.fixture
def world(bus):
    """World holding only the hero and its wings"""
    w = World(bus, stage=1, rng=make_rng(0))
    w.create_player()
    return w


@pytest.fixture
def session():
    """Stage 1 session with the scheduled enemy waves removed"""
    s = GameSession(stage=1, rng=make_rng(0))
    s.world.objects = [o for o in s.world.objects if o.kind in (Kind.PLAYER, Kind.WING)]
    s.world.pending = []
    return s


class Recorder:
    """Bus handler that remembers every payload it receives"""

    def __init__(self):
        self.calls = []

    def __call__(self, payload):
        self.calls.append(payload)

    def __len__(self):
        return len(self.calls)


@pytest.fixture
def recorder():
    return Recorder
