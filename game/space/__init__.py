"""Space shooter core - entities, event bus, world update and loop driver"""

from .events import Events, MessageBus
from .loop import LoopDriver
from .session import GameSession
from .shooter_env import ShooterEnv, run_random_episode
from .utils import Rect, intersects
from .world import World

__all__ = [
    'Events',
    'MessageBus',
    'LoopDriver',
    'GameSession',
    'ShooterEnv',
    'run_random_episode',
    'Rect',
    'intersects',
    'World',
]
