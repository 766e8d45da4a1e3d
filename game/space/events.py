"""
Synchronous publish/subscribe bus for game commands and collision events.

Handlers run in registration order on the caller's stack. A handler may
publish further topics from inside its own dispatch. A handler that
raises aborts the remaining handlers for that publish and the exception
reaches the publisher; handler failures are not isolated.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable, Dict, List, Mapping, Optional


Payload = Mapping[str, Any]
Handler = Callable[[Payload], None]


class Events:
    """Topic names used on the bus"""

    # input commands, published without payload
    MOVE_UP = "MOVE_UP"
    MOVE_DOWN = "MOVE_DOWN"
    MOVE_LEFT = "MOVE_LEFT"
    MOVE_RIGHT = "MOVE_RIGHT"
    FIRE = "FIRE"
    RESTART = "RESTART"
    SPECIAL = "SPECIAL"

    # detected by the world update
    HIT_ENEMY = "HIT_ENEMY"
    HIT_ENEMY_BOSS = "HIT_ENEMY_BOSS"
    HERO_HIT_BY_LASER = "HERO_HIT_BY_LASER"
    ENEMY_COLLIDE_HERO = "ENEMY_COLLIDE_HERO"
    ENEMY_BOSS_COLLIDE_HERO = "ENEMY_BOSS_COLLIDE_HERO"
    ENEMY_PASS_CANVAS = "ENEMY_PASS_CANVAS"

    # session outcome
    GAME_WIN = "GAME_WIN"
    GAME_LOSE = "GAME_LOSE"

    COMMANDS = (MOVE_UP, MOVE_DOWN, MOVE_LEFT, MOVE_RIGHT, FIRE, RESTART, SPECIAL)


class MessageBus:
    """Per-session topic dispatcher.

    Example:
        bus = MessageBus()
        bus.register(Events.HIT_ENEMY, on_hit)
        bus.publish(Events.HIT_ENEMY, {"bullet": b, "enemy": e})
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[Handler]] = defaultdict(list)

    def register(self, topic: str, handler: Handler) -> None:
        """Append a handler to the topic. The same handler may be added twice."""
        self._handlers[topic].append(handler)

    def publish(self, topic: str, payload: Optional[Payload] = None) -> None:
        """Deliver payload to every handler of the topic, in registration order.

        Args:
            topic: Topic name; unknown topics are a no-op
            payload: Mapping of named fields, an empty dict if omitted
        """
        handlers = self._handlers.get(topic)
        if not handlers:
            return
        if payload is None:
            payload = {}
        # handlers registered during dispatch wait for the next publish
        for handler in list(handlers):
            handler(payload)

    def reset(self) -> None:
        """Remove every registration"""
        self._handlers.clear()

    def handler_count(self, topic: str) -> int:
        """Number of registrations for a topic, duplicates included (introspection only)"""
        return len(self._handlers.get(topic, []))
