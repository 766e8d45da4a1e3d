"""
Fixed-period game loop driver.

Each tick clears the frame, steps the session world once, then hands the
snapshot to the renderer. When a session ends the driver waits out a
short end delay and either advances to the next stage or stops with a
centre message until a restart is requested.
"""

from __future__ import annotations

import logging
import time
from typing import Optional, Sequence

import numpy as np

from . import constants as C
from .events import Events
from .session import WIN, EntityView, GameSession, Hud, Snapshot
from .utils import make_rng

logger = logging.getLogger(__name__)

VICTORY_MESSAGE = "Victory!!! Pew Pew... - Press [Enter] to start a new game Captain Pew Pew"
DEATH_MESSAGE = "You died !!! Press [Enter] to start a new game Captain Pew Pew"


class NullRenderer:
    """Renderer that draws nothing; used for headless runs"""

    def clear(self):
        pass

    def draw_hud(self, hud: Hud):
        pass

    def draw_boss_bar(self, ratio: Optional[float]):
        pass

    def draw_entities(self, entities: Sequence[EntityView]):
        pass

    def show_message(self, message: str, color: str):
        pass


class LoopDriver:
    """Runs sessions stage after stage at a fixed tick period"""

    def __init__(
        self,
        period_ms: int = C.TICK_MS,
        stage: int = 1,
        width: int = C.WIDTH,
        height: int = C.HEIGHT,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
        renderer=None,
        end_delay_ms: int = C.END_DELAY_MS,
    ):
        if period_ms <= 0:
            raise ValueError(f"Tick period must be positive, got {period_ms}")
        if not 1 <= stage <= C.LAST_STAGE:
            raise ValueError(f"Stage must be between 1 and {C.LAST_STAGE}, got {stage}")

        self.period_ms = period_ms
        self.stage = stage
        self.width = width
        self.height = height
        self.rng = rng if rng is not None else make_rng(seed)
        self.renderer = renderer if renderer is not None else NullRenderer()
        self.end_delay_ms = end_delay_ms

        self.session: GameSession = None  # type: ignore
        self.running = False
        self.message: Optional[str] = None
        self.ticks = 0
        self.stages_cleared = 0
        self._end_timer: Optional[float] = None

        self.restart()

    @property
    def waiting(self) -> bool:
        """Stopped with a message, until a restart command arrives"""
        return not self.running and self._end_timer is None

    def restart(self):
        """Tear down the current session and start the current stage afresh"""
        self.session = GameSession(
            stage=self.stage,
            width=self.width,
            height=self.height,
            rng=self.rng,
        )
        self.running = True
        self.message = None
        self._end_timer = None
        logger.debug("Session started for stage %d", self.stage)

    def command(self, topic: str):
        """Forward an input command to the session"""
        if topic not in Events.COMMANDS:
            raise ValueError(f"Unknown command: {topic}")
        self.session.command(topic)
        if self.session.restart_requested:
            self.restart()

    def snapshot(self) -> Snapshot:
        return self.session.snapshot()

    def tick(self):
        self.ticks += 1

        # RESTART may have been published on the bus directly
        if self.session.restart_requested:
            self.restart()

        if self._end_timer is not None:
            self._end_timer -= self.period_ms
            if self._end_timer <= 0:
                self._finish_session()
            return

        if not self.running:
            return

        r = self.renderer
        r.clear()
        self.session.tick(self.period_ms)
        snap = self.session.snapshot()
        r.draw_hud(snap.hud)
        r.draw_boss_bar(snap.hud.boss_hp_ratio)
        r.draw_entities(snap.entities)

        if self.session.outcome is not None:
            self.running = False
            self._end_timer = self.end_delay_ms

    def _finish_session(self):
        self._end_timer = None
        won = self.session.outcome == WIN

        if won and self.stage < C.LAST_STAGE:
            self.stages_cleared += 1
            self.stage += 1
            logger.info("Advancing to stage %d", self.stage)
            self.restart()
            return

        if won:
            self.stages_cleared += 1
            self.message, color = VICTORY_MESSAGE, "green"
        else:
            self.message, color = DEATH_MESSAGE, "red"
        self.stage = 1
        self.renderer.clear()
        self.renderer.show_message(self.message, color)

    def run(self, ticks: Optional[int] = None, realtime: bool = False) -> int:
        """Drive the loop for a number of ticks, or until it stops and waits.

        Returns the number of ticks executed.
        """
        done = 0
        while ticks is None or done < ticks:
            if ticks is None and self.waiting:
                break
            self.tick()
            done += 1
            if realtime:
                time.sleep(self.period_ms / 1000)
        return done
