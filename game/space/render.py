"""
Arcade window for playing and watching the shooter
"""

from __future__ import annotations

from typing import Optional, Sequence

import arcade

from . import constants as C
from .entities import Kind
from .events import Events
from .loop import LoopDriver
from .session import EntityView, Hud

KIND_COLORS = {
    Kind.PLAYER: (80, 200, 120),
    Kind.WING: (60, 160, 100),
    Kind.BULLET: (220, 80, 80),
    Kind.ENEMY: (120, 220, 90),
    Kind.BOSS: (190, 90, 220),
    Kind.ITEM: (240, 210, 80),
    Kind.HIT: (250, 140, 60),
}
ENEMY_LASER_COLOR = (90, 250, 90)
DAMAGED_COLOR = (200, 120, 80)

KEY_COMMANDS = {
    arcade.key.UP: Events.MOVE_UP,
    arcade.key.DOWN: Events.MOVE_DOWN,
    arcade.key.LEFT: Events.MOVE_LEFT,
    arcade.key.RIGHT: Events.MOVE_RIGHT,
    arcade.key.SPACE: Events.FIRE,
    arcade.key.ENTER: Events.RESTART,
    arcade.key.X: Events.SPECIAL,
}


class FrameRenderer:
    """Keeps the latest frame handed over by the loop driver"""

    def __init__(self):
        self.hud: Optional[Hud] = None
        self.boss_ratio: Optional[float] = None
        self.entities: Sequence[EntityView] = ()
        self.message: Optional[str] = None
        self.message_color = "red"

    def clear(self):
        self.entities = ()
        self.boss_ratio = None
        self.message = None

    def draw_hud(self, hud: Hud):
        self.hud = hud

    def draw_boss_bar(self, ratio: Optional[float]):
        self.boss_ratio = ratio

    def draw_entities(self, entities: Sequence[EntityView]):
        self.entities = entities

    def show_message(self, message: str, color: str):
        self.message = message
        self.message_color = color


class ShooterWindow(arcade.Window):
    """Arcade window showing a LoopDriver; optionally takes keyboard input"""

    def __init__(self, driver: LoopDriver, interactive: bool = True):
        super().__init__(driver.width, driver.height, "Space Game - Arcade")
        self.driver = driver
        self.frame = FrameRenderer()
        driver.renderer = self.frame
        self.interactive = interactive
        self._accum = 0.0

        self.BG = (18, 18, 22)
        self.HUD_C = (220, 60, 60)

    # canvas space has y pointing down, arcade has it pointing up
    def _flip(self, y: float, height: float) -> float:
        return self.driver.height - y - height

    def on_update(self, delta_time: float):
        if not self.interactive:
            return
        self._accum += delta_time * 1000
        while self._accum >= self.driver.period_ms:
            self._accum -= self.driver.period_ms
            self.driver.tick()

    def on_key_press(self, symbol: int, modifiers: int):
        if not self.interactive:
            return
        topic = KEY_COMMANDS.get(symbol)
        if topic is not None:
            self.driver.command(topic)

    def on_draw(self):
        """Draw the latest frame"""
        self.clear()
        arcade.set_background_color(self.BG)
        frame = self.frame
        w, h = self.driver.width, self.driver.height

        if frame.message:
            color = (80, 220, 80) if frame.message_color == "green" else (220, 60, 60)
            arcade.draw_text(frame.message, w / 2, h / 2, color, 16, anchor_x="center")
            return

        for e in frame.entities:
            color = KIND_COLORS.get(e.kind, (200, 200, 200))
            if e.sprite == "laserGreen":
                color = ENEMY_LASER_COLOR
            bottom = self._flip(e.y, e.height)
            arcade.draw_lrbt_rectangle_filled(e.x, e.x + e.width, bottom, bottom + e.height, color)

        if frame.boss_ratio is not None:
            bar_w = w * 0.6
            x0 = (w - bar_w) / 2
            y0 = self._flip(20, 10)
            arcade.draw_lrbt_rectangle_filled(x0, x0 + bar_w, y0, y0 + 10, (40, 40, 40))
            if frame.boss_ratio > 0:
                arcade.draw_lrbt_rectangle_filled(
                    x0, x0 + bar_w * frame.boss_ratio, y0, y0 + 10, (0, 255, 0)
                )

        hud = frame.hud
        if hud is None:
            return
        arcade.draw_text(f"Points: {hud.score}", 10, 20, self.HUD_C, 20)
        arcade.draw_text(f"Kill: {hud.kills}", 10, 50, self.HUD_C, 20)
        arcade.draw_text(f"Stage: {hud.stage}", 10, h - 30, self.HUD_C, 20)
        arcade.draw_text(f"EnemyDead: {hud.enemies_dead}", 10, h - 60, self.HUD_C, 20)
        arcade.draw_text(f"SP: {hud.special}%", w - 200, h - 30, self.HUD_C, 20)

        # hp icons, bottom right
        start = w - 180
        life_color = DAMAGED_COLOR if hud.hp <= 1 else KIND_COLORS[Kind.ITEM]
        for i in range(hud.hp):
            arcade.draw_circle_filled(start + 45 * (i + 1), 20, 12, life_color)


def play(stage: int = 1, seed: Optional[int] = None):
    """Open a window and play with the keyboard"""
    driver = LoopDriver(period_ms=C.TICK_MS, stage=stage, seed=seed)
    ShooterWindow(driver, interactive=True)
    arcade.run()


if __name__ == "__main__":
    play()
