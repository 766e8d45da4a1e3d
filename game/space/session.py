"""
One game session: a fresh bus, a fresh world and the handlers that
resolve what the world update detects.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from . import constants as C
from .entities import Kind, Owner, hit_effect
from .events import Events, MessageBus
from .world import World

logger = logging.getLogger(__name__)

WIN = "win"
LOSE = "lose"


@dataclass(frozen=True)
class EntityView:
    """Read-only view of one entity for the renderer"""
    kind: Kind
    x: float
    y: float
    width: float
    height: float
    sprite: object = None


@dataclass(frozen=True)
class Hud:
    score: int
    kills: int
    stage: int
    enemies_dead: int
    special: int  # percent
    hp: int
    boss_hp_ratio: Optional[float]  # None when no boss is alive


@dataclass(frozen=True)
class Snapshot:
    entities: Tuple[EntityView, ...]
    hud: Hud


class GameSession:
    """Owns the bus and world of a single stage attempt.

    Restarting a stage means building a new session; nothing registered
    on the old bus survives.
    """

    def __init__(
        self,
        stage: int = 1,
        width: int = C.WIDTH,
        height: int = C.HEIGHT,
        rng: Optional[np.random.Generator] = None,
    ):
        self.bus = MessageBus()
        self.world = World(self.bus, stage=stage, width=width, height=height, rng=rng)
        self.outcome: Optional[str] = None
        self.restart_requested = False

        self.world.setup_stage_enemies()
        self.world.create_player()
        self.bind_events()

    @property
    def hero(self):
        return self.world.hero

    @property
    def stage(self) -> int:
        return self.world.stage

    # ----------------------------
    # Handlers
    # ----------------------------

    def bind_events(self):
        bus = self.bus
        bus.register(Events.MOVE_UP, lambda _: self.move(0, -self.hero.speed))
        bus.register(Events.MOVE_DOWN, lambda _: self.move(0, self.hero.speed))
        bus.register(Events.MOVE_LEFT, self._on_move_left)
        bus.register(Events.MOVE_RIGHT, self._on_move_right)
        bus.register(Events.FIRE, self._on_fire)
        bus.register(Events.SPECIAL, lambda _: self.use_special())
        bus.register(Events.RESTART, self._on_restart)

        bus.register(Events.ENEMY_PASS_CANVAS, self._on_enemy_reached_hero)
        bus.register(Events.ENEMY_COLLIDE_HERO, self._on_enemy_reached_hero)
        bus.register(Events.HIT_ENEMY, self._on_hit_enemy)
        bus.register(Events.HIT_ENEMY_BOSS, self._on_hit_boss)
        bus.register(Events.HERO_HIT_BY_LASER, self._on_hero_hit)
        bus.register(Events.ENEMY_BOSS_COLLIDE_HERO, self._on_boss_collide)

        bus.register(Events.GAME_WIN, lambda _: self._end(WIN))
        bus.register(Events.GAME_LOSE, lambda _: self._end(LOSE))

    def move(self, dx: float, dy: float):
        """Move the hero and both wings together"""
        for ship in self.world.ships:
            ship.x += dx
            ship.y += dy

    def _on_move_left(self, _payload):
        step = self.hero.speed
        if self.hero.x - step > 0:
            self.move(-step, 0)

    def _on_move_right(self, _payload):
        step = self.hero.speed
        if self.hero.x + self.hero.width + step < self.world.width:
            self.move(step, 0)

    def _on_fire(self, _payload):
        hero = self.hero
        if not hero.alive or not hero.can_shoot():
            return
        world = self.world
        world.add(*hero.shoot(world.now))
        for wing in world.wings:
            world.add(*wing.shoot())

    def _on_restart(self, _payload):
        self.restart_requested = True

    def _on_enemy_reached_hero(self, payload):
        enemy = payload["enemy"]
        if not enemy.alive:
            return
        enemy.alive = False
        self.world.counter.dead += 1
        if self._damage_hero():
            return
        self._check_win()

    def _on_hit_enemy(self, payload):
        bullet, enemy = payload["bullet"], payload["enemy"]
        if not bullet.alive or not enemy.alive:
            return

        hero = self.hero
        bullet.alive = False
        enemy.alive = False
        self.world.counter.dead += 1
        hero.kill_count += 1
        hero.add_score()
        hero.gain_special(C.SPECIAL_GAIN_KILL)

        if self.world.rng.random() < C.DROP_CHANCE_ENEMY:
            self.world.drop_random_power_up(enemy.x, enemy.y)

        self._check_win()

    def _on_hit_boss(self, payload):
        bullet, boss = payload["bullet"], payload["boss"]
        if not bullet.alive or not boss.alive:
            return

        hero = self.hero
        bullet.alive = False
        killed = boss.damage()
        hero.add_score()
        hero.gain_special(C.SPECIAL_GAIN_BOSS_HIT)

        if not killed:
            return
        if self.world.rng.random() < C.DROP_CHANCE_BOSS:
            self.world.drop_random_power_up(
                boss.x + boss.width / 2,
                boss.y + boss.height / 2,
            )
        self.world.counter.dead += 1
        hero.kill_count += 1
        hero.gain_special(C.SPECIAL_GAIN_BOSS_KILL)
        self._check_win()

    def _on_hero_hit(self, payload):
        # wings absorb nothing and take no damage; the laser flies on
        if payload["player"] is not self.hero:
            return
        bullet = payload["bullet"]
        if not bullet.alive:
            return
        bullet.alive = False
        self._damage_hero()

    def _on_boss_collide(self, _payload):
        self._damage_hero()

    def _damage_hero(self) -> bool:
        """Damage the hero; publish the loss on the killing hit"""
        if self.hero.take_damage():
            self.bus.publish(Events.GAME_LOSE)
            return True
        return False

    def _check_win(self):
        if self.outcome is None and self.world.all_enemies_cleared():
            self.bus.publish(Events.GAME_WIN)

    def _end(self, outcome: str):
        if self.outcome is not None:
            return
        self.outcome = outcome
        logger.info("Stage %d ended: %s (score %d)", self.stage, outcome, self.hero.score)

    # ----------------------------
    # Special attack
    # ----------------------------

    def use_special(self) -> bool:
        """Clear the screen when the gauge is full. Returns False if not ready."""
        hero = self.hero
        if not hero.special_ready():
            return False

        world = self.world
        hero.special_charge = 0

        for b in world.bullets(Owner.ENEMY):
            b.alive = False

        for e in world.of_kind(Kind.ENEMY):
            if not e.alive:
                continue
            e.alive = False
            world.counter.dead += 1
            hero.kill_count += 1
            hero.add_score(C.SCORE_SPECIAL_ENEMY)
            world.add(hit_effect(e.x, e.y, world.now))

        for boss in world.of_kind(Kind.BOSS):
            if not boss.alive:
                continue
            if boss.damage(C.SPECIAL_BOSS_DAMAGE):
                world.counter.dead += 1
                hero.kill_count += 1
                hero.add_score(C.SCORE_SPECIAL_BOSS)
            world.add(hit_effect(boss.x, boss.y, world.now))

        logger.debug("Special attack used at t=%.0f", world.now)
        self._check_win()
        return True

    # ----------------------------
    # Stepping / output
    # ----------------------------

    def tick(self, dt: float = C.TICK_MS):
        if self.outcome is not None:
            return
        self.world.tick(dt)

    def command(self, topic: str):
        self.bus.publish(topic)

    def snapshot(self) -> Snapshot:
        world = self.world
        hero = world.hero
        entities = tuple(
            EntityView(o.kind, o.x, o.y, o.width, o.height, o.sprite)
            for o in world.objects
            if o.alive
        )
        bosses = [b for b in world.of_kind(Kind.BOSS) if b.alive]
        hud = Hud(
            score=hero.score,
            kills=hero.kill_count,
            stage=world.stage,
            enemies_dead=world.counter.dead,
            special=hero.special_charge,
            hp=hero.hp,
            boss_hp_ratio=bosses[0].hp_ratio if bosses else None,
        )
        return Snapshot(entities=entities, hud=hud)
