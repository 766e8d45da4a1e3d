"""
World state and the per-tick simulation step
---------------------------------------------
- One ordered list of entities, owned by the world
- Motion, cooldowns and lifetimes advanced by elapsed time in one pass
- Collisions detected here and published on the session bus;
  resolution (killing, scoring) is left to the bus handlers
- Dead entities are only removed by the compaction at the end of a step
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from . import constants as C
from .entities import (
    Boss,
    BossSide,
    Bullet,
    Direction,
    Enemy,
    EnemyVariant,
    Entity,
    Kind,
    Owner,
    Player,
    PowerUp,
    PowerUpType,
    Wing,
    green_ship,
    hit_effect,
    power_up,
    twin_boss_left,
    twin_boss_right,
    ufo_ship,
)
from .events import Events, MessageBus
from .utils import intersects, make_rng

logger = logging.getLogger(__name__)


@dataclass
class EnemyCounter:
    total: int = 0
    dead: int = 0


@dataclass
class PendingSpawn:
    """Enemy scheduled to enter the playfield at ``due`` (ms)"""
    due: float
    variant: EnemyVariant
    x: float


def _motion_steps(entity, dt: float, period: int) -> int:
    """Accumulate elapsed time and return how many whole periods passed"""
    entity.elapsed += dt
    steps = int(entity.elapsed // period)
    entity.elapsed -= steps * period
    return steps


class World:
    """Everything alive in one game session"""

    def __init__(
        self,
        bus: MessageBus,
        stage: int = 1,
        width: int = C.WIDTH,
        height: int = C.HEIGHT,
        rng: Optional[np.random.Generator] = None,
        now: float = 0.0,
    ):
        self.bus = bus
        self.stage = stage
        self.width = width
        self.height = height
        self.rng = rng if rng is not None else make_rng()
        self.now = now

        self.objects: List[Entity] = []
        self.hero: Player = None  # type: ignore
        self.wings: Tuple[Wing, ...] = ()
        self.counter = EnemyCounter()
        self.pending: List[PendingSpawn] = []

    # ----------------------------
    # Queries
    # ----------------------------

    def of_kind(self, kind: Kind) -> list:
        return [o for o in self.objects if o.kind is kind]

    def bullets(self, owner: Owner) -> List[Bullet]:
        return [o for o in self.objects if o.kind is Kind.BULLET and o.owner is owner]

    @property
    def ships(self) -> list:
        """Hero first, then the wings"""
        return [self.hero, *self.wings]

    def all_enemies_cleared(self) -> bool:
        """True when no enemy or boss is alive; waves still queued do not count"""
        return not any(
            o.alive and o.kind in (Kind.ENEMY, Kind.BOSS) for o in self.objects
        )

    # ----------------------------
    # Spawning
    # ----------------------------

    def add(self, *entities: Entity):
        self.objects.extend(entities)

    def spawn_green_ship(self, x: float, y: float = 0) -> Enemy:
        enemy = green_ship(x, y, now=self.now)
        self.add(enemy)
        return enemy

    def spawn_ufo_ship(self, x: float, y: float = 0) -> Enemy:
        enemy = ufo_ship(x, y, now=self.now)
        self.add(enemy)
        return enemy

    def spawn_twin_boss(self, center_x: float) -> Tuple[Boss, Boss]:
        left = twin_boss_left(center_x - C.BOSS_SIZE[0], 0, now=self.now)
        right = twin_boss_right(center_x, 0, now=self.now)
        self.add(left, right)
        return left, right

    def drop_random_power_up(self, x: float, y: float) -> PowerUp:
        r = self.rng.random()
        if r < C.HEART_THRESHOLD:
            ptype = PowerUpType.HEART
        elif r < C.RAPID_THRESHOLD:
            ptype = PowerUpType.RAPID
        else:
            ptype = PowerUpType.TRIPLE
        item = power_up(x, y, ptype)
        self.add(item)
        return item

    def setup_stage_enemies(self):
        """Reset the world and schedule this stage's enemy waves"""
        if not 1 <= self.stage <= C.LAST_STAGE:
            raise ValueError(f"Stage must be between 1 and {C.LAST_STAGE}, got {self.stage}")

        self.objects = []
        self.pending = []
        self.counter = EnemyCounter()

        green_count = self.stage * 2
        ufo_count = self.stage * 3
        boss_count = 0

        if self.stage == C.LAST_STAGE:
            boss_count = 2
            self.spawn_twin_boss(self.width / 2)
            green_count = 4
            ufo_count = 4

        self.counter.total = green_count + ufo_count + boss_count

        max_x = self.width - C.ENEMY_SPAWN_MAX_X_MARGIN
        delay = 0
        for i in range(ufo_count):
            gx = float(self.rng.integers(0, max_x))
            ux = float(self.rng.integers(0, max_x))
            if i < green_count:
                self.pending.append(PendingSpawn(self.now + delay, EnemyVariant.GREEN, gx))
            self.pending.append(PendingSpawn(self.now + delay, EnemyVariant.UFO, ux))
            delay += C.ENEMY_SPAWN_SPACING

        logger.info(
            "Stage %d: %d green, %d ufo, %d boss (total %d)",
            self.stage, green_count, ufo_count, boss_count, self.counter.total,
        )
        self._release_due_spawns()

    def create_player(self) -> Player:
        base_y = self.height - self.height / 4
        self.hero = Player(self.width / 2 - 45, base_y)
        self.wings = (
            Wing(self.width / 2 + 75, base_y + 30),
            Wing(self.width / 2 - 100, base_y + 30),
        )
        self.add(self.hero, *self.wings)
        return self.hero

    def _release_due_spawns(self):
        due = [p for p in self.pending if p.due <= self.now]
        if not due:
            return
        self.pending = [p for p in self.pending if p.due > self.now]
        for spawn in due:
            if spawn.variant is EnemyVariant.GREEN:
                self.spawn_green_ship(spawn.x)
            else:
                self.spawn_ufo_ship(spawn.x)

    # ----------------------------
    # Time advance (motion, cooldowns, lifetimes)
    # ----------------------------

    def advance(self, dt: float):
        """Step every clock-driven field forward by dt milliseconds"""
        self.now += dt
        self._release_due_spawns()

        for ship in self.ships:
            if ship is not None:
                ship.cooldown = max(0.0, ship.cooldown - dt)

        hero = self.hero
        if hero is not None and hero.rapid_active() and self.now >= hero.rapid_end_time:
            hero.fire_cooldown_max = C.PLAYER_FIRE_COOLDOWN
            hero.rapid_end_time = 0.0

        for obj in self.objects:
            if not obj.alive:
                continue
            if obj.kind is Kind.BULLET:
                self._move_bullet(obj, dt)
            elif obj.kind is Kind.ITEM:
                self._move_power_up(obj, dt)
            elif obj.kind is Kind.ENEMY:
                self._move_enemy(obj, dt)
            elif obj.kind is Kind.BOSS:
                self._patrol_boss(obj, dt)
            elif obj.kind is Kind.HIT and self.now >= obj.expires_at:
                obj.alive = False

    def _move_bullet(self, bullet: Bullet, dt: float):
        for _ in range(_motion_steps(bullet, dt, C.BULLET_PERIOD)):
            bullet.y += bullet.step
            if bullet.owner is Owner.PLAYER and bullet.y < -bullet.height:
                bullet.alive = False
            elif bullet.owner is Owner.ENEMY and bullet.y > self.height:
                bullet.alive = False
            if not bullet.alive:
                return

    def _move_power_up(self, item: PowerUp, dt: float):
        for _ in range(_motion_steps(item, dt, C.POWER_UP_PERIOD)):
            item.y += C.POWER_UP_STEP
            if item.y > self.height:
                item.alive = False
                return

    def _move_enemy(self, enemy: Enemy, dt: float):
        # stops for good once it reaches the bottom
        for _ in range(_motion_steps(enemy, dt, C.ENEMY_FALL_PERIOD)):
            if enemy.y < self.height - enemy.height:
                enemy.y += enemy.fall_step

    def _patrol_boss(self, boss: Boss, dt: float):
        half = self.width / 2
        for _ in range(_motion_steps(boss, dt, C.BOSS_PATROL_PERIOD)):
            step = boss.move_step
            if boss.side is BossSide.LEFT:
                lo, hi = 0, half
            else:
                lo, hi = half, self.width
            if boss.move_dir is Direction.LEFT:
                if boss.x - step > lo:
                    boss.x -= step
                else:
                    boss.move_dir = Direction.RIGHT
            elif boss.x + boss.width + step < hi:
                boss.x += step
            else:
                boss.move_dir = Direction.LEFT

    # ----------------------------
    # Simulation step
    # ----------------------------

    def update_world(self):
        """Fire weapons, detect collisions, apply pickups, then compact"""
        now = self.now
        bus = self.bus
        hero = self.hero

        enemies: List[Enemy] = self.of_kind(Kind.ENEMY)
        bosses: List[Boss] = self.of_kind(Kind.BOSS)
        player_bullets = self.bullets(Owner.PLAYER)
        enemy_bullets = self.bullets(Owner.ENEMY)
        items: List[PowerUp] = self.of_kind(Kind.ITEM)

        # Enemy/boss weapons
        for shooter in enemies + bosses:
            if shooter.alive:
                self.add(*shooter.fire(now))

        # Player bullets vs enemies and bosses
        for b in player_bullets:
            for e in enemies:
                if not b.alive or not e.alive:
                    continue
                if intersects(b.rect, e.rect):
                    bus.publish(Events.HIT_ENEMY, {"bullet": b, "enemy": e})
                    self.add(hit_effect(e.x, e.y, now))

            for boss in bosses:
                if not b.alive or not boss.alive:
                    continue
                if intersects(b.rect, boss.rect):
                    bus.publish(Events.HIT_ENEMY_BOSS, {"bullet": b, "boss": boss})
                    self.add(hit_effect(boss.x, boss.y + C.BOSS_HIT_EFFECT_DY, now))

        # Enemy bullets vs hero and wings
        for b in enemy_bullets:
            for ship in self.ships:
                if not b.alive or not ship.alive:
                    continue
                if intersects(b.rect, ship.rect):
                    bus.publish(Events.HERO_HIT_BY_LASER, {"bullet": b, "player": ship})
                    if ship is hero:
                        self.add(hit_effect(ship.x, ship.y, now, sprite="laserGreenShot"))

        # Enemy body vs hero, enemy past the bottom edge
        for e in enemies:
            if not e.alive:
                continue
            if hero.alive and intersects(hero.rect, e.rect):
                bus.publish(Events.ENEMY_COLLIDE_HERO, {"enemy": e})
            if e.alive and e.y > self.height - e.height:
                bus.publish(Events.ENEMY_PASS_CANVAS, {"enemy": e})

        # Boss body vs hero
        for boss in bosses:
            if boss.alive and hero.alive and intersects(hero.rect, boss.rect):
                bus.publish(Events.ENEMY_BOSS_COLLIDE_HERO, {"boss": boss})

        # Power-up pickups
        for item in items:
            if not item.alive or not hero.alive:
                continue
            if intersects(item.rect, hero.rect):
                item.alive = False
                self.apply_power_up(item.type)

        self.objects = [o for o in self.objects if o.alive]

    def apply_power_up(self, ptype: PowerUpType):
        """Apply a pickup to the hero. Timed effects restart, they never stack."""
        hero = self.hero
        if ptype is PowerUpType.HEART:
            hero.heal(1)
        elif ptype is PowerUpType.RAPID:
            hero.fire_cooldown_max = C.RAPID_FIRE_COOLDOWN
            hero.rapid_end_time = self.now + C.POWER_UP_DURATION
        elif ptype is PowerUpType.TRIPLE:
            hero.triple_end_time = self.now + C.POWER_UP_DURATION
        logger.debug("Picked up %s at t=%.0f", ptype.value, self.now)

    def tick(self, dt: float = C.TICK_MS):
        self.advance(dt)
        self.update_world()
