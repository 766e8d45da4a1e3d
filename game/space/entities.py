"""
Game entity dataclasses

Every object on the playfield is an ``Entity`` tagged with a ``Kind``.
Variants only add plain data (hit points, cooldowns, motion parameters);
stepping that data forward is done by the world update in one pass.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, List

from . import constants as C
from .utils import Rect


class Kind(str, Enum):
    PLAYER = "PLAYER"
    WING = "WING"
    BULLET = "BULLET"
    ENEMY = "ENEMY"
    BOSS = "BOSS"
    ITEM = "ITEM"
    HIT = "HIT"


class Owner(str, Enum):
    PLAYER = "PLAYER"
    ENEMY = "ENEMY"


class PowerUpType(str, Enum):
    HEART = "heart"
    RAPID = "rapid"
    TRIPLE = "triple"


class EnemyVariant(str, Enum):
    GREEN = "green"
    UFO = "ufo"


class BossSide(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class Direction(str, Enum):
    LEFT = "LEFT"
    RIGHT = "RIGHT"


@dataclass
class Entity:
    """Base record shared by every object in the world"""
    x: float
    y: float
    width: float = 0.0
    height: float = 0.0
    alive: bool = True
    kind: Kind = Kind.HIT
    sprite: Any = None  # opaque handle for the renderer

    @property
    def rect(self) -> Rect:
        return Rect(
            left=self.x,
            top=self.y,
            right=self.x + self.width,
            bottom=self.y + self.height,
        )


@dataclass
class Bullet(Entity):
    """Laser fired by the player ships (upwards) or by enemies (downwards)"""
    width: float = float(C.BULLET_SIZE[0])
    height: float = float(C.BULLET_SIZE[1])
    kind: Kind = Kind.BULLET
    owner: Owner = Owner.PLAYER
    elapsed: float = 0.0

    @property
    def step(self) -> int:
        return -C.BULLET_STEP if self.owner is Owner.PLAYER else C.BULLET_STEP


def player_laser(x: float, y: float) -> Bullet:
    return Bullet(x, y, owner=Owner.PLAYER, sprite="laserRed")


def enemy_laser(x: float, y: float) -> Bullet:
    return Bullet(x, y, owner=Owner.ENEMY, sprite="laserGreen")


@dataclass
class Player(Entity):
    """The hero ship; the only ship that carries hit points"""
    width: float = float(C.PLAYER_SIZE[0])
    height: float = float(C.PLAYER_SIZE[1])
    kind: Kind = Kind.PLAYER
    sprite: Any = "player"
    speed: int = C.PLAYER_SPEED
    hp: int = C.PLAYER_MAX_HP
    score: int = 0
    kill_count: int = 0
    cooldown: float = 0.0
    fire_cooldown_max: int = C.PLAYER_FIRE_COOLDOWN
    triple_end_time: float = 0.0
    rapid_end_time: float = 0.0  # 0 means no rapid window
    special_charge: int = 0
    damaged: bool = False

    def can_shoot(self) -> bool:
        return self.cooldown == 0

    def triple_active(self, now: float) -> bool:
        return now < self.triple_end_time

    def rapid_active(self) -> bool:
        return self.rapid_end_time > 0

    def shoot(self, now: float) -> List[Bullet]:
        """Fire one shot, or three while the triple power-up is active"""
        if not self.can_shoot():
            return []

        offsets = C.PLAYER_TRIPLE_OFFSETS if self.triple_active(now) else C.PLAYER_SHOT_OFFSETS
        bullets = [player_laser(self.x + off, self.y + C.BULLET_SPAWN_DY) for off in offsets]
        self.cooldown = self.fire_cooldown_max
        return bullets

    def take_damage(self) -> bool:
        """Lose one hp. Returns True if this hit killed the hero."""
        if not self.alive:
            return False
        self.hp = max(0, self.hp - 1)
        if self.hp <= 1:
            self.damaged = True
        if self.hp == 0:
            self.alive = False
            return True
        return False

    def heal(self, amount: int = 1):
        self.hp = min(C.PLAYER_MAX_HP, self.hp + amount)
        if self.hp > 1:
            self.damaged = False

    def add_score(self, base: int = C.SCORE_HIT):
        self.score += base

    def gain_special(self, amount: int = C.SPECIAL_GAIN_KILL):
        self.special_charge = min(C.SPECIAL_MAX, self.special_charge + amount)

    def special_ready(self) -> bool:
        return self.special_charge >= C.SPECIAL_MAX


@dataclass
class Wing(Entity):
    """Escort ship flying beside the hero; fires but never takes damage"""
    width: float = float(C.WING_SIZE[0])
    height: float = float(C.WING_SIZE[1])
    kind: Kind = Kind.WING
    sprite: Any = "player"
    cooldown: float = 0.0

    def can_shoot(self) -> bool:
        return self.cooldown == 0

    def shoot(self) -> List[Bullet]:
        if not self.can_shoot():
            return []
        self.cooldown = C.WING_FIRE_COOLDOWN
        return [player_laser(self.x + C.WING_SHOT_OFFSET, self.y + C.BULLET_SPAWN_DY)]


@dataclass
class Enemy(Entity):
    """Ordinary enemy that falls towards the bottom and shoots periodically"""
    kind: Kind = Kind.ENEMY
    variant: EnemyVariant = EnemyVariant.GREEN
    can_shoot: bool = True
    last_shot_time: float = 0.0
    fire_interval: int = C.GREEN_FIRE_INTERVAL
    shot_dx: int = C.GREEN_SHOT_OFFSET[0]
    shot_dy: int = C.GREEN_SHOT_OFFSET[1]
    fall_step: int = C.GREEN_FALL_STEP
    elapsed: float = 0.0

    def fire(self, now: float) -> List[Bullet]:
        if not self.can_shoot or now - self.last_shot_time < self.fire_interval:
            return []
        self.last_shot_time = now
        return [enemy_laser(self.x + self.shot_dx, self.y + self.shot_dy)]


def green_ship(x: float, y: float = 0, now: float = 0) -> Enemy:
    w, h = C.GREEN_SIZE
    return Enemy(
        x, y, width=float(w), height=float(h), sprite="enemyShip",
        variant=EnemyVariant.GREEN,
        last_shot_time=now,
        fire_interval=C.GREEN_FIRE_INTERVAL,
        shot_dx=C.GREEN_SHOT_OFFSET[0],
        shot_dy=C.GREEN_SHOT_OFFSET[1],
        fall_step=C.GREEN_FALL_STEP,
    )


def ufo_ship(x: float, y: float = 0, now: float = 0) -> Enemy:
    w, h = C.UFO_SIZE
    return Enemy(
        x, y, width=float(w), height=float(h), sprite="enemyUFO",
        variant=EnemyVariant.UFO,
        last_shot_time=now,
        fire_interval=C.UFO_FIRE_INTERVAL,
        shot_dx=C.UFO_SHOT_OFFSET[0],
        shot_dy=C.UFO_SHOT_OFFSET[1],
        fall_step=C.UFO_FALL_STEP,
    )


@dataclass
class Boss(Entity):
    """One half of the twin boss, patrolling its own half of the playfield"""
    width: float = float(C.BOSS_SIZE[0])
    height: float = float(C.BOSS_SIZE[1])
    kind: Kind = Kind.BOSS
    side: BossSide = BossSide.LEFT
    hp: int = C.BOSS_HP
    max_hp: int = C.BOSS_HP
    can_shoot: bool = True
    last_shot_time: float = 0.0
    fire_interval: int = C.BOSS_FIRE_INTERVAL
    move_dir: Direction = Direction.LEFT
    move_step: int = C.BOSS_PATROL_STEP
    elapsed: float = 0.0

    def fire(self, now: float) -> List[Bullet]:
        """Triple shot from under the hull"""
        if not self.can_shoot or now - self.last_shot_time < self.fire_interval:
            return []
        center_x = self.x + C.BOSS_SHOT_CENTER[0]
        base_y = self.y + C.BOSS_SHOT_CENTER[1]
        self.last_shot_time = now
        return [
            enemy_laser(center_x, base_y),
            enemy_laser(center_x - C.BOSS_SHOT_SPREAD, base_y),
            enemy_laser(center_x + C.BOSS_SHOT_SPREAD, base_y),
        ]

    def damage(self, amount: int = 1) -> bool:
        """Apply damage. Returns True if this hit killed the boss."""
        if not self.alive:
            return False
        self.hp -= amount
        if self.hp <= 0:
            self.alive = False
            return True
        return False

    @property
    def hp_ratio(self) -> float:
        return max(0.0, self.hp / self.max_hp)


def twin_boss_left(x: float, y: float = 0, now: float = 0) -> Boss:
    return Boss(x, y, side=BossSide.LEFT, move_dir=Direction.LEFT,
                last_shot_time=now, sprite="enemyBoss")


def twin_boss_right(x: float, y: float = 0, now: float = 0) -> Boss:
    return Boss(x, y, side=BossSide.RIGHT, move_dir=Direction.RIGHT,
                last_shot_time=now, sprite="enemyBossTwin2")


@dataclass
class PowerUp(Entity):
    """Collectible dropped by destroyed enemies"""
    width: float = float(C.POWER_UP_SIZE[0])
    height: float = float(C.POWER_UP_SIZE[1])
    kind: Kind = Kind.ITEM
    type: PowerUpType = PowerUpType.HEART
    elapsed: float = 0.0


_POWER_UP_SPRITES = {
    PowerUpType.HEART: "life",
    PowerUpType.RAPID: "laserGreenShot",
    PowerUpType.TRIPLE: "laserRedShot",
}


def power_up(x: float, y: float, ptype: PowerUpType) -> PowerUp:
    return PowerUp(x, y, type=ptype, sprite=_POWER_UP_SPRITES[ptype])


@dataclass
class HitEffect(Entity):
    """Short-lived explosion marker"""
    width: float = float(C.HIT_SIZE[0])
    height: float = float(C.HIT_SIZE[1])
    kind: Kind = Kind.HIT
    expires_at: float = 0.0


def hit_effect(x: float, y: float, now: float, sprite: Any = "laserRedShot") -> HitEffect:
    return HitEffect(x, y, sprite=sprite, expires_at=now + C.HIT_LIFETIME)
