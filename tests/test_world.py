import pytest

from game.space import constants as C
from game.space.entities import (
    Direction,
    Kind,
    PowerUpType,
    enemy_laser,
    hit_effect,
    player_laser,
    power_up,
    twin_boss_left,
)
from game.space.events import Events
from game.space.session import GameSession
from game.space.utils import make_rng
from game.space.world import World


class FixedRng:
    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


def kinds(world, kind):
    return [o for o in world.objects if o.kind is kind]


# ----------------------------
# Compaction
# ----------------------------

def test_dead_entity_is_removed_by_update(world):
    enemy = world.spawn_green_ship(0, 0)
    enemy.alive = False

    world.update_world()

    assert enemy not in world.objects


def test_removed_entity_takes_no_part_in_collisions(world, bus, recorder):
    rec = recorder()
    bus.register(Events.HERO_HIT_BY_LASER, rec)
    hero = world.hero
    laser = enemy_laser(hero.x + 10, hero.y + 10)
    laser.alive = False
    world.add(laser)

    world.update_world()
    world.update_world()

    assert len(rec) == 0
    assert laser not in world.objects


# ----------------------------
# Detection
# ----------------------------

def test_player_bullet_hitting_enemy_publishes_without_killing(world, bus, recorder):
    rec = recorder()
    bus.register(Events.HIT_ENEMY, rec)
    enemy = world.spawn_green_ship(500, 100)
    bullet = player_laser(510, 110)
    world.add(bullet)

    world.update_world()

    assert len(rec) == 1
    assert rec.calls[0]["bullet"] is bullet
    assert rec.calls[0]["enemy"] is enemy
    assert bullet.alive and enemy.alive
    effects = kinds(world, Kind.HIT)
    assert [(e.x, e.y) for e in effects] == [(500, 100)]


def test_player_bullet_hitting_boss_publishes(world, bus, recorder):
    rec = recorder()
    bus.register(Events.HIT_ENEMY_BOSS, rec)
    boss = twin_boss_left(100, 0, now=0)
    world.add(boss)
    world.add(player_laser(150, 200))

    world.update_world()

    assert len(rec) == 1
    assert rec.calls[0]["boss"] is boss
    assert [(e.x, e.y) for e in kinds(world, Kind.HIT)] == [(100, -80)]


def test_enemy_laser_on_wing_reports_the_wing(world, bus, recorder):
    rec = recorder()
    bus.register(Events.HERO_HIT_BY_LASER, rec)
    wing = world.wings[0]
    world.add(enemy_laser(wing.x + 3, wing.y - 6))

    world.update_world()

    assert len(rec) == 1
    assert rec.calls[0]["player"] is wing
    assert kinds(world, Kind.HIT) == []


def test_enemy_laser_on_hero_spawns_effect(world, bus, recorder):
    rec = recorder()
    bus.register(Events.HERO_HIT_BY_LASER, rec)
    hero = world.hero
    world.add(enemy_laser(hero.x + 20, hero.y))

    world.update_world()

    assert [c["player"] for c in rec.calls] == [hero]
    assert len(kinds(world, Kind.HIT)) == 1


def test_enemy_body_collision(world, bus, recorder):
    rec = recorder()
    bus.register(Events.ENEMY_COLLIDE_HERO, rec)
    hero = world.hero
    enemy = world.spawn_green_ship(hero.x, hero.y)

    world.update_world()

    assert [c["enemy"] for c in rec.calls] == [enemy]


def test_enemy_past_bottom_edge(world, bus, recorder):
    rec = recorder()
    bus.register(Events.ENEMY_PASS_CANVAS, rec)
    world.spawn_green_ship(0, world.height - 50 + 1)

    world.update_world()

    assert len(rec) == 1


def test_enemy_resting_on_bottom_edge_has_not_passed(world, bus, recorder):
    rec = recorder()
    bus.register(Events.ENEMY_PASS_CANVAS, rec)
    world.spawn_green_ship(0, world.height - 50)

    world.update_world()

    assert len(rec) == 0


def test_boss_body_collision(world, bus, recorder):
    rec = recorder()
    bus.register(Events.ENEMY_BOSS_COLLIDE_HERO, rec)
    hero = world.hero
    world.add(twin_boss_left(hero.x - 100, hero.y - 100, now=0))

    world.update_world()

    assert len(rec) == 1


def test_enemies_fire_when_interval_elapsed(world):
    enemy = world.spawn_green_ship(0, 0)
    world.now = 3000

    world.update_world()

    lasers = [o for o in kinds(world, Kind.BULLET)]
    assert [(b.x, b.y) for b in lasers] == [(45, 30)]
    assert enemy.last_shot_time == 3000


# ----------------------------
# Power-ups
# ----------------------------

def test_pickup_is_consumed_and_applied(world):
    hero = world.hero
    hero.hp = 2
    item = power_up(hero.x, hero.y, PowerUpType.HEART)
    world.add(item)

    world.update_world()

    assert item.alive is False
    assert item not in world.objects
    assert hero.hp == 3


def test_heart_caps_hp_and_clears_damage(world):
    hero = world.hero
    hero.hp = 1
    hero.damaged = True

    world.apply_power_up(PowerUpType.HEART)
    assert hero.hp == 2 and not hero.damaged
    world.apply_power_up(PowerUpType.HEART)
    world.apply_power_up(PowerUpType.HEART)
    assert hero.hp == 3


def test_rapid_window_expires(world):
    hero = world.hero
    world.apply_power_up(PowerUpType.RAPID)
    assert hero.fire_cooldown_max == C.RAPID_FIRE_COOLDOWN

    for _ in range(49):
        world.advance(100)
    assert hero.fire_cooldown_max == C.RAPID_FIRE_COOLDOWN
    world.advance(100)
    assert hero.fire_cooldown_max == C.PLAYER_FIRE_COOLDOWN


def test_later_rapid_pickup_replaces_the_window(world):
    hero = world.hero
    world.apply_power_up(PowerUpType.RAPID)
    for _ in range(30):
        world.advance(100)
    world.apply_power_up(PowerUpType.RAPID)

    for _ in range(20):
        world.advance(100)
    # first window would have ended at 5000
    assert world.now == 5000
    assert hero.fire_cooldown_max == C.RAPID_FIRE_COOLDOWN
    for _ in range(30):
        world.advance(100)
    assert hero.fire_cooldown_max == C.PLAYER_FIRE_COOLDOWN


def test_triple_pickup_replaces_expiry(world):
    hero = world.hero
    world.apply_power_up(PowerUpType.TRIPLE)
    assert hero.triple_end_time == 5000

    world.now = 3000
    world.apply_power_up(PowerUpType.TRIPLE)
    assert hero.triple_end_time == 8000


@pytest.mark.parametrize("roll, expected", [
    (0.1, PowerUpType.HEART),
    (0.5, PowerUpType.RAPID),
    (0.9, PowerUpType.TRIPLE),
])
def test_random_power_up_drop(world, roll, expected):
    world.rng = FixedRng(roll)

    item = world.drop_random_power_up(10, 20)

    assert item.type is expected
    assert item in world.objects


# ----------------------------
# Time advance
# ----------------------------

def test_bullets_move_fifteen_pixels_per_tick(world):
    up = player_laser(100, 300)
    down = enemy_laser(100, 100)
    world.add(up, down)

    world.advance(100)

    assert up.y == 285
    assert down.y == 115


def test_bullets_leaving_the_screen_die(world):
    up = player_laser(100, -30)
    down = enemy_laser(100, world.height - 10)
    world.add(up, down)

    world.advance(100)

    assert up.alive is False
    assert down.alive is False


def test_enemy_falls_in_steps(world):
    enemy = world.spawn_green_ship(0, 0)

    world.advance(100)
    world.advance(100)
    assert enemy.y == 0
    world.advance(100)
    assert enemy.y == 10


def test_enemy_stops_at_the_bottom(world):
    enemy = world.spawn_green_ship(0, world.height - 50)

    for _ in range(6):
        world.advance(100)

    assert enemy.y == world.height - 50


def test_power_up_drifts_down(world):
    item = power_up(0, 0, PowerUpType.HEART)
    world.add(item)

    world.advance(200)

    assert item.y == 10


def test_hit_effect_expires_after_one_second(world):
    effect = hit_effect(0, 0, now=world.now)
    world.add(effect)

    for _ in range(9):
        world.tick(100)
    assert effect in world.objects
    world.tick(100)
    assert effect not in world.objects


def test_boss_patrols_its_half(world):
    left, right = world.spawn_twin_boss(world.width / 2)

    world.advance(300)
    assert left.x == 206
    assert right.x == 562

    left.x = 40
    world.advance(300)
    assert left.move_dir is Direction.RIGHT
    assert left.x == 40
    world.advance(300)
    assert left.x == 90


def test_cooldowns_count_down(world):
    hero = world.hero
    hero.shoot(world.now)

    for _ in range(4):
        world.advance(100)
    assert not hero.can_shoot()
    world.advance(100)
    assert hero.can_shoot()


# ----------------------------
# Stage setup
# ----------------------------

def test_stage_five_setup(bus):
    world = World(bus, stage=5)
    world.setup_stage_enemies()

    assert world.counter.total == 10
    assert len(kinds(world, Kind.BOSS)) == 2
    assert len(kinds(world, Kind.ENEMY)) == 2

    for _ in range(60):
        world.advance(100)

    enemies = kinds(world, Kind.ENEMY)
    assert len(enemies) == 8
    assert sum(e.variant.value == "green" for e in enemies) == 4
    assert world.pending == []


def test_stage_one_setup(bus):
    world = World(bus, stage=1)
    world.setup_stage_enemies()

    assert world.counter.total == 5
    assert len(world.pending) == 3
    for _ in range(40):
        world.advance(100)
    assert len(kinds(world, Kind.ENEMY)) == 5


def test_spawn_positions_stay_on_screen(bus):
    world = World(bus, stage=4)
    world.setup_stage_enemies()

    assert all(0 <= p.x < world.width - 98 for p in world.pending)


def test_invalid_stage(bus):
    with pytest.raises(ValueError):
        World(bus, stage=6).setup_stage_enemies()


def test_all_enemies_cleared(bus):
    world = World(bus, stage=1)
    world.setup_stage_enemies()
    assert not world.all_enemies_cleared()

    for _ in range(40):
        world.advance(100)
    for e in kinds(world, Kind.ENEMY):
        e.alive = False

    assert world.all_enemies_cleared()


def test_pending_spawns_do_not_block_clear(bus):
    world = World(bus, stage=1)
    world.setup_stage_enemies()
    for e in kinds(world, Kind.ENEMY):
        e.alive = False

    assert world.pending
    assert world.all_enemies_cleared()


def test_one_laser_over_two_enemies_kills_one():
    session = GameSession(stage=1, rng=make_rng(0))
    world = session.world
    world.objects = [o for o in world.objects if o.kind in (Kind.PLAYER, Kind.WING)]
    world.pending = []
    first = world.spawn_green_ship(100, 100)
    second = world.spawn_green_ship(120, 100)
    world.spawn_green_ship(600, 100)
    laser = player_laser(130, 100)
    world.add(laser)
    hits = []
    session.bus.register(Events.HIT_ENEMY, hits.append)

    world.update_world()

    assert len(hits) == 1
    assert hits[0]["enemy"] is first
    assert not first.alive
    assert second.alive
    assert world.counter.dead == 1
    assert laser not in world.objects


def test_create_player_layout(world):
    hero = world.hero
    assert (hero.x, hero.y) == (467, 576)
    assert [(w.x, w.y) for w in world.wings] == [(587, 606), (412, 606)]
    assert world.objects[:3] == [hero, *world.wings]
