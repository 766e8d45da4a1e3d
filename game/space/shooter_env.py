"""
ShooterEnv - the space shooter as a Gymnasium environment
---------------------------------------------------------
- Headless LoopDriver stepping one 100 ms tick per env step
- Arcade for rendering in "human" mode
- MultiDiscrete action space: [move(5), fire(2), special(2)]
- Vector observation: hero state + K nearest hostiles + M nearest enemy lasers
- One episode is one stage attempt: ends on stage win or hero death

Install:
    pip install gymnasium arcade numpy

Quick test:
    python -m game.space.shooter_env
"""

from __future__ import annotations

import time
from typing import Any, Dict, List, Optional

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from . import constants as C
from .entities import Kind, Owner
from .events import Events
from .loop import LoopDriver
from .session import LOSE, WIN
from .utils import clamp

DEFAULT_REWARD_CONFIG = {
    "R_SCORE": 0.01,   # per score point
    "R_KILL": 1.0,
    "R_DAMAGE": 1.0,   # per hp lost
    "R_HEAL": 0.5,     # per hp regained
    "R_TIME": 0.001,
    "R_WIN": 10.0,
    "R_LOSE": 5.0,
}

_MOVES = {
    1: Events.MOVE_UP,
    2: Events.MOVE_DOWN,
    3: Events.MOVE_LEFT,
    4: Events.MOVE_RIGHT,
}


class ShooterEnv(gym.Env):
    """Space shooter environment driven by bus commands"""

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 1000 // C.TICK_MS}

    def __init__(
        self,
        render_mode: Optional[str] = None,
        obs_mode: str = "vector",
        width: int = C.WIDTH,
        height: int = C.HEIGHT,
        tick_ms: int = C.TICK_MS,
        max_steps: int = 3000,  # 5 minutes at 10 ticks per second
        stage: int = 1,
        k_hostiles: int = 5,
        m_lasers: int = 5,
        reward_config: Optional[Dict[str, float]] = None,
    ):
        super().__init__()

        assert obs_mode in ("vector",), "Only 'vector' observations are implemented."
        self.render_mode = render_mode
        self.obs_mode = obs_mode

        self.width = width
        self.height = height
        self.tick_ms = tick_ms
        self.max_steps = max_steps
        self.stage = stage
        self.k_hostiles = k_hostiles
        self.m_lasers = m_lasers
        self.reward_config = dict(DEFAULT_REWARD_CONFIG)
        if reward_config:
            unknown = set(reward_config) - set(DEFAULT_REWARD_CONFIG)
            if unknown:
                raise ValueError(f"Unknown reward keys: {sorted(unknown)}")
            self.reward_config.update(reward_config)

        # move: 0 stay, 1 up, 2 down, 3 left, 4 right
        self.action_space = spaces.MultiDiscrete([5, 2, 2])

        # Hero: pos(2) hp(1) cooldown(1) special(1) triple(1) rapid(1) boss hp(1)
        # Each hostile: rel pos(2) is_boss(1)
        # Each laser: rel pos(2)
        obs_dim = 8 + self.k_hostiles * 3 + self.m_lasers * 2
        self.observation_space = spaces.Box(
            low=-1.0, high=1.0, shape=(obs_dim,), dtype=np.float32
        )

        self._window = None
        self.driver: LoopDriver = None  # type: ignore
        self._step_count = 0
        self._last: Dict[str, int] = {}

    # ----------------------------
    # Gym API
    # ----------------------------

    def reset(self, seed: Optional[int] = None, options: Optional[dict] = None):
        super().reset(seed=seed)

        stage = (options or {}).get("stage", self.stage)
        self.driver = LoopDriver(
            period_ms=self.tick_ms,
            stage=stage,
            width=self.width,
            height=self.height,
            rng=self.np_random,
        )
        if self._window is not None:
            self._window.driver = self.driver
            self.driver.renderer = self._window.frame

        self._step_count = 0
        self._last = self._tallies()
        return self._get_obs(), self._get_info()

    def step(self, action):
        move, fire, special = int(action[0]), int(action[1]), int(action[2])

        if move in _MOVES:
            self.driver.command(_MOVES[move])
        if fire:
            self.driver.command(Events.FIRE)
        if special:
            self.driver.command(Events.SPECIAL)

        self.driver.tick()
        self._step_count += 1

        reward = self._compute_reward()
        outcome = self.session.outcome
        terminated = outcome is not None
        truncated = not terminated and self._step_count >= self.max_steps

        obs = self._get_obs()
        info = self._get_info()

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    @property
    def session(self):
        return self.driver.session

    # ----------------------------
    # Observation / reward / info
    # ----------------------------

    def _tallies(self) -> Dict[str, int]:
        hero = self.session.hero
        return {"score": hero.score, "kills": hero.kill_count, "hp": hero.hp}

    def _compute_reward(self) -> float:
        rc = self.reward_config
        now = self._tallies()
        last = self._last
        self._last = now

        reward = 0.0
        reward += rc["R_SCORE"] * (now["score"] - last["score"])
        reward += rc["R_KILL"] * (now["kills"] - last["kills"])
        hp_delta = now["hp"] - last["hp"]
        if hp_delta < 0:
            reward += rc["R_DAMAGE"] * hp_delta
        else:
            reward += rc["R_HEAL"] * hp_delta
        reward -= rc["R_TIME"]

        if self.session.outcome == WIN:
            reward += rc["R_WIN"]
        elif self.session.outcome == LOSE:
            reward -= rc["R_LOSE"]

        return float(reward)

    def _get_obs(self) -> np.ndarray:
        world = self.session.world
        hero = world.hero
        hx = hero.x + hero.width / 2
        hy = hero.y + hero.height / 2

        bosses = [b for b in world.of_kind(Kind.BOSS) if b.alive]
        boss_ratio = bosses[0].hp_ratio if bosses else 0.0

        obs_parts: List[float] = [
            clamp(hx / self.width * 2 - 1, -1, 1),
            clamp(hy / self.height * 2 - 1, -1, 1),
            hero.hp / C.PLAYER_MAX_HP * 2 - 1,
            clamp(hero.cooldown / C.PLAYER_FIRE_COOLDOWN * 2 - 1, -1, 1),
            hero.special_charge / C.SPECIAL_MAX * 2 - 1,
            1.0 if hero.triple_active(world.now) else -1.0,
            1.0 if hero.rapid_active() else -1.0,
            boss_ratio * 2 - 1 if bosses else -1.0,
        ]

        def rel(o):
            dx = (o.x + o.width / 2 - hx) / self.width
            dy = (o.y + o.height / 2 - hy) / self.height
            return clamp(dx, -1, 1), clamp(dy, -1, 1)

        def dist(o):
            return (o.x + o.width / 2 - hx) ** 2 + (o.y + o.height / 2 - hy) ** 2

        hostiles = sorted(
            (o for o in world.objects if o.alive and o.kind in (Kind.ENEMY, Kind.BOSS)),
            key=dist,
        )
        for i in range(self.k_hostiles):
            if i < len(hostiles):
                o = hostiles[i]
                obs_parts += [*rel(o), 1.0 if o.kind is Kind.BOSS else -1.0]
            else:
                obs_parts += [0.0, 0.0, 0.0]

        lasers = sorted((b for b in world.bullets(Owner.ENEMY) if b.alive), key=dist)
        for i in range(self.m_lasers):
            if i < len(lasers):
                obs_parts += list(rel(lasers[i]))
            else:
                obs_parts += [0.0, 0.0]

        return np.array(obs_parts, dtype=np.float32)

    def _get_info(self) -> Dict[str, Any]:
        world = self.session.world
        hero = world.hero
        return {
            "hp": hero.hp,
            "score": hero.score,
            "kills": hero.kill_count,
            "special": hero.special_charge,
            "stage": world.stage,
            "enemies_dead": world.counter.dead,
            "enemies_total": world.counter.total,
            "num_objects": len(world.objects),
            "outcome": self.session.outcome,
            "step": self._step_count,
        }

    # ----------------------------
    # Rendering with Arcade
    # ----------------------------

    def render(self):
        if self.render_mode is None:
            return None

        if self.render_mode == "human":
            if self._window is None:
                from .render import ShooterWindow

                self._window = ShooterWindow(self.driver, interactive=False)
            self._window.on_draw()
            self._window.flip()
            return None
        elif self.render_mode == "rgb_array":
            # TODO: offscreen rendering through an arcade framebuffer
            return np.zeros((self.height, self.width, 3), dtype=np.uint8)

    def close(self):
        if self._window is not None:
            self._window.close()
            self._window = None


def run_random_episode(render: bool = True, seed: Optional[int] = 42):
    """Run a random episode for testing"""
    env = ShooterEnv(render_mode="human" if render else None)
    obs, info = env.reset(seed=seed)

    terminated = False
    truncated = False
    total = 0.0

    print("Running episode... close the window to exit early.")

    while not (terminated or truncated):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total += reward

        if render and env._window:
            env._window.dispatch_events()
            time.sleep(env.tick_ms / 1000)

    print(f"Random episode return: {total:.2f} "
          f"(outcome={info['outcome']}, score={info['score']}, steps={info['step']})")
    env.close()
    return total, info


if __name__ == "__main__":
    run_random_episode(render=True)
