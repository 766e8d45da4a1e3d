import pytest

import rl.evaluate as evaluate_module
from game.space import ShooterEnv
from game.space.entities import Kind, green_ship
from rl.configs.shooter_config import REWARD_CONFIGS, get_reward_weights
from rl.evaluate import evaluate_policy, scripted_policy


def test_reward_weights_drop_descriptions():
    weights = get_reward_weights("survival")

    assert "name" not in weights and "description" not in weights
    assert weights["R_DAMAGE"] == REWARD_CONFIGS["survival"]["R_DAMAGE"]
    ShooterEnv(reward_config=weights)


def test_unknown_reward_config():
    with pytest.raises(ValueError):
        get_reward_weights("reckless")


def test_scripted_policy_chases_and_fires():
    env = ShooterEnv()
    obs, _ = env.reset(seed=0)
    world = env.session.world
    world.objects = [o for o in world.objects if o.kind in (Kind.PLAYER, Kind.WING)]
    world.pending = []
    world.add(green_ship(0, 0))

    action = scripted_policy(env, obs)

    assert list(action) == [3, 1, 0]


def test_evaluate_policy_runs_short_episodes(monkeypatch):
    monkeypatch.setitem(evaluate_module.ENV_CONFIG, "max_steps", 5)

    results = evaluate_policy("random", n_episodes=2, seed=0)

    assert results["episode_lengths"] == [5, 5]
    assert 0.0 <= results["win_rate"] <= 1.0


def test_evaluate_unknown_policy():
    with pytest.raises(ValueError):
        evaluate_policy("greedy", n_episodes=1)
