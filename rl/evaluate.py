"""
Evaluation script for baseline policies on the space shooter
"""

import argparse
from typing import Callable, Dict, Optional

import numpy as np

from game.space import ShooterEnv
from game.space.entities import Kind
from rl.configs.shooter_config import ENV_CONFIG, EVAL_CONFIG, get_reward_weights


def random_policy(env: ShooterEnv, obs: np.ndarray) -> np.ndarray:
    return env.action_space.sample()


def scripted_policy(env: ShooterEnv, obs: np.ndarray) -> np.ndarray:
    """Slide under the nearest hostile, keep firing, use the special when full"""
    world = env.session.world
    hero = world.hero
    hostiles = [o for o in world.objects if o.alive and o.kind in (Kind.ENEMY, Kind.BOSS)]

    move = 0
    if hostiles:
        hero_cx = hero.x + hero.width / 2
        target = min(hostiles, key=lambda o: abs(o.x + o.width / 2 - hero_cx))
        dx = target.x + target.width / 2 - hero_cx
        if dx < -hero.speed:
            move = 3
        elif dx > hero.speed:
            move = 4

    special = 1 if hero.special_ready() else 0
    return np.array([move, 1, special], dtype=np.int64)


POLICIES: Dict[str, Callable] = {
    "random": random_policy,
    "scripted": scripted_policy,
}


def evaluate_policy(
    policy: str = "random",
    n_episodes: int = EVAL_CONFIG["n_episodes"],
    render: bool = False,
    seed: Optional[int] = EVAL_CONFIG["seed"],
    reward_config: str = EVAL_CONFIG["reward_config"],
    stage: int = 1,
):
    """
    Evaluate a baseline policy

    Args:
        policy: 'random' or 'scripted'
        n_episodes: Number of episodes to evaluate
        render: Whether to render the environment
        seed: Random seed for the first episode (incremented per episode)
        reward_config: Name of the reward shaping config
        stage: Stage to play
    """
    if policy not in POLICIES:
        raise ValueError(f"Unknown policy: {policy}")
    act = POLICIES[policy]

    env_kwargs = dict(ENV_CONFIG, stage=stage)
    env = ShooterEnv(
        render_mode="human" if render else None,
        reward_config=get_reward_weights(reward_config),
        **env_kwargs,
    )
    env.action_space.seed(seed)

    episode_rewards = []
    episode_lengths = []
    episode_scores = []
    wins = 0

    for episode in range(n_episodes):
        obs, info = env.reset(seed=seed + episode if seed is not None else None)

        terminated = False
        truncated = False
        total_reward = 0.0
        steps = 0

        while not (terminated or truncated):
            action = act(env, obs)
            obs, reward, terminated, truncated, info = env.step(action)
            total_reward += reward
            steps += 1

        if info["outcome"] == "win":
            wins += 1
        episode_rewards.append(total_reward)
        episode_lengths.append(steps)
        episode_scores.append(info["score"])

        print(f"Episode {episode + 1}/{n_episodes}: "
              f"Reward = {total_reward:.2f}, Length = {steps}, "
              f"Score = {info['score']}, Outcome = {info['outcome']}")

    env.close()

    mean_reward = np.mean(episode_rewards)
    std_reward = np.std(episode_rewards)
    mean_length = np.mean(episode_lengths)

    print("\n" + "=" * 50)
    print(f"Evaluation Results ({policy}, {n_episodes} episodes, stage {stage}):")
    print(f"Mean Reward: {mean_reward:.2f} ± {std_reward:.2f}")
    print(f"Mean Episode Length: {mean_length:.1f}")
    print(f"Mean Score: {np.mean(episode_scores):.1f}")
    print(f"Win Rate: {wins / max(1, n_episodes):.0%}")
    print("=" * 50)

    return {
        "mean_reward": mean_reward,
        "std_reward": std_reward,
        "mean_length": mean_length,
        "win_rate": wins / max(1, n_episodes),
        "episode_rewards": episode_rewards,
        "episode_lengths": episode_lengths,
    }


def main():
    parser = argparse.ArgumentParser(description="Evaluate baseline policies on the space shooter")
    parser.add_argument(
        "--policy",
        type=str,
        default="random",
        choices=sorted(POLICIES),
        help="Policy to evaluate (default: random)",
    )
    parser.add_argument(
        "--episodes",
        type=int,
        default=EVAL_CONFIG["n_episodes"],
        help="Number of evaluation episodes",
    )
    parser.add_argument("--seed", type=int, default=EVAL_CONFIG["seed"], help="Random seed")
    parser.add_argument(
        "--reward-config",
        type=str,
        default=EVAL_CONFIG["reward_config"],
        help="Reward shaping config (baseline, survival, aggressive)",
    )
    parser.add_argument("--stage", type=int, default=1, help="Stage to play (1-5)")
    parser.add_argument("--render", action="store_true", help="Render in an arcade window")

    args = parser.parse_args()

    evaluate_policy(
        policy=args.policy,
        n_episodes=args.episodes,
        render=args.render,
        seed=args.seed,
        reward_config=args.reward_config,
        stage=args.stage,
    )


if __name__ == "__main__":
    main()
