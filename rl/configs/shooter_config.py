"""
Evaluation configuration for the space shooter environment
Environment settings and reward shaping variants
"""

# Environment parameters
ENV_CONFIG = {
    # "render_mode": None,  # set per run
    "width": 1024,
    "height": 768,
    "tick_ms": 100,
    "max_steps": 3000,  # 5 minutes at 10 ticks per second
    "stage": 1,
    "k_hostiles": 5,
    "m_lasers": 5,
}

# ==============================================================================
# REWARD SHAPING CONFIGURATIONS
# ==============================================================================

# Reward Config 1: BASELINE (balanced)
REWARD_CONFIG_BASELINE = {
    "name": "baseline",
    "description": "Balanced reward shaping",
    "R_SCORE": 0.01,     # Per score point
    "R_KILL": 1.0,       # Per enemy destroyed
    "R_DAMAGE": 1.0,     # Per hp lost
    "R_HEAL": 0.5,       # Per hp regained from hearts
    "R_TIME": 0.001,     # Small time penalty
    "R_WIN": 10.0,       # Stage cleared
    "R_LOSE": 5.0,       # Hero destroyed
}

# Reward Config 2: SURVIVAL (dodging matters most)
REWARD_CONFIG_SURVIVAL = {
    "name": "survival",
    "description": "Prioritize survival - higher damage/death penalties",
    "R_SCORE": 0.005,
    "R_KILL": 0.5,
    "R_DAMAGE": 3.0,     # MUCH higher damage penalty
    "R_HEAL": 1.5,
    "R_TIME": 0.0005,
    "R_WIN": 10.0,
    "R_LOSE": 10.0,      # MUCH higher death penalty
}

# Reward Config 3: AGGRESSIVE (clear the stage fast)
REWARD_CONFIG_AGGRESSIVE = {
    "name": "aggressive",
    "description": "Prioritize kills - higher combat rewards, lower penalties",
    "R_SCORE": 0.02,
    "R_KILL": 2.0,
    "R_DAMAGE": 0.5,
    "R_HEAL": 0.25,
    "R_TIME": 0.002,     # Higher time penalty - encourage action
    "R_WIN": 20.0,
    "R_LOSE": 3.0,
}

REWARD_CONFIGS = {
    "baseline": REWARD_CONFIG_BASELINE,
    "survival": REWARD_CONFIG_SURVIVAL,
    "aggressive": REWARD_CONFIG_AGGRESSIVE,
}

# ==============================================================================
# EVALUATION SETTINGS
# ==============================================================================

EVAL_CONFIG = {
    "n_episodes": 10,
    "seed": 42,
    "reward_config": "baseline",
}


def get_reward_weights(name: str) -> dict:
    """Reward weights for ShooterEnv, without the descriptive keys."""
    if name not in REWARD_CONFIGS:
        raise ValueError(f"Unknown reward config: {name} (choose from {sorted(REWARD_CONFIGS)})")
    return {k: v for k, v in REWARD_CONFIGS[name].items() if k.startswith("R_")}


if __name__ == "__main__":
    for name, cfg in REWARD_CONFIGS.items():
        print(f"  {name:12} | {cfg['description']}")
