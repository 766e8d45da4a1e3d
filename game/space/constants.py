"""
Gameplay constants for the space shooter
"""

# Playfield
WIDTH = 1024
HEIGHT = 768
TICK_MS = 100  # fixed loop period
END_DELAY_MS = 200  # pause between session end and the next stage
LAST_STAGE = 5

# Hero
PLAYER_SIZE = (99, 75)
PLAYER_SPEED = 20
PLAYER_MAX_HP = 3
PLAYER_FIRE_COOLDOWN = 500  # ms
PLAYER_SHOT_OFFSETS = (45,)
PLAYER_TRIPLE_OFFSETS = (30, 45, 60)
RAPID_FIRE_COOLDOWN = 100  # ms while the rapid power-up is active
POWER_UP_DURATION = 5000  # ms, rapid and triple
SPECIAL_MAX = 100

# Wings
WING_SIZE = (33, 25)
WING_FIRE_COOLDOWN = 500
WING_SHOT_OFFSET = 12

# Bullets move 15px every 100ms
BULLET_SIZE = (9, 33)
BULLET_STEP = 15
BULLET_PERIOD = 100
BULLET_SPAWN_DY = -10

# Enemies fall in discrete steps
ENEMY_FALL_PERIOD = 300
GREEN_SIZE = (98, 50)
GREEN_FALL_STEP = 10
GREEN_FIRE_INTERVAL = 3000
GREEN_SHOT_OFFSET = (45, 30)
UFO_SIZE = (91, 91)
UFO_FALL_STEP = 15
UFO_FIRE_INTERVAL = 4000
UFO_SHOT_OFFSET = (50, 10)
ENEMY_SPAWN_SPACING = 2000  # ms between waves
ENEMY_SPAWN_MAX_X_MARGIN = 98

# Twin boss
BOSS_SIZE = (256, 256)
BOSS_HP = 20
BOSS_FIRE_INTERVAL = 1200
BOSS_SHOT_CENTER = (128, 236)
BOSS_SHOT_SPREAD = 25
BOSS_PATROL_STEP = 50
BOSS_PATROL_PERIOD = 300
BOSS_HIT_EFFECT_DY = -80

# Power-ups drift down 5px every 100ms
POWER_UP_SIZE = (30, 30)
POWER_UP_STEP = 5
POWER_UP_PERIOD = 100
HEART_THRESHOLD = 0.33
RAPID_THRESHOLD = 0.66

# Hit effects
HIT_SIZE = (98, 98)
HIT_LIFETIME = 1000

# Scoring
SCORE_HIT = 100
SCORE_SPECIAL_ENEMY = 150
SCORE_SPECIAL_BOSS = 300
SPECIAL_GAIN_KILL = 10
SPECIAL_GAIN_BOSS_HIT = 5
SPECIAL_GAIN_BOSS_KILL = 20
SPECIAL_BOSS_DAMAGE = 10
DROP_CHANCE_ENEMY = 0.2
DROP_CHANCE_BOSS = 0.5
