# --- Display ---
WIDTH = 960
HEIGHT = 540
FPS = 60
MAX_DT = 1.0 / 30.0          # clamp render stalls (sec)

# --- World / Physics (y axis points UP, origin bottom-left) ---
GRAVITY = -900.0             # px/s^2, negative = pulls toward the floor
BOUNCE_VELOCITY = 300.0      # vy set (not added) on each impulse (px/s)
SPAWN_EPSILON = 1e-9         # tolerance for accumulated dt vs spawn interval

# --- Player ---
PLAYER_X = 100
PLAYER_W = 46
PLAYER_H = 20
PLAYER_FRAME_S = 0.15        # per-frame duration of the player animation

# --- Obstacles ---
OBSTACLE_W = 48
OBSTACLE_H = 48
OBSTACLE_FRAME_S = 0.2
OBSTACLE_KINDS = ("bloodMoon", "earth", "jupiter", "mars", "moon", "venus")

# --- Placement heuristic ---
PLACEMENT_ATTEMPTS = 10      # candidates tried per spawn cycle
MIN_SEPARATION = 100.0       # px between a candidate and any active obstacle
SPAWN_BAND_W = 60            # candidates x in [screen_w, screen_w + band]
SEPARATION_MODE = "euclidean"  # or "axis" (reject only when both axes are close)

# --- Collision ---
COLLISION_MARGIN = 5.0       # px shaved off every side before testing overlap

# --- Scoring / persistence ---
MAX_SCORE = 2**31 - 1
SCORING_DEFAULT = "flat"     # "flat" (+1 per obstacle) or "speed" (floor(count * speed))
HIGHSCORE_FILE = "~/.alien_game/highscores.json"
SEED_DEFAULT = 12345

# --- Screens ---
RESTART_DELAY_S = 1.0        # ignore keys this long after game over

# --- Colors (RGB) ---
COLOR_BG = (11, 20, 56)
COLOR_FG = (220, 232, 255)
COLOR_ACCENT = (120, 200, 255)
COLOR_DANGER = (178, 34, 34)
COLOR_OVER_BG = (191, 191, 191)
COLOR_PLANETS = {
    "bloodMoon": (170, 30, 40),
    "earth": (60, 130, 220),
    "jupiter": (210, 160, 110),
    "mars": (200, 80, 50),
    "moon": (200, 200, 200),
    "venus": (230, 200, 120),
}
