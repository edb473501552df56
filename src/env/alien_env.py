# src/env/alien_env.py
from __future__ import annotations
import random
from typing import Optional, Tuple, Dict, Any
import numpy as np
import gymnasium as gym
import pygame

from src.game.config import (
    WIDTH, HEIGHT, PLAYER_H, BOUNCE_VELOCITY,
    COLOR_BG, COLOR_ACCENT, COLOR_DANGER, COLOR_PLANETS,
)
from src.game.difficulty import Difficulty
from src.game.round import Round
from src.game.session import MemoryHighScoreStore, SessionState

N_AHEAD = 3            # obstacles described in the observation
MAX_VY = 2.0 * BOUNCE_VELOCITY


def build_observation(rnd: Round, screen: Tuple[float, float] = (WIDTH, HEIGHT)) -> np.ndarray:
    """
    [y_norm, vy_norm, (dx_norm, dy_norm) x N_AHEAD]
    Obstacles are the nearest ones whose right edge is still ahead of the player's
    left edge; empty slots read as (1.0, 0.0), i.e. far away and level.
    """
    w, h = screen
    p = rnd.player
    y_norm = float(np.clip(p.y / max(1.0, h - PLAYER_H), 0.0, 1.0))
    vy_norm = float(np.clip(p.dy / MAX_VY, -1.0, 1.0))

    ahead = sorted((ob for ob in rnd.obstacles if ob.x + ob.width >= p.x), key=lambda ob: ob.x)
    slots = []
    for i in range(N_AHEAD):
        if i < len(ahead):
            ob = ahead[i]
            slots += [np.clip((ob.x - p.x) / w, 0.0, 1.0), np.clip((ob.y - p.y) / h, -1.0, 1.0)]
        else:
            slots += [1.0, 0.0]
    return np.asarray([y_norm, vy_norm] + slots, dtype=np.float32)


class AlienEnv(gym.Env):
    """
    Alien dodge Gymnasium environment (vector observations).
    - Simulation at 60 Hz (internal).
    - Agent acts every `frame_skip` frames (default 4) -> 15 decisions/sec.
    - Observation: shape (2 + 2 * N_AHEAD,), float32.
    """
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 60}

    def __init__(self,
                 render_mode: Optional[str] = None,
                 difficulty: Difficulty | str = Difficulty.EASY,
                 frame_skip: int = 4,
                 time_limit_seconds: Optional[float] = 30.0,
                 scoring: str = "flat"):
        super().__init__()
        assert frame_skip >= 1, "frame_skip must be >= 1"
        self.render_mode = render_mode
        self.difficulty = Difficulty.parse(difficulty) if isinstance(difficulty, str) else difficulty
        self.frame_skip = int(frame_skip)
        self.scoring = scoring

        self.sim_fps = 60
        self.dt = 1.0 / self.sim_fps

        self.time_limit_decisions = None
        if time_limit_seconds is not None:
            self.time_limit_decisions = int(self.sim_fps * time_limit_seconds / self.frame_skip)

        # Actions: 0 = NOOP, 1 = IMPULSE
        self.action_space = gym.spaces.Discrete(2)

        low = np.array([0.0, -1.0] + [0.0, -1.0] * N_AHEAD, dtype=np.float32)
        high = np.array([1.0, 1.0] + [1.0, 1.0] * N_AHEAD, dtype=np.float32)
        self.observation_space = gym.spaces.Box(low=low, high=high, dtype=np.float32)

        # high scores survive resets within this env instance only
        self.session = SessionState(MemoryHighScoreStore(), self.difficulty, scoring)
        self.round: Optional[Round] = None
        self.timestep: int = 0
        self.current_seed: Optional[int] = None

        self.screen = None
        self.clock = None

    # -------------------- Core API --------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)  # initializes self.np_random

        # explicit seed -> used as-is; otherwise derived from the env's np_random
        if seed is not None:
            round_seed = int(seed)
        else:
            round_seed = int(self.np_random.integers(0, 2**31 - 1))
        self.current_seed = round_seed

        self.round = Round(self.difficulty, self.session, lambda: (WIDTH, HEIGHT),
                           rng=random.Random(round_seed))
        self.timestep = 0

        obs = build_observation(self.round)
        info = {"seed": self.current_seed, "score": 0}
        return obs, info

    def step(self, action):
        assert self.action_space.contains(action), f"Invalid action {action}"
        assert self.round is not None

        if action == 1:
            self.round.impulse()

        credit = 0
        ended = False
        for _ in range(self.frame_skip):
            res = self.round.update(self.dt)
            credit += res.credit
            if res.ended:
                ended = True
                break

        reward = -1.0 if ended else 1.0 + float(credit)

        self.timestep += 1
        terminated = self.round.over
        truncated = False
        if (self.time_limit_decisions is not None) and (self.timestep >= self.time_limit_decisions):
            truncated = True

        obs = build_observation(self.round)
        info = {
            "score": self.session.get_score(),
            "high_score": self.session.get_high_score(),
            "timestep": self.timestep,
            "seed": self.current_seed,
            "obstacles": len(self.round.obstacles),
            "death_cause": self.round.death_cause,
        }

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    # -------------------- Rendering --------------------

    def render(self):
        if self.render_mode is None:
            return

        if self.screen is None:
            pygame.init()
            if self.render_mode == "human":
                self.screen = pygame.display.set_mode((WIDTH, HEIGHT))
                pygame.display.set_caption("Alien Game - Gym Env")
            else:
                self.screen = pygame.Surface((WIDTH, HEIGHT))
            self.clock = pygame.time.Clock()

        if self.render_mode == "human":
            pygame.event.pump()

        self.screen.fill(COLOR_BG)
        if self.round is not None:
            for ob in self.round.obstacles:
                pygame.draw.ellipse(self.screen, COLOR_PLANETS.get(ob.kind, COLOR_ACCENT),
                                    ob.screen_rect(HEIGHT))
            color = COLOR_DANGER if self.round.over else COLOR_ACCENT
            pygame.draw.rect(self.screen, color, self.round.player.screen_rect(HEIGHT))

        if self.render_mode == "human":
            pygame.display.flip()
            self.clock.tick(self.metadata.get("render_fps", 60))
            return None

        arr = pygame.surfarray.array3d(self.screen)  # (W, H, 3)
        return np.transpose(arr, (1, 0, 2))

    def close(self):
        if self.screen is not None:
            if self.render_mode == "human":
                pygame.display.quit()
            pygame.quit()
            self.screen = None
            self.clock = None
