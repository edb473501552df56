# src/game/round.py
from __future__ import annotations
import logging
import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from .config import (
    GRAVITY, BOUNCE_VELOCITY, SPAWN_EPSILON,
    PLAYER_X, PLAYER_W, PLAYER_H, PLAYER_FRAME_S,
    OBSTACLE_W, OBSTACLE_H, OBSTACLE_FRAME_S, OBSTACLE_KINDS,
)
from .difficulty import Difficulty
from .entity import Bounds, Entity
from .session import SessionState
from .spawner import ObstaclePlacer, RandomSource

logger = logging.getLogger(__name__)

ScreenSize = Callable[[], Tuple[float, float]]
Listener = Callable[[str], None]

JUMP = "jump"
PASSED = "passed"
ROUND_OVER = "round_over"


class RoundState(Enum):
    READY = "ready"
    RUNNING = "running"
    OVER = "over"


@dataclass(frozen=True)
class RoundConfig:
    """Everything a round needs, fixed when the round enters READY."""
    spawn_interval_seconds: float
    obstacle_speed: float
    max_on_screen: int
    obstacle_w: float = OBSTACLE_W
    obstacle_h: float = OBSTACLE_H
    gravity: float = GRAVITY
    bounce_velocity: float = BOUNCE_VELOCITY
    speed_ramp_per_s: float = 0.0

    @classmethod
    def from_tier(cls, tier: Difficulty, **overrides) -> "RoundConfig":
        cfg = cls(
            spawn_interval_seconds=tier.spawn_interval_seconds,
            obstacle_speed=tier.obstacle_speed,
            max_on_screen=tier.max_on_screen,
        )
        return replace(cfg, **overrides) if overrides else cfg


@dataclass
class StepResult:
    passed: int = 0
    credit: int = 0
    ended: bool = False
    death_cause: Optional[str] = None   # "collision" | "floor" | "ceiling" | None


class Round:
    """
    One play session: Ready -> Running -> Over.

    The caller drives it with update(dt) once per rendered frame and forwards
    input through impulse(). Positions use a y-up world, floor at y = 0.
    """

    def __init__(self,
                 tier: Difficulty,
                 session: SessionState,
                 screen_size: ScreenSize,
                 rng: Optional[RandomSource] = None,
                 config: Optional[RoundConfig] = None,
                 placer: Optional[ObstaclePlacer] = None,
                 player_frames: Tuple[Any, ...] = (None,),
                 obstacle_frames: Optional[Dict[str, Tuple[Any, ...]]] = None):
        self.tier = tier
        self.session = session
        self.screen_size = screen_size
        self.rng: RandomSource = rng if rng is not None else random.Random()
        self.placer = placer or ObstaclePlacer()
        self.player_frames = tuple(player_frames)
        self.obstacle_frames = obstacle_frames or {}
        self._config_override = config
        self._listeners: List[Listener] = []
        self.reset()

    # -------------------- Lifecycle --------------------

    def reset(self):
        """Enter READY: fresh player, empty obstacle set, timers zeroed, score reset."""
        w, h = self.screen_size()
        self.config = self._config_override or RoundConfig.from_tier(self.tier)
        self.state = RoundState.READY
        self.elapsed = 0.0
        self.spawn_timer = 0.0
        self.speed = self.config.obstacle_speed
        self.first_impulse = False
        self.death_cause: Optional[str] = None

        self.player = Entity(
            x=float(PLAYER_X), y=h / 2 - PLAYER_H / 2,
            width=PLAYER_W, height=PLAYER_H,
            frames=self.player_frames, frame_duration=PLAYER_FRAME_S,
            kind="player",
        )
        self._screen = (w, h)
        self.player.set_movement_bounds(Bounds(0, 0, w / 2, h))
        self.obstacles: List[Entity] = []

        if self.session.tier is not self.tier:
            self.session.select_tier(self.tier)
        self.session.reset()

    def subscribe(self, listener: Listener):
        self._listeners.append(listener)

    def _emit(self, event: str):
        for cb in self._listeners:
            cb(event)

    @property
    def over(self) -> bool:
        return self.state is RoundState.OVER

    # -------------------- Input --------------------

    def impulse(self):
        """Overwrite vertical velocity with the bounce velocity; arms gravity."""
        if self.over:
            return
        self.player.set_velocity_component("y", self.config.bounce_velocity)
        self.first_impulse = True
        self._emit(JUMP)

    # -------------------- Simulation --------------------

    def update(self, dt: float) -> StepResult:
        result = StepResult()
        if self.over:
            return result
        if self.state is RoundState.READY:
            self.state = RoundState.RUNNING
            logger.info("Round started (%s)", self.tier.name)

        w, h = self.screen_size()
        if (w, h) != self._screen:
            self._screen = (w, h)
            self.player.set_movement_bounds(Bounds(0, 0, w / 2, h))

        # already outside the play area (e.g. placed there by the caller)
        cause = self._boundary_cause(h)
        if cause is not None:
            return self._end(cause, result)

        self.elapsed += dt
        if self.first_impulse:
            self.player.dy += self.config.gravity * dt
        self.speed += self.config.speed_ramp_per_s * dt
        self.player.update(dt)

        self.spawn_timer += dt
        if (self.spawn_timer + SPAWN_EPSILON >= self.config.spawn_interval_seconds
                and len(self.obstacles) < self.config.max_on_screen):
            self._try_spawn(w, h)
            self.spawn_timer = 0.0

        remaining: List[Entity] = []
        departed = 0
        for ob in self.obstacles:
            ob.update(dt)
            if ob.x < -ob.width:
                departed += 1
            else:
                remaining.append(ob)
        self.obstacles = remaining

        if departed:
            result.passed = departed
            result.credit = self.session.add_passed(departed, self.speed)
            self._emit(PASSED)

        if any(self.player.overlaps(ob) for ob in self.obstacles):
            return self._end("collision", result)

        cause = self._boundary_cause(h)
        if cause is not None:
            return self._end(cause, result)
        return result

    def _boundary_cause(self, screen_h: float) -> Optional[str]:
        if self.player.y <= 0:
            return "floor"
        if self.player.top >= screen_h:
            return "ceiling"
        return None

    def _end(self, cause: str, result: StepResult) -> StepResult:
        self.state = RoundState.OVER
        self.death_cause = cause
        result.ended = True
        result.death_cause = cause
        logger.info("Round over (%s): cause=%s score=%d high=%d",
                    self.tier.name, cause, self.session.get_score(), self.session.get_high_score())
        self._emit(ROUND_OVER)
        return result

    # -------------------- Obstacles --------------------

    def _try_spawn(self, w: float, h: float) -> Optional[Entity]:
        cfg = self.config
        pos = self.placer.place(w, h, cfg.obstacle_h, self.obstacles, self.rng)
        if pos is None:
            logger.debug("Spawn skipped: no clear position after %d attempts", self.placer.attempts)
            return None
        return self.spawn_obstacle_at(*pos)

    def spawn_obstacle_at(self, x: float, y: float) -> Entity:
        """Add an obstacle moving left at the current speed."""
        kind = self.rng.choice(OBSTACLE_KINDS)
        ob = Entity(
            x=float(x), y=float(y),
            width=self.config.obstacle_w, height=self.config.obstacle_h,
            dx=-self.speed, dy=0.0,
            frames=self.obstacle_frames.get(kind, (None,)),
            frame_duration=OBSTACLE_FRAME_S,
            kind=kind,
        )
        self.obstacles.append(ob)
        return ob

    def entities(self) -> Iterator[Entity]:
        """Everything that should be drawn this frame, player first."""
        yield self.player
        yield from self.obstacles
