# src/game/spawner.py
from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Iterable, Optional, Protocol, Sequence, Tuple, TypeVar

from .config import MIN_SEPARATION, PLACEMENT_ATTEMPTS, SPAWN_BAND_W, SEPARATION_MODE
from .entity import Entity

T = TypeVar("T")


class RandomSource(Protocol):
    """The subset of random.Random the spawner needs; tests can script it."""
    def uniform(self, a: float, b: float) -> float: ...
    def choice(self, seq: Sequence[T]) -> T: ...


@dataclass
class ObstaclePlacer:
    """
    Picks a spawn position in a band just past the right edge of the screen,
    keeping away from obstacles that are already on screen.

    separation:
      "euclidean" -> reject when the distance to any obstacle is < min_separation
      "axis"      -> reject only when BOTH |dx| and |dy| are <= min_separation
    """
    min_separation: float = MIN_SEPARATION
    attempts: int = PLACEMENT_ATTEMPTS
    band_width: float = SPAWN_BAND_W
    separation: str = SEPARATION_MODE

    def __post_init__(self):
        if self.separation not in ("euclidean", "axis"):
            raise ValueError(f"separation must be 'euclidean' or 'axis', got {self.separation!r}")

    def _too_close(self, x: float, y: float, other: Entity) -> bool:
        dx = abs(x - other.x)
        dy = abs(y - other.y)
        if self.separation == "axis":
            return dx <= self.min_separation and dy <= self.min_separation
        return math.hypot(dx, dy) < self.min_separation

    def is_clear(self, x: float, y: float, active: Iterable[Entity]) -> bool:
        return not any(self._too_close(x, y, o) for o in active)

    def place(self,
              screen_w: float,
              screen_h: float,
              obstacle_h: float,
              active: Sequence[Entity],
              rng: RandomSource) -> Optional[Tuple[float, float]]:
        """Returns an accepted (x, y) or None when every attempt was rejected."""
        y_max = max(0.0, screen_h - obstacle_h)
        for _ in range(self.attempts):
            x = rng.uniform(screen_w, screen_w + self.band_width)
            y = rng.uniform(0.0, y_max)
            if self.is_clear(x, y, active):
                return x, y
        return None
