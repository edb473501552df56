# src/game/entity.py
from __future__ import annotations
import itertools
import math
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Sequence, Tuple
import pygame
from .config import COLLISION_MARGIN


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned rectangle in world units (y up, origin bottom-left)."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y + self.height


@dataclass
class Entity:
    """
    Moving axis-aligned rectangle:
    - (x, y) is the bottom-left corner in world units, y grows upward
    - (dx, dy) is the velocity in px/s
    - frames cycle at a fixed rate, selected from a shared elapsed clock
    """
    x: float
    y: float
    width: float
    height: float
    dx: float = 0.0
    dy: float = 0.0
    bounds: Optional[Bounds] = None
    frames: Tuple[Any, ...] = (None,)
    frame_duration: float = 0.15
    kind: str = ""
    _margin: float = field(default=COLLISION_MARGIN, repr=False)

    def update(self, dt: float):
        """Integrate position, then clamp each axis into bounds independently."""
        self.x += self.dx * dt
        self.y += self.dy * dt

        b = self.bounds
        if b is None:
            return
        if self.x < b.x:
            self.x = b.x
        elif self.x + self.width > b.right:
            self.x = b.right - self.width
        if self.y < b.y:
            self.y = b.y
        elif self.y + self.height > b.top:
            self.y = b.top - self.height

    def overlaps(self, other: "Entity") -> bool:
        """Positive-area intersection after shrinking both rects by the margin."""
        m1, m2 = self._margin, other._margin
        left = max(self.x + m1, other.x + m2)
        right = min(self.x + self.width - m1, other.x + other.width - m2)
        bottom = max(self.y + m1, other.y + m2)
        top = min(self.y + self.height - m1, other.y + other.height - m2)
        return left < right and bottom < top

    # --- animation ---

    def current_frame(self, elapsed_time: float) -> Any:
        idx = math.floor(elapsed_time / self.frame_duration) % len(self.frames)
        return self.frames[idx]

    def frame_cycle(self) -> Iterator[Any]:
        return itertools.cycle(self.frames)

    def set_frames(self, frames: Sequence[Any], frame_duration: Optional[float] = None):
        """Swap the frame sequence; geometry is left untouched."""
        self.frames = tuple(frames)
        if frame_duration is not None:
            self.frame_duration = frame_duration

    # --- setters ---

    def set_velocity_component(self, axis: str, value: float):
        if axis == "x":
            self.dx = value
        elif axis == "y":
            self.dy = value
        else:
            raise ValueError(f"axis must be 'x' or 'y', got {axis!r}")

    def set_position(self, x: float, y: float):
        self.x = x
        self.y = y

    def set_movement_bounds(self, rect: Optional[Bounds]):
        # copy so a caller mutating its own value never moves our bounds
        self.bounds = None if rect is None else Bounds(rect.x, rect.y, rect.width, rect.height)

    # --- presentation seam ---

    @property
    def top(self) -> float:
        return self.y + self.height

    def screen_rect(self, screen_height: int) -> pygame.Rect:
        """Rect in pygame's y-down screen coordinates."""
        return pygame.Rect(int(self.x), int(screen_height - self.y - self.height),
                           int(self.width), int(self.height))
