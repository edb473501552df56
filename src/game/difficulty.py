# src/game/difficulty.py
from __future__ import annotations
from enum import Enum


class Difficulty(Enum):
    """Named tiers: (spawn interval s, obstacle speed px/s, max obstacles on screen)."""
    EASY = (2.0, 120.0, 3)
    MEDIUM = (1.4, 180.0, 5)
    HARD = (0.9, 260.0, 7)

    @property
    def spawn_interval_seconds(self) -> float:
        return self.value[0]

    @property
    def obstacle_speed(self) -> float:
        return self.value[1]

    @property
    def max_on_screen(self) -> int:
        return self.value[2]

    @classmethod
    def parse(cls, name: str) -> "Difficulty":
        try:
            return cls[name.strip().upper()]
        except KeyError:
            choices = ", ".join(t.name.lower() for t in cls)
            raise ValueError(f"unknown difficulty {name!r} (choose from {choices})") from None
