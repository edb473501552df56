# src/tests/game_tests.py
"""
Drawing checks against an off-screen surface (no window needed).

Usage (from repo root):
  python -m src.tests.game_tests
"""

from __future__ import annotations
import random

import pygame

from src.game.config import COLOR_ACCENT, PLAYER_H, PLAYER_X
from src.game.game import draw
from src.game.screens import AlienGame
from src.game.session import MemoryHighScoreStore, SessionState


class FlatFont:
    def render(self, text, antialias, color):
        return pygame.Surface((8, 8))


def test_entities_drawn_against_live_surface_height() -> None:
    w, h = 960, 700
    surface = pygame.Surface((w, h))
    app = AlienGame(SessionState(MemoryHighScoreStore()), lambda: (w, h), rng=random.Random(0))
    rnd = app.start_round()
    assert rnd.player.y == h / 2 - PLAYER_H / 2

    draw(surface, app, (FlatFont(), FlatFont()))
    top = int(h - rnd.player.y - PLAYER_H)
    inside = (PLAYER_X + 10, top + PLAYER_H // 2)
    assert tuple(surface.get_at(inside))[:3] == COLOR_ACCENT
    # where the player would land if the default window height were used
    stale = (PLAYER_X + 10, int(540 - rnd.player.y - PLAYER_H) + PLAYER_H // 2)
    assert tuple(surface.get_at(stale))[:3] != COLOR_ACCENT


def main():
    for name, fn in sorted(globals().items()):
        if name.startswith("test_") and callable(fn):
            fn()
            print(f"✓ {name}")
    print("🎉 Drawing checks passed")


if __name__ == "__main__":
    main()
