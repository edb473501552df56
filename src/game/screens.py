# src/game/screens.py
from __future__ import annotations
import logging
import random
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from .config import RESTART_DELAY_S
from .difficulty import Difficulty
from .round import Round, RoundConfig, StepResult
from .session import SessionState
from .spawner import RandomSource

logger = logging.getLogger(__name__)


class Screen(Enum):
    MENU = "menu"
    PLAYING = "playing"
    GAME_OVER = "game_over"


class AlienGame:
    """
    Top-level app state: which screen is showing, the chosen tier, the session
    and the current round. Transitions are explicit methods; each one checks it
    is called from a screen that allows it.
    """

    def __init__(self,
                 session: SessionState,
                 screen_size: Callable[[], Tuple[float, float]],
                 rng: Optional[RandomSource] = None,
                 config_overrides: Optional[Dict[str, Any]] = None,
                 round_kwargs: Optional[Dict[str, Any]] = None):
        self.session = session
        self.screen_size = screen_size
        self.rng = rng if rng is not None else random.Random()
        self.config_overrides = config_overrides or {}
        self.round_kwargs = round_kwargs or {}
        self.screen = Screen.MENU
        self.difficulty = session.tier
        self.round: Optional[Round] = None
        self.over_elapsed = 0.0

    # --- transitions ---

    def start_round(self, tier: Optional[Difficulty] = None) -> Round:
        """MENU | GAME_OVER -> PLAYING."""
        if self.screen is Screen.PLAYING:
            raise RuntimeError("a round is already running")
        if tier is not None:
            self.difficulty = tier
        config = RoundConfig.from_tier(self.difficulty, **self.config_overrides)
        self.round = Round(self.difficulty, self.session, self.screen_size,
                           rng=self.rng, config=config, **self.round_kwargs)
        self.screen = Screen.PLAYING
        return self.round

    def back_to_menu(self):
        """GAME_OVER -> MENU."""
        if self.screen is not Screen.GAME_OVER:
            raise RuntimeError(f"cannot return to menu from {self.screen.value}")
        self.screen = Screen.MENU

    def frame(self, dt: float) -> Optional[StepResult]:
        """Advance whichever screen is showing by dt seconds."""
        if self.screen is Screen.GAME_OVER:
            self.over_elapsed += dt
            return None
        if self.screen is not Screen.PLAYING or self.round is None:
            return None
        result = self.round.update(dt)
        if result.ended:
            self.screen = Screen.GAME_OVER
            self.over_elapsed = 0.0
        return result

    # --- input routing ---

    def impulse(self):
        if self.screen is Screen.PLAYING and self.round is not None:
            self.round.impulse()

    def can_restart(self) -> bool:
        # the player may still be hammering keys right after dying
        return self.screen is Screen.GAME_OVER and self.over_elapsed > RESTART_DELAY_S

    def key_typed(self) -> bool:
        """Any key on the game-over screen restarts the same tier once the delay passed."""
        if self.can_restart():
            self.start_round()
            return True
        return False

    def choose_difficulty(self, tier: Difficulty) -> bool:
        """Tier pick from the menu, or from game over once the restart delay passed."""
        if self.screen is Screen.PLAYING:
            return False
        if self.screen is Screen.GAME_OVER and not self.can_restart():
            return False
        logger.info("Difficulty selected: %s", tier.name)
        self.start_round(tier)
        return True
