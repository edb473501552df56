# src/game/session.py
from __future__ import annotations
import json
import logging
import math
import os
import tempfile
from pathlib import Path
from typing import Callable, Dict, Optional, Protocol

from .config import MAX_SCORE, SCORING_DEFAULT
from .difficulty import Difficulty

logger = logging.getLogger(__name__)

ScoringStrategy = Callable[[int, float], int]


def flat_credit(count: int, speed: float) -> int:
    """+1 per passed obstacle."""
    return count


def speed_scaled_credit(count: int, speed: float) -> int:
    """floor(count * current obstacle speed)."""
    return int(math.floor(count * speed))


SCORING_STRATEGIES: Dict[str, ScoringStrategy] = {
    "flat": flat_credit,
    "speed": speed_scaled_credit,
}


class HighScoreStore(Protocol):
    def load_high_score(self, tier: Difficulty) -> int: ...
    def store_high_score(self, tier: Difficulty, value: int) -> None: ...


class MemoryHighScoreStore:
    """In-process store (tests, headless rollouts)."""

    def __init__(self, initial: Optional[Dict[Difficulty, int]] = None):
        self.scores: Dict[Difficulty, int] = dict(initial or {})
        self.writes = 0

    def load_high_score(self, tier: Difficulty) -> int:
        return self.scores.get(tier, 0)

    def store_high_score(self, tier: Difficulty, value: int) -> None:
        self.scores[tier] = value
        self.writes += 1


class JsonHighScoreStore:
    """
    One JSON object keyed by tier name, e.g. {"EASY": 12, "HARD": 3}.
    A missing or unreadable file reads as 0 for every tier.
    """

    def __init__(self, path: os.PathLike | str):
        self.path = Path(path).expanduser()

    def _read_all(self) -> Dict[str, int]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Could not read high scores from %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed high score file %s", self.path)
            return {}
        # json accepts Infinity and 1e999, both of which int() rejects
        return {k: int(v) for k, v in data.items()
                if isinstance(v, (int, float)) and math.isfinite(v) and v >= 0}

    def load_high_score(self, tier: Difficulty) -> int:
        return self._read_all().get(tier.name, 0)

    def store_high_score(self, tier: Difficulty, value: int) -> None:
        scores = self._read_all()
        scores[tier.name] = int(value)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # write-then-rename so a crash never leaves a half-written file
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".highscores-", suffix=".json")
        except OSError as e:
            logger.warning("Could not store high score %d for %s: %s", value, tier.name, e)
            return
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(scores, f, indent=2, sort_keys=True)
            os.replace(tmp, self.path)
        except OSError as e:
            Path(tmp).unlink(missing_ok=True)
            logger.warning("Could not store high score %d for %s: %s", value, tier.name, e)


class SessionState:
    """
    Current score for the running round + the persisted high score of the selected tier.
    High scores are keyed per difficulty tier.
    """

    def __init__(self,
                 store: HighScoreStore,
                 tier: Difficulty = Difficulty.EASY,
                 scoring: ScoringStrategy | str = SCORING_DEFAULT):
        self.store = store
        self.scoring: ScoringStrategy = (SCORING_STRATEGIES[scoring]
                                         if isinstance(scoring, str) else scoring)
        self.tier = tier
        self.current_score = 0
        self.high_score = store.load_high_score(tier)

    def select_tier(self, tier: Difficulty):
        self.tier = tier
        self.high_score = self.store.load_high_score(tier)

    def add_passed(self, count: int, speed: float = 1.0) -> int:
        """Credit passed obstacles; returns the credit actually added."""
        if count <= 0:
            return 0
        credit = max(0, self.scoring(count, speed))
        if credit > MAX_SCORE - self.current_score:
            # saturate instead of growing past the representable ceiling
            credit = MAX_SCORE - self.current_score
        self.current_score += credit

        if self.current_score > self.high_score:
            self.high_score = self.current_score
            logger.debug("New %s high score: %d", self.tier.name, self.high_score)
            self.store.store_high_score(self.tier, self.high_score)
        return credit

    def get_score(self) -> int:
        return self.current_score

    def get_high_score(self) -> int:
        return self.high_score

    def reset(self):
        self.current_score = 0
