# src/tests/round_tests.py
"""
Round state machine: gravity gating, spawning cadence, departures, game-over rules.

Usage (from repo root):
  python -m src.tests.round_tests
"""

from __future__ import annotations
import random
from typing import List, Optional

from src.game.config import BOUNCE_VELOCITY, GRAVITY, OBSTACLE_W, PLAYER_H
from src.game.difficulty import Difficulty
from src.game.round import Round, RoundConfig, RoundState
from src.game.session import MemoryHighScoreStore, SessionState
from src.game.spawner import ObstaclePlacer

W, H = 960, 540


def make_round(tier: Difficulty = Difficulty.EASY,
               scoring: str = "flat",
               seed: int = 1,
               config: Optional[RoundConfig] = None,
               placer: Optional[ObstaclePlacer] = None) -> Round:
    session = SessionState(MemoryHighScoreStore(), tier, scoring)
    return Round(tier, session, lambda: (W, H), rng=random.Random(seed),
                 config=config, placer=placer)


def test_ready_then_running_on_first_frame() -> None:
    rnd = make_round()
    assert rnd.state is RoundState.READY
    assert rnd.player.y == H / 2 - PLAYER_H / 2
    rnd.update(1 / 60)
    assert rnd.state is RoundState.RUNNING


def test_gravity_suppressed_before_first_impulse() -> None:
    rnd = make_round()
    y0 = rnd.player.y
    for dt in (0.0, 0.01, 0.05, 0.2, 0.5, 1.0):
        rnd.update(dt)
        assert rnd.player.dy == 0.0
        assert rnd.player.y == y0
    assert not rnd.over


def test_impulse_overwrites_velocity_then_gravity_applies() -> None:
    rnd = make_round()
    rnd.player.dy = 50.0
    rnd.impulse()
    assert rnd.player.dy == BOUNCE_VELOCITY
    rnd.update(0.1)
    assert abs(rnd.player.dy - (BOUNCE_VELOCITY + GRAVITY * 0.1)) < 1e-9
    rnd.impulse()
    assert rnd.player.dy == BOUNCE_VELOCITY, "impulse sets, never adds"


def test_single_impulse_ends_on_floor() -> None:
    rnd = make_round()
    rnd.impulse()
    for _ in range(600):
        if rnd.update(1 / 60).ended:
            break
    assert rnd.over and rnd.death_cause == "floor"


def test_spawn_count_follows_intervals_until_capacity() -> None:
    # Easy: spawn every 2.0 s, at most 3 on screen
    rnd = make_round(Difficulty.EASY)
    counts = []
    for frame in range(1, 61):
        rnd.update(0.1)
        if frame % 20 == 0:
            counts.append(len(rnd.obstacles))
    assert counts == [1, 2, 3], counts
    assert not rnd.over

    for _ in range(20):
        rnd.update(0.1)
    assert len(rnd.obstacles) == 3, "capacity reached, further spawns skipped"


def test_capacity_below_interval_count() -> None:
    cfg = RoundConfig.from_tier(Difficulty.EASY, max_on_screen=2)
    rnd = make_round(config=cfg)
    for _ in range(60):
        rnd.update(0.1)
    assert len(rnd.obstacles) == 2


def test_new_obstacles_move_left_at_tier_speed() -> None:
    rnd = make_round(Difficulty.MEDIUM)
    for _ in range(14):
        rnd.update(0.1)
    assert len(rnd.obstacles) == 1
    ob = rnd.obstacles[0]
    assert ob.dx == -Difficulty.MEDIUM.obstacle_speed and ob.dy == 0.0
    assert ob.x >= W - Difficulty.MEDIUM.obstacle_speed * 0.1


def test_failed_placement_is_skipped_and_timer_resets() -> None:
    rnd = make_round(placer=ObstaclePlacer(min_separation=1e6))
    rnd.spawn_obstacle_at(500.0, 200.0)
    for _ in range(20):
        rnd.update(0.1)
    assert len(rnd.obstacles) == 1
    assert rnd.spawn_timer == 0.0
    assert not rnd.over


def test_departed_obstacle_is_removed_and_credited() -> None:
    rnd = make_round()
    rnd.spawn_obstacle_at(-OBSTACLE_W - 1, 400.0)
    res = rnd.update(1 / 60)
    assert rnd.obstacles == []
    assert res.passed == 1 and res.credit == 1
    assert rnd.session.get_score() == 1


def test_departed_obstacle_with_speed_scoring() -> None:
    rnd = make_round(Difficulty.EASY, scoring="speed")
    rnd.spawn_obstacle_at(-OBSTACLE_W - 1, 400.0)
    rnd.spawn_obstacle_at(-OBSTACLE_W - 5, 100.0)
    rnd.update(1 / 60)
    assert rnd.session.get_score() == 2 * int(Difficulty.EASY.obstacle_speed)


def test_player_at_floor_ends_round_whatever_the_velocity() -> None:
    for dy in (-500.0, 0.0, 500.0):
        rnd = make_round()
        rnd.player.set_position(rnd.player.x, 0.0)
        rnd.player.dy = dy
        res = rnd.update(1 / 60)
        assert res.ended and rnd.state is RoundState.OVER
        assert rnd.death_cause == "floor"


def test_ceiling_ends_round() -> None:
    rnd = make_round()
    rnd.impulse()
    rnd.player.set_position(rnd.player.x, H - PLAYER_H - 1)
    res = rnd.update(0.1)
    assert res.ended and res.death_cause == "ceiling"


def test_collision_ends_round() -> None:
    rnd = make_round()
    rnd.spawn_obstacle_at(rnd.player.x + 10, rnd.player.y - 10)
    res = rnd.update(1 / 60)
    assert res.ended and res.death_cause == "collision"


def test_near_miss_inside_margin_is_not_a_collision() -> None:
    rnd = make_round()
    p = rnd.player
    # obstacle's bottom edge 4 px into the player's top edge
    rnd.spawn_obstacle_at(p.x, p.top - 4)
    rnd.obstacles[0].dx = 0.0
    res = rnd.update(0.0)
    assert not res.ended


def test_round_over_is_signalled_exactly_once() -> None:
    rnd = make_round()
    events: List[str] = []
    rnd.subscribe(events.append)
    rnd.impulse()
    ended = []
    for _ in range(600):
        ended.append(rnd.update(1 / 60).ended)
    assert ended.count(True) == 1
    assert events.count("round_over") == 1
    assert events[0] == "jump"

    y = rnd.player.y
    rnd.impulse()
    rnd.update(0.1)
    assert rnd.player.y == y, "updates after Over are no-ops"
    assert events.count("jump") == 1


def test_score_never_decreases_during_play() -> None:
    rng = random.Random(99)
    rnd = make_round(Difficulty.HARD, seed=5)
    last = rnd.session.get_score()
    for _ in range(3000):
        if rng.random() < 0.06:
            rnd.impulse()
        rnd.update(1 / 60)
        score = rnd.session.get_score()
        assert score >= last
        last = score
        if rnd.over:
            break


def test_reset_starts_a_fresh_round() -> None:
    rnd = make_round()
    rnd.spawn_obstacle_at(-OBSTACLE_W - 1, 400.0)
    rnd.update(0.1)
    rnd.player.set_position(rnd.player.x, 0.0)
    rnd.update(0.1)
    assert rnd.over
    high = rnd.session.get_high_score()

    rnd.reset()
    assert rnd.state is RoundState.READY
    assert rnd.obstacles == [] and rnd.spawn_timer == 0.0 and not rnd.first_impulse
    assert rnd.session.get_score() == 0
    assert rnd.session.get_high_score() == high == 1


def test_screen_resize_moves_player_bounds() -> None:
    size = [W, H]
    session = SessionState(MemoryHighScoreStore())
    rnd = Round(Difficulty.EASY, session, lambda: tuple(size), rng=random.Random(0))
    rnd.player.dx = 10_000.0
    rnd.update(0.1)
    assert rnd.player.x + rnd.player.width == W / 2
    size[0] = 1200
    rnd.update(0.1)
    assert rnd.player.x + rnd.player.width == 600


def test_speed_ramp_speeds_up_new_obstacles() -> None:
    cfg = RoundConfig.from_tier(Difficulty.EASY, speed_ramp_per_s=10.0)
    rnd = make_round(config=cfg)
    for _ in range(20):
        rnd.update(0.1)
    assert len(rnd.obstacles) == 1
    assert abs(rnd.obstacles[0].dx + (Difficulty.EASY.obstacle_speed + 20.0)) < 1e-6


def main():
    for name, fn in sorted(globals().items()):
        if name.startswith("test_") and callable(fn):
            fn()
            print(f"✓ {name}")
    print("🎉 Round checks passed")


if __name__ == "__main__":
    main()
