# src/game/game.py
import sys, argparse, logging, random
import pygame
from pygame import K_SPACE, K_ESCAPE, K_UP, K_1, K_2, K_3
from .config import (
    WIDTH, HEIGHT, FPS, MAX_DT,
    COLOR_BG, COLOR_FG, COLOR_ACCENT, COLOR_DANGER, COLOR_OVER_BG, COLOR_PLANETS,
    PLAYER_W, PLAYER_H, OBSTACLE_W, OBSTACLE_H,
    HIGHSCORE_FILE, SCORING_DEFAULT, SEED_DEFAULT,
)
from .difficulty import Difficulty
from .screens import AlienGame, Screen
from .session import JsonHighScoreStore, SessionState, SCORING_STRATEGIES

TIER_KEYS = {K_1: Difficulty.EASY, K_2: Difficulty.MEDIUM, K_3: Difficulty.HARD}


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Alien Dodge")
    p.add_argument("--difficulty", type=str, default="easy",
                   help="easy | medium | hard (tier preselected on the menu)")
    p.add_argument("--seed", type=int, default=None,
                   help="Spawn seed. Omit for SEED_DEFAULT, use -1 for random each launch.")
    p.add_argument("--scores-file", type=str, default=HIGHSCORE_FILE,
                   help="JSON file holding per-tier high scores")
    p.add_argument("--scoring", choices=sorted(SCORING_STRATEGIES), default=SCORING_DEFAULT,
                   help="flat: +1 per passed obstacle, speed: scaled by obstacle speed")
    p.add_argument("--log-level", type=str, default="WARNING")
    args = p.parse_args(argv)
    try:
        args.difficulty = Difficulty.parse(args.difficulty)
    except ValueError as e:
        p.error(str(e))
    return args


def _alien_frames():
    """Two-frame blink for the player."""
    frames = []
    for eye in (COLOR_FG, COLOR_ACCENT):
        s = pygame.Surface((PLAYER_W, PLAYER_H), pygame.SRCALPHA)
        pygame.draw.ellipse(s, (110, 220, 120), s.get_rect())
        pygame.draw.circle(s, eye, (PLAYER_W // 2 - 8, PLAYER_H // 2), 4)
        pygame.draw.circle(s, eye, (PLAYER_W // 2 + 8, PLAYER_H // 2), 4)
        frames.append(s)
    return tuple(frames)


def _planet_frames():
    """One slowly pulsing planet per obstacle kind."""
    out = {}
    for kind, color in COLOR_PLANETS.items():
        frames = []
        for shade in (0, 25):
            c = tuple(min(255, ch + shade) for ch in color)
            s = pygame.Surface((OBSTACLE_W, OBSTACLE_H), pygame.SRCALPHA)
            pygame.draw.circle(s, c, (OBSTACLE_W // 2, OBSTACLE_H // 2), OBSTACLE_W // 2)
            frames.append(s)
        out[kind] = tuple(frames)
    return out


def _center_text(screen, font, text, y, color):
    surf = font.render(text, True, color)
    screen.blit(surf, (WIDTH // 2 - surf.get_width() // 2, y))


def draw(screen, app: AlienGame, fonts):
    big, small = fonts
    if app.screen is Screen.MENU:
        screen.fill(COLOR_BG)
        _center_text(screen, big, "Alien Game", 100, COLOR_FG)
        _center_text(screen, small, f"1 Easy    2 Medium    3 Hard   (SPACE: {app.difficulty.name.title()})",
                     HEIGHT // 2, COLOR_FG)
        _center_text(screen, small, f"High score: {app.session.get_high_score()}",
                     HEIGHT // 2 + 40, COLOR_ACCENT)
        return

    rnd = app.round
    if app.screen is Screen.GAME_OVER:
        screen.fill(COLOR_OVER_BG)
        _center_text(screen, big, "Game Over!", HEIGHT // 2 - 60, COLOR_DANGER)
        _center_text(screen, small, f"You scored: {app.session.get_score()}", HEIGHT // 2, COLOR_DANGER)
        _center_text(screen, small, f"High score ({app.difficulty.name.title()}): "
                                    f"{app.session.get_high_score()}", HEIGHT // 2 + 30, COLOR_DANGER)
        _center_text(screen, small, "Change difficulty? 1 Easy  2 Medium  3 Hard  |  any key: again",
                     HEIGHT // 2 + 80, COLOR_DANGER)
        return

    screen.fill(COLOR_BG)
    for ent in rnd.entities():
        frame = ent.current_frame(rnd.elapsed)
        rect = ent.screen_rect(screen.get_height())
        if frame is None:
            pygame.draw.rect(screen, COLOR_ACCENT, rect)
        else:
            screen.blit(frame, rect)

    hud = f"Score: {app.session.get_score()}   High: {app.session.get_high_score()}   {rnd.tier.name.title()}"
    screen.blit(small.render(hud, True, COLOR_FG), (12, 10))
    if not rnd.first_impulse:
        _center_text(screen, small, "SPACE / click to fly", HEIGHT - 60, (160, 180, 210))


def run(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    # Resolve seed: None -> SEED_DEFAULT; -1 -> random
    if args.seed is None:
        rng = random.Random(SEED_DEFAULT)
    elif args.seed == -1:
        rng = random.Random()
    else:
        rng = random.Random(args.seed)

    pygame.init()
    pygame.display.set_caption("Alien Game")
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    clock = pygame.time.Clock()
    fonts = (pygame.font.SysFont("jetbrainsmono", 48), pygame.font.SysFont("jetbrainsmono", 22))

    session = SessionState(JsonHighScoreStore(args.scores_file), args.difficulty, args.scoring)
    app = AlienGame(
        session,
        screen_size=pygame.display.get_window_size,
        rng=rng,
        round_kwargs={"player_frames": _alien_frames(), "obstacle_frames": _planet_frames()},
    )

    while True:
        dt = clock.tick(FPS) / 1000.0
        if dt > MAX_DT:  # clamp stalls
            dt = MAX_DT

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                pygame.quit(); sys.exit()
            if event.type == pygame.KEYDOWN:
                if event.key == K_ESCAPE:
                    pygame.quit(); sys.exit()
                if event.key in TIER_KEYS and app.screen is not Screen.PLAYING:
                    app.choose_difficulty(TIER_KEYS[event.key])
                elif app.screen is Screen.MENU and event.key == K_SPACE:
                    app.start_round()
                elif app.screen is Screen.PLAYING and event.key in (K_SPACE, K_UP):
                    app.impulse()
                elif app.screen is Screen.GAME_OVER:
                    app.key_typed()
            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                app.impulse()

        app.frame(dt)
        draw(screen, app, fonts)
        pygame.display.flip()


if __name__ == "__main__":
    run()
