from __future__ import annotations

import argparse
import logging
from pathlib import Path

import pygame

from ..rng import GameRng
from ..sim.core.clock import RoundClock
from ..sim.core.config import GameConfig
from ..sim.core.entities import Tier
from ..sim.core.timers import TimerQueue
from ..sim.types.outcome import RoundOutcome
from .render import PygameRenderer
from .store import JsonHighScoreStore

logger = logging.getLogger(__name__)

DEFAULT_SCORES_PATH = Path.home() / ".wormrush" / "highscores.json"


class PygameNotifier:
    """Shows the round result in the window and waits for Y (replay) or N."""

    def __init__(self, window: pygame.Surface, font: pygame.font.Font):
        self._window = window
        self._font = font

    def announce(self, outcome: RoundOutcome) -> bool:
        lines = outcome.message.split("\n")
        if outcome.new_high_score:
            lines.insert(0, f"New High Score for {outcome.tier.value}! Congratulations!")
        lines.append("Play again? [Y/N]")
        self._window.fill(pygame.Color("white"))
        y = 40
        for line in lines:
            self._window.blit(self._font.render(line, True, pygame.Color("black")), (40, y))
            y += self._font.get_linesize() + 4
        pygame.display.flip()
        while True:
            event = pygame.event.wait()
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.KEYDOWN:
                if event.key in (pygame.K_y, pygame.K_RETURN):
                    return True
                if event.key in (pygame.K_n, pygame.K_ESCAPE):
                    return False


def _draw_hud(window: pygame.Surface, font: pygame.font.Font, clock: RoundClock) -> None:
    state = clock.state
    high = clock.high_scores.get(state.tier.value, 0)
    text = f"Score: {state.score}   Time: {state.time_remaining}   Level: {state.tier.value}   High Score: {high}"
    if state.paused:
        text += "   [PAUSED]"
    window.blit(font.render(text, True, pygame.Color("black")), (8, 8))


def run(config: GameConfig, tier: Tier, scores_path: Path, scale: float = 1.5) -> None:
    pygame.init()
    pygame.display.set_caption("Worm Rush")
    window_size = (int(config.canvas_width * scale), int(config.canvas_height * scale))
    window = pygame.display.set_mode(window_size, pygame.RESIZABLE)
    canvas = pygame.Surface((int(config.canvas_width), int(config.canvas_height)))
    font = pygame.font.Font(None, 24)
    timers = TimerQueue(now=float(pygame.time.get_ticks()))
    clock = RoundClock(
        config,
        PygameRenderer(canvas, config),
        JsonHighScoreStore(scores_path),
        PygameNotifier(window, font),
        rng=GameRng(config.seed),
        timers=timers,
    )
    fps = pygame.time.Clock()
    clock.start_round(tier)
    try:
        while True:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    if clock.running:
                        clock.end_round()
                    return
                if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    clock.click(event.pos[0], event.pos[1], display_size=window.get_size())
                elif event.type == pygame.KEYDOWN and event.key in (pygame.K_SPACE, pygame.K_p):
                    clock.toggle_pause()
            timers.advance_to(float(pygame.time.get_ticks()))
            if not clock.running:
                outcome = clock.outcome
                if outcome is None or not outcome.replay:
                    return
                clock.start_round(outcome.next_tier)
                continue
            window.blit(pygame.transform.smoothscale(canvas, window.get_size()), (0, 0))
            _draw_hud(window, font, clock)
            pygame.display.flip()
            fps.tick(60)
    finally:
        pygame.quit()


def main() -> None:
    parser = argparse.ArgumentParser(description="Play Worm Rush")
    parser.add_argument("--tier", choices=[tier.value for tier in Tier], default=None)
    parser.add_argument("--config", type=Path, default=None, help="YAML file with game settings")
    parser.add_argument("--scores", type=Path, default=DEFAULT_SCORES_PATH)
    parser.add_argument("--scale", type=float, default=1.5, help="Window size relative to the canvas")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    config = GameConfig.from_yaml(args.config) if args.config else GameConfig()
    if args.seed is not None:
        config.seed = args.seed
    tier = Tier.parse(args.tier or config.default_tier)
    run(config, tier, args.scores, scale=args.scale)


if __name__ == "__main__":
    main()
