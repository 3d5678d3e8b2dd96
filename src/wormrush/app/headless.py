from __future__ import annotations

import argparse
import csv
import json
import logging
import math
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from pygame.math import Vector2

from ..rng import GameRng
from ..sim.core.clock import RoundClock
from ..sim.core.config import GameConfig
from ..sim.core.entities import Tier
from ..sim.types.metrics import FrameMetrics
from ..sim.types.outcome import RoundOutcome
from .notify import LoggingNotifier
from .render import NullRenderer
from .store import InMemoryHighScoreStore, JsonHighScoreStore

logger = logging.getLogger(__name__)

_HEADER = [
    "round",
    "tier",
    "frame",
    "time_ms",
    "elapsed_ms",
    "worms",
    "fading",
    "foods",
    "score",
    "time_remaining",
    "spawned",
    "killed",
    "eaten",
    "removed",
]


class ClickBot:
    """Scripted player: clicks near a random live worm at a fixed cadence."""

    def __init__(self, rng: GameRng, interval_ms: float = 400.0, jitter: float = 20.0, accuracy: float = 0.8):
        self._rng = rng
        self.interval_ms = interval_ms
        self.jitter = jitter
        self.accuracy = accuracy
        self._next_click_ms = interval_ms
        self.clicks = 0
        self.hits = 0

    def reset(self, now_ms: float) -> None:
        self._next_click_ms = now_ms + self.interval_ms

    def maybe_click(self, clock: RoundClock, now_ms: float) -> None:
        if self.interval_ms <= 0 or now_ms < self._next_click_ms:
            return
        self._next_click_ms = now_ms + self.interval_ms
        config = clock.config
        live = [worm for worm in clock.state.worms if not worm.fading]
        if live and self._rng.next_float() < self.accuracy:
            target = self._rng.sample_choice(live).position
            point = target + Vector2(
                self._rng.next_range(-self.jitter, self.jitter), self._rng.next_range(-self.jitter, self.jitter)
            )
        else:
            point = Vector2(
                self._rng.next_range(0.0, config.canvas_width), self._rng.next_range(0.0, config.canvas_height)
            )
        self.clicks += 1
        self.hits += len(clock.click(point.x, point.y))


def _format_row(round_index: int, tier: Tier, metrics: FrameMetrics) -> list[object]:
    return [
        round_index,
        tier.value,
        metrics.frame,
        f"{metrics.time_ms:.3f}",
        f"{metrics.elapsed_ms:.3f}",
        metrics.worms,
        metrics.fading,
        metrics.foods,
        metrics.score,
        metrics.time_remaining,
        metrics.spawned,
        metrics.killed,
        metrics.eaten,
        metrics.removed,
    ]


def _percentile(sorted_values: list[float], percentile: float) -> float:
    if not sorted_values:
        return 0.0
    if len(sorted_values) == 1:
        return float(sorted_values[0])
    pos = (len(sorted_values) - 1) * percentile
    low = int(math.floor(pos))
    high = int(math.ceil(pos))
    if low == high:
        return float(sorted_values[low])
    weight = pos - low
    return float(sorted_values[low] + (sorted_values[high] - sorted_values[low]) * weight)


def _summary_stats(values: list[float]) -> dict[str, float]:
    if not values:
        return {"min": 0.0, "max": 0.0, "avg": 0.0, "p50": 0.0, "p90": 0.0}
    sorted_values = sorted(values)
    return {
        "min": float(sorted_values[0]),
        "max": float(sorted_values[-1]),
        "avg": float(sum(values) / len(values)),
        "p50": _percentile(sorted_values, 0.50),
        "p90": _percentile(sorted_values, 0.90),
    }


def run_headless(
    rounds: int = 1,
    seed: Optional[int] = None,
    log_path: Optional[Path] = None,
    tier: str | None = None,
    config: Optional[GameConfig] = None,
    summary_path: Optional[Path] = None,
    scores_path: Optional[Path] = None,
    click_interval_ms: float = 400.0,
    click_accuracy: float = 0.8,
) -> List[RoundOutcome]:
    config = config if config is not None else GameConfig()
    if seed is not None:
        config = replace(config, seed=seed)
    current_tier = Tier.parse(tier if tier is not None else config.default_tier)
    rng = GameRng(config.seed)
    bot = ClickBot(GameRng(None if config.seed is None else config.seed + 1), click_interval_ms, accuracy=click_accuracy)
    store = JsonHighScoreStore(scores_path) if scores_path else InMemoryHighScoreStore()
    clock = RoundClock(config, NullRenderer(), store, LoggingNotifier(replay=True), rng=rng)

    writer = None
    csv_file = None
    if log_path:
        csv_file = Path(log_path).open("w", newline="")
        writer = csv.writer(csv_file)
        writer.writerow(_HEADER)

    outcomes: List[RoundOutcome] = []
    frames_per_round: List[float] = []
    try:
        for round_index in range(rounds):
            clock.start_round(current_tier)
            bot.reset(clock.timers.now)
            last_frame = 0
            while clock.running:
                clock.advance(config.frame_interval_ms)
                metrics = clock.metrics
                if metrics is not None and metrics.frame != last_frame:
                    last_frame = metrics.frame
                    if writer:
                        writer.writerow(_format_row(round_index, current_tier, metrics))
                if clock.running:
                    bot.maybe_click(clock, clock.timers.now)
            outcome = clock.outcome
            outcomes.append(outcome)
            frames_per_round.append(float(last_frame))
            current_tier = outcome.next_tier or current_tier
    finally:
        if csv_file:
            csv_file.close()

    if summary_path:
        scores = [float(outcome.final_score) for outcome in outcomes]
        summary = {
            "rounds": rounds,
            "seed": config.seed,
            "wins": sum(1 for outcome in outcomes if outcome.won),
            "losses": sum(1 for outcome in outcomes if not outcome.won),
            "score": _summary_stats(scores),
            "frames": _summary_stats(frames_per_round),
            "clicks": bot.clicks,
            "hits": bot.hits,
            "high_scores": clock.high_scores,
            "outcomes": [
                {
                    "tier": outcome.tier.value,
                    "won": outcome.won,
                    "final_score": outcome.final_score,
                    "foods_left": outcome.foods_left,
                    "time_remaining": outcome.time_remaining,
                    "new_high_score": outcome.new_high_score,
                }
                for outcome in outcomes
            ],
        }
        Path(summary_path).write_text(json.dumps(summary, indent=2))
    return outcomes


def main() -> None:
    parser = argparse.ArgumentParser(description="Headless worm rush rounds driven by a click bot")
    parser.add_argument("--rounds", type=int, default=1)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--tier", choices=[tier.value for tier in Tier], default=None)
    parser.add_argument("--config", type=Path, default=None, help="YAML file with game settings")
    parser.add_argument("--log", type=Path, default=None, help="CSV file to write per-frame metrics")
    parser.add_argument("--summary", type=Path, default=None, help="Optional JSON file to write round summaries.")
    parser.add_argument("--scores", type=Path, default=None, help="JSON high-score file (in-memory when omitted).")
    parser.add_argument("--click-interval", type=float, default=400.0, help="Bot click cadence in ms (0 disables).")
    parser.add_argument("--click-accuracy", type=float, default=0.8)
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    config = GameConfig.from_yaml(args.config) if args.config else None
    run_headless(
        args.rounds,
        args.seed,
        args.log,
        tier=args.tier,
        config=config,
        summary_path=args.summary,
        scores_path=args.scores,
        click_interval_ms=args.click_interval,
        click_accuracy=args.click_accuracy,
    )


if __name__ == "__main__":
    main()
