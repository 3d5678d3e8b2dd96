from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from pygame.math import Vector2

from ...rng import GameRng
from ..systems import scoring, spawner, steering
from ..systems.layout import generate_layout
from ..types.metrics import FrameMetrics
from ..types.outcome import RoundOutcome
from ..types.ports import HighScoreStore, Notifier, Renderer
from .config import GameConfig
from .entities import Tier, Worm
from .state import RoundState
from .timers import TimerHandle, TimerQueue

logger = logging.getLogger(__name__)


class RoundClock:
    """Owns the round state and the three periodic tasks that drive it.

    The frame task updates and draws every worm, the countdown task takes one
    second off the timer, and the spawn task injects worms at random
    intervals. All three run on one :class:`TimerQueue`, and only the clock
    starts or ends a round.
    """

    def __init__(
        self,
        config: GameConfig,
        renderer: Renderer,
        store: HighScoreStore,
        notifier: Notifier,
        rng: Optional[GameRng] = None,
        timers: Optional[TimerQueue] = None,
    ):
        self._config = config
        self._renderer = renderer
        self._store = store
        self._notifier = notifier
        self._rng = rng if rng is not None else GameRng(config.seed)
        self._timers = timers if timers is not None else TimerQueue()
        self._state = RoundState(time_remaining=config.round_duration)
        self._high_scores: Dict[str, int] = {}
        self._frame_handle: Optional[TimerHandle] = None
        self._countdown_handle: Optional[TimerHandle] = None
        self._spawn_handle: Optional[TimerHandle] = None
        self._spawn_remaining: Optional[float] = None
        self._countdown_remaining: Optional[float] = None
        self._last_frame_ms = 0.0
        self._metrics: FrameMetrics | None = None
        self._outcome: RoundOutcome | None = None

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def state(self) -> RoundState:
        return self._state

    @property
    def timers(self) -> TimerQueue:
        return self._timers

    @property
    def metrics(self) -> FrameMetrics | None:
        return self._metrics

    @property
    def outcome(self) -> RoundOutcome | None:
        return self._outcome

    @property
    def high_scores(self) -> Dict[str, int]:
        return dict(self._high_scores)

    @property
    def running(self) -> bool:
        return self._state.running and not self._state.ended

    def start_round(self, tier: Tier | str | None = None) -> RoundState:
        tier = Tier.parse(tier if tier is not None else self._config.default_tier)
        state = RoundState(tier=tier, time_remaining=self._config.round_duration)
        high_scores = dict(self._store.load_high_scores())
        generate_layout(state, self._config, self._rng)

        self._cancel_tasks()
        self._high_scores = high_scores
        state.running = True
        self._state = state
        self._metrics = None
        self._outcome = None
        self._spawn_remaining = None
        self._countdown_remaining = None
        self._last_frame_ms = self._timers.now
        self._frame_handle = self._timers.call_every(self._config.frame_interval_ms, self.frame, "frame")
        self._arm_countdown()
        self._arm_spawn(self._config.spawn.warmup_ms)
        logger.info(
            "Round started at %s: %d foods, %d obstacles, %ds on the clock (high score %d)",
            tier.value,
            len(state.foods),
            len(state.obstacles),
            state.time_remaining,
            self._high_scores.get(tier.value, 0),
        )
        return state

    def advance(self, elapsed_ms: float) -> int:
        return self._timers.advance_by(elapsed_ms)

    def frame(self, now_ms: float) -> None:
        state = self._state
        if not self.running:
            return
        elapsed = max(0.0, now_ms - self._last_frame_ms)
        self._last_frame_ms = now_ms
        if state.paused:
            return
        state.frame += 1

        renderer = self._renderer
        renderer.clear()
        for obstacle in state.obstacles:
            renderer.draw_obstacle(obstacle.position, obstacle.size)
        for food in state.foods.values():
            renderer.draw_food(food.position, food.kind)

        survivors: List[Worm] = []
        removed = 0
        for worm in state.worms:
            if steering.update_worm(state, worm, elapsed, now_ms, self._config):
                renderer.draw_agent(worm.position, worm.opacity, worm.category, steering.facing(state, worm))
                survivors.append(worm)
            else:
                removed += 1
        state.worms = survivors

        self._metrics = FrameMetrics(
            frame=state.frame,
            time_ms=now_ms,
            elapsed_ms=elapsed,
            worms=len(state.worms),
            fading=sum(1 for worm in state.worms if worm.fading),
            foods=len(state.foods),
            score=state.score,
            time_remaining=state.time_remaining,
            spawned=state.spawned,
            killed=state.killed,
            eaten=state.eaten,
            removed=removed,
        )
        if scoring.is_finished(state):
            self.end_round()

    def second_tick(self, now_ms: float) -> None:
        state = self._state
        if not self.running or state.paused:
            return
        if state.time_remaining > 0:
            state.time_remaining -= 1
        if state.time_remaining <= 0:
            self.end_round()

    def spawn_tick(self, now_ms: float) -> None:
        self._spawn_handle = None
        if not spawner.can_spawn(self._state):
            return
        spawner.spawn_worm(self._state, self._config, self._rng, now_ms)
        self._arm_spawn(spawner.next_spawn_delay(self._rng, self._config))

    def pause(self) -> None:
        state = self._state
        if not self.running or state.paused:
            return
        state.paused = True
        if self._countdown_handle is not None:
            self._countdown_remaining = max(0.0, self._countdown_handle.due - self._timers.now)
            self._countdown_handle.cancel()
            self._countdown_handle = None
        if self._spawn_handle is not None:
            self._spawn_remaining = max(0.0, self._spawn_handle.due - self._timers.now)
            self._spawn_handle.cancel()
            self._spawn_handle = None
        logger.info("Round paused with %ds left, score %d", state.time_remaining, state.score)

    def resume(self) -> None:
        state = self._state
        if not self.running or not state.paused:
            return
        state.paused = False
        self._last_frame_ms = self._timers.now
        if self._countdown_remaining is not None:
            self._countdown_handle = self._timers.call_later(
                self._countdown_remaining, self._resume_countdown, "countdown"
            )
            self._countdown_remaining = None
        if self._spawn_remaining is not None:
            self._arm_spawn(self._spawn_remaining)
            self._spawn_remaining = None
        logger.info("Round resumed")

    def toggle_pause(self) -> bool:
        if self._state.paused:
            self.resume()
        else:
            self.pause()
        return self._state.paused

    def to_simulation(self, x: float, y: float, display_size: Optional[Tuple[float, float]] = None) -> Vector2:
        if not display_size:
            return Vector2(x, y)
        width, height = display_size
        scale_x = self._config.canvas_width / width if width else 1.0
        scale_y = self._config.canvas_height / height if height else 1.0
        return Vector2(x * scale_x, y * scale_y)

    def click(self, x: float, y: float, display_size: Optional[Tuple[float, float]] = None) -> List[Worm]:
        if not self._state.active:
            return []
        point = self.to_simulation(x, y, display_size)
        killed = scoring.kill_at(self._state, point, self._config)
        for worm in killed:
            logger.debug("Killed worm %d (%s) at %s", worm.id, worm.category, point)
        return killed

    def end_round(self) -> RoundOutcome:
        state = self._state
        if state.ended and self._outcome is not None:
            return self._outcome
        self._cancel_tasks()
        state.ended = True
        state.running = False

        tier = state.tier
        previous = self._high_scores.get(tier.value, 0)
        new_high = scoring.update_high_score(self._high_scores, tier, state.score)
        if new_high:
            self._store.save_high_scores(dict(self._high_scores))
        outcome = RoundOutcome(
            won=scoring.is_won(state),
            final_score=state.score,
            tier=tier,
            high_score=self._high_scores.get(tier.value, previous),
            new_high_score=new_high,
            time_remaining=state.time_remaining,
            foods_left=len(state.foods),
        )
        next_tier = tier.next()
        if self._config.auto_advance_tier and outcome.won and next_tier is not None:
            outcome.next_tier = next_tier
            outcome.replay = True
        else:
            outcome.replay = bool(self._notifier.announce(outcome))
            outcome.next_tier = tier if outcome.replay else None
        self._outcome = outcome
        logger.info(
            "Round over at %s: %s with score %d (%d foods left, %ds left)",
            tier.value,
            "won" if outcome.won else "lost",
            outcome.final_score,
            outcome.foods_left,
            outcome.time_remaining,
        )
        return outcome

    def _arm_countdown(self) -> None:
        self._countdown_handle = self._timers.call_every(
            self._config.countdown_interval_ms, self.second_tick, "countdown"
        )

    def _resume_countdown(self, now_ms: float) -> None:
        # Remainder of the second interrupted by pause.
        self._arm_countdown()
        self.second_tick(now_ms)

    def _arm_spawn(self, delay: float) -> None:
        self._spawn_handle = self._timers.call_later(delay, self.spawn_tick, "spawn")

    def _cancel_tasks(self) -> None:
        for handle in (self._frame_handle, self._countdown_handle, self._spawn_handle):
            if handle is not None:
                handle.cancel()
        self._frame_handle = None
        self._countdown_handle = None
        self._spawn_handle = None
