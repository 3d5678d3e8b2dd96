from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Tuple

from ..sim.core.clock import RoundClock
from ..sim.core.entities import Tier, Worm
from ..sim.types.outcome import RoundOutcome

logger = logging.getLogger(__name__)


class RoundRunner:
    """Feeds wall-clock time from the running event loop into a :class:`RoundClock`.

    Timer callbacks and input commands all go through one lock, so input can
    arrive from other tasks without interleaving with a frame.
    """

    def __init__(self, clock: RoundClock, speed_multiplier: float = 1.0, max_sleep: float = 0.05):
        self.clock = clock
        self.speed_multiplier = max(0.1, speed_multiplier)
        self.max_sleep = max_sleep
        self._lock = asyncio.Lock()
        self._origin_real = 0.0
        self._origin_virtual = 0.0

    def _virtual_now(self, loop: asyncio.AbstractEventLoop) -> float:
        return self._origin_virtual + (loop.time() - self._origin_real) * 1000.0 * self.speed_multiplier

    async def run(self, tier: Tier | str | None = None) -> RoundOutcome:
        loop = asyncio.get_running_loop()
        async with self._lock:
            self.clock.start_round(tier)
            self._origin_real = loop.time()
            self._origin_virtual = self.clock.timers.now
        while True:
            async with self._lock:
                if not self.clock.running:
                    break
                now = self._virtual_now(loop)
                self.clock.timers.advance_to(now)
                next_due = self.clock.timers.next_due()
            if next_due is None:
                wait = self.max_sleep
            else:
                wait = (next_due - now) / 1000.0 / self.speed_multiplier
            await asyncio.sleep(min(self.max_sleep, max(0.0, wait)))
        outcome = self.clock.outcome
        logger.info("Runner finished round at %s with score %d", outcome.tier.value, outcome.final_score)
        return outcome

    async def play(self, tier: Tier | str | None = None, max_rounds: Optional[int] = None) -> List[RoundOutcome]:
        outcomes: List[RoundOutcome] = []
        next_tier: Tier | str | None = tier
        while max_rounds is None or len(outcomes) < max_rounds:
            outcome = await self.run(next_tier)
            outcomes.append(outcome)
            if not outcome.replay:
                break
            next_tier = outcome.next_tier
        return outcomes

    async def click(self, x: float, y: float, display_size: Optional[Tuple[float, float]] = None) -> List[Worm]:
        async with self._lock:
            return self.clock.click(x, y, display_size)

    async def toggle_pause(self) -> bool:
        async with self._lock:
            return self.clock.toggle_pause()

    async def stop(self) -> Optional[RoundOutcome]:
        async with self._lock:
            if not self.clock.running:
                return self.clock.outcome
            return self.clock.end_round()
