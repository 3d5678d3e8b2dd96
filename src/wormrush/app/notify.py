from __future__ import annotations

import logging
from typing import List

from ..sim.types.outcome import RoundOutcome

logger = logging.getLogger(__name__)


class LoggingNotifier:
    def __init__(self, replay: bool = False):
        self.replay = replay
        self.announced: List[RoundOutcome] = []

    def announce(self, outcome: RoundOutcome) -> bool:
        self.announced.append(outcome)
        if outcome.new_high_score:
            logger.info("New high score for %s! Congratulations!", outcome.tier.value)
        logger.info("%s", outcome.message.replace("\n", " - "))
        return self.replay
