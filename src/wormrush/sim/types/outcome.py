from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.entities import Tier


@dataclass(slots=True)
class RoundOutcome:
    won: bool
    final_score: int
    tier: Tier
    high_score: int
    new_high_score: bool
    time_remaining: int
    foods_left: int
    next_tier: Optional[Tier] = None
    replay: bool = False

    @property
    def message(self) -> str:
        headline = "YOU WON!" if self.won else "GAME OVER!"
        return f"{headline}\nFinal Score: {self.final_score}"
