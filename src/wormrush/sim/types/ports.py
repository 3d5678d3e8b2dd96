from __future__ import annotations

from typing import Dict, Optional, Protocol

from pygame.math import Vector2

from .outcome import RoundOutcome


class Renderer(Protocol):
    def clear(self) -> None: ...

    def draw_obstacle(self, position: Vector2, size: float) -> None: ...

    def draw_food(self, position: Vector2, kind: int) -> None: ...

    def draw_agent(self, position: Vector2, opacity: float, category: str, facing: Optional[Vector2]) -> None: ...


class HighScoreStore(Protocol):
    def load_high_scores(self) -> Dict[str, int]: ...

    def save_high_scores(self, scores: Dict[str, int]) -> None: ...


class Notifier(Protocol):
    def announce(self, outcome: RoundOutcome) -> bool: ...
