from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pygame.math import Vector2


class Tier(str, Enum):
    TIER1 = "tier1"
    TIER2 = "tier2"

    @classmethod
    def parse(cls, value: "Tier | str | int") -> "Tier":
        if isinstance(value, Tier):
            return value
        text = str(value).strip().lower()
        if text in {"1", "2"}:
            text = f"tier{text}"
        try:
            return cls(text)
        except ValueError as exc:
            raise ValueError(f"Unknown tier: {value!r}") from exc

    def next(self) -> Optional["Tier"]:
        members = list(Tier)
        index = members.index(self)
        return members[index + 1] if index + 1 < len(members) else None


class WormState(str, Enum):
    SEEKING = "Seeking"
    FADING_OUT = "FadingOut"


@dataclass(slots=True)
class Worm:
    id: int
    position: Vector2
    category: str
    speed: float
    state: WormState = WormState.SEEKING
    opacity: float = 1.0
    target_food_id: Optional[int] = None
    last_update_ms: float = 0.0

    @property
    def fading(self) -> bool:
        return self.state == WormState.FADING_OUT

    def begin_fade(self) -> None:
        self.state = WormState.FADING_OUT
        self.opacity = 1.0


@dataclass(slots=True)
class Food:
    id: int
    position: Vector2
    kind: int


@dataclass(slots=True)
class Obstacle:
    id: int
    position: Vector2
    size: float

    @property
    def center(self) -> Vector2:
        half = self.size / 2.0
        return Vector2(self.position.x + half, self.position.y + half)
