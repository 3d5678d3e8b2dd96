from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from pygame.math import Vector2

from .entities import Food, Obstacle, Tier, Worm


@dataclass
class RoundState:
    tier: Tier = Tier.TIER1
    score: int = 0
    time_remaining: int = 60
    paused: bool = False
    running: bool = False
    ended: bool = False
    worms: List[Worm] = field(default_factory=list)
    # Insertion order is the nearest-food tie-break order.
    foods: Dict[int, Food] = field(default_factory=dict)
    obstacles: List[Obstacle] = field(default_factory=list)
    frame: int = 0
    spawned: int = 0
    killed: int = 0
    eaten: int = 0
    _next_id: int = 0

    def next_id(self) -> int:
        value = self._next_id
        self._next_id += 1
        return value

    def add_food(self, position: Vector2, kind: int) -> Food:
        food = Food(id=self.next_id(), position=Vector2(position), kind=kind)
        self.foods[food.id] = food
        return food

    def add_obstacle(self, position: Vector2, size: float) -> Obstacle:
        obstacle = Obstacle(id=self.next_id(), position=Vector2(position), size=size)
        self.obstacles.append(obstacle)
        return obstacle

    def add_worm(self, position: Vector2, category: str, speed: float, now_ms: float = 0.0) -> Worm:
        worm = Worm(id=self.next_id(), position=Vector2(position), category=category, speed=speed, last_update_ms=now_ms)
        self.worms.append(worm)
        return worm

    @property
    def active(self) -> bool:
        return self.running and not self.paused and not self.ended
