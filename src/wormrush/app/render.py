from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Tuple

import pygame
from pygame.math import Vector2

from ..sim.core.config import GameConfig


@dataclass(frozen=True)
class DrawCall:
    kind: str
    args: Tuple[Any, ...]


class RecordingRenderer:
    """Keeps the draw calls of the latest frame; used headless and in tests."""

    def __init__(self) -> None:
        self.calls: List[DrawCall] = []
        self.frames = 0

    def clear(self) -> None:
        self.calls.clear()
        self.frames += 1

    def draw_obstacle(self, position: Vector2, size: float) -> None:
        self.calls.append(DrawCall("obstacle", (Vector2(position), size)))

    def draw_food(self, position: Vector2, kind: int) -> None:
        self.calls.append(DrawCall("food", (Vector2(position), kind)))

    def draw_agent(self, position: Vector2, opacity: float, category: str, facing: Optional[Vector2]) -> None:
        self.calls.append(
            DrawCall("agent", (Vector2(position), opacity, category, None if facing is None else Vector2(facing)))
        )

    def kinds(self) -> List[str]:
        return [call.kind for call in self.calls]


class NullRenderer:
    def clear(self) -> None:
        pass

    def draw_obstacle(self, position: Vector2, size: float) -> None:
        pass

    def draw_food(self, position: Vector2, kind: int) -> None:
        pass

    def draw_agent(self, position: Vector2, opacity: float, category: str, facing: Optional[Vector2]) -> None:
        pass


class PygameRenderer:
    def __init__(
        self,
        surface: pygame.Surface,
        config: GameConfig,
        background: str = "white",
        obstacle_color: str = "green",
    ) -> None:
        self.surface = surface
        self._config = config
        self._background = pygame.Color(background)
        self._obstacle_color = pygame.Color(obstacle_color)
        self._food_colors: Mapping[int, pygame.Color] = {
            kind: pygame.Color(food.color) for kind, food in config.food_types.items()
        }
        self._worm_colors: Mapping[str, pygame.Color] = {
            name: pygame.Color(worm.color) for name, worm in config.worm_types.items()
        }
        radius = int(round(config.worm_radius))
        self._sprite = pygame.Surface((radius * 4 + 2, radius * 4 + 2), pygame.SRCALPHA)

    def clear(self) -> None:
        self.surface.fill(self._background)

    def draw_obstacle(self, position: Vector2, size: float) -> None:
        rect = pygame.Rect(int(position.x), int(position.y), int(size), int(size))
        pygame.draw.rect(self.surface, self._obstacle_color, rect)

    def draw_food(self, position: Vector2, kind: int) -> None:
        center = (int(round(position.x)), int(round(position.y)))
        pygame.draw.circle(self.surface, self._food_colors[kind], center, int(round(self._config.food_radius)))

    def draw_agent(self, position: Vector2, opacity: float, category: str, facing: Optional[Vector2]) -> None:
        color = pygame.Color(self._worm_colors[category])
        color.a = max(0, min(255, int(round(opacity * 255))))
        radius = self._config.worm_radius
        sprite = self._sprite
        sprite.fill((0, 0, 0, 0))
        middle = Vector2(sprite.get_width() / 2.0, sprite.get_height() / 2.0)
        pygame.draw.circle(sprite, color, middle, radius)
        if facing is not None:
            pygame.draw.line(sprite, color, middle + facing * radius, middle + facing * radius * 2.0)
        self.surface.blit(sprite, (int(round(position.x - middle.x)), int(round(position.y - middle.y))))
