from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

import yaml

from .entities import Tier


class ConfigError(ValueError):
    pass


@dataclass
class WormTypeConfig:
    color: str = "black"
    speeds: Dict[str, float] = field(default_factory=lambda: {Tier.TIER1.value: 150.0, Tier.TIER2.value: 200.0})
    score: int = 10
    probability: float = 0.3

    def speed_for(self, tier: Tier | str) -> float:
        key = Tier.parse(tier).value
        try:
            return float(self.speeds[key])
        except KeyError as exc:
            raise ConfigError(f"No speed configured for {key}") from exc


@dataclass
class FoodTypeConfig:
    color: str = "blue"
    penalty: int = 2
    count_range: tuple[int, int] = (1, 6)


def _default_worm_types() -> Dict[str, WormTypeConfig]:
    return {
        "BLACK": WormTypeConfig(color="black", speeds={"tier1": 150.0, "tier2": 200.0}, score=10, probability=0.3),
        "RED": WormTypeConfig(color="red", speeds={"tier1": 75.0, "tier2": 100.0}, score=5, probability=0.3),
        "ORANGE": WormTypeConfig(color="orange", speeds={"tier1": 60.0, "tier2": 80.0}, score=3, probability=0.4),
    }


def _default_food_types() -> Dict[int, FoodTypeConfig]:
    return {
        1: FoodTypeConfig(color="blue", penalty=2, count_range=(1, 6)),
        2: FoodTypeConfig(color="red", penalty=4, count_range=(1, 4)),
    }


@dataclass
class LayoutConfig:
    obstacle_count_range: tuple[int, int] = (1, 4)
    # Food keeps out of the top band so worms spawn away from it.
    food_top_fraction: float = 0.2
    clearance_margin: float = 15.0
    max_attempts: int = 1000


@dataclass
class SteeringConfig:
    avoid_obstacles: bool = True
    yield_to_faster: bool = True
    fade_duration_ms: float = 400.0


@dataclass
class SpawnConfig:
    warmup_ms: float = 1000.0
    min_delay_ms: float = 1000.0
    max_delay_ms: float = 3000.0


@dataclass
class GameConfig:
    canvas_width: float = 600.0
    canvas_height: float = 400.0
    worm_radius: float = 10.0
    food_radius: float = 15.0
    obstacle_size: float = 30.0
    kill_radius: float = 30.0
    round_duration: int = 60
    frame_interval_ms: float = 1000.0 / 60.0
    countdown_interval_ms: float = 1000.0
    default_tier: str = Tier.TIER1.value
    auto_advance_tier: bool = False
    seed: Optional[int] = None
    worm_types: Dict[str, WormTypeConfig] = field(default_factory=_default_worm_types)
    food_types: Dict[int, FoodTypeConfig] = field(default_factory=_default_food_types)
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    steering: SteeringConfig = field(default_factory=SteeringConfig)
    spawn: SpawnConfig = field(default_factory=SpawnConfig)

    @staticmethod
    def from_yaml(path: Path) -> "GameConfig":
        data = yaml.safe_load(Path(path).read_text()) or {}
        return load_config(data)

    def validate(self) -> "GameConfig":
        if self.canvas_width <= 0 or self.canvas_height <= 0:
            raise ConfigError("Canvas extent must be positive")
        if not self.worm_types:
            raise ConfigError("At least one worm type is required")
        if not self.food_types:
            raise ConfigError("At least one food type is required")
        for name, worm_type in self.worm_types.items():
            if worm_type.probability <= 0:
                raise ConfigError(f"Worm type {name} needs a positive spawn probability")
            for tier in Tier:
                if tier.value not in worm_type.speeds:
                    raise ConfigError(f"Worm type {name} has no speed for {tier.value}")
        ranges = {f"food kind {kind}": food.count_range for kind, food in self.food_types.items()}
        ranges["obstacles"] = self.layout.obstacle_count_range
        for label, (low, high) in ranges.items():
            if low < 0 or high < low:
                raise ConfigError(f"Invalid count range for {label}: {(low, high)}")
        if self.spawn.min_delay_ms < 0 or self.spawn.max_delay_ms < self.spawn.min_delay_ms:
            raise ConfigError("Invalid spawn delay bounds")
        if self.steering.fade_duration_ms <= 0:
            raise ConfigError("Fade duration must be positive")
        if self.layout.max_attempts < 1:
            raise ConfigError("Layout needs at least one placement attempt")
        Tier.parse(self.default_tier)
        return self

    def worm_type(self, category: str) -> WormTypeConfig:
        return self.worm_types[category]

    def food_type(self, kind: int) -> FoodTypeConfig:
        return self.food_types[kind]


def _pair(value: tuple[int, int] | list[int] | None, default: tuple[int, int]) -> tuple[int, int]:
    if isinstance(value, (tuple, list)) and len(value) == 2:
        return (int(value[0]), int(value[1]))
    return default


def _build_config(raw: dict) -> GameConfig:
    defaults = GameConfig()

    worm_raw = raw.get("worm_types")
    if worm_raw is None:
        worm_types = defaults.worm_types
    else:
        worm_types = {}
        for name, values in worm_raw.items():
            values = dict(values or {})
            speeds = {Tier.parse(k).value: float(v) for k, v in (values.pop("speeds", None) or {}).items()}
            worm_types[str(name)] = WormTypeConfig(speeds=speeds, **values)

    food_raw = raw.get("food_types")
    if food_raw is None:
        food_types = defaults.food_types
    else:
        food_types = {}
        for kind, values in food_raw.items():
            values = dict(values or {})
            count_range = _pair(values.pop("count_range", None), FoodTypeConfig().count_range)
            food_types[int(kind)] = FoodTypeConfig(count_range=count_range, **values)

    game_values = {
        k: v for k, v in raw.items() if k not in {"worm_types", "food_types", "layout", "steering", "spawn"}
    }
    if "default_tier" in game_values:
        game_values["default_tier"] = Tier.parse(game_values["default_tier"]).value
    layout_raw = dict(raw.get("layout", {}) or {})
    layout = LayoutConfig(
        obstacle_count_range=_pair(layout_raw.pop("obstacle_count_range", None), LayoutConfig().obstacle_count_range),
        **layout_raw,
    )
    return GameConfig(
        worm_types=worm_types,
        food_types=food_types,
        layout=layout,
        steering=SteeringConfig(**(raw.get("steering", {}) or {})),
        spawn=SpawnConfig(**(raw.get("spawn", {}) or {})),
        **game_values,
    )


def load_config(raw: dict) -> GameConfig:
    try:
        config = _build_config(raw)
    except TypeError as exc:
        raise ConfigError(str(exc)) from exc
    return config.validate()
