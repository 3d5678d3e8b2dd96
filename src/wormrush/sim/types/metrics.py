from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class FrameMetrics:
    frame: int
    time_ms: float
    elapsed_ms: float
    worms: int
    fading: int
    foods: int
    score: int
    time_remaining: int
    spawned: int
    killed: int
    eaten: int
    removed: int
