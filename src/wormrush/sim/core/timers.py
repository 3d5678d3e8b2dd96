"""Single-threaded virtual-time executor for the round's periodic tasks.

Every callback runs inside :meth:`TimerQueue.advance_to`, so the frame loop,
the countdown and the spawner never interleave. Drivers only decide how fast
virtual time moves.
"""
from __future__ import annotations

import heapq
from dataclasses import dataclass, field
from typing import Callable, List, Optional

TimerCallback = Callable[[float], None]


@dataclass(order=True)
class _Entry:
    due: float
    seq: int
    handle: "TimerHandle" = field(compare=False)


class TimerHandle:
    def __init__(self, name: str, callback: TimerCallback, interval: Optional[float]):
        self.name = name
        self.callback = callback
        self.interval = interval
        self.due = 0.0
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else f"due={self.due:.1f}"
        return f"TimerHandle({self.name!r}, {state})"


class TimerQueue:
    def __init__(self, now: float = 0.0):
        self._now = now
        self._heap: List[_Entry] = []
        self._seq = 0

    @property
    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: TimerCallback, name: str = "timer") -> TimerHandle:
        handle = TimerHandle(name, callback, None)
        self._push(handle, self._now + max(0.0, delay))
        return handle

    def call_every(self, interval: float, callback: TimerCallback, name: str = "interval") -> TimerHandle:
        if interval <= 0:
            raise ValueError("interval must be positive")
        handle = TimerHandle(name, callback, interval)
        self._push(handle, self._now + interval)
        return handle

    def next_due(self) -> Optional[float]:
        self._drop_cancelled()
        return self._heap[0].due if self._heap else None

    def pending(self) -> List[TimerHandle]:
        return [entry.handle for entry in sorted(self._heap) if not entry.handle.cancelled]

    def clear(self) -> None:
        for entry in self._heap:
            entry.handle.cancel()
        self._heap.clear()

    def advance_to(self, now: float) -> int:
        """Run every callback due at or before ``now`` in due order; returns how many ran."""
        ran = 0
        while True:
            self._drop_cancelled()
            if not self._heap or self._heap[0].due > now:
                break
            entry = heapq.heappop(self._heap)
            handle = entry.handle
            self._now = max(self._now, entry.due)
            if handle.interval is not None:
                self._push(handle, entry.due + handle.interval)
            handle.callback(entry.due)
            ran += 1
        self._now = max(self._now, now)
        return ran

    def advance_by(self, delta: float) -> int:
        return self.advance_to(self._now + delta)

    def _push(self, handle: TimerHandle, due: float) -> None:
        handle.due = due
        heapq.heappush(self._heap, _Entry(due, self._seq, handle))
        self._seq += 1

    def _drop_cancelled(self) -> None:
        while self._heap and self._heap[0].handle.cancelled:
            heapq.heappop(self._heap)
