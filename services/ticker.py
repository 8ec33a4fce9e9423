"""Drift-corrected one-second tick source.

A plain ``sleep(1)`` loop slowly walks off the second grid and, after the
process was suspended, has no notion of how late it is. ``DriftCorrector``
aims every tick at ``start + i * interval`` and shortens the next wait by the
observed lateness. Past one full interval of lateness it resynchronises to
"now" instead of emitting a burst of catch-up ticks.

``PrecisionTicker`` runs the corrector on a daemon thread and hands ``Tick``
messages to the consumer through a queue, so the consumer processes them on
its own thread, strictly in order.
"""
from __future__ import annotations

import queue
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from core.logging_setup import get_logger

logger = get_logger("ticker")


def _now_ms() -> float:
    return time.time() * 1000.0


@dataclass(frozen=True)
class Tick:
    seq: int
    at_ms: float


class DriftCorrector:
    def __init__(self, interval_ms: float = 1000.0):
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        self.interval_ms = float(interval_ms)
        self.expected_ms = 0.0
        self.resyncs = 0

    def start(self, now_ms: float) -> None:
        self.expected_ms = now_ms + self.interval_ms

    def step(self, now_ms: float) -> float:
        """Account for a tick observed at ``now_ms``; return the next delay."""
        drift = now_ms - self.expected_ms
        if drift > self.interval_ms:
            logger.debug("Tick %.0f ms late, resynchronising", drift)
            self.expected_ms = now_ms
            self.resyncs += 1
            drift = 0.0
        self.expected_ms += self.interval_ms
        return max(0.0, self.interval_ms - drift)


class PrecisionTicker:
    def __init__(
        self,
        interval_ms: float = 1000.0,
        *,
        clock: Callable[[], float] = _now_ms,
        channel: Optional["queue.Queue[Tick]"] = None,
    ):
        self.corrector = DriftCorrector(interval_ms)
        self.ticks: "queue.Queue[Tick]" = channel if channel is not None else queue.Queue()
        self._clock = clock
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._seq = 0

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="precision-ticker", daemon=True)
        self._thread.start()
        logger.info("Ticker started (%.0f ms)", self.corrector.interval_ms)

    def stop(self, timeout: float = 2.0) -> None:
        self._stop.set()
        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)
            logger.info("Ticker stopped")

    def _run(self) -> None:
        self.corrector.start(self._clock())
        delay = self.corrector.interval_ms
        while not self._stop.wait(delay / 1000.0):
            now = self._clock()
            delay = self.corrector.step(now)
            self._seq += 1
            self.ticks.put(Tick(seq=self._seq, at_ms=now))

    def __enter__(self) -> "PrecisionTicker":
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.stop()


__all__ = ["DriftCorrector", "PrecisionTicker", "Tick"]
