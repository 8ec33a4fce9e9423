"""Side-effecting host capabilities used by the alarm scheduler.

Each capability is optional. Missing audio hardware, a denied notification
permission or an unsupported stay-awake hint only switch that channel off.
"""
from __future__ import annotations

import threading
from typing import Any, Callable, Optional, Protocol

from core.logging_setup import get_logger
from core.settings import ALARMS

logger = get_logger("capabilities")

# (start s, end s, frequency Hz), each segment fading out linearly: high-low-high
TONE_PATTERN: tuple[tuple[float, float, float], ...] = (
    (0.0, 0.2, 880.0),
    (0.2, 0.4, 440.0),
    (0.4, 0.8, 880.0),
)


class SoundHandle:
    """Stops one playing alert. Stopping twice is harmless."""

    def __init__(self, stop_fn: Optional[Callable[[], None]] = None):
        self._stop_fn = stop_fn
        self._lock = threading.Lock()
        self.stopped = False

    def stop(self) -> None:
        with self._lock:
            if self.stopped:
                return
            self.stopped = True
            fn, self._stop_fn = self._stop_fn, None
        if fn is None:
            return
        try:
            fn()
        except Exception as exc:
            logger.warning("Stopping alert sound failed: %r", exc)


class AlertOutput(Protocol):
    def start(self) -> SoundHandle: ...

    def close(self) -> None: ...


class Notifier(Protocol):
    def permission_granted(self) -> bool: ...

    def notify(self, title: str, body: str) -> None: ...


class StayAwake(Protocol):
    def request(self) -> None: ...

    def release(self) -> None: ...


class NullAlertOutput:
    def start(self) -> SoundHandle:
        return SoundHandle()

    def close(self) -> None:
        pass


class NullNotifier:
    def permission_granted(self) -> bool:
        return False

    def notify(self, title: str, body: str) -> None:
        pass


class NullStayAwake:
    def request(self) -> None:
        pass

    def release(self) -> None:
        pass


class SwitchableAlertOutput:
    """Delegates to ``inner`` only while ``enabled()`` is true."""

    def __init__(self, inner: AlertOutput, enabled: Callable[[], bool]):
        self.inner = inner
        self._enabled = enabled

    def start(self) -> SoundHandle:
        if not self._enabled():
            return SoundHandle()
        return self.inner.start()

    def close(self) -> None:
        self.inner.close()


def build_tone_cycle(np: Any, *, sample_rate: int, period: float, volume: float):
    """One pattern cycle as float32 samples, silence-padded to ``period``."""
    total = int(sample_rate * period)
    buffer = np.zeros(total, dtype=np.float32)
    for start, end, freq in TONE_PATTERN:
        lo, hi = int(start * sample_rate), min(int(end * sample_rate), total)
        if hi <= lo:
            continue
        t = np.arange(hi - lo) / sample_rate
        square = np.sign(np.sin(2 * np.pi * freq * t))
        envelope = np.linspace(volume, 0.0, num=hi - lo)
        buffer[lo:hi] = (square * envelope).astype(np.float32)
    return buffer


class ToneAlertOutput:
    """Square-wave beeps looped through ``sounddevice`` until stopped.

    numpy/sounddevice are imported on first use; if that fails the output
    stays silent for the rest of the session.
    """

    def __init__(
        self,
        *,
        sample_rate: int = ALARMS.sample_rate,
        period: float = ALARMS.pattern_period_sec,
        volume: float = ALARMS.volume,
    ):
        self.sample_rate = sample_rate
        self.period = period
        self.volume = volume
        self._sd: Any = None
        self._cycle: Any = None
        self._unavailable = False

    def _ensure_backend(self) -> bool:
        if self._sd is not None:
            return True
        if self._unavailable:
            return False
        try:
            import numpy as np  # type: ignore
            import sounddevice as sd  # type: ignore
        except Exception as exc:
            self._unavailable = True
            logger.warning("Alert sound disabled, audio stack unavailable: %r", exc)
            return False
        self._cycle = build_tone_cycle(
            np, sample_rate=self.sample_rate, period=self.period, volume=self.volume
        )
        self._sd = sd
        return True

    def start(self) -> SoundHandle:
        if not self._ensure_backend():
            return SoundHandle()
        sd = self._sd
        try:
            sd.play(self._cycle, self.sample_rate, loop=True)
        except Exception as exc:
            logger.warning("Alert sound playback failed: %r", exc)
            return SoundHandle()
        return SoundHandle(sd.stop)

    def close(self) -> None:
        if self._sd is None:
            return
        try:
            self._sd.stop()
        except Exception as exc:
            logger.warning("Closing audio output failed: %r", exc)
        self._sd = None
        self._cycle = None


__all__ = [
    "AlertOutput",
    "Notifier",
    "NullAlertOutput",
    "NullNotifier",
    "NullStayAwake",
    "SoundHandle",
    "StayAwake",
    "SwitchableAlertOutput",
    "TONE_PATTERN",
    "ToneAlertOutput",
    "build_tone_cycle",
]
