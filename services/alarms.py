"""Timed alerts for tasks with a ``time``.

On every tick the scheduler checks today's due, unfinished tasks against the
current ``HH:mm``. A task fires at most once per (task, day, minute): the
ticker runs every second, so without the fired-key set one minute would
re-trigger the alert sixty times.

States: ``idle`` (not armed), ``armed`` (ticking, no alert), ``firing`` (an
alert is on screen / playing). Dismissing returns to ``armed``.
"""
from __future__ import annotations

import queue
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Sequence, Set, Tuple

from core.logging_setup import get_logger
from core.settings import ALARMS
from helpers.datetime_utils import current_hm, today_iso
from models.task import Task
from services.capabilities import (
    AlertOutput,
    Notifier,
    NullAlertOutput,
    NullNotifier,
    NullStayAwake,
    SoundHandle,
    StayAwake,
)
from services.occurrence import is_due
from services.ticker import PrecisionTicker, Tick

IDLE = "idle"
ARMED = "armed"
FIRING = "firing"

FiredKey = Tuple[int, str, str]


@dataclass(frozen=True)
class ActiveAlert:
    task: Task
    day: str
    hm: str


def alarm_key(task: Task, day: str, hm: str) -> FiredKey:
    return (task.id, day, hm)


def due_for_alarm(tasks: Iterable[Task], day: str, hm: str) -> List[Task]:
    """Tasks due on ``day``, not yet done that day, timed exactly at ``hm``."""
    return [
        t
        for t in tasks
        if t.time == hm and day not in t.completions and is_due(t, day, today=day)
    ]


class AlarmScheduler:
    def __init__(
        self,
        *,
        output: Optional[AlertOutput] = None,
        notifier: Optional[Notifier] = None,
        stay_awake: Optional[StayAwake] = None,
        ticker: Optional[PrecisionTicker] = None,
        auto_stop_sec: float = ALARMS.auto_stop_sec,
        timer_factory: Callable[[float, Callable[[], None]], threading.Timer] = threading.Timer,
        on_fire: Optional[Callable[[ActiveAlert], None]] = None,
        on_dismiss: Optional[Callable[[], None]] = None,
        notification_title: str = ALARMS.notification_title,
    ):
        self.output = output or NullAlertOutput()
        self.notifier = notifier or NullNotifier()
        self.stay_awake = stay_awake or NullStayAwake()
        self.ticker = ticker
        self.auto_stop_sec = auto_stop_sec
        self.on_fire = on_fire
        self.on_dismiss = on_dismiss
        self.notification_title = notification_title
        self.logger = get_logger("alarms")

        self._timer_factory = timer_factory
        self._sound_lock = threading.Lock()
        self._sound: Optional[SoundHandle] = None
        self._auto_stop: Optional[threading.Timer] = None
        self._awake = False
        self._fired: Set[FiredKey] = set()
        self._armed = False
        self.active_alert: Optional[ActiveAlert] = None

    # ---------- state ----------
    @property
    def state(self) -> str:
        if self.active_alert is not None:
            return FIRING
        return ARMED if self._armed else IDLE

    @property
    def fired_keys(self) -> frozenset:
        return frozenset(self._fired)

    def arm(self) -> None:
        if self._armed:
            return
        self._armed = True
        if self.ticker is not None:
            self.ticker.start()
        self.logger.info("Alarm scheduler armed")

    def shutdown(self) -> None:
        """Release every resource. Safe to call more than once."""
        if self.ticker is not None:
            self.ticker.stop()
        self.dismiss()
        try:
            self.output.close()
        except Exception as exc:
            self.logger.warning("Closing alert output failed: %r", exc)
        if self._armed:
            self.logger.info("Alarm scheduler stopped")
        self._armed = False

    # ---------- due check ----------
    def check(self, tasks: Sequence[Task], now: Optional[datetime] = None) -> List[Task]:
        """Fire every task whose alarm minute is ``now``. Returns the fired tasks."""
        current = now or datetime.now()
        day = today_iso(current)
        hm = current_hm(current)
        self._prune(day)

        fired: List[Task] = []
        for task in due_for_alarm(tasks, day, hm):
            key = alarm_key(task, day, hm)
            if key in self._fired:
                continue
            self._fired.add(key)
            self.fire(task, day=day, hm=hm)
            fired.append(task)
        return fired

    def _prune(self, day: str) -> None:
        stale = {key for key in self._fired if key[1] != day}
        if stale:
            self._fired -= stale

    def pump(
        self,
        tasks_provider: Callable[[], Sequence[Task]],
        *,
        now_fn: Callable[[], datetime] = datetime.now,
        block: bool = False,
        timeout: Optional[float] = None,
    ) -> int:
        """Drain pending ticks, running one due-check per tick. Returns the count."""
        if self.ticker is None:
            return 0
        processed = 0
        while True:
            try:
                if block and processed == 0:
                    tick: Tick = self.ticker.ticks.get(timeout=timeout)
                else:
                    tick = self.ticker.ticks.get_nowait()
            except queue.Empty:
                return processed
            processed += 1
            self.logger.debug("Tick %s", tick.seq)
            try:
                self.check(tasks_provider(), now_fn())
            except Exception:
                self.logger.exception("Alarm check failed on tick %s", tick.seq)

    # ---------- firing ----------
    def fire(self, task: Task, *, day: Optional[str] = None, hm: Optional[str] = None) -> ActiveAlert:
        alert = ActiveAlert(task=task, day=day or today_iso(), hm=hm or (task.time or current_hm()))
        self.logger.info("Alarm for task %s at %s %s", task.id, alert.day, alert.hm)

        self._start_sound()
        self._request_stay_awake()
        self.active_alert = alert

        if self.on_fire is not None:
            try:
                self.on_fire(alert)
            except Exception:
                self.logger.exception("Alert display failed for task %s", task.id)
        self._notify(task)
        return alert

    def _start_sound(self) -> None:
        with self._sound_lock:
            previous, self._sound = self._sound, None
            timer, self._auto_stop = self._auto_stop, None
        if timer is not None:
            timer.cancel()
        if previous is not None:
            previous.stop()

        try:
            handle = self.output.start()
        except Exception as exc:
            self.logger.warning("Alert sound could not start: %r", exc)
            return

        auto_stop = self._timer_factory(self.auto_stop_sec, lambda: self._auto_stop_sound(handle))
        auto_stop.daemon = True
        with self._sound_lock:
            self._sound = handle
            self._auto_stop = auto_stop
        auto_stop.start()

    def _auto_stop_sound(self, handle: SoundHandle) -> None:
        with self._sound_lock:
            # a newer alarm owns the output now
            if self._sound is not handle:
                return
            self._sound = None
            self._auto_stop = None
        handle.stop()
        self.logger.info("Alert auto-dismissed after %.0f s", self.auto_stop_sec)
        self._clear_alert()

    def _request_stay_awake(self) -> None:
        if self._awake:
            return
        try:
            self.stay_awake.request()
            self._awake = True
        except Exception as exc:
            self.logger.warning("Stay-awake request failed: %r", exc)

    def _notify(self, task: Task) -> None:
        try:
            if self.notifier.permission_granted():
                self.notifier.notify(self.notification_title, task.text)
        except Exception as exc:
            self.logger.warning("System notification failed: %r", exc)

    # ---------- dismissal ----------
    def stop_sound(self) -> None:
        with self._sound_lock:
            handle, self._sound = self._sound, None
            timer, self._auto_stop = self._auto_stop, None
        if timer is not None:
            timer.cancel()
        if handle is not None:
            handle.stop()

    def dismiss(self) -> None:
        self.stop_sound()
        self._clear_alert()

    def _clear_alert(self) -> None:
        with self._sound_lock:
            awake, self._awake = self._awake, False
            alert, self.active_alert = self.active_alert, None
        if awake:
            try:
                self.stay_awake.release()
            except Exception as exc:
                self.logger.warning("Stay-awake release failed: %r", exc)
        if alert is not None and self.on_dismiss is not None:
            try:
                self.on_dismiss()
            except Exception:
                self.logger.exception("Alert hide failed")

    def complete_active(
        self,
        toggle: Callable[[int, str], object],
        lookup: Optional[Callable[[int], Optional[Task]]] = None,
    ) -> Optional[ActiveAlert]:
        """Mark the alerted task done for the day the alert was raised, then dismiss.

        ``lookup`` returns the current version of the task; a task already
        done for that day (or deleted meanwhile) is left untouched.
        """
        alert = self.active_alert
        if alert is not None:
            current = lookup(alert.task.id) if lookup is not None else alert.task
            if current is not None and alert.day not in current.completions:
                toggle(alert.task.id, alert.day)
        self.dismiss()
        return alert


__all__ = [
    "ARMED",
    "FIRING",
    "IDLE",
    "ActiveAlert",
    "AlarmScheduler",
    "alarm_key",
    "due_for_alarm",
]
