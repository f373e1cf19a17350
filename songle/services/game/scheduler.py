import threading
import time
from typing import Callable, Optional

from songle import socketio
from .playback import PLAYER_ROOM


def _scheduler_enabled(app) -> bool:
    return not app.config.get('TESTING') or bool(app.config.get('ENABLE_SCHEDULER_IN_TESTS'))


def _sleep(app, delay: float, label: str) -> None:
    # heartbeat sleep loop if enabled
    try:
        hb = int(app.config.get('TIMER_HEARTBEAT_SEC', 0))
    except (TypeError, ValueError):
        hb = 0
    if hb <= 0:
        time.sleep(delay)
        return
    slept = 0.0
    while slept < delay:
        step = min(hb, delay - slept)
        time.sleep(step)
        slept += step
        app.logger.info(f"[timer-heartbeat] {label} remaining={max(0, delay - slept)}s")


class ExposureTimer:
    """Fires ``on_expire(token)`` once an authorized preview has run its course.

    - No-ops in TESTING mode unless ENABLE_SCHEDULER_IN_TESTS is set
    - Only one exposure is armed at a time; ``cancel`` disarms it so a late
      firing is ignored
    """

    def __init__(self, app):
        self.app = app
        self._armed: Optional[int] = None
        self._lock = threading.Lock()

    @property
    def armed_token(self) -> Optional[int]:
        return self._armed

    def arm(self, token: int, seconds: float, on_expire: Callable[[int], None]) -> None:
        with self._lock:
            self._armed = token
        self.app.logger.info(f"[timer-set] exposure token={token} duration={seconds}s")
        if not _scheduler_enabled(self.app):
            return

        def _worker(expected: int, delay: float):
            _sleep(self.app, delay, f"exposure token={expected}")
            with self._lock:
                if self._armed != expected:
                    self.app.logger.info(f"[timer-abort] exposure token={expected} armed={self._armed}")
                    return
                self._armed = None
            self.app.logger.info(f"[timer-fire] exposure token={expected}")
            with self.app.app_context():
                on_expire(expected)

        if self.app.config.get('TESTING'):
            _worker(token, seconds)
        else:
            socketio.start_background_task(_worker, token, seconds)

    def cancel(self) -> None:
        with self._lock:
            if self._armed is not None:
                self.app.logger.info(f"[timer-cancel] exposure token={self._armed}")
            self._armed = None


class EligibilityPoller:
    """Re-check the daily quota every ELIGIBILITY_POLL_SEC while a cooldown is active.

    Pushes ``quota_update`` to the player each tick and stops once play is
    allowed again. A single poller runs per process.
    """

    def __init__(self, app, check: Callable[[], dict]):
        self.app = app
        self.check = check
        self._running = False
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._running

    @property
    def interval(self) -> int:
        return int(self.app.config.get('ELIGIBILITY_POLL_SEC', 60))

    def start(self) -> bool:
        if not _scheduler_enabled(self.app):
            return False
        with self._lock:
            if self._running:
                return False
            self._running = True
        self.app.logger.info(f"[poll-start] interval={self.interval}s")
        socketio.start_background_task(self._run)
        return True

    def tick(self) -> bool:
        """Run one check; returns True while the cooldown is still active."""
        with self.app.app_context():
            payload = self.check()
        socketio.emit('quota_update', payload, to=PLAYER_ROOM, namespace='/ws')
        still_waiting = not payload.get('can_play')
        self.app.logger.info(f"[poll] can_play={not still_waiting} remaining={payload.get('cooldown_remaining_sec')}")
        return still_waiting

    def _run(self) -> None:
        try:
            while True:
                _sleep(self.app, self.interval, 'eligibility poll')
                if not self.tick():
                    return
        finally:
            with self._lock:
                self._running = False
