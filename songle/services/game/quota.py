"""Daily quota gate.

Limits how many rounds can be started per calendar day. Once the quota is
used up a cooldown starts from the last round; when it elapses (or the
day changes) a new window opens. The gate is pure given a clock and a
store, which makes it testable without waiting on the wall clock.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

logger = logging.getLogger(__name__)

SONGS_PER_DAY = 5
COOLDOWN_HOURS = 12


def day_key(moment: datetime) -> str:
    return moment.date().isoformat()


def to_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


@dataclass
class DailyQuota:
    day: str
    songs_played: int = 0
    last_play_time: Optional[int] = None  # epoch ms, None means never

    @classmethod
    def fresh(cls, now: datetime) -> 'DailyQuota':
        return cls(day=day_key(now))


@dataclass
class Eligibility:
    can_play: bool
    cooldown_remaining: Optional[timedelta] = None

    def to_dict(self):
        remaining = self.cooldown_remaining
        return {
            'can_play': self.can_play,
            'cooldown_remaining_sec': int(remaining.total_seconds()) if remaining is not None else None,
        }


class DailyQuotaGate:
    def __init__(self, store, clock: Optional[Callable[[], datetime]] = None,
                 songs_per_day: int = SONGS_PER_DAY, cooldown_hours: float = COOLDOWN_HOURS, log=None):
        self.store = store
        self.clock = clock or datetime.now
        self.songs_per_day = songs_per_day
        self.cooldown = timedelta(hours=cooldown_hours)
        self.logger = log or logger
        self._last_check: Optional[Eligibility] = None
        self.quota = self.store.load() or DailyQuota.fresh(self.clock())

    def _reset(self, now: datetime, reason: str) -> None:
        self.logger.info(f"[quota-reset] reason={reason} old_day={self.quota.day} played={self.quota.songs_played}")
        self.quota = DailyQuota.fresh(now)
        self.store.save(self.quota)

    def check_eligibility(self, now: Optional[datetime] = None) -> Eligibility:
        now = now or self.clock()
        if self.quota.day != day_key(now):
            self._reset(now, 'new-day')
            result = Eligibility(can_play=True)
        elif self.quota.songs_played >= self.songs_per_day:
            last = self.quota.last_play_time
            elapsed = now - datetime.fromtimestamp(last / 1000, tz=now.tzinfo) if last is not None else self.cooldown
            if elapsed < self.cooldown:
                result = Eligibility(can_play=False, cooldown_remaining=self.cooldown - elapsed)
                self.logger.info(f"[quota-denied] played={self.quota.songs_played} remaining={result.cooldown_remaining}")
            else:
                self._reset(now, 'cooldown-elapsed')
                result = Eligibility(can_play=True)
        else:
            result = Eligibility(can_play=True)
        self._last_check = result
        return result

    def record_round_started(self, now: Optional[datetime] = None) -> bool:
        if self._last_check is None or not self._last_check.can_play:
            return False
        now = now or self.clock()
        self.quota.songs_played += 1
        self.quota.last_play_time = to_millis(now)
        self.store.save(self.quota)
        # Each start needs a fresh eligibility check
        self._last_check = None
        return True

    @property
    def songs_remaining(self) -> int:
        return max(0, self.songs_per_day - self.quota.songs_played)

    def to_dict(self):
        return {
            'day': self.quota.day,
            'songs_played': self.quota.songs_played,
            'songs_per_day': self.songs_per_day,
            'songs_remaining': self.songs_remaining,
            'last_play_time': self.quota.last_play_time,
        }
