"""Persistence for the daily quota: one named record, load and save."""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from songle import db
from songle.models import QuotaRecord
from .quota import DailyQuota

logger = logging.getLogger(__name__)


class MemoryQuotaStore:
    def __init__(self, quota: Optional[DailyQuota] = None):
        self.quota = quota
        self.saves = 0

    def load(self) -> Optional[DailyQuota]:
        if self.quota is None:
            return None
        return DailyQuota(self.quota.day, self.quota.songs_played, self.quota.last_play_time)

    def save(self, quota: DailyQuota) -> None:
        self.quota = DailyQuota(quota.day, quota.songs_played, quota.last_play_time)
        self.saves += 1


class SQLAlchemyQuotaStore:
    """Quota row keyed by ``name``. Must be used inside an app context.

    Unreadable rows load as ``None`` so the gate starts fresh; failed
    writes are rolled back and logged.
    """

    def __init__(self, name: str = 'daily_quota', log=None):
        self.name = name
        self.logger = log or logger

    def load(self) -> Optional[DailyQuota]:
        try:
            row = db.session.get(QuotaRecord, self.name)
        except SQLAlchemyError as exc:
            db.session.rollback()
            self.logger.warning(f"[quota-load-failed] name={self.name} error={exc!r}")
            return None
        if row is None:
            return None
        try:
            return DailyQuota(
                day=str(row.day),
                songs_played=int(row.songs_played or 0),
                last_play_time=int(row.last_play_time) if row.last_play_time is not None else None,
            )
        except (TypeError, ValueError) as exc:
            self.logger.warning(f"[quota-load-failed] name={self.name} malformed row: {exc!r}")
            return None

    def save(self, quota: DailyQuota) -> None:
        try:
            row = db.session.get(QuotaRecord, self.name)
            if row is None:
                row = QuotaRecord(name=self.name)
            row.day = quota.day
            row.songs_played = quota.songs_played
            row.last_play_time = quota.last_play_time
            db.session.add(row)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            self.logger.error(f"[quota-save-failed] name={self.name} error={exc!r}")
