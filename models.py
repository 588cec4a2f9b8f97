from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from utils import is_same_date


@dataclass
class HistoryRecord:
    date: datetime
    worked: timedelta
    need_work: timedelta
    overwork: timedelta

    @classmethod
    def create(cls, worked: timedelta, need_work: timedelta, now: datetime | None = None) -> HistoryRecord:
        """Build a record for now, freezing overwork at creation time."""
        return cls(
            date=now or datetime.now().astimezone(),
            worked=worked,
            need_work=need_work,
            overwork=worked - need_work,
        )


@dataclass
class Store:
    need_work: timedelta = field(default_factory=timedelta)
    overwork: timedelta = field(default_factory=timedelta)
    history: list[HistoryRecord] = field(default_factory=list)

    def record_worked(self, worked: timedelta, now: datetime | None = None) -> HistoryRecord:
        """Record today's worked duration.

        A second submission on the same calendar date replaces the day's
        record instead of appending, and its old overwork is taken back out
        of the running total first.
        """
        record = HistoryRecord.create(worked, self.need_work, now)

        if self.history and is_same_date(self.history[-1].date, record.date):
            self.overwork -= self.history[-1].overwork
            self.history[-1] = record
        else:
            self.history.append(record)

        self.overwork += record.overwork
        return record

    def change_need_work(self, need_work: timedelta) -> None:
        """Set the quota used for today and later days."""
        self.need_work = need_work
