"""Clock adapters."""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from lexiflow.domain.ports import Clock


class SystemClock(Clock):
    """
    Wall-clock time.

    `today()` is the calendar date in the configured zone, or the machine's
    local zone when none is given.
    """

    def __init__(self, tz_name: str | None = None):
        self._tz = ZoneInfo(tz_name) if tz_name else None

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def today(self) -> date:
        if self._tz is None:
            return self.now().astimezone().date()
        return self.now().astimezone(self._tz).date()


class FixedClock(Clock):
    """A clock frozen at a given moment; `advance` moves it forward."""

    def __init__(self, moment: datetime, tz_name: str | None = None):
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        self._moment = moment
        self._tz = ZoneInfo(tz_name) if tz_name else timezone.utc

    def now(self) -> datetime:
        return self._moment

    def today(self) -> date:
        return self._moment.astimezone(self._tz).date()

    def advance(self, **delta: float) -> None:
        self._moment = self._moment + timedelta(**delta)
