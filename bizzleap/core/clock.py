"""Clock helpers. All stored timestamps are naive UTC, in plain ``DateTime`` columns."""

import datetime
from typing import Callable

Clock = Callable[[], datetime.datetime]


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)
