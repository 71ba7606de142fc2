"""An enhanced datetime wrapper with commonly used helper methods.

Such as day_start(), day_after(), day_ago(), date_format() and more.
Every helper returns a new TimeX; the receiver is never modified.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Optional, Union
from zoneinfo import ZoneInfo

ONE_MIN_SEC = 60
ONE_HOUR_SEC = 3600
ONE_DAY_SEC = 86400
ONE_WEEK_SEC = 7 * 86400

ONE_MIN = timedelta(minutes=1)
ONE_HOUR = timedelta(hours=1)
ONE_DAY = timedelta(days=1)
ONE_WEEK = timedelta(weeks=1)

DEFAULT_LAYOUT = "%Y-%m-%d %H:%M:%S"

# PHP-style date template characters => strftime directives.
_TEMPLATE_CHARS = {
    "Y": "%Y",
    "y": "%y",
    "m": "%m",
    "M": "%b",
    "F": "%B",
    "d": "%d",
    "D": "%a",
    "l": "%A",
    "z": "%j",
    "H": "%H",
    "h": "%I",
    "i": "%M",
    "s": "%S",
    "A": "%p",
    "O": "%z",
    "T": "%Z",
}

_PARSE_LAYOUTS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d",
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d",
    "%Y%m%d%H%M%S",
    "%Y%m%d",
    "%d/%m/%Y",
)

# (lower bound in seconds, divisor or None, message)
_AGO_STEPS = (
    (0, None, "< 1 sec"),
    (1, None, "1 sec"),
    (2, 1, "secs"),
    (60, None, "1 min"),
    (120, 60, "mins"),
    (3600, None, "1 hr"),
    (7200, 3600, "hrs"),
    (86400, None, "1 day"),
    (172800, 86400, "days"),
)


class LocalZone:
    """Holds the zone used by local(); None means the system local zone."""

    def __init__(self) -> None:
        self.tz: Optional[tzinfo] = None

    def set(self, tz: Optional[tzinfo]) -> None:
        self.tz = tz

    def now(self) -> datetime:
        if self.tz is None:
            return datetime.now().astimezone()
        return datetime.now(self.tz)


local_zone = LocalZone()

TimeLike = Union[datetime, "TimeX"]


def _as_datetime(value: TimeLike) -> datetime:
    return value.time if isinstance(value, TimeX) else value


def _aligned(left: datetime, right: TimeLike) -> tuple[datetime, datetime]:
    """Return both operands, with a naive one read as local time if the other is aware."""
    other = _as_datetime(right)
    left_aware = left.tzinfo is not None
    if left_aware != (other.tzinfo is not None):
        if left_aware:
            other = other.astimezone()
        else:
            left = left.astimezone()
    return left, other


@dataclass(frozen=True)
class TimeX:
    """A datetime plus the default layout used to render it."""

    time: datetime
    layout: str = DEFAULT_LAYOUT

    def __str__(self) -> str:
        return self.datetime_str()

    @property
    def unix(self) -> int:
        return int(self.time.timestamp())

    def format(self, layout: Optional[str] = None) -> str:
        """Format with a strftime layout, defaulting to the value's own layout."""
        layout = layout or self.layout or DEFAULT_LAYOUT
        return self.time.strftime(layout)

    def datetime_str(self) -> str:
        return self.format(self.layout)

    def date_format(self, template: str) -> str:
        """Format with a PHP-style template such as "Y-m-d H:i:s". See to_layout()."""
        return self.format(to_layout(template))

    def tpl_format(self, template: str) -> str:
        return self.date_format(template)

    def yesterday(self) -> "TimeX":
        return self.add_seconds(-ONE_DAY_SEC)

    def tomorrow(self) -> "TimeX":
        return self.add_seconds(ONE_DAY_SEC)

    def day_ago(self, day: int) -> "TimeX":
        return self.add_seconds(-day * ONE_DAY_SEC)

    def add_day(self, day: int) -> "TimeX":
        return self.add_seconds(day * ONE_DAY_SEC)

    def day_after(self, day: int) -> "TimeX":
        """Alias of add_day()."""
        return self.add_day(day)

    def add_hour(self, hours: int) -> "TimeX":
        return self.add_seconds(hours * ONE_HOUR_SEC)

    def add_minutes(self, minutes: int) -> "TimeX":
        return self.add_seconds(minutes * ONE_MIN_SEC)

    def add_seconds(self, seconds: int) -> "TimeX":
        delta = timedelta(seconds=seconds)
        if self.time.tzinfo is None:
            moved = self.time + delta
        else:
            # Elapsed-time arithmetic, so DST transitions shift the wall clock.
            moved = (self.time.astimezone(timezone.utc) + delta).astimezone(self.time.tzinfo)
        return TimeX(moved)

    def diff(self, other: TimeLike) -> timedelta:
        """self - other."""
        left, right = _aligned(self.time, other)
        return left - right

    def diff_sec(self, other: TimeLike) -> int:
        return int(self.diff(other).total_seconds())

    def sub_unix(self, other: TimeLike) -> int:
        return self.diff_sec(other)

    def hour_start(self) -> "TimeX":
        return new(self.time.replace(minute=0, second=0, microsecond=0))

    def hour_end(self) -> "TimeX":
        return new(self.time.replace(minute=59, second=59, microsecond=999999))

    def day_start(self) -> "TimeX":
        return new(self.time.replace(hour=0, minute=0, second=0, microsecond=0))

    def day_end(self) -> "TimeX":
        return new(self.time.replace(hour=23, minute=59, second=59, microsecond=999999))

    def change_hms(self, hour: int, minute: int, second: int) -> "TimeX":
        """Same date with the given hour, minute and second."""
        return new(self.time.replace(hour=hour, minute=minute, second=second, microsecond=0))

    def is_before(self, other: TimeLike) -> bool:
        left, right = _aligned(self.time, other)
        return left < right

    def is_after(self, other: TimeLike) -> bool:
        left, right = _aligned(self.time, other)
        return left > right

    def how_long_ago(self, before: TimeLike) -> str:
        """Describe the gap since ``before``, e.g. "3 mins"."""
        return how_long_ago(self.unix - int(_as_datetime(before).timestamp()))

    def with_layout(self, layout: str) -> "TimeX":
        return replace(self, layout=layout)


def now() -> TimeX:
    return TimeX(datetime.now().astimezone())


def new(dt: datetime) -> TimeX:
    return TimeX(dt)


def local() -> TimeX:
    """Now, in the zone set by set_local_by_name() or the system zone."""
    return TimeX(local_zone.now())


def from_unix(sec: int) -> TimeX:
    return TimeX(datetime.fromtimestamp(sec).astimezone())


def from_string(value: str, *layouts: str) -> TimeX:
    """Parse ``value`` with the given strftime layouts, or common ones if none given.

    Raises ValueError when no layout matches.
    """
    value = value.strip()
    if not value:
        raise ValueError("empty datetime string")

    candidates = layouts or _PARSE_LAYOUTS
    for layout in candidates:
        try:
            return TimeX(datetime.strptime(value, layout))
        except ValueError:
            continue

    if not layouts:
        try:
            return TimeX(datetime.fromisoformat(value))
        except ValueError:
            pass
    raise ValueError(f"cannot parse datetime string {value!r}")


def local_by_name(tz_name: str) -> TimeX:
    """Now, in the named zone. Raises ZoneInfoNotFoundError for unknown names."""
    return TimeX(datetime.now(ZoneInfo(tz_name)))


def set_local_by_name(tz_name: str) -> None:
    """Set the zone used by local(), e.g. "UTC", "PRC"."""
    local_zone.set(ZoneInfo(tz_name))


def to_layout(template: str) -> str:
    """Convert a PHP-style date template ("Y-m-d H:i:s") to a strftime layout.

    Templates that already contain strftime directives are returned unchanged.
    """
    if not template:
        return DEFAULT_LAYOUT
    if "%" in template:
        return template

    return "".join(_TEMPLATE_CHARS.get(char, char) for char in template)


def how_long_ago(seconds: int) -> str:
    """Format a number of seconds as a rough duration, e.g. "2 hrs"."""
    for index, (bound, divisor, message) in enumerate(_AGO_STEPS):
        if seconds < bound:
            continue
        is_last = index + 1 == len(_AGO_STEPS)
        if is_last or seconds < _AGO_STEPS[index + 1][0]:
            if divisor is None:
                return message
            return f"{seconds // divisor} {message}"
    return "unknown"


__all__ = [
    "DEFAULT_LAYOUT",
    "ONE_DAY",
    "ONE_DAY_SEC",
    "ONE_HOUR",
    "ONE_HOUR_SEC",
    "ONE_MIN",
    "ONE_MIN_SEC",
    "ONE_WEEK",
    "ONE_WEEK_SEC",
    "LocalZone",
    "TimeX",
    "from_string",
    "from_unix",
    "how_long_ago",
    "local",
    "local_by_name",
    "local_zone",
    "new",
    "now",
    "set_local_by_name",
    "to_layout",
]
