"""Org-mode timestamps: <2020-01-01 Wed 10:00 +1w -2d>, [2020-01-01], ranges."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
import re


class TimestampKind(str, Enum):
    active = "active"
    inactive = "inactive"
    active_range = "active_range"
    inactive_range = "inactive_range"
    diary = "diary"
    invalid = "invalid"


_BODY_RE = re.compile(
    r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"(?:\s+(?P<dayname>[^\s\d+\-.>\]]+))?"
    r"(?:\s+(?P<hour>\d{1,2}):(?P<minute>\d{2})"
    r"(?:-(?P<end_hour>\d{1,2}):(?P<end_minute>\d{2}))?)?"
    r"(?P<modifiers>(?:\s+\S+)*)\s*$"
)
_REPEATER_RE = re.compile(r"^(?:\.\+|\+\+|\+)\d+[hdwmy](?:/\d+[hdwmy])?$")
_DELAY_RE = re.compile(r"^--?\d+[hdwmy]$")
_RANGE_RE = re.compile(r"^([<\[][^<>\[\]]*[>\]])--([<\[][^<>\[\]]*[>\]])$")

_CLOSERS = {"<": ">", "[": "]"}


@dataclass(frozen=True)
class Timestamp:
    kind: TimestampKind
    raw: str
    start: datetime | None = None
    end: datetime | None = None
    repeater: str | None = None
    delay: str | None = None

    @property
    def is_plain(self) -> bool:
        """Active or inactive single point in time, without repeater or delay."""
        return (
            self.kind in (TimestampKind.active, TimestampKind.inactive)
            and self.start is not None
            and self.repeater is None
            and self.delay is None
        )


def _invalid(raw: str) -> Timestamp:
    return Timestamp(kind=TimestampKind.invalid, raw=raw)


def _parse_point(
    text: str,
) -> tuple[bool, datetime, datetime | None, str | None, str | None] | None:
    """Parse one bracketed timestamp into (active, start, end, repeater, delay)."""
    if len(text) < 2 or _CLOSERS.get(text[0]) != text[-1]:
        return None
    m = _BODY_RE.match(text[1:-1].strip())
    if m is None:
        return None
    try:
        date = datetime(int(m["year"]), int(m["month"]), int(m["day"]))
        start = date
        end = None
        if m["hour"] is not None:
            start = date.replace(hour=int(m["hour"]), minute=int(m["minute"]))
        if m["end_hour"] is not None:
            end = date.replace(hour=int(m["end_hour"]), minute=int(m["end_minute"]))
    except ValueError:
        return None

    repeater = delay = None
    for token in m["modifiers"].split():
        if _REPEATER_RE.match(token) and repeater is None:
            repeater = token
        elif _DELAY_RE.match(token) and delay is None:
            delay = token
        else:
            return None
    return text[0] == "<", start, end, repeater, delay


def parse_timestamp(text: str) -> Timestamp:
    """Parse org timestamp text; unrecognised input yields an invalid Timestamp."""
    raw = text.strip()
    if raw.startswith("<%%"):
        return Timestamp(kind=TimestampKind.diary, raw=raw)

    range_match = _RANGE_RE.match(raw)
    if range_match:
        first = _parse_point(range_match.group(1))
        second = _parse_point(range_match.group(2))
        if first is None or second is None or first[0] != second[0]:
            return _invalid(raw)
        kind = TimestampKind.active_range if first[0] else TimestampKind.inactive_range
        return Timestamp(
            kind=kind,
            raw=raw,
            start=first[1],
            end=second[1],
            repeater=first[3],
            delay=first[4],
        )

    point = _parse_point(raw)
    if point is None:
        return _invalid(raw)
    active, start, end, repeater, delay = point
    if end is not None:
        kind = TimestampKind.active_range if active else TimestampKind.inactive_range
    else:
        kind = TimestampKind.active if active else TimestampKind.inactive
    return Timestamp(
        kind=kind, raw=raw, start=start, end=end, repeater=repeater, delay=delay
    )
