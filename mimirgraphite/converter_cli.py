"""Argument helpers for the Whisper-to-blocks converter command."""

from __future__ import annotations

import csv
import datetime as dt
import io
from typing import List, Tuple, Union

DateLike = Union[str, dt.date]


def parse_custom_labels(arg: str) -> Tuple[Tuple[str, str], ...]:
    """Turn a comma separated ``name,value,...`` list into labels sorted by name."""
    strings: List[str] = []
    width = None
    try:
        for record in csv.reader(io.StringIO(arg), strict=True):
            if not record:
                continue
            if width is None:
                width = len(record)
            elif len(record) != width:
                raise ValueError("wrong number of fields")
            strings.extend(record)
    except csv.Error as exc:
        raise ValueError(f"invalid custom labels: {exc}") from exc
    if len(strings) % 2:
        raise ValueError("invalid number of strings")
    pairs = zip(strings[::2], strings[1::2])
    return tuple(sorted(pairs, key=lambda pair: pair[0]))


def _as_date(value: DateLike, flag: str) -> dt.date:
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    try:
        return dt.date.fromisoformat(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"error parsing --{flag}: {exc}") from exc


def date_range(start: DateLike, end: DateLike) -> List[dt.date]:
    """Return every day from ``start`` to ``end`` inclusive."""
    first = _as_date(start, "start-date")
    last = _as_date(end, "end-date")
    if first > last:
        raise ValueError("end date must be same or after start date")
    return [first + dt.timedelta(days=n) for n in range((last - first).days + 1)]