"""
Composite date/time controls.

One logical date/time field is rendered as independently named selects
(``year``, ``month``, ``day``, ``hour``, ``min``, ``sec``). Sub-control ids
are ``{parent_id}_{unit}`` and names ``{parent_name}[{unit}]``; the
write-back path parses these positionally, so the format is fixed.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date, datetime, time
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from admin_forms.core.errors import TemporalValueError

logger = logging.getLogger(__name__)

DATE_UNITS = ("year", "month", "day")
TIME_UNITS = ("hour", "min", "sec")

MONTHS: list[tuple[str, str]] = [
    ("January", "1"),
    ("February", "2"),
    ("March", "3"),
    ("April", "4"),
    ("May", "5"),
    ("June", "6"),
    ("July", "7"),
    ("August", "8"),
    ("September", "9"),
    ("October", "10"),
    ("November", "11"),
    ("December", "12"),
]


def _padded(start: int, stop: int) -> list[tuple[str, str]]:
    return [(f"{i:02d}", str(i)) for i in range(start, stop + 1)]


DAYS = _padded(1, 31)
HOURS = _padded(0, 23)
MINSEC = _padded(0, 59)


class TemporalKind(str, Enum):
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"


class SelectOption(BaseModel):
    label: str
    value: str
    selected: bool = False

    model_config = ConfigDict(frozen=True)


class SubControl(BaseModel):
    """One select of a composite control, with the separator that precedes it."""

    unit: str
    id: str
    name: str
    options: list[SelectOption] = Field(default_factory=list)
    separator: str | None = None  # css class of the preceding separator span

    model_config = ConfigDict(frozen=True)


# -- value decomposition ------------------------------------------------------


def date_value(value: Any) -> dict[str, Any]:
    """
    Normalise a stored date into ``{"year", "month", "day"}``.

    Accepts a mapping with string keys, a ``date``/``datetime``, a
    ``((y, m, d), time)`` pair, a bare ``(y, m, d)`` tuple, or None.

    Raises:
        TemporalValueError: any other shape.
    """
    if value is None:
        return {"year": None, "month": None, "day": None}
    if isinstance(value, Mapping):
        if all(unit in value for unit in DATE_UNITS):
            return {unit: value[unit] for unit in DATE_UNITS}
    elif isinstance(value, date):
        return {"year": value.year, "month": value.month, "day": value.day}
    elif isinstance(value, tuple):
        if len(value) == 2 and _is_triple(value[0]):
            year, month, day = value[0]
            return {"year": year, "month": month, "day": day}
        if _is_triple(value):
            year, month, day = value
            return {"year": year, "month": month, "day": day}
    raise TemporalValueError(f"unrecognized date {value!r}")


def time_value(value: Any) -> dict[str, Any]:
    """
    Normalise a stored time into ``{"hour", "min", "sec"}``.

    Accepts a mapping with string keys (``sec`` defaults to 0), a
    ``time``/``datetime``, a ``(date, (h, mi, s[, us]))`` pair, a bare
    ``(h, mi, s[, us])`` tuple, or None.

    Raises:
        TemporalValueError: any other shape.
    """
    if value is None:
        return {"hour": None, "min": None, "sec": None}
    if isinstance(value, Mapping):
        if "hour" in value and "min" in value:
            return {"hour": value["hour"], "min": value["min"], "sec": value.get("sec", 0)}
    elif isinstance(value, (datetime, time)):
        return {"hour": value.hour, "min": value.minute, "sec": value.second}
    elif isinstance(value, tuple):
        if len(value) == 2 and _is_clock(value[1]):
            hour, minute, sec = value[1][:3]
            return {"hour": hour, "min": minute, "sec": sec}
        if _is_clock(value):
            hour, minute, sec = value[:3]
            return {"hour": hour, "min": minute, "sec": sec}
    raise TemporalValueError(f"unrecognized time {value!r}")


def decompose(kind: TemporalKind, value: Any) -> dict[str, Any]:
    """Normalised components for every unit a control of ``kind`` uses."""
    parts: dict[str, Any] = {}
    if kind in (TemporalKind.DATE, TemporalKind.DATETIME):
        parts.update(date_value(value))
    if kind in (TemporalKind.TIME, TemporalKind.DATETIME):
        parts.update(time_value(value))
    return parts


def _is_triple(value: Any) -> bool:
    return isinstance(value, tuple) and len(value) == 3 and not any(
        isinstance(v, tuple) for v in value
    )


def _is_clock(value: Any) -> bool:
    return isinstance(value, tuple) and len(value) in (3, 4) and not any(
        isinstance(v, tuple) for v in value
    )


# -- sub-control construction -------------------------------------------------


def _normalize(component: Any) -> str:
    if component is None:
        return ""
    try:
        return str(int(component))
    except (TypeError, ValueError):
        return str(component)


def _choices(values: Any) -> list[tuple[str, str]]:
    """Coerce override values (ints, strings or (label, value) pairs) to pairs."""
    choices = []
    for item in values:
        if isinstance(item, (tuple, list)) and len(item) == 2:
            choices.append((str(item[0]), str(item[1])))
        else:
            choices.append((str(item), str(item)))
    return choices


def _default_choices(unit: str, today: date, year_span: int) -> list[tuple[str, str]]:
    if unit == "year":
        return [(str(y), str(y)) for y in range(today.year - year_span, today.year + year_span + 1)]
    if unit == "month":
        return MONTHS
    if unit == "day":
        return DAYS
    if unit == "hour":
        return HOURS
    return MINSEC


def wants_seconds(options: Mapping[str, Any]) -> bool:
    """Seconds render only when a ``sec`` sub-option is given and not false."""
    return "sec" in options and options["sec"] is not False and options["sec"] is not None


def units_for(kind: TemporalKind, options: Mapping[str, Any]) -> list[str]:
    units: list[str] = []
    if kind in (TemporalKind.DATE, TemporalKind.DATETIME):
        units.extend(DATE_UNITS)
    if kind in (TemporalKind.TIME, TemporalKind.DATETIME):
        units.extend(("hour", "min"))
        if wants_seconds(options):
            units.append("sec")
    return units


def _separator(previous: str | None, unit: str) -> str | None:
    if previous is None:
        return None
    if unit in DATE_UNITS:
        return "date-separator"
    if previous in DATE_UNITS:
        return "date-time-separator"
    return "time-separator"


def build_temporal_controls(
    kind: TemporalKind,
    value: Any,
    *,
    parent_id: str,
    parent_name: str,
    options: Mapping[str, Any] | None = None,
    today: date,
    year_span: int = 5,
) -> list[SubControl]:
    """
    Build the sub-controls of one composite date/time field.

    Args:
        kind: date, time or datetime
        value: Stored value in any shape accepted by date_value/time_value
        parent_id: Element id of the logical field
        parent_name: Element name of the logical field
        options: Per-unit sub-options, e.g. ``{"sec": {}, "year": {"options": [2020, 2021]}}``
        today: Date the default year range is centred on
        year_span: Years either side of ``today`` in the default range

    Raises:
        TemporalValueError: ``value`` has an unrecognized shape.
    """
    options = options or {}
    parts = decompose(kind, value)

    controls: list[SubControl] = []
    previous: str | None = None
    for unit in units_for(kind, options):
        unit_opts = options.get(unit) or {}
        if isinstance(unit_opts, Mapping) and "options" in unit_opts:
            choices = _choices(unit_opts["options"])
        else:
            choices = _default_choices(unit, today, year_span)

        current = _normalize(parts.get(unit))
        controls.append(
            SubControl(
                unit=unit,
                id=f"{parent_id}_{unit}",
                name=f"{parent_name}[{unit}]",
                options=[
                    SelectOption(label=label, value=val, selected=_normalize(val) == current)
                    for label, val in choices
                ],
                separator=_separator(previous, unit),
            )
        )
        previous = unit

    logger.debug("Built %d sub-controls for %s", len(controls), parent_id)
    return controls
