"""
Cell values

A spreadsheet cell is one of four variants: text, number, date, or absent.
Decoders produce plain Python values; ``from_raw`` tags them and ``to_raw``
turns a cell back into a plain JSON value for API responses. Stored sheet
records use ``to_record``/``from_record``, which keep dates tagged as
``{"$date": iso}`` so they reload as dates rather than text.
"""

import math
import re
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Optional, Union


@dataclass(frozen=True)
class TextCell:
    value: str


@dataclass(frozen=True)
class NumberCell:
    value: Union[int, float]


@dataclass(frozen=True)
class DateCell:
    value: datetime


class AbsentCell:
    """Marker for a missing cell (empty, null, or past the end of a row)"""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "ABSENT"

    def __bool__(self):
        return False


ABSENT = AbsentCell()

Cell = Union[TextCell, NumberCell, DateCell, AbsentCell]

DATE_TAG = "$date"

_NUMBER = r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?"
_LEADING_NUMBER = re.compile(r"\s*(" + _NUMBER + ")")
_WHOLE_NUMBER = re.compile(_NUMBER)


def from_raw(value: Any) -> Cell:
    """Tag a raw decoder or JSON value"""
    if value is None or isinstance(value, AbsentCell):
        return ABSENT
    if isinstance(value, (TextCell, NumberCell, DateCell)):
        return value
    # bool is an int subclass; spreadsheets show it as text
    if isinstance(value, bool):
        return TextCell("TRUE" if value else "FALSE")
    if isinstance(value, (int, float)):
        if isinstance(value, float) and value.is_integer():
            return NumberCell(int(value))
        return NumberCell(value)
    if isinstance(value, datetime):
        return DateCell(value)
    if isinstance(value, date):
        return DateCell(datetime(value.year, value.month, value.day))
    if isinstance(value, time):
        return TextCell(value.isoformat())
    return TextCell(str(value))


def to_raw(cell: Cell) -> Any:
    """Plain JSON value for a cell; dates become ISO strings"""
    if isinstance(cell, TextCell):
        return cell.value
    if isinstance(cell, NumberCell):
        if isinstance(cell.value, float) and not math.isfinite(cell.value):
            return None
        return cell.value
    if isinstance(cell, DateCell):
        return cell.value.isoformat()
    return None


def to_record(cell: Cell) -> Any:
    """Stored form of a cell; dates stay distinguishable from text"""
    if isinstance(cell, DateCell):
        return {DATE_TAG: cell.value.isoformat()}
    return to_raw(cell)


def from_record(value: Any) -> Cell:
    """Inverse of ``to_record``"""
    if isinstance(value, dict):
        if DATE_TAG not in value:
            raise ValueError(f"unknown stored cell {value!r}")
        return DateCell(datetime.fromisoformat(value[DATE_TAG]))
    return from_raw(value)


def cell_at(row, index: int) -> Cell:
    """Cell at ``index`` or ABSENT when the row is too short"""
    if index < len(row):
        return row[index]
    return ABSENT


def leading_number(text: str) -> Optional[float]:
    """
    Permissive numeric parse: the longest numeric prefix after leading
    whitespace, so "12.5kg" reads as 12.5. Returns None when there is none
    or the result is not finite.
    """
    match = _LEADING_NUMBER.match(text)
    if not match:
        return None
    try:
        number = float(match.group(1))
    except (OverflowError, ValueError):
        return None
    return number if math.isfinite(number) else None


def is_numeric_text(text: str) -> bool:
    """True when the whole (stripped) string is a decimal number"""
    return _WHOLE_NUMBER.fullmatch(text.strip()) is not None
