"""Normalized table, chart configuration and chart series records"""
import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from app.core.cells import DATE_TAG, Cell, cell_at, from_record, to_raw, to_record
from app.core.exceptions import ParseFailure

SHEET_SCHEMA_VERSION = 2

SAMPLE_SIZE = 5


class ColumnType(str, enum.Enum):
    """Inferred semantic type of a column"""
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"


@dataclass(frozen=True)
class ColumnSchema:
    name: str
    type: ColumnType
    sample_data: Tuple[Cell, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type.value,
            "sampleData": [to_raw(cell) for cell in self.sample_data],
        }

    def to_record(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type.value,
            "sampleData": [to_record(cell) for cell in self.sample_data],
        }

    @classmethod
    def from_record(cls, payload: Dict[str, Any]) -> "ColumnSchema":
        return cls(
            name=payload["name"],
            type=ColumnType(payload["type"]),
            sample_data=tuple(from_record(v) for v in payload.get("sampleData") or []),
        )


@dataclass(frozen=True)
class NormalizedTable:
    """Parsed, schema-annotated spreadsheet. Immutable once built."""
    headers: Tuple[str, ...]
    rows: Tuple[Tuple[Cell, ...], ...]
    columns: Tuple[ColumnSchema, ...]

    @property
    def total_rows(self) -> int:
        return len(self.rows)

    @property
    def total_columns(self) -> int:
        return len(self.headers)

    def to_dict(self) -> Dict[str, Any]:
        """Versioned JSON record for storage"""
        return {
            "schemaVersion": SHEET_SCHEMA_VERSION,
            "headers": list(self.headers),
            "rows": [[to_record(cell) for cell in row] for row in self.rows],
            "columns": [column.to_record() for column in self.columns],
            "totalRows": self.total_rows,
            "totalColumns": self.total_columns,
        }

    def to_json(self) -> Dict[str, Any]:
        """Plain JSON shape for API responses; dates as ISO strings"""
        return {
            "headers": list(self.headers),
            "rows": [[to_raw(cell) for cell in row] for row in self.rows],
            "columns": [column.to_dict() for column in self.columns],
            "totalRows": self.total_rows,
            "totalColumns": self.total_columns,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "NormalizedTable":
        """Rebuild a table from a stored record, migrating older versions"""
        payload = migrate_sheet_data(payload)
        headers = tuple(payload["headers"])
        width = len(headers)
        try:
            rows = []
            for raw_row in payload["rows"]:
                cells = [from_record(value) for value in raw_row]
                rows.append(tuple(cell_at(cells, i) for i in range(width)))
            columns = tuple(ColumnSchema.from_record(column) for column in payload["columns"])
        except (TypeError, ValueError) as e:
            raise ParseFailure(f"invalid stored cell: {e}") from e
        if len(columns) != width:
            raise ParseFailure(
                f"stored table has {len(columns)} column schemas for {width} headers"
            )
        return cls(headers=headers, rows=tuple(rows), columns=columns)


def _upgrade_v0(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Legacy schemaless records: no version, possibly ragged rows"""
    headers = [("" if h is None else str(h)) for h in payload.get("headers") or []]
    width = len(headers)
    rows = []
    for row in payload.get("rows") or []:
        row = list(row or [])[:width]
        rows.append(row + [None] * (width - len(row)))
    columns = payload.get("columns") or [
        {"name": name, "type": ColumnType.TEXT.value, "sampleData": []}
        for name in headers
    ]
    return {
        "schemaVersion": 1,
        "headers": headers,
        "rows": rows,
        "columns": columns,
        "totalRows": len(rows),
        "totalColumns": width,
    }


def _retag_date(value: Any) -> Any:
    # Version 1 wrote date cells as bare datetime.isoformat() strings
    if not isinstance(value, str) or "T" not in value:
        return value
    try:
        datetime.fromisoformat(value)
    except ValueError:
        return value
    return {DATE_TAG: value}


def _upgrade_v1(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Tag ISO datetime strings in date columns so they reload as dates"""
    columns = payload["columns"]
    date_indexes = [
        i for i, column in enumerate(columns)
        if column.get("type") == ColumnType.DATE.value
    ]
    rows = []
    for row in payload["rows"]:
        row = list(row)
        for i in date_indexes:
            if i < len(row):
                row[i] = _retag_date(row[i])
        rows.append(row)
    columns = [
        dict(column, sampleData=[_retag_date(v) for v in column.get("sampleData") or []])
        if column.get("type") == ColumnType.DATE.value else column
        for column in columns
    ]
    return dict(payload, schemaVersion=2, rows=rows, columns=columns)


_MIGRATIONS = {
    0: _upgrade_v0,
    1: _upgrade_v1,
}


def migrate_sheet_data(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Bring a stored sheet record up to the current schema version

    Args:
        payload: Stored JSON record

    Returns:
        Record at SHEET_SCHEMA_VERSION
    """
    if not isinstance(payload, dict):
        raise ParseFailure("stored sheet data is not an object")

    version = payload.get("schemaVersion", 0)
    if version > SHEET_SCHEMA_VERSION:
        raise ParseFailure(f"unsupported sheet schema version {version}")

    while version < SHEET_SCHEMA_VERSION:
        payload = _MIGRATIONS[version](payload)
        version = payload["schemaVersion"]

    return payload


@dataclass(frozen=True)
class ChartConfiguration:
    chart_type: str
    x_axis: str
    y_axis: str
    title: str
    created_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chartType": self.chart_type,
            "xAxis": self.x_axis,
            "yAxis": self.y_axis,
            "title": self.title,
            "createdAt": self.created_at.isoformat(),
        }


def build_chart_config(
    chart_type: str,
    x_axis: str,
    y_axis: str,
    title: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> ChartConfiguration:
    """Chart configuration with the title defaulted to '<chartType> Chart'"""
    return ChartConfiguration(
        chart_type=chart_type,
        x_axis=x_axis,
        y_axis=y_axis,
        title=title or f"{chart_type} Chart",
        created_at=created_at or datetime.utcnow(),
    )


@dataclass(frozen=True)
class ChartSeries:
    x_axis_label: str
    y_axis_label: str
    labels: Tuple[Cell, ...] = field(default_factory=tuple)
    data: Tuple[float, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "labels": self.raw_labels(),
            "data": list(self.data),
            "xAxisLabel": self.x_axis_label,
            "yAxisLabel": self.y_axis_label,
        }

    def raw_labels(self) -> List[Any]:
        return [to_raw(cell) for cell in self.labels]
