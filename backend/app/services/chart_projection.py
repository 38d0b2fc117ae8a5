"""
Chart projection - Extract paired (x, y) series from a normalized table
"""

import logging
import math
from typing import Optional

from app.core.cells import AbsentCell, Cell, NumberCell, TextCell, leading_number
from app.core.exceptions import UnknownColumnError
from app.core.table import ChartConfiguration, ChartSeries, NormalizedTable

logger = logging.getLogger(__name__)


def coerce_number(cell: Cell) -> Optional[float]:
    """Numeric value of a y cell, or None when it cannot be charted"""
    if isinstance(cell, NumberCell):
        value = float(cell.value)
        return value if math.isfinite(value) else None
    if isinstance(cell, TextCell):
        return leading_number(cell.value)
    return None


def _column_index(table: NormalizedTable, axis: str) -> int:
    try:
        return table.headers.index(axis)
    except ValueError:
        raise UnknownColumnError(axis) from None


def project(table: NormalizedTable, x_axis: str, y_axis: str) -> ChartSeries:
    """
    Project two columns of a table into a chart series

    Rows with a missing x or y cell are dropped, as are rows whose y cell
    does not coerce to a number. Surviving rows keep their order.

    Args:
        table: Normalized table
        x_axis: Header of the label column
        y_axis: Header of the value column

    Returns:
        ChartSeries with labels, data and the echoed axis names
    """
    x_index = _column_index(table, x_axis)
    y_index = _column_index(table, y_axis)

    labels = []
    data = []
    for row in table.rows:
        x_cell = row[x_index]
        y_cell = row[y_index]
        if isinstance(x_cell, AbsentCell) or isinstance(y_cell, AbsentCell):
            continue
        y_value = coerce_number(y_cell)
        if y_value is None:
            continue
        labels.append(x_cell)
        data.append(y_value)

    return ChartSeries(
        x_axis_label=x_axis,
        y_axis_label=y_axis,
        labels=tuple(labels),
        data=tuple(data),
    )


def project_config(table: NormalizedTable, config: ChartConfiguration) -> ChartSeries:
    """Series for a stored chart configuration; empty when a column is gone"""
    try:
        return project(table, config.x_axis, config.y_axis)
    except UnknownColumnError as e:
        logger.warning(f"Chart '{config.title}' references unknown column {e.axis}")
        return ChartSeries(x_axis_label=config.x_axis, y_axis_label=config.y_axis)
