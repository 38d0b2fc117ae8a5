"""
Column type inference - classify a column as text, number or date
"""

from typing import Iterable, Tuple

from dateutil import parser as date_parser

from app.core.cells import AbsentCell, Cell, DateCell, NumberCell, TextCell, is_numeric_text
from app.core.table import SAMPLE_SIZE, ColumnType


def _looks_like_date(text: str) -> bool:
    """Check if a string parses as a calendar date"""
    if not text.strip():
        return False
    try:
        date_parser.parse(text)
        return True
    except (ValueError, OverflowError):
        return False


def classify_cell(cell: Cell) -> ColumnType:
    """Type implied by a single present cell"""
    if isinstance(cell, NumberCell):
        return ColumnType.NUMBER
    if isinstance(cell, DateCell):
        return ColumnType.DATE
    if isinstance(cell, TextCell):
        if is_numeric_text(cell.value):
            return ColumnType.NUMBER
        if _looks_like_date(cell.value):
            return ColumnType.DATE
    return ColumnType.TEXT


def infer_column(values: Iterable[Cell]) -> Tuple[ColumnType, Tuple[Cell, ...]]:
    """
    Infer a column's type and keep a small sample

    Only the first present value decides the type, so a column whose
    first entry is atypical is misclassified.

    Args:
        values: Cells of one column in row order

    Returns:
        (column type, first SAMPLE_SIZE present cells)
    """
    present = [cell for cell in values if not isinstance(cell, AbsentCell)]
    sample = tuple(present[:SAMPLE_SIZE])

    if not present:
        return ColumnType.TEXT, sample

    return classify_cell(present[0]), sample
