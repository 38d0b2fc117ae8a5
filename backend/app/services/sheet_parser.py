"""
Sheet Parser - Decode uploaded workbooks and build normalized tables
"""

import logging
from pathlib import Path
from typing import Any, Iterable, List, Sequence, Union

import openpyxl
import xlrd

from app.core.cells import cell_at, from_raw
from app.core.exceptions import EmptyInputError, ParseFailure
from app.core.table import ColumnSchema, NormalizedTable
from app.services.column_inference import infer_column

logger = logging.getLogger(__name__)

# Container signatures: OOXML workbooks are ZIP archives, legacy .xls is OLE2
ZIP_MAGIC = b"PK\x03\x04"
OLE2_MAGIC = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"

RawGrid = Sequence[Sequence[Any]]


def parse_grid(raw_grid: RawGrid) -> NormalizedTable:
    """
    Build a normalized table from a raw 2-D grid

    Args:
        raw_grid: Header row followed by data rows; rows may be ragged

    Returns:
        NormalizedTable with one inferred column schema per header
    """
    if len(raw_grid) == 0:
        raise EmptyInputError()

    headers = tuple("" if value is None else str(value) for value in raw_grid[0])
    width = len(headers)

    rows = []
    for raw_row in raw_grid[1:]:
        tagged = [from_raw(value) for value in raw_row]
        rows.append(tuple(cell_at(tagged, i) for i in range(width)))

    columns = []
    for index, name in enumerate(headers):
        column_type, sample = infer_column(row[index] for row in rows)
        columns.append(ColumnSchema(name=name, type=column_type, sample_data=sample))

    return NormalizedTable(headers=headers, rows=tuple(rows), columns=tuple(columns))


def _trim_row(values: Sequence[Any]) -> List[Any]:
    """Drop trailing empty cells"""
    row = list(values)
    while row and (row[-1] is None or row[-1] == ""):
        row.pop()
    return row


def _trim_grid(rows: Iterable[List[Any]]) -> List[List[Any]]:
    """Drop blank rows before the header and after the last data row

    Blank rows between data rows are kept so row positions match the sheet.
    """
    grid = list(rows)
    start = 0
    while start < len(grid) and not grid[start]:
        start += 1
    end = len(grid)
    while end > start and not grid[end - 1]:
        end -= 1
    return grid[start:end]


def _read_xlsx(handle) -> List[List[Any]]:
    workbook = openpyxl.load_workbook(handle, read_only=True, data_only=True)
    try:
        sheet = workbook.worksheets[0]
        return _trim_grid(_trim_row(values) for values in sheet.iter_rows(values_only=True))
    finally:
        workbook.close()


def _xls_value(cell, datemode: int) -> Any:
    if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
        return None
    if cell.ctype == xlrd.XL_CELL_DATE:
        return xlrd.xldate.xldate_as_datetime(cell.value, datemode)
    if cell.ctype == xlrd.XL_CELL_BOOLEAN:
        return bool(cell.value)
    if cell.ctype == xlrd.XL_CELL_ERROR:
        return xlrd.error_text_from_code.get(cell.value, "#ERR")
    return cell.value


def _read_xls(handle) -> List[List[Any]]:
    book = xlrd.open_workbook(file_contents=handle.read(), on_demand=True)
    try:
        sheet = book.sheet_by_index(0)
        return _trim_grid(
            _trim_row(_xls_value(cell, book.datemode) for cell in sheet.row(index))
            for index in range(sheet.nrows)
        )
    finally:
        book.release_resources()


def read_workbook_grid(file_path: Union[str, Path]) -> List[List[Any]]:
    """
    Read the first worksheet of a workbook as a raw grid

    Args:
        file_path: Path to an .xlsx or .xls file

    Returns:
        List of rows of plain Python values
    """
    try:
        with open(file_path, "rb") as handle:
            signature = handle.read(len(OLE2_MAGIC))
            handle.seek(0)
            if signature.startswith(ZIP_MAGIC):
                return _read_xlsx(handle)
            if signature.startswith(OLE2_MAGIC):
                return _read_xls(handle)
            raise ParseFailure("unrecognized spreadsheet format")
    except ParseFailure:
        raise
    except Exception as e:
        logger.error(f"Error decoding workbook {file_path}: {e}")
        raise ParseFailure(str(e) or e.__class__.__name__) from e


def parse_workbook(file_path: Union[str, Path]) -> NormalizedTable:
    """Decode a workbook file and normalize its first worksheet"""
    grid = read_workbook_grid(file_path)
    table = parse_grid(grid)
    logger.info(
        f"Parsed {file_path}: {table.total_rows} rows x {table.total_columns} columns"
    )
    return table
