"""Errors raised by the sheet ingestion and chart query pipeline"""


class SheetError(Exception):
    """Base class for structural spreadsheet errors"""


class EmptyInputError(SheetError):
    """The raw grid has no header row"""

    def __init__(self, message: str = "Empty spreadsheet"):
        super().__init__(message)


class ParseFailure(SheetError):
    """The workbook (or a stored table record) could not be decoded"""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Failed to parse Excel file: {reason}")


class UnknownColumnError(SheetError):
    """An axis name does not match any header"""

    def __init__(self, axis: str):
        self.axis = axis
        super().__init__(f"Unknown column: {axis}")
